# geofilt/filters/design.py

"""
Filters from analytic design formulas.

- ``butterworth``: maximally flat IIR filter (scipy.signal.butter)
- ``notch``: second order IIR notch (scipy.signal.iirnotch)
- ``graceLowpass``: the CRN low-pass used for GRACE K-band ranging,
  a boxcar convolved with itself several times
- ``correlation``: first order Gauss-Markov colouring filter
"""

import logging
from typing import Any, Mapping, Optional, Sequence, Union

import numpy as np
from scipy import signal

from geofilt.core.exceptions import ParameterError
from geofilt.core.types import BandType, PadType, Vector
from geofilt.core.validation import validate_integer, validate_positive, validate_range
from geofilt.filters.arma import ARMAFilter
from geofilt.filters.base import FilterOptions
from geofilt.filters.registry import register_filter

logger = logging.getLogger("geofilt.filters.design")

_BAND_TYPES = ("lowpass", "highpass", "bandpass", "bandstop")


@register_filter("butterworth")
class Butterworth(ARMAFilter):
    """Butterworth filter.

    Args:
        order: Filter order
        frequency: Cutoff frequency normalized to the Nyquist frequency, a
            pair ``[low, high]`` for band filters
        band_type: One of ``lowpass``, ``highpass``, ``bandpass``, ``bandstop``
        pad_type: Boundary extension policy
        in_frequency_domain: Evaluate in the frequency domain
        backward: Apply against reversed time order

    Raises:
        ParameterError: If the cutoff is outside (0, 1) or does not match the
            band type
    """

    def __init__(self, order: int,
                 frequency: Union[float, Sequence[float]],
                 band_type: BandType = "lowpass",
                 pad_type: Optional[Union[PadType, str]] = None,
                 in_frequency_domain: bool = False,
                 backward: bool = False) -> None:
        order = validate_integer(order, "order", minimum=1)
        if band_type not in _BAND_TYPES:
            raise ParameterError(
                f"Unknown Butterworth band type: {band_type!r}",
                param_name="type",
                param_value=band_type,
                constraint=f"One of {list(_BAND_TYPES)}"
            )

        cutoff = np.atleast_1d(np.asarray(frequency, dtype=np.float64))
        expected = 2 if band_type in ("bandpass", "bandstop") else 1
        if cutoff.size != expected:
            raise ParameterError(
                f"Butterworth {band_type} needs {expected} cutoff frequencies, got {cutoff.size}",
                param_name="frequency",
                param_value=frequency,
                constraint=f"{expected} value(s)"
            )
        for value in cutoff:
            validate_range(float(value), "frequency", 0.0, 1.0)
        if expected == 2 and not cutoff[0] < cutoff[1]:
            raise ParameterError(
                f"Band edges must be increasing, got {cutoff.tolist()}",
                param_name="frequency",
                param_value=frequency,
                constraint="low < high"
            )

        self.order = order
        self.frequency = cutoff if expected == 2 else float(cutoff[0])
        self.band_type = band_type

        bn, an = signal.butter(order, self.frequency, btype=band_type, output="ba")
        super().__init__(
            bn=bn,
            an=an,
            bn_start_index=0,
            backward=backward,
            in_frequency_domain=in_frequency_domain,
            pad_type=pad_type
        )

    @classmethod
    def from_config(cls, params: Optional[Mapping[str, Any]]) -> "Butterworth":
        options = FilterOptions(cls.kind, params)
        instance = cls(
            options.get("order"),
            options.get("frequency"),
            band_type=options.get("type", "lowpass"),
            **cls.arma_options(options)
        )
        options.finish()
        return instance


@register_filter("notch")
class Notch(ARMAFilter):
    """Second order IIR notch removing a narrow band around one frequency.

    Args:
        notch_frequency: Centre frequency of the notch [Hz]
        bandwidth: Width of the notch at -3 dB [Hz]
        sampling: Sampling interval [s]
        pad_type: Boundary extension policy
        in_frequency_domain: Evaluate in the frequency domain
        backward: Apply against reversed time order
    """

    def __init__(self, notch_frequency: float, bandwidth: float,
                 sampling: float = 1.0,
                 pad_type: Optional[Union[PadType, str]] = None,
                 in_frequency_domain: bool = False,
                 backward: bool = False) -> None:
        sampling = validate_positive(float(sampling), "sampling")
        nyquist = 0.5 / sampling
        notch_frequency = validate_range(float(notch_frequency), "notchFrequency", 0.0, nyquist)
        bandwidth = validate_positive(float(bandwidth), "bandWidth")

        self.notch_frequency = notch_frequency
        self.bandwidth = bandwidth
        self.sampling = sampling

        bn, an = signal.iirnotch(notch_frequency, notch_frequency / bandwidth, fs=1.0 / sampling)
        super().__init__(
            bn=bn,
            an=an,
            bn_start_index=0,
            backward=backward,
            in_frequency_domain=in_frequency_domain,
            pad_type=pad_type
        )

    @classmethod
    def from_config(cls, params: Optional[Mapping[str, Any]]) -> "Notch":
        options = FilterOptions(cls.kind, params)
        instance = cls(
            options.get("notchFrequency"),
            options.get("bandWidth"),
            sampling=options.get("sampling", 1.0),
            **cls.arma_options(options)
        )
        options.finish()
        return instance


def crn_coefficients(raw_data_rate: float, bandwidth: float, convolution_number: int) -> Vector:
    """Coefficients of the CRN (convolution of rectangles) low-pass.

    Args:
        raw_data_rate: Sampling rate of the filtered data [Hz]
        bandwidth: Low-pass bandwidth [Hz], sets the boxcar length
            ``round(raw_data_rate / bandwidth)``
        convolution_number: Number of boxcars convolved

    Returns:
        Vector: Kernel with unit sum
    """
    boxcar_length = max(int(round(raw_data_rate / bandwidth)), 1)
    boxcar = np.ones(boxcar_length)
    kernel = boxcar
    for _ in range(convolution_number - 1):
        kernel = np.convolve(kernel, boxcar)
    return kernel / kernel.sum()


@register_filter("graceLowpass")
class GraceLowpass(ARMAFilter):
    """Centred CRN low-pass filter of the GRACE K-band ranging processing.

    Args:
        raw_data_rate: Sampling rate of the data [Hz]
        bandwidth: Low-pass bandwidth [Hz]
        convolution_number: Number of self-convolved boxcars
        pad_type: Boundary extension policy
        in_frequency_domain: Evaluate in the frequency domain
    """

    def __init__(self, raw_data_rate: float = 10.0, bandwidth: float = 0.1,
                 convolution_number: int = 7,
                 pad_type: Optional[Union[PadType, str]] = None,
                 in_frequency_domain: bool = False) -> None:
        raw_data_rate = validate_positive(float(raw_data_rate), "rawDataRate")
        bandwidth = validate_range(float(bandwidth), "lowpassBandwidth", 0.0, raw_data_rate / 2,
                                   inclusive=False)
        convolution_number = validate_integer(convolution_number, "convolutionNumber", minimum=1)

        self.raw_data_rate = raw_data_rate
        self.bandwidth = bandwidth
        self.convolution_number = convolution_number

        kernel = crn_coefficients(raw_data_rate, bandwidth, convolution_number)
        super().__init__(
            bn=kernel,
            an=[1.0],
            bn_start_index=(kernel.size - 1) // 2,
            in_frequency_domain=in_frequency_domain,
            pad_type=pad_type
        )

    @classmethod
    def from_config(cls, params: Optional[Mapping[str, Any]]) -> "GraceLowpass":
        options = FilterOptions(cls.kind, params)
        instance = cls(
            raw_data_rate=options.get("rawDataRate", 10.0),
            bandwidth=options.get("lowpassBandwidth", 0.1),
            convolution_number=options.get("convolutionNumber", 7),
            pad_type=options.pad_type(),
            in_frequency_domain=options.in_frequency_domain()
        )
        options.finish()
        return instance


@register_filter("correlation")
class Correlation(ARMAFilter):
    """First order Gauss-Markov filter introducing correlation ``rho``.

    Colours white noise of unit variance into a stationary process with
    unit variance and lag-one autocorrelation ``rho``.

    Args:
        correlation: Correlation between neighbouring samples, in (-1, 1)
        pad_type: Boundary extension policy
        in_frequency_domain: Evaluate in the frequency domain
        backward: Apply against reversed time order
    """

    def __init__(self, correlation: float,
                 pad_type: Optional[Union[PadType, str]] = None,
                 in_frequency_domain: bool = False,
                 backward: bool = False) -> None:
        rho = validate_range(float(correlation), "correlation", -1.0, 1.0)
        self.correlation = rho
        super().__init__(
            bn=[np.sqrt(1.0 - rho ** 2)],
            an=[1.0, -rho],
            bn_start_index=0,
            backward=backward,
            in_frequency_domain=in_frequency_domain,
            pad_type=pad_type
        )

    @classmethod
    def from_config(cls, params: Optional[Mapping[str, Any]]) -> "Correlation":
        options = FilterOptions(cls.kind, params)
        instance = cls(options.get("correlation"), **cls.arma_options(options))
        options.finish()
        return instance

"""
geofilt Test Suite

Tests for the filter subsystem (padding, spectra, ARMA evaluation, filter
variants and chains), the configuration layer and the simulation programs
operating on arcs.
"""

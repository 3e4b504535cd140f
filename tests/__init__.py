"""
arima test suite

Tests for order validation, differencing, the design matrix, innovation
filtering, conditional sum-of-squares estimation, forecasting and the package
configuration.
"""

"""Exceptions raised by mccore."""


class MCError(Exception):
    """Base class for all mccore errors."""


class ConfigurationError(MCError, ValueError):
    """
    Invalid simulation input.

    Raised for bad configuration values, a missing or short starting
    configuration, and a negative or non-numeric step count.
    """

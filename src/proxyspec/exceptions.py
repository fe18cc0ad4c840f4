# ProxySpec
# Copyright (C) 2025 Amirreza "Farnam" Taheri
# This program comes with ABSOLUTELY NO WARRANTY; for details type `show w`.
# This is free software, and you are welcome to redistribute it
# under certain conditions; type `show c` for details.

"""Custom exception types for the ProxySpec compiler."""


class ProxySpecError(Exception):
    """Base exception class for all application-specific errors."""

    pass


class InvalidSpecError(ProxySpecError):
    """Raised when a command-line spec string is empty or blank."""

    pass


class InvalidNodeError(ProxySpecError):
    """Raised when a node spec does not describe any usable dial target."""

    pass


class URLParseError(ProxySpecError):
    """Raised when a spec string is not valid URL syntax."""

    pass


class SchemeError(URLParseError):
    """Raised when a scheme has more than two ``+``-separated segments."""

    pass


class InvalidAuthError(ProxySpecError):
    """Raised when an ``auth`` metadata value is not valid base64."""

    pass

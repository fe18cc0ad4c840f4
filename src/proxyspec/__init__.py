# ProxySpec
# Copyright (C) 2025 Amirreza "Farnam" Taheri
# This program comes with ABSOLUTELY NO WARRANTY; for details type `show w`.
# This is free software, and you are welcome to redistribute it
# under certain conditions; type `show c` for details.

"""
ProxySpec - command-line proxy spec compiler

Compiles compact URL-style specs such as
``socks5+tls://user:pass@:1080?bypass=10.0.0.0/8`` into a structured
configuration graph of services, chains and shared policies.
"""

__version__ = "1.0.0"
__author__ = "Amirreza 'Farnam' Taheri"

from .config import Settings
from .core.builder import build_config_from_cmd
from .core.normalizer import normalize_spec
from .core.registry import StaticRegistry
from .exceptions import (
    InvalidAuthError,
    InvalidNodeError,
    InvalidSpecError,
    ProxySpecError,
    SchemeError,
    URLParseError,
)
from .models import Config

__all__ = [
    "Config",
    "Settings",
    "StaticRegistry",
    "build_config_from_cmd",
    "normalize_spec",
    "ProxySpecError",
    "InvalidSpecError",
    "InvalidNodeError",
    "URLParseError",
    "SchemeError",
    "InvalidAuthError",
    "__version__",
    "__author__",
]

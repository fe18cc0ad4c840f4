# ProxySpec
# Copyright (C) 2025 Amirreza "Farnam" Taheri
# This program comes with ABSOLUTELY NO WARRANTY; for details type `show w`.
# This is free software, and you are welcome to redistribute it
# under certain conditions; type `show c` for details.

from datetime import timedelta

# Sentinel scheme for bare ``host:port`` and ``:port`` specs
AUTO_SCHEME = "auto"
SCHEME_ALIASES = {"https": "http+tls"}

# Registry kinds
HANDLER = "handler"
LISTENER = "listener"
CONNECTOR = "connector"
DIALER = "dialer"

# Fallbacks for unregistered component types
DEFAULT_HANDLER = "auto"
DEFAULT_LISTENER = "tcp"
DEFAULT_CONNECTOR = "http"
DEFAULT_DIALER = "tcp"
UDP_TRANSPORT = "udp"
UDP_SESSION_TYPES = frozenset({"ssu"})

# Forward mode
RELAY_HANDLER = "relay"
FORWARD_HANDLER = "forward"
DIRECT_FORWARD_TYPES = frozenset({"tcp", "udp", "rtcp", "rudp", "tun", "tap", "dns"})
REVERSE_LISTENER_TYPES = frozenset({"rtcp", "rudp"})

# Protocols that verify credentials at the transport layer
TRANSPORT_AUTH_TYPES = frozenset({"ssh", "sshd"})

# Selector defaults
DEFAULT_STRATEGY = "round"
DEFAULT_MAX_FAILS = 1
DEFAULT_FAIL_TIMEOUT = timedelta(seconds=30)

# Rate limiter scope keys
GLOBAL_LIMIT_KEY = "$"
CONN_LIMIT_KEY = "$$"

# Environment variables read into Settings
ENV_PREFIX = "GOST_"

OUTPUT_FORMATS = ("yaml", "json")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_LEVEL = "WARNING"

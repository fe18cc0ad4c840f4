# ProxySpec
# Copyright (C) 2025 Amirreza "Farnam" Taheri
# This program comes with ABSOLUTELY NO WARRANTY; for details type `show w`.
# This is free software, and you are welcome to redistribute it
# under certain conditions; type `show c` for details.

"""Component type lookup used to fill in omitted or unknown scheme roles.

The compiler never instantiates components. It only asks whether a type
name is known for a given kind (``handler``, ``listener``, ``connector``,
``dialer``) and falls back to a default when it is not.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Mapping, Optional, Protocol, Set, Tuple

from ..constants import (
    CONNECTOR,
    DEFAULT_CONNECTOR,
    DEFAULT_DIALER,
    DEFAULT_HANDLER,
    DEFAULT_LISTENER,
    DIALER,
    HANDLER,
    LISTENER,
    UDP_SESSION_TYPES,
    UDP_TRANSPORT,
)

logger = logging.getLogger(__name__)

_TRANSPORTS = (
    "tcp", "udp", "tls", "mtls", "ws", "mws", "wss", "mwss", "kcp", "quic",
    "h2", "h2c", "http2", "http3", "h3", "wt", "grpc", "ssh", "sshd",
    "obfs-http", "obfs-tls", "otls", "pht", "phts", "ftcp", "icmp", "dtls",
    "mtcp", "unix", "serial",
)

KNOWN_TYPES: Dict[str, Tuple[str, ...]] = {
    HANDLER: (
        "auto", "http", "http2", "socks", "socks4", "socks5", "ss", "ssu",
        "relay", "sni", "tcp", "udp", "rtcp", "rudp", "tun", "tap", "dns",
        "forward", "red", "redir", "redirect", "redu", "sshd", "tunnel",
        "file", "serial", "unix", "router",
    ),
    LISTENER: _TRANSPORTS + (
        "rtcp", "rudp", "tun", "tap", "dns", "red", "redir", "redirect",
        "redu", "tproxy", "rtun",
    ),
    CONNECTOR: (
        "http", "http2", "socks", "socks4", "socks4a", "socks5", "ss", "ssu",
        "relay", "sni", "forward", "sshd", "direct", "virtual", "tunnel",
        "router", "serial", "unix",
    ),
    DIALER: _TRANSPORTS + ("direct", "virtual"),
}


class ComponentRegistry(Protocol):
    """Read-only view of the runtime's component registries."""

    def exists(self, kind: str, name: str) -> bool:
        ...


class StaticRegistry:
    """An in-memory :class:`ComponentRegistry`."""

    def __init__(self, types: Optional[Mapping[str, Iterable[str]]] = None):
        source = KNOWN_TYPES if types is None else types
        self._types: Dict[str, Set[str]] = {
            kind: set(names) for kind, names in source.items()
        }

    def exists(self, kind: str, name: str) -> bool:
        return bool(name) and name in self._types.get(kind, ())

    def register(self, kind: str, name: str) -> None:
        self._types.setdefault(kind, set()).add(name)


def resolve_service_types(
    handler: str, listener: str, registry: ComponentRegistry
) -> Tuple[str, str]:
    """Replace unregistered handler/listener names with their defaults."""
    if not registry.exists(HANDLER, handler):
        logger.debug("handler %r not registered, using %r", handler, DEFAULT_HANDLER)
        handler = DEFAULT_HANDLER
    if not registry.exists(LISTENER, listener):
        fallback = UDP_TRANSPORT if handler in UDP_SESSION_TYPES else DEFAULT_LISTENER
        logger.debug("listener %r not registered, using %r", listener, fallback)
        listener = fallback
    return handler, listener


def resolve_node_types(
    connector: str, dialer: str, registry: ComponentRegistry
) -> Tuple[str, str]:
    """Replace unregistered connector/dialer names with their defaults."""
    if not registry.exists(CONNECTOR, connector):
        logger.debug(
            "connector %r not registered, using %r", connector, DEFAULT_CONNECTOR
        )
        connector = DEFAULT_CONNECTOR
    if not registry.exists(DIALER, dialer):
        fallback = UDP_TRANSPORT if connector in UDP_SESSION_TYPES else DEFAULT_DIALER
        logger.debug("dialer %r not registered, using %r", dialer, fallback)
        dialer = fallback
    return connector, dialer

# ProxySpec
# Copyright (C) 2025 Amirreza "Farnam" Taheri
# This program comes with ABSOLUTELY NO WARRANTY; for details type `show w`.
# This is free software, and you are welcome to redistribute it
# under certain conditions; type `show c` for details.

from __future__ import annotations

import logging

from ..constants import (
    DIRECT_FORWARD_TYPES,
    FORWARD_HANDLER,
    RELAY_HANDLER,
    TRANSPORT_AUTH_TYPES,
)
from ..models import (
    ForwarderConfig,
    HandlerConfig,
    ListenerConfig,
    NodeConfig,
    ServiceConfig,
)
from .auth import resolve_auth
from .metadata import Metadata
from .normalizer import SpecURL, split_scheme
from .registry import ComponentRegistry, resolve_service_types
from .resources import split_list
from .selector import parse_selector
from .tls import resolve_server_tls

logger = logging.getLogger(__name__)


def _forward_handler(handler: str, listener: str) -> str:
    if handler == RELAY_HANDLER:
        return handler
    if listener in DIRECT_FORWARD_TYPES:
        return listener
    return FORWARD_HANDLER


def build_service_config(url: SpecURL, registry: ComponentRegistry) -> ServiceConfig:
    """
    Compile a normalized service spec into a listener/handler pair.

    A non-empty path turns the service into a port forwarder: the path is
    the comma separated target list and the handler is chosen to match
    the listener (or ``forward``), unless ``relay`` was asked for.

    Raises:
        SchemeError: If the scheme has more than two segments.
        InvalidAuthError: If the ``auth`` option is not valid base64.
    """
    handler, listener = resolve_service_types(*split_scheme(url.scheme), registry)

    forwarder = None
    remotes = url.path.strip("/")
    if remotes:
        forwarder = ForwarderConfig(
            nodes=[
                NodeConfig(name=f"target-{i}", addr=addr)
                for i, addr in enumerate(split_list(remotes))
            ]
        )
        forward = _forward_handler(handler, listener)
        if forward != handler:
            logger.debug("forward mode: handler %r -> %r", handler, forward)
        handler = forward

    md = Metadata(dict(url.query))
    auth = resolve_auth(url, md)
    tls = resolve_server_tls(md)

    dns = md.get_string("dns")
    if dns:
        md.set("dns", dns.split(","))

    if forwarder is not None:
        forwarder.selector = parse_selector(md)

    handler_cfg = HandlerConfig(type=handler, auth=auth, metadata=md.as_dict())
    listener_cfg = ListenerConfig(type=listener, tls=tls, metadata=md.as_dict())
    if listener in TRANSPORT_AUTH_TYPES:
        handler_cfg.auth = None
        listener_cfg.auth = auth

    return ServiceConfig(
        addr=url.host,
        handler=handler_cfg,
        listener=listener_cfg,
        forwarder=forwarder,
        metadata=md.as_dict(),
    )

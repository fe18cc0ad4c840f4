# ProxySpec
# Copyright (C) 2025 Amirreza "Farnam" Taheri
# This program comes with ABSOLUTELY NO WARRANTY; for details type `show w`.
# This is free software, and you are welcome to redistribute it
# under certain conditions; type `show c` for details.

"""Assemble a complete configuration graph from command-line specs.

Every ``-F`` node spec becomes one hop of the single chain ``chain-0``;
every ``-L`` service spec becomes a service routed through that chain.
Options understood by the compiler are turned into typed fields or named
policies, the rest is passed through as component metadata.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from ..config import Settings
from ..constants import REVERSE_LISTENER_TYPES
from ..exceptions import ProxySpecError
from ..models import (
    APIConfig,
    ChainConfig,
    Config,
    HopConfig,
    LogConfig,
    MetricsConfig,
    ProfilingConfig,
    ServiceConfig,
    SockOptsConfig,
)
from .metadata import Metadata
from .node import build_node_config, expand_nodes
from .normalizer import normalize_spec
from .registry import ComponentRegistry, StaticRegistry
from .resources import HOP_RULES, SERVICE_RULES, attach_resources
from .selector import parse_selector
from .service import build_service_config

logger = logging.getLogger(__name__)


@contextmanager
def _blame(spec: str) -> Iterator[None]:
    """Re-raise compile errors with the offending spec in the message."""
    try:
        yield
    except ProxySpecError as exc:
        if spec and spec in str(exc):
            raise
        raise type(exc)(f"{exc} (spec: {spec!r})") from exc


def _apply_settings(cfg: Config, settings: Settings) -> None:
    if settings.profiling:
        cfg.profiling = ProfilingConfig(addr=settings.profiling)
    if settings.metrics:
        cfg.metrics = MetricsConfig(addr=settings.metrics)
    if settings.logger_level:
        cfg.log = LogConfig(level=settings.logger_level)
    if settings.api:
        cfg.api = APIConfig(addr=settings.api)


def _build_hop(cfg: Config, index: int, spec: str, registry: ComponentRegistry) -> HopConfig:
    template = build_node_config(normalize_spec(spec), registry)

    md = Metadata(template.connector.metadata)
    hop = HopConfig(name=f"hop-{index}", selector=parse_selector(md))
    attach_resources(cfg, hop, md, HOP_RULES)

    interface = md.pop_string("interface")
    if interface:
        hop.interface = interface
    mark = md.get_int("so_mark")
    if mark > 0:
        hop.sockopts = SockOptsConfig(mark=mark)
        md.delete("so_mark")

    hop.nodes = expand_nodes(template, md.as_dict())
    return hop


def _build_service(
    cfg: Config,
    index: int,
    spec: str,
    registry: ComponentRegistry,
    chain: Optional[ChainConfig],
) -> ServiceConfig:
    service = build_service_config(normalize_spec(spec), registry)
    service.name = f"service-{index}"
    if chain is not None:
        if service.listener.type in REVERSE_LISTENER_TYPES:
            service.listener.chain = chain.name
        else:
            service.handler.chain = chain.name

    md = Metadata(service.handler.metadata)
    retries = md.get_int("retries")
    if retries > 0:
        service.handler.retries = retries
        md.delete("retries")
    attach_resources(cfg, service, md, SERVICE_RULES)

    service.handler.metadata = md.as_dict()
    service.listener.metadata = md.as_dict()
    service.metadata = md.as_dict()
    return service


def build_config_from_cmd(
    services: Sequence[str],
    nodes: Sequence[str] = (),
    registry: Optional[ComponentRegistry] = None,
    settings: Optional[Settings] = None,
) -> Config:
    """
    Compile service and node specs into one :class:`Config`.

    Args:
        services: Service specs, in order (``-L``).
        nodes: Node specs, one hop each, in chain order (``-F``).
        registry: Lookup of known component types. Defaults to the
            built-in type table.
        settings: Environment settings. Read from the environment when
            omitted.

    Returns:
        The complete configuration graph.

    Raises:
        ProxySpecError: On the first invalid spec. Nothing is returned
            for the other specs.
    """
    registry = registry if registry is not None else StaticRegistry()
    settings = settings if settings is not None else Settings()

    cfg = Config()
    _apply_settings(cfg, settings)

    chain = None
    if nodes:
        chain = ChainConfig(name="chain-0")
        cfg.chains.append(chain)
    for i, spec in enumerate(nodes):
        with _blame(spec):
            chain.hops.append(_build_hop(cfg, i, spec, registry))

    for i, spec in enumerate(services):
        with _blame(spec):
            cfg.services.append(_build_service(cfg, i, spec, registry, chain))

    logger.info(
        "compiled %d service(s) and %d hop(s)",
        len(cfg.services),
        len(chain.hops) if chain else 0,
    )
    return cfg

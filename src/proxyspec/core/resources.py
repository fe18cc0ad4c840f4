# ProxySpec
# Copyright (C) 2025 Amirreza "Farnam" Taheri
# This program comes with ABSOLUTELY NO WARRANTY; for details type `show w`.
# This is free software, and you are welcome to redistribute it
# under certain conditions; type `show c` for details.

"""Named policies synthesized from spec options.

Options such as ``bypass=~10.0.0.0/8`` or ``limiter.rate.in=1mb`` do not
stay in the component metadata. Each one becomes a named top-level
entity (``bypass-0``, ``limiter-1``, ...) on the :class:`Config`, and the
hop or service that carried the option refers to it by that name.

Each policy kind is described by a :class:`ResourceRule`; the rules for
hops and for services are plain tables applied in order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from ..config.base import BaseConfig
from ..constants import CONN_LIMIT_KEY, GLOBAL_LIMIT_KEY
from ..models import (
    AdmissionConfig,
    BypassConfig,
    Config,
    HostMappingConfig,
    HostsConfig,
    LimiterConfig,
    NameserverConfig,
    RateLimiterConfig,
    ResolverConfig,
)
from .metadata import Metadata

logger = logging.getLogger(__name__)

Builder = Callable[[Metadata, str], Optional[BaseConfig]]


@dataclass(frozen=True)
class ResourceRule:
    """
    How one policy kind is read from metadata.

    Attributes:
        kind: Name prefix of the generated entity.
        collection: Attribute of :class:`Config` that stores the entity.
        ref_field: Attribute of the hop or service that references it.
        keys: Metadata keys consumed once the entity is created.
        build: Returns the entity, or None when its trigger is absent.
    """

    kind: str
    collection: str
    ref_field: str
    keys: Tuple[str, ...]
    build: Builder


def split_list(value: str) -> List[str]:
    """Split a comma separated option, dropping empty items."""
    return [item for item in value.split(",") if item]


def _matcher_builder(model: type, key: str) -> Builder:
    def build(md: Metadata, name: str) -> Optional[BaseConfig]:
        value = md.get_string(key)
        if not value:
            return None
        whitelist = value.startswith("~")
        if whitelist:
            value = value[1:]
        return model(name=name, whitelist=whitelist, matchers=split_list(value))

    return build


def _resolver_builder(with_prefer: bool) -> Builder:
    def build(md: Metadata, name: str) -> Optional[BaseConfig]:
        value = md.get_string("resolver")
        if not value:
            return None
        prefer = (md.get_string("prefer") or None) if with_prefer else None
        return ResolverConfig(
            name=name,
            nameservers=[
                NameserverConfig(addr=addr, prefer=prefer)
                for addr in split_list(value)
            ],
        )

    return build


def _build_hosts(md: Metadata, name: str) -> Optional[BaseConfig]:
    value = md.get_string("hosts")
    if not value:
        return None
    mappings = []
    for item in value.split(","):
        hostname, sep, ip = item.partition(":")
        if not sep:
            logger.debug("dropping malformed hosts mapping %r", item)
            continue
        mappings.append(HostMappingConfig(hostname=hostname, ip=ip))
    return HostsConfig(name=name, mappings=mappings)


def _build_limiter(md: Metadata, name: str) -> Optional[BaseConfig]:
    rate_in = md.get_string("limiter.rate.in")
    rate_out = md.get_string("limiter.rate.out")
    conn_in = md.get_string("limiter.rate.conn.in")
    conn_out = md.get_string("limiter.rate.conn.out")
    if not rate_in and not conn_in:
        return None

    limits = []
    if rate_in:
        limits.append(f"{GLOBAL_LIMIT_KEY} {rate_in} {rate_out}".strip())
    if conn_in:
        limits.append(f"{CONN_LIMIT_KEY} {conn_in} {conn_out}".strip())
    return LimiterConfig(name=name, rate=RateLimiterConfig(limits=limits))


BYPASS_RULE = ResourceRule(
    "bypass", "bypasses", "bypass", ("bypass",),
    _matcher_builder(BypassConfig, "bypass"),
)
ADMISSION_RULE = ResourceRule(
    "admission", "admissions", "admission", ("admission",),
    _matcher_builder(AdmissionConfig, "admission"),
)
HOSTS_RULE = ResourceRule("hosts", "hosts", "hosts", ("hosts",), _build_hosts)
LIMITER_RULE = ResourceRule(
    "limiter", "limiters", "limiter",
    (
        "limiter.rate.in",
        "limiter.rate.out",
        "limiter.rate.conn.in",
        "limiter.rate.conn.out",
    ),
    _build_limiter,
)

HOP_RULES: Sequence[ResourceRule] = (
    BYPASS_RULE,
    ResourceRule(
        "resolver", "resolvers", "resolver", ("resolver",), _resolver_builder(False)
    ),
    HOSTS_RULE,
)

SERVICE_RULES: Sequence[ResourceRule] = (
    ADMISSION_RULE,
    BYPASS_RULE,
    ResourceRule(
        "resolver", "resolvers", "resolver", ("resolver", "prefer"),
        _resolver_builder(True),
    ),
    HOSTS_RULE,
    LIMITER_RULE,
)


def attach_resources(
    cfg: Config, parent: BaseConfig, md: Metadata, rules: Sequence[ResourceRule]
) -> None:
    """
    Apply ``rules`` to ``md``, registering each entity on ``cfg``.

    Entities are named after the current size of their collection, the
    parent gets a by-name reference, and the consumed keys are removed
    from ``md``.
    """
    for rule in rules:
        entities = getattr(cfg, rule.collection)
        name = f"{rule.kind}-{len(entities)}"
        entity = rule.build(md, name)
        if entity is None:
            continue
        entities.append(entity)
        setattr(parent, rule.ref_field, name)
        md.delete(*rule.keys)
        logger.debug("created %s for %s", name, getattr(parent, "name", "?"))

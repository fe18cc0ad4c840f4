# ProxySpec
# Copyright (C) 2025 Amirreza "Farnam" Taheri
# This program comes with ABSOLUTELY NO WARRANTY; for details type `show w`.
# This is free software, and you are welcome to redistribute it
# under certain conditions; type `show c` for details.

"""Configuration graph models.

A :class:`Config` is the single output of the command-line compiler. It
holds ordered, named collections of services, chains and the shared
policies (bypass lists, resolvers, hosts tables, rate limiters and
admission lists) that services and hops refer to by name.
"""
from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict, List, Optional

from pydantic import Field, field_serializer

from .config.base import BaseConfig
from .constants import DEFAULT_FAIL_TIMEOUT, DEFAULT_MAX_FAILS, DEFAULT_STRATEGY
from .core.metadata import format_duration


class AuthConfig(BaseConfig):
    username: str
    password: str = ""


class TLSConfig(BaseConfig):
    cert_file: Optional[str] = None
    key_file: Optional[str] = None
    ca_file: Optional[str] = None
    secure: Optional[bool] = None
    server_name: Optional[str] = None


class SelectorConfig(BaseConfig):
    """Load-balancing policy for the nodes of a hop or forwarder."""

    strategy: str = DEFAULT_STRATEGY
    max_fails: int = DEFAULT_MAX_FAILS
    fail_timeout: timedelta = DEFAULT_FAIL_TIMEOUT

    @field_serializer("fail_timeout")
    def _serialize_fail_timeout(self, value: timedelta) -> str:
        return format_duration(value)


class SockOptsConfig(BaseConfig):
    mark: int


class ConnectorConfig(BaseConfig):
    type: str
    auth: Optional[AuthConfig] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class DialerConfig(BaseConfig):
    type: str
    auth: Optional[AuthConfig] = None
    tls: Optional[TLSConfig] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class NodeConfig(BaseConfig):
    name: str = ""
    addr: str = ""
    connector: Optional[ConnectorConfig] = None
    dialer: Optional[DialerConfig] = None


class HopConfig(BaseConfig):
    name: str
    selector: Optional[SelectorConfig] = None
    nodes: List[NodeConfig] = Field(default_factory=list)
    bypass: Optional[str] = None
    resolver: Optional[str] = None
    hosts: Optional[str] = None
    interface: Optional[str] = None
    sockopts: Optional[SockOptsConfig] = None


class ChainConfig(BaseConfig):
    name: str
    hops: List[HopConfig] = Field(default_factory=list)


class HandlerConfig(BaseConfig):
    type: str
    retries: Optional[int] = None
    chain: Optional[str] = None
    auth: Optional[AuthConfig] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ListenerConfig(BaseConfig):
    type: str
    chain: Optional[str] = None
    auth: Optional[AuthConfig] = None
    tls: Optional[TLSConfig] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ForwarderConfig(BaseConfig):
    """Static target list of a forward-mode service."""

    nodes: List[NodeConfig] = Field(default_factory=list)
    selector: Optional[SelectorConfig] = None


class ServiceConfig(BaseConfig):
    name: str = ""
    addr: str = ""
    admission: Optional[str] = None
    bypass: Optional[str] = None
    resolver: Optional[str] = None
    hosts: Optional[str] = None
    limiter: Optional[str] = None
    handler: Optional[HandlerConfig] = None
    listener: Optional[ListenerConfig] = None
    forwarder: Optional[ForwarderConfig] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class BypassConfig(BaseConfig):
    name: str
    whitelist: bool = False
    matchers: List[str] = Field(default_factory=list)


class AdmissionConfig(BaseConfig):
    name: str
    whitelist: bool = False
    matchers: List[str] = Field(default_factory=list)


class NameserverConfig(BaseConfig):
    addr: str
    prefer: Optional[str] = None


class ResolverConfig(BaseConfig):
    name: str
    nameservers: List[NameserverConfig] = Field(default_factory=list)


class HostMappingConfig(BaseConfig):
    hostname: str
    ip: str


class HostsConfig(BaseConfig):
    name: str
    mappings: List[HostMappingConfig] = Field(default_factory=list)


class RateLimiterConfig(BaseConfig):
    limits: List[str] = Field(default_factory=list)


class LimiterConfig(BaseConfig):
    name: str
    rate: Optional[RateLimiterConfig] = None


class AutherConfig(BaseConfig):
    name: str
    auths: List[AuthConfig] = Field(default_factory=list)


class ProfilingConfig(BaseConfig):
    addr: str


class MetricsConfig(BaseConfig):
    addr: str


class LogConfig(BaseConfig):
    level: str


class APIConfig(BaseConfig):
    addr: str


class Config(BaseConfig):
    """The complete configuration graph produced from one invocation."""

    services: List[ServiceConfig] = Field(default_factory=list)
    chains: List[ChainConfig] = Field(default_factory=list)
    authers: List[AutherConfig] = Field(default_factory=list)
    admissions: List[AdmissionConfig] = Field(default_factory=list)
    bypasses: List[BypassConfig] = Field(default_factory=list)
    resolvers: List[ResolverConfig] = Field(default_factory=list)
    hosts: List[HostsConfig] = Field(default_factory=list)
    limiters: List[LimiterConfig] = Field(default_factory=list)
    log: Optional[LogConfig] = None
    profiling: Optional[ProfilingConfig] = None
    api: Optional[APIConfig] = None
    metrics: Optional[MetricsConfig] = None

    def find(self, collection: str, name: str) -> Optional[BaseConfig]:
        """Return the entity called ``name`` in ``collection``, if any."""
        for item in getattr(self, collection):
            if item.name == name:
                return item
        return None

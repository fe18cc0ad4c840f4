# ProxySpec
# Copyright (C) 2025 Amirreza "Farnam" Taheri
# This program comes with ABSOLUTELY NO WARRANTY; for details type `show w`.
# This is free software, and you are welcome to redistribute it
# under certain conditions; type `show c` for details.

from __future__ import annotations

from typing import Optional

from ..models import TLSConfig
from .metadata import Metadata

CERT_KEYS = ("certFile", "cert")
KEY_KEYS = ("keyFile", "key")
CA_KEYS = ("caFile", "ca")


def _read_files(md: Metadata) -> TLSConfig:
    return TLSConfig(
        cert_file=md.pop_string(*CERT_KEYS) or None,
        key_file=md.pop_string(*KEY_KEYS) or None,
        ca_file=md.pop_string(*CA_KEYS) or None,
    )


def resolve_server_tls(md: Metadata) -> Optional[TLSConfig]:
    """Listener TLS settings; present only when a certificate is given."""
    tls = _read_files(md)
    if not tls.cert_file:
        return None
    return tls


def resolve_client_tls(md: Metadata, hostname: str) -> Optional[TLSConfig]:
    """
    Dialer TLS settings.

    Client TLS counts as configured when ``secure`` is set or a
    certificate or CA file is given. The server name defaults to the
    host of the spec.
    """
    tls = _read_files(md)
    if "secure" in md:
        tls.secure = md.get_bool("secure")
    tls.server_name = md.get_string("serverName") or hostname or None
    md.delete("secure", "serverName")
    if not tls.secure and not tls.cert_file and not tls.ca_file:
        return None
    return tls

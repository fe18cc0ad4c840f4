# ProxySpec
# Copyright (C) 2025 Amirreza "Farnam" Taheri
# This program comes with ABSOLUTELY NO WARRANTY; for details type `show w`.
# This is free software, and you are welcome to redistribute it
# under certain conditions; type `show c` for details.

"""Turn raw command-line spec tokens into structured URLs."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
from urllib.parse import parse_qsl, unquote, urlsplit

from ..constants import AUTO_SCHEME, SCHEME_ALIASES
from ..exceptions import InvalidSpecError, SchemeError, URLParseError

logger = logging.getLogger(__name__)


@dataclass
class SpecURL:
    """
    A parsed spec string.

    ``host`` keeps the port and may hold a comma separated host list;
    ``query`` keeps the first value of every query parameter.
    """

    scheme: str
    host: str = ""
    username: Optional[str] = None
    password: Optional[str] = None
    path: str = ""
    raw_query: str = ""
    fragment: str = ""
    query: Dict[str, str] = field(default_factory=dict)

    @property
    def has_userinfo(self) -> bool:
        return self.username is not None

    @property
    def hostname(self) -> str:
        """Host without port and without IPv6 brackets."""
        host = self.host
        if host.startswith("["):
            end = host.find("]")
            return host[1:end] if end > 0 else host[1:]
        if ":" in host:
            return host.rpartition(":")[0]
        return host

    def geturl(self) -> str:
        netloc = self.host
        if self.username is not None:
            userinfo = self.username
            if self.password is not None:
                userinfo = f"{userinfo}:{self.password}"
            netloc = f"{userinfo}@{netloc}"
        url = f"{self.scheme}://{netloc}{self.path}"
        if self.raw_query:
            url += f"?{self.raw_query}"
        if self.fragment:
            url += f"#{self.fragment}"
        return url


def _check_port(host: str, spec: str) -> None:
    if host.startswith("["):
        end = host.rfind("]")
        port = host[end + 1:]
        if port and not port.startswith(":"):
            raise URLParseError(f"invalid host in spec: {spec}")
    else:
        idx = host.rfind(":")
        port = host[idx:] if idx >= 0 else ""
    if port and not port[1:].isdigit() and port != ":":
        raise URLParseError(f"invalid port {port!r} in spec: {spec}")


def normalize_spec(spec: str) -> SpecURL:
    """
    Normalize a single command-line spec into a :class:`SpecURL`.

    Bare ``host:port`` and ``:port`` forms get the ``auto`` scheme, and
    ``https`` is rewritten to ``http+tls``.

    Raises:
        InvalidSpecError: If the spec is empty or blank.
        URLParseError: If the spec is not valid URL syntax.
    """
    s = (spec or "").strip()
    if not s:
        raise InvalidSpecError("empty spec")

    if s[0] == ":" or "://" not in s:
        s = f"{AUTO_SCHEME}://{s}"

    try:
        parts = urlsplit(s)
    except ValueError as exc:
        raise URLParseError(f"invalid spec {spec!r}: {exc}") from exc
    if not parts.scheme:
        raise URLParseError(f"missing protocol scheme in spec: {spec}")

    userinfo, sep, host = parts.netloc.rpartition("@")
    username = password = None
    if sep:
        name, colon, secret = userinfo.partition(":")
        username = unquote(name)
        if colon:
            password = unquote(secret)
    _check_port(host, spec)

    query: Dict[str, str] = {}
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        query.setdefault(key, value)

    scheme = SCHEME_ALIASES.get(parts.scheme, parts.scheme)
    url = SpecURL(
        scheme=scheme,
        host=host,
        username=username,
        password=password,
        path=parts.path,
        raw_query=parts.query,
        fragment=parts.fragment,
        query=query,
    )
    logger.debug("normalized spec to scheme=%s host=%s", url.scheme, url.host)
    return url


def split_scheme(scheme: str) -> Tuple[str, str]:
    """
    Split ``session+transport`` into its two roles.

    A single segment names both roles.

    Raises:
        SchemeError: If the scheme has more than two segments.
    """
    segments = scheme.split("+")
    if len(segments) == 1:
        return segments[0], segments[0]
    if len(segments) == 2:
        return segments[0], segments[1]
    raise SchemeError(f"too many '+' segments in scheme: {scheme}")

# ProxySpec
# Copyright (C) 2025 Amirreza "Farnam" Taheri
# This program comes with ABSOLUTELY NO WARRANTY; for details type `show w`.
# This is free software, and you are welcome to redistribute it
# under certain conditions; type `show c` for details.

from __future__ import annotations

import base64
from typing import Optional

from ..exceptions import InvalidAuthError
from ..models import AuthConfig
from .metadata import Metadata
from .normalizer import SpecURL


def parse_auth(value: str) -> AuthConfig:
    """
    Decode a base64 ``user:pass`` credential.

    Without a colon the whole decoded value is the username.

    Raises:
        InvalidAuthError: If the value is not valid standard base64.
    """
    try:
        raw = base64.b64decode(value, validate=True)
    except ValueError as exc:
        raise InvalidAuthError(f"invalid auth value: {exc}") from exc
    try:
        decoded = raw.decode("utf-8")
    except UnicodeDecodeError:
        # arbitrary bytes are kept one character per byte
        decoded = raw.decode("latin-1")
    username, _, password = decoded.partition(":")
    return AuthConfig(username=username, password=password)


def resolve_auth(url: SpecURL, md: Metadata) -> Optional[AuthConfig]:
    """
    Credentials from the URL userinfo, overridden by an ``auth`` option.

    The ``auth`` key is always removed from the metadata.
    """
    auth = None
    if url.has_userinfo:
        auth = AuthConfig(username=url.username, password=url.password or "")

    encoded = md.pop_string("auth")
    if encoded:
        auth = parse_auth(encoded)
    return auth

# ProxySpec
# Copyright (C) 2025 Amirreza "Farnam" Taheri
# This program comes with ABSOLUTELY NO WARRANTY; for details type `show w`.
# This is free software, and you are welcome to redistribute it
# under certain conditions; type `show c` for details.

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..constants import TRANSPORT_AUTH_TYPES
from ..exceptions import InvalidNodeError
from ..models import ConnectorConfig, DialerConfig, NodeConfig
from .auth import resolve_auth
from .metadata import Metadata
from .normalizer import SpecURL, split_scheme
from .registry import ComponentRegistry, resolve_node_types
from .tls import resolve_client_tls

logger = logging.getLogger(__name__)


def build_node_config(url: SpecURL, registry: ComponentRegistry) -> NodeConfig:
    """
    Compile a normalized node spec into a node template.

    The address may still be a comma separated host list; see
    :func:`expand_nodes`.

    Raises:
        SchemeError: If the scheme has more than two segments.
        InvalidAuthError: If the ``auth`` option is not valid base64.
    """
    connector, dialer = resolve_node_types(*split_scheme(url.scheme), registry)

    md = Metadata(dict(url.query))
    auth = resolve_auth(url, md)
    tls = resolve_client_tls(md, url.hostname)

    connector_cfg = ConnectorConfig(type=connector, auth=auth, metadata=md.as_dict())
    dialer_cfg = DialerConfig(type=dialer, tls=tls, metadata=md.as_dict())
    if dialer in TRANSPORT_AUTH_TYPES:
        connector_cfg.auth = None
        dialer_cfg.auth = auth

    return NodeConfig(addr=url.host, connector=connector_cfg, dialer=dialer_cfg)


def expand_nodes(
    template: NodeConfig, metadata: Optional[Dict[str, Any]] = None
) -> List[NodeConfig]:
    """
    Produce one node per host in the template address.

    Nodes are named ``node-<i>`` and share every other setting with the
    template, each through its own copy. When ``metadata`` is given it
    replaces the connector and dialer metadata of every node.

    Raises:
        InvalidNodeError: If the address holds no host at all.
    """
    hosts = [host for host in template.addr.split(",") if host]
    if not hosts:
        raise InvalidNodeError(f"no address in node spec (addr={template.addr!r})")

    nodes = []
    for host in hosts:
        node = template.model_copy(
            deep=True, update={"name": f"node-{len(nodes)}", "addr": host}
        )
        if metadata is not None:
            node.connector.metadata = Metadata(metadata).as_dict()
            node.dialer.metadata = Metadata(metadata).as_dict()
        nodes.append(node)
    if len(nodes) > 1:
        logger.debug("expanded %r into %d nodes", template.addr, len(nodes))
    return nodes

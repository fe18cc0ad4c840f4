# ProxySpec
# Copyright (C) 2025 Amirreza "Farnam" Taheri
# This program comes with ABSOLUTELY NO WARRANTY; for details type `show w`.
# This is free software, and you are welcome to redistribute it
# under certain conditions; type `show c` for details.

"""Render a compiled :class:`Config` for the runtime."""
from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from .constants import OUTPUT_FORMATS
from .models import Config


def _remove_empty_values(data: Any, keep_blank: bool = False) -> Any:
    # metadata values are passed through as given, blank strings included
    if isinstance(data, dict):
        empty = [[], {}] if keep_blank else ["", [], {}]
        return {
            k: v
            for k, v in (
                (k, _remove_empty_values(v, keep_blank or k == "metadata"))
                for k, v in data.items()
            )
            if v is not None and v not in empty
        }
    if isinstance(data, list):
        return [_remove_empty_values(item, keep_blank) for item in data]
    return data


def config_to_dict(cfg: Config) -> Dict[str, Any]:
    """Plain dict with camelCase keys and unset fields left out."""
    data = cfg.model_dump(mode="json", by_alias=True, exclude_none=True)
    return _remove_empty_values(data)


def render_config(cfg: Config, fmt: str = "yaml") -> str:
    """
    Serialize the configuration as YAML or JSON.

    Raises:
        ValueError: If ``fmt`` is not a supported format.
    """
    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"unsupported output format: {fmt}")
    data = config_to_dict(cfg)
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)

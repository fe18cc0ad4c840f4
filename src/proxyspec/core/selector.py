# ProxySpec
# Copyright (C) 2025 Amirreza "Farnam" Taheri
# This program comes with ABSOLUTELY NO WARRANTY; for details type `show w`.
# This is free software, and you are welcome to redistribute it
# under certain conditions; type `show c` for details.

from __future__ import annotations

from typing import Optional

from ..constants import DEFAULT_FAIL_TIMEOUT, DEFAULT_MAX_FAILS, DEFAULT_STRATEGY
from ..models import SelectorConfig
from .metadata import Metadata

SELECTOR_KEYS = ("strategy", "maxFails", "max_fails", "failTimeout", "fail_timeout")


def parse_selector(md: Metadata) -> Optional[SelectorConfig]:
    """
    Build a selector from ``strategy``, ``maxFails`` and ``failTimeout``.

    Returns None when none of them is set, which leaves the choice of
    policy to the runtime. Missing values of an explicit selector get the
    defaults (round robin, one failure, 30 seconds). The selector keys
    are removed from the metadata either way.
    """
    strategy = md.get_string("strategy")
    max_fails = md.get_int("maxFails", "max_fails")
    fail_timeout = md.get_duration("failTimeout", "fail_timeout")
    md.delete(*SELECTOR_KEYS)

    if not strategy and max_fails <= 0 and fail_timeout.total_seconds() <= 0:
        return None
    return SelectorConfig(
        strategy=strategy or DEFAULT_STRATEGY,
        max_fails=max_fails if max_fails > 0 else DEFAULT_MAX_FAILS,
        fail_timeout=(
            fail_timeout if fail_timeout.total_seconds() > 0 else DEFAULT_FAIL_TIMEOUT
        ),
    )

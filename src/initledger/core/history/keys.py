# Copyright (c) 2026 Yusoku Advisor Godo Kaisha (ゆうそくアドバイザー合同会社)
# Released under the MIT license
# https://opensource.org/licenses/MIT

"""
History key derivation for modules.

A key changes whenever the module's name, priority group or configuration
changes, so a caller can tell "this exact configuration already ran" by
plain string comparison. The history store itself never parses keys.
"""

import hashlib
import json
from typing import Any, Mapping


def _canonical_config(config: Mapping[str, Any]) -> str:
    # Key order and whitespace must not change the key
    return json.dumps(config, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)


def generate_history_key(name: str, priority_group: int, config: Mapping[str, Any]) -> str:
    """
    Build the history key of a module.

    Args:
        name: Module name as configured.
        priority_group: Priority group the module runs in.
        config: The module's configuration mapping.

    Returns:
        ``"{name}_{priority_group}_{sha256 hex}"``

    Example:
        >>> generate_history_key("net", 1, {"ssid": "x"})[:6]
        'net_1_'
    """
    digest = hashlib.sha256(_canonical_config(config).encode("utf-8")).hexdigest()
    return f"{name}_{priority_group}_{digest}"

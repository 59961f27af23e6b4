# Copyright (c) 2026 Yusoku Advisor Godo Kaisha (ゆうそくアドバイザー合同会社)
# Released under the MIT license
# https://opensource.org/licenses/MIT

from datetime import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, TypedDict, runtime_checkable

from .keys import generate_history_key

# Unused for behavior today; bumped when the on-disk layout changes.
HISTORY_VERSION = 1


class ModuleHistoryPayload(TypedDict):
    key: str
    success: bool


class HistoryPayload(TypedDict):
    """On-disk shape of a history file."""
    instanceID: str
    runTime: str
    moduleHistories: List[ModuleHistoryPayload]
    version: int


@runtime_checkable
class ModuleOutcome(Protocol):
    """Anything the engine executed that can be recorded in a history file."""

    success: bool

    def generate_history_key(self) -> str:
        ...


@dataclass(frozen=True)
class ModuleHistory:
    """Outcome of one module in one run. The key is opaque to the store."""
    key: str
    success: bool

    @classmethod
    def from_outcome(cls, module: ModuleOutcome) -> "ModuleHistory":
        return cls(key=module.generate_history_key(), success=bool(module.success))


@dataclass
class History:
    """
    One instance's most recent run.

    A record is written once and replaced wholesale by the next run;
    nothing ever edits it in place on disk.
    """
    instance_id: str
    run_time: Optional[datetime]
    module_histories: List[ModuleHistory] = field(default_factory=list)
    version: int = HISTORY_VERSION

    def find_module(self, key: str) -> Optional[ModuleHistory]:
        """Return the last entry recorded under ``key``, if any."""
        for entry in reversed(self.module_histories):
            if entry.key == key:
                return entry
        return None

    def module_succeeded(self, key: str) -> bool:
        entry = self.find_module(key)
        return entry is not None and entry.success


@dataclass
class ModuleRun:
    """
    A module as executed by the engine.

    ``config`` is the module's JSON-like configuration; its content (together
    with name and priority group) determines the history key.
    """
    name: str
    priority_group: int
    config: Dict[str, Any] = field(default_factory=dict)
    success: bool = False

    def generate_history_key(self) -> str:
        return generate_history_key(self.name, self.priority_group, self.config)

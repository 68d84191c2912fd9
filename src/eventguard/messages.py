"""Localizable message table."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from .errors import ConfigNotFoundError, InvalidConfigError

ANALYZER_TITLE = "AnalyzerTitle"
ANALYZER_MESSAGE_FORMAT = "AnalyzerMessageFormat"
ANALYZER_DESCRIPTION = "AnalyzerDescription"
REMOVE_VIRTUAL_TITLE = "RemoveVirtualTitle"
IMPLEMENT_RAISE_METHOD_TITLE = "ImplementRaiseMethodTitle"

DEFAULT_MESSAGES: Mapping[str, str] = MappingProxyType(
    {
        ANALYZER_TITLE: "Declare only non-virtual events",
        ANALYZER_MESSAGE_FORMAT: "Event '{0}' should not be virtual",
        ANALYZER_DESCRIPTION: (
            "Virtual events let derived classes replace the subscriber list, "
            "which silently drops handlers attached through the base class. "
            "Make the event non-virtual and expose a protected virtual method "
            "that raises it instead."
        ),
        REMOVE_VIRTUAL_TITLE: "Remove virtual keyword",
        IMPLEMENT_RAISE_METHOD_TITLE: "Implement Virtual Method to Raise Event",
    }
)


@dataclass(frozen=True)
class MessageTable:
    """Opaque key -> text lookup for titles, messages and descriptions."""

    entries: Mapping[str, str] = field(default_factory=lambda: DEFAULT_MESSAGES)

    def get(self, key: str) -> str:
        return self.entries[key]

    def format(self, key: str, *args: object) -> str:
        return self.entries[key].format(*args)

    @classmethod
    def from_json(cls, path: str | Path) -> "MessageTable":
        """Load overrides for any subset of the default keys.

        Raises:
            ConfigNotFoundError: If the file doesn't exist.
            InvalidConfigError: If it isn't a JSON object of known keys to strings.
        """
        path = Path(path)
        if not path.exists():
            raise ConfigNotFoundError(str(path))
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise InvalidConfigError(str(path), f"not valid JSON ({e})")
        if not isinstance(data, dict):
            raise InvalidConfigError(str(path), "expected a JSON object")

        unknown = sorted(set(data) - set(DEFAULT_MESSAGES))
        if unknown:
            raise InvalidConfigError(str(path), f"unknown message keys: {', '.join(unknown)}")
        if not all(isinstance(v, str) for v in data.values()):
            raise InvalidConfigError(str(path), "message values must be strings")

        merged = dict(DEFAULT_MESSAGES)
        merged.update(data)
        return cls(entries=MappingProxyType(merged))

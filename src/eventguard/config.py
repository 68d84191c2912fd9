"""Analyzer configuration loading."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .errors import ConfigNotFoundError, InvalidConfigError, InvalidSchemaVersionError
from .messages import MessageTable

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

# Can be overridden via EVENTGUARD_CONFIG environment variable
CONFIG_ENV_VAR = "EVENTGUARD_CONFIG"
CONFIG_FILE = "eventguard.json"


@dataclass(frozen=True)
class AnalyzerConfig:
    """Settings shared by the diagnostic rule and the fix engine.

    Built once and passed around; nothing mutates it after loading.
    """

    indent_unit: str = "    "
    raise_prefix: str = "Raise"
    strip_prefix: str = "On"
    args_name: str = "args"
    disabled: frozenset[str] = frozenset()
    messages: MessageTable = field(default_factory=MessageTable)

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": SCHEMA_VERSION,
            "indent_unit": self.indent_unit,
            "raise_prefix": self.raise_prefix,
            "strip_prefix": self.strip_prefix,
            "args_name": self.args_name,
            "disabled": sorted(self.disabled),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], base_dir: Path | None = None) -> "AnalyzerConfig":
        """Build a config from parsed JSON.

        A relative `messages` path is resolved against `base_dir`.
        """
        source = str(base_dir / CONFIG_FILE) if base_dir is not None else "<dict>"
        config = cls()
        updates: dict[str, Any] = {}
        for key in ("indent_unit", "raise_prefix", "strip_prefix", "args_name"):
            if key in data:
                if not isinstance(data[key], str):
                    raise InvalidConfigError(source, f"'{key}' must be a string")
                updates[key] = data[key]
        if "disabled" in data:
            disabled = data["disabled"]
            if not isinstance(disabled, list) or not all(isinstance(d, str) for d in disabled):
                raise InvalidConfigError(source, "'disabled' must be a list of diagnostic ids")
            updates["disabled"] = frozenset(disabled)
        if data.get("messages"):
            messages_path = Path(data["messages"])
            if base_dir is not None and not messages_path.is_absolute():
                messages_path = base_dir / messages_path
            updates["messages"] = MessageTable.from_json(messages_path)
        return replace(config, **updates)


def load_config(path: str | Path | None = None) -> AnalyzerConfig:
    """Load the analyzer configuration.

    Resolution order: explicit `path`, then $EVENTGUARD_CONFIG, then
    ./eventguard.json. Only the last one may be absent, in which case the
    defaults are used.

    Raises:
        ConfigNotFoundError: If an explicitly named file doesn't exist.
        InvalidConfigError: If the file is not a valid config.
        InvalidSchemaVersionError: If schema_version is not supported.
    """
    explicit = path or os.environ.get(CONFIG_ENV_VAR)
    config_path = Path(explicit) if explicit else Path.cwd() / CONFIG_FILE

    if not config_path.exists():
        if explicit:
            raise ConfigNotFoundError(str(config_path))
        logger.debug("No %s found, using defaults", CONFIG_FILE)
        return AnalyzerConfig()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InvalidConfigError(str(config_path), f"not valid JSON ({e})")
    if not isinstance(data, dict):
        raise InvalidConfigError(str(config_path), "expected a JSON object")

    version = data.get("schema_version", SCHEMA_VERSION)
    if version != SCHEMA_VERSION:
        raise InvalidSchemaVersionError(version, SCHEMA_VERSION)

    logger.debug("Loaded config from %s", config_path)
    return AnalyzerConfig.from_dict(data, base_dir=config_path.parent)

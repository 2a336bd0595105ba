from __future__ import annotations

from dataclasses import dataclass, fields
import json
from pathlib import Path
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class EngineConfig:
    max_text_length: int = 80
    filter_text_limit: int = 60
    parent_score_floor: int = 5
    max_href_length: int = 100

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> EngineConfig:
        values: dict[str, int] = {}
        for item in fields(cls):
            raw = payload.get(item.name)
            if isinstance(raw, bool) or not isinstance(raw, int) or raw <= 0:
                continue
            values[item.name] = raw
        return cls(**values)

    def to_dict(self) -> dict[str, int]:
        return {item.name: getattr(self, item.name) for item in fields(self)}


DEFAULT_CONFIG = EngineConfig()


def load_engine_config(config_path: Path | str) -> EngineConfig | None:
    path = Path(config_path)
    if not path.exists() or not path.is_file():
        return None

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, TypeError, UnicodeDecodeError):
        return None

    if not isinstance(payload, dict):
        return None
    return EngineConfig.from_mapping(payload)

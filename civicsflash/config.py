"""Engine configuration loaded from ``res/config.json``."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from civicsflash import filework

CONFIG_FILE = filework.RES_ROOT / "config.json"
DEFAULT_AUTO_REVEAL_DELAY = 30.0


@dataclass(frozen=True)
class EngineConfig:
    auto_reveal_delay: Optional[float] = DEFAULT_AUTO_REVEAL_DELAY
    bank_path: str = str(filework.BANK_FILE)
    settings_path: str = str(filework.SETTINGS_FILE)
    shuffle_seed: Optional[int] = None

    def __post_init__(self) -> None:
        delay = self.auto_reveal_delay
        if delay is not None:
            if isinstance(delay, bool) or not isinstance(delay, (int, float)):
                raise TypeError("auto_reveal_delay must be a number or null")
            if delay < 0:
                raise ValueError("auto_reveal_delay cannot be negative")
            object.__setattr__(self, "auto_reveal_delay", float(delay))
        if self.shuffle_seed is not None and (
            isinstance(self.shuffle_seed, bool) or not isinstance(self.shuffle_seed, int)
        ):
            raise TypeError("shuffle_seed must be an integer or null")

    @property
    def auto_reveal_enabled(self) -> bool:
        return bool(self.auto_reveal_delay)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "EngineConfig":
        known = {item.name for item in fields(cls)}
        unknown = sorted(set(payload) - known)
        if unknown:
            raise ValueError(f"Unknown config key(s): {', '.join(unknown)}")
        return cls(**dict(payload))


_CONFIG_CACHE: Dict[Path, EngineConfig] = {}


def load_config(path: Union[str, Path, None] = None) -> EngineConfig:
    """Load the engine configuration stored at *path*.

    Missing files give the defaults. Results are cached per path; call
    :func:`clear_config_cache` after editing the file.
    """

    config_path = Path(path) if path is not None else CONFIG_FILE
    if config_path in _CONFIG_CACHE:
        return _CONFIG_CACHE[config_path]

    if config_path.exists():
        with config_path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        if not isinstance(payload, Mapping):
            raise ValueError(f"Config file {config_path} must contain a JSON object")
        config = EngineConfig.from_mapping(payload)
    else:
        config = EngineConfig()
    _CONFIG_CACHE[config_path] = config
    return config


def clear_config_cache() -> None:
    _CONFIG_CACHE.clear()

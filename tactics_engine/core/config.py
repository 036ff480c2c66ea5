"""
Battle configuration.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

# Packaged ability catalog and schemas
DEFAULT_DATA_PATH = Path(__file__).resolve().parents[2] / "tactics_framework" / "data"


class BattleConfig:
    """Configuration for a battle session."""

    def __init__(
        self,
        map_width: int = 13,
        map_height: int = 13,
        ct_threshold: int = 100,
        enforce_jump: bool = True,
        path_iteration_cap: int = 1000,
        data_path: Path | str | None = None,
        load_default_catalog: bool = True,
    ):
        if map_width <= 0 or map_height <= 0:
            raise ValueError(f"Map size must be positive, got {map_width}x{map_height}")
        if ct_threshold <= 0:
            raise ValueError(f"ct_threshold must be positive, got {ct_threshold}")

        self.map_width = map_width
        self.map_height = map_height
        self.ct_threshold = ct_threshold
        self.enforce_jump = enforce_jump
        self.path_iteration_cap = path_iteration_cap
        self.data_path = Path(data_path) if data_path is not None else DEFAULT_DATA_PATH
        self.load_default_catalog = load_default_catalog

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BattleConfig:
        """Build a config from a mapping, rejecting unknown keys."""
        known = {
            "map_width",
            "map_height",
            "ct_threshold",
            "enforce_jump",
            "path_iteration_cap",
            "data_path",
            "load_default_catalog",
        }
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**data)

    def __repr__(self) -> str:
        return (
            f"BattleConfig(map={self.map_width}x{self.map_height}, "
            f"ct_threshold={self.ct_threshold}, enforce_jump={self.enforce_jump})"
        )

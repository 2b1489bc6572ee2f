"""Resource budgets for the three search tiers."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

from backend.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AStarBudget:
    max_iterations: int = 8000
    max_seconds: float = 2.0
    # Neighbours with g + h above h(start) + slack are pruned.
    slack: int = 15
    yield_every: int = 25


@dataclass(frozen=True)
class IDAStarBudget:
    # Deepening stops once the threshold reaches this value.
    max_threshold: int = 70
    max_iterations: int = 30
    max_seconds: float = 6.0
    # Counted in generated nodes.
    yield_every: int = 10


@dataclass(frozen=True)
class FallbackBudget:
    max_states: int = 60000
    max_seconds: float = 15.0
    max_depth: int = 45
    yield_every: int = 100


@dataclass(frozen=True)
class SolverConfig:
    astar: AStarBudget = field(default_factory=AStarBudget)
    ida_star: IDAStarBudget = field(default_factory=IDAStarBudget)
    fallback: FallbackBudget = field(default_factory=FallbackBudget)
    # Seconds slept at every suspension point.
    yield_delay: float = 0.0

    # -- loading --------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SolverConfig:
        """Build a config from a JSON-style dict; omitted keys keep defaults.

        Example::

            SolverConfig.from_dict({"astar": {"max_seconds": 5}})
        """
        config = cls()
        sections = {
            "astar": AStarBudget,
            "ida_star": IDAStarBudget,
            "fallback": FallbackBudget,
        }
        for key, value in data.items():
            if key == "yield_delay":
                if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                    raise ConfigError(f"yield_delay must be a non-negative number, got {value!r}")
                config = replace(config, yield_delay=float(value))
            elif key in sections:
                if not isinstance(value, dict):
                    raise ConfigError(f"Section {key!r} must be an object.")
                budget = _build_budget(sections[key], key, value)
                config = replace(config, **{key: budget})
            else:
                raise ConfigError(f"Unknown config key: {key!r}")
        return config

    @classmethod
    def from_file(cls, path: Path) -> SolverConfig:
        if not path.exists():
            logger.debug("Config file %s not found, using defaults", path)
            return cls()
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a JSON object.")
        return cls.from_dict(data)


def _build_budget(budget_cls: type, section: str, values: dict[str, Any]) -> Any:
    known = {f.name: f.type for f in fields(budget_cls)}
    kwargs: dict[str, Any] = {}
    for name, raw in values.items():
        if name not in known:
            raise ConfigError(f"Unknown key {name!r} in section {section!r}")
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise ConfigError(f"{section}.{name} must be a number, got {raw!r}")
        if known[name] == "float":
            value = float(raw)
        elif isinstance(raw, float) and not raw.is_integer():
            raise ConfigError(f"{section}.{name} must be a whole number, got {raw!r}")
        else:
            value = int(raw)
        if value < 0 or (name == "yield_every" and value == 0):
            raise ConfigError(f"{section}.{name} is out of range: {raw!r}")
        kwargs[name] = value
    return budget_cls(**kwargs)

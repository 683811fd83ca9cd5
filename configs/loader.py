"""Configuration loading and validation utilities for evolution experiments."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from evolution.base import ConfigurationError


_REQUIRED_KEYS: tuple[str, ...] = (
    "population_size",
    "genome_length",
    "generations",
    "seed",
)


@dataclass(frozen=True)
class ExperimentConfig:
    """Validated experiment configuration container.

    Provides typed field access for required parameters and dictionary-style
    access for strategy names and other optional parameters.
    """

    population_size: int
    genome_length: int
    generations: int
    seed: int
    extras: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Return a configuration value by key.

        Args:
            key: Configuration key name.
            default: Value to return if key does not exist.

        Returns:
            Value associated with ``key`` or ``default``.
        """
        if key in _REQUIRED_KEYS:
            return getattr(self, key)
        return self.extras.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        """Return a full dictionary view of the configuration."""
        payload = {
            "population_size": self.population_size,
            "genome_length": self.genome_length,
            "generations": self.generations,
            "seed": self.seed,
        }
        payload.update(self.extras)
        return payload


class ConfigLoader:
    """Load and validate experiment configuration files (YAML or JSON)."""

    @staticmethod
    def load(path: str | Path) -> ExperimentConfig:
        """Load a single experiment config from ``path``."""
        payload = _read_config_payload(path)
        if not isinstance(payload, Mapping):
            raise ConfigurationError("Single config file must contain a mapping object.")
        return build_config(payload)

    @staticmethod
    def load_many(path: str | Path) -> list[ExperimentConfig]:
        """Load one or many experiment configs from ``path``.

        Supports:
            - top-level mapping for single experiment
            - top-level list of mappings
            - top-level mapping with an ``experiments`` list
        """
        payload = _read_config_payload(path)

        if isinstance(payload, list):
            return [build_config(item) for item in payload]

        if isinstance(payload, Mapping) and "experiments" in payload:
            experiments = payload["experiments"]
            if not isinstance(experiments, list):
                raise ConfigurationError("'experiments' must be a list of mappings.")
            return [build_config(item) for item in experiments]

        if isinstance(payload, Mapping):
            return [build_config(payload)]

        raise ConfigurationError("Unsupported config file structure.")


def _read_config_payload(path: str | Path) -> Any:
    """Read raw config payload from JSON or YAML file."""
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")
    suffix = config_path.suffix.lower()
    content = config_path.read_text(encoding="utf-8")

    if suffix == ".json":
        return json.loads(content)

    if suffix in {".yaml", ".yml"}:
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Failed to parse YAML config '{config_path}': {exc}") from exc

    raise ConfigurationError(f"Unsupported config extension: {suffix}")


def build_config(payload: Mapping[str, Any]) -> ExperimentConfig:
    """Validate raw mapping and build ``ExperimentConfig``."""
    if not isinstance(payload, Mapping):
        raise ConfigurationError("Experiment config must be a mapping.")
    missing = [key for key in _REQUIRED_KEYS if key not in payload]
    if missing:
        raise ConfigurationError(f"Missing required config keys: {', '.join(missing)}")

    population_size = int(payload["population_size"])
    genome_length = int(payload["genome_length"])
    generations = int(payload["generations"])
    seed = int(payload["seed"])

    if population_size < 2:
        raise ConfigurationError("population_size must be >= 2")
    if genome_length < 1:
        raise ConfigurationError("genome_length must be >= 1")
    if generations < 0:
        raise ConfigurationError("generations must be >= 0")

    extras = {k: v for k, v in payload.items() if k not in _REQUIRED_KEYS}

    return ExperimentConfig(
        population_size=population_size,
        genome_length=genome_length,
        generations=generations,
        seed=seed,
        extras=extras,
    )

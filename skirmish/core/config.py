"""
Configuration module for the combat resolver.

Holds the tunable numbers of the engine and loads them from a JSON file.
"""

import json
from pathlib import Path
from typing import Any

from catchery import log_warning
from pydantic import BaseModel, ConfigDict, Field


class CombatSettings(BaseModel):
    """Tunable parameters of an encounter."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    seed: int | None = Field(
        default=None,
        description="Seed for the default random source; None for entropy",
    )
    low_hp_ratio: float = Field(
        default=0.25,
        ge=0.0,
        le=1.0,
        description="HP ratio below which an adversary may turn defensive",
    )
    defend_chance: float = Field(
        default=0.30,
        ge=0.0,
        le=1.0,
        description="Probability that a low-HP adversary defends",
    )
    confirm_critical_hits: bool = Field(
        default=True,
        description="Roll to confirm natural 20s and double damage dice",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level name",
    )
    max_rounds: int = Field(
        default=50,
        ge=1,
        description="Rounds after which an automated encounter is aborted",
    )


DEFAULT_SETTINGS = CombatSettings()


def load_settings(path: Path | None, **overrides: Any) -> CombatSettings:
    """
    Loads settings from a JSON file.

    Args:
        path (Path | None):
            The JSON file to read. A missing file logs a warning and falls
            back to the defaults.
        **overrides:
            Values that take precedence over the file (e.g. a CLI --seed).

    Returns:
        CombatSettings: The validated settings.

    Raises:
        pydantic.ValidationError: If the file content is not valid.
        json.JSONDecodeError: If the file is not valid JSON.

    """
    data: dict[str, Any] = {}
    if path is not None:
        if path.exists():
            with path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        else:
            log_warning(
                f"Settings file not found, using defaults: {path}",
                {"path": str(path)},
            )
    data.update({key: value for key, value in overrides.items() if value is not None})
    return CombatSettings.model_validate(data)

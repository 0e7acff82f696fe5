"""Domain representations for scheduling rules and loaders."""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources

from pydantic import BaseModel, Field


class StreakRules(BaseModel):
    max_consecutive_working_days: int = Field(default=5, ge=1)
    forced_rest_days: int = Field(default=2, ge=1)


class FairnessRules(BaseModel):
    closing_spread_tolerance: int = Field(default=2, ge=0)


class SchedulingRules(BaseModel):
    streaks: StreakRules = Field(default_factory=StreakRules)
    fairness: FairnessRules = Field(default_factory=FairnessRules)


@dataclass(frozen=True)
class RuleSet:
    """Wrapper used by the scheduler to access typed rules."""

    rules: SchedulingRules
    name: str = "Default Rule Set"
    version: str = "v1"


def _load_rules_from_json() -> RuleSet:
    with resources.files("shift_planner.services.data").joinpath("default_rules.json").open(
        "r", encoding="utf-8"
    ) as handle:
        payload = json.load(handle)
    return RuleSet(
        rules=SchedulingRules.model_validate(payload["rules"]),
        name=payload.get("name", "Default Rule Set"),
        version=payload.get("version", "v1"),
    )


@lru_cache(maxsize=1)
def load_default_rules() -> RuleSet:
    """Return the default rule set bundled with the application."""

    return _load_rules_from_json()

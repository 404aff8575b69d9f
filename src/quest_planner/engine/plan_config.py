"""Run configuration for the path finder.

Defaults plan for a members account with no mode restrictions and lets
the lamp heuristic choose every lamp skill. The persisted form is a flat
key/value record; absent keys take the defaults.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from quest_planner.logging_config import get_logger
from quest_planner.models.constants import Skill

if TYPE_CHECKING:
    from quest_planner.graph.quest_graph import QuestCatalogue

logger = get_logger(__name__)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes", "on")


def parse_lamp_skills(values: Iterable[str]) -> frozenset[Skill]:
    """Parse skill names, skipping (and logging) any that are unknown."""
    skills: set[Skill] = set()
    for raw in values:
        if not raw.strip():
            continue
        try:
            skills.add(Skill.from_name(raw))
        except ValueError:
            logger.warning("Ignoring unknown lamp skill: %r", raw)
    return frozenset(skills)


@dataclass(slots=True)
class PlanConfig:
    """Tuneable parameters for one planning run."""

    name: str | None = None
    ironman: bool = False
    recommended: bool = False
    members: bool = True
    # Skills every lamp is forced onto; empty lets the heuristic choose.
    lamp_skills: frozenset[Skill] = field(default_factory=frozenset)

    def to_properties(self) -> dict[str, str]:
        props: dict[str, str] = {
            "ironman": str(self.ironman).lower(),
            "recommended": str(self.recommended).lower(),
            "members": str(self.members).lower(),
        }
        if self.name:
            props["name"] = self.name
        if self.lamp_skills:
            props["lampSkills"] = ",".join(s.name for s in sorted(self.lamp_skills))
        return props

    @classmethod
    def from_properties(cls, props: Mapping[str, Any]) -> PlanConfig:
        raw_skills = props.get("lampSkills", "")
        if isinstance(raw_skills, str):
            raw_skills = raw_skills.split(",")
        return cls(
            name=props.get("name") or None,
            ironman=_parse_bool(props.get("ironman", False)),
            recommended=_parse_bool(props.get("recommended", False)),
            members=_parse_bool(props.get("members", True)),
            lamp_skills=parse_lamp_skills(str(s) for s in raw_skills),
        )


def load_plan_config(path: Path) -> PlanConfig:
    """Read a saved config; a missing file yields the defaults."""
    if not path.exists():
        return PlanConfig()
    payload = json.loads(path.read_text())
    if not isinstance(payload, dict):
        raise ValueError(f"Settings file {path} must contain a JSON object")
    return PlanConfig.from_properties(payload)


def save_plan_config(config: PlanConfig, path: Path) -> None:
    path.write_text(json.dumps(config.to_properties(), indent=2, sort_keys=True))


@dataclass(frozen=True, slots=True)
class PlanContext:
    """Everything a planning run reads but never mutates."""

    catalogue: QuestCatalogue
    config: PlanConfig = field(default_factory=PlanConfig)

    @property
    def mode_flags(self) -> tuple[bool, bool, bool]:
        """(ironman, recommended, members) in eligibility-call order."""
        return (self.config.ironman, self.config.recommended, self.config.members)

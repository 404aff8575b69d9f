"""Decode the JSON quest catalogue into Quest records.

Lamp requirement maps accept three key shapes:

  "*": level          any single skill at *level* (one entry per skill)
  "&": level          every skill at once, at *level*
  "ATTACK,STRENGTH"   that exact skill set at the given level

Decoding expands the shorthands into the canonical skill-set map;
encoding collapses a canonical map back to the shortest shape, so
decode(encode(m)) == m for any canonical map.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from quest_planner.graph.quest_graph import CatalogueError, QuestCatalogue
from quest_planner.models.constants import ALL_SKILLS, Skill
from quest_planner.models.lamp import LampReward, LampType, SkillSet, UnknownLampTypeError
from quest_planner.models.quest import Quest, QuestPriority, QuestRewards
from quest_planner.models.requirement import (
    QuestPointsRequirement,
    QuestRequirement,
    SkillRequirement,
)

ANY_SKILL = "*"
ALL_SKILLS_KEY = "&"


# ---------------------------------------------------------------------------
# Lamp requirement shapes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PerSkill:
    """Explicit skill-set keys."""

    levels: Mapping[SkillSet, int]


@dataclass(frozen=True, slots=True)
class AnySkill:
    """Any one skill at ``level``."""

    level: int


@dataclass(frozen=True, slots=True)
class AllSkills:
    """All skills together at ``level``."""

    level: int


LampRequirementShape = PerSkill | AnySkill | AllSkills


def _parse_int_like(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("bool is not a valid integer value")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        return int(value.strip(), 0)
    raise ValueError(f"Expected integer-like value, got: {value!r}")


def _object(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    """JSON object under *key*; absent or null reads as empty."""
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"{key!r} must be an object, got: {value!r}")
    return value


def _array(data: Mapping[str, Any], key: str) -> list[Any]:
    """JSON list under *key*; absent or null reads as empty."""
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{key!r} must be a list, got: {value!r}")
    return value


def _parse_skill_set(key: str) -> SkillSet:
    return frozenset(Skill.from_name(part) for part in key.split(","))


def expand_lamp_requirements(shape: LampRequirementShape) -> dict[SkillSet, int]:
    """Canonical skill-set map for a requirement shape."""
    if isinstance(shape, AnySkill):
        return {frozenset({skill}): shape.level for skill in Skill}
    if isinstance(shape, AllSkills):
        return {frozenset(ALL_SKILLS): shape.level}
    if isinstance(shape, PerSkill):
        return dict(shape.levels)
    raise TypeError(f"Unsupported lamp requirement shape: {shape!r}")  # pragma: no cover


def classify_lamp_requirements(requirements: Mapping[SkillSet, int]) -> LampRequirementShape:
    """Detect the any-skill / all-skills shorthands in a canonical map."""
    levels = set(requirements.values())
    if (
        len(requirements) == len(ALL_SKILLS)
        and len(levels) == 1
        and all(len(skills) == 1 for skills in requirements)
        and frozenset().union(*requirements) == ALL_SKILLS
    ):
        return AnySkill(levels.pop())
    if len(requirements) == 1:
        [(skills, level)] = requirements.items()
        if skills == ALL_SKILLS:
            return AllSkills(level)
    return PerSkill(dict(requirements))


def decode_lamp_requirements(
    raw: Mapping[str, Any] | None,
    lamp_id: int | None = None,
) -> dict[SkillSet, int]:
    """Expand a JSON requirement object into the canonical map.

    A missing object means any skill at level 1.
    """
    if raw is None:
        return expand_lamp_requirements(AnySkill(1))
    if not isinstance(raw, Mapping):
        raise CatalogueError(f"Lamp {lamp_id}: requirements must be an object, got: {raw!r}")
    requirements: dict[SkillSet, int] = {}
    for key, value in raw.items():
        try:
            level = _parse_int_like(value)
            text = key.strip().upper()
            if text == ANY_SKILL:
                shape: LampRequirementShape = AnySkill(level)
            elif text == ALL_SKILLS_KEY:
                shape = AllSkills(level)
            else:
                shape = PerSkill({_parse_skill_set(text): level})
        except ValueError as exc:
            raise CatalogueError(f"Lamp {lamp_id}: bad requirement {key!r}: {exc}") from exc
        requirements.update(expand_lamp_requirements(shape))
    return requirements


def encode_lamp_requirements(requirements: Mapping[SkillSet, int]) -> dict[str, int]:
    """Collapse a canonical map into its JSON object form."""
    shape = classify_lamp_requirements(requirements)
    if isinstance(shape, AnySkill):
        return {ANY_SKILL: shape.level}
    if isinstance(shape, AllSkills):
        return {ALL_SKILLS_KEY: shape.level}
    return {
        ",".join(s.name for s in sorted(skills)): level
        for skills, level in shape.levels.items()
    }


# ---------------------------------------------------------------------------
# Quest records
# ---------------------------------------------------------------------------


def _parse_lamp(data: Any) -> LampReward:
    if not isinstance(data, Mapping):
        raise ValueError(f"Lamp entry must be an object, got: {data!r}")
    lamp_id = _parse_int_like(data.get("id", 0))
    raw_type = str(data.get("type", LampType.XP.value)).strip().upper()
    try:
        lamp_type = LampType(raw_type)
    except ValueError:
        raise UnknownLampTypeError(lamp_id, raw_type) from None
    return LampReward(
        id=lamp_id,
        type=lamp_type,
        xp=float(data.get("xp", 0)),
        requirements=decode_lamp_requirements(data.get("requirements"), lamp_id),
        exclusive=bool(data.get("exclusive", False)),
        single_choice=bool(data.get("singleChoice", False)),
        multiplier=float(data.get("multiplier", 1)),
    )


def _parse_skill_requirement(entry: Mapping[str, Any]) -> SkillRequirement:
    return SkillRequirement(
        skill=Skill.from_name(str(entry["skill"])),
        level=_parse_int_like(entry["level"]),
        ironman=bool(entry.get("ironman", False)),
        recommended=bool(entry.get("recommended", False)),
    )


def _parse_quest_requirement(entry: Any) -> QuestRequirement:
    if isinstance(entry, Mapping):
        return QuestRequirement(
            quest_id=_parse_int_like(entry["id"]),
            ironman=bool(entry.get("ironman", False)),
            recommended=bool(entry.get("recommended", False)),
        )
    return QuestRequirement(quest_id=_parse_int_like(entry))


def _parse_rewards(data: Mapping[str, Any]) -> QuestRewards:
    xp = {
        Skill.from_name(name): float(amount)
        for name, amount in _object(data, "xp").items()
    }
    lamps = tuple(_parse_lamp(entry) for entry in _array(data, "lamps"))
    return QuestRewards(
        xp=xp,
        quest_points=_parse_int_like(data.get("questPoints", 0)),
        lamps=lamps,
    )


def quest_from_dict(data: Mapping[str, Any]) -> Quest:
    """Decode one quest object; raises CatalogueError naming the quest."""
    quest_id = data.get("id")
    try:
        quest_id = _parse_int_like(quest_id)
        reqs = _object(data, "requirements")
        qp_raw = reqs.get("questPoints")
        return Quest(
            id=quest_id,
            title=str(data.get("title", "")),
            display_name=str(data.get("displayName", "")),
            members=bool(data.get("members", False)),
            ironman_eligible=bool(data.get("ironman", True)),
            priority=QuestPriority[str(data.get("priority", "NORMAL")).strip().upper()],
            skill_requirements=tuple(
                _parse_skill_requirement(e) for e in _array(reqs, "skills")
            ),
            quest_requirements=tuple(
                _parse_quest_requirement(e) for e in _array(reqs, "quests")
            ),
            quest_points_requirement=(
                QuestPointsRequirement(_parse_int_like(qp_raw)) if qp_raw is not None else None
            ),
            rewards=_parse_rewards(_object(data, "rewards")),
        )
    except (CatalogueError, UnknownLampTypeError):
        raise
    except (KeyError, TypeError, ValueError) as exc:
        raise CatalogueError(f"Quest {quest_id}: {exc}") from exc


def parse_catalogue(payload: Any) -> QuestCatalogue:
    """Build a validated catalogue from a JSON list of quest objects."""
    if isinstance(payload, Mapping):
        payload = payload.get("quests")
    if not isinstance(payload, list):
        raise CatalogueError("Quest catalogue must be a JSON list of quest objects")
    quests: list[Quest] = []
    for entry in payload:
        if not isinstance(entry, Mapping):
            raise CatalogueError(f"Each quest entry must be an object, got: {entry!r}")
        quests.append(quest_from_dict(entry))
    return QuestCatalogue.build(quests)


def load_catalogue(path: Path) -> QuestCatalogue:
    return parse_catalogue(json.loads(path.read_text()))

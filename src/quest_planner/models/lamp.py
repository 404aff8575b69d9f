"""Lamp reward data model.

A lamp grants experience in a skill chosen when it is used. Which skills
are eligible comes from a requirement map keyed by skill sets; how much
experience it grants is either a flat amount or a per-level curve.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Set
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from quest_planner.models.constants import (
    HUGE_XP_LAMP_VALUES,
    INVENTION_UNLOCK_LEVEL,
    INVENTION_UNLOCK_SKILLS,
    LAMP_TABLE_MAX_LEVEL,
    LARGE_XP_LAMP_VALUES,
    MEDIUM_XP_LAMP_VALUES,
    SMALL_XP_LAMP_VALUES,
    Skill,
)

if TYPE_CHECKING:
    from quest_planner.models.player import Player


SkillSet = frozenset[Skill]


class LampType(Enum):
    """Experience policy tag for a lamp."""
    XP = "XP"
    SMALL_XP = "SMALL_XP"
    MEDIUM_XP = "MEDIUM_XP"
    LARGE_XP = "LARGE_XP"
    HUGE_XP = "HUGE_XP"
    DRAGONKIN = "DRAGONKIN"


_LAMP_TABLES: dict[LampType, tuple[int, ...]] = {
    LampType.SMALL_XP: SMALL_XP_LAMP_VALUES,
    LampType.MEDIUM_XP: MEDIUM_XP_LAMP_VALUES,
    LampType.LARGE_XP: LARGE_XP_LAMP_VALUES,
    LampType.HUGE_XP: HUGE_XP_LAMP_VALUES,
}


class DynamicLampRewardError(ValueError):
    """A level-scaled lamp was applied to more than one skill."""

    def __init__(self, lamp_id: int, skills: Set[Skill]) -> None:
        names = ", ".join(s.name for s in sorted(skills))
        super().__init__(
            f"Lamp {lamp_id} scales with level and can only be used on one skill, "
            f"got: {names or 'none'}"
        )
        self.lamp_id = lamp_id
        self.skills = frozenset(skills)


class UnknownLampTypeError(ValueError):
    """A lamp carries a type with no experience policy."""

    def __init__(self, lamp_id: int, lamp_type: object) -> None:
        super().__init__(f"Unknown lamp type for lamp {lamp_id}: {lamp_type!r}")
        self.lamp_id = lamp_id
        self.lamp_type = lamp_type


def _default_requirements() -> dict[SkillSet, int]:
    """Any skill at level 1."""
    return {frozenset({skill}): 1 for skill in Skill}


def dragonkin_xp(level: int) -> float:
    return math.floor((level ** 3 - 2 * level ** 2 + 100 * level) / 20)


def _meets_skill_level(player: Player, skill: Skill, level: int) -> bool:
    """Level check with the invention cross-skill unlock folded in."""
    if skill == Skill.INVENTION and any(
        player.get_level(s) < INVENTION_UNLOCK_LEVEL for s in INVENTION_UNLOCK_SKILLS
    ):
        return False
    return player.get_level(skill) >= level


@dataclass(frozen=True, slots=True)
class LampReward:
    """A lamp attached to a quest's rewards.

    ``requirements`` maps a skill set to the level every skill in it must
    reach for that set to be a valid choice. ``exclusive`` lamps sharing an
    id cannot be spent twice on the same choice; ``single_choice`` lamps
    expand multi-skill keys into one choice per skill.
    """
    id: int
    type: LampType = LampType.XP
    xp: float = 0.0
    requirements: Mapping[SkillSet, int] = field(default_factory=_default_requirements)
    exclusive: bool = False
    single_choice: bool = False
    multiplier: float = 1.0

    def __post_init__(self) -> None:
        if self.multiplier < 0:
            raise ValueError(f"Lamp {self.id} multiplier must be >= 0, got {self.multiplier}")

    def __hash__(self) -> int:
        return hash((self.id, self.type, self.xp, self.exclusive, self.single_choice))

    @property
    def is_dynamic(self) -> bool:
        """True when the xp amount scales with the chosen skill's level."""
        return self.type is not LampType.XP

    def get_choices(
        self,
        player: Player,
        previous_choices: Set[SkillSet] = frozenset(),
    ) -> set[SkillSet]:
        """Return the skill sets this lamp can currently be spent on."""
        if self.single_choice:
            options: dict[SkillSet, int] = {}
            for skills, level in self.requirements.items():
                for skill in skills:
                    options[frozenset({skill})] = level
        else:
            options = dict(self.requirements)

        return {
            skills
            for skills, level in options.items()
            if all(_meets_skill_level(player, s, level) for s in skills)
            and not (self.exclusive and skills in previous_choices)
        }

    def get_xp_for_skills(self, player: Player, skills: Set[Skill]) -> float:
        """Experience this lamp grants to each skill in *skills*."""
        if self.type is LampType.XP:
            amount = self.xp
        elif len(skills) != 1:
            raise DynamicLampRewardError(self.id, skills)
        else:
            (skill,) = skills
            level = player.get_level(skill)
            if self.type is LampType.DRAGONKIN:
                amount = dragonkin_xp(level)
            elif self.type in _LAMP_TABLES:
                amount = _LAMP_TABLES[self.type][min(LAMP_TABLE_MAX_LEVEL, level) - 1]
            else:
                raise UnknownLampTypeError(self.id, self.type)  # pragma: no cover
        return amount * self.multiplier

    def meets_requirements(self, player: Player) -> bool:
        """True if at least one requirement key is fully satisfied."""
        if not self.requirements:
            return True
        return any(
            all(_meets_skill_level(player, s, level) for s in skills)
            for skills, level in self.requirements.items()
        )

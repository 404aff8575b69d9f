"""Quest requirement data model.

A requirement is a predicate over player state. Requirements flagged
``ironman`` only apply when planning in ironman mode, and requirements
flagged ``recommended`` only apply in recommended mode; inactive
requirements always pass.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from quest_planner.models.constants import Skill

if TYPE_CHECKING:
    from quest_planner.models.player import Player


@dataclass(frozen=True, slots=True)
class SkillRequirement:
    """Requires a skill at a minimum level.

    Examples: Attack >= 10, Crafting >= 80
    """
    skill: Skill
    level: int
    ironman: bool = False
    recommended: bool = False

    def __post_init__(self) -> None:
        if self.level < 1:
            raise ValueError(
                f"Skill requirement level must be >= 1, got {self.level} for {self.skill.name}"
            )

    def is_active(self, ironman: bool, recommended: bool) -> bool:
        return (not self.ironman or ironman) and (not self.recommended or recommended)

    def test(self, player: Player, ironman: bool = False, recommended: bool = False) -> bool:
        if not self.is_active(ironman, recommended):
            return True
        return player.get_level(self.skill) >= self.level

    def __str__(self) -> str:
        return f"{self.level} {self.skill.display_name}"


@dataclass(frozen=True, slots=True)
class QuestRequirement:
    """Requires another quest to be completed."""
    quest_id: int
    ironman: bool = False
    recommended: bool = False

    def is_active(self, ironman: bool, recommended: bool) -> bool:
        return (not self.ironman or ironman) and (not self.recommended or recommended)

    def test(self, player: Player, ironman: bool = False, recommended: bool = False) -> bool:
        if not self.is_active(ironman, recommended):
            return True
        return player.is_quest_completed(self.quest_id)


@dataclass(frozen=True, slots=True)
class QuestPointsRequirement:
    """Requires a minimum quest point total."""
    amount: int
    ironman: bool = False
    recommended: bool = False

    def is_active(self, ironman: bool, recommended: bool) -> bool:
        return (not self.ironman or ironman) and (not self.recommended or recommended)

    def test(self, player: Player, ironman: bool = False, recommended: bool = False) -> bool:
        if not self.is_active(ironman, recommended):
            return True
        return player.quest_points >= self.amount


# Union of all evaluatable requirement types.
Requirement = SkillRequirement | QuestRequirement | QuestPointsRequirement


def describe_requirement(req: Requirement) -> str:
    """Return a short human-readable label for a single requirement."""
    if isinstance(req, SkillRequirement):
        return f"{req.skill.display_name} >= {req.level}"
    if isinstance(req, QuestRequirement):
        return f"Quest {req.quest_id}"
    if isinstance(req, QuestPointsRequirement):
        return f"Quest points >= {req.amount}"
    raise TypeError(f"Unsupported requirement: {req!r}")  # pragma: no cover


def amalgamate_requirements(
    current: Iterable[SkillRequirement],
    incoming: Iterable[SkillRequirement],
) -> list[SkillRequirement]:
    """Merge two skill requirement sets, keeping the higher level per skill.

    Output is ordered by skill id. Merging a set with itself is a no-op.
    """
    by_skill: dict[Skill, SkillRequirement] = {}
    for req in (*current, *incoming):
        existing = by_skill.get(req.skill)
        if existing is None or req.level > existing.level:
            by_skill[req.skill] = req
    return [by_skill[skill] for skill in sorted(by_skill)]

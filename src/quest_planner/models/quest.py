"""Quest catalogue entry with typed requirements and rewards."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING

from quest_planner.models.constants import Skill
from quest_planner.models.lamp import LampReward
from quest_planner.models.requirement import (
    QuestPointsRequirement,
    QuestRequirement,
    SkillRequirement,
    amalgamate_requirements,
)

if TYPE_CHECKING:
    from quest_planner.models.player import Player


class QuestPriority(IntEnum):
    """Configured ranking weight; higher is picked first."""
    MINIMUM = 0
    LOW = 1
    NORMAL = 2
    HIGH = 3
    MAXIMUM = 4


@dataclass(frozen=True, slots=True)
class QuestRewards:
    """Everything granted on completing a quest."""
    xp: Mapping[Skill, float] = field(default_factory=dict)
    quest_points: int = 0
    lamps: tuple[LampReward, ...] = ()

    def __hash__(self) -> int:
        return hash((self.quest_points, self.lamps))


@dataclass(frozen=True, slots=True)
class Quest:
    """A catalogue quest.

    Negative ids denote placeholder quests: pre-satisfied gates that are
    completed automatically before planning starts.
    """
    id: int
    title: str = ""
    display_name: str = ""
    members: bool = False
    ironman_eligible: bool = True
    priority: QuestPriority = QuestPriority.NORMAL

    skill_requirements: tuple[SkillRequirement, ...] = ()
    quest_requirements: tuple[QuestRequirement, ...] = ()
    quest_points_requirement: QuestPointsRequirement | None = None

    rewards: QuestRewards = field(default_factory=QuestRewards)

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return self.name

    @property
    def name(self) -> str:
        """Display name, falling back to the title."""
        return self.display_name or self.title or f"Quest {self.id}"

    @property
    def is_placeholder(self) -> bool:
        return self.id < 0

    @property
    def lamp_rewards(self) -> tuple[LampReward, ...]:
        return self.rewards.lamps

    # --- Eligibility ---------------------------------------------------------

    def is_excluded(self, *, ironman: bool = False, members: bool = True) -> bool:
        """True if the run mode rules this quest out entirely."""
        if self.members and not members:
            return True
        return ironman and not self.ironman_eligible

    def has_skill_requirements(
        self, player: Player, ironman: bool = False, recommended: bool = False
    ) -> bool:
        return all(r.test(player, ironman, recommended) for r in self.skill_requirements)

    def has_quest_requirements(
        self, player: Player, ironman: bool = False, recommended: bool = False
    ) -> bool:
        return all(r.test(player, ironman, recommended) for r in self.quest_requirements)

    def has_other_requirements(
        self,
        player: Player,
        ironman: bool = False,
        recommended: bool = False,
        members: bool = True,
    ) -> bool:
        if self.is_excluded(ironman=ironman, members=members):
            return False
        qp = self.quest_points_requirement
        return qp is None or qp.test(player, ironman, recommended)

    def has_requirements(
        self,
        player: Player,
        ironman: bool = False,
        recommended: bool = False,
        members: bool = True,
    ) -> bool:
        return (
            self.has_other_requirements(player, ironman, recommended, members)
            and self.has_quest_requirements(player, ironman, recommended)
            and self.has_skill_requirements(player, ironman, recommended)
        )

    def meets_lamp_requirements(self, player: Player) -> bool:
        """True if every lamp reward can be spent by *player* right now."""
        return all(lamp.meets_requirements(player) for lamp in self.lamp_rewards)

    def get_remaining_skill_requirements(
        self, player: Player, ironman: bool = False, recommended: bool = False
    ) -> list[SkillRequirement]:
        """Unmet skill requirements, one per skill at the highest level needed."""
        unmet = [
            r for r in self.skill_requirements
            if not r.test(player, ironman, recommended)
        ]
        return amalgamate_requirements(unmet, [])

    def get_priority(
        self, player: Player, ironman: bool = False, recommended: bool = False
    ) -> tuple[int, int, int]:
        """Ranking key among eligible quests: larger is better.

        Configured priority first, then quest point reward, then fewer
        active requirements.
        """
        active = sum(
            1
            for r in (*self.skill_requirements, *self.quest_requirements)
            if r.is_active(ironman, recommended)
        )
        return (int(self.priority), self.rewards.quest_points, -active)

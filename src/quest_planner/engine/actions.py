"""Plan actions: one record per simulated state transition.

Actions form a closed set of variants (train, quest, lamp). Each variant
is an immutable record that can describe itself, re-apply itself to a
player, and be rebound to a different player. The player reference is for
display only and takes no part in equality.
"""

from __future__ import annotations

from collections.abc import Set
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any

from quest_planner.models.constants import Skill
from quest_planner.models.lamp import LampReward
from quest_planner.models.quest import Quest
from quest_planner.models.skill_xp import level_for_xp

if TYPE_CHECKING:
    from quest_planner.engine.plan_config import PlanContext
    from quest_planner.models.player import Player


class ActionType(Enum):
    TRAIN = "TRAIN"
    QUEST = "QUEST"
    LAMP = "LAMP"


def _skill_list(skills: Set[Skill]) -> str:
    return ", ".join(s.display_name for s in sorted(skills))


@dataclass(frozen=True, slots=True)
class TrainAction:
    """Train *skill* from *from_xp* up to *to_xp*."""

    player: Player = field(compare=False, repr=False)
    skill: Skill
    from_xp: float
    to_xp: float
    future: bool = False

    @property
    def type(self) -> ActionType:
        return ActionType.TRAIN

    @property
    def message(self) -> str:
        gained = self.to_xp - self.from_xp
        start = level_for_xp(self.skill, self.from_xp)
        end = level_for_xp(self.skill, self.to_xp)
        return (
            f"{self.skill.display_name}: {start} -> {end} "
            f"({gained:,.0f} xp)"
        )

    def meets_requirements(self, player: Player) -> bool:
        return True

    def process(self, player: Player, context: PlanContext | None = None) -> None:
        player.set_experience(self.skill, self.to_xp)

    def copy_for_player(self, player: Player) -> TrainAction:
        return replace(self, player=player)

    def to_dict(self) -> dict[str, Any]:
        return action_to_dict(self)

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class QuestAction:
    """Complete *quest*."""

    player: Player = field(compare=False, repr=False)
    quest: Quest
    future: bool = False

    @property
    def type(self) -> ActionType:
        return ActionType.QUEST

    @property
    def message(self) -> str:
        return self.quest.name

    def meets_requirements(self, player: Player, context: PlanContext | None = None) -> bool:
        if context is None:
            return self.quest.has_requirements(player)
        cfg = context.config
        return self.quest.has_requirements(player, cfg.ironman, cfg.recommended, cfg.members)

    def process(self, player: Player, context: PlanContext | None = None) -> None:
        if player.is_quest_completed(self.quest.id):
            return
        player.complete_quest(self.quest, context, spend_lamps=False)

    def copy_for_player(self, player: Player) -> QuestAction:
        return replace(self, player=player)

    def to_dict(self) -> dict[str, Any]:
        return action_to_dict(self)

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class LampAction:
    """Spend the lamp in *slot* of *quest*'s rewards on *skills*.

    ``future`` marks an action produced while exploring a hypothetical
    branch rather than one that belongs to the plan.
    """

    player: Player = field(compare=False, repr=False)
    quest: Quest
    lamp: LampReward
    skills: frozenset[Skill]
    xp: float
    slot: int = 0
    future: bool = False

    @property
    def type(self) -> ActionType:
        return ActionType.LAMP

    @property
    def message(self) -> str:
        return (
            f"{self.quest.name}: Use XP Lamp on {_skill_list(self.skills)} "
            f"({self.xp:,.0f} xp)"
        )

    def meets_requirements(self, player: Player) -> bool:
        return self.lamp.meets_requirements(player)

    def process(self, player: Player, context: PlanContext | None = None) -> None:
        if player.has_spent_lamp(self.quest.id, self.slot):
            return
        player.record_lamp(self.quest.id, self.slot, self.lamp, self.skills)
        for skill in sorted(self.skills):
            player.add_experience(skill, self.xp)

    def copy_for_player(self, player: Player) -> LampAction:
        return replace(self, player=player)

    def to_dict(self) -> dict[str, Any]:
        return action_to_dict(self)

    def __str__(self) -> str:
        return self.message


Action = TrainAction | QuestAction | LampAction


def action_to_dict(action: Action) -> dict[str, Any]:
    """JSON-safe view of an action with a ``type`` discriminant."""
    payload: dict[str, Any] = {
        "type": action.type.value,
        "message": action.message,
        "future": action.future,
    }
    if isinstance(action, TrainAction):
        payload.update(
            skill=action.skill.name,
            from_xp=action.from_xp,
            to_xp=action.to_xp,
        )
    elif isinstance(action, QuestAction):
        payload.update(quest_id=action.quest.id, quest=action.quest.name)
    elif isinstance(action, LampAction):
        payload.update(
            quest_id=action.quest.id,
            quest=action.quest.name,
            lamp_id=action.lamp.id,
            skills=[s.name for s in sorted(action.skills)],
            xp=action.xp,
        )
    else:
        raise TypeError(f"Unsupported action: {action!r}")  # pragma: no cover
    return payload

"""Planner output: ordered actions plus completion statistics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from quest_planner.engine.actions import Action
from quest_planner.graph.quest_graph import QuestCatalogue
from quest_planner.models.player import Player


@dataclass(frozen=True, slots=True)
class PathStats:
    """Completion statistics derived once, when the path is built."""

    percent_complete: float
    quest_points: int = 0
    quests_completed: int = 0
    quests_total: int = 0
    total_level: int = 0
    combat_level: int = 0

    @property
    def quests_remaining(self) -> int:
        return self.quests_total - self.quests_completed

    @classmethod
    def from_player(cls, player: Player, catalogue: QuestCatalogue) -> PathStats:
        """Compute stats for *player* against every non-placeholder quest."""
        real = catalogue.real_quests
        completed = sum(1 for q in real if player.is_quest_completed(q.id))
        total = len(real)
        percent = 100.0 if total == 0 else completed / total * 100
        return cls(
            percent_complete=min(100.0, max(0.0, percent)),
            quest_points=player.quest_points,
            quests_completed=completed,
            quests_total=total,
            total_level=player.total_level,
            combat_level=player.combat_level,
        )


@dataclass(frozen=True, slots=True)
class Path:
    """Actions in execution order plus their stats."""

    actions: tuple[Action, ...]
    stats: PathStats

    def __len__(self) -> int:
        return len(self.actions)

    def to_dict(self) -> dict[str, Any]:
        return {
            "actions": [a.to_dict() for a in self.actions],
            "stats": {
                "percent_complete": self.stats.percent_complete,
                "quest_points": self.stats.quest_points,
                "quests_completed": self.stats.quests_completed,
                "quests_total": self.stats.quests_total,
                "quests_remaining": self.stats.quests_remaining,
                "total_level": self.stats.total_level,
                "combat_level": self.stats.combat_level,
            },
        }

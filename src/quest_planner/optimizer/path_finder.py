"""Greedy quest path finder.

Repeatedly picks the next quest to complete, trains any skill gaps it
needs, and completes it, until no open quest is left:

1. Placeholder quests (negative ids) are completed up front and produce no
   actions. Quests the run mode excludes are dropped from the open set.
2. Best pass: among open quests whose requirements and lamp requirements
   are met, take the highest priority (earliest in the catalogue on ties).
3. Closest pass: failing that, among open quests with their quest and
   other requirements met and lamp requirements met, take the one with the
   smallest sum of remaining skill levels and emit a train action per gap.
   Lamp eligibility is checked once, before that training.
4. If neither pass finds a quest the catalogue cannot be completed and
   QuestNotFoundError is raised.

This is a single deterministic pass, not a search for the shortest plan.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from quest_planner.engine.actions import Action, TrainAction
from quest_planner.engine.plan_config import PlanConfig, PlanContext
from quest_planner.graph.quest_graph import QuestCatalogue
from quest_planner.logging_config import get_logger
from quest_planner.models.player import Player
from quest_planner.models.quest import Quest
from quest_planner.models.skill_xp import xp_at
from quest_planner.optimizer.path import Path, PathStats

logger = get_logger(__name__)


class QuestNotFoundError(Exception):
    """No open quest can be reached: the catalogue's requirements are unsatisfiable."""

    def __init__(self, open_ids: list[int]) -> None:
        super().__init__(f"Unable to find next quest; open quests: {open_ids}")
        self.open_ids = list(open_ids)


class ActionSink(Protocol):
    """Append-only receiver for actions as they are produced."""

    def append(self, action: Action) -> None:
        ...


class PathFinder:
    """Plans one run against a fixed catalogue and configuration."""

    __slots__ = ("_context",)

    def __init__(self, context: PlanContext) -> None:
        self._context = context

    @property
    def context(self) -> PlanContext:
        return self._context

    def find(self, player: Player, sink: ActionSink | None = None) -> Path:
        """Plan from *player*'s baseline state; *player* is mutated in place."""
        catalogue = self._context.catalogue
        cfg = self._context.config
        actions: list[Action] = []

        def emit(action: Action) -> None:
            logger.info("Adding action: %s", action.message)
            actions.append(action)
            if sink is not None:
                sink.append(action)

        if player.name:
            logger.info("Using player profile: %s", player.name)
        else:
            logger.info("No player profile set, using default")
        player.reset()
        player.quest_points = max(
            player.quest_points, catalogue.quest_points_for(player.completed_quests)
        )

        open_quests = [q for q in catalogue if not player.is_quest_completed(q.id)]

        for quest in [q for q in open_quests if q.is_placeholder]:
            logger.info("Processing placeholder quest: %s", quest)
            player.complete_quest(quest, self._context)
            open_quests.remove(quest)

        excluded = [
            q for q in open_quests
            if q.is_excluded(ironman=cfg.ironman, members=cfg.members)
        ]
        for quest in excluded:
            logger.info("Skipping quest excluded by run mode: %s", quest)
            open_quests.remove(quest)

        logger.info("Force lamp skills: %s", sorted(s.name for s in cfg.lamp_skills))

        while open_quests:
            quest = self._next_quest(open_quests, player, emit)
            logger.info("Best: %s", quest)
            for action in player.complete_quest(quest, self._context):
                emit(action)
            open_quests.remove(quest)

        return Path(actions=tuple(actions), stats=PathStats.from_player(player, catalogue))

    def _next_quest(
        self,
        open_quests: list[Quest],
        player: Player,
        emit: Callable[[Action], None],
    ) -> Quest:
        ironman, recommended, members = self._context.mode_flags

        best = [
            q for q in open_quests
            if q.has_requirements(player, ironman, recommended, members)
            and q.meets_lamp_requirements(player)
        ]
        if best:
            return max(best, key=lambda q: q.get_priority(player, ironman, recommended))

        closest = [
            q for q in open_quests
            if q.has_other_requirements(player, ironman, recommended, members)
            and q.has_quest_requirements(player, ironman, recommended)
            and q.meets_lamp_requirements(player)
        ]
        if not closest:
            raise QuestNotFoundError([q.id for q in open_quests])

        quest = min(
            closest,
            key=lambda q: sum(
                r.level for r in q.get_remaining_skill_requirements(player, ironman, recommended)
            ),
        )
        for req in quest.get_remaining_skill_requirements(player, ironman, recommended):
            from_xp = player.get_xp(req.skill)
            to_xp = xp_at(req.skill, req.level)
            player.set_experience(req.skill, to_xp)
            emit(TrainAction(player=player, skill=req.skill, from_xp=from_xp, to_xp=to_xp))
        return quest


def plan(
    catalogue: QuestCatalogue,
    player: Player,
    config: PlanConfig | None = None,
    sink: ActionSink | None = None,
) -> Path:
    """Plan a path through *catalogue* for *player* under *config*."""
    context = PlanContext(catalogue=catalogue, config=config or PlanConfig())
    return PathFinder(context).find(player, sink)

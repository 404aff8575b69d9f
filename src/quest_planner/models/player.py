"""Player simulation state.

Holds per-skill experience, completed quest ids, quest points, and the
history of lamp choices. The path finder owns one Player per run and
mutates it in place; lamp lookahead works on cheap structural copies.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Set
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from quest_planner.engine.actions import Action, LampAction, QuestAction
from quest_planner.logging_config import get_logger
from quest_planner.models.constants import COMBAT_SKILLS, Skill
from quest_planner.models.lamp import LampReward, SkillSet
from quest_planner.models.quest import Quest
from quest_planner.models.skill_xp import clamp_xp, initial_xp, level_for_xp

if TYPE_CHECKING:
    from quest_planner.engine.plan_config import PlanContext

logger = get_logger(__name__)


def _skill_order(skills: SkillSet) -> tuple[int, ...]:
    return tuple(sorted(int(s) for s in skills))


@dataclass
class Player:
    """A player's progression state.

    Experience below a skill's starting floor is raised to the floor on
    construction. The state at construction is kept as the baseline that
    reset() returns to.
    """

    name: str | None = None
    xp: dict[Skill, float] = field(default_factory=dict)
    completed_quests: set[int] = field(default_factory=set)
    quest_points: int = 0

    # Lamp id -> skill sets already chosen for it.
    lamp_choices: dict[int, set[SkillSet]] = field(default_factory=dict)
    # (quest id, reward slot) of every lamp already spent.
    spent_lamps: set[tuple[int, int]] = field(default_factory=set)

    _baseline: tuple[dict[Skill, float], frozenset[int], int] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        supplied = {Skill(s): v for s, v in self.xp.items()}
        self.xp = {skill: clamp_xp(skill, supplied.get(skill, 0.0)) for skill in Skill}
        self.completed_quests = set(self.completed_quests)
        self._baseline = (dict(self.xp), frozenset(self.completed_quests), self.quest_points)

    @classmethod
    def from_snapshot(
        cls,
        xp: Mapping[Skill, float] | None = None,
        completed_quests: Iterable[int] = (),
        name: str | None = None,
    ) -> Player:
        """Create a player from externally supplied experience and quest ids."""
        return cls(name=name, xp=dict(xp or {}), completed_quests=set(completed_quests))

    def copy(self) -> Player:
        """Structural clone for speculative exploration."""
        clone = Player.__new__(Player)
        clone.name = self.name
        clone.xp = dict(self.xp)
        clone.completed_quests = set(self.completed_quests)
        clone.quest_points = self.quest_points
        clone.lamp_choices = {k: set(v) for k, v in self.lamp_choices.items()}
        clone.spent_lamps = set(self.spent_lamps)
        clone._baseline = self._baseline
        return clone

    def reset(self) -> None:
        """Discard simulation progress and return to the baseline snapshot."""
        xp, completed, quest_points = self._baseline
        self.xp = dict(xp)
        self.completed_quests = set(completed)
        self.quest_points = quest_points
        self.lamp_choices = {}
        self.spent_lamps = set()

    # --- Skills --------------------------------------------------------------

    def get_xp(self, skill: Skill) -> float:
        return self.xp.get(skill, initial_xp(skill))

    def get_level(self, skill: Skill) -> int:
        return level_for_xp(skill, self.get_xp(skill))

    @property
    def total_level(self) -> int:
        return sum(self.get_level(skill) for skill in Skill)

    @property
    def combat_level(self) -> int:
        lv = {skill: self.get_level(skill) for skill in COMBAT_SKILLS}
        offence = max(
            lv[Skill.ATTACK] + lv[Skill.STRENGTH],
            2 * lv[Skill.MAGIC],
            2 * lv[Skill.RANGED],
        )
        total = (
            1.3 * offence
            + lv[Skill.DEFENCE]
            + lv[Skill.CONSTITUTION]
            + lv[Skill.PRAYER] // 2
            + lv[Skill.SUMMONING] // 2
        )
        return int(total // 4)

    def add_experience(self, skill: Skill, amount: float) -> None:
        if amount < 0:
            raise ValueError(f"Cannot add negative experience ({amount}) to {skill.name}")
        self.xp[skill] = self.get_xp(skill) + amount

    def set_experience(self, skill: Skill, xp: float) -> None:
        """Raise experience to *xp*; never lowers it."""
        self.xp[skill] = max(self.get_xp(skill), float(xp))

    # --- Quests --------------------------------------------------------------

    def is_quest_completed(self, quest_id: int) -> bool:
        return quest_id in self.completed_quests

    def complete_quest(
        self,
        quest: Quest,
        context: PlanContext | None = None,
        *,
        spend_lamps: bool = True,
    ) -> list[Action]:
        """Complete *quest*, collect its rewards, and spend its lamps.

        Returns the quest action followed by one lamp action per lamp
        spent, in reward order. With ``spend_lamps=False`` the lamps are
        left for recorded lamp actions to apply.
        """
        self.completed_quests.add(quest.id)
        self.quest_points += quest.rewards.quest_points
        for skill, amount in quest.rewards.xp.items():
            self.add_experience(skill, amount)

        actions: list[Action] = [QuestAction(player=self, quest=quest)]
        if not spend_lamps:
            return actions
        for slot, lamp in enumerate(quest.lamp_rewards):
            choices = lamp.get_choices(self, self.lamp_choices.get(lamp.id, set()))
            if not choices:
                logger.warning(
                    "No skill choices left for lamp %d from quest %d (%s); skipping",
                    lamp.id, quest.id, quest.name,
                )
                continue
            skills = self._choose_lamp_skills(quest, lamp, choices, context)
            actions.append(self.spend_lamp(quest, lamp, skills, slot=slot))
        return actions

    # --- Lamps ---------------------------------------------------------------

    def has_spent_lamp(self, quest_id: int, slot: int) -> bool:
        return (quest_id, slot) in self.spent_lamps

    def record_lamp(self, quest_id: int, slot: int, lamp: LampReward, skills: SkillSet) -> None:
        self.spent_lamps.add((quest_id, slot))
        self.lamp_choices.setdefault(lamp.id, set()).add(frozenset(skills))

    def spend_lamp(
        self,
        quest: Quest,
        lamp: LampReward,
        skills: Set[Skill],
        *,
        slot: int = 0,
        future: bool = False,
    ) -> LampAction:
        """Apply *lamp* to *skills* and return the resulting action."""
        chosen = frozenset(skills)
        amount = lamp.get_xp_for_skills(self, chosen)
        self.record_lamp(quest.id, slot, lamp, chosen)
        for skill in sorted(chosen):
            self.add_experience(skill, amount)
        return LampAction(
            player=self,
            quest=quest,
            lamp=lamp,
            skills=chosen,
            xp=amount,
            slot=slot,
            future=future,
        )

    def _choose_lamp_skills(
        self,
        quest: Quest,
        lamp: LampReward,
        choices: Set[SkillSet],
        context: PlanContext | None,
    ) -> SkillSet:
        """Pick the choice to spend *lamp* on.

        Forced lamp skills win when any choice lies within them. Otherwise
        each choice is tried on a copy of this player and the one that makes
        the most locked quests available is taken; ties go to the lowest
        skill ids.
        """
        candidates = sorted(choices, key=_skill_order)
        if context is None:
            return candidates[0]

        forced = context.config.lamp_skills
        if forced:
            within = [c for c in candidates if c <= forced]
            if within:
                return within[0]

        if len(candidates) == 1:
            return candidates[0]

        flags = context.mode_flags
        locked = [
            q for q in context.catalogue
            if not q.is_placeholder
            and q.id != quest.id
            and not self.is_quest_completed(q.id)
            and not q.has_requirements(self, *flags)
        ]

        best = candidates[0]
        best_score = -1
        for choice in candidates:
            trial = self.copy()
            trial.spend_lamp(quest, lamp, choice, slot=-1, future=True)
            score = sum(1 for q in locked if q.has_requirements(trial, *flags))
            logger.debug(
                "Lamp %d choice %s unlocks %d quest(s)",
                lamp.id, "/".join(s.name for s in sorted(choice)), score,
            )
            if score > best_score:
                best, best_score = choice, score
        return best

"""Tests for quest eligibility and ranking."""

from quest_planner.models.constants import Skill
from quest_planner.models.lamp import LampReward
from quest_planner.models.player import Player
from quest_planner.models.quest import Quest, QuestPriority, QuestRewards
from quest_planner.models.requirement import (
    QuestPointsRequirement,
    QuestRequirement,
    SkillRequirement,
)
from quest_planner.models.skill_xp import xp_at


def _quest(
    quest_id: int = 0,
    *,
    skills: list[SkillRequirement] | None = None,
    quests: list[int] | None = None,
    quest_points: int | None = None,
    reward_qp: int = 1,
    lamps: tuple[LampReward, ...] = (),
    title: str | None = None,
    **kwargs,
) -> Quest:
    return Quest(
        id=quest_id,
        title=title or f"quest {quest_id}",
        skill_requirements=tuple(skills or ()),
        quest_requirements=tuple(QuestRequirement(q) for q in quests or ()),
        quest_points_requirement=(
            QuestPointsRequirement(quest_points) if quest_points is not None else None
        ),
        rewards=QuestRewards(quest_points=reward_qp, lamps=lamps),
        **kwargs,
    )


class TestIdentity:
    def test_name_prefers_display_name(self):
        assert Quest(id=1, title="cooks_assistant", display_name="Cook's Assistant").name == (
            "Cook's Assistant"
        )
        assert Quest(id=1, title="cooks_assistant").name == "cooks_assistant"
        assert Quest(id=1).name == "Quest 1"

    def test_placeholder_has_negative_id(self):
        assert Quest(id=-1).is_placeholder
        assert not Quest(id=0).is_placeholder

    def test_hash_by_id(self):
        assert hash(_quest(4)) == hash(_quest(4, reward_qp=9))


class TestEligibility:
    def test_mode_exclusion(self):
        members = _quest(members=True)
        no_iron = _quest(ironman_eligible=False)
        assert members.is_excluded(members=False)
        assert not members.is_excluded(members=True)
        assert no_iron.is_excluded(ironman=True)
        assert not no_iron.is_excluded(ironman=False)

    def test_excluded_quest_fails_other_requirements(self):
        assert not _quest(members=True).has_requirements(Player(), members=False)

    def test_quest_points_requirement(self):
        quest = _quest(quest_points=3)
        assert not quest.has_other_requirements(Player(quest_points=2))
        assert quest.has_other_requirements(Player(quest_points=3))

    def test_all_requirement_kinds_must_hold(self):
        quest = _quest(skills=[SkillRequirement(Skill.ATTACK, 10)], quests=[1])
        player = Player(completed_quests={1})
        assert not quest.has_requirements(player)
        player.set_experience(Skill.ATTACK, xp_at(Skill.ATTACK, 10))
        assert quest.has_requirements(player)

    def test_recommended_requirement_only_in_recommended_mode(self):
        quest = _quest(skills=[SkillRequirement(Skill.MAGIC, 50, recommended=True)])
        assert quest.has_requirements(Player())
        assert not quest.has_requirements(Player(), recommended=True)

    def test_lamp_requirements(self):
        lamp = LampReward(id=1, requirements={frozenset({Skill.HUNTER}): 5})
        quest = _quest(lamps=(lamp,))
        assert not quest.meets_lamp_requirements(Player())
        assert quest.meets_lamp_requirements(
            Player(xp={Skill.HUNTER: xp_at(Skill.HUNTER, 5)})
        )


class TestRemainingRequirements:
    def test_only_unmet_are_returned(self):
        quest = _quest(
            skills=[SkillRequirement(Skill.MINING, 5), SkillRequirement(Skill.ATTACK, 3)]
        )
        player = Player(xp={Skill.ATTACK: xp_at(Skill.ATTACK, 3)})
        assert quest.get_remaining_skill_requirements(player) == [
            SkillRequirement(Skill.MINING, 5)
        ]

    def test_duplicates_collapse_to_highest(self):
        quest = _quest(
            skills=[
                SkillRequirement(Skill.SMITHING, 20),
                SkillRequirement(Skill.CRAFTING, 4),
                SkillRequirement(Skill.SMITHING, 30),
            ]
        )
        remaining = quest.get_remaining_skill_requirements(Player())
        assert remaining == [
            SkillRequirement(Skill.CRAFTING, 4),
            SkillRequirement(Skill.SMITHING, 30),
        ]


class TestPriority:
    def test_configured_priority_first(self):
        high = _quest(priority=QuestPriority.HIGH, reward_qp=1)
        normal = _quest(reward_qp=5)
        assert high.get_priority(Player()) > normal.get_priority(Player())

    def test_quest_points_break_ties(self):
        assert _quest(reward_qp=3).get_priority(Player()) > _quest(reward_qp=2).get_priority(
            Player()
        )

    def test_fewer_requirements_preferred(self):
        bare = _quest()
        gated = _quest(quests=[1])
        assert bare.get_priority(Player()) > gated.get_priority(Player())

    def test_inactive_requirements_not_counted(self):
        quest = _quest(skills=[SkillRequirement(Skill.ATTACK, 5, ironman=True)])
        assert quest.get_priority(Player()) == (int(QuestPriority.NORMAL), 1, 0)
        assert quest.get_priority(Player(), ironman=True) == (int(QuestPriority.NORMAL), 1, -1)

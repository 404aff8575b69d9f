"""Tests for requirement predicates and amalgamation."""

import pytest

from quest_planner.models.constants import Skill
from quest_planner.models.player import Player
from quest_planner.models.requirement import (
    QuestPointsRequirement,
    QuestRequirement,
    SkillRequirement,
    amalgamate_requirements,
    describe_requirement,
)
from quest_planner.models.skill_xp import xp_at


def _player(**levels: int) -> Player:
    return Player(xp={Skill[name.upper()]: xp_at(Skill[name.upper()], lv) for name, lv in levels.items()})


class TestSkillRequirement:
    def test_level_must_be_positive(self):
        with pytest.raises(ValueError, match="must be >= 1"):
            SkillRequirement(Skill.ATTACK, 0)

    def test_threshold(self):
        req = SkillRequirement(Skill.ATTACK, 10)
        assert not req.test(_player(attack=9))
        assert req.test(_player(attack=10))

    def test_ironman_only_requirement(self):
        req = SkillRequirement(Skill.ATTACK, 10, ironman=True)
        player = _player()
        assert req.test(player)
        assert not req.test(player, ironman=True)

    def test_recommended_only_requirement(self):
        req = SkillRequirement(Skill.ATTACK, 10, recommended=True)
        player = _player()
        assert req.test(player, ironman=True)
        assert not req.test(player, recommended=True)

    def test_str(self):
        assert str(SkillRequirement(Skill.HERBLORE, 25)) == "25 Herblore"


class TestOtherRequirements:
    def test_quest_requirement(self):
        req = QuestRequirement(3)
        player = Player(completed_quests={1})
        assert not req.test(player)
        player.completed_quests.add(3)
        assert req.test(player)

    def test_quest_points_requirement(self):
        req = QuestPointsRequirement(5)
        player = Player(quest_points=4)
        assert not req.test(player)
        player.quest_points = 5
        assert req.test(player)

    def test_describe(self):
        assert describe_requirement(SkillRequirement(Skill.MAGIC, 33)) == "Magic >= 33"
        assert describe_requirement(QuestRequirement(7)) == "Quest 7"
        assert describe_requirement(QuestPointsRequirement(12)) == "Quest points >= 12"


class TestAmalgamate:
    def test_highest_level_wins(self):
        merged = amalgamate_requirements(
            [SkillRequirement(Skill.ATTACK, 10), SkillRequirement(Skill.MINING, 5)],
            [SkillRequirement(Skill.ATTACK, 20), SkillRequirement(Skill.MINING, 1)],
        )
        assert merged == [SkillRequirement(Skill.ATTACK, 20), SkillRequirement(Skill.MINING, 5)]

    def test_ordered_by_skill(self):
        merged = amalgamate_requirements(
            [SkillRequirement(Skill.SLAYER, 1)],
            [SkillRequirement(Skill.DEFENCE, 1)],
        )
        assert [r.skill for r in merged] == [Skill.DEFENCE, Skill.SLAYER]

    def test_merging_with_itself_is_a_no_op(self):
        reqs = [SkillRequirement(Skill.AGILITY, 40), SkillRequirement(Skill.THIEVING, 12)]
        assert amalgamate_requirements(reqs, reqs) == amalgamate_requirements(reqs, [])
        assert amalgamate_requirements(reqs, []) == reqs

    def test_empty(self):
        assert amalgamate_requirements([], []) == []

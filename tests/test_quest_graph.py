"""Tests for the quest catalogue and its validation."""

import pytest

from quest_planner.graph.quest_graph import CatalogueError, QuestCatalogue
from quest_planner.models.constants import Skill
from quest_planner.models.quest import Quest, QuestRewards
from quest_planner.models.requirement import QuestRequirement, SkillRequirement


def _quest(
    quest_id: int,
    deps: list[int] | None = None,
    skills: list[SkillRequirement] | None = None,
    reward_qp: int = 1,
    title: str = "",
) -> Quest:
    return Quest(
        id=quest_id,
        title=title or f"quest_{quest_id}",
        quest_requirements=tuple(QuestRequirement(d) for d in deps or ()),
        skill_requirements=tuple(skills or ()),
        rewards=QuestRewards(quest_points=reward_qp),
    )


class TestBuild:
    def test_keeps_catalogue_order(self):
        catalogue = QuestCatalogue.build([_quest(2), _quest(0), _quest(1)])
        assert [q.id for q in catalogue] == [2, 0, 1]
        assert len(catalogue) == 3
        assert 0 in catalogue
        assert 5 not in catalogue

    def test_duplicate_id(self):
        with pytest.raises(CatalogueError, match="Duplicate quest id: 1"):
            QuestCatalogue.build([_quest(1), _quest(1)])

    def test_unknown_dependency(self):
        with pytest.raises(CatalogueError, match="requires unknown quest 9"):
            QuestCatalogue.build([_quest(1, deps=[9])])

    def test_cycle(self):
        with pytest.raises(CatalogueError, match="cycle"):
            QuestCatalogue.build([_quest(0), _quest(1, deps=[2]), _quest(2, deps=[1])])

    def test_empty(self):
        catalogue = QuestCatalogue.build([])
        assert len(catalogue) == 0
        assert catalogue.real_quests == ()


class TestQueries:
    def test_get(self):
        catalogue = QuestCatalogue.build([_quest(0)])
        assert catalogue.get(0).id == 0
        with pytest.raises(KeyError, match="Unable to find quest with id: 4"):
            catalogue.get(4)

    def test_find_by_title(self):
        quest = Quest(id=3, title="dragon_slayer", display_name="Dragon Slayer")
        catalogue = QuestCatalogue.build([quest])
        assert catalogue.find_by_title("dragon slayer") is quest
        assert catalogue.find_by_title("DRAGON_SLAYER") is quest
        assert catalogue.find_by_title("Romeo & Juliet") is None

    def test_real_quests_skip_placeholders(self):
        catalogue = QuestCatalogue.build([_quest(-1), _quest(0, deps=[-1])])
        assert [q.id for q in catalogue.real_quests] == [0]

    def test_topological_order(self):
        catalogue = QuestCatalogue.build(
            [_quest(3, deps=[1, 2]), _quest(2, deps=[1]), _quest(1)]
        )
        order = catalogue.topological_order()
        assert order.index(1) < order.index(2) < order.index(3)

    def test_max_requirements(self):
        catalogue = QuestCatalogue.build(
            [
                _quest(0, skills=[SkillRequirement(Skill.ATTACK, 10)]),
                _quest(1, skills=[SkillRequirement(Skill.ATTACK, 30), SkillRequirement(Skill.MAGIC, 5)]),
                _quest(2, skills=[SkillRequirement(Skill.MAGIC, 2)]),
            ]
        )
        assert catalogue.max_requirements() == [
            SkillRequirement(Skill.ATTACK, 30),
            SkillRequirement(Skill.MAGIC, 5),
        ]
        assert catalogue.max_requirements([catalogue.get(2)]) == [SkillRequirement(Skill.MAGIC, 2)]

    def test_quest_points_for(self):
        catalogue = QuestCatalogue.build([_quest(0, reward_qp=2), _quest(1, reward_qp=3)])
        assert catalogue.quest_points_for({0, 1, 99}) == 5

"""Tests for run configuration and its persisted form."""

import json
import logging

import pytest

from quest_planner.engine.plan_config import (
    PlanConfig,
    PlanContext,
    load_plan_config,
    parse_lamp_skills,
    save_plan_config,
)
from quest_planner.graph.quest_graph import QuestCatalogue
from quest_planner.models.constants import Skill


class TestProperties:
    def test_defaults(self):
        cfg = PlanConfig()
        assert cfg.members is True
        assert cfg.ironman is False
        assert cfg.lamp_skills == frozenset()
        assert cfg.to_properties() == {
            "ironman": "false",
            "recommended": "false",
            "members": "true",
        }

    def test_absent_keys_take_defaults(self):
        assert PlanConfig.from_properties({}) == PlanConfig()

    def test_round_trip(self):
        cfg = PlanConfig(
            name="Zezima",
            ironman=True,
            members=False,
            lamp_skills=frozenset({Skill.PRAYER, Skill.HERBLORE}),
        )
        props = cfg.to_properties()
        assert props["lampSkills"] == "PRAYER,HERBLORE"
        assert PlanConfig.from_properties(props) == cfg

    def test_lamp_skills_as_list(self):
        cfg = PlanConfig.from_properties({"lampSkills": ["slayer", "Magic"]})
        assert cfg.lamp_skills == frozenset({Skill.SLAYER, Skill.MAGIC})

    def test_unknown_lamp_skill_logged(self, caplog):
        with caplog.at_level(logging.WARNING):
            skills = parse_lamp_skills(["attack", "sailing", ""])
        assert skills == frozenset({Skill.ATTACK})
        assert "sailing" in caplog.text


class TestPersistence:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_plan_config(tmp_path / "absent.json") == PlanConfig()

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "settings.json"
        cfg = PlanConfig(name="alt", recommended=True, lamp_skills=frozenset({Skill.AGILITY}))
        save_plan_config(cfg, path)
        assert json.loads(path.read_text())["lampSkills"] == "AGILITY"
        assert load_plan_config(path) == cfg

    def test_non_object_rejected(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError, match="must contain a JSON object"):
            load_plan_config(path)


def test_context_mode_flags():
    ctx = PlanContext(
        catalogue=QuestCatalogue.build([]),
        config=PlanConfig(ironman=True, members=False),
    )
    assert ctx.mode_flags == (True, False, False)

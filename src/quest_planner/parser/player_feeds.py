"""Build a starting Player from external player data.

Two feeds are understood:

- Hiscores: CSV text, one row per skill in skill-id order after a leading
  overall row, with experience in the third column.
- Quest status: a JSON object ``{"quests": [{"title": ..., "status": ...}]}``;
  only entries with status ``COMPLETED`` count.

Both feeds are best effort. Rows or entries that cannot be read are logged
and skipped, so a partial feed still yields a usable player.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Mapping
from typing import Any

from quest_planner.graph.quest_graph import QuestCatalogue
from quest_planner.logging_config import get_logger
from quest_planner.models.constants import Skill
from quest_planner.models.player import Player
from quest_planner.models.skill_xp import clamp_xp

logger = get_logger(__name__)

XP_COLUMN = 2
COMPLETED = "COMPLETED"


def parse_hiscores(text: str) -> dict[Skill, float]:
    """Experience per skill from hiscores CSV, clamped to each skill's floor."""
    rows = list(csv.reader(io.StringIO(text.strip())))
    xp: dict[Skill, float] = {}
    for skill in Skill:
        if skill >= len(rows):
            logger.warning("Hiscores row missing for %s", skill.name)
            continue
        try:
            value = float(rows[skill][XP_COLUMN])
        except (IndexError, ValueError):
            logger.warning("Malformed hiscores row for %s: %r", skill.name, rows[skill])
            continue
        xp[skill] = clamp_xp(skill, value)
    return xp


def parse_quest_statuses(payload: Any, catalogue: QuestCatalogue) -> set[int]:
    """Ids of catalogue quests the feed reports as completed."""
    entries = payload.get("quests") if isinstance(payload, Mapping) else None
    if not isinstance(entries, list):
        logger.warning("Quest status feed has no quest list; ignoring it")
        return set()

    completed: set[int] = set()
    for entry in entries:
        if not isinstance(entry, Mapping) or "title" not in entry:
            logger.warning("Skipping malformed quest status entry: %r", entry)
            continue
        if str(entry.get("status", "")).upper() != COMPLETED:
            continue
        quest = catalogue.find_by_title(str(entry["title"]))
        if quest is None:
            logger.warning("Completed quest not in catalogue: %r", entry["title"])
            continue
        completed.add(quest.id)
    return completed


def build_player(
    catalogue: QuestCatalogue,
    name: str | None = None,
    hiscores_text: str | None = None,
    statuses: Any = None,
) -> Player:
    """Assemble a Player from whichever feeds are available."""
    xp = parse_hiscores(hiscores_text) if hiscores_text is not None else {}
    completed = parse_quest_statuses(statuses, catalogue) if statuses is not None else set()
    player = Player.from_snapshot(xp=xp, completed_quests=completed, name=name)
    logger.info(
        "Loaded player %s: total level %d, %d quest(s) completed",
        name or "<default>", player.total_level, len(completed),
    )
    return player

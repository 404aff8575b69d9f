"""Plan a quest completion path from a quest catalogue and player data.

Usage examples:
    python -m scripts.plan_quests --quests-file quests.json
    python -m scripts.plan_quests --quests-file quests.json --hiscores-file stats.csv \
        --quests-status-file status.json --name Zezima
    python -m scripts.plan_quests --quests-file quests.json --ironman --lamp-skill herblore
    python -m scripts.plan_quests --quests-file quests.json --settings-file settings.json \
        --free-to-play --save-settings --json
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path
from typing import Any

from quest_planner.engine.plan_config import (
    PlanConfig,
    load_plan_config,
    parse_lamp_skills,
    save_plan_config,
)
from quest_planner.logging_config import get_logger, setup_logging
from quest_planner.optimizer import Path as QuestPath
from quest_planner.optimizer import QuestNotFoundError, plan
from quest_planner.parser.catalogue_parser import load_catalogue
from quest_planner.parser.player_feeds import build_player

logger = get_logger(__name__)


def _load_json_arg(file_path: Path | None) -> dict[str, Any] | None:
    if file_path is None:
        return None
    payload = json.loads(file_path.read_text())
    if not isinstance(payload, dict):
        raise ValueError(f"{file_path}: JSON payload must be an object")
    return payload


def _config_from_args(args: argparse.Namespace) -> PlanConfig:
    """Saved settings first, with command-line flags layered on top."""
    config = load_plan_config(args.settings_file) if args.settings_file else PlanConfig()
    overrides: dict[str, Any] = {}
    if args.name:
        overrides["name"] = args.name
    if args.ironman:
        overrides["ironman"] = True
    if args.recommended:
        overrides["recommended"] = True
    if args.free_to_play:
        overrides["members"] = False
    if args.lamp_skill:
        overrides["lamp_skills"] = parse_lamp_skills(args.lamp_skill)
    return replace(config, **overrides)


def _render_text_result(result: QuestPath, config: PlanConfig) -> str:
    stats = result.stats
    lines: list[str] = []
    lines.append(f"player: {config.name or '<default>'}")
    modes = [
        label
        for label, on in (
            ("ironman", config.ironman),
            ("recommended", config.recommended),
            ("free-to-play", not config.members),
        )
        if on
    ]
    lines.append(f"mode: {', '.join(modes) if modes else 'standard'}")
    if config.lamp_skills:
        lamp_skills = ", ".join(s.display_name for s in sorted(config.lamp_skills))
        lines.append(f"lamp skills: {lamp_skills}")

    lines.append("")
    lines.append("plan:")
    for i, action in enumerate(result.actions, start=1):
        lines.append(f"  {i:>4}. [{action.type.value:<5}] {action.message}")

    lines.append("")
    lines.append(
        f"complete: {stats.percent_complete:.1f}% "
        f"({stats.quests_completed}/{stats.quests_total} quests, "
        f"{stats.quests_remaining} remaining)"
    )
    lines.append(f"quest points: {stats.quest_points}")
    lines.append(f"total level: {stats.total_level}")
    lines.append(f"combat level: {stats.combat_level}")
    return "\n".join(lines)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Plan a quest completion path")
    parser.add_argument(
        "--quests-file", type=Path, required=True, help="Path to the quest catalogue JSON."
    )
    parser.add_argument("--hiscores-file", type=Path, help="Hiscores CSV for the player.")
    parser.add_argument(
        "--quests-status-file", type=Path, help="Quest status JSON for the player."
    )
    parser.add_argument("--settings-file", type=Path, help="Saved settings JSON.")
    parser.add_argument("--name", type=str, help="Player name to plan for.")
    parser.add_argument("--ironman", action="store_true", help="Plan in ironman mode.")
    parser.add_argument(
        "--recommended", action="store_true", help="Also honour recommended requirements."
    )
    parser.add_argument(
        "--free-to-play", action="store_true", help="Skip members-only quests."
    )
    parser.add_argument(
        "--lamp-skill",
        action="append",
        help="Force lamps onto this skill; repeat for several skills.",
    )
    parser.add_argument(
        "--save-settings",
        action="store_true",
        help="Write the effective settings back to --settings-file.",
    )
    parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON output.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.save_settings and args.settings_file is None:
        parser.error("--save-settings requires --settings-file")

    try:
        config = _config_from_args(args)
        catalogue = load_catalogue(args.quests_file)
        hiscores_text = args.hiscores_file.read_text() if args.hiscores_file else None
        statuses = _load_json_arg(args.quests_status_file)
        player = build_player(
            catalogue, name=config.name, hiscores_text=hiscores_text, statuses=statuses
        )
        result = plan(catalogue, player, config)
    except QuestNotFoundError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.save_settings:
        save_plan_config(config, args.settings_file)
        logger.info("Saved settings to %s", args.settings_file)

    if args.json:
        payload = {
            "settings": config.to_properties(),
            **result.to_dict(),
        }
        print(json.dumps(payload, indent=2))
        return 0

    print(_render_text_result(result, config))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

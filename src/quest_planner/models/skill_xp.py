"""Experience/level conversions for skills.

All skills share one experience curve; only the level cap differs. Inputs
outside the defined range clamp to the nearest bound instead of failing.
"""

import bisect

from quest_planner.models.constants import (
    DEFAULT_MAX_LEVEL,
    INITIAL_XP,
    MAX_LEVEL_OVERRIDES,
    XP_TABLE,
    Skill,
)


def max_level(skill: Skill) -> int:
    return MAX_LEVEL_OVERRIDES.get(skill, DEFAULT_MAX_LEVEL)


def xp_at(skill: Skill, level: int) -> int:
    """Experience required to reach *level* in *skill*."""
    level = min(max(1, int(level)), max_level(skill))
    return XP_TABLE[level - 1]


def level_for_xp(skill: Skill, xp: float) -> int:
    """Highest level whose experience threshold is <= *xp*."""
    cap = max_level(skill)
    level = bisect.bisect_right(XP_TABLE, xp, 0, cap)
    return max(1, level)


def initial_xp(skill: Skill) -> float:
    """Starting experience floor for *skill*."""
    return INITIAL_XP[skill]


def clamp_xp(skill: Skill, xp: float) -> float:
    """Raise *xp* to the skill's starting floor if it is below it."""
    return max(initial_xp(skill), float(xp))

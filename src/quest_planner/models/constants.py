"""Skills, experience tables, and lamp curve data.

Skill ids follow the hiscores row order: row 0 is the overall total, row N
is the skill with id N. Everything here is constant for the lifetime of the
process.
"""

import math
from enum import IntEnum


class Skill(IntEnum):
    """Progression tracks, numbered by hiscores row."""
    ATTACK = 1
    DEFENCE = 2
    STRENGTH = 3
    CONSTITUTION = 4
    RANGED = 5
    PRAYER = 6
    MAGIC = 7
    COOKING = 8
    WOODCUTTING = 9
    FLETCHING = 10
    FISHING = 11
    FIREMAKING = 12
    CRAFTING = 13
    SMITHING = 14
    MINING = 15
    HERBLORE = 16
    AGILITY = 17
    THIEVING = 18
    SLAYER = 19
    FARMING = 20
    RUNECRAFTING = 21
    HUNTER = 22
    CONSTRUCTION = 23
    SUMMONING = 24
    DUNGEONEERING = 25
    DIVINATION = 26
    INVENTION = 27
    ARCHAEOLOGY = 28

    @property
    def display_name(self) -> str:
        return SKILL_NAMES[self]

    @classmethod
    def from_name(cls, text: str) -> "Skill":
        """Parse a skill name, case-insensitive; spaces and underscores match."""
        key = text.strip().upper().replace(" ", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown skill: {text!r}") from None


# Friendly display names
SKILL_NAMES: dict[int, str] = {
    skill: skill.name.capitalize() for skill in Skill
}

ALL_SKILLS = frozenset(Skill)

COMBAT_SKILLS = frozenset({
    Skill.ATTACK,
    Skill.DEFENCE,
    Skill.STRENGTH,
    Skill.CONSTITUTION,
    Skill.RANGED,
    Skill.PRAYER,
    Skill.MAGIC,
    Skill.SUMMONING,
})

DEFAULT_MAX_LEVEL = 99

# Skills whose level cap is raised above the default.
MAX_LEVEL_OVERRIDES: dict[int, int] = {
    Skill.DUNGEONEERING: 120,
    Skill.INVENTION: 120,
    Skill.ARCHAEOLOGY: 120,
}

# Invention lamps additionally need these skills at INVENTION_UNLOCK_LEVEL.
INVENTION_UNLOCK_SKILLS = (Skill.CRAFTING, Skill.DIVINATION, Skill.SMITHING)
INVENTION_UNLOCK_LEVEL = 80


def _build_xp_table(max_level: int) -> tuple[int, ...]:
    """Experience needed for each level 1..max_level (index 0 is level 1)."""
    table = [0]
    points = 0
    for level in range(1, max_level):
        points += math.floor(level + 300 * 2 ** (level / 7))
        table.append(points // 4)
    return tuple(table)


XP_TABLE: tuple[int, ...] = _build_xp_table(max(MAX_LEVEL_OVERRIDES.values()))

# Constitution starts at level 10; every other skill starts at level 1.
INITIAL_XP: dict[int, float] = {skill: 0.0 for skill in Skill}
INITIAL_XP[Skill.CONSTITUTION] = float(XP_TABLE[9])


# ---------------------------------------------------------------------------
# Lamp curves: xp per skill level, index = min(98, level) - 1
# ---------------------------------------------------------------------------

SMALL_XP_LAMP_VALUES: tuple[int, ...] = (
    62, 69, 77, 85, 93, 104, 123, 127, 144, 153, 170, 188, 205, 229, 252,
    261, 274, 285, 298, 310, 324, 337, 352, 367, 384, 399, 405, 414, 453,
    473, 493, 514, 536, 559, 583, 608, 635, 662, 691, 720, 752, 784, 818,
    853, 889, 929, 970, 1012, 1055, 1101, 1148, 1200, 1249, 1304, 1362,
    1422, 1485, 1546, 1616, 1684, 1757, 1835, 1911, 2004, 2108, 2171, 2269,
    2379, 2470, 2592, 2693, 2809, 2946, 3082, 3213, 3339, 3495, 3646, 3792,
    3980, 4166, 4347, 4521, 4762, 4918, 5033, 5375, 5592, 5922, 6121, 6451,
    6614, 6928, 7236, 7532, 8064, 8347, 8602,
)

MEDIUM_XP_LAMP_VALUES: tuple[int, ...] = (
    125, 138, 154, 170, 186, 208, 246, 254, 288, 307, 340, 376, 411, 458,
    504, 523, 548, 570, 596, 620, 649, 674, 704, 735, 768, 798, 810, 828,
    906, 946, 986, 1028, 1072, 1118, 1166, 1217, 1270, 1324, 1383, 1441,
    1504, 1569, 1636, 1707, 1779, 1858, 1941, 2025, 2110, 2202, 2296, 2400,
    2499, 2609, 2724, 2844, 2970, 3092, 3233, 3368, 3515, 3671, 3822, 4009,
    4216, 4343, 4538, 4758, 4940, 5185, 5386, 5618, 5893, 6164, 6427, 6679,
    6990, 7293, 7584, 7960, 8332, 8695, 9043, 9524, 9837, 10066, 10751,
    11185, 11845, 12243, 12903, 13229, 13857, 14472, 15065, 16129, 16695,
    17204,
)

LARGE_XP_LAMP_VALUES: tuple[int, ...] = (
    250, 276, 308, 340, 373, 416, 492, 508, 577, 614, 680, 752, 822, 916,
    1008, 1046, 1096, 1140, 1192, 1240, 1298, 1348, 1408, 1470, 1536, 1596,
    1621, 1656, 1812, 1892, 1973, 2056, 2144, 2237, 2332, 2434, 2540, 2648,
    2766, 2882, 3008, 3138, 3272, 3414, 3558, 3716, 3882, 4050, 4220, 4404,
    4593, 4800, 4998, 5218, 5448, 5688, 5940, 6184, 6466, 6737, 7030, 7342,
    7645, 8018, 8432, 8686, 9076, 9516, 9880, 10371, 10772, 11237, 11786,
    12328, 12855, 13358, 13980, 14587, 15169, 15920, 16664, 17390, 18087,
    19048, 19674, 20132, 21502, 22370, 23690, 24486, 25806, 26458, 27714,
    28944, 30130, 32258, 33390, 34408,
)

HUGE_XP_LAMP_VALUES: tuple[int, ...] = (
    500, 552, 616, 680, 746, 832, 984, 1016, 1154, 1228, 1360, 1504, 1644,
    1832, 2016, 2092, 2192, 2280, 2384, 2480, 2596, 2696, 2816, 2940, 3072,
    3192, 3242, 3312, 3624, 3784, 3946, 4112, 4288, 4474, 4664, 4868, 5080,
    5296, 5532, 5764, 6016, 6276, 6544, 6828, 7116, 7432, 7764, 8100, 8440,
    8808, 9186, 9600, 9996, 10436, 10896, 11376, 11880, 12368, 12932, 13474,
    14060, 14684, 15290, 16036, 16864, 17372, 18152, 19032, 19760, 20742,
    21544, 22474, 23572, 24656, 25710, 26716, 27960, 29174, 30338, 31840,
    33328, 34780, 36174, 38096, 39348, 40264, 43004, 44740, 47380, 48972,
    51612, 52916, 55428, 57888, 60260, 64516, 66780, 68816,
)

LAMP_TABLE_MAX_LEVEL = 98

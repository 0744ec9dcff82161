"""
XP and level progression
Level thresholds, theoretical grade tiers and the level resolver
"""

import logging
from typing import Dict

from codepets.courses.models import Grade

logger = logging.getLogger(__name__)

# ==================== LEVEL TABLE ====================

# Cumulative total_xp needed to leave each level
LEVEL_XP_THRESHOLDS: Dict[int, int] = {
    1: 150,
    2: 350,
    3: 600,
    4: 900,
    5: 1250,
    6: 1650,
    7: 2100,
    8: 2600,
    9: 3150,
    10: 3750,
}

MAX_LEVEL = max(LEVEL_XP_THRESHOLDS) + 1

SUB_LEVEL_XP = 20

# ==================== THEORETICAL GRADES ====================

GRADE_MIN_SCORE = {
    Grade.GOLD: 80,
    Grade.SILVER: 50,
}

GRADE_XP = {
    Grade.NONE: 0,
    Grade.SILVER: 30,
    Grade.GOLD: 60,
}


def grade_for_score(score: int) -> Grade:
    """Map a theoretical score to its grade tier"""
    if score >= GRADE_MIN_SCORE[Grade.GOLD]:
        return Grade.GOLD
    elif score >= GRADE_MIN_SCORE[Grade.SILVER]:
        return Grade.SILVER
    return Grade.NONE


def grade_xp_delta(old_grade: Grade, new_grade: Grade) -> int:
    """XP still owed when moving from old_grade to new_grade, never negative"""
    return max(GRADE_XP[Grade(new_grade)] - GRADE_XP[Grade(old_grade)], 0)


def level_floor(level: int) -> int:
    """total_xp at which `level` starts"""
    return LEVEL_XP_THRESHOLDS.get(level - 1, 0)


def resolve_next_level(stats: dict, award: int) -> bool:
    """
    Add `award` XP to a profile stats dict and advance the level

    `stats` is the `profile` sub-document (level, current_xp, total_xp) and is
    updated in place. The level advances while total_xp reaches the threshold
    of the current level; current_xp is the XP earned inside the current level.

    Returns:
        True when at least one level was gained
    """
    if award <= 0:
        return False

    start_level = stats.get("level", 1)
    level = start_level
    total_xp = stats.get("total_xp", 0) + award

    while level < MAX_LEVEL and total_xp >= LEVEL_XP_THRESHOLDS[level]:
        level += 1

    stats["level"] = level
    stats["total_xp"] = total_xp
    stats["current_xp"] = total_xp - level_floor(level)

    if level > start_level:
        logger.info("Level up: %s -> %s (total_xp=%s)", start_level, level, total_xp)
        return True
    return False

from typing import Dict, Optional

from codepets.validation import course_1
from codepets.validation.rules import RuleSet

VALIDATORS: Dict[int, Dict[int, RuleSet]] = {
    1: course_1.SUB_LEVELS,
}


def get_rule_set(course_id: int, sub_level: int) -> Optional[RuleSet]:
    """Rule set for a course sub-level, None when it has no validator"""
    return VALIDATORS.get(course_id, {}).get(sub_level)

from typing import Dict, Iterable, List

from codepets.courses.models import CourseDefinition, CourseProgress


def default_progress(course_id: int) -> dict:
    """Progress entry for a course the user has not started"""
    return CourseProgress(course_id=course_id).model_dump(mode="json")


def merge_courses(catalog_courses: Iterable[CourseDefinition], user_courses: Iterable[dict]) -> List[dict]:
    """
    Overlay a user's per-course progress onto the global catalog

    The result follows catalog order. Courses missing from the user's progress
    default to "not started"; stored entries for courses no longer in the
    catalog are dropped. Merging an already-merged list gives the same list.
    """
    by_id: Dict[int, dict] = {}
    for entry in user_courses or []:
        if "course_id" in entry:
            by_id[entry["course_id"]] = entry

    merged = []
    for course in catalog_courses:
        progress = default_progress(course.course_id)
        stored = by_id.get(course.course_id)
        if stored:
            progress.update(
                CourseProgress(
                    course_id=course.course_id,
                    current=stored.get("current", 1),
                    completed_sub_levels=list(dict.fromkeys(stored.get("completed_sub_levels") or [])),
                    theoretical=stored.get("theoretical") or {},
                ).model_dump(mode="json")
            )

        item = course.model_dump(mode="json")
        quiz = item["theoretical"]
        item.update(progress)
        # Quiz metadata (max_score) and the user's record share one key
        item["theoretical"] = {**quiz, **progress["theoretical"]}
        merged.append(item)

    return merged

"""
Daily Matching Passes

Greedy matching of scarce resources against demand:
- Instructors to courses lacking one (first fit)
- Participants to open courses (shuffled candidates per participant)

Neither pass is optimal. Both work on explicit "remaining candidates"
lists built from the school's demand snapshots, never on the live entity
collections.
"""

import random
from uuid import UUID

import structlog

from shared.domain.school import School

logger = structlog.get_logger(__name__)


def assign_instructors(school: School) -> list[tuple[UUID, UUID]]:
    """
    Assign idle instructors to courses lacking an instructor.

    For each course the first qualified idle instructor is taken and dropped
    from the candidates, so no instructor is booked twice in one pass.
    Courses left without an instructor retry on the next day.

    Args:
        school: School to match in

    Returns:
        List of (course_id, instructor_id) assignments made
    """
    remaining = school.idle_instructors()
    assignments: list[tuple[UUID, UUID]] = []

    for course in school.courses_requiring_instructor():
        if not remaining:
            break
        for instructor in remaining:
            if school.assign_instructor(course.id, instructor.id):
                assignments.append((course.id, instructor.id))
                remaining = [i for i in remaining if i.id != instructor.id]
                break

    logger.debug(
        "Instructor pass complete",
        assigned=len(assignments),
        idle_left=len(remaining),
    )
    return assignments


def assign_participants(school: School, rng: random.Random) -> list[tuple[UUID, UUID]]:
    """
    Enroll unenrolled participants into open courses.

    Each participant scans a freshly shuffled copy of the candidate courses
    and takes the first one that accepts it. A course that fills up leaves
    the pool; once the pool is empty the pass ends and the remaining
    participants wait for the next day.

    Args:
        school: School to match in
        rng: Random source used for shuffling

    Returns:
        List of (course_id, participant_id) enrollments made
    """
    pool = school.open_courses()
    enrollments: list[tuple[UUID, UUID]] = []

    for participant in school.unenrolled_participants():
        if not pool:
            break

        candidates = list(pool)
        rng.shuffle(candidates)

        for course in candidates:
            if school.enrol_participant(course.id, participant.id):
                enrollments.append((course.id, participant.id))
                if course.is_full:
                    pool = [c for c in pool if c.id != course.id]
                break

    logger.debug(
        "Participant pass complete",
        enrolled=len(enrollments),
        open_courses_left=len(pool),
    )
    return enrollments

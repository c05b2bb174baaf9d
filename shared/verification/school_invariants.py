"""
Runtime Verification: School Invariants

Checks, after any sequence of operations, that the School still satisfies
the properties the simulation relies on:

- A course roster never exceeds its capacity
- A participant's enrollment reference matches exactly one roster
- An instructor's course reference matches the course's instructor
- At most one active course exists per subject, and subject flags agree
- An assigned instructor is qualified for the subject's specialism
- Prerequisite IDs are non-negative and lower than the subject ID
"""

from enum import Enum
from typing import Any

import structlog

from shared.domain.exceptions import InvariantViolationError
from shared.domain.school import School

logger = structlog.get_logger(__name__)


class InvariantViolationType(Enum):
    """Types of invariant violations."""
    CAPACITY_EXCEEDED = "capacity_exceeded"
    DOUBLE_ENROLLMENT = "double_enrollment"
    ENROLLMENT_MISMATCH = "enrollment_mismatch"
    TEACHING_MISMATCH = "teaching_mismatch"
    DUPLICATE_ACTIVE_COURSE = "duplicate_active_course"
    ACTIVE_COURSE_FLAG = "active_course_flag"
    INELIGIBLE_INSTRUCTOR = "ineligible_instructor"
    INVALID_PREREQUISITE = "invalid_prerequisite"
    DANGLING_REFERENCE = "dangling_reference"


class InvariantMonitor:
    """
    Runtime monitor for school invariants.

    Keeps counters across verifications so a long run can report how often
    it was checked and how many violations were seen.
    """

    def __init__(self):
        """Initialize monitor."""
        self.violations: list[dict[str, Any]] = []
        self.verification_count = 0
        self.violation_count = 0

    def verify_school(self, school: School) -> tuple[bool, list[dict[str, Any]]]:
        """
        Verify every invariant over the whole school.

        Args:
            school: School to verify

        Returns:
            Tuple of (all_valid, list_of_violations)
        """
        self.verification_count += 1
        violations: list[dict[str, Any]] = []

        violations.extend(self._check_subjects(school))
        violations.extend(self._check_courses(school))
        violations.extend(self._check_participants(school))
        violations.extend(self._check_instructors(school))

        if violations:
            self.violations.extend(violations)
            self.violation_count += len(violations)
            logger.warning(
                "School invariants violated",
                day=school.days_running,
                count=len(violations),
            )

        return len(violations) == 0, violations

    def _check_subjects(self, school: School) -> list[dict[str, Any]]:
        violations = []
        active: dict[int, int] = {}
        for course in school.courses.values():
            if not course.is_terminal:
                active[course.subject_id] = active.get(course.subject_id, 0) + 1

        for subject in school.subjects.values():
            for prerequisite in subject.prerequisites:
                if prerequisite < 0 or prerequisite >= subject.id:
                    violations.append({
                        'type': InvariantViolationType.INVALID_PREREQUISITE,
                        'subject_id': subject.id,
                        'message': f"Subject {subject.id} lists invalid prerequisite {prerequisite}",
                    })

            count = active.get(subject.id, 0)
            if count > 1:
                violations.append({
                    'type': InvariantViolationType.DUPLICATE_ACTIVE_COURSE,
                    'subject_id': subject.id,
                    'message': f"Subject {subject.id} has {count} active courses",
                })
            if subject.has_course != (count > 0):
                violations.append({
                    'type': InvariantViolationType.ACTIVE_COURSE_FLAG,
                    'subject_id': subject.id,
                    'message': (
                        f"Subject {subject.id} flag says has_course={subject.has_course} "
                        f"but {count} active course(s) exist"
                    ),
                })
        return violations

    def _check_courses(self, school: School) -> list[dict[str, Any]]:
        violations = []
        for course in school.courses.values():
            if course.size > course.capacity:
                violations.append({
                    'type': InvariantViolationType.CAPACITY_EXCEEDED,
                    'course_id': course.id,
                    'message': (
                        f"Course {course.id} exceeds capacity: {course.size}/{course.capacity}"
                    ),
                })
            if len(set(course.participant_ids)) != course.size:
                violations.append({
                    'type': InvariantViolationType.DOUBLE_ENROLLMENT,
                    'course_id': course.id,
                    'message': f"Course {course.id} lists a participant twice",
                })

            subject = school.subjects.get(course.subject_id)
            if subject is None:
                violations.append({
                    'type': InvariantViolationType.DANGLING_REFERENCE,
                    'course_id': course.id,
                    'message': f"Course {course.id} references unknown subject {course.subject_id}",
                })
                continue

            if course.instructor_id is not None:
                instructor = school.instructors.get(course.instructor_id)
                if instructor is None:
                    violations.append({
                        'type': InvariantViolationType.DANGLING_REFERENCE,
                        'course_id': course.id,
                        'message': f"Course {course.id} references unknown instructor",
                    })
                elif not instructor.can_teach(subject.specialism):
                    violations.append({
                        'type': InvariantViolationType.INELIGIBLE_INSTRUCTOR,
                        'course_id': course.id,
                        'instructor_id': instructor.id,
                        'message': (
                            f"Instructor {instructor.name} ({instructor.category.value}) "
                            f"cannot teach specialism {subject.specialism}"
                        ),
                    })
                elif instructor.course_id != course.id:
                    violations.append({
                        'type': InvariantViolationType.TEACHING_MISMATCH,
                        'course_id': course.id,
                        'instructor_id': instructor.id,
                        'message': f"Instructor {instructor.name} does not reference course {course.id}",
                    })

            for participant_id in course.participant_ids:
                participant = school.participants.get(participant_id)
                if participant is None:
                    violations.append({
                        'type': InvariantViolationType.DANGLING_REFERENCE,
                        'course_id': course.id,
                        'message': f"Course {course.id} references unknown participant",
                    })
                    continue
                if participant.course_id != course.id:
                    violations.append({
                        'type': InvariantViolationType.ENROLLMENT_MISMATCH,
                        'course_id': course.id,
                        'participant_id': participant.id,
                        'message': f"Participant {participant.name} does not reference course {course.id}",
                    })
        return violations

    def _check_participants(self, school: School) -> list[dict[str, Any]]:
        violations = []
        for participant in school.participants.values():
            if participant.course_id is None:
                continue
            course = school.courses.get(participant.course_id)
            if course is None or participant.id not in course.participant_ids:
                violations.append({
                    'type': InvariantViolationType.ENROLLMENT_MISMATCH,
                    'participant_id': participant.id,
                    'message': (
                        f"Participant {participant.name} is enrolled in a course "
                        f"that does not list them"
                    ),
                })
        return violations

    def _check_instructors(self, school: School) -> list[dict[str, Any]]:
        violations = []
        for instructor in school.instructors.values():
            if instructor.course_id is None:
                continue
            course = school.courses.get(instructor.course_id)
            if course is None or course.instructor_id != instructor.id:
                violations.append({
                    'type': InvariantViolationType.TEACHING_MISMATCH,
                    'instructor_id': instructor.id,
                    'message': (
                        f"Instructor {instructor.name} is teaching a course "
                        f"that does not list them"
                    ),
                })
        return violations

    def get_statistics(self) -> dict[str, Any]:
        """Get monitoring statistics."""
        return {
            'verification_count': self.verification_count,
            'violation_count': self.violation_count,
        }


# Global monitor instance
_global_monitor: InvariantMonitor | None = None


def get_invariant_monitor() -> InvariantMonitor:
    """
    Get or create global invariant monitor.

    Returns:
        InvariantMonitor instance
    """
    global _global_monitor

    if _global_monitor is None:
        _global_monitor = InvariantMonitor()

    return _global_monitor


def assert_school_invariants(
    school: School,
    monitor: InvariantMonitor | None = None,
    raise_on_violation: bool = True,
) -> bool:
    """
    Assert that the school satisfies every invariant.

    Args:
        school: School to verify
        monitor: Monitor to record into (defaults to the global monitor)
        raise_on_violation: If True, raise InvariantViolationError on violation

    Returns:
        True if all invariants hold, False otherwise

    Raises:
        InvariantViolationError: If an invariant is violated and raise_on_violation=True
    """
    monitor = monitor or get_invariant_monitor()
    is_valid, violations = monitor.verify_school(school)

    if not is_valid and raise_on_violation:
        raise InvariantViolationError(violations)

    return is_valid

from uuid import uuid4

import pytest

from shared.domain.exceptions import InvariantViolationError
from shared.verification.school_invariants import (
    InvariantMonitor,
    InvariantViolationType,
    assert_school_invariants,
)


@pytest.fixture
def running_school(prepared_school, programming, teacher, participant):
    course = prepared_school.create_course(programming.id, start_offset_days=2)
    prepared_school.assign_instructor(course.id, teacher.id)
    prepared_school.enrol_participant(course.id, participant.id)
    return prepared_school


def _types(violations):
    return {violation["type"] for violation in violations}


def test_consistent_school_passes(running_school):
    ok, violations = InvariantMonitor().verify_school(running_school)

    assert ok
    assert violations == []


def test_roster_without_back_reference(running_school, participant):
    participant.course_id = None

    ok, violations = InvariantMonitor().verify_school(running_school)

    assert not ok
    assert InvariantViolationType.ENROLLMENT_MISMATCH in _types(violations)


def test_unknown_participant_on_roster(running_school):
    course = next(iter(running_school.courses.values()))
    course.participant_ids = [*course.participant_ids, uuid4()]

    ok, violations = InvariantMonitor().verify_school(running_school)

    assert InvariantViolationType.DANGLING_REFERENCE in _types(violations)


def test_over_capacity(running_school, make_participant):
    course = next(iter(running_school.courses.values()))
    for i in range(3):
        extra = make_participant(name=f"X{i}")
        extra.course_id = course.id
        running_school.participants[extra.id] = extra
        course.participant_ids = [*course.participant_ids, extra.id]

    ok, violations = InvariantMonitor().verify_school(running_school)

    assert InvariantViolationType.CAPACITY_EXCEEDED in _types(violations)


def test_instructor_reference_mismatch(running_school, teacher):
    teacher.course_id = None

    ok, violations = InvariantMonitor().verify_school(running_school)

    assert InvariantViolationType.TEACHING_MISMATCH in _types(violations)


def test_subject_flag_mismatch(running_school, oop):
    oop.has_course = True

    ok, violations = InvariantMonitor().verify_school(running_school)

    assert _types(violations) == {InvariantViolationType.ACTIVE_COURSE_FLAG}


def test_ineligible_instructor(running_school, oop, teacher):
    course = next(iter(running_school.courses.values()))
    course.subject_id = oop.id
    oop.has_course = True
    running_school.subjects[1].has_course = False

    ok, violations = InvariantMonitor().verify_school(running_school)

    assert InvariantViolationType.INELIGIBLE_INSTRUCTOR in _types(violations)


def test_assert_raises_with_violations(running_school, participant):
    participant.course_id = None
    monitor = InvariantMonitor()

    with pytest.raises(InvariantViolationError) as exc_info:
        assert_school_invariants(running_school, monitor=monitor)

    assert exc_info.value.violations
    assert exc_info.value.to_dict()["error"] == "INVARIANT_VIOLATION"
    assert monitor.get_statistics()["violation_count"] >= 1
    assert not assert_school_invariants(running_school, monitor=monitor, raise_on_violation=False)

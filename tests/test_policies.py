from uuid import uuid4

import pytest

from shared.domain.academic import Subject
from shared.domain.eligibility import has_prerequisites
from shared.domain.entities import Participant
from shared.domain.policies import (
    EnrollmentPolicy,
    PolicyResult,
    PrerequisitePolicy,
    create_default_enrollment_policy_engine,
)


def _context(**overrides):
    context = {
        "subject_id": 2,
        "subject_prerequisites": [1],
        "participant_certificates": [1],
        "course_days_until_start": 2,
        "course_capacity": 3,
        "course_enrolled": 0,
    }
    context.update(overrides)
    return context


def test_default_engine_order():
    engine = create_default_enrollment_policy_engine()

    assert engine.get_registered_policies() == [
        "certificate_not_held",
        "prerequisite_check",
        "course_not_started",
        "capacity_check",
    ]


def test_all_policies_pass():
    engine = create_default_enrollment_policy_engine()

    allowed, results = engine.evaluate_all(uuid4(), uuid4(), _context())

    assert allowed
    assert len(results) == 4


def test_first_refusal_stops_evaluation():
    engine = create_default_enrollment_policy_engine()

    allowed, results = engine.evaluate_all(
        uuid4(), uuid4(), _context(participant_certificates=[1, 2], course_enrolled=3)
    )

    assert not allowed
    assert len(results) == 1
    assert results[0].violated_rules == ["certificate_already_held"]


def test_missing_prerequisites_are_reported():
    engine = create_default_enrollment_policy_engine()

    allowed, results = engine.evaluate_all(uuid4(), uuid4(), _context(participant_certificates=[]))

    assert not allowed
    assert results[-1].metadata["missing_prerequisites"] == [1]


def test_started_and_full_courses_refuse():
    engine = create_default_enrollment_policy_engine()

    allowed, results = engine.evaluate_all(uuid4(), uuid4(), _context(course_days_until_start=0))
    assert not allowed
    assert results[-1].violated_rules == ["course_started"]

    allowed, results = engine.evaluate_all(uuid4(), uuid4(), _context(course_enrolled=3))
    assert not allowed
    assert results[-1].violated_rules == ["capacity_limit"]


class ExplodingPolicy(EnrollmentPolicy):
    def __init__(self):
        super().__init__("exploding", priority=200)

    def evaluate(self, participant_id, course_id, context) -> PolicyResult:
        raise RuntimeError("boom")


def test_policy_error_is_a_refusal():
    engine = create_default_enrollment_policy_engine()
    engine.register_policy(ExplodingPolicy())

    allowed, results = engine.evaluate_all(uuid4(), uuid4(), _context())

    assert not allowed
    assert results[0].violated_rules == ["policy_execution_error"]
    assert engine.unregister_policy("exploding")
    assert not engine.unregister_policy("exploding")


@pytest.mark.parametrize(
    "prerequisites, certificates",
    [
        ([], []),
        ([1], []),
        ([1, 3], [3, 1]),
        ([1, 1, 3], [1]),
        ([0], [1, 2]),
    ],
)
def test_prerequisite_policy_agrees_with_eligibility(prerequisites, certificates):
    subject = Subject(id=4, specialism=1, duration=1, prerequisites=prerequisites)
    participant = Participant(name="X", certificates=certificates)
    context = _context(
        subject_prerequisites=subject.prerequisites,
        participant_certificates=participant.certificates,
    )

    result = PrerequisitePolicy().evaluate(participant.id, uuid4(), context)

    assert result.allowed == has_prerequisites(participant, subject)

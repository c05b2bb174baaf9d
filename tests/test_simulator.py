import random
from uuid import uuid4

import pytest

from services.simulation_service.simulator import SchoolSimulator
from shared.domain.exceptions import InvariantViolationError


def test_pipeline_runs_a_course_to_completion(school, programming, teacher, participant, settings):
    school.add_subject(programming)
    school.add_instructor(teacher)
    school.add_participant(participant)
    simulator = SchoolSimulator(school, settings=settings, rng=random.Random(0))

    day1 = simulator.simulate_one_day()
    assert day1.day == 1
    assert day1.courses_created == 1
    assert day1.instructors_assigned == 1
    assert day1.participants_enrolled == 1
    assert day1.participants_joined == 1
    assert school.days_running == 2

    day2 = simulator.simulate_one_day()
    assert day2.courses_started == 1
    assert day2.courses_created == 0

    reports = simulator.simulate(programming.duration)
    assert reports[-1].day == 5
    assert reports[-1].courses_finished == 1
    assert reports[-1].certificates_granted == 1
    assert participant.certificates == [programming.id]
    assert school.courses == {}
    assert not teacher.is_teaching

    day6 = simulator.simulate_one_day()
    assert day6.courses_created == 1
    assert day6.participants_enrolled == 0
    assert day6.enrollments_denied == 1


def test_course_without_instructor_is_cancelled_and_reopened(
    school, programming, participant, settings
):
    school.add_subject(programming)
    school.add_participant(participant)
    simulator = SchoolSimulator(school, settings=settings, rng=random.Random(0))

    simulator.simulate_one_day()
    assert participant.is_enrolled

    day2 = simulator.simulate_one_day()
    assert day2.courses_cancelled == 1
    assert school.courses == {}
    assert not participant.is_enrolled
    assert participant.certificates == []

    day3 = simulator.simulate_one_day()
    assert day3.courses_created == 1
    assert day3.participants_enrolled == 1


def test_new_courses_use_configured_offset(school, programming, settings):
    school.add_subject(programming)
    settings.course_start_offset_days = 4
    simulator = SchoolSimulator(school, settings=settings, rng=random.Random(0))

    created = simulator.open_courses()

    assert created[0].days_until_start == 4
    assert created[0].capacity == settings.course_capacity


def test_events_are_drained_into_reports(prepared_school, settings):
    simulator = SchoolSimulator(prepared_school, settings=settings, rng=random.Random(0))

    report = simulator.simulate_one_day()

    assert report.events
    assert all(event["metadata"]["day"] == 1 for event in report.events)
    assert prepared_school.journal.drain() == []
    assert simulator.monitor.get_statistics()["verification_count"] == 1


def test_prerequisites_changed_mid_run_keep_enrolled_participants(
    school, programming, teacher, participant, settings
):
    school.add_subject(programming)
    school.add_instructor(teacher)
    school.add_participant(participant)
    simulator = SchoolSimulator(school, settings=settings, rng=random.Random(0))

    day1 = simulator.simulate_one_day()
    assert day1.participants_enrolled == 1
    course_id = participant.course_id

    programming.set_prerequisites([0])
    day2 = simulator.simulate_one_day()

    assert day2.courses_started == 1
    assert participant.course_id == course_id
    assert participant.id in school.courses[course_id].participant_ids


def test_failed_verification_still_drains_the_day(school, participant, settings):
    school.add_participant(participant)
    participant.course_id = uuid4()
    simulator = SchoolSimulator(school, settings=settings, rng=random.Random(0))

    with pytest.raises(InvariantViolationError):
        simulator.simulate_one_day()

    assert school.journal.drain() == []
    assert school.days_running == 2

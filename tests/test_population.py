import random

import pytest

from services.simulation_service.orchestrator import SimulationOrchestrator
from services.simulation_service.population import (
    FAMILY_NAMES,
    FEMALE_NAMES,
    MALE_NAMES,
    PopulationGenerator,
)
from shared.domain.academic import Subject
from shared.domain.eligibility import InstructorCategory
from shared.domain.entities import Instructor
from shared.domain.exceptions import ValidationError
from shared.domain.school import School


def test_generated_people_are_plausible(settings):
    generator = PopulationGenerator(random.Random(5), settings=settings)

    for _ in range(50):
        person = generator.participant()
        first, family = person.name.split(" ")
        assert person.gender in ("M", "F")
        assert 16 <= person.age <= 65
        assert first in (MALE_NAMES if person.gender == "M" else FEMALE_NAMES)
        assert family in FAMILY_NAMES


def test_arrivals_follow_probabilities(school, settings):
    settings.teacher_join_probability = 1.0
    settings.gui_trainer_join_probability = 1.0
    generator = PopulationGenerator(random.Random(5), settings=settings)

    participants, instructors = generator.arrivals(school)

    assert participants == []
    assert sorted(i.category for i in instructors) == sorted(
        [InstructorCategory.TEACHER, InstructorCategory.GUI_TRAINER]
    )
    assert len(school.instructors) == 2


def test_participant_arrivals_are_bounded(school, settings):
    settings.max_participants_arriving = 3
    generator = PopulationGenerator(random.Random(9), settings=settings)

    counts = [len(generator.arrivals(school)[0]) for _ in range(30)]

    assert set(counts) <= {0, 1, 2}


def test_idle_instructors_leave(prepared_school, programming, teacher, oo_trainer, settings):
    course = prepared_school.create_course(programming.id, start_offset_days=2)
    prepared_school.assign_instructor(course.id, teacher.id)
    settings.instructor_leave_percent = 100
    generator = PopulationGenerator(random.Random(1), settings=settings)

    instructors_left, _ = generator.attrition(prepared_school)

    assert instructors_left == 1
    assert list(prepared_school.instructors) == [teacher.id]
    assert oo_trainer.id not in prepared_school.instructors


def test_fully_certified_participants_leave(prepared_school, make_participant, settings):
    graduate = make_participant(name="Grad", certificates=[1, 2])
    prepared_school.add_participant(graduate)
    generator = PopulationGenerator(random.Random(1), settings=settings)

    _, participants_left = generator.attrition(prepared_school)

    assert participants_left == 1
    assert graduate.id not in prepared_school.participants
    assert len(prepared_school.participants) == 1


def test_enrolled_participants_never_leave_idle_attrition(
    prepared_school, programming, participant, settings
):
    course = prepared_school.create_course(programming.id, start_offset_days=2)
    prepared_school.enrol_participant(course.id, participant.id)
    settings.participant_leave_percent = 100
    generator = PopulationGenerator(random.Random(1), settings=settings)

    generator.attrition(prepared_school)

    assert participant.id in prepared_school.participants


def test_run_requires_positive_days(prepared_school, settings):
    orchestrator = SimulationOrchestrator(prepared_school, settings=settings)

    with pytest.raises(ValidationError):
        orchestrator.run(0)


def test_run_returns_one_report_per_day(prepared_school, settings):
    orchestrator = SimulationOrchestrator(prepared_school, settings=settings)

    reports = orchestrator.run(4)

    assert [r.day for r in reports] == [1, 2, 3, 4]
    assert prepared_school.days_running == 5


def test_long_runs_keep_journal_history_bounded(monkeypatch, settings, programming):
    limited = settings.model_copy(update={"event_history_limit": 5})
    monkeypatch.setattr("shared.domain.school.get_settings", lambda: limited)
    school = School(name="Long Run")
    school.add_subject(programming)
    orchestrator = SimulationOrchestrator(school, settings=limited)

    reports = orchestrator.run(20)

    assert sum(len(r.events) for r in reports) > 5
    assert 0 < len(school.journal) <= 5
    assert len(school.journal.history()) == len(school.journal)


def test_departures_are_part_of_the_day_report(school, settings):
    school.add_subject(Subject(id=1, specialism=4, duration=1))
    school.add_instructor(Instructor(name="D", category=InstructorCategory.DEMONSTRATOR))
    settings.instructor_leave_percent = 100
    orchestrator = SimulationOrchestrator(school, settings=settings, rng=random.Random(0))

    report = orchestrator.run_day()

    assert report.instructors_left == 1
    assert school.instructors == {}


def test_same_seed_reproduces_a_run(settings):
    settings.max_participants_arriving = 3
    settings.teacher_join_probability = 0.2
    settings.oo_trainer_join_probability = 0.05
    settings.participant_leave_percent = 5
    settings.instructor_leave_percent = 20

    def run(seed):
        school = School()
        school.add_subject(Subject(id=1, specialism=1, duration=2))
        school.add_subject(Subject(id=2, specialism=2, duration=3, prerequisites=[1]))
        orchestrator = SimulationOrchestrator(school, settings=settings, rng=random.Random(seed))
        return [r.model_dump(exclude={"events"}) for r in orchestrator.run(15)]

    assert run(21) == run(21)

import random

from services.simulation_service.matching import assign_instructors, assign_participants
from shared.domain.academic import Subject
from shared.domain.school import School


def test_first_fit_skips_ineligible_instructors(school, programming, demonstrator, teacher):
    labs = Subject(id=2, description="Labs", specialism=2, duration=1)
    school.add_subject(programming)
    school.add_subject(labs)
    school.add_instructor(demonstrator)
    school.add_instructor(teacher)
    first = school.create_course(programming.id, start_offset_days=2)
    second = school.create_course(labs.id, start_offset_days=2)

    assignments = assign_instructors(school)

    assert assignments == [(first.id, teacher.id), (second.id, demonstrator.id)]
    assert school.idle_instructors() == []


def test_instructor_is_not_double_booked(school, programming, teacher):
    other = Subject(id=2, description="Other", specialism=1, duration=1)
    school.add_subject(programming)
    school.add_subject(other)
    school.add_instructor(teacher)
    school.create_course(programming.id, start_offset_days=2)
    school.create_course(other.id, start_offset_days=2)

    assignments = assign_instructors(school)

    assert len(assignments) == 1
    assert len(school.courses_requiring_instructor()) == 1


def test_uninstructed_course_retries_next_pass(school, oop, teacher, oo_trainer):
    school.add_subject(oop)
    school.add_instructor(teacher)
    course = school.create_course(oop.id, start_offset_days=2)

    assert assign_instructors(school) == []

    school.add_instructor(oo_trainer)
    assert assign_instructors(school) == [(course.id, oo_trainer.id)]


def test_pool_empties_when_courses_fill(school, programming, make_participant):
    school.add_subject(programming)
    course = school.create_course(programming.id, start_offset_days=2)
    for i in range(5):
        school.add_participant(make_participant(name=f"P{i}"))

    enrollments = assign_participants(school, random.Random(7))

    assert len(enrollments) == 3
    assert course.size == 3
    assert len(school.unenrolled_participants()) == 2


def test_ineligible_participants_stay_idle(school, programming, oop, make_participant):
    school.add_subject(oop)
    course = school.create_course(oop.id, start_offset_days=2)
    novice = make_participant(name="Novice")
    skilled = make_participant(name="Skilled", certificates=[programming.id])
    school.add_participant(novice)
    school.add_participant(skilled)

    enrollments = assign_participants(school, random.Random(7))

    assert enrollments == [(course.id, skilled.id)]
    assert not novice.is_enrolled


def test_participants_spread_over_open_courses(school, make_participant):
    for subject_id in range(3):
        school.add_subject(Subject(id=subject_id, specialism=1, duration=1))
        school.create_course(subject_id, start_offset_days=2)
    for i in range(9):
        school.add_participant(make_participant(name=f"P{i}"))

    enrollments = assign_participants(school, random.Random(3))

    assert len(enrollments) == 9
    assert all(course.size == 3 for course in school.courses.values())


def test_same_seed_same_allocation(make_participant):
    def allocate(seed):
        school = School()
        for subject_id in range(3):
            school.add_subject(Subject(id=subject_id, specialism=1, duration=1))
            school.create_course(subject_id, start_offset_days=2)
        names = [f"P{i}" for i in range(4)]
        for name in names:
            school.add_participant(make_participant(name=name))
        assign_participants(school, random.Random(seed))
        return [
            (p.name, school.get_course(p.course_id).subject_id)
            for p in school.participants.values()
        ]

    assert allocate(11) == allocate(11)

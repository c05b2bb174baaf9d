"""
Text Reports

Human-readable rendering of the school and its entities. Collections are
sorted (subjects and courses by description, people by name) and an empty
collection renders as a "**NO ENTRIES**" marker.
"""

from collections.abc import Callable, Iterable
from typing import TypeVar

from services.simulation_service.schemas import EVENT_COUNTERS, DayReport
from shared.domain.academic import Course, Subject
from shared.domain.entities import Instructor, Participant
from shared.domain.school import School

T = TypeVar("T")

SEPARATOR = "+------------------------------------+"
NO_ENTRIES = "**NO ENTRIES**"


def _yes_no(flag: bool) -> str:
    return "YES" if flag else "NO"


def _subject_lines(subject: Subject) -> list[str]:
    lines = [
        f"Subject Description: {subject.description}",
        f"Subject ID: {subject.id}",
        f"Subject Specialism: {subject.specialism}",
        f"Subject Duration: {subject.duration} days",
    ]
    if subject.prerequisites:
        lines.append(f"Subject Prerequisites: {subject.prerequisites}")
    return lines


def _course_lines(course: Course, school: School) -> list[str]:
    lines = ["COURSE INFO:", *_subject_lines(school.get_subject(course.subject_id))]
    if course.days_until_start > 0:
        lines.append(f"The course will start in {course.days_until_start} days")
    else:
        lines.append(f"The course will end in {course.days_to_run} days")
    lines.append(f"The number of participants enrolled is {course.size}")
    lines.append(f"Has an Instructor: {_yes_no(course.has_instructor)}")
    return lines


def _person_lines(person: Participant | Instructor) -> list[str]:
    return [f"Name: {person.name}", f"Gender: {person.gender}", f"Age: {person.age}"]


def render_subject(subject: Subject) -> str:
    return "\n".join([*_subject_lines(subject), SEPARATOR])


def render_course(course: Course, school: School) -> str:
    return "\n".join([*_course_lines(course, school), SEPARATOR])


def render_participant(participant: Participant, school: School) -> str:
    lines = _person_lines(participant)
    lines.append(f"Certificates: {_yes_no(bool(participant.certificates))}")
    if participant.certificates:
        lines.append(" ".join(str(c) for c in participant.certificates))
    lines.append(f"Enrolled in a course: {_yes_no(participant.is_enrolled)}")
    if participant.course_id is not None:
        lines.extend(_course_lines(school.get_course(participant.course_id), school))
    lines.append(SEPARATOR)
    return "\n".join(lines)


def render_instructor(instructor: Instructor, school: School) -> str:
    lines = _person_lines(instructor)
    lines.append(f"Category: {instructor.category.value}")
    lines.append(f"Assigned Course: {_yes_no(instructor.is_teaching)}")
    if instructor.course_id is not None:
        lines.extend(_course_lines(school.get_course(instructor.course_id), school))
    lines.append(SEPARATOR)
    return "\n".join(lines)


def _section(items: Iterable[T], key: Callable[[T], object], render: Callable[[T], str]) -> str:
    ordered = sorted(items, key=key)
    if not ordered:
        return NO_ENTRIES
    return "\n".join(render(item) for item in ordered)


def render_school(school: School) -> str:
    """Render every entity set of the school."""
    def subject_key(subject: Subject) -> tuple[str, int]:
        return subject.description, subject.id

    def course_key(course: Course) -> tuple[str, int]:
        return subject_key(school.get_subject(course.subject_id))

    def person_key(person: Participant | Instructor) -> tuple[str, str]:
        return person.name, str(person.id)

    return "\n".join([
        f"THE NAME OF THIS SCHOOL IS: {school.name}",
        f"DAY: {school.days_running}",
        "",
        "THE SUBJECTS TAUGHT ARE:",
        _section(school.subjects.values(), subject_key, render_subject),
        "",
        "THE COURSES ARRANGED ARE:",
        _section(school.courses.values(), course_key, lambda c: render_course(c, school)),
        "",
        "THE INSTRUCTORS OF THIS SCHOOL ARE:",
        _section(
            school.instructors.values(), person_key, lambda i: render_instructor(i, school)
        ),
        "",
        "THE PARTICIPANTS OF THIS SCHOOL ARE:",
        _section(
            school.participants.values(), person_key, lambda p: render_participant(p, school)
        ),
        SEPARATOR,
    ])


def render_day_report(report: DayReport) -> str:
    """Render the counters of a day report, one line per non-zero counter."""
    lines = [f"**Day {report.day}**"]
    for field in EVENT_COUNTERS:
        count = getattr(report, field)
        if count:
            lines.append(f"{field.replace('_', ' ').capitalize()}: {count}")
    if len(lines) == 1:
        lines.append("Nothing happened")
    return "\n".join(lines)

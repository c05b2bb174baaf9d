"""
Catalog Loader

Builds a School from a text catalog with one entity per line. Fields are
separated by ':' or ',':

    school:<name>
    subject:<description>,<id>,<specialism>,<duration>[,<prerequisite>...]
    student:<name>,<gender>,<age>
    Teacher:<name>,<gender>,<age>        (also Demonstrator, OOTrainer, GUITrainer)

Malformed lines are logged and skipped; blank lines and '#' comments are
ignored. A catalog without subjects cannot be simulated.
"""

import re
from pathlib import Path

import pydantic
import structlog

from shared.config import get_settings
from shared.domain.academic import Subject
from shared.domain.eligibility import InstructorCategory
from shared.domain.entities import Instructor, Participant
from shared.domain.exceptions import CatalogParseError, SubjectsNotFoundError
from shared.domain.school import School

logger = structlog.get_logger(__name__)

FIELD_SEPARATOR = re.compile(r"[:,]")

INSTRUCTOR_KINDS: dict[str, InstructorCategory] = {
    "Teacher": InstructorCategory.TEACHER,
    "Demonstrator": InstructorCategory.DEMONSTRATOR,
    "OOTrainer": InstructorCategory.OO_TRAINER,
    "GUITrainer": InstructorCategory.GUI_TRAINER,
}


def _int_field(fields: list[str], index: int, name: str, line_number: int, line: str) -> int:
    try:
        return int(fields[index])
    except IndexError:
        raise CatalogParseError(
            f"Missing field '{name}'", line_number=line_number, line=line
        ) from None
    except ValueError:
        raise CatalogParseError(
            f"Field '{name}' must be an integer", line_number=line_number, line=line
        ) from None


def _text_field(fields: list[str], index: int, name: str, line_number: int, line: str) -> str:
    if index >= len(fields) or not fields[index]:
        raise CatalogParseError(f"Missing field '{name}'", line_number=line_number, line=line)
    return fields[index]


def parse_subject(fields: list[str], line_number: int, line: str) -> Subject:
    """
    Parse the fields of a subject line.

    Non-integer prerequisite tokens are skipped one by one; the subject
    itself still loads.
    """
    description = _text_field(fields, 1, "description", line_number, line)
    subject_id = _int_field(fields, 2, "id", line_number, line)
    specialism = _int_field(fields, 3, "specialism", line_number, line)
    duration = _int_field(fields, 4, "duration", line_number, line)

    prerequisites: list[int] = []
    for token in fields[5:]:
        try:
            prerequisites.append(int(token))
        except ValueError:
            logger.warning(
                "Prerequisite must be an integer, skipping it",
                line_number=line_number,
                token=token,
            )

    try:
        return Subject(
            id=subject_id,
            description=description,
            specialism=specialism,
            duration=duration,
            prerequisites=prerequisites,
        )
    except pydantic.ValidationError as e:
        raise CatalogParseError(
            f"Invalid subject: {e.errors()[0]['msg']}",
            line_number=line_number,
            line=line,
            cause=e,
        ) from e


def _person_fields(fields: list[str], line_number: int, line: str) -> tuple[str, str, int]:
    name = _text_field(fields, 1, "name", line_number, line)
    gender = _text_field(fields, 2, "gender", line_number, line)[0]
    age = _int_field(fields, 3, "age", line_number, line)
    return name, gender, age


def parse_line(school: School, line: str, line_number: int) -> None:
    """
    Apply one catalog line to a school.

    Args:
        school: School being loaded
        line: Raw catalog line
        line_number: 1-based line number for diagnostics

    Raises:
        CatalogParseError: If the line cannot be turned into an entity
    """
    fields = [field.strip() for field in FIELD_SEPARATOR.split(line.strip())]
    kind = fields[0]

    if kind == "school":
        school.name = _text_field(fields, 1, "name", line_number, line)
    elif kind == "subject":
        school.add_subject(parse_subject(fields, line_number, line))
    elif kind == "student":
        name, gender, age = _person_fields(fields, line_number, line)
        school.add_participant(Participant(name=name, gender=gender, age=age))
    elif kind in INSTRUCTOR_KINDS:
        name, gender, age = _person_fields(fields, line_number, line)
        school.add_instructor(
            Instructor(name=name, gender=gender, age=age, category=INSTRUCTOR_KINDS[kind])
        )
    else:
        raise CatalogParseError(f"Unknown entity kind '{kind}'", line_number=line_number, line=line)


def load_catalog(text: str, school_name: str | None = None) -> School:
    """
    Build a school from catalog text.

    Args:
        text: Catalog content
        school_name: Name used when the catalog has no school line
            (defaults to ``settings.school_name``)

    Returns:
        School: Loaded school on day 1

    Raises:
        SubjectsNotFoundError: If no subject could be loaded
    """
    school = School(name=school_name or get_settings().school_name)
    skipped = 0

    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        try:
            parse_line(school, line, line_number)
        except CatalogParseError as e:
            skipped += 1
            logger.warning("Skipping catalog line", line_number=line_number, reason=e.message)

    if not school.subjects:
        raise SubjectsNotFoundError()

    # Catalog entities are the initial state, not arrivals of day 1
    school.journal.drain()

    logger.info(
        "Catalog loaded",
        school=school.name,
        subjects=len(school.subjects),
        participants=len(school.participants),
        instructors=len(school.instructors),
        skipped_lines=skipped,
    )
    return school


def load_catalog_file(path: str | Path, school_name: str | None = None) -> School:
    """
    Build a school from a catalog file.

    Raises:
        CatalogParseError: If the file cannot be read
        SubjectsNotFoundError: If no subject could be loaded
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogParseError(f"Cannot read catalog: {e}", line=str(path), cause=e) from e

    try:
        return load_catalog(text, school_name=school_name)
    except SubjectsNotFoundError as e:
        e.context["source"] = str(path)
        raise

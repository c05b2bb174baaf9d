import pytest
from structlog.testing import capture_logs

from services.simulation_service.loader import load_catalog, load_catalog_file
from shared.domain.eligibility import InstructorCategory
from shared.domain.exceptions import CatalogParseError, SubjectsNotFoundError


def test_catalog_is_loaded(catalog_text):
    school = load_catalog(catalog_text)

    assert school.name == "Java School"
    assert sorted(school.subjects) == [1, 2, 3]
    assert school.subjects[2].prerequisites == [1]
    assert school.subjects[3].prerequisites == [1, 2]
    assert school.subjects[1].description == "Programming"
    assert len(school.participants) == 2
    assert sorted(i.category for i in school.instructors.values()) == sorted(
        [InstructorCategory.TEACHER, InstructorCategory.OO_TRAINER]
    )
    assert school.days_running == 1


def test_catalog_people_are_initial_state(catalog_text):
    school = load_catalog(catalog_text)

    assert school.journal.drain() == []


def test_default_school_name():
    school = load_catalog("subject:Programming,1,1,3", school_name="Fallback")

    assert school.name == "Fallback"


def test_invalid_person_fields_are_repaired():
    school = load_catalog("subject:A,1,1,1\nstudent:Zed,X,400")

    student = next(iter(school.participants.values()))
    assert student.gender == "*"
    assert student.age == -1


def test_bad_subject_lines_are_skipped():
    school = load_catalog(
        "subject:Good,1,1,1\n"
        "subject:Negative,-1,1,1\n"
        "subject:Short,2,1\n"
        "subject:Duplicate,1,2,2\n"
    )

    assert list(school.subjects) == [1]
    assert school.subjects[1].description == "Good"


def test_skipped_lines_are_warned_about_once():
    with capture_logs() as logs:
        load_catalog("subject:Good,1,1,1\nsubject:Short,2,1\nrobot:R2,M,3\n")

    warnings = [entry for entry in logs if entry["log_level"] == "warning"]
    assert [entry["line_number"] for entry in warnings] == [2, 3]
    assert not [entry for entry in logs if entry["log_level"] == "error"]


def test_catalog_without_subjects_is_rejected():
    with pytest.raises(SubjectsNotFoundError):
        load_catalog("school:Empty\nstudent:Ann,F,20\n")


def test_catalog_file(tmp_path, catalog_text):
    path = tmp_path / "catalog.txt"
    path.write_text(catalog_text, encoding="utf-8")

    school = load_catalog_file(path)

    assert len(school.subjects) == 3


def test_missing_catalog_file(tmp_path):
    with pytest.raises(CatalogParseError):
        load_catalog_file(tmp_path / "missing.txt")


def test_empty_catalog_file_reports_source(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("# nothing here\n", encoding="utf-8")

    with pytest.raises(SubjectsNotFoundError) as exc_info:
        load_catalog_file(path)

    assert exc_info.value.context["source"] == str(path)

# tests/conftest.py
import random

import pytest

from shared.config import Settings
from shared.domain.academic import Subject
from shared.domain.eligibility import InstructorCategory
from shared.domain.entities import Instructor, Participant
from shared.domain.school import School
from shared.observability import configure_logging


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    configure_logging(Settings(log_level="WARNING", log_format="text"))
    yield


@pytest.fixture
def settings(tmp_path) -> Settings:
    """
    Deterministic settings: no arrivals, no departures, invariants checked.
    """
    return Settings(
        random_seed=42,
        course_start_offset_days=2,
        course_capacity=3,
        max_participants_arriving=1,
        teacher_join_probability=0.0,
        demonstrator_join_probability=0.0,
        oo_trainer_join_probability=0.0,
        gui_trainer_join_probability=0.0,
        instructor_leave_percent=-1,
        participant_leave_percent=-1,
        verify_invariants=True,
        snapshot_dir=str(tmp_path / "snapshots"),
    )


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def school() -> School:
    return School(name="Test School")


@pytest.fixture
def programming() -> Subject:
    return Subject(id=1, description="Programming", specialism=1, duration=3)


@pytest.fixture
def oop() -> Subject:
    return Subject(id=2, description="OOP", specialism=3, duration=2, prerequisites=[1])


@pytest.fixture
def teacher() -> Instructor:
    return Instructor(name="Tom Hall", gender="M", age=40, category=InstructorCategory.TEACHER)


@pytest.fixture
def demonstrator() -> Instructor:
    return Instructor(
        name="Dana Bell", gender="F", age=30, category=InstructorCategory.DEMONSTRATOR
    )


@pytest.fixture
def oo_trainer() -> Instructor:
    return Instructor(
        name="Olga Kuhn", gender="F", age=35, category=InstructorCategory.OO_TRAINER
    )


@pytest.fixture
def make_participant():
    def _make(name: str = "Ann Miller", certificates: list[int] | None = None) -> Participant:
        return Participant(name=name, gender="F", age=21, certificates=certificates or [])

    return _make


@pytest.fixture
def participant(make_participant) -> Participant:
    return make_participant()


@pytest.fixture
def prepared_school(school, programming, oop, teacher, oo_trainer, participant) -> School:
    """School with two subjects, two instructors and one participant."""
    school.add_subject(programming)
    school.add_subject(oop)
    school.add_instructor(teacher)
    school.add_instructor(oo_trainer)
    school.add_participant(participant)
    school.journal.drain()
    return school


CATALOG = """\
school:Java School
# catalog used by loader and API tests
subject:Programming,1,1,3
subject:OOP,2,3,4,1
subject:GUI,3,4,2,1,x,2

student:Ann Bell,F,21
student:Carlos Clark,M,30
Teacher:Tom Hall,M,40
OOTrainer:Olga Kuhn,F,35
Banana:foo
subject:Broken,abc,1,1
student:Bob
"""


@pytest.fixture
def catalog_text() -> str:
    return CATALOG

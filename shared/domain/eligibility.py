"""
Eligibility Rules

Pure predicates deciding who may teach and who may attend a subject.
Instructor categories resolve to specialism sets through a lookup table;
the sets overlap because broader categories extend narrower ones.
"""

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.domain.academic import Subject
    from shared.domain.entities import Participant


class InstructorCategory(str, Enum):
    """Instructor qualification category."""

    TEACHER = "teacher"
    DEMONSTRATOR = "demonstrator"
    OO_TRAINER = "oo_trainer"
    GUI_TRAINER = "gui_trainer"


SPECIALISMS_BY_CATEGORY: dict[InstructorCategory, frozenset[int]] = {
    InstructorCategory.TEACHER: frozenset({1, 2}),
    InstructorCategory.DEMONSTRATOR: frozenset({2}),
    InstructorCategory.OO_TRAINER: frozenset({1, 2, 3}),
    InstructorCategory.GUI_TRAINER: frozenset({1, 2, 4}),
}


def eligible_specialisms(category: InstructorCategory) -> frozenset[int]:
    """Get the specialisms an instructor category is qualified for."""
    return SPECIALISMS_BY_CATEGORY[category]


def can_teach(category: InstructorCategory, specialism: int) -> bool:
    """
    Check whether an instructor category can teach a specialism.

    Args:
        category: Instructor category
        specialism: Subject specialism tag

    Returns:
        bool: True if the specialism is in the category's set
    """
    return specialism in SPECIALISMS_BY_CATEGORY[category]


def has_prerequisites(participant: "Participant", subject: "Subject") -> bool:
    """
    Check whether a participant holds every prerequisite of a subject.

    A subject without prerequisites is open to everyone; a participant
    without certificates cannot attend a subject that has any.

    Args:
        participant: Participant attempting to enroll
        subject: Subject taught by the course

    Returns:
        bool: True if the prerequisites are satisfied
    """
    return satisfies_prerequisites(subject.prerequisites, participant.certificates)


def satisfies_prerequisites(prerequisites: list[int], certificates: list[int]) -> bool:
    """Check that every prerequisite subject ID appears among the certificates."""
    if not prerequisites:
        return True
    if not certificates:
        return False
    return set(prerequisites).issubset(certificates)

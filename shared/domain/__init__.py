"""
School Domain Models

Core entities and value objects of the school simulation.

Ownership:
- School owns subjects, courses, participants and instructors
- Course references its subject, instructor and roster by ID
- Participant and Instructor reference their current course by ID
"""

from shared.domain.academic import Course, CourseState, Subject
from shared.domain.eligibility import (
    InstructorCategory,
    can_teach,
    eligible_specialisms,
    has_prerequisites,
    satisfies_prerequisites,
)
from shared.domain.entities import AbstractEntity, Instructor, Participant, Person
from shared.domain.policies import (
    CapacityPolicy,
    CertificateNotHeldPolicy,
    CourseNotStartedPolicy,
    EnrollmentPolicy,
    PolicyEngine,
    PolicyResult,
    PrerequisitePolicy,
    create_default_enrollment_policy_engine,
)
from shared.domain.school import School

__all__ = [
    # Entities
    "AbstractEntity",
    "Person",
    "Participant",
    "Instructor",
    # Academic
    "Subject",
    "Course",
    "CourseState",
    # Eligibility
    "InstructorCategory",
    "can_teach",
    "eligible_specialisms",
    "has_prerequisites",
    "satisfies_prerequisites",
    # Policies
    "EnrollmentPolicy",
    "PolicyResult",
    "PolicyEngine",
    "CertificateNotHeldPolicy",
    "PrerequisitePolicy",
    "CourseNotStartedPolicy",
    "CapacityPolicy",
    "create_default_enrollment_policy_engine",
    # World
    "School",
]

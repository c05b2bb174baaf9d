"""
Core Entity Hierarchy

AbstractEntity → Person → Participant/Instructor

Features:
- Universal ID for identifier-based back-references
- Repairing validators: invalid construction input becomes a sentinel value
  instead of failing the whole entity
- Enrollment and teaching state derived from a single course reference
"""

from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID, uuid4

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared.domain.eligibility import InstructorCategory, can_teach

logger = structlog.get_logger(__name__)

UNKNOWN_GENDER = "*"
UNKNOWN_AGE = -1
MAX_AGE = 130
VALID_GENDERS = ("M", "F")


class AbstractEntity(BaseModel, ABC):
    """
    Base abstract entity class providing universal ID.

    All people and courses inherit from this class, establishing a consistent
    identity pattern. Entities are compared and hashed by ID so they can live
    in sets and dict keys.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        use_enum_values=False,
        arbitrary_types_allowed=True,
    )

    id: UUID = Field(default_factory=uuid4, description="Universal unique identifier")

    def __hash__(self) -> int:
        """Hash based on entity ID for set/dict usage."""
        return hash(self.id)

    def __eq__(self, other: object) -> bool:
        """Equality based on entity ID and type."""
        if not isinstance(other, AbstractEntity):
            return NotImplemented
        return self.id == other.id and isinstance(other, type(self))

    @abstractmethod
    def validate_business_rules(self) -> bool:
        """
        Validate entity-specific business rules.

        Returns:
            bool: True if all business rules are satisfied

        Raises:
            ValueError: If business rules are violated
        """


class Person(AbstractEntity, ABC):
    """
    Abstract base class for participants and instructors.

    Gender must be 'M' or 'F' and age must lie in [0, 130]; anything else is
    replaced by the "unknown" sentinel ('*' and -1) with a warning.
    """

    name: str = Field(..., description="Display name")
    gender: str = Field(default=UNKNOWN_GENDER, description="'M', 'F' or '*' when unknown")
    age: int = Field(default=UNKNOWN_AGE, description="Age in years or -1 when unknown")

    @field_validator("gender", mode="before")
    @classmethod
    def repair_gender(cls, v: Any) -> str:
        """Replace an unrecognised gender with the unknown sentinel."""
        if v in VALID_GENDERS or v == UNKNOWN_GENDER:
            return v
        logger.warning("The gender of a person can only be either 'M' or 'F'", gender=v)
        return UNKNOWN_GENDER

    @field_validator("age", mode="before")
    @classmethod
    def repair_age(cls, v: Any) -> int:
        """Replace a missing or out-of-range age with the unknown sentinel."""
        try:
            age = int(v)
        except (TypeError, ValueError):
            logger.warning("The age of the person is not valid", age=v)
            return UNKNOWN_AGE
        if age == UNKNOWN_AGE:
            return age
        if age < 0 or age > MAX_AGE:
            logger.warning("The age of the person is not valid", age=age)
            return UNKNOWN_AGE
        return age

    def validate_business_rules(self) -> bool:
        """Validate person business rules."""
        if self.gender not in VALID_GENDERS and self.gender != UNKNOWN_GENDER:
            raise ValueError(f"Invalid gender: {self.gender}")
        if self.age != UNKNOWN_AGE and not 0 <= self.age <= MAX_AGE:
            raise ValueError(f"Invalid age: {self.age}")
        return True


class Participant(Person):
    """
    Participant attending courses to collect certificates.

    A participant is enrolled exactly when it references a course.
    """

    certificates: list[int] = Field(
        default_factory=list, description="Subject IDs completed, ascending"
    )
    course_id: UUID | None = Field(default=None, description="Course currently attended")

    @field_validator("certificates")
    @classmethod
    def normalise_certificates(cls, v: list[int]) -> list[int]:
        """Certificates behave as a set; keep them unique and sorted."""
        return sorted(set(v))

    @property
    def is_enrolled(self) -> bool:
        """Check if the participant attends a course."""
        return self.course_id is not None

    def has_certificate(self, subject_id: int) -> bool:
        """Check if the participant already completed a subject."""
        return subject_id in self.certificates

    def graduate(self, subject_id: int) -> None:
        """
        Grant the certificate for a subject.

        Granting a certificate twice has no effect.
        """
        if subject_id not in self.certificates:
            self.certificates = [*self.certificates, subject_id]

    def enrol(self, course_id: UUID) -> None:
        """Record the course the participant attends."""
        if self.course_id is not None:
            raise ValueError("Participant is already enrolled")
        self.course_id = course_id

    def release(self) -> None:
        """Return the participant to the idle pool."""
        self.course_id = None

    def validate_business_rules(self) -> bool:
        """Validate participant business rules."""
        super().validate_business_rules()
        if self.certificates != sorted(set(self.certificates)):
            raise ValueError("Certificates must be unique and sorted")
        return True


class Instructor(Person):
    """
    Instructor of a given category.

    The category decides which specialisms the instructor may teach.
    An instructor is teaching exactly when it references a course.
    """

    category: InstructorCategory = Field(default=InstructorCategory.TEACHER)
    course_id: UUID | None = Field(default=None, description="Course currently taught")

    @property
    def is_teaching(self) -> bool:
        """Check if the instructor has a course."""
        return self.course_id is not None

    def can_teach(self, specialism: int) -> bool:
        """Check if the instructor is qualified for a specialism."""
        return can_teach(self.category, specialism)

    def assign_course(self, course_id: UUID, specialism: int) -> bool:
        """
        Take a course if idle and qualified.

        Args:
            course_id: Course to teach
            specialism: Specialism of the course's subject

        Returns:
            bool: True if the assignment happened
        """
        if self.is_teaching:
            return False
        if not self.can_teach(specialism):
            return False
        self.course_id = course_id
        return True

    def unassign_course(self) -> None:
        """Return the instructor to the idle pool."""
        self.course_id = None

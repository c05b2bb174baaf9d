"""
Policy Engine & Enrollment Policies

Implements Strategy pattern for pluggable enrollment policies.
Supports certificate, prerequisite, start-date and capacity checks.
"""

from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID

import structlog
from pydantic import BaseModel, ConfigDict, Field

from shared.domain.eligibility import satisfies_prerequisites

logger = structlog.get_logger(__name__)


class PolicyResult(BaseModel):
    """Result of policy evaluation."""

    model_config = ConfigDict(frozen=True)

    allowed: bool = Field(..., description="Whether action is allowed")
    reason: str = Field(..., description="Human-readable reason")
    violated_rules: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


class EnrollmentPolicy(ABC):
    """
    Abstract base class for enrollment policies (Strategy pattern).

    Each concrete policy implements one enrollment rule.
    Policies are chained by the PolicyEngine.
    """

    def __init__(self, name: str, priority: int = 0):
        """
        Initialize policy.

        Args:
            name: Policy identifier
            priority: Execution priority (higher = earlier)
        """
        self.name = name
        self.priority = priority

    @abstractmethod
    def evaluate(
        self,
        participant_id: UUID,
        course_id: UUID,
        context: dict[str, Any],
    ) -> PolicyResult:
        """
        Evaluate if enrollment is allowed.

        Args:
            participant_id: Participant attempting to enroll
            course_id: Target course
            context: Participant and course data (certificates, roster size, etc.)

        Returns:
            PolicyResult: Evaluation result
        """

    def __lt__(self, other: "EnrollmentPolicy") -> bool:
        """Compare policies by priority for sorting."""
        return self.priority > other.priority  # Higher priority first


class CertificateNotHeldPolicy(EnrollmentPolicy):
    """
    Policy that refuses participants who already completed the subject.
    """

    def __init__(self, priority: int = 100):
        super().__init__("certificate_not_held", priority)

    def evaluate(
        self, participant_id: UUID, course_id: UUID, context: dict[str, Any]
    ) -> PolicyResult:
        """
        Check the participant has no certificate for the course's subject.

        Context should include:
        - subject_id: int
        - participant_certificates: list of subject IDs
        """
        subject_id: int = context["subject_id"]
        certificates: list[int] = context.get("participant_certificates", [])

        if subject_id in certificates:
            return PolicyResult(
                allowed=False,
                reason=f"Already holds the certificate for subject {subject_id}",
                violated_rules=["certificate_already_held"],
                metadata={"subject_id": subject_id},
            )

        return PolicyResult(allowed=True, reason="Certificate not held yet")


class PrerequisitePolicy(EnrollmentPolicy):
    """
    Policy that checks subject prerequisites.

    Validates that the participant holds a certificate for every prerequisite.
    """

    def __init__(self, priority: int = 95):
        super().__init__("prerequisite_check", priority)

    def evaluate(
        self, participant_id: UUID, course_id: UUID, context: dict[str, Any]
    ) -> PolicyResult:
        """
        Check if participant has completed prerequisites.

        Context should include:
        - subject_prerequisites: list of required subject IDs
        - participant_certificates: list of completed subject IDs
        """
        prerequisites: list[int] = context.get("subject_prerequisites", [])
        certificates: list[int] = context.get("participant_certificates", [])

        if not prerequisites:
            return PolicyResult(allowed=True, reason="No prerequisites required")

        if not satisfies_prerequisites(prerequisites, certificates):
            missing = sorted(set(prerequisites).difference(certificates))
            return PolicyResult(
                allowed=False,
                reason=f"Missing prerequisites: {', '.join(str(m) for m in missing)}",
                violated_rules=["prerequisite_requirement"],
                metadata={"missing_prerequisites": missing},
            )

        return PolicyResult(
            allowed=True,
            reason="All prerequisites satisfied",
            metadata={"prerequisites_checked": list(prerequisites)},
        )


class CourseNotStartedPolicy(EnrollmentPolicy):
    """
    Policy that closes enrollment once a course has started.
    """

    def __init__(self, priority: int = 90):
        super().__init__("course_not_started", priority)

    def evaluate(
        self, participant_id: UUID, course_id: UUID, context: dict[str, Any]
    ) -> PolicyResult:
        """
        Check the course is still pending.

        Context should include:
        - course_days_until_start: int
        """
        days_until_start: int = context.get("course_days_until_start", 0)

        if days_until_start <= 0:
            return PolicyResult(
                allowed=False,
                reason="Course has already started",
                violated_rules=["course_started"],
            )

        return PolicyResult(
            allowed=True,
            reason=f"Course starts in {days_until_start} days",
        )


class CapacityPolicy(EnrollmentPolicy):
    """
    Policy that enforces course capacity limits.

    Checks if the course roster has available places.
    """

    def __init__(self, priority: int = 85):
        super().__init__("capacity_check", priority)

    def evaluate(
        self, participant_id: UUID, course_id: UUID, context: dict[str, Any]
    ) -> PolicyResult:
        """
        Check if course has capacity.

        Context should include:
        - course_capacity: int
        - course_enrolled: int
        """
        capacity: int = context.get("course_capacity", 0)
        enrolled: int = context.get("course_enrolled", 0)

        if enrolled >= capacity:
            return PolicyResult(
                allowed=False,
                reason=f"Course is full ({enrolled}/{capacity})",
                violated_rules=["capacity_limit"],
                metadata={"capacity": capacity, "enrolled": enrolled},
            )

        return PolicyResult(
            allowed=True,
            reason=f"Capacity available ({enrolled}/{capacity})",
            metadata={"available_places": capacity - enrolled},
        )


class PolicyEngine:
    """
    Policy evaluation engine that coordinates multiple policies.

    Executes policies in priority order and stops at the first refusal.
    """

    def __init__(self):
        """Initialize policy engine."""
        self.policies: list[EnrollmentPolicy] = []

    def register_policy(self, policy: EnrollmentPolicy) -> None:
        """
        Register a policy with the engine.

        Args:
            policy: Policy to register
        """
        self.policies.append(policy)
        self.policies.sort()  # Sort by priority
        logger.debug("Policy registered", policy_name=policy.name, priority=policy.priority)

    def unregister_policy(self, policy_name: str) -> bool:
        """
        Unregister a policy.

        Args:
            policy_name: Name of policy to remove

        Returns:
            bool: True if policy was found and removed
        """
        initial_count = len(self.policies)
        self.policies = [p for p in self.policies if p.name != policy_name]
        return len(self.policies) < initial_count

    def evaluate_all(
        self, participant_id: UUID, course_id: UUID, context: dict[str, Any]
    ) -> tuple[bool, list[PolicyResult]]:
        """
        Evaluate all registered policies.

        Args:
            participant_id: Participant ID
            course_id: Course ID
            context: Evaluation context

        Returns:
            Tuple of (all_allowed, list of results)
        """
        results: list[PolicyResult] = []

        for policy in self.policies:
            try:
                result = policy.evaluate(participant_id, course_id, context)
            except Exception as e:
                logger.error(
                    "Policy evaluation error",
                    policy=policy.name,
                    error=str(e),
                    participant_id=str(participant_id),
                    course_id=str(course_id),
                )
                results.append(
                    PolicyResult(
                        allowed=False,
                        reason=f"Policy evaluation error: {str(e)}",
                        violated_rules=["policy_execution_error"],
                        metadata={"policy": policy.name, "error": str(e)},
                    )
                )
                return False, results

            results.append(result)

            # Stop on first failure (fail-fast)
            if not result.allowed:
                return False, results

        return True, results

    def get_registered_policies(self) -> list[str]:
        """Get list of registered policy names."""
        return [p.name for p in self.policies]


def create_default_enrollment_policy_engine() -> PolicyEngine:
    """
    Create policy engine with the school's enrollment rules.

    Order: certificate already held, prerequisites, course started, capacity.

    Returns:
        PolicyEngine: Configured engine with standard policies
    """
    engine = PolicyEngine()

    engine.register_policy(CertificateNotHeldPolicy(priority=100))
    engine.register_policy(PrerequisitePolicy(priority=95))
    engine.register_policy(CourseNotStartedPolicy(priority=90))
    engine.register_policy(CapacityPolicy(priority=85))

    return engine

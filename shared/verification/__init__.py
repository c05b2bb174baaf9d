"""
Runtime Verification Module

Provides runtime verification of school invariants.
"""

from shared.verification.school_invariants import (
    InvariantMonitor,
    InvariantViolationType,
    assert_school_invariants,
    get_invariant_monitor,
)

__all__ = [
    'InvariantMonitor',
    'get_invariant_monitor',
    'assert_school_invariants',
    'InvariantViolationType',
]

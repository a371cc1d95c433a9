"""
Operation Results Module

Every account operation reports success or failure through an
OperationResult instead of raising. A failed result always means that
nothing was changed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FailureReason(Enum):
    """Why an operation was refused"""
    INVALID_AMOUNT = "invalid_amount"                # <= 0, over balance or over credit limit
    INVALID_STATE = "invalid_state"                  # Status forbids the operation
    RECIPIENT_UNAVAILABLE = "recipient_unavailable"  # Transfer target missing or closed
    TRANSITION_REJECTED = "transition_rejected"      # No such transition from current status
    ACCOUNT_NOT_FOUND = "account_not_found"          # Service-level lookup failed


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of an account operation.

    Truthy on success so callers can write ``if account.deposit(amount):``.
    """
    success: bool
    reason: Optional[FailureReason] = None

    def __post_init__(self):
        if self.success and self.reason is not None:
            raise ValueError("A successful result cannot carry a failure reason")
        if not self.success and self.reason is None:
            raise ValueError("A failed result must carry a failure reason")

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls) -> 'OperationResult':
        return cls(success=True)

    @classmethod
    def fail(cls, reason: FailureReason) -> 'OperationResult':
        return cls(success=False, reason=reason)

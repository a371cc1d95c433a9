"""
Transaction Authorization Module

Stateless policy deciding which operations an account status permits and
whether an amount is acceptable. Accounts consult it for their own checks;
services and the API use it directly for pre-flight questions.
"""

from decimal import Decimal
from enum import Enum
from typing import Dict, FrozenSet, Optional

from .money import ZERO
from .results import FailureReason, OperationResult
from .status import AccountStatus


class Operation(Enum):
    """Operations an account holder can request"""
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    TRANSFER = "transfer"
    VIEW = "view"


# Operations that move money out of the account and so need covering funds
DEBIT_OPERATIONS = frozenset({Operation.WITHDRAW, Operation.TRANSFER})

PERMISSIONS: Dict[AccountStatus, FrozenSet[Operation]] = {
    AccountStatus.UNVERIFIED: frozenset({Operation.DEPOSIT, Operation.VIEW}),
    AccountStatus.VERIFIED: frozenset({
        Operation.DEPOSIT, Operation.WITHDRAW, Operation.TRANSFER, Operation.VIEW
    }),
    AccountStatus.SUSPENDED: frozenset({Operation.DEPOSIT, Operation.VIEW}),
    AccountStatus.CLOSED: frozenset({Operation.VIEW}),
}


class TransactionAuthorizer:
    """Maps (status, operation, amount, balance) to allowed or denied"""

    @staticmethod
    def is_allowed(status: AccountStatus, operation: Operation) -> bool:
        """Check the permission table only"""
        return operation in PERMISSIONS[status]

    @staticmethod
    def parse_operation(name: str) -> Optional[Operation]:
        """Resolve an operation name case-insensitively, None if unknown"""
        if not name:
            return None
        try:
            return Operation(name.strip().lower())
        except ValueError:
            return None

    @classmethod
    def authorize(
        cls,
        status: AccountStatus,
        operation: Operation,
        amount: Optional[Decimal] = None,
        balance: Optional[Decimal] = None
    ) -> OperationResult:
        """
        Decide whether an operation may proceed.

        Checks run in order: status permission, positive amount, and for
        debits, sufficient balance. VIEW carries no amount.

        Args:
            status: Current account status
            operation: Requested operation
            amount: Transaction amount (required for everything except VIEW)
            balance: Current balance (required for withdraw and transfer)
        """
        if not cls.is_allowed(status, operation):
            return OperationResult.fail(FailureReason.INVALID_STATE)

        if operation == Operation.VIEW:
            return OperationResult.ok()

        if amount is None or amount <= ZERO:
            return OperationResult.fail(FailureReason.INVALID_AMOUNT)

        if operation in DEBIT_OPERATIONS:
            if balance is None or amount > balance:
                return OperationResult.fail(FailureReason.INVALID_AMOUNT)

        return OperationResult.ok()

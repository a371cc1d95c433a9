"""
Transaction Observer Module

Hooks that let a policy object react to an account's operations without
subclassing Account. Observers are attached when the account is built and
are called while the account's lock is held.
"""

from decimal import Decimal
from typing import Any, Dict, TYPE_CHECKING

from .results import OperationResult

if TYPE_CHECKING:
    from .accounts import Account


class TransactionObserver:
    """
    Base observer; every hook is a no-op so policies override only what
    they care about.
    """

    def authorize_withdrawal(self, account: 'Account', amount: Decimal) -> bool:
        """Pre-check run before the status and balance checks of a withdrawal"""
        return True

    def on_deposit(self, account: 'Account', amount: Decimal, result: OperationResult) -> None:
        pass

    def on_withdraw_attempt(self, account: 'Account', amount: Decimal, result: OperationResult) -> None:
        """Called after the base withdrawal logic ran, successful or not"""
        pass

    def on_suspend(self, account: 'Account', result: OperationResult) -> None:
        pass

    def on_appeal(self, account: 'Account', result: OperationResult) -> None:
        pass

    def projection(self) -> Dict[str, Any]:
        """Read-only fields this observer contributes to Account.to_dict()"""
        return {}

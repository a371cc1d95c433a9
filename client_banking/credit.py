"""
Credit Score Module

A bounded credit score attached to an account as a TransactionObserver.
The score caps the size of a single withdrawal and moves with the account's
history: deposits and withdrawals build it up, overdraft attempts and
suspensions pull it down.
"""

from decimal import Decimal
from typing import Any, Dict, Optional, TYPE_CHECKING

from .observers import TransactionObserver
from .results import OperationResult
from .status import AccountStatus

if TYPE_CHECKING:
    from .accounts import Account


INITIAL_SCORE = 700
MIN_SCORE = 300
MAX_SCORE = 850

LIMIT_PER_POINT = 10          # Transaction limit = score * 10
BONUS_INTERVAL = 3            # Deposit bonus when the success count hits a multiple of 3
DEPOSIT_BONUS = 5
OVERDRAFT_PENALTY = 20
SUSPENSION_PENALTY = 50
APPEAL_RECOVERY = 25

# Factors used by recalculate()
HIGH_BALANCE = Decimal("5000")
MEDIUM_BALANCE = Decimal("1000")
LOW_BALANCE = Decimal("100")
STATUS_ADJUSTMENTS = {
    AccountStatus.UNVERIFIED: 0,
    AccountStatus.VERIFIED: 10,
    AccountStatus.SUSPENDED: -30,
    AccountStatus.CLOSED: -50,
}


def clamp_score(score: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, score))


class CreditScorePolicy(TransactionObserver):
    """
    Credit score bookkeeping for one account.

    The policy never touches the balance; it only refuses withdrawals above
    its limit and adjusts its own counters after the account acts.
    """

    def __init__(self, initial_score: int = INITIAL_SCORE):
        self._credit_score = clamp_score(initial_score)
        self._overdraft_attempts = 0
        self._successful_transactions = 0

    @property
    def credit_score(self) -> int:
        return self._credit_score

    @property
    def overdraft_attempts(self) -> int:
        return self._overdraft_attempts

    @property
    def successful_transactions(self) -> int:
        return self._successful_transactions

    @property
    def transaction_limit(self) -> Decimal:
        """Largest single withdrawal the current score allows"""
        return Decimal(self._credit_score * LIMIT_PER_POINT)

    def adjust(self, delta: int) -> int:
        """Move the score by `delta`, clamped to [MIN_SCORE, MAX_SCORE]"""
        self._credit_score = clamp_score(self._credit_score + delta)
        return self._credit_score

    def authorize_withdrawal(self, account: 'Account', amount: Decimal) -> bool:
        return amount <= self.transaction_limit

    def on_deposit(self, account: 'Account', amount: Decimal, result: OperationResult) -> None:
        if not result:
            return
        self._successful_transactions += 1
        if self._successful_transactions % BONUS_INTERVAL == 0:
            self.adjust(DEPOSIT_BONUS)

    def on_withdraw_attempt(self, account: 'Account', amount: Decimal, result: OperationResult) -> None:
        if result:
            self._successful_transactions += 1
        elif amount > account.balance:
            # Overdraft attempt, counted whatever else made the withdrawal fail
            self._overdraft_attempts += 1
            self.adjust(-OVERDRAFT_PENALTY)

    def on_suspend(self, account: 'Account', result: OperationResult) -> None:
        if result:
            self.adjust(-SUSPENSION_PENALTY)

    def on_appeal(self, account: 'Account', result: OperationResult) -> None:
        if result:
            self.adjust(APPEAL_RECOVERY)

    def recalculate(self, account: 'Account') -> int:
        """
        Recompute the score from scratch using the account's current factors.

        Balance: +50 above 5000, +25 above 1000, -25 below 100.
        History: +2 per successful transaction, -10 per overdraft attempt.
        Status: +10 verified, -30 suspended, -50 closed.
        """
        score = INITIAL_SCORE

        balance = account.balance
        if balance > HIGH_BALANCE:
            score += 50
        elif balance > MEDIUM_BALANCE:
            score += 25
        elif balance < LOW_BALANCE:
            score -= 25

        score += self._successful_transactions * 2
        score -= self._overdraft_attempts * 10
        score += STATUS_ADJUSTMENTS[account.status]

        self._credit_score = clamp_score(score)
        return self._credit_score

    def projection(self) -> Dict[str, Any]:
        return {
            "credit_score": self._credit_score,
            "transaction_limit": str(self.transaction_limit),
            "overdraft_attempts": self._overdraft_attempts,
            "successful_transactions": self._successful_transactions,
        }


def get_credit_policy(account: 'Account') -> Optional[CreditScorePolicy]:
    """Return the credit score policy attached to an account, if any"""
    for observer in account.observers:
        if isinstance(observer, CreditScorePolicy):
            return observer
    return None

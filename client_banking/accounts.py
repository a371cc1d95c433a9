"""
Account Management Module

Client bank accounts, their status-gated operations, and the service that
manages their lifecycle. Balances are Decimal and never go negative; every
operation answers with an OperationResult instead of raising.
"""

from contextlib import ExitStack, contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple, TYPE_CHECKING, Union
import threading

from .authorization import Operation, TransactionAuthorizer
from .config import ClientBankingConfig, get_config
from .credit import CreditScorePolicy, get_credit_policy
from .events import DomainEvent, EventDispatcher, create_account_event
from .logging_config import get_logger, log_action
from .money import AmountLike, ZERO, fits_balance, format_amount, to_amount
from .observers import TransactionObserver
from .results import FailureReason, OperationResult
from .status import AccountStatus, StatusTrigger, next_status

if TYPE_CHECKING:
    from .storage import AccountStoreInterface


def generate_card_number(account_id: int) -> str:
    """Four space-separated groups, each the id zero-padded to 4 digits"""
    group = f"{account_id:04d}"
    return " ".join([group] * 4)


@contextmanager
def _locked(*accounts: Optional['Account']):
    """Hold the locks of several accounts, always acquired in id order"""
    unique = {id(account): account for account in accounts if account is not None}
    with ExitStack() as stack:
        for account in sorted(unique.values(), key=lambda a: (a.id, id(a))):
            stack.enter_context(account._lock)
        yield


class Account:
    """
    Client bank account with a status state machine.

    Deposits are accepted in every state except CLOSED; withdrawals and
    transfers need a VERIFIED account with covering funds.
    """

    def __init__(
        self,
        account_id: int,
        client_name: Optional[str] = None,
        initial_balance: AmountLike = ZERO,
        observers: Optional[Iterable[TransactionObserver]] = None
    ):
        if isinstance(account_id, bool) or not isinstance(account_id, int):
            raise ValueError(f"Account id must be an integer, got {account_id!r}")
        if account_id < 0:
            raise ValueError("Account id cannot be negative")

        balance = to_amount(initial_balance)
        if balance < ZERO:
            raise ValueError("Initial balance cannot be negative")

        self._id = account_id
        self.client_name = client_name
        self._card_number = generate_card_number(account_id)
        self._balance = balance
        self._status = AccountStatus.UNVERIFIED
        self._observers: Tuple[TransactionObserver, ...] = tuple(observers or ())
        self._lock = threading.RLock()
        self.created_at = datetime.now(timezone.utc)

    def __repr__(self) -> str:
        return (f"Account(id={self._id}, card_number={self._card_number!r}, "
                f"balance={self._balance}, status={self._status.value})")

    @property
    def id(self) -> int:
        return self._id

    @property
    def card_number(self) -> str:
        return self._card_number

    @property
    def balance(self) -> Decimal:
        return self._balance

    @property
    def status(self) -> AccountStatus:
        return self._status

    @property
    def observers(self) -> Tuple[TransactionObserver, ...]:
        return self._observers

    def is_operation_allowed(self, operation: Operation) -> bool:
        """Check the permission table for the current status"""
        return TransactionAuthorizer.is_allowed(self._status, operation)

    # Transactions

    def deposit(self, amount: AmountLike) -> OperationResult:
        """Add funds; refused when CLOSED, when amount <= 0 or past MAX_AMOUNT"""
        amount = to_amount(amount)
        with self._lock:
            result = TransactionAuthorizer.authorize(self._status, Operation.DEPOSIT, amount)
            if result and not fits_balance(self._balance, amount):
                result = OperationResult.fail(FailureReason.INVALID_AMOUNT)
            if result:
                self._balance += amount
            for observer in self._observers:
                observer.on_deposit(self, amount, result)
        return result

    def withdraw(self, amount: AmountLike) -> OperationResult:
        """
        Remove funds from a VERIFIED account.

        Observers may veto the withdrawal up front (credit limit); a veto skips
        the base logic and the after-attempt hooks entirely.
        """
        amount = to_amount(amount)
        with self._lock:
            for observer in self._observers:
                if not observer.authorize_withdrawal(self, amount):
                    return OperationResult.fail(FailureReason.INVALID_AMOUNT)

            result = TransactionAuthorizer.authorize(
                self._status, Operation.WITHDRAW, amount, self._balance
            )
            if result:
                self._balance -= amount
            for observer in self._observers:
                observer.on_withdraw_attempt(self, amount, result)
        return result

    def transfer(
        self,
        recipient_card_number: str,
        amount: AmountLike,
        description: str = "",
        *,
        store: 'AccountStoreInterface'
    ) -> OperationResult:
        """
        Move funds to the account holding `recipient_card_number`.

        The recipient may be in any state but CLOSED. Both balances change
        under both accounts' locks, so the pair's total is conserved.
        `description` is informational only.
        """
        amount = to_amount(amount)
        recipient = store.find_by_card_number(recipient_card_number) if recipient_card_number else None

        with _locked(self, recipient):
            result = TransactionAuthorizer.authorize(
                self._status, Operation.TRANSFER, amount, self._balance
            )
            if not result:
                return result
            if recipient is None or recipient.status == AccountStatus.CLOSED:
                return OperationResult.fail(FailureReason.RECIPIENT_UNAVAILABLE)
            if recipient is not self and not fits_balance(recipient._balance, amount):
                return OperationResult.fail(FailureReason.INVALID_AMOUNT)

            self._balance -= amount
            recipient._balance += amount
        return OperationResult.ok()

    # State transitions

    def _transition(self, trigger: StatusTrigger) -> OperationResult:
        with self._lock:
            target = next_status(self._status, trigger)
            if target is None:
                return OperationResult.fail(FailureReason.TRANSITION_REJECTED)
            self._status = target
            return OperationResult.ok()

    def verify(self) -> OperationResult:
        return self._transition(StatusTrigger.VERIFY)

    def suspend(self) -> OperationResult:
        with self._lock:
            result = self._transition(StatusTrigger.SUSPEND)
            for observer in self._observers:
                observer.on_suspend(self, result)
        return result

    def appeal(self) -> OperationResult:
        """Reinstate a SUSPENDED account to VERIFIED"""
        with self._lock:
            result = self._transition(StatusTrigger.APPEAL)
            for observer in self._observers:
                observer.on_appeal(self, result)
        return result

    def close(self) -> OperationResult:
        return self._transition(StatusTrigger.CLOSE)

    def recalculate_credit_score(self) -> Optional[int]:
        """Recompute the attached credit score from current state; None when unscored"""
        with self._lock:
            policy = get_credit_policy(self)
            if policy is None:
                return None
            return policy.recalculate(self)

    def to_dict(self) -> Dict[str, Any]:
        """Read-only projection for presentation layers"""
        with self._lock:
            result = {
                "id": self._id,
                "client_name": self.client_name,
                "card_number": self._card_number,
                "balance": str(self._balance),
                "status": self._status.value,
            }
            for observer in self._observers:
                result.update(observer.projection())
        return result


def create_credit_score_account(
    account_id: int,
    client_name: Optional[str] = None,
    initial_balance: AmountLike = ZERO
) -> Account:
    """Build an account with a fresh CreditScorePolicy attached"""
    return Account(
        account_id,
        client_name=client_name,
        initial_balance=initial_balance,
        observers=[CreditScorePolicy()]
    )


class AccountManager:
    """
    Manages account creation, lookup and lifecycle transitions
    """

    def __init__(
        self,
        store: 'AccountStoreInterface',
        event_dispatcher: Optional[EventDispatcher] = None,
        config: Optional[ClientBankingConfig] = None
    ):
        self.store = store
        self.config = config or get_config()
        self.logger = get_logger("client_banking.accounts")
        self._event_dispatcher = event_dispatcher

    def _publish_event(self, event_type: DomainEvent, account: Account) -> None:
        """Publish a domain event if event dispatcher is available"""
        if self._event_dispatcher and self.config.enable_events:
            self._event_dispatcher.publish(create_account_event(event_type, account))

    def create_account(
        self,
        account_id: int,
        client_name: Optional[str] = None,
        initial_balance: AmountLike = ZERO,
        with_credit_score: bool = False
    ) -> Account:
        """
        Create and register a new account

        Args:
            account_id: Unique account id, also the source of the card number
            client_name: Display name of the account holder
            initial_balance: Opening balance, must not be negative
            with_credit_score: Attach a CreditScorePolicy

        Returns:
            Created Account object

        Raises:
            ValueError: on a negative balance or an id already in the store
        """
        if with_credit_score:
            account = create_credit_score_account(account_id, client_name, initial_balance)
        else:
            account = Account(account_id, client_name=client_name, initial_balance=initial_balance)

        self.store.add(account)

        log_action(
            self.logger, "info", "Account created",
            account_id=account.id, action="create",
            extra={"card_number": account.card_number, "credit_score": with_credit_score}
        )
        self._publish_event(DomainEvent.ACCOUNT_CREATED, account)
        return account

    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID"""
        return self.store.find_by_id(account_id)

    def get_account_by_card_number(self, card_number: str) -> Optional[Account]:
        """Get account by card number"""
        return self.store.find_by_card_number(card_number)

    def list_accounts(self) -> List[Account]:
        return self.store.list_accounts()

    def remove_account(self, account_id: int) -> bool:
        """Drop an account from the store"""
        account = self.store.find_by_id(account_id)
        if account is None or not self.store.remove(account_id):
            return False
        log_action(self.logger, "info", "Account removed", account_id=account_id, action="remove")
        self._publish_event(DomainEvent.ACCOUNT_REMOVED, account)
        return True

    def _apply_transition(
        self,
        account_id: int,
        trigger: StatusTrigger,
        event_type: DomainEvent
    ) -> OperationResult:
        account = self.store.find_by_id(account_id)
        if account is None:
            log_action(
                self.logger, "info", "Status change on unknown account",
                account_id=account_id, action=trigger.value,
                reason=FailureReason.ACCOUNT_NOT_FOUND.value
            )
            return OperationResult.fail(FailureReason.ACCOUNT_NOT_FOUND)

        old_status = account.status
        result = getattr(account, trigger.value)()
        if not result:
            log_action(
                self.logger, "info", "Status change rejected",
                account_id=account_id, action=trigger.value, reason=result.reason.value,
                extra={"status": old_status.value}
            )
            return result

        log_action(
            self.logger, "info", "Account status changed",
            account_id=account_id, action=trigger.value,
            extra={"old_status": old_status.value, "new_status": account.status.value}
        )
        self._publish_event(event_type, account)
        return result

    def verify_account(self, account_id: int) -> OperationResult:
        return self._apply_transition(account_id, StatusTrigger.VERIFY, DomainEvent.ACCOUNT_VERIFIED)

    def suspend_account(self, account_id: int) -> OperationResult:
        return self._apply_transition(account_id, StatusTrigger.SUSPEND, DomainEvent.ACCOUNT_SUSPENDED)

    def appeal_account(self, account_id: int) -> OperationResult:
        return self._apply_transition(account_id, StatusTrigger.APPEAL, DomainEvent.ACCOUNT_REINSTATED)

    def close_account(self, account_id: int) -> OperationResult:
        return self._apply_transition(account_id, StatusTrigger.CLOSE, DomainEvent.ACCOUNT_CLOSED)

    def is_operation_allowed(
        self,
        account: Optional[Account],
        operation: Union[Operation, str]
    ) -> bool:
        """Permission check by operation or operation name; False for unknowns"""
        if account is None:
            return False
        if not isinstance(operation, Operation):
            operation = TransactionAuthorizer.parse_operation(operation)
            if operation is None:
                return False
        return account.is_operation_allowed(operation)

    def recalculate_credit_score(self, account_id: int) -> Optional[int]:
        """Recompute the credit score of a scored account; None if not applicable"""
        account = self.store.find_by_id(account_id)
        if account is None:
            return None
        score = account.recalculate_credit_score()
        if score is None:
            return None

        log_action(
            self.logger, "info", "Credit score recalculated",
            account_id=account_id, action="recalculate_credit_score",
            extra={"credit_score": score}
        )
        return score

    def generate_statement(self, account: Optional[Account]) -> str:
        """Plain-text account statement"""
        if account is None:
            return "Account not found"

        lines = [
            "=== ACCOUNT STATEMENT ===",
            f"Client Name: {account.client_name}",
            f"Card Number: {account.card_number}",
            f"Balance: ${format_amount(account.balance)}",
            f"Status: {account.status.value.capitalize()}",
        ]
        policy = get_credit_policy(account)
        if policy is not None:
            lines.append(f"Credit Score: {policy.credit_score}")
            lines.append(f"Transaction Limit: ${format_amount(policy.transaction_limit)}")
        lines.append("========================")
        return "\n".join(lines) + "\n"

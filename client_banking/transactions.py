"""
Transaction Processing Module

Service layer over Account deposits, withdrawals and transfers. Adds
null-safe entry points, pre-flight validation against a configurable
ceiling, a transaction history, logging and event publication. Balance
rules themselves live on Account.
"""

import threading
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Deque, Dict, List, Optional

from .accounts import Account
from .authorization import DEBIT_OPERATIONS, Operation, TransactionAuthorizer
from .config import ClientBankingConfig, get_config
from .events import DomainEvent, EventDispatcher, create_transaction_event
from .logging_config import get_logger, log_action
from .money import AmountLike, ZERO, to_amount
from .results import FailureReason, OperationResult
from .storage import AccountStoreInterface


class TransactionType(Enum):
    """Types of client transactions"""
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    TRANSFER = "transfer"


_COMPLETED_EVENTS = {
    TransactionType.DEPOSIT: DomainEvent.DEPOSIT_COMPLETED,
    TransactionType.WITHDRAWAL: DomainEvent.WITHDRAWAL_COMPLETED,
    TransactionType.TRANSFER: DomainEvent.TRANSFER_COMPLETED,
}


@dataclass
class TransactionRecord:
    """One processed operation, successful or refused"""
    transaction_type: TransactionType
    account_id: Optional[int]
    amount: Decimal
    success: bool
    failure_reason: Optional[FailureReason] = None
    description: str = ""
    counterparty_card_number: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "transaction_type": self.transaction_type.value,
            "account_id": self.account_id,
            "amount": str(self.amount),
            "success": self.success,
            "failure_reason": self.failure_reason.value if self.failure_reason else None,
            "description": self.description,
            "counterparty_card_number": self.counterparty_card_number,
            "created_at": self.created_at.isoformat(),
        }


class TransactionProcessor:
    """
    Processes client transactions against accounts held in a store
    """

    def __init__(
        self,
        store: AccountStoreInterface,
        event_dispatcher: Optional[EventDispatcher] = None,
        config: Optional[ClientBankingConfig] = None
    ):
        self.store = store
        self.config = config or get_config()
        self.logger = get_logger("client_banking.transactions")
        self._event_dispatcher = event_dispatcher
        self._history: Deque[TransactionRecord] = deque(maxlen=self.config.max_history_size)
        self._history_lock = threading.Lock()

    def _publish_event(self, event_type: DomainEvent, record: TransactionRecord) -> None:
        """Publish a domain event if event dispatcher is available"""
        if self._event_dispatcher and self.config.enable_events:
            self._event_dispatcher.publish(create_transaction_event(event_type, record))

    def _record(
        self,
        transaction_type: TransactionType,
        account: Optional[Account],
        amount: Decimal,
        result: OperationResult,
        description: str = "",
        counterparty_card_number: Optional[str] = None
    ) -> OperationResult:
        record = TransactionRecord(
            transaction_type=transaction_type,
            account_id=account.id if account is not None else None,
            amount=amount,
            success=result.success,
            failure_reason=result.reason,
            description=description,
            counterparty_card_number=counterparty_card_number
        )
        with self._history_lock:
            self._history.append(record)

        if result:
            log_action(
                self.logger, "info", f"{transaction_type.value.capitalize()} completed",
                account_id=record.account_id, action=transaction_type.value,
                extra={"amount": str(amount), "transaction_id": record.id}
            )
            self._publish_event(_COMPLETED_EVENTS[transaction_type], record)
        else:
            log_action(
                self.logger, "info", f"{transaction_type.value.capitalize()} rejected",
                account_id=record.account_id, action=transaction_type.value,
                reason=result.reason.value,
                extra={"amount": str(amount), "transaction_id": record.id}
            )
            self._publish_event(DomainEvent.TRANSACTION_REJECTED, record)
        return result

    def process_deposit(self, account: Optional[Account], amount: AmountLike) -> OperationResult:
        amount = to_amount(amount)
        if account is None:
            result = OperationResult.fail(FailureReason.ACCOUNT_NOT_FOUND)
        else:
            result = account.deposit(amount)
        return self._record(TransactionType.DEPOSIT, account, amount, result)

    def process_withdrawal(self, account: Optional[Account], amount: AmountLike) -> OperationResult:
        amount = to_amount(amount)
        if account is None:
            result = OperationResult.fail(FailureReason.ACCOUNT_NOT_FOUND)
        else:
            result = account.withdraw(amount)
        return self._record(TransactionType.WITHDRAWAL, account, amount, result)

    def process_transfer(
        self,
        sender: Optional[Account],
        recipient_card_number: Optional[str],
        amount: AmountLike,
        description: str = ""
    ) -> OperationResult:
        """
        Transfer between two accounts in this processor's store

        Args:
            sender: Account funds leave from
            recipient_card_number: Card number identifying the recipient
            amount: Amount to move
            description: Free-text note kept in the transaction history
        """
        amount = to_amount(amount)
        if sender is None:
            result = OperationResult.fail(FailureReason.ACCOUNT_NOT_FOUND)
        elif not recipient_card_number:
            result = OperationResult.fail(FailureReason.RECIPIENT_UNAVAILABLE)
        else:
            result = sender.transfer(recipient_card_number, amount, description, store=self.store)
        return self._record(
            TransactionType.TRANSFER, sender, amount, result,
            description=description, counterparty_card_number=recipient_card_number
        )

    def validate_transaction(
        self,
        account: Optional[Account],
        amount: AmountLike,
        operation: str
    ) -> bool:
        """
        Pre-flight check without side effects.

        Rejects a missing account, non-positive amounts, amounts above the
        configured ceiling and unknown operation names, then applies the
        status table and, for debits, the balance check.
        """
        if account is None:
            return False
        try:
            amount = to_amount(amount)
        except ValueError:
            return False
        if amount <= ZERO or amount > self.config.max_transaction_decimal:
            return False

        parsed = TransactionAuthorizer.parse_operation(operation)
        if parsed is None:
            return False
        if parsed == Operation.VIEW:
            return True

        balance = account.balance if parsed in DEBIT_OPERATIONS else None
        return bool(TransactionAuthorizer.authorize(account.status, parsed, amount, balance))

    def get_account_transactions(self, account_id: int, limit: Optional[int] = 50) -> List[TransactionRecord]:
        """History for an account as sender or recipient, newest first"""
        account = self.store.find_by_id(account_id)
        card_number = account.card_number if account is not None else None

        with self._history_lock:
            matches = [
                record for record in reversed(self._history)
                if record.account_id == account_id
                or (card_number is not None
                    and record.counterparty_card_number == card_number
                    and record.success)
            ]
        if limit is not None:
            matches = matches[:limit]
        return matches

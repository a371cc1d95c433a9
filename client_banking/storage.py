"""
Account Store Module

Keyed lookup of accounts by id and by card number. The store holds live
Account objects; it has no persistence and no process-wide instance, the
caller creates one and passes it to whatever needs lookups.
"""

import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from .accounts import Account


class AccountStoreInterface(ABC):
    """Abstract interface for account stores"""

    @abstractmethod
    def add(self, account: Account) -> None:
        """Register an account under its id and card number"""
        pass

    @abstractmethod
    def find_by_id(self, account_id: int) -> Optional[Account]:
        pass

    @abstractmethod
    def find_by_card_number(self, card_number: str) -> Optional[Account]:
        """Secondary-key lookup used to address transfers"""
        pass

    @abstractmethod
    def remove(self, account_id: int) -> bool:
        """Drop an account from both indexes"""
        pass

    @abstractmethod
    def list_accounts(self) -> List[Account]:
        pass

    @abstractmethod
    def count(self) -> int:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, account_id: int) -> bool:
        return self.find_by_id(account_id) is not None


class InMemoryAccountStore(AccountStoreInterface):
    """In-memory store with an id index and a card number index"""

    def __init__(self):
        self._accounts: Dict[int, Account] = {}
        self._card_index: Dict[str, Account] = {}
        self._lock = threading.RLock()

    def add(self, account: Account) -> None:
        with self._lock:
            if account.id in self._accounts:
                raise ValueError(f"Account {account.id} already exists")
            if account.card_number in self._card_index:
                raise ValueError(f"Card number {account.card_number} already in use")
            self._accounts[account.id] = account
            self._card_index[account.card_number] = account

    def find_by_id(self, account_id: int) -> Optional[Account]:
        with self._lock:
            return self._accounts.get(account_id)

    def find_by_card_number(self, card_number: str) -> Optional[Account]:
        with self._lock:
            return self._card_index.get(card_number)

    def remove(self, account_id: int) -> bool:
        with self._lock:
            account = self._accounts.pop(account_id, None)
            if account is None:
                return False
            self._card_index.pop(account.card_number, None)
            return True

    def list_accounts(self) -> List[Account]:
        with self._lock:
            return sorted(self._accounts.values(), key=lambda account: account.id)

    def count(self) -> int:
        with self._lock:
            return len(self._accounts)

    def clear(self) -> None:
        with self._lock:
            self._accounts.clear()
            self._card_index.clear()

"""
Service wiring and request dependencies
"""

from typing import Optional

from fastapi import HTTPException, Request

from ..accounts import Account, AccountManager
from ..config import ClientBankingConfig, get_config
from ..events import EventDispatcher
from ..storage import AccountStoreInterface, InMemoryAccountStore
from ..transactions import TransactionProcessor


class BankingSystem:
    """Store, dispatcher and services sharing one account store"""

    def __init__(
        self,
        store: Optional[AccountStoreInterface] = None,
        config: Optional[ClientBankingConfig] = None
    ):
        self.config = config or get_config()
        self.store = store if store is not None else InMemoryAccountStore()
        self.event_dispatcher = EventDispatcher()
        self.account_manager = AccountManager(self.store, self.event_dispatcher, config=self.config)
        self.transaction_processor = TransactionProcessor(
            self.store, self.event_dispatcher, config=self.config
        )


def get_banking_system(request: Request) -> BankingSystem:
    """Banking system owned by the running application"""
    return request.app.state.banking_system


def require_account(system: BankingSystem, account_id: int) -> Account:
    """Resolve an account or answer 404"""
    account = system.account_manager.get_account(account_id)
    if account is None:
        raise HTTPException(status_code=404, detail="Account not found")
    return account

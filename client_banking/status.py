"""
Account Status Module

Account lifecycle states and the transition table that governs them.
The table is the single source of truth for which triggers are valid from
which state; anything missing from it is rejected.
"""

from enum import Enum
from typing import Dict, Optional, Tuple


class AccountStatus(Enum):
    """Account lifecycle states"""
    UNVERIFIED = "unverified"  # Newly opened, identity not yet confirmed
    VERIFIED = "verified"      # Normal operation
    SUSPENDED = "suspended"    # Blocked after a violation, can be appealed
    CLOSED = "closed"          # Terminal

    @property
    def is_terminal(self) -> bool:
        return self == AccountStatus.CLOSED


class StatusTrigger(Enum):
    """Actions that move an account between states"""
    VERIFY = "verify"
    SUSPEND = "suspend"
    APPEAL = "appeal"
    CLOSE = "close"


STATUS_TRANSITIONS: Dict[Tuple[AccountStatus, StatusTrigger], AccountStatus] = {
    (AccountStatus.UNVERIFIED, StatusTrigger.VERIFY): AccountStatus.VERIFIED,
    (AccountStatus.VERIFIED, StatusTrigger.SUSPEND): AccountStatus.SUSPENDED,
    (AccountStatus.SUSPENDED, StatusTrigger.APPEAL): AccountStatus.VERIFIED,
    (AccountStatus.UNVERIFIED, StatusTrigger.CLOSE): AccountStatus.CLOSED,
    (AccountStatus.VERIFIED, StatusTrigger.CLOSE): AccountStatus.CLOSED,
    (AccountStatus.SUSPENDED, StatusTrigger.CLOSE): AccountStatus.CLOSED,
}


def next_status(current: AccountStatus, trigger: StatusTrigger) -> Optional[AccountStatus]:
    """Look up the target state, or None if the trigger is not valid from `current`"""
    return STATUS_TRANSITIONS.get((current, trigger))

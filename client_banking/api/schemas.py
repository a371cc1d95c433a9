"""
Pydantic schemas for API requests and responses
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class CreateAccountRequest(BaseModel):
    account_id: int = Field(..., ge=0, description="Account id, also the source of the card number")
    client_name: Optional[str] = None
    initial_balance: str = Field("0", description="Decimal amount as string")
    with_credit_score: bool = False


class DepositRequest(BaseModel):
    account_id: int
    amount: str = Field(..., description="Decimal amount as string")


class WithdrawRequest(BaseModel):
    account_id: int
    amount: str = Field(..., description="Decimal amount as string")


class TransferRequest(BaseModel):
    account_id: int = Field(..., description="Sender account id")
    recipient_card_number: str
    amount: str = Field(..., description="Decimal amount as string")
    description: str = ""


class OperationResponse(BaseModel):
    success: bool
    message: str
    account: Dict[str, Any]


class TransactionHistoryResponse(BaseModel):
    transactions: List[Dict[str, Any]]

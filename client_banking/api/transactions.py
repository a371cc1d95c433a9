"""
Transaction endpoints
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException

from .dependencies import BankingSystem, get_banking_system, require_account
from .schemas import DepositRequest, OperationResponse, TransferRequest, WithdrawRequest
from ..accounts import Account
from ..money import to_amount
from ..results import OperationResult


router = APIRouter()


def _parse_amount(value: str) -> Decimal:
    try:
        return to_amount(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _respond(result: OperationResult, label: str, account: Account) -> OperationResponse:
    if not result:
        raise HTTPException(
            status_code=400,
            detail={"message": f"{label} failed", "reason": result.reason.value}
        )
    return OperationResponse(success=True, message=f"{label} successful", account=account.to_dict())


@router.post("/deposit", response_model=OperationResponse)
async def deposit(
    request: DepositRequest,
    system: BankingSystem = Depends(get_banking_system)
):
    """Make a deposit"""
    account = require_account(system, request.account_id)
    amount = _parse_amount(request.amount)
    result = system.transaction_processor.process_deposit(account, amount)
    return _respond(result, "Deposit", account)


@router.post("/withdraw", response_model=OperationResponse)
async def withdraw(
    request: WithdrawRequest,
    system: BankingSystem = Depends(get_banking_system)
):
    """Make a withdrawal"""
    account = require_account(system, request.account_id)
    amount = _parse_amount(request.amount)
    result = system.transaction_processor.process_withdrawal(account, amount)
    return _respond(result, "Withdrawal", account)


@router.post("/transfer", response_model=OperationResponse)
async def transfer(
    request: TransferRequest,
    system: BankingSystem = Depends(get_banking_system)
):
    """Transfer funds to another card number"""
    account = require_account(system, request.account_id)
    amount = _parse_amount(request.amount)
    result = system.transaction_processor.process_transfer(
        account, request.recipient_card_number, amount, request.description
    )
    return _respond(result, "Transfer", account)

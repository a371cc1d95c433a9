"""
Account management endpoints
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from .dependencies import BankingSystem, get_banking_system, require_account
from .schemas import CreateAccountRequest, OperationResponse, TransactionHistoryResponse
from ..results import OperationResult


router = APIRouter()

_TRANSITION_MESSAGES = {
    "verify": ("Account verified", "Verification failed"),
    "suspend": ("Account suspended", "Suspension failed"),
    "appeal": ("Appeal accepted", "Appeal failed"),
    "close": ("Account closed", "Closure failed"),
}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_account(
    request: CreateAccountRequest,
    system: BankingSystem = Depends(get_banking_system)
):
    """Create a new account"""
    try:
        account = system.account_manager.create_account(
            account_id=request.account_id,
            client_name=request.client_name,
            initial_balance=request.initial_balance,
            with_credit_score=request.with_credit_score
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "account": account.to_dict(),
        "message": "Account created successfully"
    }


@router.get("/{account_id}")
async def get_account(
    account_id: int,
    system: BankingSystem = Depends(get_banking_system)
):
    """Get account details"""
    return require_account(system, account_id).to_dict()


@router.get("/{account_id}/statement")
async def get_statement(
    account_id: int,
    system: BankingSystem = Depends(get_banking_system)
):
    """Get the plain-text account statement"""
    account = require_account(system, account_id)
    return {"statement": system.account_manager.generate_statement(account)}


@router.post("/{account_id}/{action}", response_model=OperationResponse)
async def change_status(
    account_id: int,
    action: str,
    system: BankingSystem = Depends(get_banking_system)
):
    """Apply a status transition (verify, suspend, appeal, close)"""
    if action not in _TRANSITION_MESSAGES:
        raise HTTPException(status_code=404, detail=f"Unknown action: {action}")
    account = require_account(system, account_id)

    manager = system.account_manager
    handlers = {
        "verify": manager.verify_account,
        "suspend": manager.suspend_account,
        "appeal": manager.appeal_account,
        "close": manager.close_account,
    }
    result: OperationResult = handlers[action](account_id)

    success_message, failure_message = _TRANSITION_MESSAGES[action]
    if not result:
        raise HTTPException(
            status_code=400,
            detail={"message": failure_message, "reason": result.reason.value}
        )
    return OperationResponse(success=True, message=success_message, account=account.to_dict())


@router.post("/{account_id}/credit-score/recalculate")
async def recalculate_credit_score(
    account_id: int,
    system: BankingSystem = Depends(get_banking_system)
):
    """Recompute the credit score of a scored account"""
    require_account(system, account_id)
    score: Optional[int] = system.account_manager.recalculate_credit_score(account_id)
    if score is None:
        raise HTTPException(status_code=400, detail="Account has no credit score")
    return {"account_id": account_id, "credit_score": score}


@router.get("/{account_id}/operations/{operation}")
async def check_operation(
    account_id: int,
    operation: str,
    system: BankingSystem = Depends(get_banking_system)
):
    """Whether the account's status currently permits an operation"""
    account = require_account(system, account_id)
    return {
        "account_id": account_id,
        "operation": operation,
        "allowed": system.account_manager.is_operation_allowed(account, operation)
    }


@router.get("/{account_id}/transactions", response_model=TransactionHistoryResponse)
async def get_account_transactions(
    account_id: int,
    limit: Optional[int] = 50,
    system: BankingSystem = Depends(get_banking_system)
):
    """Get transaction history for account"""
    require_account(system, account_id)
    records = system.transaction_processor.get_account_transactions(account_id, limit=limit)
    return TransactionHistoryResponse(transactions=[record.to_dict() for record in records])

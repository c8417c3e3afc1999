"""/v1/balance - people, receipts and settlements"""

import time
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request

from evenly.api.v1.schemas import (
    PersonCreate,
    PersonSchema,
    ReceiptSchema,
    ReceiptUpdate,
    ReceiptWithAssignments,
    BalanceResponse,
    NetBalanceItem,
    SettlementSchema,
    SuccessResponse,
)
from evenly.api.dependencies import get_ledger, get_request_id
from evenly.config import settings
from evenly.domain.itemizer import Itemizer
from evenly.domain.ledger import Ledger
from evenly.domain.exceptions import ReceiptNotFoundError, InvalidReceiptUpdateError
from evenly.infrastructure.observability.metrics import record_settlements, receipts_gauge
from evenly.infrastructure.observability.logging import log_settlements, log_receipt_stored
from evenly.utils.money import round_money

router = APIRouter()


@router.post("/balance/person", response_model=PersonSchema)
def add_person(body: PersonCreate, ledger: Ledger = Depends(get_ledger)):
    """Create a person with a generated id"""
    return PersonSchema.model_validate(ledger.add_person(body.display_name))


@router.post("/balance/receipt", response_model=SuccessResponse)
def add_receipt(body: ReceiptWithAssignments, request: Request, ledger: Ledger = Depends(get_ledger)):
    """
    Store a receipt with its item assignments (replaces a receipt with the same id).

    The ledger accepts any assignments. This endpoint checks completeness
    with Itemizer.validate: incomplete receipts are rejected when
    require_complete_assignments is set, otherwise stored with a warning.
    """
    request_id = get_request_id(request)
    receipt = body.receipt.to_domain()
    assignments = body.assignments_to_domain()

    complete = Itemizer.validate(receipt, assignments)
    if not complete and settings.require_complete_assignments:
        raise HTTPException(status_code=422, detail="Item shares must sum to 1.0 for every item")

    ledger.add_receipt(receipt, assignments)
    receipts_gauge.set(len(ledger.get_balance().receipts))
    log_receipt_stored(request_id, receipt.id, len(receipt.items), complete)

    return SuccessResponse()


@router.put("/balance/receipt/{receipt_id}", response_model=ReceiptSchema)
def update_receipt(
    receipt_id: str,
    body: ReceiptUpdate,
    request: Request,
    ledger: Ledger = Depends(get_ledger),
):
    """Merge the given fields onto an existing receipt"""
    try:
        updated = ledger.update_receipt(receipt_id, body.to_patch())
    except ReceiptNotFoundError as e:
        logging.warning(f"Receipt not found: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidReceiptUpdateError as e:
        logging.warning(f"Invalid receipt update: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    return ReceiptSchema.model_validate(updated)


@router.delete("/balance/receipt/{receipt_id}", response_model=SuccessResponse)
def delete_receipt(receipt_id: str, ledger: Ledger = Depends(get_ledger)):
    """Remove a receipt and its assignments; succeeds even if absent"""
    ledger.delete_receipt(receipt_id)
    receipts_gauge.set(len(ledger.get_balance().receipts))
    return SuccessResponse()


@router.get("/balance", response_model=BalanceResponse)
def get_balance(ledger: Ledger = Depends(get_ledger)):
    """Current ledger state including the last calculated settlements"""
    return BalanceResponse.model_validate(ledger.get_balance())


@router.get("/balance/net", response_model=List[NetBalanceItem])
def get_net_balances(ledger: Ledger = Depends(get_ledger)):
    """Paid minus owed per person; positive means the person is owed money"""
    return [
        NetBalanceItem(person_id=person_id, balance=round_money(balance))
        for person_id, balance in ledger.net_balances().items()
    ]


@router.get("/balance/settlements", response_model=List[SettlementSchema])
def get_settlements(request: Request, ledger: Ledger = Depends(get_ledger)):
    """Recalculate the transfers that settle all balances"""
    start_time = time.time()

    settlements = ledger.calculate_settlements()

    duration_ms = (time.time() - start_time) * 1000
    total_transferred = record_settlements(settlements)
    log_settlements(get_request_id(request), len(settlements), total_transferred, duration_ms)

    return [SettlementSchema.model_validate(s) for s in settlements]

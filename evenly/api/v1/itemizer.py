"""/v1/itemizer - staging item ownership shares"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request

from evenly.api.v1.schemas import (
    AssignRequest,
    ItemAssignmentSchema,
    ReceiptWithAssignments,
    SuccessResponse,
    ValidationResponse,
)
from evenly.api.dependencies import get_itemizer, get_request_id
from evenly.domain.itemizer import Itemizer
from evenly.domain.exceptions import InvalidShareError, ShareExceededError
from evenly.infrastructure.observability.metrics import share_rejections_counter

router = APIRouter()


@router.post("/itemizer/assign", response_model=SuccessResponse)
def assign_item(body: AssignRequest, request: Request, itemizer: Itemizer = Depends(get_itemizer)):
    """
    Give a person a share of one receipt item.

    Repeating the same item/person pair adds another share rather than
    replacing the earlier one.
    """
    request_id = get_request_id(request)

    try:
        itemizer.assign(body.receipt_id, body.item_id, body.person_id, body.share)

    except InvalidShareError as e:
        share_rejections_counter.labels(reason="invalid_share").inc()
        logging.warning(f"Invalid share: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except ShareExceededError as e:
        share_rejections_counter.labels(reason="share_exceeded").inc()
        logging.warning(f"Share exceeded: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))

    return SuccessResponse()


@router.get("/itemizer/assignments/{receipt_id}", response_model=List[ItemAssignmentSchema])
def get_assignments(receipt_id: str, itemizer: Itemizer = Depends(get_itemizer)):
    """Staged assignments for a receipt; empty list if none"""
    return [ItemAssignmentSchema.model_validate(a) for a in itemizer.get_assignments(receipt_id)]


@router.post("/itemizer/validate", response_model=ValidationResponse)
def validate_assignments(body: ReceiptWithAssignments):
    """Whether every receipt item is fully assigned"""
    valid = Itemizer.validate(body.receipt.to_domain(), body.assignments_to_domain())
    return ValidationResponse(valid=valid)

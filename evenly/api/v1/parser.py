"""/v1/parser - receipt ingestion from OCR text or manual entry"""

import logging
from typing import Any, Dict
from fastapi import APIRouter, HTTPException, Request

from evenly.api.v1.schemas import OCRRequest, ReceiptSchema
from evenly.api.dependencies import get_request_id
from evenly.domain.parser import parse_ocr_text, parse_manual
from evenly.domain.exceptions import MalformedReceiptError

router = APIRouter()


@router.post("/parser/ocr", response_model=ReceiptSchema)
def parse_ocr(body: OCRRequest, request: Request):
    """Parse a receipt from text already extracted by OCR"""
    try:
        receipt = parse_ocr_text(body.ocr_data, paid_by=body.paid_by)
    except MalformedReceiptError as e:
        logging.warning(f"Unparseable OCR text: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    return ReceiptSchema.model_validate(receipt)


@router.post("/parser/manual", response_model=ReceiptSchema)
def parse_manual_entry(body: Dict[str, Any], request: Request):
    """
    Normalize a manually entered receipt.

    Prices and quantities are coerced and missing ids generated;
    subtotal/total are derived when absent.
    """
    try:
        receipt = parse_manual(body)
    except MalformedReceiptError as e:
        logging.warning(f"Malformed manual receipt: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    return ReceiptSchema.model_validate(receipt)

"""Receipt ingestion - builds Receipt objects from OCR text or manual entry"""

import math
import re
import uuid
from datetime import date, datetime
from typing import Any, List, Mapping, Optional

from evenly.domain.models import Receipt, ReceiptItem
from evenly.domain.exceptions import MalformedReceiptError
from evenly.utils.money import round_money, line_total

NOT_MERCHANT_PATTERNS = [
    re.compile(r"^receipt", re.IGNORECASE),
    re.compile(r"^#?\d+$"),  # bare numbers
    re.compile(r"^\d{1,2}/\d{1,2}/\d{2,4}$"),  # bare date
    re.compile(r"^[A-Z]{2,3}\s*$"),  # state codes
]

# (pattern, strptime formats to try on the match)
DATE_PATTERNS = [
    (re.compile(r"\d{4}[/-]\d{1,2}[/-]\d{1,2}"), ["%Y-%m-%d", "%Y/%m/%d"]),
    (re.compile(r"\d{1,2}[/-]\d{1,2}[/-]\d{2,4}"), ["%m/%d/%Y", "%m-%d-%Y", "%m/%d/%y", "%m-%d-%y"]),
]

ITEM_PATTERN = re.compile(r"^(.+?)\s+\$?(\d+\.\d{2})\s*$")
TOTAL_KEYWORDS = re.compile(
    r"\b(subtotal|total|tax|tip|discount|balance|amount|payment|cash|credit|card)\b", re.IGNORECASE
)
METADATA_PATTERNS = [
    re.compile(r"^(qty|sku|item|code|#)", re.IGNORECASE),
    re.compile(r"^\d+$"),
]

# Checked in order; the first pattern that matches a line claims it
TOTAL_PATTERNS = [
    ("subtotal", re.compile(r"subtotal.*?\$?(\d+\.\d{2})", re.IGNORECASE)),
    ("discount", re.compile(r"discount.*?\$?(\d+\.\d{2})", re.IGNORECASE)),
    ("tax", re.compile(r"tax.*?\$?(\d+\.\d{2})", re.IGNORECASE)),
    ("tip", re.compile(r"tip.*?\$?(\d+\.\d{2})", re.IGNORECASE)),
    ("total", re.compile(r"\btotal.*?\$?(\d+\.\d{2})", re.IGNORECASE)),
]


def parse_ocr_text(text: str, paid_by: str = "") -> Receipt:
    """
    Build a receipt from raw OCR text.

    Merchant is the first plausible header line, date the first parseable
    date, items every "NAME  $X.XX" line that is not a totals line. Subtotal
    falls back to the sum of items when the text has no subtotal line.

    Raises:
        MalformedReceiptError: no line items could be found
    """
    lines = _clean_lines(text)
    items = _extract_items(lines)
    if not items:
        raise MalformedReceiptError("No line items found in OCR text")

    totals = _extract_totals(lines)
    subtotal = totals["subtotal"] if totals["subtotal"] is not None else line_total(items)

    return Receipt(
        id=str(uuid.uuid4()),
        merchant=_extract_merchant(lines),
        date=_extract_date(lines),
        items=items,
        subtotal=round_money(subtotal),
        discounts=_optional_money(totals["discount"]),
        tax=_optional_money(totals["tax"]),
        tip=_optional_money(totals["tip"]),
        total=round_money(totals["total"] or 0.0),
        paid_by=paid_by,
    )


def parse_manual(data: Mapping[str, Any]) -> Receipt:
    """
    Build a receipt from manually entered fields.

    Missing ids are generated, subtotal defaults to the item sum and total to
    subtotal - discounts + tax + tip.

    Raises:
        MalformedReceiptError: merchant or items missing, or an item is not an object
    """
    merchant = data.get("merchant")
    raw_items = data.get("items")
    if not isinstance(merchant, str) or not merchant or not isinstance(raw_items, list) or not raw_items:
        raise MalformedReceiptError("Invalid manual data: merchant and items are required")
    if not all(isinstance(raw, Mapping) for raw in raw_items):
        raise MalformedReceiptError("Invalid manual data: every item must be an object")

    items = [
        ReceiptItem(
            id=str(raw.get("id") or uuid.uuid4()),
            name=str(raw.get("name") or "Unknown Item"),
            price=round_money(_to_float(raw.get("price"), 0.0)),
            quantity=max(1, int(_to_float(raw.get("quantity"), 1))),
        )
        for raw in raw_items
    ]

    discounts = _to_optional_float(data.get("discounts"))
    tax = _to_optional_float(data.get("tax"))
    tip = _to_optional_float(data.get("tip"))

    subtotal = _to_optional_float(data.get("subtotal"))
    if subtotal is None:
        subtotal = line_total(items)

    total = _to_optional_float(data.get("total"))
    if total is None:
        total = subtotal - (discounts or 0.0) + (tax or 0.0) + (tip or 0.0)

    return Receipt(
        id=str(data.get("id") or uuid.uuid4()),
        merchant=merchant,
        date=_parse_iso_date(data.get("date")),
        items=items,
        subtotal=round_money(subtotal),
        discounts=_optional_money(discounts),
        tax=_optional_money(tax),
        tip=_optional_money(tip),
        total=round_money(total),
        paid_by=str(data.get("paid_by") or ""),
    )


def _clean_lines(text: str) -> List[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def _extract_merchant(lines: List[str]) -> str:
    for line in lines:
        if len(line) > 2 and not any(p.search(line) for p in NOT_MERCHANT_PATTERNS):
            return line
    return "Unknown Merchant"


def _extract_date(lines: List[str]) -> date:
    for line in lines:
        for pattern, formats in DATE_PATTERNS:
            match = pattern.search(line)
            if not match:
                continue
            for fmt in formats:
                try:
                    return datetime.strptime(match.group(0), fmt).date()
                except ValueError:
                    continue
    return date.today()


def _extract_items(lines: List[str]) -> List[ReceiptItem]:
    items = []
    for line in lines:
        if TOTAL_KEYWORDS.search(line):
            continue

        match = ITEM_PATTERN.match(line)
        if not match:
            continue

        name = match.group(1).strip()
        if len(name) < 2 or any(p.search(name) for p in METADATA_PATTERNS):
            continue

        # OCR rarely captures quantity reliably
        items.append(ReceiptItem(id=str(uuid.uuid4()), name=name, price=float(match.group(2)), quantity=1))

    return items


def _extract_totals(lines: List[str]) -> dict:
    totals = {"subtotal": None, "discount": 0.0, "tax": 0.0, "tip": 0.0, "total": 0.0}
    for line in lines:
        for key, pattern in TOTAL_PATTERNS:
            match = pattern.search(line)
            if match:
                totals[key] = float(match.group(1))
                break
    return totals


def _parse_iso_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value).date()
        except ValueError:
            pass
    return date.today()


def _to_float(value: Any, default: float) -> float:
    """float(value), or default when unparseable or not finite"""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _to_optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return _to_float(value, 0.0)


def _optional_money(value: Optional[float]) -> Optional[float]:
    """Round, mapping missing or zero charges to None"""
    if not value:
        return None
    return round_money(value)

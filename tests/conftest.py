"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple
from fastapi.testclient import TestClient
from evenly.api.main import create_app
from evenly.domain.itemizer import Itemizer
from evenly.domain.ledger import Ledger
from evenly.domain.models import Receipt, ReceiptItem, ItemAssignment, PersonShare


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client backed by a fresh ledger and itemizer"""
    return TestClient(create_app())


@pytest.fixture
def ledger() -> Ledger:
    return Ledger()


@pytest.fixture
def itemizer() -> Itemizer:
    return Itemizer()


@pytest.fixture
def make_receipt() -> Callable[..., Receipt]:
    """
    Build a receipt from (item_id, price) pairs.

    Subtotal defaults to the item sum and total to subtotal - discounts + tax + tip.
    """

    def _make(
        receipt_id: str,
        items: List[Tuple[str, float]],
        paid_by: str,
        subtotal: Optional[float] = None,
        discounts: Optional[float] = None,
        tax: Optional[float] = None,
        tip: Optional[float] = None,
        total: Optional[float] = None,
    ) -> Receipt:
        receipt_items = [ReceiptItem(id=item_id, name=item_id, price=price) for item_id, price in items]
        if subtotal is None:
            subtotal = sum(price for _, price in items)
        if total is None:
            total = subtotal - (discounts or 0) + (tax or 0) + (tip or 0)
        return Receipt(
            id=receipt_id,
            merchant="Test Merchant",
            date=date(2024, 1, 15),
            items=receipt_items,
            subtotal=subtotal,
            total=total,
            paid_by=paid_by,
            discounts=discounts,
            tax=tax,
            tip=tip,
        )

    return _make


@pytest.fixture
def make_assignments() -> Callable[..., List[ItemAssignment]]:
    """Build assignments from {item_id: {person_id: share}}"""

    def _make(shares: Dict[str, Dict[str, float]]) -> List[ItemAssignment]:
        return [
            ItemAssignment(
                item_id=item_id,
                assignments=[PersonShare(person_id=pid, share=share) for pid, share in people.items()],
            )
            for item_id, people in shares.items()
        ]

    return _make

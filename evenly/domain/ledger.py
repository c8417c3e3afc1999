"""Ledger - source of truth for people, receipts and item assignments"""

import dataclasses
import itertools
import threading
from typing import Any, Dict, List, Mapping

from evenly.domain.models import Person, Receipt, ItemAssignment, Settlement, Balance
from evenly.domain.exceptions import ReceiptNotFoundError, InvalidReceiptUpdateError
from evenly.domain.settlement import compute_net_balances, optimize_settlements

RECEIPT_FIELDS = {f.name for f in dataclasses.fields(Receipt)}
# Charges may be cleared with None; everything else must keep a value
NULLABLE_RECEIPT_FIELDS = {"discounts", "tax", "tip"}


class Ledger:
    """
    In-memory bookkeeping for a group's shared receipts.

    Every public method holds the ledger lock for its full duration, so
    settlement always sees a consistent snapshot of all receipts.

    add_receipt stores assignments as given. Checking that shares sum to 1.0
    per item is the caller's job (Itemizer.validate); incomplete assignments
    leave value unassigned and the payer appears to be owed more.
    """

    def __init__(self, person_id_prefix: str = "p"):
        self._persons: List[Person] = []
        self._receipts: List[Receipt] = []
        self._assignments: Dict[str, List[ItemAssignment]] = {}
        self._settlements: List[Settlement] = []

        self._person_id_prefix = person_id_prefix
        self._person_ids = itertools.count(1)
        self._lock = threading.RLock()

    def add_person(self, display_name: str) -> Person:
        """Create a person with a fresh unique id"""
        with self._lock:
            person = Person(id=f"{self._person_id_prefix}{next(self._person_ids)}", display_name=display_name)
            self._persons.append(person)
            return person

    def add_receipt(self, receipt: Receipt, assignments: List[ItemAssignment]) -> None:
        """Insert a receipt, or replace an existing one with the same id in place"""
        with self._lock:
            index = self._find_receipt(receipt.id)
            if index is None:
                self._receipts.append(receipt)
            else:
                self._receipts[index] = receipt

            self._assignments[receipt.id] = list(assignments)

    def update_receipt(self, receipt_id: str, patch: Mapping[str, Any]) -> Receipt:
        """
        Merge fields onto an existing receipt. The id is never overwritten.

        Raises:
            ReceiptNotFoundError: no receipt with receipt_id
            InvalidReceiptUpdateError: unknown field, or None for a required field
        """
        changes = {key: value for key, value in patch.items() if key != "id"}

        unknown = sorted(set(changes) - RECEIPT_FIELDS)
        if unknown:
            raise InvalidReceiptUpdateError(f"Unknown receipt fields: {', '.join(unknown)}")
        cleared = sorted(
            key for key, value in changes.items() if value is None and key not in NULLABLE_RECEIPT_FIELDS
        )
        if cleared:
            raise InvalidReceiptUpdateError(f"Receipt fields cannot be null: {', '.join(cleared)}")

        with self._lock:
            index = self._find_receipt(receipt_id)
            if index is None:
                raise ReceiptNotFoundError(f"Receipt {receipt_id} not found")

            updated = dataclasses.replace(self._receipts[index], **changes)
            self._receipts[index] = updated
            return updated

    def delete_receipt(self, receipt_id: str) -> None:
        """Remove a receipt and its assignments; no-op if absent"""
        with self._lock:
            self._receipts = [r for r in self._receipts if r.id != receipt_id]
            self._assignments.pop(receipt_id, None)

    def get_balance(self) -> Balance:
        """Snapshot of current state. Does not recompute settlements."""
        with self._lock:
            return Balance(
                persons=list(self._persons),
                receipts=list(self._receipts),
                assignments={rid: list(items) for rid, items in self._assignments.items()},
                settlements=list(self._settlements),
            )

    def net_balances(self) -> Dict[str, float]:
        """Per-person paid minus owed across all receipts"""
        with self._lock:
            return compute_net_balances(self._persons, self._receipts, self._assignments)

    def calculate_settlements(self) -> List[Settlement]:
        """Recompute transfers from current state and cache them"""
        with self._lock:
            self._settlements = optimize_settlements(self.net_balances())
            return list(self._settlements)

    def _find_receipt(self, receipt_id: str):
        for index, receipt in enumerate(self._receipts):
            if receipt.id == receipt_id:
                return index
        return None

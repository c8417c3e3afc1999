"""Itemizer - staging area for per-item ownership shares before a receipt is committed"""

import threading
from typing import Dict, Iterable, List

from evenly.domain.models import Receipt, PersonShare, ItemAssignment
from evenly.domain.exceptions import InvalidShareError, ShareExceededError

# Float slack allowed when comparing an item's summed shares against 1.0
SHARE_TOLERANCE = 1e-4


class Itemizer:
    """
    Records which people own what fraction of each receipt line item.

    Assigning the same (item, person) pair twice records two independent
    entries; totals are always the plain sum of every entry for the item.
    """

    def __init__(self):
        # receipt_id -> item_id -> [PersonShare], both levels in insertion order
        self._shares: Dict[str, Dict[str, List[PersonShare]]] = {}
        self._lock = threading.Lock()

    def assign(self, receipt_id: str, item_id: str, person_id: str, share: float) -> None:
        """
        Record that person_id owns `share` of item_id on receipt_id.

        Raises:
            InvalidShareError: share is outside [0, 1]
            ShareExceededError: item's total share would exceed 1.0 + tolerance
        """
        if not 0 <= share <= 1:
            raise InvalidShareError(f"Share must be between 0 and 1 (got {share})")

        with self._lock:
            current = self._total_share(receipt_id, item_id)
            new_total = current + share
            if new_total > 1.0 + SHARE_TOLERANCE:
                raise ShareExceededError(
                    f"Total share for item {item_id} would exceed 1.0 (current: {new_total:.4f})"
                )

            item_shares = self._shares.setdefault(receipt_id, {}).setdefault(item_id, [])
            item_shares.append(PersonShare(person_id=person_id, share=share))

    def get_assignments(self, receipt_id: str) -> List[ItemAssignment]:
        """All item -> person-share records for a receipt, in insertion order"""
        with self._lock:
            receipt_shares = self._shares.get(receipt_id, {})
            return [
                ItemAssignment(item_id=item_id, assignments=list(shares))
                for item_id, shares in receipt_shares.items()
            ]

    @staticmethod
    def validate(receipt: Receipt, assignments: Iterable[ItemAssignment]) -> bool:
        """
        Check that every item on the receipt is fully owned.

        Shares are summed across all entries for an item, including repeated
        entries for the same item. A receipt with no items is valid.
        """
        totals: Dict[str, float] = {}
        for assignment in assignments:
            totals[assignment.item_id] = totals.get(assignment.item_id, 0.0) + sum(
                ps.share for ps in assignment.assignments
            )

        return all(
            abs(totals.get(item.id, 0.0) - 1.0) <= SHARE_TOLERANCE
            for item in receipt.items
        )

    def _total_share(self, receipt_id: str, item_id: str) -> float:
        shares = self._shares.get(receipt_id, {}).get(item_id, [])
        return sum(ps.share for ps in shares)

"""Domain models - pure Python dataclasses representing receipts, people and settlements"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Person:
    """Participant in a shared expense"""

    id: str
    display_name: str


@dataclass
class ReceiptItem:
    """Single line item on a receipt"""

    id: str
    name: str
    price: float  # per-unit
    quantity: int = 1

    @property
    def line_cost(self) -> float:
        return self.price * self.quantity


@dataclass
class Receipt:
    """One purchase event with line items and a designated payer"""

    id: str
    merchant: str
    date: date
    items: List[ReceiptItem]
    subtotal: float
    total: float
    paid_by: str  # person id
    discounts: Optional[float] = None
    tax: Optional[float] = None
    tip: Optional[float] = None


@dataclass
class PersonShare:
    """Fraction of an item owned by one person"""

    person_id: str
    share: float  # 0.0 - 1.0


@dataclass
class ItemAssignment:
    """All ownership shares recorded for one item"""

    item_id: str
    assignments: List[PersonShare] = field(default_factory=list)


@dataclass(frozen=True)
class Settlement:
    """Directed payment instruction: debtor pays creditor"""

    from_person_id: str
    to_person_id: str
    amount: float


@dataclass
class Balance:
    """Snapshot of ledger state"""

    persons: List[Person]
    receipts: List[Receipt]
    assignments: Dict[str, List[ItemAssignment]]
    settlements: List[Settlement]

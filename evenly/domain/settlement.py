"""Settlement engine - receipt proration and greedy debt matching"""

from typing import Dict, Iterable, List, Mapping

from evenly.domain.models import Receipt, ItemAssignment, Person, Settlement
from evenly.utils.money import round_money

# Balances within this distance of zero are considered settled
SETTLE_THRESHOLD = 0.01


def person_subtotals(receipt: Receipt, assignments: Iterable[ItemAssignment]) -> Dict[str, float]:
    """
    Sum each assignee's share of item line costs on one receipt.

    Assignments referencing an item not on the receipt are ignored.
    """
    items = {item.id: item for item in receipt.items}
    subtotals: Dict[str, float] = {}

    for assignment in assignments:
        item = items.get(assignment.item_id)
        if item is None:
            continue

        for ps in assignment.assignments:
            subtotals[ps.person_id] = subtotals.get(ps.person_id, 0.0) + item.line_cost * ps.share

    return subtotals


def prorate(person_subtotal: float, receipt_subtotal: float, amount: float) -> float:
    """Person's portion of a receipt-level charge; 0 when the receipt subtotal is 0"""
    if receipt_subtotal == 0:
        return 0.0
    return (person_subtotal / receipt_subtotal) * amount


def receipt_owed(receipt: Receipt, assignments: Iterable[ItemAssignment]) -> Dict[str, float]:
    """
    Amount each assignee owes for one receipt.

    owed = subtotal share - prorated discount + prorated tax + prorated tip,
    where every charge is prorated by (person subtotal / receipt subtotal).
    """
    discounts = receipt.discounts or 0.0
    tax = receipt.tax or 0.0
    tip = receipt.tip or 0.0

    owed: Dict[str, float] = {}
    for person_id, subtotal in person_subtotals(receipt, assignments).items():
        if subtotal == 0:
            continue
        owed[person_id] = (
            subtotal
            - prorate(subtotal, receipt.subtotal, discounts)
            + prorate(subtotal, receipt.subtotal, tax)
            + prorate(subtotal, receipt.subtotal, tip)
        )

    return owed


def compute_net_balances(
    persons: Iterable[Person],
    receipts: Iterable[Receipt],
    assignments: Mapping[str, List[ItemAssignment]],
) -> Dict[str, float]:
    """
    Net balance per person across all receipts: paid minus owed.

    Positive means the person is owed money, negative means they owe.
    Known persons come first in insertion order; ids that only appear as
    payers or assignees are appended as they are encountered.
    """
    net: Dict[str, float] = {person.id: 0.0 for person in persons}

    for receipt in receipts:
        for person_id, amount in receipt_owed(receipt, assignments.get(receipt.id, [])).items():
            net[person_id] = net.get(person_id, 0.0) - amount

        # Payer is credited the full total even if also an assignee
        net[receipt.paid_by] = net.get(receipt.paid_by, 0.0) + receipt.total

    return net


def optimize_settlements(net_balances: Mapping[str, float]) -> List[Settlement]:
    """
    Reduce net balances to debtor -> creditor transfers.

    Greedy: repeatedly pair the largest remaining debtor with the largest
    remaining creditor and transfer the smaller of the two amounts. Ties keep
    the input order. Produces at most (#debtors + #creditors - 1) transfers;
    not guaranteed to be the minimum count in general.
    """
    debtors = [[pid, -bal] for pid, bal in net_balances.items() if bal < -SETTLE_THRESHOLD]
    creditors = [[pid, bal] for pid, bal in net_balances.items() if bal > SETTLE_THRESHOLD]

    # sort() is stable with reverse=True, so equal amounts keep person order
    debtors.sort(key=lambda d: d[1], reverse=True)
    creditors.sort(key=lambda c: c[1], reverse=True)

    settlements: List[Settlement] = []
    i = j = 0
    while i < len(debtors) and j < len(creditors):
        debtor, creditor = debtors[i], creditors[j]
        amount = min(debtor[1], creditor[1])

        settlements.append(
            Settlement(from_person_id=debtor[0], to_person_id=creditor[0], amount=round_money(amount))
        )

        debtor[1] -= amount
        creditor[1] -= amount

        if debtor[1] < SETTLE_THRESHOLD:
            i += 1
        if creditor[1] < SETTLE_THRESHOLD:
            j += 1

    return settlements

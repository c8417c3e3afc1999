"""Unit tests for item share staging and validation"""

import pytest
from evenly.domain.itemizer import Itemizer
from evenly.domain.models import ItemAssignment, PersonShare
from evenly.domain.exceptions import InvalidShareError, ShareExceededError


def test_assign_records_share(itemizer: Itemizer):
    """Test a single assignment is returned for its receipt"""
    itemizer.assign("r1", "item1", "p1", 1.0)

    assignments = itemizer.get_assignments("r1")

    assert assignments == [ItemAssignment(item_id="item1", assignments=[PersonShare("p1", 1.0)])]


def test_assign_split_between_people(itemizer: Itemizer):
    """Test shares from several people accumulate on one item"""
    itemizer.assign("r1", "item1", "p1", 0.5)
    itemizer.assign("r1", "item1", "p2", 0.5)

    [assignment] = itemizer.get_assignments("r1")

    assert [ps.person_id for ps in assignment.assignments] == ["p1", "p2"]
    assert sum(ps.share for ps in assignment.assignments) == 1.0


def test_assign_same_person_twice_adds_entry(itemizer: Itemizer):
    """Test repeated item/person pairs are recorded separately, not merged"""
    itemizer.assign("r1", "item1", "p1", 0.25)
    itemizer.assign("r1", "item1", "p1", 0.25)

    [assignment] = itemizer.get_assignments("r1")

    assert assignment.assignments == [PersonShare("p1", 0.25), PersonShare("p1", 0.25)]


@pytest.mark.parametrize("share", [-0.1, 1.5])
def test_assign_rejects_out_of_range_share(itemizer: Itemizer, share: float):
    """Test shares outside [0, 1] are rejected without touching state"""
    with pytest.raises(InvalidShareError):
        itemizer.assign("r1", "item1", "p1", share)

    assert itemizer.get_assignments("r1") == []


def test_assign_rejects_share_exceeding_one(itemizer: Itemizer):
    """Test an item can't be assigned more than 100% and prior shares survive"""
    itemizer.assign("r1", "item1", "p1", 0.6)

    with pytest.raises(ShareExceededError):
        itemizer.assign("r1", "item1", "p2", 0.5)

    [assignment] = itemizer.get_assignments("r1")
    assert assignment.assignments == [PersonShare("p1", 0.6)]


def test_assign_allows_float_thirds(itemizer: Itemizer):
    """Test three thirds fit within tolerance"""
    for person_id in ("p1", "p2", "p3"):
        itemizer.assign("r1", "item1", person_id, 1 / 3)

    [assignment] = itemizer.get_assignments("r1")
    assert len(assignment.assignments) == 3


def test_assign_items_tracked_independently(itemizer: Itemizer):
    """Test totals are per item and per receipt"""
    itemizer.assign("r1", "item1", "p1", 1.0)
    itemizer.assign("r1", "item2", "p1", 1.0)
    itemizer.assign("r2", "item1", "p2", 1.0)

    assert [a.item_id for a in itemizer.get_assignments("r1")] == ["item1", "item2"]
    assert itemizer.get_assignments("r2")[0].assignments == [PersonShare("p2", 1.0)]


def test_get_assignments_unknown_receipt(itemizer: Itemizer):
    """Test unknown receipts have no assignments"""
    assert itemizer.get_assignments("missing") == []


def test_validate_complete_assignments(make_receipt, make_assignments):
    """Test fully assigned items validate"""
    receipt = make_receipt("r1", [("item1", 10.0), ("item2", 20.0)], paid_by="p1")
    assignments = make_assignments({"item1": {"p1": 1.0}, "item2": {"p1": 0.5, "p2": 0.5}})

    assert Itemizer.validate(receipt, assignments) is True


def test_validate_partial_assignment(make_receipt, make_assignments):
    """Test an item short of 1.0 fails validation"""
    receipt = make_receipt("r1", [("item1", 10.0)], paid_by="p1")

    assert Itemizer.validate(receipt, make_assignments({"item1": {"p1": 0.5}})) is False


def test_validate_unassigned_item(make_receipt, make_assignments):
    """Test an item with no assignment fails validation"""
    receipt = make_receipt("r1", [("item1", 10.0), ("item2", 5.0)], paid_by="p1")

    assert Itemizer.validate(receipt, make_assignments({"item1": {"p1": 1.0}})) is False


def test_validate_sums_repeated_item_entries(make_receipt):
    """Test shares for an item are summed across every entry"""
    receipt = make_receipt("r1", [("item1", 10.0)], paid_by="p1")
    assignments = [
        ItemAssignment("item1", [PersonShare("p1", 0.5)]),
        ItemAssignment("item1", [PersonShare("p2", 0.5)]),
    ]

    assert Itemizer.validate(receipt, assignments) is True


def test_validate_empty_receipt(make_receipt):
    """Test a receipt with no items is vacuously valid"""
    receipt = make_receipt("r1", [], paid_by="p1")

    assert Itemizer.validate(receipt, []) is True


def test_validate_staged_assignments(itemizer: Itemizer, make_receipt):
    """Test the staging output feeds straight into validation"""
    receipt = make_receipt("r1", [("item1", 10.0)], paid_by="p1")
    itemizer.assign("r1", "item1", "p1", 0.5)
    assert Itemizer.validate(receipt, itemizer.get_assignments("r1")) is False

    itemizer.assign("r1", "item1", "p2", 0.5)
    assert Itemizer.validate(receipt, itemizer.get_assignments("r1")) is True


def test_assign_accepts_total_within_tolerance(itemizer: Itemizer):
    """Test a running total just over 1.0 but within tolerance is accepted"""
    itemizer.assign("r1", "item1", "p1", 0.5)
    itemizer.assign("r1", "item1", "p2", 0.50005)

    [assignment] = itemizer.get_assignments("r1")
    assert assignment.assignments == [PersonShare("p1", 0.5), PersonShare("p2", 0.50005)]


def test_assign_rejects_total_past_tolerance(itemizer: Itemizer):
    """Test a running total beyond 1.0 + tolerance is rejected"""
    itemizer.assign("r1", "item1", "p1", 0.5)

    with pytest.raises(ShareExceededError):
        itemizer.assign("r1", "item1", "p2", 0.5002)


def test_assign_zero_share(itemizer: Itemizer):
    """Test a zero share is in range and recorded"""
    itemizer.assign("r1", "item1", "p1", 0.0)

    [assignment] = itemizer.get_assignments("r1")
    assert assignment.assignments == [PersonShare("p1", 0.0)]

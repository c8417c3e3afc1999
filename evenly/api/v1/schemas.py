"""Pydantic schemas for API request/response validation"""

import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from evenly.domain.models import Receipt, ReceiptItem, PersonShare, ItemAssignment


class PersonCreate(BaseModel):
    """Request body for POST /v1/balance/person"""

    display_name: str = Field(..., description="Name shown for the person")


class PersonSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    display_name: str


class ReceiptItemSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., min_length=1)
    name: str
    price: float = Field(..., description="Per-unit price")
    quantity: int = Field(1, ge=1)

    def to_domain(self) -> ReceiptItem:
        return ReceiptItem(id=self.id, name=self.name, price=self.price, quantity=self.quantity)


class ReceiptSchema(BaseModel):
    """Receipt as exchanged with clients"""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., min_length=1)
    merchant: str
    date: datetime.date
    items: List[ReceiptItemSchema]
    subtotal: float
    total: float
    paid_by: str
    discounts: Optional[float] = None
    tax: Optional[float] = None
    tip: Optional[float] = None

    def to_domain(self) -> Receipt:
        return Receipt(
            id=self.id,
            merchant=self.merchant,
            date=self.date,
            items=[item.to_domain() for item in self.items],
            subtotal=self.subtotal,
            total=self.total,
            paid_by=self.paid_by,
            discounts=self.discounts,
            tax=self.tax,
            tip=self.tip,
        )


class ReceiptUpdate(BaseModel):
    """Request body for PUT /v1/balance/receipt/{id}; only sent fields are merged"""

    merchant: Optional[str] = None
    date: Optional[datetime.date] = None
    items: Optional[List[ReceiptItemSchema]] = None
    subtotal: Optional[float] = None
    total: Optional[float] = None
    paid_by: Optional[str] = None
    discounts: Optional[float] = None
    tax: Optional[float] = None
    tip: Optional[float] = None

    @field_validator("merchant", "date", "items", "subtotal", "total", "paid_by")
    @classmethod
    def required_fields_not_null(cls, value):
        """Only discounts, tax and tip may be cleared with null"""
        if value is None:
            raise ValueError("field cannot be null")
        return value

    def to_patch(self) -> Dict[str, Any]:
        patch = self.model_dump(exclude_unset=True)
        if self.items is not None:
            patch["items"] = [item.to_domain() for item in self.items]
        return patch


class PersonShareSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    person_id: str
    share: float


class ItemAssignmentSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    item_id: str
    assignments: List[PersonShareSchema] = []

    def to_domain(self) -> ItemAssignment:
        return ItemAssignment(
            item_id=self.item_id,
            assignments=[PersonShare(person_id=ps.person_id, share=ps.share) for ps in self.assignments],
        )


class ReceiptWithAssignments(BaseModel):
    """Request body for POST /v1/balance/receipt and POST /v1/itemizer/validate"""

    receipt: ReceiptSchema
    assignments: List[ItemAssignmentSchema] = []

    def assignments_to_domain(self) -> List[ItemAssignment]:
        return [a.to_domain() for a in self.assignments]


class SettlementSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    from_person_id: str
    to_person_id: str
    amount: float


class BalanceResponse(BaseModel):
    """Response for GET /v1/balance"""

    model_config = ConfigDict(from_attributes=True)

    persons: List[PersonSchema]
    receipts: List[ReceiptSchema]
    assignments: Dict[str, List[ItemAssignmentSchema]]
    settlements: List[SettlementSchema]


class NetBalanceItem(BaseModel):
    person_id: str
    balance: float


class AssignRequest(BaseModel):
    """Request body for POST /v1/itemizer/assign; share range is checked by the itemizer"""

    receipt_id: str
    item_id: str
    person_id: str
    share: float


class ValidationResponse(BaseModel):
    valid: bool


class SuccessResponse(BaseModel):
    success: bool = True


class OCRRequest(BaseModel):
    """Request body for POST /v1/parser/ocr"""

    ocr_data: str
    paid_by: str = ""

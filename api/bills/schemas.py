"""
Bill API schemas (request models).
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field, model_validator

from .costing import MAX_AMOUNT, line_total

Price = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]
Quantity = Annotated[int, Field(gt=0, le=1_000_000)]
GstPercentage = Annotated[Decimal, Field(ge=0, le=100, max_digits=5, decimal_places=2)]


def _require_total_within_limit(total: Decimal) -> None:
    if total > MAX_AMOUNT:
        raise ValueError(f"Bill total {total} exceeds the maximum of {MAX_AMOUNT}.")


class PurchaseItem(BaseModel):
    # Explicit identifier; derived from name/company/product_id when omitted.
    unique_id: str | None = Field(default=None, max_length=300, pattern=r"^[^/]*$")
    name: str = Field(..., min_length=1, max_length=200)
    company: str = Field(..., min_length=1, max_length=200)
    product_id: str | None = Field(default=None, max_length=100)
    buy_price: Price
    quantity: Quantity


class CreatePurchaseBillRequest(BaseModel):
    dealer_name: str | None = Field(default=None, max_length=200)
    dealer_gst_number: str | None = Field(default=None, max_length=50)
    gst_percentage: GstPercentage | None = None
    bill_date: date
    items: list[PurchaseItem] = Field(..., min_length=1, max_length=500)

    @model_validator(mode="after")
    def check_total(self) -> "CreatePurchaseBillRequest":
        _require_total_within_limit(sum(line_total(i.buy_price, i.quantity) for i in self.items))
        return self


class SaleItem(BaseModel):
    unique_id: str = Field(..., min_length=1, max_length=300)
    selling_price: Price
    quantity: Quantity


class CreateSellBillRequest(BaseModel):
    customer_name: str | None = Field(default=None, max_length=200)
    customer_phone: str | None = Field(default=None, max_length=30)
    customer_gst_number: str | None = Field(default=None, max_length=50)
    gst_percentage: GstPercentage | None = None
    bill_date: date
    items: list[SaleItem] = Field(..., min_length=1, max_length=500)

    @model_validator(mode="after")
    def check_total(self) -> "CreateSellBillRequest":
        _require_total_within_limit(sum(line_total(i.selling_price, i.quantity) for i in self.items))
        return self

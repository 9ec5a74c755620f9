"""
Bill API endpoints (purchase bills, sell bills, daily transactions).
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Query, status

from . import schemas, service

router = APIRouter(prefix="/api")


@router.post("/purchase-bills", status_code=status.HTTP_201_CREATED)
async def create_purchase_bill(request: schemas.CreatePurchaseBillRequest) -> dict:
    """
    Record a purchase: creates unseen products, re-averages cost, adds stock.
    """
    return await service.create_purchase_bill(request)


@router.get("/purchase-bills/search")
async def search_purchase_bills(year: int = Query(..., ge=1900, le=9999)) -> list[dict]:
    return await service.purchase_bills_in_year(year)


@router.get("/purchase-bills/{bill_id}")
async def get_purchase_bill(bill_id: int) -> dict:
    return await service.get_purchase_bill(bill_id)


@router.delete("/purchase-bills/{bill_id}")
async def delete_purchase_bill(bill_id: int) -> dict:
    """
    Reverse a purchase. Refused (400) when stock already sold would go negative.
    """
    return await service.delete_purchase_bill(bill_id)


@router.post("/sell-bills", status_code=status.HTTP_201_CREATED)
async def create_sell_bill(request: schemas.CreateSellBillRequest) -> dict:
    return await service.create_sell_bill(request)


@router.get("/sell-bills/{bill_id}")
async def get_sell_bill(bill_id: int) -> dict:
    return await service.get_sell_bill(bill_id)


@router.delete("/sell-bills/{bill_id}")
async def delete_sell_bill(bill_id: int) -> dict:
    return await service.delete_sell_bill(bill_id)


@router.get("/transactions")
async def list_transactions(day: date = Query(..., alias="date")) -> dict:
    return await service.transactions_on(day)

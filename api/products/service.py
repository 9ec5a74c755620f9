"""
Product read-side logic.

Products are created and re-costed only by bills (see `bills/service.py`);
this module serves lookups and per-product history.
"""

from __future__ import annotations

from fastapi import HTTPException

from . import repository


def _product_payload(row: dict) -> dict:
    return {
        "id": int(row["id"]),
        "name": str(row["name"]),
        "company": str(row["company"]),
        "product_id": row["product_code"],
        "unique_id": str(row["unique_id"]),
        "quantity": int(row["quantity"]),
        "average_buy_price": row["average_buy_price"],
        "stock_value": row["stock_value"],
        "created_at": row["created_at"],
    }


async def list_products() -> list[dict]:
    rows = await repository.list_products()
    return [_product_payload(row) for row in rows]


async def get_product(unique_id: str) -> dict:
    row = await repository.get_product_by_unique_id((unique_id or "").strip())
    if row is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return _product_payload(row)


async def _require_product(product_id: int) -> dict:
    row = await repository.get_product(product_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return row


async def purchase_history(product_id: int) -> list[dict]:
    await _require_product(product_id)
    return await repository.purchase_history(product_id)


async def sales_history(product_id: int) -> list[dict]:
    await _require_product(product_id)
    return await repository.sales_history(product_id)

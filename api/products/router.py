"""
Product API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter

from . import service

router = APIRouter(prefix="/api/products")


@router.get("")
async def list_products() -> list[dict]:
    return await service.list_products()


@router.get("/{product_id}/history")
async def product_history(product_id: int) -> list[dict]:
    """
    Purchase lines for the product, newest bill first.
    """
    return await service.purchase_history(product_id)


@router.get("/{product_id}/sales")
async def product_sales(product_id: int) -> list[dict]:
    return await service.sales_history(product_id)


@router.get("/{unique_id}")
async def get_product(unique_id: str) -> dict:
    return await service.get_product(unique_id)

"""
Seed an empty database with one purchase bill and one sale.

Run from `api/` with DATABASE_URL set:

    python -m seed

Does nothing when products already exist.
"""

from __future__ import annotations

import asyncio
import logging

from bills import schemas, service
from core import db, log, settings
from products import repository as product_repository

logger = logging.getLogger("seed")


async def seed() -> None:
    if await product_repository.count_products() > 0:
        logger.info("seed_skipped reason=products_exist")
        return

    today = settings.today()
    purchase = await service.create_purchase_bill(
        schemas.CreatePurchaseBillRequest(
            dealer_name="AutoParts Wholesalers",
            bill_date=today,
            items=[
                schemas.PurchaseItem(
                    unique_id="brake-pad-honda-city-bosch-bp-hc-001",
                    name="Brake Pad (Honda City)",
                    company="Bosch",
                    product_id="BP-HC-001",
                    buy_price="850",
                    quantity=10,
                ),
                schemas.PurchaseItem(
                    name="Engine Oil 5W-30",
                    company="Castrol",
                    product_id="EO-5W30-1L",
                    buy_price="450",
                    quantity=50,
                ),
                schemas.PurchaseItem(
                    name="Oil Filter",
                    company="Purolator",
                    product_id="OF-Gen",
                    buy_price="120",
                    quantity=20,
                ),
            ],
        )
    )

    unique_ids = [str(item["unique_id"]) for item in purchase["items"]]
    await service.create_sell_bill(
        schemas.CreateSellBillRequest(
            customer_name="Rahul Sharma",
            customer_phone="9876543210",
            bill_date=today,
            items=[
                schemas.SaleItem(unique_id=unique_ids[0], selling_price="1200", quantity=2),
                schemas.SaleItem(unique_id=unique_ids[1], selling_price="650", quantity=1),
            ],
        )
    )
    logger.info("seed_complete products=%s", len(unique_ids))


async def main() -> None:
    await db.init_pool()
    try:
        await seed()
    finally:
        await db.close_pool()


if __name__ == "__main__":
    log.configure_logging()
    asyncio.run(main())

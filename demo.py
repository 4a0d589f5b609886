"""Demo cart fixtures for trying the storefront by hand."""

import logging

from database import Database, NotFoundError

logger = logging.getLogger(__name__)

DEMO_CART = [("p_1", 2), ("p_3", 1), ("p_5", 1)]


async def seed_demo_data(db: Database, user_id: str = "demo_user") -> bool:
    try:
        for product_id, quantity in DEMO_CART:
            await db.add_to_cart(user_id, product_id, quantity)
    except NotFoundError as e:
        logger.error("Error seeding demo data: %s", e)
        return False
    logger.info("Demo data seeded for user=%s", user_id)
    return True


async def clear_demo_data(db: Database, user_id: str = "demo_user") -> bool:
    if await db.get_cart(user_id) is None:
        return True
    await db.clear_cart(user_id)
    logger.info("Demo data cleared for user=%s", user_id)
    return True

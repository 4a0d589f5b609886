"""
Form-backed mutation handlers.

Each handler validates the submitted form, calls the database, records which
cached views went stale, and answers with an ActionState. Validation and
not-found problems become user-facing messages; anything else is logged and
replaced with a generic failure message.
"""

import asyncio
import logging
import time
from typing import List, Optional

from pydantic import BaseModel

from database import Database, InvalidDataError, NotFoundError
from schemas import ActionState, PreferencesUpdate, Theme

logger = logging.getLogger(__name__)

DEFAULT_USER_ID = "demo_user"


# Form payloads. Missing or empty fields fall back to defaults and are
# reported through ActionState; values of the wrong type are still rejected
# by the framework with a 422.

class AddToCartForm(BaseModel):
    product_id: str = ""
    quantity: int = 1
    user_id: str = DEFAULT_USER_ID


class UpdateQuantityForm(BaseModel):
    product_id: str = ""
    quantity: int = 0
    user_id: str = DEFAULT_USER_ID


class CheckoutForm(BaseModel):
    user_id: str = DEFAULT_USER_ID


class ProfileForm(BaseModel):
    user_id: str = DEFAULT_USER_ID
    name: str = ""
    email: str = ""
    notifications: bool = False
    theme: Optional[Theme] = None


class StarForm(BaseModel):
    product_id: str = ""
    user_id: str = DEFAULT_USER_ID


class Revalidator:
    """Collects the paths and cache tags a mutation made stale."""

    def __init__(self) -> None:
        self.invalidated: List[str] = []

    def path(self, path: str) -> None:
        self._mark(path)

    def tag(self, tag: str) -> None:
        self._mark(f"tag:{tag}")

    def _mark(self, key: str) -> None:
        if key not in self.invalidated:
            self.invalidated.append(key)
            logger.debug("revalidate %s", key)


def _fail(error: str) -> ActionState:
    return ActionState(ok=False, error=error)


async def add_to_cart(db: Database, form: AddToCartForm) -> ActionState:
    try:
        if not form.product_id:
            return _fail("Product ID is required")
        if form.quantity <= 0:
            return _fail("Quantity must be greater than 0")

        product = await db.get_product(form.product_id)
        if product is None:
            return _fail("Product not found")
        if product.stock < form.quantity:
            return _fail("Not enough stock available")

        await db.add_to_cart(form.user_id, form.product_id, form.quantity)
        reval = Revalidator()
        reval.path("/cart")
        reval.path("/")
        return ActionState(
            ok=True,
            data={
                "message": f"{form.quantity} {product.title} added to cart",
                "product_id": form.product_id,
                "quantity": form.quantity,
            },
            revalidated=reval.invalidated,
        )
    except (NotFoundError, InvalidDataError) as e:
        return _fail(str(e))
    except Exception:
        logger.exception("Add to cart error")
        return _fail("Failed to add item to cart")


async def update_quantity(db: Database, form: UpdateQuantityForm) -> ActionState:
    try:
        if not form.product_id:
            return _fail("Product ID is required")
        if form.quantity < 0:
            return _fail("Quantity cannot be negative")

        product = await db.get_product(form.product_id)
        if product is None:
            return _fail("Product not found")
        if form.quantity > 0 and product.stock < form.quantity:
            return _fail("Not enough stock available")

        await db.update_cart_item(form.user_id, form.product_id, form.quantity)
        reval = Revalidator()
        reval.tag(f"cart-{form.user_id}")
        reval.tag(f"product-{form.product_id}")
        reval.path("/cart")
        return ActionState(
            ok=True,
            data={
                "message": "Item removed from cart" if form.quantity == 0 else "Cart updated",
                "product_id": form.product_id,
                "quantity": form.quantity,
            },
            revalidated=reval.invalidated,
        )
    except NotFoundError as e:
        return _fail(str(e))
    except Exception:
        logger.exception("Update quantity error")
        return _fail("Failed to update cart item")


async def checkout(db: Database, form: CheckoutForm, payment_delay_ms: int = 0) -> ActionState:
    try:
        # Pay first so the read, total and clear run with no suspension between them
        if payment_delay_ms:
            await asyncio.sleep(payment_delay_ms / 1000)

        cart = await db.get_cart(form.user_id)
        if cart is None or not cart.items:
            return _fail("Cart is empty")

        total = sum(it.price_at_add_cents * it.quantity for it in cart.items)
        await db.clear_cart(form.user_id)
        order_id = f"order_{int(time.time() * 1000)}"
        logger.info("order placed: id=%s user=%s total_cents=%s", order_id, form.user_id, total)

        reval = Revalidator()
        reval.path("/cart")
        reval.path("/")
        return ActionState(
            ok=True,
            data={"message": "Order placed successfully!", "order_id": order_id, "total_cents": total},
            revalidated=reval.invalidated,
        )
    except NotFoundError as e:
        return _fail(str(e))
    except Exception:
        logger.exception("Checkout error")
        return _fail("Failed to process checkout")


async def update_profile(db: Database, form: ProfileForm) -> ActionState:
    try:
        if not form.name or not form.email:
            return _fail("Name and email are required")
        if await db.get_user(form.user_id) is None:
            return _fail("User not found")

        try:
            await db.update_user_profile(form.user_id, form.name, form.email)
        except InvalidDataError as e:
            return _fail(str(e))

        # An omitted theme is dropped by the merge
        changes = PreferencesUpdate(notifications=form.notifications, theme=form.theme)
        user = await db.update_user_preferences(form.user_id, changes)

        reval = Revalidator()
        reval.path("/profile")
        return ActionState(
            ok=True,
            data={
                "message": "Profile updated successfully",
                "user": {
                    "name": user.name,
                    "email": user.email,
                    "notifications": user.preferences.notifications,
                    "theme": user.preferences.theme,
                },
            },
            revalidated=reval.invalidated,
        )
    except NotFoundError as e:
        return _fail(str(e))
    except Exception:
        logger.exception("Update profile error")
        return _fail("Failed to update profile")


async def toggle_star(db: Database, form: StarForm) -> ActionState:
    try:
        if not form.product_id:
            return _fail("Product ID is required")
        if await db.get_product(form.product_id) is None:
            return _fail("Product not found")
        if await db.is_product_starred(form.user_id, form.product_id):
            ok = await db.remove_from_starred(form.user_id, form.product_id)
        else:
            ok = await db.add_to_starred(form.user_id, form.product_id)
        if not ok:
            return _fail("User not found")

        reval = Revalidator()
        reval.path("/starred")
        starred = await db.is_product_starred(form.user_id, form.product_id)
        return ActionState(
            ok=True,
            data={"product_id": form.product_id, "starred": starred},
            revalidated=reval.invalidated,
        )
    except Exception:
        logger.exception("Toggle star error")
        return _fail("Failed to update favorites")


async def remove_from_starred(db: Database, form: StarForm) -> ActionState:
    try:
        if not form.product_id:
            return _fail("Product ID is required")
        if not await db.remove_from_starred(form.user_id, form.product_id):
            return _fail("User not found")
        reval = Revalidator()
        reval.path("/starred")
        return ActionState(ok=True, data={"product_id": form.product_id}, revalidated=reval.invalidated)
    except Exception:
        logger.exception("Remove from starred error")
        return _fail("Failed to update favorites")


async def get_cart_count(db: Database, user_id: str = DEFAULT_USER_ID) -> int:
    return await db.cart_item_count(user_id)


async def get_favorites_count(db: Database, user_id: str = DEFAULT_USER_ID) -> int:
    return await db.starred_count(user_id)

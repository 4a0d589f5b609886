"""Tests for the form-backed mutation handlers."""

import asyncio

import pytest

import actions
from actions import AddToCartForm, CheckoutForm, ProfileForm, StarForm, UpdateQuantityForm
from demo import clear_demo_data, seed_demo_data


async def test_add_to_cart_success(db):
    state = await actions.add_to_cart(db, AddToCartForm(product_id="p_1", quantity=2))

    assert state.ok is True
    assert state.data["message"] == "2 Wireless Bluetooth Headphones added to cart"
    assert state.revalidated == ["/cart", "/"]
    cart = await db.get_cart("demo_user")
    assert cart.items[0].quantity == 2


@pytest.mark.parametrize(
    "form, error",
    [
        (AddToCartForm(product_id="", quantity=1), "Product ID is required"),
        (AddToCartForm(product_id="p_1", quantity=0), "Quantity must be greater than 0"),
        (AddToCartForm(product_id="p_missing", quantity=1), "Product not found"),
        (AddToCartForm(product_id="p_4", quantity=6), "Not enough stock available"),
    ],
)
async def test_add_to_cart_rejections_leave_store_untouched(db, form, error):
    state = await actions.add_to_cart(db, form)
    assert state.ok is False
    assert state.error == error
    assert await db.get_cart("demo_user") is None


async def test_add_to_cart_unexpected_error_is_generic(db, monkeypatch, caplog):
    async def boom(*args, **kwargs):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(db, "add_to_cart", boom)
    state = await actions.add_to_cart(db, AddToCartForm(product_id="p_1"))

    assert state.ok is False
    assert state.error == "Failed to add item to cart"
    assert "Add to cart error" in caplog.text


async def test_update_quantity_sets_and_removes(db):
    await db.add_to_cart("demo_user", "p_1", 2)

    state = await actions.update_quantity(db, UpdateQuantityForm(product_id="p_1", quantity=4))
    assert state.ok is True
    assert state.data["message"] == "Cart updated"
    assert state.revalidated == ["tag:cart-demo_user", "tag:product-p_1", "/cart"]
    assert (await db.get_cart("demo_user")).items[0].quantity == 4

    state = await actions.update_quantity(db, UpdateQuantityForm(product_id="p_1", quantity=0))
    assert state.ok is True
    assert state.data["message"] == "Item removed from cart"
    assert (await db.get_cart("demo_user")).items == []


async def test_update_quantity_validation(db):
    await db.add_to_cart("demo_user", "p_4", 1)

    state = await actions.update_quantity(db, UpdateQuantityForm(product_id="p_4", quantity=-1))
    assert state.error == "Quantity cannot be negative"

    state = await actions.update_quantity(db, UpdateQuantityForm(product_id="p_4", quantity=99))
    assert state.error == "Not enough stock available"
    assert (await db.get_cart("demo_user")).items[0].quantity == 1


async def test_update_quantity_not_found_messages(db):
    state = await actions.update_quantity(db, UpdateQuantityForm(product_id="p_1", quantity=1))
    assert state.ok is False
    assert state.error == "Cart not found"

    await db.add_to_cart("demo_user", "p_1", 1)
    state = await actions.update_quantity(db, UpdateQuantityForm(product_id="p_2", quantity=1))
    assert state.error == "Item not found in cart"


async def test_checkout_totals_then_clears(db):
    await db.add_to_cart("demo_user", "p_1", 2)
    await db.add_to_cart("demo_user", "p_5", 1)

    state = await actions.checkout(db, CheckoutForm())

    assert state.ok is True
    assert state.data["total_cents"] == 2 * 19999 + 8999
    assert state.data["order_id"].startswith("order_")
    assert (await db.get_cart("demo_user")).items == []


async def test_checkout_charges_items_added_during_payment(db):
    """Everything the cart holds when it is cleared is part of the total."""
    await db.add_to_cart("demo_user", "p_1", 1)

    task = asyncio.create_task(actions.checkout(db, CheckoutForm(), payment_delay_ms=50))
    await asyncio.sleep(0.01)
    await db.add_to_cart("demo_user", "p_5", 3)
    state = await task

    assert state.ok is True
    assert state.data["total_cents"] == 19999 + 3 * 8999
    assert (await db.get_cart("demo_user")).items == []


async def test_checkout_empty_cart(db):
    state = await actions.checkout(db, CheckoutForm())
    assert state.ok is False
    assert state.error == "Cart is empty"

    await db.add_to_cart("demo_user", "p_1", 1)
    await db.clear_cart("demo_user")
    state = await actions.checkout(db, CheckoutForm())
    assert state.error == "Cart is empty"


async def test_update_profile(db):
    form = ProfileForm(name="Demo Person", email="person@example.com", notifications=False, theme="dark")
    state = await actions.update_profile(db, form)

    assert state.ok is True
    assert state.revalidated == ["/profile"]
    user = await db.get_user("demo_user")
    assert user.name == "Demo Person"
    assert user.preferences.theme == "dark"
    assert user.preferences.notifications is False
    assert user.preferences.favorite_categories == ["gaming", "audio"]


async def test_update_profile_keeps_theme_when_omitted(db):
    state = await actions.update_profile(db, ProfileForm(name="Demo", email="demo@example.com"))
    assert state.ok is True
    assert (await db.get_user("demo_user")).preferences.theme == "system"


@pytest.mark.parametrize(
    "form, error",
    [
        (ProfileForm(name="", email="a@example.com"), "Name and email are required"),
        (ProfileForm(user_id="nobody", name="A", email="a@example.com"), "User not found"),
        (ProfileForm(name="A", email="not-an-email"), "Invalid email address"),
    ],
)
async def test_update_profile_rejections(db, form, error):
    state = await actions.update_profile(db, form)
    assert state.ok is False
    assert state.error == error
    assert (await db.get_user("demo_user")).name == "Demo User"


async def test_toggle_star_flips_membership(db):
    state = await actions.toggle_star(db, StarForm(product_id="p_3"))
    assert state.ok is True
    assert state.data["starred"] is True
    assert await actions.get_favorites_count(db) == 1

    state = await actions.toggle_star(db, StarForm(product_id="p_3"))
    assert state.data["starred"] is False
    assert await actions.get_favorites_count(db) == 0


async def test_toggle_star_errors(db):
    state = await actions.toggle_star(db, StarForm())
    assert state.error == "Product ID is required"

    state = await actions.toggle_star(db, StarForm(product_id="p_missing"))
    assert state.error == "Product not found"

    state = await actions.toggle_star(db, StarForm(user_id="nobody", product_id="p_1"))
    assert state.error == "User not found"


async def test_remove_from_starred(db):
    await db.add_to_starred("demo_user", "p_1")
    state = await actions.remove_from_starred(db, StarForm(product_id="p_1"))
    assert state.ok is True
    assert state.revalidated == ["/starred"]
    assert await db.is_product_starred("demo_user", "p_1") is False

    state = await actions.remove_from_starred(db, StarForm(user_id="nobody", product_id="p_1"))
    assert state.ok is False

    state = await actions.remove_from_starred(db, StarForm())
    assert state.error == "Product ID is required"


async def test_demo_seed_and_clear(db):
    assert await seed_demo_data(db) is True
    assert await actions.get_cart_count(db) == 4

    assert await clear_demo_data(db) is True
    assert await actions.get_cart_count(db) == 0
    # clearing again without a cart is fine
    assert await clear_demo_data(db, "u_1") is True

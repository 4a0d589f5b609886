"""
In-memory database for the storefront.

Holds products, reviews, users and carts in plain ordered lists that are
scanned on every lookup. Reads hand out deep copies; all writes go through
the mutators below. Methods are async to match the request handlers that
await them, but none of them suspends mid-mutation.
"""

import logging
import uuid
from typing import List, Optional

from pydantic import ValidationError

from schemas import (
    Cart,
    CartItem,
    PreferencesUpdate,
    Product,
    Review,
    ReviewIn,
    User,
    utcnow,
)
from seed import seed_products, seed_reviews, seed_users

logger = logging.getLogger(__name__)

TRENDING_LIMIT = 6
RECOMMENDED_LIMIT = 4


class NotFoundError(LookupError):
    """A record required by a mutation does not exist."""


class InvalidDataError(ValueError):
    """A mutation was given values a stored record cannot hold."""


class Database:
    def __init__(self, seed: bool = True) -> None:
        self.products: List[Product] = seed_products() if seed else []
        self.reviews: List[Review] = seed_reviews() if seed else []
        self.users: List[User] = seed_users() if seed else []
        self.carts: List[Cart] = []

    # Internal lookups return the live records

    def _product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)

    def _user(self, user_id: str) -> Optional[User]:
        return next((u for u in self.users if u.id == user_id), None)

    def _cart(self, user_id: str) -> Optional[Cart]:
        return next((c for c in self.carts if c.user_id == user_id), None)

    def _require_user(self, user_id: str) -> User:
        user = self._user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def _copies(records):
        return [r.model_copy(deep=True) for r in records]

    # Products

    async def list_products(self, tag: Optional[str] = None, limit: Optional[int] = None) -> List[Product]:
        products = self.products
        if tag:
            products = [p for p in products if tag in p.tags]
        if limit:
            products = products[:limit]
        return self._copies(products)

    async def get_product(self, product_id: str) -> Optional[Product]:
        product = self._product(product_id)
        return product.model_copy(deep=True) if product else None

    async def search_products(self, query: str) -> List[Product]:
        term = query.lower()
        return self._copies(
            p
            for p in self.products
            if term in p.title.lower()
            or term in p.description.lower()
            or any(term in tag.lower() for tag in p.tags)
        )

    async def get_trending_products(self) -> List[Product]:
        # sorted() is stable, so equal ratings keep storage order
        ranked = sorted(self.products, key=lambda p: p.rating, reverse=True)
        return self._copies(ranked[:TRENDING_LIMIT])

    async def get_recommended_products(self, user_id: str) -> List[Product]:
        user = self._user(user_id)
        if user is None:
            return await self.get_trending_products()
        favorites = set(user.preferences.favorite_categories)
        matches = [p for p in self.products if favorites.intersection(p.tags)]
        return self._copies(matches[:RECOMMENDED_LIMIT])

    # Reviews

    async def get_reviews(self, product_id: str) -> List[Review]:
        return self._copies(r for r in self.reviews if r.product_id == product_id)

    async def add_review(self, review: ReviewIn) -> Review:
        if self._product(review.product_id) is None:
            raise NotFoundError("Product not found")
        stored = Review(
            **review.model_dump(),
            id=f"r_{uuid.uuid4().hex[:12]}",
            created_at=utcnow(),
            helpful=0,
        )
        self.reviews.append(stored)
        logger.info("review added: id=%s product=%s stars=%s", stored.id, stored.product_id, stored.stars)
        return stored.model_copy(deep=True)

    # Carts

    async def get_cart(self, user_id: str) -> Optional[Cart]:
        cart = self._cart(user_id)
        return cart.model_copy(deep=True) if cart else None

    async def add_to_cart(self, user_id: str, product_id: str, quantity: int) -> Cart:
        product = self._product(product_id)
        if product is None:
            raise NotFoundError("Product not found")

        cart = self._cart(user_id)
        existing = next((it for it in cart.items if it.product_id == product_id), None) if cart else None
        new_item = None
        if existing is None:
            try:
                new_item = CartItem(product_id=product_id, quantity=quantity, price_at_add_cents=product.price_cents)
            except ValidationError as e:
                raise InvalidDataError("Quantity must be greater than 0") from e

        if cart is None:
            cart = Cart(id=f"cart_{user_id}", user_id=user_id)
            self.carts.append(cart)
            logger.info("cart created: user=%s", user_id)

        if new_item is not None:
            cart.items.append(new_item)
        elif existing.quantity + quantity > 0:
            existing.quantity += quantity
        else:
            # Lines never hold a non-positive quantity
            cart.items = [it for it in cart.items if it.product_id != product_id]
        cart.updated_at = utcnow()
        logger.info("cart add: user=%s product=%s qty=%s", user_id, product_id, quantity)
        return cart.model_copy(deep=True)

    async def update_cart_item(self, user_id: str, product_id: str, quantity: int) -> Cart:
        cart = self._cart(user_id)
        if cart is None:
            raise NotFoundError("Cart not found")
        item = next((it for it in cart.items if it.product_id == product_id), None)
        if item is None:
            raise NotFoundError("Item not found in cart")

        if quantity <= 0:
            cart.items = [it for it in cart.items if it.product_id != product_id]
            logger.info("cart remove: user=%s product=%s", user_id, product_id)
        else:
            item.quantity = quantity
            logger.info("cart update: user=%s product=%s qty=%s", user_id, product_id, quantity)
        cart.updated_at = utcnow()
        return cart.model_copy(deep=True)

    async def remove_from_cart(self, user_id: str, product_id: str) -> Cart:
        return await self.update_cart_item(user_id, product_id, 0)

    async def clear_cart(self, user_id: str) -> Cart:
        cart = self._cart(user_id)
        if cart is None:
            raise NotFoundError("Cart not found")
        cart.items = []
        cart.updated_at = utcnow()
        logger.info("cart cleared: user=%s", user_id)
        return cart.model_copy(deep=True)

    async def cart_item_count(self, user_id: str) -> int:
        cart = self._cart(user_id)
        if cart is None:
            return 0
        return sum(it.quantity for it in cart.items)

    # Users

    async def get_user(self, user_id: str) -> Optional[User]:
        user = self._user(user_id)
        return user.model_copy(deep=True) if user else None

    async def update_user_preferences(self, user_id: str, preferences: PreferencesUpdate) -> User:
        user = self._require_user(user_id)
        changes = preferences.model_dump(exclude_unset=True, exclude_none=True)
        user.preferences = user.preferences.model_copy(update=changes)
        logger.info("preferences updated: user=%s fields=%s", user_id, sorted(changes))
        return user.model_copy(deep=True)

    async def update_user_profile(self, user_id: str, name: str, email: str) -> User:
        user = self._require_user(user_id)
        # Round-trip through the model so the email is validated
        try:
            updated = User.model_validate({**user.model_dump(), "name": name, "email": email})
        except ValidationError as e:
            raise InvalidDataError("Invalid email address") from e
        user.name = updated.name
        user.email = updated.email
        logger.info("profile updated: user=%s", user_id)
        return user.model_copy(deep=True)

    # Starred products

    async def get_starred_products(self, user_id: str) -> List[Product]:
        user = self._user(user_id)
        if user is None:
            return []
        starred = set(user.starred_product_ids)
        return self._copies(p for p in self.products if p.id in starred)

    async def add_to_starred(self, user_id: str, product_id: str) -> bool:
        user = self._user(user_id)
        if user is None:
            return False
        if product_id not in user.starred_product_ids and self._product(product_id) is not None:
            user.starred_product_ids.append(product_id)
            logger.info("starred: user=%s product=%s", user_id, product_id)
        return True

    async def remove_from_starred(self, user_id: str, product_id: str) -> bool:
        user = self._user(user_id)
        if user is None:
            return False
        if product_id in user.starred_product_ids:
            user.starred_product_ids.remove(product_id)
            logger.info("unstarred: user=%s product=%s", user_id, product_id)
        return True

    async def is_product_starred(self, user_id: str, product_id: str) -> bool:
        user = self._user(user_id)
        return user is not None and product_id in user.starred_product_ids

    async def starred_count(self, user_id: str) -> int:
        user = self._user(user_id)
        return len(user.starred_product_ids) if user else 0

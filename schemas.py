"""
Store Schemas

Pydantic models for the records held by the in-memory database.
Each model represents one collection of the store; relationships are by id only.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

Theme = Literal["light", "dark", "system"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(BaseModel):
    id: str
    title: str
    price_cents: int = Field(..., ge=0, description="Price in minor currency units")
    tags: List[str] = Field(default_factory=list)
    rating: float = Field(default=0, ge=0, le=5)
    images: List[str] = Field(default_factory=list)
    specs: Dict[str, str] = Field(default_factory=dict)
    stock: int = Field(0, ge=0)
    description: str = ""
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ReviewIn(BaseModel):
    product_id: str
    user_id: str
    body: str
    stars: int = Field(..., ge=1, le=5)


class Review(ReviewIn):
    id: str
    created_at: datetime = Field(default_factory=utcnow)
    helpful: int = Field(0, ge=0)


class UserPreferences(BaseModel):
    favorite_categories: List[str] = Field(default_factory=list)
    notifications: bool = True
    theme: Theme = "system"


class PreferencesUpdate(BaseModel):
    favorite_categories: Optional[List[str]] = None
    notifications: Optional[bool] = None
    theme: Optional[Theme] = None


class User(BaseModel):
    id: str
    name: str
    email: EmailStr
    avatar_url: str = ""
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    starred_product_ids: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)


class CartItem(BaseModel):
    product_id: str
    quantity: int = Field(..., gt=0)
    price_at_add_cents: int = Field(..., ge=0, description="Price snapshot taken when the item was added")
    added_at: datetime = Field(default_factory=utcnow)


class Cart(BaseModel):
    id: str
    user_id: str
    items: List[CartItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ActionState(BaseModel):
    ok: bool
    error: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    revalidated: List[str] = Field(default_factory=list)

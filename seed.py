"""Fixed seed records loaded into every new Database."""

from datetime import datetime, timezone
from typing import List

from schemas import Product, Review, User, UserPreferences


def _day(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


PLACEHOLDER_IMAGE = "/placeholder-product.svg"


def seed_products() -> List[Product]:
    return [
        Product(
            id="p_1",
            title="Wireless Bluetooth Headphones",
            price_cents=19999,
            tags=["electronics", "audio", "wireless"],
            rating=4.5,
            images=[PLACEHOLDER_IMAGE, PLACEHOLDER_IMAGE],
            specs={
                "Battery Life": "30 hours",
                "Connectivity": "Bluetooth 5.0",
                "Weight": "250g",
                "Noise Cancellation": "Active",
            },
            stock=25,
            description="Premium wireless headphones with active noise cancellation and superior sound quality.",
            created_at=_day(2024, 1, 15),
            updated_at=_day(2024, 1, 15),
        ),
        Product(
            id="p_2",
            title="Smart Fitness Watch",
            price_cents=29999,
            tags=["electronics", "fitness", "wearable"],
            rating=4.3,
            images=[PLACEHOLDER_IMAGE, PLACEHOLDER_IMAGE],
            specs={
                "Display": '1.4" AMOLED',
                "Battery Life": "7 days",
                "Water Resistance": "5ATM",
                "Sensors": "Heart rate, GPS, Accelerometer",
            },
            stock=15,
            description="Advanced fitness tracking with comprehensive health monitoring and GPS capabilities.",
            created_at=_day(2024, 1, 20),
            updated_at=_day(2024, 1, 20),
        ),
        Product(
            id="p_3",
            title="Mechanical Gaming Keyboard",
            price_cents=14999,
            tags=["electronics", "gaming", "keyboard"],
            rating=4.7,
            images=[PLACEHOLDER_IMAGE, PLACEHOLDER_IMAGE],
            specs={
                "Switch Type": "Cherry MX Red",
                "Backlight": "RGB",
                "Connectivity": "USB-C",
                "Layout": "Full-size",
            },
            stock=8,
            description="Professional mechanical keyboard with RGB backlighting and premium switches.",
            created_at=_day(2024, 2, 1),
            updated_at=_day(2024, 2, 1),
        ),
        Product(
            id="p_4",
            title="4K Ultra HD Monitor",
            price_cents=59999,
            tags=["electronics", "display", "monitor"],
            rating=4.8,
            images=[PLACEHOLDER_IMAGE, PLACEHOLDER_IMAGE],
            specs={
                "Resolution": "3840 x 2160",
                "Panel Type": "IPS",
                "Refresh Rate": "60Hz",
                "Connectivity": "HDMI, DisplayPort, USB-C",
            },
            stock=5,
            description="Stunning 4K monitor with wide color gamut and professional-grade color accuracy.",
            created_at=_day(2024, 2, 10),
            updated_at=_day(2024, 2, 10),
        ),
        Product(
            id="p_5",
            title="Wireless Gaming Mouse",
            price_cents=8999,
            tags=["electronics", "gaming", "mouse"],
            rating=4.4,
            images=[PLACEHOLDER_IMAGE, PLACEHOLDER_IMAGE],
            specs={
                "DPI": "16000",
                "Connectivity": "Wireless 2.4GHz",
                "Battery Life": "70 hours",
                "Buttons": "Programmable",
            },
            stock=20,
            description="High-precision wireless gaming mouse with customizable RGB lighting.",
            created_at=_day(2024, 2, 15),
            updated_at=_day(2024, 2, 15),
        ),
    ]


def seed_reviews() -> List[Review]:
    return [
        Review(
            id="r_1",
            product_id="p_1",
            user_id="u_1",
            body="Excellent sound quality and comfortable to wear for long periods.",
            stars=5,
            created_at=_day(2024, 1, 20),
            helpful=12,
        ),
        Review(
            id="r_2",
            product_id="p_1",
            user_id="u_2",
            body="Good headphones but the battery life could be better.",
            stars=4,
            created_at=_day(2024, 1, 25),
            helpful=8,
        ),
        Review(
            id="r_3",
            product_id="p_2",
            user_id="u_3",
            body="Great fitness tracker with accurate heart rate monitoring.",
            stars=4,
            created_at=_day(2024, 1, 30),
            helpful=15,
        ),
    ]


def seed_users() -> List[User]:
    return [
        User(
            id="u_1",
            name="John Doe",
            email="john@example.com",
            avatar_url="/avatars/john.jpg",
            preferences=UserPreferences(
                favorite_categories=["electronics", "gaming"],
                notifications=True,
                theme="light",
            ),
            created_at=_day(2024, 1, 1),
        ),
        User(
            id="u_2",
            name="Jane Smith",
            email="jane@example.com",
            avatar_url="/avatars/jane.jpg",
            preferences=UserPreferences(
                favorite_categories=["electronics", "audio"],
                notifications=False,
                theme="dark",
            ),
            created_at=_day(2024, 1, 5),
        ),
        # The storefront pages all act on behalf of this user
        User(
            id="demo_user",
            name="Demo User",
            email="demo@example.com",
            avatar_url="/avatars/demo.jpg",
            preferences=UserPreferences(
                favorite_categories=["gaming", "audio"],
                notifications=True,
                theme="system",
            ),
            created_at=_day(2024, 1, 10),
        ),
    ]

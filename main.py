import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

import actions
from actions import AddToCartForm, CheckoutForm, ProfileForm, StarForm, UpdateQuantityForm
from database import Database, NotFoundError
from demo import clear_demo_data, seed_demo_data
from schemas import ActionState, Product, Review, ReviewIn, User
from slow import SimulatedFailure, simulate_occasional_failure, simulate_random_delay, simulate_slow_response

# Config
PORT = int(os.getenv("PORT", 8000))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DEMO_USER_ID = os.getenv("DEMO_USER_ID", "demo_user")
SEED_DEMO_CART = os.getenv("SEED_DEMO_CART", "true").lower() == "true"
SLOW_MODE = os.getenv("SLOW_MODE", "false").lower() == "true"
SLOW_MODE_DELAY_MS = int(os.getenv("SLOW_MODE_DELAY_MS", 2000))
SLOW_MODE_MAX_DELAY_MS = int(os.getenv("SLOW_MODE_MAX_DELAY_MS", 0))
ERROR_MODE_RATE = float(os.getenv("ERROR_MODE_RATE", 0))
CHECKOUT_DELAY_MS = int(os.getenv("CHECKOUT_DELAY_MS", 0))
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

logger = logging.getLogger(__name__)


class ReviewBody(BaseModel):
    user_id: str = DEMO_USER_ID
    body: str
    stars: int = Field(..., ge=1, le=5)


def create_app(db: Optional[Database] = None, seed_demo: bool = SEED_DEMO_CART) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if seed_demo:
            await seed_demo_data(app.state.db, DEMO_USER_ID)
        yield

    app = FastAPI(title="Storefront Demo API", lifespan=lifespan)
    app.state.db = db if db is not None else Database()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(SimulatedFailure)
    async def simulated_failure_handler(request: Request, exc: SimulatedFailure):
        logger.warning("Simulated failure on %s", request.url.path)
        return JSONResponse(status_code=503, content={"error": str(exc)})

    register_routes(app)
    return app


# Dependency to get the store owned by the running app

def get_db(request: Request) -> Database:
    return request.app.state.db


async def streamed(value):
    """Apply the slow/error modes used to exercise streaming pages."""
    if ERROR_MODE_RATE:
        value = await simulate_occasional_failure(value, ERROR_MODE_RATE)
    if SLOW_MODE and SLOW_MODE_MAX_DELAY_MS > SLOW_MODE_DELAY_MS:
        value = await simulate_random_delay(value, SLOW_MODE_DELAY_MS, SLOW_MODE_MAX_DELAY_MS)
    elif SLOW_MODE:
        value = await simulate_slow_response(value, SLOW_MODE_DELAY_MS)
    return value


def register_routes(app: FastAPI) -> None:
    @app.get("/")
    def read_root():
        return {"message": "Storefront Demo API"}

    @app.get("/test")
    def test_database(db: Database = Depends(get_db)):
        return {
            "backend": "✅ Running",
            "database": "✅ In-memory",
            "collections": {
                "products": len(db.products),
                "reviews": len(db.reviews),
                "users": len(db.users),
                "carts": len(db.carts),
            },
        }

    # Products
    @app.get("/products", response_model=List[Product])
    async def list_products(
        tag: Optional[str] = None,
        limit: Optional[int] = Query(None, ge=1),
        db: Database = Depends(get_db),
    ):
        return await db.list_products(tag=tag, limit=limit)

    @app.get("/products/trending", response_model=List[Product])
    async def trending_products(db: Database = Depends(get_db)):
        return await streamed(await db.get_trending_products())

    @app.get("/products/recommended", response_model=List[Product])
    async def recommended_products(user_id: str = DEMO_USER_ID, db: Database = Depends(get_db)):
        return await streamed(await db.get_recommended_products(user_id))

    @app.get("/products/{product_id}", response_model=Product)
    async def get_product(product_id: str, db: Database = Depends(get_db)):
        product = await db.get_product(product_id)
        if not product:
            raise HTTPException(status_code=404, detail="Product not found")
        return product

    @app.get("/products/{product_id}/reviews", response_model=List[Review])
    async def get_reviews(product_id: str, db: Database = Depends(get_db)):
        return await streamed(await db.get_reviews(product_id))

    @app.post("/products/{product_id}/reviews", response_model=Review)
    async def add_review(product_id: str, body: ReviewBody, db: Database = Depends(get_db)):
        try:
            return await db.add_review(ReviewIn(product_id=product_id, **body.model_dump()))
        except NotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))

    # Search
    @app.get("/search", response_model=List[Product])
    async def search_products(q: str = Query(""), db: Database = Depends(get_db)):
        if not q:
            return []
        return await streamed(await db.search_products(q))

    # Cart
    @app.get("/cart")
    async def get_cart(user_id: str = DEMO_USER_ID, db: Database = Depends(get_db)) -> Dict[str, Any]:
        cart = await db.get_cart(user_id)
        return {"cart": cart.model_dump(mode="json") if cart else None}

    # Users
    @app.get("/users/{user_id}", response_model=User)
    async def get_user(user_id: str, db: Database = Depends(get_db)):
        user = await db.get_user(user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    @app.get("/starred", response_model=List[Product])
    async def starred_products(user_id: str = DEMO_USER_ID, db: Database = Depends(get_db)):
        return await db.get_starred_products(user_id)

    # Actions
    @app.post("/actions/add-to-cart", response_model=ActionState)
    async def add_to_cart(form: AddToCartForm, db: Database = Depends(get_db)):
        return await actions.add_to_cart(db, form)

    @app.post("/actions/update-quantity", response_model=ActionState)
    async def update_quantity(form: UpdateQuantityForm, db: Database = Depends(get_db)):
        return await actions.update_quantity(db, form)

    @app.post("/actions/checkout", response_model=ActionState)
    async def checkout(form: CheckoutForm, db: Database = Depends(get_db)):
        return await actions.checkout(db, form, payment_delay_ms=CHECKOUT_DELAY_MS)

    @app.post("/actions/update-profile", response_model=ActionState)
    async def update_profile(form: ProfileForm, db: Database = Depends(get_db)):
        return await actions.update_profile(db, form)

    @app.post("/actions/toggle-star", response_model=ActionState)
    async def toggle_star(form: StarForm, db: Database = Depends(get_db)):
        return await actions.toggle_star(db, form)

    @app.post("/actions/remove-from-starred", response_model=ActionState)
    async def remove_from_starred(form: StarForm, db: Database = Depends(get_db)):
        return await actions.remove_from_starred(db, form)

    # Demo cart
    @app.post("/admin/demo-cart/seed")
    async def seed_demo_cart(db: Database = Depends(get_db)):
        return {"ok": await seed_demo_data(db, DEMO_USER_ID)}

    @app.post("/admin/demo-cart/clear")
    async def clear_demo_cart(db: Database = Depends(get_db)):
        return {"ok": await clear_demo_data(db, DEMO_USER_ID)}

    # Counts
    @app.get("/api/cart-count")
    async def cart_count(db: Database = Depends(get_db)):
        try:
            return {"count": await actions.get_cart_count(db, DEMO_USER_ID)}
        except Exception:
            logger.exception("Error fetching cart count")
            return JSONResponse(status_code=500, content={"error": "Failed to fetch cart count"})

    @app.get("/api/favorites-count")
    async def favorites_count(db: Database = Depends(get_db)):
        try:
            return {"count": await actions.get_favorites_count(db, DEMO_USER_ID)}
        except Exception:
            logger.exception("Error fetching favorites count")
            return JSONResponse(status_code=500, content={"error": "Failed to fetch favorites count"})


app = create_app()


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    uvicorn.run(app, host="0.0.0.0", port=PORT)

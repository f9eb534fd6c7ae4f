# restaurant/api/__init__.py
from fastapi import FastAPI

from restaurant.api.routers import health, orders, tables, users


def create_app() -> FastAPI:
    app = FastAPI(
        title="Restaurant Order Service",
        version="1.0.0",
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(tables.router)
    app.include_router(orders.router)

    return app

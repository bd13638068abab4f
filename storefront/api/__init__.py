# storefront/api/__init__.py
from fastapi import FastAPI
from storefront.api.routers import cart, chat, health, orders, products, users


def register_routers(app: FastAPI):
    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(users.router)
    app.include_router(cart.router)
    app.include_router(orders.router)
    app.include_router(chat.router)

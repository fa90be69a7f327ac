# main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from khata.core.config import CORS_ORIGINS
from khata.core.db import init_models
from khata.core.log_config import configure_logging
from khata.middleware.activity_logger import ActivityLoggerMiddleware
from khata.routers import (
    activity_router,
    bills_router,
    collections_router,
    customers_router,
    orders_router,
    products_router,
    profile_router,
    quotations_router,
    reports_router,
    suppliers_router,
    transactions_router,
)

configure_logging()

app = FastAPI(
    title="Khata Backend API",
    description="FastAPI + Supabase backend for shop ledgers, orders and collections",
    version="0.1.0"
)
# CORS setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ActivityLoggerMiddleware)


# Health check endpoint
@app.get("/", tags=["Health"])
async def health_check():
    return {"status": "ok", "message": "Backend is running"}


# Register routers
app.include_router(customers_router)
app.include_router(products_router)
app.include_router(suppliers_router)
app.include_router(orders_router)
app.include_router(quotations_router)
app.include_router(collections_router)
app.include_router(transactions_router)
app.include_router(bills_router)
app.include_router(reports_router)
app.include_router(profile_router)
app.include_router(activity_router)


@app.on_event("startup")
async def on_startup():
    await init_models()

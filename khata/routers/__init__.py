# khata/routers/__init__.py

from .activity_router import router as activity_router
from .bills_router import router as bills_router
from .collections_router import router as collections_router
from .customers_router import router as customers_router
from .orders_router import router as orders_router
from .products_router import router as products_router
from .profile_router import router as profile_router
from .quotations_router import router as quotations_router
from .reports_router import router as reports_router
from .suppliers_router import router as suppliers_router
from .transactions_router import router as transactions_router

__all__ = [
    "activity_router",
    "bills_router",
    "collections_router",
    "customers_router",
    "orders_router",
    "products_router",
    "profile_router",
    "quotations_router",
    "reports_router",
    "suppliers_router",
    "transactions_router",
]

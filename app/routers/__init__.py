# app/routers/__init__.py

from .auth.auth_router import router as auth_router
from .auth.activity_router import router as activity_router

from .users.user_router import router as user_router

from .masters.category_router import router as category_router
from .masters.vehicle_router import router as vehicle_router

from .reports.report_router import router as report_router

from .expenses.expense_router import router as expense_router
from .expenses.receipt_router import router as receipt_router

from .dashboard.dashboard_router import router as dashboard_router


__all__ = [
"auth_router",
"activity_router",

"user_router",

"category_router",
"vehicle_router",

"report_router",

"expense_router",
"receipt_router",

"dashboard_router",
]

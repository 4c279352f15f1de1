# Routes package init
"""
BizTime Backend — API Routes Package
======================================

Route Inventory:
    - companies.py: GET/POST /companies, GET/PUT/DELETE /companies/{code}
    - invoices.py:  GET/POST /invoices,  GET/PUT/DELETE /invoices/{id}
    - health.py:    GET /health

Each module exposes a register_*_routes(router, ...) function. The
application factory creates the router, hands it to each function once at
startup, then mounts it. Routes stay thin: extract request data, call the
service, return its response model.
"""

from biztime.routes.companies import register_company_routes
from biztime.routes.health import register_health_routes
from biztime.routes.invoices import register_invoice_routes

__all__ = [
    "register_company_routes",
    "register_health_routes",
    "register_invoice_routes",
]

"""
BizTime Backend — Application Package
=======================================

HTTP API over two related tables: companies and the invoices billed to them.

Layers:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Lookups, not-found mapping
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async sessions, run_query()
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"

# Middleware package init
"""
BizTime Backend — Middleware Package
======================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID first, so every later log line can be correlated
    - Logging records status and duration of the whole downstream chain
    - GZip and CORS are FastAPI/Starlette built-ins configured in main.py
"""

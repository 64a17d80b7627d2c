# Routes package init
"""
TipShare Backend: API Routes Package
======================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - auth.py:    POST /auth/register, POST /auth/login
    - tips.py:    GET/POST/PUT/DELETE /tips (bearer token required)
    - health.py:  GET /health

Routes stay thin: extract the body, resolve the caller's identity, call a
service, shape the response. Status codes for failures are decided by the
exception handlers in main.py.
"""

# Middleware package init
"""
TipShare Backend: Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID runs first so the access log and error bodies can use it
    - GZip compresses large tip lists
    - CORS answers browser preflight (OPTIONS) requests
"""

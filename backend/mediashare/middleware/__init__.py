# Middleware package init
"""
MediaShare Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID first: every later log line of the request can carry it
    2. Logging: one access line per request with route, photo id, status and duration
    3. GZip / CORS: provided by Starlette/FastAPI
"""

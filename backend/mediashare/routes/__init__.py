# Routes package init
"""
MediaShare Backend — API Routes Package
=========================================

Route Inventory:
    - photos.py:    GET  /api/photos[?q=term]          (list / search)
                    GET  /api/photos/{id}              (detail, 404 if unknown)
                    POST /api/photos                   (multipart upload)
    - comments.py:  GET  /api/photos/{id}/comments
                    POST /api/photos/{id}/comments
    - ratings.py:   GET  /api/photos/{id}/rating       (count / average)
                    POST /api/photos/{id}/rating       (upsert per user key)
    - files.py:     GET  /api/files/{path}             (local blob backend)
    - health.py:    GET  /, GET /health, GET /api/_debug/env

Design Principle:
    Routes are THIN: extract input, call the service taken from app.state,
    pick the status code. Validation and storage live in the services.
"""

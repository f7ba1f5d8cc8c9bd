# Middleware package init
"""
Portfolio Backend — Middleware Package
========================================

Middleware Chain (order matters):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation id for logs and error bodies
    2. Logging: method, path, status, duration with the request id
    3. GZip / CORS: provided by FastAPI (CORS handles preflight)
"""

# Routes package init
"""
Portfolio Backend — API Routes Package
========================================

What:  HTTP route handlers that accept requests and return responses.
How:   Each route module handles one resource.

Route Inventory:
    - projects.py: GET    /api/projects          (list / search, public)
                   GET    /api/projects/{id}     (single project, public)
                   POST   /api/projects          (create, bearer token)
                   PUT    /api/projects/{id}     (partial update, bearer token)
                   DELETE /api/projects/{id}     (delete, bearer token)
    - health.py:   GET    /health                (service health check)

Routes stay THIN: they read the transport body, call ProjectService and
shape the response. Validation, auth and persistence rules live in services.
"""

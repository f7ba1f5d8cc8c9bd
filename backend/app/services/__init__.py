# Services package init
"""
Portfolio Backend — Services Layer
====================================

What:  Business logic between routes (HTTP) and the repository (persistence).
How:   Plain classes with module-level default instances; routes receive a
       ProjectService through FastAPI dependency injection.

Service Inventory:
    - normalizer:      tech list / boolean / integer coercion of raw input
    - validator:       field rules for create (all required) and update (partial)
    - body_reader:     bounded, in-memory JSON / form / multipart body parsing
    - image_service:   in-memory image checks and data-URL embedding
    - auth_service:    bearer token extraction and JWT verification (AuthGate)
    - project_service: orchestrates auth → validate → ingest → persist
"""

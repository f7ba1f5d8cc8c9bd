"""
Portfolio Backend — Application Package Initializer
=====================================================

What: Marks the `app` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Validation, Auth, Image │  ← Orchestration, rules
    │   ingestion, ProjectService)        │
    ├─────────────────────────────────────┤
    │     Repositories (Document store)   │  ← Queries, sort, persistence errors
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Engine lifecycle, sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"

"""
Mixtape Backend — Application Package Initializer
==================================================

What: Marks the `mixtape` directory as a Python package.
Who:  Used by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend is layered:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← CRUD, aggregation of views
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never touch ORM rows directly; services return pydantic views.
"""

__version__ = "1.0.0"

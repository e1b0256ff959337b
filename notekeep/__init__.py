"""
Notekeep Backend: Application Package Initializer
==================================================

What: Marks the `notekeep` directory as a Python package.
Who:  Used by uvicorn, Alembic, pytest and the `python -m notekeep` entry point.

Architecture Note:
    The backend is layered:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← CRUD passthrough, health rules
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Store (Persistence)          │  ← NoteStore adapters
    └─────────────────────────────────────┘

    The store handle is created once and injected into the application
    factory, so every layer above it can run against an in-memory store.
"""

__version__ = "1.0.0"

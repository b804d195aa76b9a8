"""
Six Cities Backend — Application Package Initializer
=====================================================

What: Marks the `sixcities` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend is layered around a small request pipeline:

    ┌─────────────────────────────────────┐
    │     Controllers (resource routes)   │  ← one per resource family
    ├─────────────────────────────────────┤
    │  REST pipeline (rest/ package)      │  ← route descriptors, middleware
    │                                     │    chain, response helpers,
    │                                     │    error mapper
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← users, offers, comments, auth
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic DTO/RDO
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Controllers never format error responses; they raise typed HttpErrors and
    the error mapper turns them into JSON.
"""

__version__ = "1.0.0"

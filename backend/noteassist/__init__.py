"""
NoteAssist Backend — Application Package
==========================================

Personal notes API with AI assistance.

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, identity header
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← note store, AI assist, provider
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"

"""
NeuroNotes Backend: Application Package
=========================================

What: Markdown note-taking backend with AI tag suggestions and summaries.
Who:  Imported by uvicorn (`neuronotes.main:app`), Alembic, pytest and the
      headless client layer in `neuronotes.client`.

Architecture Note:
    ┌─────────────────────────────────────┐
    │      Routes (API + AI functions)    │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (notes, AI gateway, auth)│  ← Orchestration, validation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Authentication and AI inference are external services. This package
    only talks to them through thin httpx wrappers.
"""

__version__ = "1.0.0"

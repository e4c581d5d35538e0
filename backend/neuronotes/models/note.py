"""
NeuroNotes Backend: Note SQLAlchemy Model
===========================================

What:  ORM model representing the `notes` table in PostgreSQL.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for
       migrations.
Who:   Used by NoteService for CRUD and by Alembic for schema management.

Table Design:
    - UUID primary key, assigned by the backend, immutable
    - user_id: owner from the auth service; every query filters on it
    - title / content: free text; content is markdown and may be empty
    - tags: ordered text array, stored lowercase and unique
    - favorite: boolean flag, default false
    - created_at immutable; updated_at refreshed on every UPDATE

    Index (user_id, created_at DESC) serves the only list query:
    "this user's notes, newest first".
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import Boolean, Index, String, Text, text
from sqlalchemy.dialects.postgresql import ARRAY, TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from neuronotes.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A markdown note owned by exactly one user.

    Lifecycle:
        1. Created on explicit user action with placeholder title, empty content
        2. Mutated field-by-field through partial updates
        3. Deleted on confirmed user action
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
        comment="Unique identifier, assigned by the backend",
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
        comment="Owner (auth service user id); set once at creation",
    )

    title: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        default="Untitled Note",
        comment="Free-text title",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
        comment="Markdown body",
    )

    tags: Mapped[List[str]] = mapped_column(
        ARRAY(Text),
        nullable=False,
        default=list,
        server_default=text("'{}'"),
        comment="Ordered, lowercase, unique tags",
    )

    favorite: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
        comment="Favorite flag",
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this note was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="Last modification (UTC); refreshed on every update",
    )

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, user_id={self.user_id}, "
            f"title='{self.title}', favorite={self.favorite})>"
        )


Index("idx_notes_user_created_at", Note.user_id, Note.created_at.desc())

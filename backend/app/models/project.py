"""
Portfolio Backend — Project SQLAlchemy Model
==============================================

What:  ORM model representing the `projects` table in PostgreSQL.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by ProjectRepository for persistence and by Alembic for schema management.

Table Design:
    - UUID primary key: assigned at insert, never reused
    - tech: PostgreSQL TEXT[] keeps insertion order and duplicates
    - github_url / demo_url: "" means "not set"
    - cover_image: self-describing data URL (data:<mime>;base64,<payload>)
    - created_at / updated_at: UTC with timezone

    Composite index (featured DESC, "order" ASC, created_at DESC):
        Matches the listing sort exactly, so the unfiltered list is an index scan.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Boolean, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import ARRAY, UUID, TIMESTAMP

from app.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Project(Base):
    """
    A portfolio project.

    Lifecycle:
        1. Created by POST /api/projects (all required fields validated)
        2. Mutated field-by-field by PUT /api/projects/{id}
        3. Removed permanently by DELETE /api/projects/{id}
    """

    __tablename__ = "projects"

    # ── Identity ──────────────────────────────────────────────────────────
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
        comment="Opaque project identifier",
    )

    # ── Content ───────────────────────────────────────────────────────────
    title: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
        comment="Project title (2-120 chars, trimmed)",
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Project description (10-3000 chars, trimmed)",
    )

    tech: Mapped[List[str]] = mapped_column(
        ARRAY(Text),
        nullable=False,
        default=list,
        server_default=text("'{}'"),
        comment="Ordered technology tags; entries never empty",
    )

    github_url: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
    )

    demo_url: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
    )

    # ── Ordering ──────────────────────────────────────────────────────────
    featured: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
        comment="Featured projects are listed first",
    )

    # "order" is a reserved word; SQLAlchemy quotes it in generated SQL
    order: Mapped[int] = mapped_column(
        "order",
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
        comment="Manual ordering within the same featured group (ascending)",
    )

    # ── Image ─────────────────────────────────────────────────────────────
    cover_image: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default=None,
        comment="Embedded cover image as data:<mime>;base64,<payload>",
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this project was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this project was last updated (UTC)",
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, title='{self.title}', featured={self.featured})>"


Index(
    "idx_projects_listing",
    Project.featured.desc(),
    Project.order.asc(),
    Project.created_at.desc(),
)

"""Create projects table

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates the `projects` table behind the portfolio catalogue.
How:   PostgreSQL types: UUID primary key, TEXT[] for tech tags,
       TIMESTAMP WITH TIME ZONE for both timestamps.

Rollback: downgrade() drops the table (all projects are lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "projects",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
            comment="Opaque project identifier",
        ),
        sa.Column("title", sa.String(120), nullable=False,
                  comment="Project title (2-120 chars, trimmed)"),
        sa.Column("description", sa.Text(), nullable=False,
                  comment="Project description (10-3000 chars, trimmed)"),
        sa.Column(
            "tech",
            postgresql.ARRAY(sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'"),
            comment="Ordered technology tags; entries never empty",
        ),
        sa.Column("github_url", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("demo_url", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column(
            "featured",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
            comment="Featured projects are listed first",
        ),
        sa.Column(
            "order",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
            comment="Manual ordering within the same featured group (ascending)",
        ),
        sa.Column(
            "cover_image",
            sa.Text(),
            nullable=True,
            comment="Embedded cover image as data:<mime>;base64,<payload>",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this project was created (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this project was last updated (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # Same column order and directions as the listing ORDER BY
    op.create_index(
        "idx_projects_listing",
        "projects",
        [sa.text("featured DESC"), sa.text('"order" ASC'), sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_projects_listing", table_name="projects")
    op.drop_table("projects")

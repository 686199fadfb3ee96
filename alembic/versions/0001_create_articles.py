"""Create the articles table (reading index, unique by canonical URL).

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

from alembic import op
import sqlalchemy as sa


# ---------------------------------------------------------------------------
# upgrade
# ---------------------------------------------------------------------------
def upgrade() -> None:
    op.create_table(
        "articles",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("url", sa.Text, nullable=False),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("domain", sa.Text, nullable=False, server_default=""),
        sa.Column("newsletter", sa.Text, nullable=False, server_default=""),
        sa.Column("email_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("folder", sa.Text, nullable=False, server_default=""),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.UniqueConstraint("url", name="uq_articles_url"),
    )
    op.create_index("ix_articles_domain", "articles", ["domain"])
    op.create_index("ix_articles_newsletter", "articles", ["newsletter"])
    op.create_index("ix_articles_email_date", "articles", ["email_date"])


# ---------------------------------------------------------------------------
# downgrade
# ---------------------------------------------------------------------------
def downgrade() -> None:
    op.drop_index("ix_articles_email_date", table_name="articles")
    op.drop_index("ix_articles_newsletter", table_name="articles")
    op.drop_index("ix_articles_domain", table_name="articles")
    op.drop_table("articles")

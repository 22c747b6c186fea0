"""Initial schema - tweet cache.

Revision ID: 001
Revises:
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # One row per submitted URL and crawl mode; tweets are a JSON array
    op.create_table(
        "tweet_cache",
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("is_full", sa.Boolean(), nullable=False),
        sa.Column("tweets", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("url", "is_full", name="pk_tweet_cache"),
    )


def downgrade() -> None:
    op.drop_table("tweet_cache")

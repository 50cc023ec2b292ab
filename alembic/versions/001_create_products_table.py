"""Create products table

Revision ID: 001
Revises: None
Create Date: 2024-03-01 00:00:00.000000+00:00

What:  Creates the `products` table.
How:   Dialect-neutral column types (Uuid, JSON) so the same migration runs
       on PostgreSQL and SQLite. See catalog/models/product.py.

Rollback: downgrade() drops the table (all product data lost; uploaded
files on disk are untouched).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "products",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("sku", sa.String(255), nullable=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("quantity", sa.Float(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        # Ordered list of stored references
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("featured_image", sa.String(512), nullable=True),
        sa.Column(
            "is_favorite",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("products")

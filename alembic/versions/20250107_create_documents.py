"""Create documents table

Revision ID: 001_initial
Revises:
Create Date: 2025-01-07 00:00:00.000000

Only the catalog lives in SQL. File bytes are kept in the upload directory;
``filepath`` holds the storage key naming that file.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'documents',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('filename', sa.String(length=255), nullable=False),
        sa.Column('filepath', sa.String(length=512), nullable=False),
        sa.Column('filesize', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('filepath'),
        sqlite_autoincrement=True,
    )
    op.create_index(op.f('ix_documents_created_at'), 'documents', ['created_at'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_documents_created_at'), table_name='documents')
    op.drop_table('documents')

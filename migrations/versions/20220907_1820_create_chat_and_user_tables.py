"""Create chat and user tables

Revision ID: 5d2c8e1f0a47
Revises:
Create Date: 2022-09-07 18:20:47.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5d2c8e1f0a47'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create tg_chat table
    op.create_table(
        'tg_chat',
        sa.Column('id', sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='tg_chat_pkey'),
    )

    # Create tg_user table, scoped to a chat
    op.create_table(
        'tg_user',
        sa.Column('id', sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column('chat_id', sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column('username', sa.Text(), nullable=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint('id', 'chat_id', name='tg_user_pkey'),
        sa.ForeignKeyConstraint(
            ['chat_id'],
            ['tg_chat.id'],
            name='fk_chat',
            ondelete='CASCADE',
            onupdate='CASCADE',
        ),
    )


def downgrade() -> None:
    op.drop_table('tg_user')
    op.drop_table('tg_chat')

"""create courtlistener_judges table

Revision ID: 3b7e51c0a2d4
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3b7e51c0a2d4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'courtlistener_judges',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column('slug', sa.String(), nullable=True),
        sa.Column('fjc_id', sa.Integer(), nullable=True),
        sa.Column('name_first', sa.String(), nullable=True),
        sa.Column('name_middle', sa.String(), nullable=True),
        sa.Column('name_last', sa.String(), nullable=True),
        sa.Column('name_suffix', sa.String(), nullable=True),
        sa.Column('date_dob', sa.Date(), nullable=True),
        sa.Column('date_granularity_dob', sa.String(), nullable=True),
        sa.Column('date_dod', sa.Date(), nullable=True),
        sa.Column('date_granularity_dod', sa.String(), nullable=True),
        sa.Column('dob_city', sa.String(), nullable=True),
        sa.Column('dob_state', sa.String(), nullable=True),
        sa.Column('dob_country', sa.String(), nullable=True),
        sa.Column('dod_city', sa.String(), nullable=True),
        sa.Column('dod_state', sa.String(), nullable=True),
        sa.Column('dod_country', sa.String(), nullable=True),
        sa.Column('gender', sa.String(), nullable=True),
        sa.Column('religion', sa.String(), nullable=True),
        sa.Column('ftm_total_received', sa.Float(), nullable=True),
        sa.Column('ftm_eid', sa.String(), nullable=True),
        sa.Column('has_photo', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_alias_of_id', sa.Integer(), nullable=True),
        sa.Column('date_created', sa.DateTime(timezone=True), nullable=True),
        sa.Column('date_modified', sa.DateTime(timezone=True), nullable=True),
        sa.Column('synced_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_courtlistener_judges_slug', 'courtlistener_judges', ['slug'])
    op.create_index('ix_courtlistener_judges_name_last', 'courtlistener_judges', ['name_last'])


def downgrade() -> None:
    op.drop_index('ix_courtlistener_judges_name_last', table_name='courtlistener_judges')
    op.drop_index('ix_courtlistener_judges_slug', table_name='courtlistener_judges')
    op.drop_table('courtlistener_judges')

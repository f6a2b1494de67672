"""create student directory and game_record tables

Revision ID: 3b7c1e9d2a41
Revises:
Create Date: 2026-10-18 10:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3b7c1e9d2a41'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'student' not in existing_tables:
        op.create_table(
            'student',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('roll_number', sa.String(length=64), nullable=False),
            sa.Column('name', sa.String(length=128), nullable=False),
            sa.Column('email', sa.String(length=128), nullable=False, server_default=''),
            sa.Column('mobile', sa.String(length=32), nullable=False, server_default=''),
        )
        op.create_index('ix_student_roll_number', 'student', ['roll_number'], unique=True)

    if 'game_record' not in existing_tables:
        op.create_table(
            'game_record',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('game_no', sa.Integer(), nullable=False),
            sa.Column('team_one', sa.JSON(), nullable=False),
            sa.Column('team_two', sa.JSON(), nullable=False),
            sa.Column('play_time', sa.String(length=8), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        )


def downgrade():
    op.drop_table('game_record')
    op.drop_index('ix_student_roll_number', table_name='student')
    op.drop_table('student')

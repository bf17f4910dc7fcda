"""initial_schema

Revision ID: 3f1c9a7d2b64
Revises:
Create Date: 2026-10-17 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b64'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table('sessions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('token_jti', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_activity', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE')
    )
    op.create_index('ix_sessions_id', 'sessions', ['id'])
    op.create_index('ix_sessions_token_jti', 'sessions', ['token_jti'], unique=True)

    op.create_table('quizzes',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('share_slug', sa.String(64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE')
    )
    op.create_index('ix_quizzes_id', 'quizzes', ['id'])
    op.create_index('ix_quizzes_owner_id', 'quizzes', ['owner_id'])
    op.create_index('ix_quizzes_share_slug', 'quizzes', ['share_slug'], unique=True)

    op.create_table('questions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('quiz_id', sa.String(64), nullable=False),
        sa.Column('question_text', sa.Text(), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.Column('options_json', sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['quiz_id'], ['quizzes.id'], ondelete='CASCADE')
    )
    op.create_index('ix_questions_id', 'questions', ['id'])
    op.create_index('ix_questions_quiz_id', 'questions', ['quiz_id'])

    op.create_table('completion_pages',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('quiz_id', sa.String(64), nullable=False),
        sa.Column('document_json', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['quiz_id'], ['quizzes.id'], ondelete='CASCADE')
    )
    op.create_index('ix_completion_pages_id', 'completion_pages', ['id'])
    op.create_index('ix_completion_pages_quiz_id', 'completion_pages', ['quiz_id'], unique=True)

    op.create_table('responses',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('quiz_id', sa.String(64), nullable=False),
        sa.Column('respondent_identifier', sa.String(255), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='in_progress'),
        sa.Column('current_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('selected_option', sa.Text(), nullable=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['quiz_id'], ['quizzes.id'], ondelete='CASCADE')
    )
    op.create_index('ix_responses_id', 'responses', ['id'])
    op.create_index('ix_responses_quiz_id', 'responses', ['quiz_id'])

    op.create_table('response_answers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('response_id', sa.String(64), nullable=False),
        sa.Column('question_id', sa.Integer(), nullable=True),
        sa.Column('question_index', sa.Integer(), nullable=False),
        sa.Column('selected_option', sa.Text(), nullable=False),
        sa.Column('answered_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['response_id'], ['responses.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['question_id'], ['questions.id'], ondelete='SET NULL'),
        sa.UniqueConstraint('response_id', 'question_index', name='uq_response_question')
    )
    op.create_index('ix_response_answers_id', 'response_answers', ['id'])
    op.create_index('ix_response_answers_response_id', 'response_answers', ['response_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('response_answers')
    op.drop_table('responses')
    op.drop_table('completion_pages')
    op.drop_table('questions')
    op.drop_table('quizzes')
    op.drop_table('sessions')
    op.drop_table('users')

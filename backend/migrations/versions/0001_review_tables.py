"""Create business, review and daily aggregate tables

Revision ID: 0001_review_tables
Revises:
Create Date: 2024-05-01 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_review_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('businesses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('website', sa.String(length=500), nullable=True),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('google_review_url', sa.String(length=1000), nullable=True),
        sa.Column('welcome_message', sa.String(length=500), nullable=True),
        sa.Column('thank_you_message', sa.String(length=1000), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_businesses_id'), 'businesses', ['id'], unique=False)
    op.create_index(op.f('ix_businesses_is_active'), 'businesses', ['is_active'], unique=False)
    op.create_index('idx_business_active_name', 'businesses', ['is_active', 'name'], unique=False)

    op.create_table('reviews',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('business_id', sa.Integer(), nullable=False),
        sa.Column('customer_name', sa.String(length=100), nullable=False),
        sa.Column('customer_phone', sa.String(length=30), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('feedback', sa.Text(), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False),
        sa.Column('status', sa.Enum('PENDING', 'PROCESSED', 'PUBLISHED', 'REJECTED',
                                    name='reviewstatus', native_enum=False, length=20),
                  nullable=False),
        sa.Column('submitted_at', sa.DateTime(), nullable=False),
        sa.Column('processed_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['business_id'], ['businesses.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_reviews_id'), 'reviews', ['id'], unique=False)
    op.create_index(op.f('ix_reviews_business_id'), 'reviews', ['business_id'], unique=False)
    op.create_index(op.f('ix_reviews_is_public'), 'reviews', ['is_public'], unique=False)
    op.create_index(op.f('ix_reviews_status'), 'reviews', ['status'], unique=False)
    op.create_index('idx_review_business_submitted', 'reviews', ['business_id', 'submitted_at'], unique=False)
    op.create_index('idx_review_business_rating', 'reviews', ['business_id', 'rating'], unique=False)

    op.create_table('daily_aggregates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('business_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('total_reviews', sa.Integer(), nullable=False),
        sa.Column('high_ratings', sa.Integer(), nullable=False),
        sa.Column('low_ratings', sa.Integer(), nullable=False),
        sa.Column('google_redirects', sa.Integer(), nullable=False),
        sa.Column('private_feedback', sa.Integer(), nullable=False),
        sa.Column('average_rating', sa.Float(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['business_id'], ['businesses.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('business_id', 'date', name='uq_daily_aggregate_business_date')
    )
    op.create_index(op.f('ix_daily_aggregates_id'), 'daily_aggregates', ['id'], unique=False)
    op.create_index(op.f('ix_daily_aggregates_business_id'), 'daily_aggregates', ['business_id'], unique=False)
    op.create_index(op.f('ix_daily_aggregates_date'), 'daily_aggregates', ['date'], unique=False)
    op.create_index('idx_daily_aggregate_date_business', 'daily_aggregates', ['date', 'business_id'], unique=False)

    op.create_table('aggregate_applications',
        sa.Column('review_id', sa.Integer(), nullable=False),
        sa.Column('business_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('applied_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['review_id'], ['reviews.id'], ),
        sa.PrimaryKeyConstraint('review_id')
    )
    op.create_index(op.f('ix_aggregate_applications_business_id'), 'aggregate_applications', ['business_id'], unique=False)


def downgrade():
    op.drop_index(op.f('ix_aggregate_applications_business_id'), table_name='aggregate_applications')
    op.drop_table('aggregate_applications')

    op.drop_index('idx_daily_aggregate_date_business', table_name='daily_aggregates')
    op.drop_index(op.f('ix_daily_aggregates_date'), table_name='daily_aggregates')
    op.drop_index(op.f('ix_daily_aggregates_business_id'), table_name='daily_aggregates')
    op.drop_index(op.f('ix_daily_aggregates_id'), table_name='daily_aggregates')
    op.drop_table('daily_aggregates')

    op.drop_index('idx_review_business_rating', table_name='reviews')
    op.drop_index('idx_review_business_submitted', table_name='reviews')
    op.drop_index(op.f('ix_reviews_status'), table_name='reviews')
    op.drop_index(op.f('ix_reviews_is_public'), table_name='reviews')
    op.drop_index(op.f('ix_reviews_business_id'), table_name='reviews')
    op.drop_index(op.f('ix_reviews_id'), table_name='reviews')
    op.drop_table('reviews')

    op.drop_index('idx_business_active_name', table_name='businesses')
    op.drop_index(op.f('ix_businesses_is_active'), table_name='businesses')
    op.drop_index(op.f('ix_businesses_id'), table_name='businesses')
    op.drop_table('businesses')

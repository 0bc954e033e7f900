"""initial_schema

Revision ID: 001
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create users table
    op.create_table(
        'users',
        sa.Column('uuid', sa.String(36), nullable=False),
        sa.Column('username', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(255), nullable=True),
        sa.Column('last_name', sa.String(255), nullable=True),
        sa.Column('avatar', sa.Text(), nullable=True),
        sa.Column('role', sa.String(50), nullable=False, server_default='user'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('uuid', name='pk_users'),
        sa.UniqueConstraint('username', name='uq_users_username'),
    )
    op.create_index('idx_user_email', 'users', ['email'])

    # Create products table
    op.create_table(
        'products',
        sa.Column('uuid', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('original_price', sa.Numeric(10, 2), nullable=True),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('game', sa.String(100), nullable=False),
        sa.Column('image_url', sa.String(500), nullable=False),
        sa.Column('group_key', sa.String(255), nullable=False),
        sa.Column('group_name', sa.String(255), nullable=False),
        sa.Column('variant_name', sa.String(255), nullable=False, server_default='Standard'),
        sa.Column('stock_quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('in_stock', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('delivery_url', sa.String(500), nullable=True),
        sa.Column('license_key', sa.String(255), nullable=True),
        sa.Column('delivery_type', sa.String(20), nullable=False, server_default='download'),
        sa.Column('average_rating', sa.Float(), nullable=True, server_default='0'),
        sa.Column('review_count', sa.Integer(), nullable=True, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('uuid', name='pk_products'),
    )
    op.create_index('idx_product_category', 'products', ['category'])
    op.create_index('idx_product_game', 'products', ['game'])
    op.create_index('idx_product_group_key', 'products', ['group_key'])

    # Create orders table
    op.create_table(
        'orders',
        sa.Column('uuid', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('product_id', sa.String(36), nullable=False),
        sa.Column('product_name', sa.String(255), nullable=False),
        sa.Column('product_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('payment_method', sa.String(50), nullable=False),
        sa.Column('wallet_address', sa.String(255), nullable=False),
        sa.Column('transaction_id', sa.String(255), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('license_key', sa.String(255), nullable=True),
        sa.Column('download_url', sa.String(500), nullable=True),
        sa.Column('download_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('discount_code', sa.String(64), nullable=True),
        sa.Column('discount_amount', sa.Numeric(10, 2), nullable=False, server_default='0.00'),
        sa.Column('discount_redeemed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('uuid', name='pk_orders'),
        sa.ForeignKeyConstraint(['user_id'], ['users.uuid'], name='fk_orders_user_id_users'),
        sa.ForeignKeyConstraint(['product_id'], ['products.uuid'], name='fk_orders_product_id_products'),
    )
    op.create_index('idx_order_user_id', 'orders', ['user_id'])
    op.create_index('idx_order_product_id', 'orders', ['product_id'])
    op.create_index('idx_order_status', 'orders', ['status'])

    # Create discount_codes table
    op.create_table(
        'discount_codes',
        sa.Column('uuid', sa.String(36), nullable=False),
        sa.Column('code', sa.String(64), nullable=False),
        sa.Column('discount_type', sa.String(20), nullable=False),
        sa.Column('value', sa.Numeric(10, 2), nullable=False),
        sa.Column('min_order_amount', sa.Numeric(10, 2), nullable=False, server_default='0.00'),
        sa.Column('max_uses', sa.Integer(), nullable=True),
        sa.Column('used_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('valid_from', sa.DateTime(), nullable=False),
        sa.Column('valid_to', sa.DateTime(), nullable=False),
        sa.Column('created_by', sa.String(36), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('uuid', name='pk_discount_codes'),
        sa.UniqueConstraint('code', name='uq_discount_codes_code'),
        sa.ForeignKeyConstraint(['created_by'], ['users.uuid'], name='fk_discount_codes_created_by_users'),
    )
    op.create_index('idx_discount_code_active', 'discount_codes', ['is_active'])

    # Create product_reviews table
    op.create_table(
        'product_reviews',
        sa.Column('uuid', sa.String(36), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(255), nullable=True),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('is_verified_purchase', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('helpful_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('product_id', sa.String(36), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('uuid', name='pk_product_reviews'),
        sa.ForeignKeyConstraint(['user_id'], ['users.uuid'], name='fk_product_reviews_user_id_users'),
        sa.ForeignKeyConstraint(
            ['product_id'], ['products.uuid'],
            name='fk_product_reviews_product_id_products', ondelete='CASCADE'
        ),
        sa.UniqueConstraint('user_id', 'product_id', name='uq_review_user_product'),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_product_reviews_rating_range'),
    )
    op.create_index('idx_review_product_id', 'product_reviews', ['product_id'])

    # Create wishlists table
    op.create_table(
        'wishlists',
        sa.Column('uuid', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('product_id', sa.String(36), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('uuid', name='pk_wishlists'),
        sa.ForeignKeyConstraint(['user_id'], ['users.uuid'], name='fk_wishlists_user_id_users'),
        sa.ForeignKeyConstraint(
            ['product_id'], ['products.uuid'],
            name='fk_wishlists_product_id_products', ondelete='CASCADE'
        ),
        sa.UniqueConstraint('user_id', 'product_id', name='uq_wishlist_user_product'),
    )
    op.create_index('idx_wishlist_user_id', 'wishlists', ['user_id'])

    # Create recently_viewed table
    op.create_table(
        'recently_viewed',
        sa.Column('uuid', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('product_id', sa.String(36), nullable=False),
        sa.Column('viewed_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('uuid', name='pk_recently_viewed'),
        sa.ForeignKeyConstraint(['user_id'], ['users.uuid'], name='fk_recently_viewed_user_id_users'),
        sa.ForeignKeyConstraint(
            ['product_id'], ['products.uuid'],
            name='fk_recently_viewed_product_id_products', ondelete='CASCADE'
        ),
        sa.UniqueConstraint('user_id', 'product_id', name='uq_recently_viewed_user_product'),
    )
    op.create_index('idx_recently_viewed_user_viewed_at', 'recently_viewed', ['user_id', 'viewed_at'])

    # Create user_activity table
    op.create_table(
        'user_activity',
        sa.Column('uuid', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=True),
        sa.Column('action', sa.String(50), nullable=False),
        sa.Column('entity_type', sa.String(50), nullable=True),
        sa.Column('entity_id', sa.String(36), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('user_agent', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('uuid', name='pk_user_activity'),
    )
    op.create_index('idx_user_activity_user_id', 'user_activity', ['user_id'])

    # Create support_tickets table
    op.create_table(
        'support_tickets',
        sa.Column('uuid', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('subject', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('category', sa.String(50), nullable=False, server_default='general'),
        sa.Column('priority', sa.String(20), nullable=False, server_default='medium'),
        sa.Column('status', sa.String(20), nullable=False, server_default='open'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('uuid', name='pk_support_tickets'),
    )
    op.create_index('idx_support_ticket_status', 'support_tickets', ['status'])

    # Create faq_items table
    op.create_table(
        'faq_items',
        sa.Column('uuid', sa.String(36), nullable=False),
        sa.Column('question', sa.Text(), nullable=False),
        sa.Column('answer', sa.Text(), nullable=False),
        sa.Column('category', sa.String(50), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('view_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('helpful_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('uuid', name='pk_faq_items'),
    )


def downgrade() -> None:
    op.drop_table('faq_items')
    op.drop_index('idx_support_ticket_status', 'support_tickets')
    op.drop_table('support_tickets')
    op.drop_index('idx_user_activity_user_id', 'user_activity')
    op.drop_table('user_activity')
    op.drop_index('idx_recently_viewed_user_viewed_at', 'recently_viewed')
    op.drop_table('recently_viewed')
    op.drop_index('idx_wishlist_user_id', 'wishlists')
    op.drop_table('wishlists')
    op.drop_index('idx_review_product_id', 'product_reviews')
    op.drop_table('product_reviews')
    op.drop_index('idx_discount_code_active', 'discount_codes')
    op.drop_table('discount_codes')
    op.drop_index('idx_order_status', 'orders')
    op.drop_index('idx_order_product_id', 'orders')
    op.drop_index('idx_order_user_id', 'orders')
    op.drop_table('orders')
    op.drop_index('idx_product_group_key', 'products')
    op.drop_index('idx_product_category', 'products')
    op.drop_index('idx_product_game', 'products')
    op.drop_table('products')
    op.drop_index('idx_user_email', 'users')
    op.drop_table('users')

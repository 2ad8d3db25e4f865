"""initial storefront schema

Revision ID: 3a7c21d9e4b0
Revises:
Create Date: 2026-10-19 11:02:47.118392

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3a7c21d9e4b0'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('reset_password_token', sa.String(), nullable=True),
        sa.Column('reset_password_expire', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_reset_password_token', 'users', ['reset_password_token'])

    op.create_table(
        'pricing_config',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('gold_prices', sa.JSON(), nullable=True),
        sa.Column('platinum_price_per_gram', sa.Float(), nullable=True),
        sa.Column('silver925_price_per_gram', sa.Float(), nullable=True),
        sa.Column('diamond_price_per_carat', sa.Float(), nullable=True),
        sa.Column('gemstone_prices', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'ornaments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('sku', sa.String(), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('rating', sa.Float(), nullable=True),
        sa.Column('reviews', sa.Integer(), nullable=True),
        sa.Column('category_type', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('sub_category', sa.String(), nullable=True),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('gender', sa.String(), nullable=False),
        sa.Column('metal_type', sa.String(), nullable=True),
        sa.Column('purity', sa.String(), nullable=True),
        sa.Column('weight', sa.Float(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('original_price', sa.Float(), nullable=True),
        sa.Column('discount', sa.Float(), nullable=True),
        sa.Column('making_charges', sa.Float(), nullable=True),
        sa.Column('prices', sa.JSON(), nullable=True),
        sa.Column('making_charges_by_country', sa.JSON(), nullable=True),
        sa.Column('diamond_details', sa.JSON(), nullable=True),
        sa.Column('side_diamond_details', sa.JSON(), nullable=True),
        sa.Column('gemstone_details', sa.JSON(), nullable=True),
        sa.Column('stone_type', sa.String(), nullable=True),
        sa.Column('style', sa.String(), nullable=True),
        sa.Column('size', sa.String(), nullable=True),
        sa.Column('color', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('stock', sa.Integer(), nullable=True),
        sa.Column('is_featured', sa.Boolean(), nullable=True),
        sa.Column('cover_image', sa.String(), nullable=False),
        sa.Column('images', sa.JSON(), nullable=True),
        sa.Column('model_3d', sa.String(), nullable=True),
        sa.Column('video_url', sa.String(), nullable=True),
        sa.Column('design_code', sa.String(), nullable=True),
        sa.Column('parent_id', sa.Integer(), sa.ForeignKey('ornaments.id', ondelete='CASCADE'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_ornaments_id', 'ornaments', ['id'])
    op.create_index('ix_ornaments_sku', 'ornaments', ['sku'], unique=True)
    op.create_index('ix_ornaments_category_type', 'ornaments', ['category_type'])
    op.create_index('ix_ornaments_design_code', 'ornaments', ['design_code'])
    op.create_index('ix_ornaments_parent_id', 'ornaments', ['parent_id'])
    op.create_index('ix_ornaments_category_gender_featured', 'ornaments', ['category', 'gender', 'is_featured'])

    op.create_table(
        'carts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('guest_id', sa.String(), nullable=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_carts_id', 'carts', ['id'])
    op.create_index('ix_carts_guest_id', 'carts', ['guest_id'], unique=True)
    op.create_index('ix_carts_user_id', 'carts', ['user_id'], unique=True)

    op.create_table(
        'cart_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('cart_id', sa.Integer(), sa.ForeignKey('carts.id'), nullable=False),
        sa.Column('ornament_id', sa.Integer(), sa.ForeignKey('ornaments.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
    )
    op.create_index('ix_cart_items_id', 'cart_items', ['id'])
    op.create_index('ix_cart_items_cart_id', 'cart_items', ['cart_id'])
    op.create_index('ix_cart_items_ornament_id', 'cart_items', ['ornament_id'])

    op.create_table(
        'tracking_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('session_id', sa.String(), nullable=True),
        sa.Column('event', sa.String(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=True),
        sa.Column('order_id', sa.String(), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('event_timestamp', sa.DateTime(), nullable=True),
        sa.Column('ip', sa.String(), nullable=True),
        sa.Column('country', sa.String(), nullable=True),
        sa.Column('region', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('platform', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_tracking_logs_id', 'tracking_logs', ['id'])
    op.create_index('ix_tracking_logs_session_id', 'tracking_logs', ['session_id'])
    op.create_index('ix_tracking_logs_event', 'tracking_logs', ['event'])
    op.create_index('ix_tracking_logs_event_timestamp', 'tracking_logs', ['event_timestamp'])
    op.create_index('ix_tracking_logs_country', 'tracking_logs', ['country'])
    op.create_index('ix_tracking_logs_timestamp_event', 'tracking_logs', ['event_timestamp', 'event'])
    op.create_index('ix_tracking_logs_country_event', 'tracking_logs', ['country', 'event'])
    op.create_index('ix_tracking_logs_user_event', 'tracking_logs', ['user_id', 'event'])


def downgrade():
    op.drop_table('tracking_logs')
    op.drop_table('cart_items')
    op.drop_table('carts')
    op.drop_table('ornaments')
    op.drop_table('pricing_config')
    op.drop_table('users')

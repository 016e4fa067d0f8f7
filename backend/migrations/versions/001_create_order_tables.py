"""Create customer, product, customer_order and customer_order_line tables

Revision ID: 001
Revises:
Create Date: 2026-03-02 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'customer',
        sa.Column('id', sa.Text(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'product',
        sa.Column('id', sa.Text(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('category_id', sa.Text(), nullable=True),
        sa.Column('status', sa.Text(), nullable=False, server_default='ACTIVE'),
        sa.Column('product_type', sa.Text(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('stock >= 0', name='ck_product_stock_non_negative'),
        sa.CheckConstraint('price > 0', name='ck_product_price_positive'),
        sa.CheckConstraint(
            "status IN ('ACTIVE', 'INACTIVE', 'OUT_OF_STOCK')",
            name='ck_product_status'
        ),
        sa.CheckConstraint(
            "product_type IS NULL OR product_type IN ('PHYSICAL', 'DIGITAL', 'SERVICE')",
            name='ck_product_type'
        )
    )
    op.create_index('ix_product_category_id', 'product', ['category_id'])

    op.create_table(
        'customer_order',
        sa.Column('id', sa.Text(), nullable=False),
        sa.Column('customer_id', sa.Text(), nullable=False),
        sa.Column('status', sa.Text(), nullable=False),
        sa.Column('payment_method', sa.Text(), nullable=False),
        sa.Column('payment_status', sa.Text(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['customer_id'], ['customer.id'], ondelete='RESTRICT'),
        sa.CheckConstraint(
            "status IN ('PENDING', 'CONFIRMED', 'PROCESSING', 'SHIPPED', 'DELIVERED', 'CANCELLED')",
            name='ck_customer_order_status'
        ),
        sa.CheckConstraint(
            "payment_status IN ('PENDING', 'COMPLETED', 'FAILED', 'CANCELLED')",
            name='ck_customer_order_payment_status'
        ),
        sa.CheckConstraint(
            "payment_method IN ('CREDIT_CARD', 'PIX', 'BOLETO')",
            name='ck_customer_order_payment_method'
        )
    )
    op.create_index('ix_customer_order_customer_created', 'customer_order', ['customer_id', 'created_at'])

    op.create_table(
        'customer_order_line',
        sa.Column('id', sa.Text(), nullable=False),
        sa.Column('order_id', sa.Text(), nullable=False),
        sa.Column('line_no', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Text(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['order_id'], ['customer_order.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['product.id'], ondelete='RESTRICT'),
        sa.CheckConstraint('quantity > 0', name='ck_order_line_quantity_positive')
    )
    op.create_index('ix_customer_order_line_order_id', 'customer_order_line', ['order_id'])


def downgrade():
    op.drop_index('ix_customer_order_line_order_id', table_name='customer_order_line')
    op.drop_table('customer_order_line')
    op.drop_index('ix_customer_order_customer_created', table_name='customer_order')
    op.drop_table('customer_order')
    op.drop_index('ix_product_category_id', table_name='product')
    op.drop_table('product')
    op.drop_table('customer')

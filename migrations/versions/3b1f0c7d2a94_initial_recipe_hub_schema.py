"""Initial recipe hub schema

Revision ID: 3b1f0c7d2a94
Revises:
Create Date: 2026-10-18 09:12:41.118204

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3b1f0c7d2a94'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'family_group',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'family_group_member',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('family_group_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=True),
        sa.Column('joined_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['family_group_id'], ['family_group.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('family_group_id', 'user_id', name='uq_family_group_member'),
    )
    with op.batch_alter_table('family_group_member', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_family_group_member_family_group_id'), ['family_group_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_family_group_member_user_id'), ['user_id'], unique=False)

    op.create_table(
        'recipe',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('summary', sa.String(length=300), nullable=True),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('family_group_id', sa.Integer(), nullable=True),
        sa.Column('source_url', sa.String(length=500), nullable=True),
        sa.Column('prep_minutes', sa.Integer(), nullable=True),
        sa.Column('cook_minutes', sa.Integer(), nullable=True),
        sa.Column('ready_minutes', sa.Integer(), nullable=True),
        sa.Column('servings', sa.Integer(), nullable=True),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.Column('health_score', sa.Integer(), nullable=True),
        sa.Column('cuisine', sa.String(length=50), nullable=True),
        sa.Column('is_vegetarian', sa.Boolean(), nullable=True),
        sa.Column('is_vegan', sa.Boolean(), nullable=True),
        sa.Column('is_gluten_free', sa.Boolean(), nullable=True),
        sa.Column('is_dairy_free', sa.Boolean(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('instructions', sa.JSON(), nullable=True),
        sa.Column('visibility', sa.String(length=20), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['family_group_id'], ['family_group.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('recipe', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_recipe_title'), ['title'], unique=False)
        batch_op.create_index(batch_op.f('ix_recipe_user_id'), ['user_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_recipe_family_group_id'), ['family_group_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_recipe_cuisine'), ['cuisine'], unique=False)
        batch_op.create_index(batch_op.f('ix_recipe_visibility'), ['visibility'], unique=False)
        batch_op.create_index(batch_op.f('ix_recipe_status'), ['status'], unique=False)

    op.create_table(
        'recipe_ingredient',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('recipe_id', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('amount', sa.String(length=50), nullable=True),
        sa.Column('unit', sa.String(length=30), nullable=True),
        sa.Column('notes', sa.String(length=500), nullable=True),
        sa.Column('category', sa.String(length=50), nullable=True),
        sa.ForeignKeyConstraint(['recipe_id'], ['recipe.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('recipe_ingredient', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_recipe_ingredient_recipe_id'), ['recipe_id'], unique=False)

    op.create_table(
        'favorite',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('recipe_key', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'recipe_key', name='uq_favorite_user_recipe'),
    )
    with op.batch_alter_table('favorite', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_favorite_user_id'), ['user_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_favorite_recipe_key'), ['recipe_key'], unique=False)

    op.create_table(
        'meal_plan',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('family_group_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('created_by', sa.String(length=64), nullable=False),
        sa.Column('week_start_date', sa.Date(), nullable=False),
        sa.Column('week_end_date', sa.Date(), nullable=False),
        sa.Column('notes', sa.String(length=1000), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['family_group_id'], ['family_group.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('meal_plan', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_meal_plan_family_group_id'), ['family_group_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_meal_plan_week_start_date'), ['week_start_date'], unique=False)
        batch_op.create_index(
            'uq_meal_plan_active_week', ['family_group_id', 'week_start_date'], unique=True,
            sqlite_where=sa.text('is_active = 1'),
            postgresql_where=sa.text('is_active'),
        )

    op.create_table(
        'meal_plan_slot',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('meal_plan_id', sa.Integer(), nullable=False),
        sa.Column('day', sa.String(length=10), nullable=False),
        sa.Column('meal_type', sa.String(length=10), nullable=False),
        sa.Column('recipe_key', sa.String(length=64), nullable=True),
        sa.Column('recipe_name', sa.String(length=200), nullable=True),
        sa.Column('servings', sa.Integer(), nullable=True),
        sa.Column('notes', sa.String(length=500), nullable=True),
        sa.ForeignKeyConstraint(['meal_plan_id'], ['meal_plan.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('meal_plan_id', 'day', 'meal_type', name='uq_meal_plan_slot'),
    )
    with op.batch_alter_table('meal_plan_slot', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_meal_plan_slot_meal_plan_id'), ['meal_plan_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_meal_plan_slot_recipe_key'), ['recipe_key'], unique=False)

    op.create_table(
        'grocery_list',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('family_group_id', sa.Integer(), nullable=False),
        sa.Column('meal_plan_id', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('created_by', sa.String(length=64), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['family_group_id'], ['family_group.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['meal_plan_id'], ['meal_plan.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('grocery_list', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_grocery_list_family_group_id'), ['family_group_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_grocery_list_meal_plan_id'), ['meal_plan_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_grocery_list_created_by'), ['created_by'], unique=False)
        batch_op.create_index(batch_op.f('ix_grocery_list_status'), ['status'], unique=False)

    op.create_table(
        'grocery_item',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('grocery_list_id', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('amount', sa.String(length=50), nullable=True),
        sa.Column('unit', sa.String(length=30), nullable=True),
        sa.Column('category', sa.String(length=50), nullable=True),
        sa.Column('checked', sa.Boolean(), nullable=False),
        sa.Column('notes', sa.String(length=500), nullable=True),
        sa.Column('recipe_sources', sa.JSON(), nullable=True),
        sa.Column('source', sa.String(length=20), nullable=True),
        sa.ForeignKeyConstraint(['grocery_list_id'], ['grocery_list.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('grocery_item', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_grocery_item_grocery_list_id'), ['grocery_list_id'], unique=False)

    op.create_table(
        'api_budget_window',
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('window_start', sa.DateTime(), nullable=False),
        sa.Column('call_count', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('name'),
    )


def downgrade():
    op.drop_table('api_budget_window')
    op.drop_table('grocery_item')
    op.drop_table('grocery_list')
    op.drop_table('meal_plan_slot')
    op.drop_table('meal_plan')
    op.drop_table('favorite')
    op.drop_table('recipe_ingredient')
    op.drop_table('recipe')
    op.drop_table('family_group_member')
    op.drop_table('family_group')

"""Initial schema: users, recipes, binders and sharing

Revision ID: 3f1c2a9d7b40
Revises:
Create Date: 2026-01-12 10:04:31.527811

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "3f1c2a9d7b40"
down_revision = None
branch_labels = None
depends_on = None

PERMISSION_LEVEL = sa.Enum(
    "view", "edit", "admin", name="permissionlevel", native_enum=False, length=32, create_constraint=True
)
RESOURCE_KIND = sa.Enum("recipe", "binder", name="resourcekind", native_enum=False, length=32, create_constraint=True)


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("first_name", sa.String(), nullable=True),
        sa.Column("last_name", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("date_joined", sa.DateTime(), nullable=True),
        sa.Column("is_first_login", sa.Boolean(), nullable=False),
        sa.Column("last_login", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)

    op.create_table(
        "recipes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("ingredients", sa.Text(), nullable=True),
        sa.Column("instructions", sa.Text(), nullable=True),
        sa.Column("servings", sa.Integer(), nullable=True),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("modified_by_id", sa.Integer(), nullable=True),
        sa.Column("creation_time", sa.DateTime(), nullable=False),
        sa.Column("modification_time", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["modified_by_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_recipes_owner_id"), "recipes", ["owner_id"], unique=False)
    op.create_index(op.f("ix_recipes_modified_by_id"), "recipes", ["modified_by_id"], unique=False)

    op.create_table(
        "binders",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("modified_by_id", sa.Integer(), nullable=True),
        sa.Column("creation_time", sa.DateTime(), nullable=False),
        sa.Column("modification_time", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["modified_by_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_binders_owner_id"), "binders", ["owner_id"], unique=False)
    op.create_index(op.f("ix_binders_modified_by_id"), "binders", ["modified_by_id"], unique=False)

    op.create_table(
        "binder_recipes",
        sa.Column("binder_id", sa.Integer(), nullable=False),
        sa.Column("recipe_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["binder_id"], ["binders.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["recipe_id"], ["recipes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("binder_id", "recipe_id"),
    )
    op.create_index(op.f("ix_binder_recipes_recipe_id"), "binder_recipes", ["recipe_id"], unique=False)

    op.create_table(
        "share_grants",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("resource_kind", RESOURCE_KIND, nullable=False),
        sa.Column("resource_id", sa.Integer(), nullable=False),
        sa.Column("grantee_id", sa.Integer(), nullable=False),
        sa.Column("level", PERMISSION_LEVEL, nullable=False),
        sa.Column("granted_by_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["grantee_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["granted_by_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("resource_kind", "resource_id", "grantee_id", name="uq_share_grants_resource_grantee"),
    )
    op.create_index("ix_share_grants_resource", "share_grants", ["resource_kind", "resource_id"], unique=False)
    op.create_index(op.f("ix_share_grants_grantee_id"), "share_grants", ["grantee_id"], unique=False)

    op.create_table(
        "share_links",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("token", sa.String(), nullable=False),
        sa.Column("resource_kind", RESOURCE_KIND, nullable=False),
        sa.Column("resource_id", sa.Integer(), nullable=False),
        sa.Column("level", PERMISSION_LEVEL, nullable=False),
        sa.Column("created_by_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_share_links_token"), "share_links", ["token"], unique=True)
    op.create_index("ix_share_links_resource", "share_links", ["resource_kind", "resource_id"], unique=False)


def downgrade():
    op.drop_index("ix_share_links_resource", table_name="share_links")
    op.drop_index(op.f("ix_share_links_token"), table_name="share_links")
    op.drop_table("share_links")
    op.drop_index(op.f("ix_share_grants_grantee_id"), table_name="share_grants")
    op.drop_index("ix_share_grants_resource", table_name="share_grants")
    op.drop_table("share_grants")
    op.drop_index(op.f("ix_binder_recipes_recipe_id"), table_name="binder_recipes")
    op.drop_table("binder_recipes")
    op.drop_index(op.f("ix_binders_modified_by_id"), table_name="binders")
    op.drop_index(op.f("ix_binders_owner_id"), table_name="binders")
    op.drop_table("binders")
    op.drop_index(op.f("ix_recipes_modified_by_id"), table_name="recipes")
    op.drop_index(op.f("ix_recipes_owner_id"), table_name="recipes")
    op.drop_table("recipes")
    op.drop_index(op.f("ix_users_username"), table_name="users")
    op.drop_table("users")

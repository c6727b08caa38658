"""initial schema: users, characters, items, inventory, afk, market, world, chat"""

from alembic import op
import sqlalchemy as sa


revision = "3a9c51e0d7b2"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(length=64), primary_key=True),
        sa.Column("username", sa.String(length=20), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column(
            "membership_type",
            sa.String(length=16),
            nullable=False,
            server_default=sa.text("'free'"),
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("membership_type IN ('free', 'premium')", name="ck_users_membership"),
    )
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "character",
        sa.Column("character_id", sa.String(length=64), primary_key=True),
        sa.Column("user_id", sa.String(length=64), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("name", sa.String(length=20), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("experience", sa.BigInteger(), nullable=False, server_default=sa.text("0")),
        sa.Column("health", sa.Integer(), nullable=False, server_default=sa.text("100")),
        sa.Column("max_health", sa.Integer(), nullable=False, server_default=sa.text("100")),
        sa.Column("attack", sa.Integer(), nullable=False, server_default=sa.text("10")),
        sa.Column("defense", sa.Integer(), nullable=False, server_default=sa.text("5")),
        sa.Column(
            "current_realm", sa.String(length=16), nullable=False, server_default=sa.text("'earth'")
        ),
        sa.Column("afk_start_time", sa.DateTime(), nullable=True),
        sa.Column("afk_end_time", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("experience >= 0", name="ck_character_xp_nonneg"),
        sa.CheckConstraint(
            "(afk_start_time IS NULL AND afk_end_time IS NULL) OR "
            "(afk_start_time IS NOT NULL AND afk_end_time IS NOT NULL "
            "AND afk_end_time > afk_start_time)",
            name="ck_character_afk_window",
        ),
        sa.CheckConstraint("current_realm IN ('earth', 'moon', 'mars')", name="ck_character_realm"),
    )
    op.create_index(op.f("ix_character_user_id"), "character", ["user_id"])
    op.create_index(op.f("ix_character_name"), "character", ["name"])

    op.create_table(
        "items",
        sa.Column("item_id", sa.String(length=64), primary_key=True),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("rarity", sa.String(length=16), nullable=False, server_default=sa.text("'common'")),
        sa.Column("equipment_slot", sa.String(length=16), nullable=True),
        sa.Column("attack_bonus", sa.Integer(), nullable=True),
        sa.Column("defense_bonus", sa.Integer(), nullable=True),
        sa.Column("health_bonus", sa.Integer(), nullable=True),
        sa.Column("required_level", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("market_value", sa.Numeric(10, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "equipment_slot IS NULL OR equipment_slot IN "
            "('weapon', 'helmet', 'chest', 'legs', 'boots', 'gloves')",
            name="ck_items_slot",
        ),
        sa.CheckConstraint(
            "type IN ('weapon', 'armor', 'material', 'potion', 'other')", name="ck_items_type"
        ),
        sa.CheckConstraint(
            "rarity IN ('common', 'uncommon', 'rare', 'epic', 'legendary')",
            name="ck_items_rarity",
        ),
    )

    op.create_table(
        "inventory",
        sa.Column(
            "character_id",
            sa.String(length=64),
            sa.ForeignKey("character.character_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("item_id", sa.String(length=64), sa.ForeignKey("items.item_id"), primary_key=True),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("is_equipped", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("quantity >= 1", name="ck_inventory_qty_pos"),
    )

    op.create_table(
        "afk_sessions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "character_id", sa.String(length=64), sa.ForeignKey("character.character_id"), nullable=False
        ),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("end_time", sa.DateTime(), nullable=False),
        sa.Column("realm", sa.String(length=16), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default=sa.text("'running'")),
        sa.Column("experience_gained", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("items_found", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("end_time > start_time", name="ck_afk_sessions_window"),
        sa.CheckConstraint("status IN ('running', 'completed')", name="ck_afk_sessions_status"),
    )
    op.create_index(op.f("ix_afk_sessions_character_id"), "afk_sessions", ["character_id"])
    op.create_index(op.f("ix_afk_sessions_status"), "afk_sessions", ["status"])

    op.create_table(
        "market_listings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "seller_id", sa.String(length=64), sa.ForeignKey("character.character_id"), nullable=False
        ),
        sa.Column("item_id", sa.String(length=64), sa.ForeignKey("items.item_id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price_per_unit", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "buyer_id", sa.String(length=64), sa.ForeignKey("character.character_id"), nullable=True
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_market_listings_qty_pos"),
        sa.CheckConstraint("price_per_unit > 0", name="ck_market_listings_price_pos"),
    )
    op.create_index(op.f("ix_market_listings_seller_id"), "market_listings", ["seller_id"])
    op.create_index(op.f("ix_market_listings_is_active"), "market_listings", ["is_active"])

    op.create_table(
        "realms",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=16), nullable=False, unique=True),
        sa.Column("display_name", sa.String(length=64), nullable=False),
        sa.Column("required_level", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("required_boss_defeated", sa.String(length=128), nullable=True),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "monsters",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("realm", sa.String(length=16), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False, server_default=sa.text("'normal'")),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("health", sa.Integer(), nullable=False),
        sa.Column("attack", sa.Integer(), nullable=False),
        sa.Column("defense", sa.Integer(), nullable=False),
        sa.Column("experience_reward", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("type IN ('normal', 'elite', 'boss')", name="ck_monsters_type"),
    )
    op.create_index(op.f("ix_monsters_realm"), "monsters", ["realm"])

    op.create_table(
        "professions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "character_id",
            sa.String(length=64),
            sa.ForeignKey("character.character_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("experience", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("character_id", "type", name="uq_professions_character_type"),
        sa.CheckConstraint("type IN ('mining', 'chopping')", name="ck_professions_type"),
    )
    op.create_index(op.f("ix_professions_character_id"), "professions", ["character_id"])

    op.create_table(
        "chat_messages",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(length=64), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("username", sa.String(length=20), nullable=False),
        sa.Column("message", sa.String(length=500), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(op.f("ix_chat_messages_user_id"), "chat_messages", ["user_id"])
    op.create_index(op.f("ix_chat_messages_created_at"), "chat_messages", ["created_at"])


def downgrade() -> None:
    op.drop_index(op.f("ix_chat_messages_created_at"), table_name="chat_messages")
    op.drop_index(op.f("ix_chat_messages_user_id"), table_name="chat_messages")
    op.drop_table("chat_messages")
    op.drop_index(op.f("ix_professions_character_id"), table_name="professions")
    op.drop_table("professions")
    op.drop_index(op.f("ix_monsters_realm"), table_name="monsters")
    op.drop_table("monsters")
    op.drop_table("realms")
    op.drop_index(op.f("ix_market_listings_is_active"), table_name="market_listings")
    op.drop_index(op.f("ix_market_listings_seller_id"), table_name="market_listings")
    op.drop_table("market_listings")
    op.drop_index(op.f("ix_afk_sessions_status"), table_name="afk_sessions")
    op.drop_index(op.f("ix_afk_sessions_character_id"), table_name="afk_sessions")
    op.drop_table("afk_sessions")
    op.drop_table("inventory")
    op.drop_table("items")
    op.drop_index(op.f("ix_character_name"), table_name="character")
    op.drop_index(op.f("ix_character_user_id"), table_name="character")
    op.drop_table("character")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_index(op.f("ix_users_username"), table_name="users")
    op.drop_table("users")

"""Full feed schema: cities, content items, interaction logs, hidden items, reports

Revision ID: 001
Revises:
Create Date: 2026-03-02

Tables created:
  - cities            Tenant catalog (read-only for the feed service)
  - content_items     Reports and positive posts with denormalized counters
  - item_likes        One row per (item, user) while the like is on
  - item_views        One row per (item, user); duration only grows
  - item_shares       One row per (item, user); first share only
  - hidden_items      Per-user hidden set (permanent when reported)
  - content_reports   Moderation reports, one per (item, reporter)

PostgreSQL-native ENUM types created:
  - item_kind               REPORT / POSITIVE_POST
  - content_report_reason   Inappropriate / Offensive image / False info / Adult / Other
  - content_report_status   Pending / Under review / Upheld / Dismissed / Resolved

Downgrade: drops all tables and ENUM types in reverse dependency order.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


item_kind = postgresql.ENUM(
    "REPORT", "POSITIVE_POST", name="item_kind", create_type=False
)
content_report_reason = postgresql.ENUM(
    "INAPPROPRIATE_CONTENT",
    "OFFENSIVE_IMAGE",
    "FALSE_INFORMATION",
    "ADULT_CONTENT",
    "OTHER",
    name="content_report_reason",
    create_type=False,
)
content_report_status = postgresql.ENUM(
    "PENDING",
    "UNDER_REVIEW",
    "UPHELD",
    "DISMISSED",
    "RESOLVED",
    name="content_report_status",
    create_type=False,
)


# ─────────────────────────────────────────────────────────────────────────────
#  UPGRADE
# ─────────────────────────────────────────────────────────────────────────────

def upgrade() -> None:
    # ── 1. PostgreSQL ENUM types ──────────────────────────────────────────────
    # PostgreSQL has no CREATE TYPE IF NOT EXISTS, so we use a DO/EXCEPTION block.
    for type_name, values in (
        ("item_kind", item_kind.enums),
        ("content_report_reason", content_report_reason.enums),
        ("content_report_status", content_report_status.enums),
    ):
        labels = ", ".join(f"'{v}'" for v in values)
        op.execute(
            f"""
            DO $$ BEGIN
                CREATE TYPE {type_name} AS ENUM ({labels});
            EXCEPTION WHEN duplicate_object THEN NULL;
            END $$;
            """
        )

    # ── 2. cities ─────────────────────────────────────────────────────────────
    op.create_table(
        "cities",
        sa.Column("city_id", sa.String(100), primary_key=True),
        sa.Column("label", sa.String(200), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )

    # ── 3. content_items ──────────────────────────────────────────────────────
    op.create_table(
        "content_items",
        sa.Column("item_id", sa.Uuid(), primary_key=True),
        sa.Column("kind", item_kind, nullable=False, server_default="REPORT"),
        sa.Column(
            "city_id",
            sa.String(100),
            sa.ForeignKey("cities.city_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("author_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(300), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(1000), nullable=True),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("status", sa.String(50), nullable=False, server_default="pendente"),
        sa.Column("like_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("share_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("view_duration_total", sa.Float(), nullable=False, server_default="0"),
        sa.Column("engagement_score", sa.Float(), nullable=False, server_default="0"),
        sa.Column("last_score_update", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("ix_content_items_city_created", "content_items", ["city_id", "created_at"])
    op.create_index("ix_content_items_city_kind", "content_items", ["city_id", "kind"])
    op.create_index("ix_content_items_engagement_score", "content_items", ["engagement_score"])

    # ── 4. interaction logs ───────────────────────────────────────────────────
    def _item_fk() -> sa.Column:
        return sa.Column(
            "item_id",
            sa.Uuid(),
            sa.ForeignKey("content_items.item_id", ondelete="CASCADE"),
            nullable=False,
        )

    op.create_table(
        "item_likes",
        sa.Column("like_id", sa.Uuid(), primary_key=True),
        _item_fk(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column(
            "liked_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.UniqueConstraint("item_id", "user_id", name="uq_item_likes_item_user"),
    )
    op.create_index("ix_item_likes_user_id", "item_likes", ["user_id"])

    op.create_table(
        "item_views",
        sa.Column("view_id", sa.Uuid(), primary_key=True),
        _item_fk(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column(
            "viewed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column("duration", sa.Float(), nullable=False, server_default="0"),
        sa.UniqueConstraint("item_id", "user_id", name="uq_item_views_item_user"),
        sa.CheckConstraint("duration >= 0", name="ck_item_views_duration_non_negative"),
    )
    op.create_index("ix_item_views_user_id", "item_views", ["user_id"])

    op.create_table(
        "item_shares",
        sa.Column("share_id", sa.Uuid(), primary_key=True),
        _item_fk(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column(
            "shared_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.UniqueConstraint("item_id", "user_id", name="uq_item_shares_item_user"),
    )
    op.create_index("ix_item_shares_user_id", "item_shares", ["user_id"])

    # ── 5. hidden_items / content_reports ─────────────────────────────────────
    op.create_table(
        "hidden_items",
        sa.Column("hidden_id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        _item_fk(),
        sa.Column("is_permanent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "hidden_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.UniqueConstraint("user_id", "item_id", name="uq_hidden_items_user_item"),
    )
    op.create_index("ix_hidden_items_user_id", "hidden_items", ["user_id"])

    op.create_table(
        "content_reports",
        sa.Column("report_id", sa.Uuid(), primary_key=True),
        _item_fk(),
        sa.Column("reporter_id", sa.Uuid(), nullable=False),
        sa.Column("reason", content_report_reason, nullable=False),
        sa.Column("details", sa.String(500), nullable=True),
        sa.Column("status", content_report_status, nullable=False, server_default="PENDING"),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.UniqueConstraint("item_id", "reporter_id", name="uq_content_reports_item_reporter"),
    )
    op.create_index("ix_content_reports_status", "content_reports", ["status"])


# ─────────────────────────────────────────────────────────────────────────────
#  DOWNGRADE
# ─────────────────────────────────────────────────────────────────────────────

def downgrade() -> None:
    op.drop_index("ix_content_reports_status", table_name="content_reports")
    op.drop_table("content_reports")
    op.drop_index("ix_hidden_items_user_id", table_name="hidden_items")
    op.drop_table("hidden_items")
    op.drop_index("ix_item_shares_user_id", table_name="item_shares")
    op.drop_table("item_shares")
    op.drop_index("ix_item_views_user_id", table_name="item_views")
    op.drop_table("item_views")
    op.drop_index("ix_item_likes_user_id", table_name="item_likes")
    op.drop_table("item_likes")
    op.drop_index("ix_content_items_engagement_score", table_name="content_items")
    op.drop_index("ix_content_items_city_kind", table_name="content_items")
    op.drop_index("ix_content_items_city_created", table_name="content_items")
    op.drop_table("content_items")
    op.drop_table("cities")

    op.execute("DROP TYPE IF EXISTS content_report_status")
    op.execute("DROP TYPE IF EXISTS content_report_reason")
    op.execute("DROP TYPE IF EXISTS item_kind")

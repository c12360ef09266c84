"""draw_engine_core_schema

Revision ID: 3c1e5a7d9b20
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "3c1e5a7d9b20"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("msisdn", sa.String(20), nullable=False),
        sa.Column("opt_in", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("opt_in_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("opt_in_channel", sa.String(32), nullable=True),
        sa.Column("opt_out_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_blacklisted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("points", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("last_activity_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("points >= 0", name="ck_users_points_non_negative"),
        sa.UniqueConstraint("msisdn", name="uq_users_msisdn"),
    )
    op.create_index("idx_users_opt_in", "users", ["opt_in", "opt_in_at"])
    op.create_index("idx_users_last_activity", "users", ["last_activity_at"])

    op.create_table(
        "topups",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("msisdn", sa.String(20), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("topup_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("transaction_ref", sa.String(64), nullable=False),
        sa.Column("channel", sa.String(32), nullable=True),
        sa.Column("points_earned", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("processed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("amount >= 0", name="ck_topups_amount_non_negative"),
        sa.CheckConstraint("points_earned >= 0", name="ck_topups_points_earned_non_negative"),
        sa.UniqueConstraint("msisdn", "transaction_ref", name="uq_topups_msisdn_transaction_ref"),
    )
    op.create_index("idx_topups_topup_at", "topups", ["topup_at"])
    op.create_index("idx_topups_msisdn_topup_at", "topups", ["msisdn", "topup_at"])

    op.create_table(
        "point_transactions",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("msisdn", sa.String(20), nullable=False),
        sa.Column("topup_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("points_awarded", sa.Integer(), nullable=False),
        sa.Column("transaction_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("points_awarded > 0", name="ck_point_transactions_points_positive"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
    )
    op.create_index(
        "idx_point_transactions_user_created",
        "point_transactions",
        ["user_id", "created_at"],
    )
    op.create_index("idx_point_transactions_msisdn", "point_transactions", ["msisdn"])

    op.create_table(
        "blacklist_entries",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("msisdn", sa.String(20), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("msisdn", name="uq_blacklist_entries_msisdn"),
    )

    op.create_table(
        "system_configs",
        sa.Column("key", sa.String(64), primary_key=True),
        sa.Column("value", sa.JSON(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "draws",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("draw_date", sa.Date(), nullable=False),
        sa.Column("draw_type", sa.String(16), nullable=False),
        sa.Column("eligible_digits", sa.JSON(), nullable=False),
        sa.Column("use_default_digits", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("prize_tiers", sa.JSON(), nullable=False),
        sa.Column("base_jackpot", sa.Numeric(16, 2), nullable=False),
        sa.Column("incoming_rollover", sa.Numeric(16, 2), nullable=False),
        sa.Column("calculated_jackpot", sa.Numeric(16, 2), nullable=False),
        sa.Column("jackpot_winner_msisdn", sa.String(20), nullable=True),
        sa.Column("jackpot_validation_status", sa.String(32), nullable=False),
        sa.Column("rollover_executed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("rng_seed", sa.String(32), nullable=True),
        sa.Column("execution_started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("execution_ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("execution_log", sa.JSON(), nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("pool_a_size", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("pool_b_size", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("total_winners", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("draw_type IN ('DAILY','WEEKLY')", name="ck_draws_draw_type"),
        sa.CheckConstraint(
            "status IN ('SCHEDULED','EXECUTING','COMPLETED','FAILED')",
            name="ck_draws_status",
        ),
        sa.CheckConstraint(
            "jackpot_validation_status IN "
            "('PENDING','VALID','INVALID_NOT_OPTED_IN','NO_PARTICIPANTS')",
            name="ck_draws_jackpot_validation_status",
        ),
        sa.UniqueConstraint("draw_date", name="uq_draws_draw_date"),
    )
    op.create_index("idx_draws_status_date", "draws", ["status", "draw_date"])
    op.create_index(
        "idx_draws_type_status_date",
        "draws",
        ["draw_type", "status", sa.text("draw_date DESC")],
    )

    op.create_table(
        "winners",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("draw_id", sa.BigInteger(), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("msisdn", sa.String(20), nullable=False),
        sa.Column("prize_category", sa.String(32), nullable=False),
        sa.Column("prize_amount", sa.Numeric(16, 2), nullable=False),
        sa.Column("win_date", sa.Date(), nullable=False),
        sa.Column("claim_status", sa.String(16), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "claim_status IN ('PENDING','PROCESSING','PAID','FAILED','INELIGIBLE')",
            name="ck_winners_claim_status",
        ),
        sa.CheckConstraint("prize_amount >= 0", name="ck_winners_prize_amount_non_negative"),
        sa.ForeignKeyConstraint(["draw_id"], ["draws.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
    )
    op.create_index("idx_winners_draw_id", "winners", ["draw_id"])
    op.create_index("idx_winners_msisdn", "winners", ["msisdn"])
    op.create_index("idx_winners_claim_status", "winners", ["claim_status"])

    op.create_table(
        "jackpot_rollovers",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("source_draw_id", sa.BigInteger(), nullable=False),
        sa.Column("source_draw_date", sa.Date(), nullable=False),
        sa.Column("amount", sa.Numeric(16, 2), nullable=False),
        sa.Column("destination_draw_date", sa.Date(), nullable=False),
        sa.Column("destination_draw_id", sa.BigInteger(), nullable=True),
        sa.Column("reason", sa.String(32), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("amount >= 0", name="ck_jackpot_rollovers_amount_non_negative"),
        sa.CheckConstraint(
            "destination_draw_date > source_draw_date",
            name="ck_jackpot_rollovers_destination_after_source",
        ),
        sa.ForeignKeyConstraint(["source_draw_id"], ["draws.id"]),
        sa.ForeignKeyConstraint(["destination_draw_id"], ["draws.id"]),
        sa.UniqueConstraint("source_draw_id", name="uq_jackpot_rollovers_source_draw_id"),
    )
    op.create_index(
        "idx_jackpot_rollovers_destination_date",
        "jackpot_rollovers",
        ["destination_draw_date"],
    )


def downgrade() -> None:
    op.drop_index("idx_jackpot_rollovers_destination_date", table_name="jackpot_rollovers")
    op.drop_table("jackpot_rollovers")

    op.drop_index("idx_winners_claim_status", table_name="winners")
    op.drop_index("idx_winners_msisdn", table_name="winners")
    op.drop_index("idx_winners_draw_id", table_name="winners")
    op.drop_table("winners")

    op.drop_index("idx_draws_type_status_date", table_name="draws")
    op.drop_index("idx_draws_status_date", table_name="draws")
    op.drop_table("draws")

    op.drop_table("system_configs")
    op.drop_table("blacklist_entries")

    op.drop_index("idx_point_transactions_msisdn", table_name="point_transactions")
    op.drop_index("idx_point_transactions_user_created", table_name="point_transactions")
    op.drop_table("point_transactions")

    op.drop_index("idx_topups_msisdn_topup_at", table_name="topups")
    op.drop_index("idx_topups_topup_at", table_name="topups")
    op.drop_table("topups")

    op.drop_index("idx_users_last_activity", table_name="users")
    op.drop_index("idx_users_opt_in", table_name="users")
    op.drop_table("users")

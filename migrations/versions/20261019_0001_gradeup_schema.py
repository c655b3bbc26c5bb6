"""gradeup marketplace schema: athletes, deals, contracts, scores, payments

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:01
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "sports",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("tier", sa.Integer(), nullable=False, server_default="3"),
        sa.CheckConstraint("tier >= 1 AND tier <= 5", name="ck_sports_tier"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "major_categories",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("multiplier", sa.Numeric(3, 2), nullable=False, server_default="1.00"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.CheckConstraint("multiplier >= 0.50 AND multiplier <= 2.00", name="ck_major_categories_multiplier"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "athletes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("profile_id", sa.Uuid(), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("sport_id", sa.Uuid(), nullable=True),
        sa.Column("major_category_id", sa.Uuid(), nullable=True),
        sa.Column("gpa", sa.Numeric(3, 2), nullable=True),
        sa.Column("cumulative_gpa", sa.Numeric(3, 2), nullable=True),
        sa.Column("athletic_rating", sa.Integer(), nullable=False, server_default="50"),
        sa.Column("instagram_followers", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("twitter_followers", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("tiktok_followers", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_followers", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("deals_completed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("avg_deal_rating", sa.Numeric(3, 2), nullable=True),
        sa.Column("grades_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("enrollment_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("sport_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("gradeup_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_searchable", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("accepting_deals", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_audit_columns(),
        sa.CheckConstraint("athletic_rating >= 0 AND athletic_rating <= 100", name="ck_athletes_rating"),
        sa.CheckConstraint("gradeup_score >= 0 AND gradeup_score <= 1000", name="ck_athletes_gradeup_score"),
        sa.ForeignKeyConstraint(["sport_id"], ["sports.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["major_category_id"], ["major_categories.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("profile_id"),
    )
    op.create_index("idx_athletes_gradeup_score", "athletes", ["gradeup_score"])
    op.create_index("ix_athletes_major_category_id", "athletes", ["major_category_id"])

    op.create_table(
        "academic_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("athlete_id", sa.Uuid(), nullable=False),
        sa.Column("semester", sa.String(length=16), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("gpa", sa.Numeric(3, 2), nullable=False),
        sa.Column("credits", sa.Integer(), nullable=True),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        *_audit_columns(),
        sa.CheckConstraint("gpa >= 0 AND gpa <= 4.0", name="ck_academic_records_gpa"),
        sa.ForeignKeyConstraint(["athlete_id"], ["athletes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("athlete_id", "semester", "year", name="uq_academic_records_term"),
    )
    op.create_index("ix_academic_records_athlete_id", "academic_records", ["athlete_id"])

    op.create_table(
        "brands",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("profile_id", sa.Uuid(), nullable=False),
        sa.Column("company_name", sa.String(length=255), nullable=False),
        sa.Column("contact_name", sa.String(length=200), nullable=True),
        sa.Column("contact_email", sa.String(length=255), nullable=True),
        sa.Column("stripe_customer_id", sa.String(length=255), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("profile_id"),
        sa.UniqueConstraint("stripe_customer_id"),
    )

    op.create_table(
        "deals",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("athlete_id", sa.Uuid(), nullable=False),
        sa.Column("brand_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=300), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="pending"),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["athlete_id"], ["athletes.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["brand_id"], ["brands.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_deals_athlete_status", "deals", ["athlete_id", "status"])
    op.create_index("idx_deals_brand_status", "deals", ["brand_id", "status"])

    op.create_table(
        "contracts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("deal_id", sa.Uuid(), nullable=False),
        sa.Column("template_type", sa.String(length=32), nullable=False, server_default="custom"),
        sa.Column("title", sa.String(length=300), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("effective_date", sa.Date(), nullable=True),
        sa.Column("expiration_date", sa.Date(), nullable=True),
        sa.Column("compensation_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("compensation_terms", sa.Text(), nullable=True),
        sa.Column("deliverables_summary", sa.Text(), nullable=True),
        sa.Column("clauses", sa.JSON(), nullable=False),
        sa.Column("custom_terms", sa.Text(), nullable=True),
        sa.Column("requires_guardian_signature", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("requires_witness", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="draft"),
        sa.Column("signed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("voided_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("void_reason", sa.Text(), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["deal_id"], ["deals.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_contracts_deal_status", "contracts", ["deal_id", "status"])
    op.create_index("idx_contracts_status_expiration", "contracts", ["status", "expiration_date"])

    op.create_table(
        "contract_signatures",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("contract_id", sa.Uuid(), nullable=False),
        sa.Column("party_type", sa.String(length=32), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("title", sa.String(length=100), nullable=True),
        sa.Column("signature_status", sa.String(length=32), nullable=False, server_default="pending"),
        sa.Column("signature_data", sa.Text(), nullable=True),
        sa.Column("signature_type", sa.String(length=32), nullable=True),
        sa.Column("signed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("signature_ip", sa.String(length=45), nullable=True),
        sa.Column("declined_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("decline_reason", sa.Text(), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["contract_id"], ["contracts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("contract_id", "party_type", name="uq_contract_signatures_party"),
    )
    op.create_index("ix_contract_signatures_contract_id", "contract_signatures", ["contract_id"])

    op.create_table(
        "gradeup_scores",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("athlete_id", sa.Uuid(), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("athletic_score", sa.Integer(), nullable=False),
        sa.Column("social_score", sa.Integer(), nullable=False),
        sa.Column("academic_score", sa.Integer(), nullable=False),
        sa.Column("gpa_multiplier", sa.Numeric(3, 2), nullable=False),
        sa.Column("major_multiplier", sa.Numeric(3, 2), nullable=False),
        sa.Column("consistency_bonus", sa.Numeric(3, 2), nullable=False),
        sa.Column("input_data", sa.JSON(), nullable=False),
        sa.Column("calculation_version", sa.String(length=20), nullable=False, server_default="2.0"),
        sa.Column("calculated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("score >= 0 AND score <= 1000", name="ck_gradeup_scores_score"),
        sa.CheckConstraint("athletic_score >= 0 AND athletic_score <= 400", name="ck_gradeup_scores_athletic"),
        sa.CheckConstraint("social_score >= 0 AND social_score <= 300", name="ck_gradeup_scores_social"),
        sa.CheckConstraint("academic_score >= 0 AND academic_score <= 300", name="ck_gradeup_scores_academic"),
        sa.ForeignKeyConstraint(["athlete_id"], ["athletes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_gradeup_scores_athlete_time", "gradeup_scores", ["athlete_id", "calculated_at"])

    op.create_table(
        "campaigns",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("brand_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=300), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("budget", sa.Numeric(12, 2), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="draft"),
        sa.Column("target_sports", sa.JSON(), nullable=False),
        sa.Column("target_divisions", sa.JSON(), nullable=False),
        sa.Column("target_min_gpa", sa.Numeric(3, 2), nullable=True),
        sa.Column("target_min_followers", sa.Integer(), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["brand_id"], ["brands.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_campaigns_brand_status", "campaigns", ["brand_id", "status"])

    op.create_table(
        "stripe_connected_accounts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("athlete_id", sa.Uuid(), nullable=False),
        sa.Column("stripe_account_id", sa.String(length=255), nullable=False),
        sa.Column("details_submitted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("charges_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("payouts_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["athlete_id"], ["athletes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("athlete_id"),
        sa.UniqueConstraint("stripe_account_id"),
    )

    op.create_table(
        "payments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("deal_id", sa.Uuid(), nullable=False),
        sa.Column("brand_id", sa.Uuid(), nullable=False),
        sa.Column("athlete_id", sa.Uuid(), nullable=False),
        sa.Column("stripe_payment_intent_id", sa.String(length=255), nullable=True),
        sa.Column("stripe_charge_id", sa.String(length=255), nullable=True),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("platform_fee_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("athlete_amount_cents", sa.Integer(), nullable=False),
        sa.Column("platform_fee_percent", sa.Numeric(5, 2), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="usd"),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="pending"),
        sa.Column("payment_method_type", sa.String(length=50), nullable=True),
        sa.Column("failure_code", sa.String(length=100), nullable=True),
        sa.Column("failure_message", sa.Text(), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("refunded_at", sa.DateTime(timezone=True), nullable=True),
        *_audit_columns(),
        sa.CheckConstraint("amount_cents > 0", name="ck_payments_amount"),
        sa.ForeignKeyConstraint(["deal_id"], ["deals.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["brand_id"], ["brands.id"]),
        sa.ForeignKeyConstraint(["athlete_id"], ["athletes.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("stripe_payment_intent_id"),
    )
    op.create_index("ix_payments_deal_id", "payments", ["deal_id"])
    op.create_index("ix_payments_stripe_charge_id", "payments", ["stripe_charge_id"])

    op.create_table(
        "refunds",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("payment_id", sa.Uuid(), nullable=False),
        sa.Column("stripe_refund_id", sa.String(length=255), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("reason", sa.String(length=100), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["payment_id"], ["payments.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("stripe_refund_id"),
    )

    op.create_table(
        "payouts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("athlete_id", sa.Uuid(), nullable=True),
        sa.Column("stripe_payout_id", sa.String(length=255), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="pending"),
        sa.Column("failure_code", sa.String(length=100), nullable=True),
        sa.Column("failure_message", sa.Text(), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["athlete_id"], ["athletes.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("stripe_payout_id"),
    )

    op.create_table(
        "subscriptions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("brand_id", sa.Uuid(), nullable=True),
        sa.Column("stripe_subscription_id", sa.String(length=255), nullable=False),
        sa.Column("price_id", sa.String(length=255), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="incomplete"),
        sa.Column("billing_cycle", sa.String(length=16), nullable=False, server_default="monthly"),
        sa.Column("current_period_start", sa.DateTime(timezone=True), nullable=True),
        sa.Column("current_period_end", sa.DateTime(timezone=True), nullable=True),
        sa.Column("trial_end", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancel_at_period_end", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("canceled_at", sa.DateTime(timezone=True), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["brand_id"], ["brands.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("stripe_subscription_id"),
    )


def downgrade() -> None:
    op.drop_table("subscriptions")
    op.drop_table("payouts")
    op.drop_table("refunds")
    op.drop_index("ix_payments_stripe_charge_id", table_name="payments")
    op.drop_index("ix_payments_deal_id", table_name="payments")
    op.drop_table("payments")
    op.drop_table("stripe_connected_accounts")
    op.drop_index("idx_campaigns_brand_status", table_name="campaigns")
    op.drop_table("campaigns")
    op.drop_index("idx_gradeup_scores_athlete_time", table_name="gradeup_scores")
    op.drop_table("gradeup_scores")
    op.drop_index("ix_contract_signatures_contract_id", table_name="contract_signatures")
    op.drop_table("contract_signatures")
    op.drop_index("idx_contracts_status_expiration", table_name="contracts")
    op.drop_index("idx_contracts_deal_status", table_name="contracts")
    op.drop_table("contracts")
    op.drop_index("idx_deals_brand_status", table_name="deals")
    op.drop_index("idx_deals_athlete_status", table_name="deals")
    op.drop_table("deals")
    op.drop_table("brands")
    op.drop_index("ix_academic_records_athlete_id", table_name="academic_records")
    op.drop_table("academic_records")
    op.drop_index("ix_athletes_major_category_id", table_name="athletes")
    op.drop_index("idx_athletes_gradeup_score", table_name="athletes")
    op.drop_table("athletes")
    op.drop_table("major_categories")
    op.drop_table("sports")

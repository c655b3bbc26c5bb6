from __future__ import annotations

from gradeup.models import Base
import gradeup.models  # noqa: F401


def test_model_metadata_contains_marketplace_tables():
    expected = {
        "athletes",
        "academic_records",
        "major_categories",
        "sports",
        "brands",
        "deals",
        "contracts",
        "contract_signatures",
        "gradeup_scores",
        "campaigns",
        "payments",
        "refunds",
        "payouts",
        "subscriptions",
        "stripe_connected_accounts",
    }
    assert expected == set(Base.metadata.tables.keys())


def test_signature_party_is_unique_per_contract():
    table = Base.metadata.tables["contract_signatures"]
    unique_sets = {
        tuple(column.name for column in constraint.columns)
        for constraint in table.constraints
        if constraint.__class__.__name__ == "UniqueConstraint"
    }
    assert ("contract_id", "party_type") in unique_sets

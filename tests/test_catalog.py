"""Tests for catalog parsing and providers."""

import json

import pytest

from child_subsidy.catalog import (
    DirectoryCatalog,
    InMemoryCatalog,
    PackagedCatalog,
    parse_catalog,
    parse_income_limit,
    parse_policy,
    resolve_jurisdiction,
)
from child_subsidy.errors import CatalogError, UnknownJurisdictionError
from child_subsidy.models import (
    BirthOrder,
    FixedPolicy,
    Frequency,
    IncomeLimitKind,
    Jurisdiction,
    PolicyType,
    VariableAmountPolicy,
)

from factories import make_fixed


def policy_record(**overrides):
    record = {
        "id": "tokyo_support",
        "name": "018サポート",
        "type": "018_support",
        "category": "cash_benefit",
        "amount": 5000,
        "frequency": "monthly",
        "conditions": {
            "incomeLimit": {"type": "none"},
            "childCondition": {"minAge": 0, "maxAge": 18, "birthOrder": "any"},
        },
        "description": "",
    }
    record.update(overrides)
    return record


class TestResolveJurisdiction:
    def test_by_key(self):
        assert resolve_jurisdiction("tokyo") is Jurisdiction.TOKYO

    def test_by_display_name(self):
        assert resolve_jurisdiction("神奈川県") is Jurisdiction.KANAGAWA

    def test_passthrough(self):
        assert resolve_jurisdiction(Jurisdiction.CHIBA) is Jurisdiction.CHIBA

    def test_unknown(self):
        with pytest.raises(UnknownJurisdictionError) as excinfo:
            resolve_jurisdiction("osaka")
        assert "osaka" in str(excinfo.value)
        assert excinfo.value.jurisdiction == "osaka"

    def test_unknown_is_a_key_error(self):
        with pytest.raises(KeyError):
            resolve_jurisdiction("osaka")


class TestParsePolicy:
    """Tests for turning catalog records into policies."""

    def test_fixed(self):
        policy = parse_policy(policy_record(), Jurisdiction.TOKYO)
        assert isinstance(policy, FixedPolicy)
        assert policy.type == PolicyType.SUPPORT_018
        assert policy.amount == 5000
        assert policy.frequency == Frequency.MONTHLY
        assert policy.jurisdiction == Jurisdiction.TOKYO
        assert policy.child_condition.birth_order == "any"

    def test_banded(self):
        record = policy_record(
            type="childcare_allowance",
            amount="variable",
            ageBasedAmounts=[
                {"minAge": 0, "maxAge": 2, "amount": 15000, "frequency": "monthly"},
                {"minAge": 3, "maxAge": 18, "amount": 10000, "frequency": "monthly"},
            ],
        )
        policy = parse_policy(record, Jurisdiction.TOKYO)
        assert isinstance(policy, VariableAmountPolicy)
        assert policy.amount == "variable"
        assert [band.amount for band in policy.age_bands] == [15000, 10000]

    def test_variable_without_bands_stays_fixed(self):
        policy = parse_policy(policy_record(amount="variable"), Jurisdiction.TOKYO)
        assert isinstance(policy, FixedPolicy)
        assert policy.amount == "variable"

    def test_birth_order(self):
        record = policy_record(
            conditions={"childCondition": {"birthOrder": "third_or_more"}}
        )
        policy = parse_policy(record, Jurisdiction.CHIBA)
        assert policy.child_condition.birth_order == BirthOrder.THIRD_OR_MORE
        assert policy.child_condition.age_bounds() == (0, 18)

    def test_record_jurisdiction_wins(self):
        policy = parse_policy(policy_record(jurisdiction="chiba"), Jurisdiction.TOKYO)
        assert policy.jurisdiction == Jurisdiction.CHIBA

    @pytest.mark.parametrize(
        "overrides",
        [
            {"type": "pension"},
            {"frequency": "weekly"},
            {"amount": 12.5},
            {"amount": True},
            {"amount": None},
            {"conditions": {"childCondition": {"birthOrder": "fourth"}}},
        ],
    )
    def test_malformed(self, overrides):
        with pytest.raises(CatalogError):
            parse_policy(policy_record(**overrides), Jurisdiction.TOKYO)

    def test_missing_name(self):
        record = policy_record()
        del record["name"]
        with pytest.raises(CatalogError):
            parse_policy(record, Jurisdiction.TOKYO)

    def test_missing_jurisdiction(self):
        with pytest.raises(CatalogError):
            parse_policy(policy_record())


class TestParseIncomeLimit:
    def test_defaults_to_none(self):
        assert parse_income_limit(None).kind == IncomeLimitKind.NONE

    def test_tiered(self):
        limit = parse_income_limit(
            {
                "type": "tiered",
                "tiers": [{"threshold": 7000000, "amount": 456000, "description": "low"}],
            }
        )
        assert limit.kind == IncomeLimitKind.TIERED
        assert limit.tiers[0].threshold == 7000000
        assert limit.tiers[0].description == "low"

    def test_single(self):
        limit = parse_income_limit({"type": "single", "threshold": 9100000})
        assert limit.threshold == 9100000


class TestPackagedCatalog:
    """Tests for the datasets shipped with the package."""

    def test_all_jurisdictions(self):
        assert set(PackagedCatalog().jurisdictions()) == set(Jurisdiction)

    def test_policies_carry_jurisdiction(self):
        catalog = PackagedCatalog()
        for jurisdiction in Jurisdiction:
            loaded = catalog.load_catalog(jurisdiction)
            assert loaded.jurisdiction == jurisdiction
            assert loaded.policies
            assert all(p.jurisdiction == jurisdiction for p in loaded.policies)

    def test_tokyo(self):
        loaded = PackagedCatalog().load_catalog("tokyo")
        ids = [p.id for p in loaded.policies]
        assert len(ids) == 7
        assert len(set(ids)) == 7
        assert loaded.last_updated

    def test_every_jurisdiction_has_allowance_and_medical(self):
        catalog = PackagedCatalog()
        for jurisdiction in Jurisdiction:
            types = {p.type for p in catalog.load_catalog(jurisdiction).policies}
            assert PolicyType.CHILDCARE_ALLOWANCE in types
            assert PolicyType.MEDICAL_EXPENSE in types

    def test_cached(self):
        catalog = PackagedCatalog()
        assert catalog.load_catalog("chiba") is catalog.load_catalog(Jurisdiction.CHIBA)


class TestDirectoryCatalog:
    """Tests for catalogs read from a directory."""

    def write(self, path, data):
        path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")

    def test_reads_available_files(self, tmp_path):
        self.write(
            tmp_path / "chiba.json",
            {"jurisdiction": "chiba", "policies": [policy_record(id="chiba_support")]},
        )
        catalog = DirectoryCatalog(tmp_path)
        assert catalog.jurisdictions() == [Jurisdiction.CHIBA]
        loaded = catalog.load_catalog("chiba")
        assert [p.id for p in loaded.policies] == ["chiba_support"]

    def test_listing_does_not_read_files(self, tmp_path, monkeypatch):
        self.write(tmp_path / "chiba.json", {"jurisdiction": "chiba", "policies": []})
        catalog = DirectoryCatalog(tmp_path)

        def fail(jurisdiction):
            raise AssertionError(f"read {jurisdiction}")

        monkeypatch.setattr(catalog, "_read_text", fail)
        assert catalog.jurisdictions() == [Jurisdiction.CHIBA]

    def test_missing_file(self, tmp_path):
        with pytest.raises(UnknownJurisdictionError):
            DirectoryCatalog(tmp_path).load_catalog("tokyo")

    def test_invalid_json(self, tmp_path):
        (tmp_path / "tokyo.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogError):
            DirectoryCatalog(tmp_path).load_catalog("tokyo")

    def test_mismatched_jurisdiction(self, tmp_path):
        self.write(tmp_path / "tokyo.json", {"jurisdiction": "chiba", "policies": []})
        with pytest.raises(CatalogError):
            DirectoryCatalog(tmp_path).load_catalog("tokyo")

    def test_catalog_without_jurisdiction(self):
        with pytest.raises(CatalogError):
            parse_catalog({"policies": []})


class TestInMemoryCatalog:
    def test_lookup(self):
        policy = make_fixed()
        catalog = InMemoryCatalog.from_policies({Jurisdiction.TOKYO: [policy]})
        assert catalog.jurisdictions() == [Jurisdiction.TOKYO]
        assert catalog.load_catalog("東京都").policies == (policy,)

    def test_unknown(self):
        catalog = InMemoryCatalog.from_policies({Jurisdiction.TOKYO: []})
        with pytest.raises(UnknownJurisdictionError):
            catalog.load_catalog(Jurisdiction.SAITAMA)

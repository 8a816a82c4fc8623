"""Tests for the pediatric medical subsidy estimate."""

import json

import pytest

from child_subsidy.errors import CatalogError
from child_subsidy.medical import (
    AgeMedicalCost,
    MedicalCostTable,
    assistance_rate,
    describe_medical_subsidy,
    load_medical_costs,
    medical_subsidy,
    round_half_up,
    self_pay_rate,
)
from child_subsidy.models import Jurisdiction


class TestRates:
    def test_self_pay_rate(self):
        assert self_pay_rate(0) == 0.2
        assert self_pay_rate(5) == 0.2
        assert self_pay_rate(6) == 0.3
        assert self_pay_rate(18) == 0.3

    def test_assistance_rate(self):
        assert assistance_rate(Jurisdiction.TOKYO) == 1.0
        assert assistance_rate(Jurisdiction.SAITAMA) == 1.0
        assert assistance_rate(Jurisdiction.CHIBA) == 1.0
        assert assistance_rate(Jurisdiction.KANAGAWA) == 0.0


class TestCostTable:
    """Tests for the packaged medical cost statistics."""

    def test_packaged_table_covers_childhood(self):
        table = load_medical_costs()
        assert sorted(table.costs) == list(range(0, 19))
        assert table.annual_cost_at(0) == 290000
        assert table.annual_cost_at(18) == 65000
        assert table.annual_cost_at(19) is None

    def test_malformed_table(self):
        with pytest.raises(CatalogError):
            MedicalCostTable.from_dict({"ageMedicalCosts": [{"age": 0}]})
        with pytest.raises(CatalogError):
            MedicalCostTable.from_dict({})

    def test_from_dict(self):
        data = json.loads(
            '{"ageMedicalCosts": [{"age": 3, "annualCost": 160000}],'
            ' "disclaimer": ["estimate"]}'
        )
        table = MedicalCostTable.from_dict(data)
        assert table.annual_cost_at(3) == 160000
        assert table.disclaimer == ["estimate"]


class TestMedicalSubsidy:
    """Tests for the subsidy sum over remaining ages."""

    def test_full_childhood(self):
        assert medical_subsidy(0, Jurisdiction.TOKYO) == 521500

    @pytest.mark.parametrize(
        "age,expected",
        [(5, 319500), (6, 295500), (18, 19500), (19, 0), (-1, 0)],
    )
    def test_by_age(self, age, expected):
        assert medical_subsidy(age, Jurisdiction.TOKYO) == expected

    def test_same_rate_same_result(self):
        assert medical_subsidy(3, Jurisdiction.SAITAMA) == medical_subsidy(3, Jurisdiction.TOKYO)

    def test_zero_assistance(self):
        for age in range(0, 19):
            assert medical_subsidy(age, Jurisdiction.KANAGAWA) == 0

    def test_non_increasing_with_age(self):
        values = [medical_subsidy(age, Jurisdiction.CHIBA) for age in range(0, 20)]
        assert values == sorted(values, reverse=True)

    def test_missing_ages_contribute_nothing(self):
        table = MedicalCostTable.from_dict(
            {"ageMedicalCosts": [{"age": 10, "annualCost": 100000}]}
        )
        assert medical_subsidy(0, Jurisdiction.TOKYO, table) == 30000
        assert medical_subsidy(11, Jurisdiction.TOKYO, table) == 0

    def test_half_yen_rounds_up(self):
        """15 yen at a 30% self-pay share is 4.5 yen, paid as 5."""
        table = MedicalCostTable(costs={18: AgeMedicalCost(age=18, annual_cost=15)})
        assert medical_subsidy(18, Jurisdiction.TOKYO, table) == 5

    def test_round_half_up(self):
        assert round_half_up(4.5) == 5
        assert round_half_up(2.5) == 3
        assert round_half_up(2.4999) == 2


class TestDescribe:
    """Tests for the explanation sentence."""

    def test_newborn(self):
        text = describe_medical_subsidy(0, 2280000, Jurisdiction.TOKYO)
        assert "0歳から18歳までの19年間" in text
        assert "約228万円" in text
        assert "年平均約12.0万円" in text

    def test_mid_childhood(self):
        text = describe_medical_subsidy(5, 1500000, Jurisdiction.SAITAMA)
        assert "5歳から18歳までの14年間" in text
        assert "約150万円" in text

    def test_kanagawa_caveat(self):
        text = describe_medical_subsidy(0, 0, Jurisdiction.KANAGAWA)
        assert "神奈川県は市町村により制度が異なります" in text
        assert "神奈川県" not in describe_medical_subsidy(0, 0, Jurisdiction.TOKYO)

    def test_aged_out(self):
        text = describe_medical_subsidy(19, 0, Jurisdiction.TOKYO)
        assert text == "お子様は既に医療費助成の対象年齢を超えています"

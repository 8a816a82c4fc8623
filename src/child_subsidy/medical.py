"""
Medical-cost lookup and pediatric medical subsidy estimate.

Every jurisdiction reimburses part of the self-pay share of a child's medical
costs. The estimate is the sum, over each age from the current age to the
assistance ceiling, of:

    annual medical cost(age) x self-pay rate(age) x assistance rate(jurisdiction)
"""

import json
import math
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources
from typing import Dict, List, Optional

from .errors import CatalogError
from .models import Jurisdiction

logger = logging.getLogger(__name__)

MEDICAL_PARAMS = {
    # Health insurance self-pay share: 20% before school entry, 30% after
    "self_pay_rate_preschool": 0.2,
    "self_pay_rate_school": 0.3,
    "preschool_max_age": 5,
    # Share of the self-pay amount each jurisdiction reimburses.
    # Kanagawa varies by municipality and is counted as 0.
    "assistance_rate": {
        Jurisdiction.TOKYO: 1.0,
        Jurisdiction.SAITAMA: 1.0,
        Jurisdiction.CHIBA: 1.0,
        Jurisdiction.KANAGAWA: 0.0,
    },
    # Last age covered (through the fiscal year the child turns 18)
    "assistance_max_age": {
        Jurisdiction.TOKYO: 18,
        Jurisdiction.SAITAMA: 18,
        Jurisdiction.CHIBA: 18,
        Jurisdiction.KANAGAWA: 18,
    },
    "max_child_age": 18,
}


@dataclass(frozen=True)
class AgeMedicalCost:
    age: int
    annual_cost: int
    description: str = ""


@dataclass
class MedicalCostTable:
    """Annual medical cost per age, with the statistics' provenance."""

    costs: Dict[int, AgeMedicalCost]
    data_source: Dict[str, object] = field(default_factory=dict)
    disclaimer: List[str] = field(default_factory=list)

    def annual_cost_at(self, age: int) -> Optional[int]:
        entry = self.costs.get(age)
        return entry.annual_cost if entry else None

    @classmethod
    def from_dict(cls, data: dict) -> "MedicalCostTable":
        try:
            costs = {
                int(item["age"]): AgeMedicalCost(
                    age=int(item["age"]),
                    annual_cost=int(item["annualCost"]),
                    description=item.get("description", ""),
                )
                for item in data["ageMedicalCosts"]
            }
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogError(f"Malformed medical cost data: {e}") from e

        return cls(
            costs=costs,
            data_source=dict(data.get("dataSource", {})),
            disclaimer=list(data.get("disclaimer", [])),
        )


@lru_cache(maxsize=None)
def load_medical_costs() -> MedicalCostTable:
    """Load the packaged medical cost statistics."""
    text = resources.files("child_subsidy.data").joinpath("medical_costs.json").read_text(
        encoding="utf-8"
    )
    table = MedicalCostTable.from_dict(json.loads(text))
    logger.debug("Loaded medical costs for %d ages", len(table.costs))
    return table


def round_half_up(value: float) -> int:
    """Round to the nearest whole yen, halves up."""
    return math.floor(value + 0.5)


def self_pay_rate(age: int) -> float:
    if age <= MEDICAL_PARAMS["preschool_max_age"]:
        return MEDICAL_PARAMS["self_pay_rate_preschool"]
    return MEDICAL_PARAMS["self_pay_rate_school"]


def assistance_rate(jurisdiction: Jurisdiction) -> float:
    return MEDICAL_PARAMS["assistance_rate"].get(jurisdiction, 0.0)


def assistance_max_age(jurisdiction: Jurisdiction) -> int:
    return MEDICAL_PARAMS["assistance_max_age"].get(
        jurisdiction, MEDICAL_PARAMS["max_child_age"]
    )


def medical_subsidy(
    current_age: int,
    jurisdiction: Jurisdiction,
    table: Optional[MedicalCostTable] = None,
) -> int:
    """
    Estimate the medical subsidy from current_age to the assistance ceiling.

    Args:
        current_age: Child's current age
        jurisdiction: Jurisdiction paying the subsidy
        table: Medical cost statistics (default: packaged data)

    Returns:
        Estimated subsidy in yen, rounded to the nearest yen. Ages outside
        0-18 or past the ceiling yield 0. Ages missing from the table
        contribute nothing.
    """
    if current_age < 0 or current_age > MEDICAL_PARAMS["max_child_age"]:
        return 0

    max_age = assistance_max_age(jurisdiction)
    if current_age > max_age:
        return 0

    table = table or load_medical_costs()
    rate = assistance_rate(jurisdiction)

    total = 0.0
    for age in range(current_age, max_age + 1):
        annual_cost = table.annual_cost_at(age)
        if annual_cost is None:
            continue
        total += annual_cost * self_pay_rate(age) * rate

    return round_half_up(total)


def describe_medical_subsidy(
    current_age: int,
    total_subsidy: int,
    jurisdiction: Jurisdiction,
) -> str:
    """Explain a medical subsidy estimate in one sentence."""
    if current_age > MEDICAL_PARAMS["max_child_age"]:
        return "お子様は既に医療費助成の対象年齢を超えています"

    max_age = assistance_max_age(jurisdiction)
    years = max_age - current_age + 1
    avg_per_year = round_half_up(total_subsidy / years)

    description = (
        f"{current_age}歳から{max_age}歳までの{years}年間で、"
        f"約{total_subsidy / 10000:.0f}万円の医療費助成が見込まれます"
        f"（年平均約{avg_per_year / 10000:.1f}万円）"
    )

    if jurisdiction == Jurisdiction.KANAGAWA:
        description += (
            " ※神奈川県は市町村により制度が異なります。"
            "横浜市など一部自治体では18歳まで助成がありますが、"
            "本計算では保守的に0円としています。"
        )

    return description

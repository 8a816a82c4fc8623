"""
Shared inputs and helpers for the policy amount calculators.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..config import EngineConfig
from ..errors import InvariantViolationError
from ..medical import MedicalCostTable
from ..models import VARIABLE, AgeRangeInfo, Child, Policy
from .ages import age_range_info, years_received, years_remaining
from .eligibility import could_ever_apply, matches_birth_order


@dataclass(frozen=True)
class CalculationContext:
    """Everything a calculator may read besides the policy itself."""

    household_income: int
    children: Tuple[Child, ...]
    medical_costs: Optional[MedicalCostTable] = None
    config: EngineConfig = field(default_factory=EngineConfig)

    @property
    def childhood(self) -> Tuple[int, int]:
        return self.config.childhood_min_age, self.config.childhood_max_age


@dataclass(frozen=True)
class Accrual:
    """Entitlement from the current age onward."""

    amount: int
    years: int
    age_range: Optional[AgeRangeInfo] = None


NO_ACCRUAL = Accrual(amount=0, years=0)


def flat_amount(policy: Policy) -> int:
    """Return a fixed policy's amount, failing on the VARIABLE sentinel."""
    if policy.amount == VARIABLE:
        raise InvariantViolationError(
            policy.id, "fixed-amount calculator received a variable-amount policy"
        )
    return policy.amount


def ever_eligible(policy: Policy, ctx: CalculationContext) -> List[Child]:
    return [
        child
        for child in ctx.children
        if could_ever_apply(child, policy.child_condition, ctx.childhood)
    ]


def birth_order_eligible(policy: Policy, ctx: CalculationContext) -> List[Child]:
    return [
        child
        for child in ctx.children
        if matches_birth_order(child, policy.child_condition)
    ]


def accrue_remaining(
    annual_amount: int,
    children: List[Child],
    min_age: int,
    max_age: int,
) -> Accrual:
    """Sum annual_amount over each child's remaining years in [min_age, max_age]."""
    if not children:
        return NO_ACCRUAL

    total = 0
    max_years = 0
    for child in children:
        years = years_remaining(child.age, min_age, max_age)
        if years > 0:
            total += annual_amount * years
            max_years = max(max_years, years)

    return Accrual(
        amount=total,
        years=max_years,
        age_range=age_range_info(children[0].age, min_age, max_age),
    )


def accrue_received(
    annual_amount: int,
    children: List[Child],
    min_age: int,
    max_age: int,
) -> int:
    """Sum annual_amount over each child's years already spent in [min_age, max_age]."""
    return sum(
        annual_amount * years_received(child.age, min_age, max_age)
        for child in children
    )

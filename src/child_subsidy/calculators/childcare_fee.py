"""
Childcare fee waiver calculator.

Birth-order differences (full fee, half fee, free) are encoded in the catalog
as separate policies with their own amounts, so every eligible child is
charged the policy's own amount here.
"""

from ..models import Policy
from .ages import full_span
from .context import (
    Accrual,
    CalculationContext,
    accrue_received,
    accrue_remaining,
    birth_order_eligible,
    ever_eligible,
    flat_amount,
)
from .frequency import annualize

CHILDCARE_FEE_PARAMS = {
    # Pre-school years
    "default_min_age": 0,
    "default_max_age": 5,
}


def _bounds(policy: Policy):
    return policy.child_condition.age_bounds(
        CHILDCARE_FEE_PARAMS["default_min_age"], CHILDCARE_FEE_PARAMS["default_max_age"]
    )


def remaining(policy: Policy, ctx: CalculationContext) -> Accrual:
    annual_amount = annualize(flat_amount(policy), policy.frequency)
    min_age, max_age = _bounds(policy)
    return accrue_remaining(annual_amount, ever_eligible(policy, ctx), min_age, max_age)


def maximum(policy: Policy, ctx: CalculationContext) -> int:
    annual_amount = annualize(flat_amount(policy), policy.frequency)
    min_age, max_age = _bounds(policy)
    return annual_amount * full_span(min_age, max_age) * len(birth_order_eligible(policy, ctx))


def received(policy: Policy, ctx: CalculationContext) -> int:
    annual_amount = annualize(flat_amount(policy), policy.frequency)
    min_age, max_age = _bounds(policy)
    return accrue_received(annual_amount, birth_order_eligible(policy, ctx), min_age, max_age)

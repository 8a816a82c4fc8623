"""
Fixed flat-amount calculator.

Covers every fixed-amount policy without a bespoke calculator: cash benefits,
school lunch support, one-time birth grants and the like.
"""

from ..models import Frequency, Policy
from .ages import age_range_info, full_span, years_remaining
from .context import (
    NO_ACCRUAL,
    Accrual,
    CalculationContext,
    accrue_received,
    accrue_remaining,
    birth_order_eligible,
    ever_eligible,
    flat_amount,
)
from .frequency import annualize

FIXED_PARAMS = {
    "default_min_age": 0,
    "default_max_age": 18,
}


def _bounds(policy: Policy):
    return policy.child_condition.age_bounds(
        FIXED_PARAMS["default_min_age"], FIXED_PARAMS["default_max_age"]
    )


def remaining(policy: Policy, ctx: CalculationContext) -> Accrual:
    """
    Entitlement from each eligible child's current age to the policy ceiling.

    A one-time grant pays once per child who has not yet aged out of it,
    however many years remain.
    """
    annual_amount = annualize(flat_amount(policy), policy.frequency)
    children = ever_eligible(policy, ctx)
    min_age, max_age = _bounds(policy)

    if policy.frequency != Frequency.ONCE:
        return accrue_remaining(annual_amount, children, min_age, max_age)

    if not children:
        return NO_ACCRUAL

    total = 0
    max_years = 0
    for child in children:
        if years_remaining(child.age, min_age, max_age) > 0:
            total += annual_amount
            max_years = 1

    return Accrual(
        amount=total,
        years=max_years,
        age_range=age_range_info(children[0].age, min_age, max_age),
    )


def maximum(policy: Policy, ctx: CalculationContext) -> int:
    annual_amount = annualize(flat_amount(policy), policy.frequency)
    children = birth_order_eligible(policy, ctx)

    if policy.frequency == Frequency.ONCE:
        return annual_amount * len(children)

    min_age, max_age = _bounds(policy)
    return annual_amount * full_span(min_age, max_age) * len(children)


def received(policy: Policy, ctx: CalculationContext) -> int:
    annual_amount = annualize(flat_amount(policy), policy.frequency)
    children = birth_order_eligible(policy, ctx)
    min_age, max_age = _bounds(policy)

    # A one-time grant is either already paid or still pending
    if policy.frequency == Frequency.ONCE:
        return annual_amount * sum(1 for child in children if child.age > max_age)

    return accrue_received(annual_amount, children, min_age, max_age)

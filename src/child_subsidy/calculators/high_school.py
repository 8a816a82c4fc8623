"""
High-school tuition calculator.

With a tiered income limit, the yearly amount depends on household income:
the first tier (in listed order) whose threshold exceeds the income wins.

The maximum and received figures always use the first listed tier, whatever
the household's income. They show the ceiling a family could reach rather than
what it actually qualifies for, so for households outside the first tier
maximum != remaining + received. Product has not confirmed whether this is
intended; keep the two rules distinct.
"""

from ..models import IncomeLimitKind, Policy
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
from .eligibility import ceiling_tier, select_tier
from .frequency import annualize

HIGH_SCHOOL_PARAMS = {
    "default_min_age": 15,
    "default_max_age": 18,
}


def _bounds(policy: Policy):
    return policy.child_condition.age_bounds(
        HIGH_SCHOOL_PARAMS["default_min_age"], HIGH_SCHOOL_PARAMS["default_max_age"]
    )


def income_amount(policy: Policy, household_income: int) -> int:
    """Yearly amount for this household's income."""
    amount = flat_amount(policy)
    limit = policy.income_limit
    if limit.kind == IncomeLimitKind.TIERED:
        tier = select_tier(household_income, limit)
        return tier.amount if tier else 0
    return annualize(amount, policy.frequency)


def ceiling_amount(policy: Policy) -> int:
    """Yearly amount of the most generous (first listed) tier."""
    amount = flat_amount(policy)
    tier = ceiling_tier(policy.income_limit)
    if tier is not None:
        return tier.amount
    return annualize(amount, policy.frequency)


def remaining(policy: Policy, ctx: CalculationContext) -> Accrual:
    min_age, max_age = _bounds(policy)
    amount_per_year = income_amount(policy, ctx.household_income)
    return accrue_remaining(amount_per_year, ever_eligible(policy, ctx), min_age, max_age)


def maximum(policy: Policy, ctx: CalculationContext) -> int:
    min_age, max_age = _bounds(policy)
    children = birth_order_eligible(policy, ctx)
    return ceiling_amount(policy) * full_span(min_age, max_age) * len(children)


def received(policy: Policy, ctx: CalculationContext) -> int:
    min_age, max_age = _bounds(policy)
    children = birth_order_eligible(policy, ctx)
    return accrue_received(ceiling_amount(policy), children, min_age, max_age)

"""
Medical expense calculator.

Amounts are not taken from the catalog: they are estimated from per-age
medical cost statistics (see child_subsidy.medical).
"""

from ..medical import medical_subsidy
from ..models import Policy
from .ages import age_range_info
from .context import NO_ACCRUAL, Accrual, CalculationContext, birth_order_eligible, ever_eligible

MEDICAL_EXPENSE_PARAMS = {
    "default_min_age": 0,
    "default_max_age": 18,
}


def remaining(policy: Policy, ctx: CalculationContext) -> Accrual:
    children = ever_eligible(policy, ctx)
    if not children:
        return NO_ACCRUAL

    total = sum(
        medical_subsidy(child.age, policy.jurisdiction, ctx.medical_costs)
        for child in children
    )

    min_age, max_age = policy.child_condition.age_bounds(
        MEDICAL_EXPENSE_PARAMS["default_min_age"], MEDICAL_EXPENSE_PARAMS["default_max_age"]
    )
    age_range = age_range_info(children[0].age, min_age, max_age)
    return Accrual(amount=total, years=age_range.years, age_range=age_range)


def maximum(policy: Policy, ctx: CalculationContext) -> int:
    children = birth_order_eligible(policy, ctx)
    return len(children) * medical_subsidy(0, policy.jurisdiction, ctx.medical_costs)


def received(policy: Policy, ctx: CalculationContext) -> int:
    full = medical_subsidy(0, policy.jurisdiction, ctx.medical_costs)
    return sum(
        full - medical_subsidy(child.age, policy.jurisdiction, ctx.medical_costs)
        for child in birth_order_eligible(policy, ctx)
        if child.age > 0
    )

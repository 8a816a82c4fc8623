"""
Policy amount calculators.

Each calculator computes three perspectives on a policy for a household:

1. remaining: from each child's current age to the policy ceiling
2. maximum: the full entitlement from the policy floor to its ceiling
3. received: from the policy floor to the year before the current age

Dispatch is a closed table keyed on (PolicyShape, PolicyType), built over
every member of both enums. Policy types without a bespoke calculator fall
back to the shape default; a new shape without a default fails at import.
"""

from typing import Callable, Dict, NamedTuple, Tuple

from ..models import Policy, PolicyShape, PolicyType
from . import banded, childcare_fee, fixed, high_school, medical_expense
from .ages import age_range_info, full_span, years_received, years_remaining
from .context import Accrual, CalculationContext
from .eligibility import (
    applies_now,
    ceiling_tier,
    could_ever_apply,
    income_eligible,
    matches_birth_order,
    select_tier,
)
from .frequency import annualize


class Calculator(NamedTuple):
    name: str
    remaining: Callable[[Policy, CalculationContext], Accrual]
    maximum: Callable[[Policy, CalculationContext], int]
    received: Callable[[Policy, CalculationContext], int]
    # Age band assumed when a policy's child condition leaves it open
    default_bounds: Tuple[int, int] = (0, 18)


FIXED = Calculator("fixed", fixed.remaining, fixed.maximum, fixed.received)
BANDED = Calculator("banded", banded.remaining, banded.maximum, banded.received)
CHILD_ALLOWANCE = Calculator(
    "child_allowance",
    banded.allowance_remaining,
    banded.allowance_maximum,
    banded.allowance_received,
)
MEDICAL_EXPENSE = Calculator(
    "medical_expense",
    medical_expense.remaining,
    medical_expense.maximum,
    medical_expense.received,
)
CHILDCARE_FEE = Calculator(
    "childcare_fee",
    childcare_fee.remaining,
    childcare_fee.maximum,
    childcare_fee.received,
    default_bounds=(0, 5),
)
HIGH_SCHOOL_TUITION = Calculator(
    "high_school_tuition",
    high_school.remaining,
    high_school.maximum,
    high_school.received,
    default_bounds=(15, 18),
)

_SPECIAL = {
    (PolicyShape.BANDED, PolicyType.CHILDCARE_ALLOWANCE): CHILD_ALLOWANCE,
    (PolicyShape.FIXED, PolicyType.MEDICAL_EXPENSE): MEDICAL_EXPENSE,
    (PolicyShape.FIXED, PolicyType.CHILDCARE_FEE): CHILDCARE_FEE,
    (PolicyShape.FIXED, PolicyType.HIGH_SCHOOL_TUITION): HIGH_SCHOOL_TUITION,
}

_DEFAULTS = {
    PolicyShape.FIXED: FIXED,
    PolicyShape.BANDED: BANDED,
}

DISPATCH: Dict[Tuple[PolicyShape, PolicyType], Calculator] = {
    (shape, policy_type): _SPECIAL.get((shape, policy_type), _DEFAULTS[shape])
    for shape in PolicyShape
    for policy_type in PolicyType
}


def resolve(policy: Policy) -> Calculator:
    """Return the calculator for a policy."""
    return DISPATCH[(policy.shape, policy.type)]


__all__ = [
    "Accrual",
    "CalculationContext",
    "Calculator",
    "DISPATCH",
    "resolve",
    "annualize",
    "years_remaining",
    "years_received",
    "full_span",
    "age_range_info",
    "income_eligible",
    "select_tier",
    "ceiling_tier",
    "matches_birth_order",
    "could_ever_apply",
    "applies_now",
]

"""
Variable age-banded calculators.

A banded policy pays a different amount for each age band. The child
allowance additionally pays every third-or-later child a flat elevated
monthly rate over the whole childhood window, replacing the bands.
"""

from typing import Callable, Iterator, Optional, Tuple

from ..models import AgeRangeInfo, BirthOrder, Child, VariableAmountPolicy
from .ages import age_range_info, full_span, years_received, years_remaining
from .context import Accrual, CalculationContext
from .frequency import MONTHS_PER_YEAR, annualize

# (min_age, max_age, annual_amount)
Segment = Tuple[int, int, int]
Schedule = Callable[[VariableAmountPolicy, Child, CalculationContext], Iterator[Segment]]


def band_schedule(
    policy: VariableAmountPolicy, child: Child, ctx: CalculationContext
) -> Iterator[Segment]:
    for band in policy.age_bands:
        yield band.min_age, band.max_age, annualize(band.amount, band.frequency)


def allowance_schedule(
    policy: VariableAmountPolicy, child: Child, ctx: CalculationContext
) -> Iterator[Segment]:
    if child.birth_order == BirthOrder.THIRD_OR_MORE:
        min_age, max_age = ctx.childhood
        yield min_age, max_age, ctx.config.third_child_allowance_monthly * MONTHS_PER_YEAR
    else:
        yield from band_schedule(policy, child, ctx)


def _age_range(policy: VariableAmountPolicy, ctx: CalculationContext) -> Optional[AgeRangeInfo]:
    if not ctx.children or not policy.age_bands:
        return None
    min_age = min(band.min_age for band in policy.age_bands)
    max_age = max(band.max_age for band in policy.age_bands)
    return age_range_info(ctx.children[0].age, min_age, max_age)


def _remaining(policy: VariableAmountPolicy, ctx: CalculationContext, schedule: Schedule) -> Accrual:
    total = 0
    for child in ctx.children:
        for min_age, max_age, annual_amount in schedule(policy, child, ctx):
            total += annual_amount * years_remaining(child.age, min_age, max_age)

    age_range = _age_range(policy, ctx)
    if age_range is None:
        return Accrual(amount=total, years=0)
    return Accrual(amount=total, years=age_range.years, age_range=age_range)


def _maximum(policy: VariableAmountPolicy, ctx: CalculationContext, schedule: Schedule) -> int:
    return sum(
        annual_amount * full_span(min_age, max_age)
        for child in ctx.children
        for min_age, max_age, annual_amount in schedule(policy, child, ctx)
    )


def _received(policy: VariableAmountPolicy, ctx: CalculationContext, schedule: Schedule) -> int:
    return sum(
        annual_amount * years_received(child.age, min_age, max_age)
        for child in ctx.children
        for min_age, max_age, annual_amount in schedule(policy, child, ctx)
    )


def remaining(policy: VariableAmountPolicy, ctx: CalculationContext) -> Accrual:
    return _remaining(policy, ctx, band_schedule)


def maximum(policy: VariableAmountPolicy, ctx: CalculationContext) -> int:
    return _maximum(policy, ctx, band_schedule)


def received(policy: VariableAmountPolicy, ctx: CalculationContext) -> int:
    return _received(policy, ctx, band_schedule)


def allowance_remaining(policy: VariableAmountPolicy, ctx: CalculationContext) -> Accrual:
    return _remaining(policy, ctx, allowance_schedule)


def allowance_maximum(policy: VariableAmountPolicy, ctx: CalculationContext) -> int:
    return _maximum(policy, ctx, allowance_schedule)


def allowance_received(policy: VariableAmountPolicy, ctx: CalculationContext) -> int:
    return _received(policy, ctx, allowance_schedule)

"""
Age-interval arithmetic.

Policies cover an inclusive band of ages [min_age, max_age]. Reaching an age
entitles the child to that whole year.
"""

from ..models import AgeRangeInfo


def years_remaining(current_age: int, min_age: int, max_age: int) -> int:
    """
    Count the years of the band still ahead of a child, current year included.

    Examples:
        years_remaining(5, 6, 14) == 9   # ages 6..14
        years_remaining(15, 6, 14) == 0  # already aged out
        years_remaining(14, 6, 14) == 1
    """
    if current_age > max_age:
        return 0
    start_age = max(current_age, min_age)
    return max_age - start_age + 1


def years_received(current_age: int, min_age: int, max_age: int) -> int:
    """Count the years of the band already behind a child: [min_age, current_age - 1]."""
    if current_age <= 0:
        return 0
    end_age = min(current_age - 1, max_age)
    if end_age < min_age:
        return 0
    return end_age - min_age + 1


def full_span(min_age: int, max_age: int) -> int:
    """Number of years in the whole band."""
    return max(0, max_age - min_age + 1)


def age_range_info(current_age: int, min_age: int, max_age: int) -> AgeRangeInfo:
    return AgeRangeInfo(
        from_age=max(current_age, min_age),
        to_age=max_age,
        years=years_remaining(current_age, min_age, max_age),
    )

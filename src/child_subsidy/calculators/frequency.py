"""
Frequency normalizer.

Converts an amount tagged with a payment cadence into a yearly figure.
"""

from ..models import Frequency

MONTHS_PER_YEAR = 12


def annualize(amount: int, frequency: Frequency) -> int:
    """
    Convert an amount to its yearly equivalent.

    One-time grants are returned unchanged: they are paid once, not per year.

    Args:
        amount: Amount in yen
        frequency: Payment cadence

    Returns:
        Yearly amount in yen
    """
    if frequency == Frequency.MONTHLY:
        return amount * MONTHS_PER_YEAR
    return amount

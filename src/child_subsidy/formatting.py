"""
Display helpers: man-yen formatting and input validation messages.
"""

import math
from dataclasses import dataclass
from typing import Optional

MAN_YEN = 10000
MAX_HOUSEHOLD_INCOME = 99_990_000


def format_man_yen(amount: float) -> str:
    """
    Format yen as a whole number of man-yen (10,000 yen), rounding half up.

    Examples:
        format_man_yen(4560000) == "456万円"
        format_man_yen(15000) == "2万円"
        format_man_yen(123456789) == "12,346万円"
    """
    man_yen = math.floor(amount / MAN_YEN + 0.5)
    return f"{man_yen:,}万円"


def format_yen(amount: float) -> str:
    return f"{round(amount):,}円"


@dataclass(frozen=True)
class IncomeValidation:
    is_valid: bool
    error: Optional[str] = None


def validate_income(income: float) -> IncomeValidation:
    """Check a household income entered by a user."""
    if income is None or (isinstance(income, float) and math.isnan(income)):
        return IncomeValidation(False, "数値を入力してください")
    if income < 0:
        return IncomeValidation(False, "0以上の値を入力してください")
    if income > MAX_HOUSEHOLD_INCOME:
        return IncomeValidation(False, "9,999万円以下の値を入力してください")
    return IncomeValidation(True)

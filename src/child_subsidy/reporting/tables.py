"""
Result tables and reports.

Turns engine results into pandas DataFrames, text reports and CSV files, and
runs age sweeps that recompute the ranking for a single child at every age.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
from tqdm import tqdm

from ..calculators import resolve
from ..config import ReportConfig
from ..engine import SubsidyEngine, default_engine
from ..errors import InvalidInputError
from ..formatting import format_man_yen
from ..models import BirthOrder, CalculationInput, CalculationResult, Child

SUMMARY_COLUMNS = [
    "rank",
    "jurisdiction",
    "jurisdiction_name",
    "total_amount",
    "total_max_amount",
    "total_received_amount",
    "n_policies",
]

POLICY_COLUMNS = [
    "jurisdiction",
    "policy_id",
    "policy_name",
    "policy_type",
    "calculator",
    "calculated_amount",
    "max_amount",
    "received_amount",
    "years_applied",
    "from_age",
    "to_age",
    "active_now",
]


def summary_frame(results: List[CalculationResult]) -> pd.DataFrame:
    """One row per jurisdiction, in the order given."""
    rows = [
        {
            "rank": r.rank,
            "jurisdiction": r.jurisdiction.value,
            "jurisdiction_name": r.jurisdiction.display_name,
            "total_amount": r.total_amount,
            "total_max_amount": r.total_max_amount,
            "total_received_amount": r.total_received_amount,
            "n_policies": len(r.applied_policies),
        }
        for r in results
    ]
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def policy_frame(results: List[CalculationResult]) -> pd.DataFrame:
    """One row per applied policy across all jurisdictions."""
    rows = []
    for r in results:
        for applied in r.applied_policies:
            age_range = applied.age_range
            rows.append(
                {
                    "jurisdiction": r.jurisdiction.value,
                    "policy_id": applied.policy.id,
                    "policy_name": applied.policy.name,
                    "policy_type": applied.policy.type.value,
                    "calculator": resolve(applied.policy).name,
                    "calculated_amount": applied.calculated_amount,
                    "max_amount": applied.max_amount,
                    "received_amount": applied.received_amount,
                    "years_applied": applied.years_applied,
                    "from_age": age_range.from_age if age_range else np.nan,
                    "to_age": age_range.to_age if age_range else np.nan,
                    "active_now": applied.active_now,
                }
            )
    return pd.DataFrame(rows, columns=POLICY_COLUMNS)


@dataclass
class SubsidyReport:
    """Ranked results for one household, with tables and a text rendering."""

    calc_input: CalculationInput
    results: List[CalculationResult]
    config: ReportConfig = field(default_factory=ReportConfig)

    @property
    def summary_data(self) -> pd.DataFrame:
        return summary_frame(self.results)

    @property
    def policy_data(self) -> pd.DataFrame:
        return policy_frame(self.results)

    def summary(self) -> Dict[str, Any]:
        return {
            "household_income": self.calc_input.household_income,
            "n_children": len(self.calc_input.children),
            "jurisdictions": {
                r.jurisdiction.value: {
                    "rank": r.rank,
                    "total_amount": r.total_amount,
                    "total_max_amount": r.total_max_amount,
                    "n_policies": len(r.applied_policies),
                }
                for r in self.results
            },
        }

    def detailed_report(self) -> str:
        children = ", ".join(
            f"{c.age}歳 ({c.birth_order.value})" for c in self.calc_input.children
        ) or "none"
        lines = [
            "=" * 70,
            "Child Subsidy Comparison",
            "=" * 70,
            f"Household income: {self.calc_input.household_income:,}円",
            f"Children: {children}",
            "",
        ]

        for r in self.results:
            lines.extend([
                f"#{r.rank} {r.jurisdiction.display_name} ({r.jurisdiction.value})",
                "-" * 40,
                f"  Remaining:  {format_man_yen(r.total_amount)}",
                f"  Maximum:    {format_man_yen(r.total_max_amount)}",
                f"  Received:   {format_man_yen(r.total_received_amount)}",
            ])

            if not r.applied_policies:
                lines.extend(["  No applicable policies", ""])
                continue

            top = sorted(
                r.applied_policies, key=lambda p: p.calculated_amount, reverse=True
            )[: self.config.top_n]
            lines.append("  Largest policies:")
            for p in top:
                marker = "*" if p.active_now else " "
                lines.append(
                    f"   {marker} {p.policy.name}: {format_man_yen(p.calculated_amount)}"
                    f" (max {format_man_yen(p.max_amount or 0)})"
                )
            lines.append("")

        lines.append("* currently receiving")
        lines.append("=" * 70)
        return "\n".join(lines)

    def save_report(self, output_dir: Path):
        """Save the text report and both tables."""
        output_dir = Path(output_dir)
        output_dir.mkdir(exist_ok=True, parents=True)

        report_path = output_dir / "subsidy_report.txt"
        report_path.write_text(self.detailed_report(), encoding="utf-8")
        print(f"Saved report to: {report_path}")

        summary_path = output_dir / "summary.csv"
        self.summary_data.to_csv(summary_path, index=False)
        print(f"Saved summary to: {summary_path}")

        policies_path = output_dir / "policies.csv"
        self.policy_data.to_csv(policies_path, index=False)
        print(f"Saved policy detail to: {policies_path}")


def build_report(
    calc_input: CalculationInput,
    engine: Optional[SubsidyEngine] = None,
    config: Optional[ReportConfig] = None,
) -> SubsidyReport:
    engine = engine or default_engine()
    return SubsidyReport(
        calc_input=calc_input,
        results=engine.calculate_all(calc_input),
        config=config or ReportConfig(),
    )


# =============================================================================
# AGE SWEEP
# =============================================================================


@dataclass
class AgeSweep:
    """Totals per jurisdiction for a single child at every age."""

    household_income: int
    birth_order: BirthOrder
    data: pd.DataFrame

    def pivot(self, value: str = "total_amount") -> pd.DataFrame:
        """Ages as rows, jurisdictions as columns."""
        return self.data.pivot(index="age", columns="jurisdiction", values=value)

    def non_increasing(self) -> Dict[str, bool]:
        """Whether each jurisdiction's remaining total never grows with age."""
        wide = self.pivot()
        return {
            column: bool(np.all(np.diff(wide[column].to_numpy()) <= 0))
            for column in wide.columns
        }

    def best_by_age(self) -> pd.Series:
        """Top-ranked jurisdiction at each age."""
        top = self.data[self.data["rank"] == 1]
        return top.set_index("age")["jurisdiction"]

    def detailed_report(self) -> str:
        wide = self.pivot()
        lines = [
            "=" * 70,
            f"Remaining entitlement by age ({self.birth_order.value} child, "
            f"income {self.household_income:,}円)",
            "=" * 70,
            "age  " + "  ".join(f"{c:>10}" for c in wide.columns),
        ]
        for age, row in wide.iterrows():
            lines.append(
                f"{age:>3}  " + "  ".join(f"{format_man_yen(v):>10}" for v in row)
            )
        lines.append("=" * 70)
        return "\n".join(lines)

    def save_report(self, output_dir: Path):
        output_dir = Path(output_dir)
        output_dir.mkdir(exist_ok=True, parents=True)

        data_path = output_dir / "age_sweep.csv"
        self.data.to_csv(data_path, index=False)
        print(f"Saved age sweep to: {data_path}")


def sweep_ages(
    household_income: int,
    birth_order: BirthOrder = BirthOrder.FIRST,
    engine: Optional[SubsidyEngine] = None,
    config: Optional[ReportConfig] = None,
) -> AgeSweep:
    """
    Rank all jurisdictions for one child at each age from 0 to config.max_sweep_age.

    Args:
        household_income: Household income in yen
        birth_order: The child's birth order
        engine: Engine to use (default: packaged catalog)
        config: Report configuration

    Returns:
        AgeSweep with one row per (age, jurisdiction)

    Raises:
        InvalidInputError: If config.max_sweep_age is negative
    """
    engine = engine or default_engine()
    config = config or ReportConfig()

    if config.max_sweep_age < 0:
        raise InvalidInputError(
            f"max_sweep_age must be non-negative, got {config.max_sweep_age}"
        )

    ages = range(0, config.max_sweep_age + 1)
    iterator = tqdm(ages, desc="Ages") if config.show_progress else ages

    rows = []
    for age in iterator:
        calc_input = CalculationInput(
            household_income=household_income,
            children=(Child(age=age, birth_order=birth_order),),
        )
        for r in engine.calculate_all(calc_input):
            rows.append(
                {
                    "age": age,
                    "jurisdiction": r.jurisdiction.value,
                    "rank": r.rank,
                    "total_amount": r.total_amount,
                    "total_max_amount": r.total_max_amount,
                    "total_received_amount": r.total_received_amount,
                }
            )

    return AgeSweep(
        household_income=household_income,
        birth_order=birth_order,
        data=pd.DataFrame(rows),
    )

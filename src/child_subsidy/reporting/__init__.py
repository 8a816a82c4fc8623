"""
Reporting: pandas result tables, age sweeps and the command line.
"""

from .tables import (
    AgeSweep,
    SubsidyReport,
    build_report,
    policy_frame,
    summary_frame,
    sweep_ages,
)

__all__ = [
    "AgeSweep",
    "SubsidyReport",
    "build_report",
    "policy_frame",
    "summary_frame",
    "sweep_ages",
]

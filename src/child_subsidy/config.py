"""Configuration for the engine and the reporting layer."""

from dataclasses import dataclass


@dataclass
class EngineConfig:
    """Configuration for subsidy calculation."""

    # Childhood window used when deciding whether a policy could ever apply
    childhood_min_age: int = 0
    childhood_max_age: int = 18

    # Child allowance for the third and later child, yen per month
    third_child_allowance_monthly: int = 30000


@dataclass
class ReportConfig:
    """Configuration for result tables and age sweeps."""

    # Sweep ages 0..max_sweep_age inclusive
    max_sweep_age: int = 19
    show_progress: bool = True

    # Policies listed per jurisdiction in text reports
    top_n: int = 5

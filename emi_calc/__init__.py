"""EMI loan calculator: amortization engine and command-line interface."""

from .data_models import (
    Frequency,
    LoanParameters,
    MonthlyRecord,
    NoSchedule,
    PeriodRecord,
    ScheduleResult,
    Summary,
    YearRecord,
)
from .engine import aggregate, compute_schedule, generate_monthly_schedule, summarize, yearly_breakdown

__all__ = [
    "Frequency",
    "LoanParameters",
    "MonthlyRecord",
    "NoSchedule",
    "PeriodRecord",
    "ScheduleResult",
    "Summary",
    "YearRecord",
    "aggregate",
    "compute_schedule",
    "generate_monthly_schedule",
    "summarize",
    "yearly_breakdown",
]

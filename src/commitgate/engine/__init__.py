"""Engine — runner, aggregation, reports."""

from commitgate.engine.aggregator import apply_severity, deduplicate
from commitgate.engine.models import CheckReport
from commitgate.engine.runner import CheckError, first_error, iter_issues, run, run_all

__all__ = [
    "CheckError",
    "CheckReport",
    "apply_severity",
    "deduplicate",
    "first_error",
    "iter_issues",
    "run",
    "run_all",
]

"""
Cohort Assignment for the Enrollment Gateway
"""

from .assignment import (
    BATCH_NAME_TEMPLATE,
    batch_name,
    compute_next_cohort,
    parse_batch_number,
    validate_capacity,
)

__all__ = [
    "BATCH_NAME_TEMPLATE",
    "batch_name",
    "compute_next_cohort",
    "parse_batch_number",
    "validate_capacity",
]

"""
Error Message Utilities

Provides human-readable error messages for database constraint violations,
enum validation errors and pydantic validation failures.
"""

import re
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from models import ActivityType, EnergyLevel, FocusQuality, OutcomeType, PeriodType

# Valid enum values for the closed sets callers most often get wrong
ENUM_VALUES = {
    "activity": [a.value for a in ActivityType],
    "energy_level": [e.value for e in EnergyLevel],
    "focus_quality": [f.value for f in FocusQuality],
    "outcome_type": [o.value for o in OutcomeType],
    "period_type": [p.value for p in PeriodType],
}

# Human-readable constraint explanations
CONSTRAINT_MESSAGES = {
    "check_period_type": f"Period type must be one of: {', '.join(ENUM_VALUES['period_type'])}.",
    "check_period_range": "Analysis end date must not be before its start date.",
    "time_entry_logs_user_date_key": "A time entry log already exists for this user and date.",
    "time_entry_logs_pkey": "A time entry log with this ID already exists.",
    "productivity_analyses_pkey": "A productivity analysis with this ID already exists.",
}


def enhance_error_message(error: Exception) -> str:
    """
    Enhance database error messages with human-readable explanations.

    Handles:
    - Constraint violations (adds explanation of the constraint)
    - Unique constraint violations
    - Not-null violations
    - Pydantic validation errors (flattened into one line)

    Returns the enhanced error message string.
    """
    if isinstance(error, PydanticValidationError):
        return describe_validation_error(error)

    error_str = str(error)

    # Check for constraint violations
    constraint_match = re.search(r'violates check constraint "(\w+)"', error_str)
    if constraint_match:
        constraint_name = constraint_match.group(1)
        explanation = CONSTRAINT_MESSAGES.get(constraint_name)

        if explanation:
            return f"Constraint violation ({constraint_name}): {explanation}"
        else:
            return f"Constraint violation: {constraint_name}. {error_str}"

    # Check for unique constraint violations
    unique_match = re.search(r'duplicate key value violates unique constraint "(\w+)"', error_str)
    if unique_match:
        constraint_name = unique_match.group(1)
        explanation = CONSTRAINT_MESSAGES.get(constraint_name, "A record with this value already exists")
        return f"Duplicate entry: {explanation.rstrip('.')} ({constraint_name})."

    # Check for not-null violations
    null_match = re.search(r'null value in column "(\w+)" .* violates not-null constraint', error_str)
    if null_match:
        column_name = null_match.group(1)
        return f"Required field missing: '{column_name}' cannot be null."

    # Return original error if no enhancement found
    return error_str


def describe_validation_error(error: PydanticValidationError) -> str:
    """Flatten a pydantic ValidationError into 'field: message; field: message'"""
    parts = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail.get("loc", ()))
        message = detail.get("msg", "invalid value")
        field_name = str(detail["loc"][-1]) if detail.get("loc") else ""
        hint = format_enum_hint(field_name) if detail.get("type") == "enum" else ""
        text = f"{location}: {message}" if location else message
        parts.append(f"{text} ({hint})" if hint else text)
    return "; ".join(parts) or str(error)


def get_enum_values(enum_name: str) -> Optional[list]:
    """Get valid values for a known enum type."""
    return ENUM_VALUES.get(enum_name)


def format_enum_hint(enum_name: str) -> str:
    """Format a hint string showing valid enum values."""
    values = ENUM_VALUES.get(enum_name, [])
    if values:
        return f"Valid values for {enum_name}: {', '.join(values)}"
    return ""

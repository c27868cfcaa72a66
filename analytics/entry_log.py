"""
Time entry log mutations

Every mutation validates its input first, then edits the log in place and
rebuilds the DailySummary from all completed entries. A rejected mutation
leaves the log untouched.
"""

import logging
from typing import Any, Dict, Union
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from analytics.daily_summary import summarize_day
from errors import NotFoundError, ValidationError
from models import TimeEntry, TimeEntryCreate, TimeEntryLog, TimeEntryUpdate
from utils.error_messages import describe_validation_error

logger = logging.getLogger(__name__)


def parse_entry_create(data: Union[Dict[str, Any], TimeEntryCreate, TimeEntry]) -> TimeEntry:
    """Validate add-entry input and build the TimeEntry it describes"""
    if isinstance(data, TimeEntry):
        return data
    try:
        request = data if isinstance(data, TimeEntryCreate) else TimeEntryCreate.model_validate(data)
        return TimeEntry(**request.model_dump())
    except PydanticValidationError as e:
        raise ValidationError(describe_validation_error(e)) from e


def parse_entry_update(patch: Union[Dict[str, Any], TimeEntryUpdate]) -> TimeEntryUpdate:
    try:
        if isinstance(patch, TimeEntryUpdate):
            return patch
        return TimeEntryUpdate.model_validate(patch)
    except PydanticValidationError as e:
        raise ValidationError(describe_validation_error(e)) from e


def parse_entry_id(entry_id: Union[str, UUID]) -> UUID:
    if isinstance(entry_id, UUID):
        return entry_id
    try:
        return UUID(str(entry_id))
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid entry id: {entry_id!r}") from e


def refresh_summary(log: TimeEntryLog) -> TimeEntryLog:
    log.daily_summary = summarize_day(log.entries)
    return log


def add_entry(log: TimeEntryLog, data: Union[Dict[str, Any], TimeEntryCreate, TimeEntry]) -> TimeEntry:
    """Append a new entry to the log and recompute the summary"""
    entry = parse_entry_create(data)
    log.entries.append(entry)
    refresh_summary(log)
    logger.debug(f"Added {entry.activity} entry {entry.id} to {log.user_id}/{log.log_date}")
    return entry


def update_entry(
    log: TimeEntryLog,
    entry_id: Union[str, UUID],
    patch: Union[Dict[str, Any], TimeEntryUpdate],
) -> TimeEntry:
    """
    Merge the provided patch fields into an existing entry.

    Only fields explicitly present in the patch are applied; duration is
    re-derived from the merged timestamps. Raises NotFoundError if the
    entry is not in this log.
    """
    target_id = parse_entry_id(entry_id)
    update = parse_entry_update(patch)

    for index, entry in enumerate(log.entries):
        if entry.id == target_id:
            break
    else:
        raise NotFoundError(f"Time entry {target_id} not found in log for {log.log_date}")

    merged = entry.model_dump()
    merged.update(update.model_dump(exclude_unset=True))
    merged.pop("duration", None)

    try:
        updated = TimeEntry.model_validate(merged)
    except PydanticValidationError as e:
        raise ValidationError(describe_validation_error(e)) from e

    log.entries[index] = updated
    refresh_summary(log)
    logger.debug(f"Updated entry {target_id} in {log.user_id}/{log.log_date}")
    return updated


def delete_entry(log: TimeEntryLog, entry_id: Union[str, UUID]) -> TimeEntry:
    """Remove an entry from the log. The log itself is kept even when emptied."""
    target_id = parse_entry_id(entry_id)
    entry = log.find_entry(target_id)
    if entry is None:
        raise NotFoundError(f"Time entry {target_id} not found in log for {log.log_date}")

    log.entries = [e for e in log.entries if e.id != target_id]
    refresh_summary(log)
    logger.debug(f"Deleted entry {target_id} from {log.user_id}/{log.log_date}")
    return entry

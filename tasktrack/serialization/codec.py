"""Persistence codec: the whole task collection as one JSON document."""

import logging
from typing import List, Optional, Union

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from tasktrack.errors import SerializationError
from tasktrack.models.task import Task

logger = logging.getLogger(__name__)

_TASK_LIST = TypeAdapter(List[Task])


def serialize_tasks(tasks: List[Task]) -> str:
    """Encode the collection (every field, subtasks included)."""
    return _TASK_LIST.dump_json(tasks, by_alias=True).decode("utf-8")


def decode_tasks(blob: Union[str, bytes]) -> List[Task]:
    """Decode a persisted collection, raising SerializationError if it is unreadable."""
    try:
        return _TASK_LIST.validate_json(blob)
    except PydanticValidationError as e:
        raise SerializationError(f"Stored task collection is unreadable: {e.error_count()} error(s)") from e


def deserialize_tasks(blob: Optional[Union[str, bytes]]) -> List[Task]:
    """Decode a persisted collection; a missing or corrupt blob yields an empty list."""
    if not blob:
        return []
    try:
        return decode_tasks(blob)
    except SerializationError as e:
        logger.warning(f"Discarding stored tasks: {e}")
        return []

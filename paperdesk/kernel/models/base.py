"""
Base model helpers: ids, timestamps and the entity <-> document mapping.
"""

import itertools
import os
import time
from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ValidationError

from paperdesk.errors import UnknownError

ModelT = TypeVar("ModelT", bound=BaseModel)

_id_counter = itertools.count(int.from_bytes(os.urandom(3), "big"))
_process_bytes = os.urandom(5).hex()


def new_id() -> str:
    """
    Generate a new 24-hex-digit id.

    Layout follows the store's native object ids (seconds, process-random,
    counter) so ids sort roughly by creation time.
    """
    counter = next(_id_counter) % 0xFFFFFF
    return f"{int(time.time()):08x}{_process_bytes}{counter:06x}"


def now_msec() -> int:
    """Milliseconds since the epoch."""
    return int(time.time() * 1000)


def to_doc(model: BaseModel) -> Dict[str, Any]:
    """Dump an entity to a store document, renaming id to _id."""
    doc = model.model_dump(mode="json")
    if "id" in doc:
        doc["_id"] = doc.pop("id")
    return doc


def from_doc(model_class: Type[ModelT], doc: Dict[str, Any]) -> ModelT:
    """Load an entity from a store document, renaming _id to id."""
    data = dict(doc)
    if "_id" not in data:
        raise UnknownError("Convert document to object require id property exist")
    data["id"] = data.pop("_id")
    try:
        return model_class.model_validate(data)
    except ValidationError as exc:
        raise UnknownError(f"Malformed {model_class.__name__} document: {exc}") from exc

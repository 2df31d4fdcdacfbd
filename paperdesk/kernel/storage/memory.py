"""
In-process document store.

Implements DocumentCollection over plain dicts with the same filter, sort and
update semantics the core relies on from a MongoDB-style store. Every
operation finishes without yielding to the event loop, so each call is atomic
with respect to other coroutines.
"""

import copy
import operator
from typing import Any, Callable, Dict, List, Optional

from paperdesk.errors import DuplicateKeyError
from paperdesk.kernel.models.base import new_id
from paperdesk.kernel.storage.collection import (
    Document,
    DocumentCollection,
    ReturnDocument,
    SortSpec,
)

_MISSING = object()

_COMPARISONS: Dict[str, Callable[[Any, Any], bool]] = {
    "$gt": operator.gt,
    "$gte": operator.ge,
    "$lt": operator.lt,
    "$lte": operator.le,
}


def _get_path(document: Document, path: str) -> Any:
    current: Any = document
    for part in path.split("."):
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            return _MISSING
    return current


def _set_path(document: Document, path: str, value: Any) -> None:
    parts = path.split(".")
    current = document
    for part in parts[:-1]:
        current = current.setdefault(part, {})
    current[parts[-1]] = value


def _unset_path(document: Document, path: str) -> None:
    parts = path.split(".")
    current: Any = document
    for part in parts[:-1]:
        if not isinstance(current, dict) or part not in current:
            return
        current = current[part]
    if isinstance(current, dict):
        current.pop(parts[-1], None)


def _equals(value: Any, target: Any) -> bool:
    # null matches both an explicit null and a missing field
    if target is None:
        return value is _MISSING or value is None
    if value is _MISSING:
        return False
    if isinstance(value, list) and not isinstance(target, list):
        return target in value
    return value == target


def _compare(value: Any, target: Any, op: Callable[[Any, Any], bool]) -> bool:
    if value is _MISSING or value is None or target is None:
        return False
    try:
        return op(value, target)
    except TypeError:
        return False


def _is_operator_expression(condition: Any) -> bool:
    return (
        isinstance(condition, dict)
        and bool(condition)
        and all(isinstance(k, str) and k.startswith("$") for k in condition)
    )


def _match_condition(value: Any, condition: Any) -> bool:
    if not _is_operator_expression(condition):
        return _equals(value, condition)

    for op, target in condition.items():
        if op in _COMPARISONS:
            if not _compare(value, target, _COMPARISONS[op]):
                return False
        elif op == "$ne":
            if _equals(value, target):
                return False
        elif op == "$in":
            if not any(_equals(value, t) for t in target):
                return False
        elif op == "$exists":
            if (value is not _MISSING) != bool(target):
                return False
        else:
            raise ValueError(f"Unsupported filter operator: {op}")
    return True


def matches(document: Document, filter: Optional[Document]) -> bool:
    """Evaluate a filter against a single document."""
    for key, condition in (filter or {}).items():
        if key == "$and":
            if not all(matches(document, sub) for sub in condition):
                return False
        elif key == "$or":
            if not any(matches(document, sub) for sub in condition):
                return False
        elif key.startswith("$"):
            raise ValueError(f"Unsupported filter operator: {key}")
        elif not _match_condition(_get_path(document, key), condition):
            return False
    return True


def _sort_key(value: Any) -> tuple:
    # Missing and null sort before every other value
    if value is _MISSING or value is None:
        return (0, 0)
    return (1, value)


def _sort(documents: List[Document], sort: SortSpec) -> List[Document]:
    ordered = list(documents)
    # Stable sorts applied from the least significant key up
    for field, direction in reversed(list(sort)):
        ordered.sort(
            key=lambda doc, f=field: _sort_key(_get_path(doc, f)),
            reverse=direction < 0,
        )
    return ordered


def _project(document: Document, projection: Optional[Document]) -> Document:
    result = copy.deepcopy(document)
    if not projection:
        return result

    included = {k for k, v in projection.items() if v}
    excluded = {k for k, v in projection.items() if not v}

    if included - {"_id"}:
        keep = set(included)
        if "_id" not in excluded:
            keep.add("_id")
        return {k: v for k, v in result.items() if k in keep}

    return {k: v for k, v in result.items() if k not in excluded}


def _apply_push(document: Document, path: str, spec: Any) -> None:
    current = _get_path(document, path)
    items = [] if current is _MISSING or current is None else list(current)

    if isinstance(spec, dict) and "$each" in spec:
        items.extend(copy.deepcopy(spec["$each"]))
        if "$slice" in spec:
            limit = spec["$slice"]
            if limit < 0:
                items = items[limit:]
            elif limit == 0:
                items = []
            else:
                items = items[:limit]
    else:
        items.append(copy.deepcopy(spec))

    _set_path(document, path, items)


def apply_update(document: Document, update: Document) -> None:
    """Apply update operators to a document in place."""
    for op, fields in update.items():
        if op == "$set":
            for path, value in fields.items():
                _set_path(document, path, copy.deepcopy(value))
        elif op == "$unset":
            for path in fields:
                _unset_path(document, path)
        elif op == "$inc":
            for path, amount in fields.items():
                current = _get_path(document, path)
                _set_path(document, path, (0 if current is _MISSING else current) + amount)
        elif op == "$push":
            for path, spec in fields.items():
                _apply_push(document, path, spec)
        else:
            raise ValueError(f"Unsupported update operator: {op}")


class MemoryCollection(DocumentCollection):
    """A single in-memory collection, documents kept in insertion order."""

    def __init__(self, name: str = "collection"):
        self.name = name
        self._documents: Dict[Any, Document] = {}

    def __len__(self) -> int:
        return len(self._documents)

    def _matching(self, filter: Optional[Document]) -> List[Document]:
        return [doc for doc in self._documents.values() if matches(doc, filter)]

    async def find(
        self,
        filter: Optional[Document] = None,
        sort: Optional[SortSpec] = None,
        skip: Optional[int] = None,
        limit: Optional[int] = None,
        projection: Optional[Document] = None,
    ) -> List[Document]:
        documents = self._matching(filter)
        if sort:
            documents = _sort(documents, sort)
        if skip:
            documents = documents[skip:]
        if limit:
            documents = documents[:limit]
        return [_project(doc, projection) for doc in documents]

    async def find_one(
        self,
        filter: Document,
        projection: Optional[Document] = None,
    ) -> Optional[Document]:
        for doc in self._documents.values():
            if matches(doc, filter):
                return _project(doc, projection)
        return None

    async def find_one_and_update(
        self,
        filter: Document,
        update: Document,
        projection: Optional[Document] = None,
        return_document: ReturnDocument = ReturnDocument.BEFORE,
    ) -> Optional[Document]:
        for doc in self._documents.values():
            if not matches(doc, filter):
                continue
            before = copy.deepcopy(doc)
            apply_update(doc, update)
            if return_document == ReturnDocument.AFTER:
                return _project(doc, projection)
            return _project(before, projection)
        return None

    async def count_documents(self, filter: Optional[Document] = None) -> int:
        return len(self._matching(filter))

    async def insert_one(self, document: Document) -> Any:
        stored = copy.deepcopy(document)
        stored.setdefault("_id", new_id())
        if stored["_id"] in self._documents:
            raise DuplicateKeyError(f"Duplicate _id in {self.name}: {stored['_id']}")
        self._documents[stored["_id"]] = stored
        return stored["_id"]


class MemoryDatabase:
    """Named MemoryCollections, created on first access."""

    def __init__(self):
        self._collections: Dict[str, MemoryCollection] = {}

    def get_collection(self, name: str) -> MemoryCollection:
        if name not in self._collections:
            self._collections[name] = MemoryCollection(name)
        return self._collections[name]

    def __getitem__(self, name: str) -> MemoryCollection:
        return self.get_collection(name)

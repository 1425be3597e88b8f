"""In-memory record store used in stub mode.

Speaks the same envelopes as the hosted store: per-record results for
mutations, ``{data, totalCount}`` for reads. Filtering covers the operators
the repositories emit.
"""
from __future__ import annotations

import copy
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

SYSTEM_FIELDS = ("CreatedOn", "CreatedBy", "ModifiedOn", "ModifiedBy")


class TableSchema:
    """Writable fields and required fields for one stub table."""

    def __init__(self, updateable: Iterable[str], required: Iterable[str] = ()):
        self.updateable = set(updateable)
        self.required = tuple(required)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, dict):
        return str(value.get("Name") or value.get("Id") or "")
    return str(value)


def _contains(actual: Any, expected: Any) -> bool:
    return _text(expected).lower() in _text(actual).lower()


def _equals(actual: Any, expected: Any) -> bool:
    return _text(actual) == _text(expected)


OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "Contains": _contains,
    "DoesNotContain": lambda a, e: not _contains(a, e),
    "EqualTo": _equals,
    "ExactMatch": _equals,
    "NotEqualTo": lambda a, e: not _equals(a, e),
}


def _condition_matches(record: Dict[str, Any], condition: Dict[str, Any]) -> bool:
    operator = OPERATORS.get(condition.get("operator", "EqualTo"))
    if operator is None:
        raise ValueError(f"Unsupported operator: {condition.get('operator')}")
    actual = record.get(condition.get("fieldName", ""))
    values = condition.get("values") or []
    # Any listed value may satisfy the condition.
    return any(operator(actual, value) for value in values)


def _combine(results: List[bool], operator: str) -> bool:
    if not results:
        return True
    if (operator or "AND").upper() == "OR":
        return any(results)
    return all(results)


def _group_matches(record: Dict[str, Any], group: Dict[str, Any]) -> bool:
    sub_results = []
    for sub_group in group.get("subGroups") or []:
        conditions = sub_group.get("conditions") or []
        sub_results.append(
            _combine([_condition_matches(record, c) for c in conditions], sub_group.get("operator", ""))
        )
    return _combine(sub_results, group.get("operator", "AND"))


class InMemoryRecordStore:
    """Dictionary-backed record store with integer identifiers."""

    def __init__(self, schemas: Optional[Dict[str, TableSchema]] = None, actor: str = "stub"):
        self.schemas: Dict[str, TableSchema] = schemas or {}
        self.actor = actor
        self._tables: Dict[str, Dict[int, Dict[str, Any]]] = {}
        self._next_id: Dict[str, int] = {}

    def _table(self, table: str) -> Dict[int, Dict[str, Any]]:
        return self._tables.setdefault(table, {})

    @staticmethod
    def _key(record_id: Any) -> Optional[int]:
        try:
            return int(record_id)
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _project(record: Dict[str, Any], fields: Optional[List[str]]) -> Dict[str, Any]:
        if not fields:
            return copy.deepcopy(record)
        projected = {"Id": record["Id"]}
        for field in fields:
            if field in record:
                projected[field] = copy.deepcopy(record[field])
        return projected

    def _reject(self, table: str, record: Dict[str, Any], *, creating: bool) -> Optional[Dict[str, Any]]:
        """Per-record failure payload, or None when the record is acceptable."""
        schema = self.schemas.get(table)
        if schema is None:
            return None
        errors = []
        for field in record:
            if field == "Id":
                continue
            if field not in schema.updateable:
                errors.append({"fieldLabel": field, "message": "Field is not updateable"})
        if creating:
            for field in schema.required:
                if not record.get(field):
                    errors.append({"fieldLabel": field, "message": "Field is required"})
        if errors:
            return {"success": False, "message": "Record validation failed", "errors": errors}
        return None

    def seed(self, table: str, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Insert records directly, bypassing validation."""
        return [self._insert(table, record) for record in records]

    def _insert(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        new_id = self._next_id.get(table, 1)
        self._next_id[table] = new_id + 1
        now = _now()
        stored = {
            **copy.deepcopy(record),
            "Id": new_id,
            "CreatedOn": now,
            "CreatedBy": self.actor,
            "ModifiedOn": now,
            "ModifiedBy": self.actor,
        }
        self._table(table)[new_id] = stored
        return copy.deepcopy(stored)

    def fetch_records(self, table: str, params: Dict[str, Any]) -> Dict[str, Any]:
        rows = list(self._table(table).values())

        for condition in params.get("where") or []:
            rows = [row for row in rows if _condition_matches(row, condition)]
        for group in params.get("whereGroups") or []:
            rows = [row for row in rows if _group_matches(row, group)]

        # Stable sorts applied last-key-first give multi-key ordering.
        for order in reversed(params.get("orderBy") or []):
            field = order.get("fieldName", "Id")
            descending = str(order.get("SortType", "ASC")).upper() == "DESC"
            rows.sort(key=lambda row: _text(row.get(field)), reverse=descending)

        total = len(rows)
        paging = params.get("pagingInfo") or {}
        offset = int(paging.get("offset") or 0)
        limit = paging.get("limit")
        rows = rows[offset:] if limit is None else rows[offset:offset + int(limit)]

        fields = params.get("fields")
        return {
            "success": True,
            "data": [self._project(row, fields) for row in rows],
            "totalCount": total,
        }

    def get_record_by_id(self, table: str, record_id: Any, params: Dict[str, Any]) -> Dict[str, Any]:
        key = self._key(record_id)
        row = self._table(table).get(key) if key is not None else None
        return {"success": True, "data": self._project(row, params.get("fields")) if row else None}

    def create_record(self, table: str, params: Dict[str, Any]) -> Dict[str, Any]:
        results = []
        for record in params.get("records") or []:
            rejection = self._reject(table, record, creating=True)
            if rejection:
                results.append(rejection)
                continue
            results.append({"success": True, "data": self._insert(table, record)})
        return {"success": True, "results": results}

    def update_record(self, table: str, params: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._table(table)
        results = []
        for record in params.get("records") or []:
            key = self._key(record.get("Id"))
            if key is None or key not in rows:
                results.append({"success": False, "message": "Record does not exist"})
                continue
            rejection = self._reject(table, record, creating=False)
            if rejection:
                results.append(rejection)
                continue
            changes = {k: copy.deepcopy(v) for k, v in record.items() if k != "Id"}
            rows[key].update(changes)
            rows[key]["ModifiedOn"] = _now()
            rows[key]["ModifiedBy"] = self.actor
            results.append({"success": True, "data": copy.deepcopy(rows[key])})
        return {"success": True, "results": results}

    def delete_record(self, table: str, params: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._table(table)
        results = []
        for record_id in params.get("RecordIds") or []:
            key = self._key(record_id)
            if key is None or key not in rows:
                results.append({"success": False, "message": "Record does not exist"})
                continue
            del rows[key]
            results.append({"success": True, "data": {"Id": key}})
        return {"success": True, "results": results}

"""Table layout shared by the SQL backends.

Each table maps domain field names (camelCase, what callers see) to storage
columns (snake_case, what the database holds). Translation happens only here,
at the storage boundary.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class TableSpec:
    name: str
    # (domain field, column) in DDL order; the first entry is the primary key.
    fields: Tuple[Tuple[str, str], ...]
    auto_id: bool = False
    order_by: str = "id ASC"
    default_limit: Optional[int] = None
    bool_columns: FrozenSet[str] = frozenset()
    json_columns: FrozenSet[str] = frozenset()
    unique_columns: FrozenSet[str] = frozenset()
    # Operations the HTTP handler accepts for the table besides GET/POST.
    replace: bool = False
    bulk: bool = False
    patch: bool = False
    # Fields a PATCH may touch; None means any non-key field.
    patch_fields: Optional[FrozenSet[str]] = None
    delete: bool = True
    column_types: Dict[str, str] = field(default_factory=dict)

    @property
    def key_field(self) -> str:
        return self.fields[0][0]

    @property
    def key_column(self) -> str:
        return self.fields[0][1]

    @property
    def columns(self) -> List[str]:
        return [c for _, c in self.fields]

    def column_for(self, field_name: str) -> Optional[str]:
        for f, c in self.fields:
            if f == field_name:
                return c
        return None

    def to_row(self, record: Dict[str, Any], *, include_key: bool = True) -> Dict[str, Any]:
        """Domain record -> column values. Unknown fields are ignored."""

        row: Dict[str, Any] = {}
        for f, c in self.fields:
            if not include_key and c == self.key_column:
                continue
            if f not in record:
                continue
            value = record[f]
            if c in self.json_columns and value is not None:
                value = json.dumps(list(value))
            elif c in self.bool_columns and value is not None:
                value = 1 if value else 0
            row[c] = value
        return row

    def to_record(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Column values -> domain record."""

        record: Dict[str, Any] = {}
        for f, c in self.fields:
            value = row.get(c)
            if c in self.json_columns and isinstance(value, (str, bytes, bytearray)):
                value = json.loads(value)
            elif c in self.bool_columns and value is not None:
                value = bool(value)
            record[f] = value
        return record


EQUIPMENT = TableSpec(
    name="equipment",
    fields=(
        ("id", "id"),
        ("category", "category"),
        ("brand", "brand"),
        ("model", "model"),
        ("serialNumber", "serial_number"),
        ("installationDate", "installation_date"),
        ("status", "status"),
        ("division", "division"),
        ("location", "location"),
        ("calibrationMeasuringPoint", "calibration_point"),
        ("personInCharge", "pic"),
        ("image", "image"),
        ("calibrationCert", "cal_cert"),
        ("verificationCert", "ver_cert"),
    ),
    order_by="id ASC",
    replace=True,
    bulk=True,
    column_types={"image": "long", "cal_cert": "long", "ver_cert": "long"},
)

USERS = TableSpec(
    name="users",
    fields=(
        ("id", "id"),
        ("name", "name"),
        ("email", "email"),
        ("role", "role"),
        ("avatar", "avatar"),
        ("passwordHash", "password_hash"),
        ("status", "status"),
    ),
    order_by="name ASC",
    unique_columns=frozenset({"email"}),
    patch=True,
    column_types={"avatar": "long"},
)

AUDIT_LOGS = TableSpec(
    name="audit_logs",
    fields=(
        ("id", "id"),
        ("action", "action"),
        ("targetId", "target_id"),
        ("targetName", "target_name"),
        ("userId", "user_id"),
        ("userName", "user_name"),
        ("timestamp", "timestamp"),
        ("details", "details"),
    ),
    auto_id=True,
    order_by="timestamp DESC, id DESC",
    default_limit=100,
    delete=False,
)

NOTIFICATIONS = TableSpec(
    name="notifications",
    fields=(
        ("id", "id"),
        ("title", "title"),
        ("message", "message"),
        ("timestamp", "timestamp"),
        ("isRead", "is_read"),
        ("type", "type"),
    ),
    auto_id=True,
    order_by="timestamp DESC, id DESC",
    default_limit=20,
    bool_columns=frozenset({"is_read"}),
    patch=True,
    patch_fields=frozenset({"isRead"}),
)

EVENTS = TableSpec(
    name="events",
    fields=(
        ("id", "id"),
        ("title", "title"),
        ("description", "description"),
        ("startDate", "start_date"),
        ("endDate", "end_date"),
        ("type", "type"),
        ("equipmentId", "equipment_id"),
        ("createdBy", "created_by"),
    ),
    auto_id=True,
    order_by="start_date ASC, id ASC",
)

JOB_REQUESTS = TableSpec(
    name="job_requests",
    fields=(
        ("id", "id"),
        ("title", "title"),
        ("requestorId", "requestor_id"),
        ("requestorName", "requestor_name"),
        ("division", "division"),
        ("description", "description"),
        ("category", "category"),
        ("requestedAt", "requested_at"),
        ("startDate", "start_date"),
        ("dueDate", "due_date"),
        ("assignedToId", "assigned_to_id"),
        ("status", "status"),
        ("completionComment", "completion_comment"),
    ),
    auto_id=True,
    order_by="requested_at DESC, id DESC",
    replace=True,
    patch=True,
)

SETTINGS = TableSpec(
    name="settings",
    fields=(
        ("id", "id"),
        ("values", "setting_values"),
    ),
    order_by="id ASC",
    json_columns=frozenset({"setting_values"}),
    column_types={"setting_values": "long"},
    replace=True,
    delete=False,
)

TABLES: Dict[str, TableSpec] = {
    spec.name: spec
    for spec in (EQUIPMENT, USERS, AUDIT_LOGS, NOTIFICATIONS, EVENTS, JOB_REQUESTS, SETTINGS)
}

# Creation order; drop happens in reverse.
TABLE_ORDER: Sequence[str] = tuple(TABLES)


def get_table(name: str) -> Optional[TableSpec]:
    return TABLES.get(name)

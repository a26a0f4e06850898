from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for permission checks."""

    ADMIN = "Admin"
    SUPPORTING = "Supporting"
    MANAGER = "Manager"
    SUPERVISOR = "Supervisor"
    CHEMIST = "Chemist"
    ANALYST = "Analyst"


# Roles allowed to write equipment, manage users/schedule and drive job requests.
SUPPORT_ROLES = frozenset({Role.ADMIN, Role.SUPPORTING})

# Roles allowed to open new job requests.
REQUESTOR_ROLES = frozenset({Role.ADMIN, Role.MANAGER, Role.SUPERVISOR, Role.CHEMIST})

# Roles that can read the audit trail.
AUDIT_VIEW_ROLES = frozenset({Role.ADMIN, Role.SUPPORTING, Role.MANAGER, Role.SUPERVISOR})


class EquipmentStatus(str, Enum):
    """Descriptive equipment state. Any state may follow any other."""

    OK = "OK"
    SERVICE = "Service"
    CALIBRATION = "Calibration"
    VERIFICATION = "Verification"
    UNUSED = "Unused"


class Division(str, Enum):
    ASLT = "ASLT"
    GCS = "GC-S"
    LOGAM = "LOGAM"
    MS = "MS"
    HPLC = "HPLC"
    EXTERNAL_PROJECT = "External Project"


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    RESET = "RESET"
    IMPORT = "IMPORT"


class NotificationType(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    SYSTEM = "system"


class EventType(str, Enum):
    MAINTENANCE = "Maintenance"
    CALIBRATION = "Calibration"
    VERIFICATION = "Verification"


class JobRequestStatus(str, Enum):
    """Job request workflow state (see job_requests.state_machine)."""

    REQUESTS = "Requests"
    ON_PROGRESS = "OnProgress"
    FINISHED = "Finished"
    REJECTED = "Rejected"


class JobCategory(str, Enum):
    MAINTENANCE = "Maintenance"
    TROUBLESHOOTING = "Troubleshooting"
    DOCUMENTS = "Documents"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"

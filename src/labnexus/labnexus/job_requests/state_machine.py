"""Job request workflow.

Requests -> OnProgress -> Finished, with Rejected reachable from both open
states. Supporting/Admin may reopen a closed request: Finished -> OnProgress
and Rejected -> Requests. Closing (Finished or Rejected) needs a comment;
every other target state clears it.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Optional

from ..core.enums import SUPPORT_ROLES, JobRequestStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError

S = JobRequestStatus

TRANSITIONS: Dict[JobRequestStatus, FrozenSet[JobRequestStatus]] = {
    S.REQUESTS: frozenset({S.ON_PROGRESS, S.REJECTED}),
    S.ON_PROGRESS: frozenset({S.FINISHED, S.REJECTED}),
    S.FINISHED: frozenset({S.ON_PROGRESS}),
    S.REJECTED: frozenset({S.REQUESTS}),
}

CLOSED_STATES = frozenset({S.FINISHED, S.REJECTED})


def can_transition(current: JobRequestStatus, target: JobRequestStatus) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def requires_comment(target: JobRequestStatus) -> bool:
    return target in CLOSED_STATES


def check_transition(
    *,
    role: Role,
    current: JobRequestStatus,
    target: JobRequestStatus,
    comment: Optional[str],
) -> Optional[str]:
    """Validate a status change and return the comment to store (None clears it)."""

    if role not in SUPPORT_ROLES:
        raise AuthorizationError("Only Admin or Supporting users can change the status of a job request")
    if current == target:
        raise ValidationError(f"Job request is already {target.value}")
    if not can_transition(current, target):
        raise ValidationError(f"Cannot move a job request from {current.value} to {target.value}")

    if requires_comment(target):
        comment = (comment or "").strip()
        if not comment:
            raise ValidationError(f"A comment is required to mark a request as {target.value}")
        return comment
    return None

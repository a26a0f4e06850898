from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, timedelta
from typing import Callable, List, Optional

from ..api.client import DataClient
from ..common.datetime_utils import now_iso
from ..common.validators import optional_enum, require_enum, require_non_empty
from ..core.enums import REQUESTOR_ROLES, SUPPORT_ROLES, AuditAction, Division, JobCategory, JobRequestStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..notifications.audit import AuditTrail
from ..users.model import SessionUser
from .model import JobRequest
from .state_machine import check_transition

logger = logging.getLogger(__name__)

DEFAULT_DUE_DAYS = 7
SUBJECT = "Job Request"


def _target_id(request_id) -> str:
    return f"JOB-{request_id}"


class JobRequestService:
    """Use cases of the Supporting team's job request board."""

    def __init__(self, client: DataClient, audit: AuditTrail, *, clock: Callable[[], str] = now_iso):
        self._client = client
        self._audit = audit
        self._clock = clock

    def list(self) -> List[JobRequest]:
        return self._client.job_requests.list()

    def get(self, request_id: int) -> JobRequest:
        req = self._client.job_requests.get(request_id)
        if not req:
            raise NotFoundError("Job request does not exist")
        return req

    def _require_assignee(self, user_id: Optional[str]) -> str:
        user_id = require_non_empty(user_id, "Assigned To")
        user = self._client.users.get(user_id)
        if not user or user.role not in SUPPORT_ROLES:
            raise ValidationError("Job requests can only be assigned to Supporting or Admin users")
        return user.id

    @staticmethod
    def _check_category(actor: SessionUser, category, current: Optional[JobCategory]) -> Optional[JobCategory]:
        category = optional_enum(JobCategory, category, "Category")
        if category is None or category == current:
            return current
        if actor.role not in SUPPORT_ROLES:
            raise AuthorizationError("Category is determined by the Supporting team")
        return category

    def create(
        self,
        *,
        actor: SessionUser,
        title: str,
        description: str,
        division,
        assigned_to_id: str,
        category=None,
        start_date: Optional[str] = None,
        due_date: Optional[str] = None,
    ) -> JobRequest:
        if actor.role not in REQUESTOR_ROLES:
            raise AuthorizationError("Your role cannot create job requests")

        today = date.today()
        req = JobRequest(
            title=require_non_empty(title, "Title"),
            description=require_non_empty(description, "Description"),
            division=require_enum(Division, division, "Division"),
            requestor_id=actor.id,
            requestor_name=actor.name,
            requested_at=self._clock(),
            assigned_to_id=self._require_assignee(assigned_to_id),
            category=self._check_category(actor, category, None),
            start_date=(start_date or "").strip() or today.isoformat(),
            due_date=(due_date or "").strip() or (today + timedelta(days=DEFAULT_DUE_DAYS)).isoformat(),
        )
        request_id = self._client.job_requests.add(req)
        req = replace(req, id=request_id)

        self._audit.record(actor, AuditAction.CREATE, target_id=_target_id(request_id), target_name=req.title, subject=SUBJECT)
        return req

    def update_content(
        self,
        *,
        actor: SessionUser,
        request_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
        division=None,
        assigned_to_id: Optional[str] = None,
        category=None,
        start_date: Optional[str] = None,
        due_date: Optional[str] = None,
    ) -> JobRequest:
        """Edit everything but the workflow state. Status goes through change_status."""

        req = self.get(request_id)
        if actor.id != req.requestor_id and actor.role not in SUPPORT_ROLES:
            raise AuthorizationError("Only the requestor or the Supporting team can edit this request")

        changes = {}
        if title is not None:
            changes["title"] = require_non_empty(title, "Title")
        if description is not None:
            changes["description"] = require_non_empty(description, "Description")
        if division is not None:
            changes["division"] = require_enum(Division, division, "Division")
        if assigned_to_id is not None and assigned_to_id != req.assigned_to_id:
            changes["assigned_to_id"] = self._require_assignee(assigned_to_id)
        if start_date is not None:
            changes["start_date"] = start_date.strip() or None
        if due_date is not None:
            changes["due_date"] = due_date.strip() or None
        changes["category"] = self._check_category(actor, category, req.category)

        updated = replace(req, **changes)
        if not self._client.job_requests.put(updated):
            raise NotFoundError("Job request does not exist")

        self._audit.record(actor, AuditAction.UPDATE, target_id=_target_id(req.id), target_name=updated.title, subject=SUBJECT)
        return updated

    def change_status(
        self,
        *,
        actor: SessionUser,
        request_id: int,
        status,
        comment: Optional[str] = None,
    ) -> JobRequest:
        req = self.get(request_id)
        target = require_enum(JobRequestStatus, status, "Status")
        stored_comment = check_transition(role=actor.role, current=req.status, target=target, comment=comment)

        if not self._client.job_requests.update_status(req.id, target, completion_comment=stored_comment):
            raise NotFoundError("Job request does not exist")
        logger.info("job request %s: %s -> %s", req.id, req.status.value, target.value)

        updated = replace(req, status=target, completion_comment=stored_comment)
        self._audit.record(
            actor,
            AuditAction.UPDATE,
            target_id=_target_id(req.id),
            target_name=req.title,
            subject=SUBJECT,
            details=f"Status: {req.status.value} -> {target.value}",
        )
        return updated

    def delete(self, *, actor: SessionUser, request_id: int) -> None:
        req = self.get(request_id)
        if actor.id != req.requestor_id and actor.role not in SUPPORT_ROLES:
            raise AuthorizationError("Only the requestor or the Supporting team can cancel this request")
        if not self._client.job_requests.delete(req.id):
            raise NotFoundError("Job request does not exist")

        self._audit.record(actor, AuditAction.DELETE, target_id=_target_id(req.id), target_name=req.title, subject=SUBJECT)

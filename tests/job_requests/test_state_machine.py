from __future__ import annotations

import pytest

from src.labnexus.labnexus.core.enums import JobRequestStatus as S
from src.labnexus.labnexus.core.enums import Role
from src.labnexus.labnexus.core.exceptions import AuthorizationError, ValidationError
from src.labnexus.labnexus.job_requests.state_machine import can_transition, check_transition


@pytest.mark.parametrize(
    "current,target",
    [
        (S.REQUESTS, S.ON_PROGRESS),
        (S.REQUESTS, S.REJECTED),
        (S.ON_PROGRESS, S.FINISHED),
        (S.ON_PROGRESS, S.REJECTED),
        (S.FINISHED, S.ON_PROGRESS),
        (S.REJECTED, S.REQUESTS),
    ],
)
def test_allowed_transitions(current, target):
    assert can_transition(current, target)


@pytest.mark.parametrize(
    "current,target",
    [
        (S.REQUESTS, S.FINISHED),
        (S.ON_PROGRESS, S.REQUESTS),
        (S.FINISHED, S.REJECTED),
        (S.REJECTED, S.FINISHED),
    ],
)
def test_disallowed_transitions(current, target):
    assert not can_transition(current, target)
    with pytest.raises(ValidationError):
        check_transition(role=Role.ADMIN, current=current, target=target, comment="done")


def test_closing_requires_comment():
    with pytest.raises(ValidationError):
        check_transition(role=Role.SUPPORTING, current=S.ON_PROGRESS, target=S.FINISHED, comment="  ")
    assert check_transition(role=Role.SUPPORTING, current=S.ON_PROGRESS, target=S.FINISHED, comment=" ok ") == "ok"


def test_other_targets_clear_comment():
    assert check_transition(role=Role.ADMIN, current=S.FINISHED, target=S.ON_PROGRESS, comment="stale") is None


def test_requestor_roles_cannot_drive_status():
    with pytest.raises(AuthorizationError):
        check_transition(role=Role.CHEMIST, current=S.REQUESTS, target=S.ON_PROGRESS, comment=None)


def test_same_state_is_rejected():
    with pytest.raises(ValidationError):
        check_transition(role=Role.ADMIN, current=S.REQUESTS, target=S.REQUESTS, comment=None)

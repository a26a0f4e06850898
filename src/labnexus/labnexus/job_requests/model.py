from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Division, JobCategory, JobRequestStatus


@dataclass(frozen=True)
class JobRequest:
    title: str
    requestor_id: str
    requestor_name: str
    division: Division
    requested_at: str
    status: JobRequestStatus = JobRequestStatus.REQUESTS
    description: str = ""
    category: Optional[JobCategory] = None
    start_date: Optional[str] = None
    due_date: Optional[str] = None
    assigned_to_id: Optional[str] = None
    completion_comment: Optional[str] = None
    id: Optional[int] = None

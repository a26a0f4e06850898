from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Division, EquipmentStatus


@dataclass(frozen=True)
class Equipment:
    """Domain entity: one laboratory asset.

    ``id`` is supplied by the user and never generated. ``person_in_charge``
    holds a user's display name, not an id.
    """

    id: str
    category: str
    brand: str
    division: Division
    status: EquipmentStatus = EquipmentStatus.OK
    model: str = ""
    serial_number: str = ""
    installation_date: str = ""
    location: Optional[str] = None
    calibration_measuring_point: Optional[str] = None
    person_in_charge: Optional[str] = None
    image: Optional[str] = None
    calibration_cert: Optional[str] = None
    verification_cert: Optional[str] = None

    @property
    def display_name(self) -> str:
        return f"{self.brand} {self.model}".strip()


@dataclass(frozen=True)
class DashboardStats:
    total: int
    operational: int
    maintenance_due: int
    critical: int
    unused: int

from __future__ import annotations

import json
import logging
from collections import Counter
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..api.client import DataClient
from ..common.validators import require_enum, require_max_bytes, require_non_empty
from ..core.constants import MAX_CERT_BYTES, MAX_IMAGE_BYTES
from ..core.enums import SUPPORT_ROLES, AuditAction, Division, EquipmentStatus
from ..core.exceptions import ApiError, AuthorizationError, NotFoundError, ValidationError
from ..notifications.audit import AuditTrail
from ..users.model import SessionUser, User
from .cache import InventoryCache, InventoryView
from .categories import CategoryService
from .model import DashboardStats, Equipment

logger = logging.getLogger(__name__)


def _text(data: Mapping[str, Any], key: str) -> str:
    v = data.get(key)
    return str(v).strip() if v is not None else ""


def _optional_text(data: Mapping[str, Any], key: str) -> Optional[str]:
    return _text(data, key) or None


def match_person_in_charge(name: Optional[str], users: Sequence[User]) -> Optional[str]:
    """Resolve a person-in-charge name against registered users.

    Matching is exact but case-insensitive; the user's own spelling is
    returned. Empty input means "nobody" and resolves to None.
    """

    wanted = (name or "").strip()
    if not wanted:
        return None
    for user in users:
        if user.name.lower() == wanted.lower():
            return user.name
    raise ValidationError("Person in Charge must be selected from the list of registered users")


class EquipmentService:
    """Use cases around equipment: save, delete, bulk import, dashboard."""

    def __init__(
        self,
        client: DataClient,
        audit: AuditTrail,
        categories: CategoryService,
        cache: InventoryCache,
    ):
        self._client = client
        self._audit = audit
        self._categories = categories
        self._cache = cache

    @staticmethod
    def _require_editor(actor: SessionUser) -> None:
        if actor.role not in SUPPORT_ROLES:
            raise AuthorizationError("Only Admin or Supporting users can modify equipment")

    def build(self, data: Mapping[str, Any], users: Sequence[User]) -> Equipment:
        """Validate a submitted form and turn it into an Equipment.

        Raises ValidationError before anything is written.
        """

        equipment_id = _text(data, "id")
        category = _text(data, "category")
        brand = _text(data, "brand")
        division = data.get("division")
        if not equipment_id or not category or not brand or not division:
            raise ValidationError("Please fill in all required fields (ID, Category, Brand, Division)")

        return Equipment(
            id=equipment_id,
            category=category,
            brand=brand,
            division=require_enum(Division, division, "Division"),
            status=require_enum(EquipmentStatus, data.get("status") or EquipmentStatus.OK, "Status"),
            model=_text(data, "model"),
            serial_number=_text(data, "serialNumber"),
            installation_date=_text(data, "installationDate"),
            location=_optional_text(data, "location"),
            calibration_measuring_point=_optional_text(data, "calibrationMeasuringPoint"),
            person_in_charge=match_person_in_charge(data.get("personInCharge"), users),
            image=require_max_bytes(data.get("image"), "Image", MAX_IMAGE_BYTES),
            calibration_cert=require_max_bytes(data.get("calibrationCert"), "Calibration certificate", MAX_CERT_BYTES),
            verification_cert=require_max_bytes(data.get("verificationCert"), "Verification certificate", MAX_CERT_BYTES),
        )

    def _extend_categories(self, categories) -> None:
        # Secondary step: the equipment is already stored.
        for category in dict.fromkeys(categories):
            try:
                self._categories.ensure(category)
            except ApiError:
                logger.exception("category %r could not be added", category)

    def list(self) -> List[Equipment]:
        return self._client.equipment.list()

    def get(self, equipment_id: str) -> Equipment:
        item = self._client.equipment.get(require_non_empty(equipment_id, "ID"))
        if not item:
            raise NotFoundError(f"Equipment {equipment_id} does not exist")
        return item

    def save(self, *, actor: SessionUser, data: Mapping[str, Any], is_new: bool) -> InventoryView:
        self._require_editor(actor)

        item = self.build(data, self._client.users.list())
        existing = self._client.equipment.get(item.id)
        if is_new:
            if existing:
                raise ValidationError(f"Equipment ID {item.id} already exists")
            self._client.equipment.add(item)
            action = AuditAction.CREATE
        else:
            if not existing:
                raise NotFoundError(f"Equipment {item.id} does not exist")
            if not self._client.equipment.put(item):
                raise NotFoundError(f"Equipment {item.id} does not exist")
            action = AuditAction.UPDATE

        self._extend_categories([item.category])
        self._audit.record(actor, action, target_id=item.id, target_name=item.display_name)
        return self._cache.refresh()

    def delete(self, *, actor: SessionUser, equipment_id: str) -> InventoryView:
        self._require_editor(actor)

        # Read before delete so the audit entry carries the current name.
        item = self.get(equipment_id)
        if not self._client.equipment.delete(item.id):
            raise NotFoundError(f"Equipment {item.id} does not exist")

        self._audit.record(actor, AuditAction.DELETE, target_id=item.id, target_name=item.display_name)
        return self._cache.refresh()

    def bulk_import(self, *, actor: SessionUser, rows: Sequence[Mapping[str, Any]]) -> InventoryView:
        """Upsert a whole collection in one call and log a single IMPORT entry."""

        self._require_editor(actor)
        if not rows:
            raise ValidationError("Nothing to import")

        users = self._client.users.list()
        items: Dict[str, Equipment] = {}
        for n, row in enumerate(rows, start=1):
            try:
                item = self.build(row, users)
            except ValidationError as e:
                raise ValidationError(f"Row {n}: {e}") from e
            # Duplicate ids inside one import: the later row wins.
            items[item.id] = item

        written = self._client.equipment.bulk_put(list(items.values()))
        self._extend_categories(i.category for i in items.values())

        self._audit.record(
            actor,
            AuditAction.IMPORT,
            target_id="BULK",
            target_name="Equipment import",
            details=f"{written} rows imported",
        )
        return self._cache.refresh()

    def add_category(self, *, actor: SessionUser, category: str) -> List[str]:
        self._require_editor(actor)
        self._categories.ensure(require_non_empty(category, "Category"))
        return self._categories.list()

    def dashboard_stats(self, items: Optional[Sequence[Equipment]] = None) -> DashboardStats:
        if items is None:
            items = self._cache.view.equipment
        counts = Counter(i.status for i in items)
        return DashboardStats(
            total=len(items),
            operational=counts[EquipmentStatus.OK],
            maintenance_due=counts[EquipmentStatus.CALIBRATION] + counts[EquipmentStatus.VERIFICATION],
            critical=counts[EquipmentStatus.SERVICE],
            unused=counts[EquipmentStatus.UNUSED],
        )

    def assistant_snapshot(self, items: Optional[Sequence[Equipment]] = None) -> str:
        """Read-only JSON context handed to the chat assistant."""

        if items is None:
            items = self._client.equipment.list()
        return json.dumps(
            [
                {
                    "id": i.id,
                    "category": i.category,
                    "division": i.division.value,
                    "status": i.status.value,
                    "brand": i.brand,
                    "model": i.model,
                    "installDate": i.installation_date,
                }
                for i in items
            ],
            ensure_ascii=False,
        )

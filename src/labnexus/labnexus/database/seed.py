"""Default data written on first run and after a global reset."""

from __future__ import annotations

from typing import Dict, List

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import now_iso
from ..core.constants import CATEGORIES_SETTING_ID, DATABASE_TARGET_ID
from ..core.enums import AuditAction, Division, EquipmentStatus, JobCategory, JobRequestStatus, Role, UserStatus

SEED_CATEGORIES: List[str] = [
    "HPLC",
    "LC-MS",
    "GC-MS",
    "Spectrophotometer",
    "pH Meter",
    "Centrifuge",
    "Analytical Balance",
    "Fume Hood",
    "Micropipette",
    "Ultrasonic",
]

# (id, name, email, role, avatar, password)
_SEED_USERS = [
    ("1", "Administrator", "admin@sss.com", Role.ADMIN, "https://picsum.photos/id/64/100/100", "admin"),
    ("2", "Fauzan Rizqy Kanz", "fauzan.rizqy@siglaboratory.co.id", Role.SUPPORTING, "https://picsum.photos/id/65/100/100", "supporting"),
    ("3", "Muhammad Luthfi Alfiyansyah", "luthfialfiyansyah@siglaboratory.co.id", Role.SUPPORTING, "https://picsum.photos/id/65/100/100", "supporting"),
    ("4", "Rizqi Utomo", "tomo@siglaboratory.co.id", Role.SUPPORTING, "https://picsum.photos/id/65/100/100", "supporting"),
    ("5", "Emily Chen", "chemist@labnexus.com", Role.CHEMIST, "https://picsum.photos/id/66/100/100", "1234"),
    ("6", "Mike Ross", "analyst@labnexus.com", Role.ANALYST, "https://picsum.photos/id/67/100/100", "1234"),
]


def _equipment(id, category, brand, model, serial, installed, location, point, pic) -> Dict:
    return {
        "id": id,
        "category": category,
        "brand": brand,
        "model": model,
        "serialNumber": serial,
        "installationDate": installed,
        "status": EquipmentStatus.OK.value,
        "division": Division.MS.value,
        "location": location,
        "calibrationMeasuringPoint": point,
        "personInCharge": pic,
        "image": None,
        "calibrationCert": None,
        "verificationCert": None,
    }


SEED_EQUIPMENT: List[Dict] = [
    _equipment("SIG/FNA/ALB/AP-1096", "Analytical Balance", "Mettler Toledo", "ME2O4TE/OO", "COO3913936", "2025-01-01",
               "R. Timbang MS Lt. 3 Gd. B", "0g, 10g, 50g, 100g, 200g", "Rizqi Utomo"),
    _equipment("SIG/FNA/ALB/IN-0249", "GC-MS", "Shimadzu", "GCMS-QP2020NX", "O21746003467", "2025-01-01",
               "R. Instrumen GC Lt. 3 Gd. B", "50-400 m/z", "Fauzan Rizqy Kanz"),
    _equipment("SIG/FNA/ALB/AP-1367", "Micropipette", "Eppendorf", "Reasearch Plus", "G29523K", "2025-01-21",
               "R. Preparasi GC Lt. 3 Gd. B", "10µL, 50µL, 100µL", "Muhammad Luthfi Alfiyansyah"),
    _equipment("SIG/FNA/ALB/AP-1710", "pH Meter", "Horiba Scientific", "LAQUA-PC2000", "JK1J0020", "2025-01-01",
               "R. Preparasi LC Lt. 3 Gd. B", "pH 4.01, pH 7.00, pH 10.01", "Emily Chen"),
    _equipment("SIG/FNA/ALB/AP-2508", "Centrifuge", "Thermo Scientific", "Sorvall ST 8", "42866914", "2025-01-01",
               "R. Preparasi LC Lt. 3 Gd. B", "1000rpm, 3000rpm, 5000rpm", "Mike Ross"),
    _equipment("SIG/FNA/ALB/IN-0246", "LC-MS", "Shimadzu", "LCMS-8045", "O11405900935", "2025-01-21",
               "R. Instrumen LC Lt. 3 Gd. B", "Flow 0.5mL/min, Temp 40°C", "Fauzan Rizqy Kanz"),
    _equipment("SIG/FNA/ALB/AP-1925", "Ultrasonic", "Elma", "S300H - 28L", "1106995-001", "2025-01-01",
               "R. Preparasi LC Lt. 3 Gd. B", "Frequency 37kHz", "Rizqi Utomo"),
]

SEED_JOB_REQUESTS: List[Dict] = [
    {
        "title": "Calibrate analytical balance before audit",
        "requestorId": "5",
        "requestorName": "Emily Chen",
        "division": Division.MS.value,
        "description": "Balance AP-1096 drifts by 0.2 mg at 200 g. Please calibrate before the external audit.",
        "category": JobCategory.MAINTENANCE.value,
        "requestedAt": "2025-02-03T08:15:00.000Z",
        "startDate": "2025-02-04",
        "dueDate": "2025-02-10",
        "assignedToId": "4",
        "status": JobRequestStatus.ON_PROGRESS.value,
        "completionComment": None,
    },
    {
        "title": "Upload LC-MS qualification documents",
        "requestorId": "1",
        "requestorName": "Administrator",
        "division": Division.MS.value,
        "description": "Scan and attach the IQ/OQ documents for LCMS-8045.",
        "category": None,
        "requestedAt": "2025-02-05T09:30:00.000Z",
        "startDate": "2025-02-06",
        "dueDate": "2025-02-20",
        "assignedToId": None,
        "status": JobRequestStatus.REQUESTS.value,
        "completionComment": None,
    },
]


def seed_users() -> List[Dict]:
    return [
        {
            "id": uid,
            "name": name,
            "email": email,
            "role": role.value,
            "avatar": avatar,
            "passwordHash": generate_password_hash(password),
            "status": UserStatus.ACTIVE.value,
        }
        for uid, name, email, role, avatar, password in _SEED_USERS
    ]


def seed_defaults(backend) -> Dict[str, int]:
    """Write the default data set through the backend's table stores.

    Callers guard this with an emptiness check on the users table.
    """

    users = seed_users()
    for user in users:
        backend.table("users").insert(user)
    backend.table("equipment").bulk_upsert(SEED_EQUIPMENT)
    backend.table("settings").bulk_upsert([{"id": CATEGORIES_SETTING_ID, "values": list(SEED_CATEGORIES)}])
    for req in SEED_JOB_REQUESTS:
        backend.table("job_requests").insert(dict(req))
    backend.table("audit_logs").insert(
        {
            "action": AuditAction.IMPORT.value,
            "targetId": DATABASE_TARGET_ID,
            "targetName": "Default inventory",
            "userId": "system",
            "userName": "System",
            "timestamp": now_iso(),
            "details": "Initial data seeded",
        }
    )
    return {
        "users": len(users),
        "equipment": len(SEED_EQUIPMENT),
        "categories": len(SEED_CATEGORIES),
        "job_requests": len(SEED_JOB_REQUESTS),
    }

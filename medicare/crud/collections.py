# FILE: medicare/crud/collections.py
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Session

from medicare.models.document import Document
from medicare.schemas.emr import (
    Appointment,
    Notification,
    Patient,
    Prescription,
    Treatment,
    User,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(dt: datetime) -> str:
    return dt.isoformat().replace("+00:00", "Z")


class DocumentCollection(Generic[M]):
    """
    A named collection of JSON documents in the `documents` table.

    Reads return validated `schema` instances; writes accept pydantic models
    (dumped by alias, so stored keys stay camelCase) or plain dicts.
    """

    def __init__(self, name: str, schema: Type[M]):
        self.name = name
        self.schema = schema

    # ---------- helpers ----------
    def _to_model(self, row: Document) -> M:
        return self.schema.model_validate({**(row.data or {}), "id": row.id})

    @staticmethod
    def _dump(data: Any, *, partial: bool = False) -> Dict[str, Any]:
        if isinstance(data, BaseModel):
            return data.model_dump(mode="json",
                                   by_alias=True,
                                   exclude_unset=partial)
        return dict(data or {})

    def _row(self, db: Session, doc_id: str) -> Optional[Document]:
        return (db.query(Document).filter(
            Document.collection == self.name,
            Document.id == doc_id,
        ).first())

    # ---------- reads ----------
    def get_all(self, db: Session) -> List[M]:
        rows = (db.query(Document).filter(
            Document.collection == self.name).order_by(
                Document.created_at.desc(), Document.pk.desc()).all())
        return [self._to_model(r) for r in rows]

    def get_by_patient(self, db: Session, patient_id: str) -> List[M]:
        rows = (db.query(Document).filter(
            Document.collection == self.name,
            Document.patient_id == patient_id,
        ).order_by(Document.created_at.desc(), Document.pk.desc()).all())
        return [self._to_model(r) for r in rows]

    def find(self, db: Session, **match: Any) -> List[M]:
        """Newest-first documents whose fields equal every `match` value."""
        return [
            m for m in self.get_all(db)
            if all(getattr(m, k, None) == v for k, v in match.items())
        ]

    def get(self, db: Session, doc_id: str) -> Optional[M]:
        row = self._row(db, doc_id)
        return self._to_model(row) if row else None

    # ---------- writes ----------
    def create(self, db: Session, data: Any) -> M:
        now = _now()
        body = self._dump(data)
        body.pop("id", None)
        body["createdAt"] = _iso(now)
        body["updatedAt"] = _iso(now)

        row = Document(
            id=str(uuid.uuid4()),
            collection=self.name,
            patient_id=body.get("patientId"),
            data=body,
            created_at=now,
            updated_at=now,
        )
        db.add(row)
        db.commit()
        db.refresh(row)
        logger.info("Created %s/%s", self.name, row.id)
        return self._to_model(row)

    def update(self, db: Session, doc_id: str, partial: Any) -> Optional[M]:
        row = self._row(db, doc_id)
        if not row:
            return None
        now = _now()
        changes = self._dump(partial, partial=True)
        for k in ("id", "createdAt"):
            changes.pop(k, None)

        # JSON columns only notice reassignment, not in-place mutation
        body = {**(row.data or {}), **changes, "updatedAt": _iso(now)}
        self.schema.model_validate({**body, "id": row.id})

        row.data = body
        row.patient_id = body.get("patientId")
        row.updated_at = now
        db.commit()
        db.refresh(row)
        logger.info("Updated %s/%s (%s)", self.name, row.id,
                    ", ".join(sorted(changes)) or "no fields")
        return self._to_model(row)

    def delete(self, db: Session, doc_id: str) -> bool:
        row = self._row(db, doc_id)
        if not row:
            return False
        db.delete(row)
        db.commit()
        logger.info("Deleted %s/%s", self.name, doc_id)
        return True


patients = DocumentCollection("patients", Patient)
prescriptions = DocumentCollection("prescriptions", Prescription)
treatments = DocumentCollection("treatments", Treatment)
notifications = DocumentCollection("notifications", Notification)
appointments = DocumentCollection("appointments", Appointment)
users = DocumentCollection("users", User)


# ---------- collection-specific writes ----------
def dispense_prescription(db: Session, prescription_id: str,
                          dispensed_by: str) -> Optional[Prescription]:
    return prescriptions.update(
        db, prescription_id, {
            "dispensed": True,
            "dispensedAt": _iso(_now()),
            "dispensedBy": dispensed_by,
            "status": "completed",
        })


def mark_notification_read(db: Session,
                           notification_id: str) -> Optional[Notification]:
    return notifications.update(db, notification_id, {
        "read": True,
        "readAt": _iso(_now()),
    })

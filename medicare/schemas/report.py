# FILE: medicare/schemas/report.py
"""
Report input snapshots.

Looser than the stored-entity schemas. Only the patient name is required,
and the engine checks it; anything else may be missing or malformed.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, List, Optional, Union

from pydantic import ConfigDict, field_validator

from medicare.schemas.emr import EmrModel


class SnapshotModel(EmrModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


def _list_of_str(v: Any) -> Any:
    if v is None:
        return []
    if isinstance(v, str):
        return [v]
    return [str(x) for x in v if x is not None]


class PatientSnapshot(SnapshotModel):
    id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[Union[date, str]] = None
    gender: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    blood_type: Optional[str] = None
    allergies: List[str] = []
    medical_history: List[str] = []
    current_medications: List[str] = []
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    status: Optional[str] = "active"

    @field_validator("allergies",
                     "medical_history",
                     "current_medications",
                     mode="before")
    @classmethod
    def _lists(cls, v: Any) -> Any:
        return _list_of_str(v)


class PrescriptionSnapshot(SnapshotModel):
    id: Optional[str] = None
    patient_id: Optional[str] = None
    medication: Optional[str] = None
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    duration: Optional[str] = None
    instructions: Optional[str] = None
    prescribed_by_name: Optional[str] = None
    status: Optional[str] = None


class TreatmentSnapshot(SnapshotModel):
    id: Optional[str] = None
    patient_id: Optional[str] = None
    treatment_type: Optional[str] = None
    description: Optional[str] = None
    diagnosis: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    scheduled_date: Optional[Union[datetime, str]] = None
    created_by_name: Optional[str] = None


class ReportPayload(EmrModel):
    """Body of POST /reports and of the render_report input file."""
    patient: PatientSnapshot
    prescriptions: List[PrescriptionSnapshot] = []
    treatments: List[TreatmentSnapshot] = []

    @field_validator("prescriptions", "treatments", mode="before")
    @classmethod
    def _records_default_empty(cls, v: Any) -> Any:
        return [] if v is None else v

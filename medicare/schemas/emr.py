# FILE: medicare/schemas/emr.py
from __future__ import annotations

from datetime import date, datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from pydantic.alias_generators import to_camel

UserRole = Literal["admin", "doctor", "nurse", "pharmacist", "patient"]
Gender = Literal["male", "female", "other"]
BloodType = Literal["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"]
PatientStatus = Literal["active", "inactive", "critical"]
PrescriptionStatus = Literal["active", "completed", "cancelled", "pending"]
TreatmentStatus = Literal["scheduled", "in-progress", "completed", "cancelled"]
TreatmentPriority = Literal["low", "medium", "high", "urgent"]
NotificationType = Literal["info", "success", "warning", "error"]
AppointmentStatus = Literal["scheduled", "confirmed", "completed", "cancelled"]


class EmrModel(BaseModel):
    """
    Base for all EMR documents.
    Stored documents use camelCase keys; python code uses snake_case.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class StoredMixin(EmrModel):
    id: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


def _none_to_list(v: Any) -> Any:
    return [] if v is None else v


# ---------- Patient ----------


class PatientBase(EmrModel):
    user_id: Optional[str] = None
    first_name: str
    last_name: str
    date_of_birth: date
    gender: Gender
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    blood_type: Optional[BloodType] = None
    allergies: List[str] = []
    medical_history: List[str] = []
    current_medications: List[str] = []
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    status: PatientStatus = "active"
    created_by: str = ""
    updated_by: Optional[str] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("allergies",
                     "medical_history",
                     "current_medications",
                     mode="before")
    @classmethod
    def _lists_default_empty(cls, v: Any) -> Any:
        return _none_to_list(v)


class PatientCreate(PatientBase):
    pass


class PatientUpdate(EmrModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    blood_type: Optional[BloodType] = None
    allergies: Optional[List[str]] = None
    medical_history: Optional[List[str]] = None
    current_medications: Optional[List[str]] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    status: Optional[PatientStatus] = None
    updated_by: Optional[str] = None


class Patient(StoredMixin, PatientBase):
    pass


# ---------- Prescription ----------


class PrescriptionBase(EmrModel):
    patient_id: str
    patient_name: str
    medication: str
    dosage: str
    frequency: str
    duration: str
    instructions: Optional[str] = None
    prescribed_by: str = ""
    prescribed_by_name: str = ""
    status: PrescriptionStatus = "pending"
    dispensed: bool = False
    dispensed_at: Optional[str] = None
    dispensed_by: Optional[str] = None


class PrescriptionCreate(PrescriptionBase):
    pass


class PrescriptionUpdate(EmrModel):
    medication: Optional[str] = None
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    duration: Optional[str] = None
    instructions: Optional[str] = None
    status: Optional[PrescriptionStatus] = None
    dispensed: Optional[bool] = None
    dispensed_at: Optional[str] = None
    dispensed_by: Optional[str] = None


class Prescription(StoredMixin, PrescriptionBase):
    pass


# ---------- Treatment ----------


class TreatmentBase(EmrModel):
    patient_id: str
    patient_name: str
    treatment_type: str
    description: str = ""
    diagnosis: Optional[str] = None
    notes: Optional[str] = None
    status: TreatmentStatus = "scheduled"
    priority: TreatmentPriority = "medium"
    scheduled_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    created_by: str = ""
    created_by_name: str = ""
    assigned_to: Optional[str] = None
    assigned_to_name: Optional[str] = None


class TreatmentCreate(TreatmentBase):
    pass


class TreatmentUpdate(EmrModel):
    treatment_type: Optional[str] = None
    description: Optional[str] = None
    diagnosis: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[TreatmentStatus] = None
    priority: Optional[TreatmentPriority] = None
    scheduled_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    assigned_to: Optional[str] = None
    assigned_to_name: Optional[str] = None


class Treatment(StoredMixin, TreatmentBase):
    pass


# ---------- Notification ----------


class NotificationBase(EmrModel):
    user_id: str
    title: str
    message: str
    type: NotificationType = "info"
    read: bool = False
    read_at: Optional[str] = None


class NotificationCreate(NotificationBase):
    pass


class NotificationUpdate(EmrModel):
    read: Optional[bool] = None
    read_at: Optional[str] = None


class Notification(StoredMixin, NotificationBase):
    pass


# ---------- Appointment ----------


class AppointmentBase(EmrModel):
    patient_id: str
    patient_name: str
    doctor_id: str
    doctor_name: str
    appointment_date: datetime
    appointment_type: str
    reason: Optional[str] = None
    status: AppointmentStatus = "scheduled"
    notes: Optional[str] = None


class AppointmentCreate(AppointmentBase):
    pass


class AppointmentUpdate(EmrModel):
    doctor_id: Optional[str] = None
    doctor_name: Optional[str] = None
    appointment_date: Optional[datetime] = None
    appointment_type: Optional[str] = None
    reason: Optional[str] = None
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None


class Appointment(StoredMixin, AppointmentBase):
    pass


# ---------- User ----------


class UserBase(EmrModel):
    email: EmailStr
    display_name: str
    photo_url: Optional[str] = None
    role: UserRole
    department: Optional[str] = None
    license_number: Optional[str] = None
    patient_id: Optional[str] = None
    is_active: bool = True


class UserCreate(UserBase):
    pass


class UserUpdate(EmrModel):
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    role: Optional[UserRole] = None
    department: Optional[str] = None
    license_number: Optional[str] = None
    patient_id: Optional[str] = None
    is_active: Optional[bool] = None


class User(StoredMixin, UserBase):
    pass

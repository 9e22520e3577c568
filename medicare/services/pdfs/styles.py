# FILE: medicare/services/pdfs/styles.py
from __future__ import annotations

from dataclasses import dataclass, field as dc_field
from typing import Dict, Tuple

from reportlab.lib import colors

from medicare.core.config import settings
from medicare.services.pdfs.fields import (
    FALLBACK,
    REQUIRED,
    FieldRule,
    field,
    fmt_capitalized,
    fmt_date,
    fmt_datetime,
    fmt_list,
    fmt_upper,
    g,
)

# -----------------------------
# Palette
# -----------------------------
PINK = colors.HexColor("#EC4899")
PINK_LIGHT = colors.HexColor("#F9A8D4")
DARK_GRAY = colors.HexColor("#374151")
LIGHT_GRAY = colors.HexColor("#F3F4F6")
MUTED = colors.HexColor("#969696")
NOTICE_BG = colors.HexColor("#FEF2F2")
NOTICE_RED = colors.HexColor("#DC2626")
RULE = colors.HexColor("#CBD5E1")

STATUS_COLORS = {
    "active": colors.HexColor("#22C55E"),
    "inactive": colors.HexColor("#9CA3AF"),
    "critical": colors.HexColor("#EF4444"),
}


# -----------------------------
# Branding
# -----------------------------
@dataclass(frozen=True)
class Branding:
    org_name: str
    address_line1: str = ""
    address_line2: str = ""
    phone: str = ""
    email: str = ""
    website: str = ""

    @classmethod
    def from_settings(cls) -> "Branding":
        return cls(
            org_name=settings.ORG_NAME,
            address_line1=settings.ORG_ADDRESS_LINE1,
            address_line2=settings.ORG_ADDRESS_LINE2,
            phone=settings.ORG_PHONE,
            email=settings.ORG_EMAIL,
            website=settings.ORG_WEBSITE,
        )

    @property
    def contact_line(self) -> str:
        bits = []
        if self.phone:
            bits.append(f"Phone: {self.phone}")
        if self.email:
            bits.append(f"Email: {self.email}")
        return " | ".join(bits)


# -----------------------------
# Style table
# -----------------------------
@dataclass(frozen=True)
class RecordFields:
    left: Tuple[FieldRule, ...] = ()
    right: Tuple[FieldRule, ...] = ()
    full: Tuple[FieldRule, ...] = ()


@dataclass(frozen=True)
class ReportStyle:
    key: str
    filename_prefix: str
    sections: Tuple[str, ...]
    labels: Dict[str, str]
    fields: Dict[str, RecordFields]
    page_label: str
    page_label_align: str
    margin: float
    top: float
    footer_height: float
    section_trigger: float
    block_trigger: float
    meta: Dict[str, str] = dc_field(default_factory=dict)


def _emergency_contact(p) -> str:
    name = (g(p, "emergency_contact_name") or "").strip()
    phone = (g(p, "emergency_contact_phone") or "").strip()
    if name and phone:
        return f"{name} ({phone})"
    return name or phone


CLINICAL = ReportStyle(
    key="clinical",
    filename_prefix="MediCare",
    sections=(
        "title",
        "patient",
        "emergency",
        "history",
        "prescriptions",
        "treatments",
        "confidentiality",
    ),
    labels={
        "title": "Patient Medical Record",
        "patient": "Patient Information",
        "emergency": "Emergency Contact",
        "history": "General Medical History",
        "prescriptions": "Prescription History",
        "treatments": "Treatment History",
        "notice_title": "CONFIDENTIAL MEDICAL RECORD",
        "notice_line1": ("This document contains protected health information "
                         "(PHI) under HIPAA regulations."),
        "notice_line2": ("Unauthorized disclosure is strictly prohibited. "
                         "For authorized personnel only."),
        "courtesy_line1": ("For appointments, billing inquiries, or medical "
                           "assistance, please contact us"),
        "courtesy_line2": "Thank you for choosing {org} for your healthcare needs.",
    },
    fields={
        "patient":
        RecordFields(
            left=(
                field("Birth Date", "date_of_birth", fmt_date, REQUIRED),
                field("Gender", "gender", fmt_capitalized, REQUIRED),
                field("Phone", "phone"),
            ),
            right=(
                field("Blood Type", "blood_type"),
                field("Email", "email"),
                field("Address", "address"),
            ),
        ),
        "emergency":
        RecordFields(
            left=(field("Contact Name", "emergency_contact_name"), ),
            right=(field("Contact Phone", "emergency_contact_phone"), ),
        ),
        "history":
        RecordFields(full=(
            field("Medical History", "medical_history", fmt_list, FALLBACK,
                  "No significant medical history recorded"),
            field("Allergies", "allergies", fmt_list, FALLBACK,
                  "No known allergies"),
        ), ),
        "prescription":
        RecordFields(
            left=(
                field("Dosage", "dosage", policy=REQUIRED),
                field("Frequency", "frequency", policy=REQUIRED),
                field("Duration", "duration", policy=REQUIRED),
            ),
            right=(
                field("Status", "status", fmt_upper, REQUIRED),
                field("Prescribed By", "prescribed_by_name", policy=REQUIRED),
            ),
            full=(field("Instructions", "instructions"), ),
        ),
        "treatment":
        RecordFields(
            left=(
                field("Description", "description"),
                field("Diagnosis", "diagnosis"),
            ),
            right=(
                field("Priority", "priority", fmt_upper, REQUIRED),
                field("Status", "status", fmt_upper, REQUIRED),
                field("Scheduled", "scheduled_date", fmt_datetime),
                field("Created By", "created_by_name", policy=REQUIRED),
            ),
            full=(field("Notes", "notes"), ),
        ),
    },
    page_label="Page {page} of {total}",
    page_label_align="right",
    margin=15,
    top=13,
    footer_height=12,
    section_trigger=100,
    block_trigger=90,
    meta={"title": "Patient Medical Record"},
)

# Empty clinical lists are omitted on the form (no fallback text).
FORM = ReportStyle(
    key="form",
    filename_prefix="Ordonnance",
    sections=(
        "title",
        "patient",
        "prescriptions",
        "treatments",
        "signature",
        "confidentiality",
    ),
    labels={
        "title": "MEDICAL PRESCRIPTION / ORDONNANCE MÉDICALE",
        "date": "Date",
        "patient": "PATIENT INFORMATION / INFORMATIONS DU PATIENT",
        "name": "Name / Nom",
        "age": "Age / Âge",
        "years": "years / ans",
        "prescriptions": "PRESCRIPTIONS / MÉDICAMENTS PRESCRITS",
        "treatments": "TREATMENTS / TRAITEMENTS",
        "signature": "Signature & stamp / Signature et cachet",
        "confidential_en": ("Confidential medical document. For authorized "
                            "personnel only."),
        "confidential_fr": ("Document médical confidentiel. Réservé au "
                            "personnel autorisé."),
    },
    fields={
        "patient":
        RecordFields(full=(
            field("Date of birth / Date de naissance", "date_of_birth",
                  fmt_date, REQUIRED),
            field("Gender / Sexe", "gender", fmt_capitalized, REQUIRED),
            field("Blood type / Groupe sanguin", "blood_type"),
            field("Phone / Téléphone", "phone"),
            field("Email / Courriel", "email"),
            field("Address / Adresse", "address"),
            FieldRule("Emergency contact / Contact d'urgence",
                      _emergency_contact),
            field("Allergies / Allergies", "allergies", fmt_list),
            field("Medical history / Antécédents médicaux", "medical_history",
                  fmt_list),
            field("Current medications / Traitement en cours",
                  "current_medications", fmt_list),
        ), ),
        "prescription":
        RecordFields(full=(
            field("Frequency / Fréquence", "frequency", policy=REQUIRED),
            field("Duration / Durée", "duration", policy=REQUIRED),
            field("Instructions / Consignes", "instructions"),
            field("Prescribed by / Prescrit par", "prescribed_by_name"),
        ), ),
        "treatment":
        RecordFields(full=(
            field("Priority / Priorité", "priority", fmt_upper, REQUIRED),
            field("Status / Statut", "status", fmt_upper, REQUIRED),
            field("Description / Description", "description"),
            field("Diagnosis / Diagnostic", "diagnosis"),
            field("Scheduled / Prévu le", "scheduled_date", fmt_datetime),
            field("Notes / Remarques", "notes"),
        ), ),
    },
    page_label="{page}/{total}",
    page_label_align="center",
    margin=15,
    top=32,
    footer_height=5,
    section_trigger=40,
    block_trigger=20,
    meta={"title": "Ordonnance / Prescription"},
)

STYLES: Dict[str, ReportStyle] = {s.key: s for s in (CLINICAL, FORM)}

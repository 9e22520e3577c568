"""Tests for full report generation in both styles."""

import io
import logging

import pytest
from pypdf import PdfReader

from medicare.services.pdfs.errors import MissingFieldError, UnknownStyleError
from medicare.services.pdfs.report import (
    _RENDERERS,
    generate_report,
    get_style,
    report_filename,
)
from medicare.services.pdfs.styles import STYLES

from conftest import GENERATED_AT


def pdf_pages(content: bytes):
    reader = PdfReader(io.BytesIO(content))
    return [page.extract_text() or "" for page in reader.pages]


def pdf_text(content: bytes) -> str:
    return "\n".join(pdf_pages(content))


def render(patient, rx=(), tx=(), style="clinical"):
    return generate_report(patient, rx, tx, style, generated_at=GENERATED_AT)


def many(record: dict, n: int, key: str):
    return [{**record, key: f"{record[key]} {i}"} for i in range(n)]


# ---------- filenames ----------


def test_clinical_filename(patient_dict):
    report = render(patient_dict)
    assert report.filename == "MediCare_Doe_Jane_2024-03-15.pdf"
    assert report.media_type == "application/pdf"


def test_form_filename(patient_dict):
    report = render(patient_dict, style="form")
    assert report.filename == "Ordonnance_Doe_Jane_2024-03-15.pdf"


def test_filename_strips_unsafe_characters():
    name = report_filename({"first_name": "Mary Ann", "last_name": 'O/Neil"'},
                           "clinical", GENERATED_AT.date())
    assert name == "MediCare_ONeil_Mary-Ann_2024-03-15.pdf"


def test_filename_placeholder_for_fully_stripped_name():
    name = report_filename({"first_name": "Jane", "last_name": '<?>'},
                           "clinical", GENERATED_AT.date())
    assert name == "MediCare_Unknown_Jane_2024-03-15.pdf"


def test_filename_keeps_unicode_names():
    name = report_filename({"first_name": "Łukasz", "last_name": "王"},
                           "form", GENERATED_AT.date())
    assert name == "Ordonnance_王_Łukasz_2024-03-15.pdf"


# ---------- output ----------


def test_output_is_pdf(patient_dict):
    report = render(patient_dict)
    assert report.content.startswith(b"%PDF")
    assert report.page_count == 1
    assert len(pdf_pages(report.content)) == 1


def test_idempotent_for_same_inputs(patient_dict, prescription_dict,
                                    treatment_dict):
    rx = many(prescription_dict, 6, "medication")
    tx = many(treatment_dict, 4, "treatmentType")
    for style in ("clinical", "form"):
        a = render(patient_dict, rx, tx, style)
        b = render(patient_dict, rx, tx, style)
        assert a.page_count == b.page_count
        assert pdf_pages(a.content) == pdf_pages(b.content)
        assert a.placements == b.placements


def test_clinical_fallbacks_for_empty_history(patient_dict):
    text = pdf_text(render(patient_dict).content)
    assert "General Medical History" in text
    assert "No significant medical history recorded" in text
    assert "No known allergies" in text


def test_clinical_lists_history_when_present(patient_dict):
    patient_dict["allergies"] = ["Penicillin", "Latex"]
    text = pdf_text(render(patient_dict).content)
    assert "Penicillin, Latex" in text
    assert "No known allergies" not in text


def test_form_omits_empty_clinical_lists(patient_dict):
    text = pdf_text(render(patient_dict, style="form").content)
    assert "No known allergies" not in text
    assert "Allergies / Allergies" not in text
    assert "No significant medical history recorded" not in text


def test_sections_suppressed_without_records(patient_dict):
    clinical = pdf_text(render(patient_dict).content)
    assert "Prescription History" not in clinical
    assert "Treatment History" not in clinical

    form = pdf_text(render(patient_dict, style="form").content)
    assert "PRESCRIPTIONS /" not in form
    assert "TREATMENTS /" not in form


def test_sections_rendered_with_records(patient_dict, prescription_dict,
                                        treatment_dict):
    clinical = pdf_text(
        render(patient_dict, [prescription_dict], [treatment_dict]).content)
    assert "Prescription History" in clinical
    assert "Treatment History" in clinical
    assert "Amoxicillin" in clinical
    assert "Physiotherapy" in clinical
    assert "3/20/2024 2:05:09 PM" in clinical

    form = pdf_text(
        render(patient_dict, [prescription_dict], [treatment_dict],
               "form").content)
    assert "PRESCRIPTIONS /" in form
    assert "TREATMENTS /" in form
    assert "- Amoxicillin 500mg" in form


def test_emergency_section_only_when_present(patient_dict):
    assert "Emergency Contact" not in pdf_text(render(patient_dict).content)
    patient_dict["emergencyContactName"] = "John Doe"
    assert "Emergency Contact" in pdf_text(render(patient_dict).content)


def test_optional_demographics_are_omitted(patient_dict):
    text = pdf_text(render(patient_dict).content)
    assert "Address" not in text
    assert "Phone" in text
    assert "Blood Type" in text


def test_missing_demographics_do_not_fail():
    report = render({"firstName": "Jane", "lastName": "Doe"})
    text = pdf_text(report.content)
    assert "Jane Doe" in text
    assert "N/A" in text


def test_age_on_form(patient_dict):
    text = pdf_text(render(patient_dict, style="form").content)
    assert "33 years / ans" in text


def test_generation_date_printed_once(patient_dict, prescription_dict):
    rx = many(prescription_dict, 15, "medication")
    report = render(patient_dict, rx)
    pages = pdf_pages(report.content)
    assert len(pages) > 1
    assert sum(p.count("2024-03-15") for p in pages) == 1


# ---------- pagination ----------


@pytest.mark.parametrize("style", ["clinical", "form"])
def test_no_block_crosses_bottom_margin(style, patient_dict,
                                        prescription_dict, treatment_dict):
    rx = many(prescription_dict, 25, "medication")
    tx = many(treatment_dict, 25, "treatmentType")
    report = render(patient_dict, rx, tx, style)
    st = get_style(style)
    assert report.page_count > 1
    pages = {p.page for p in report.placements}
    assert pages == set(range(1, report.page_count + 1))
    for p in report.placements:
        assert p.bottom <= 297 - st.margin


@pytest.mark.parametrize("style,label", [("clinical", "Page {i} of {n}"),
                                         ("form", "{i}/{n}")])
def test_page_numbers_stamped(style, label, patient_dict, prescription_dict):
    rx = many(prescription_dict, 20, "medication")
    report = render(patient_dict, rx, style=style)
    pages = pdf_pages(report.content)
    n = len(pages)
    assert n == report.page_count > 1
    for i, text in enumerate(pages, start=1):
        assert label.format(i=i, n=n) in text


def test_huge_instructions_split_into_continued_boxes(patient_dict,
                                                      prescription_dict):
    prescription_dict["instructions"] = "Apply thinly twice daily. " * 500
    report = render(patient_dict, [prescription_dict])
    text = pdf_text(report.content)
    assert report.page_count > 2
    assert "Amoxicillin (continued)" in text
    for p in report.placements:
        assert p.bottom <= 297 - 15


def test_foreign_records_are_skipped(patient_dict, prescription_dict, caplog):
    patient_dict["id"] = "p-1"
    other = {**prescription_dict, "patientId": "p-2", "medication": "Warfarin"}
    with caplog.at_level(logging.WARNING):
        report = render(patient_dict, [prescription_dict, other])
    text = pdf_text(report.content)
    assert "Amoxicillin" in text
    assert "Warfarin" not in text
    assert "belongs to patient p-2" in caplog.text


# ---------- errors ----------


@pytest.mark.parametrize("key", ["firstName", "lastName"])
def test_missing_name_is_fatal(key, patient_dict):
    patient_dict[key] = "   "
    with pytest.raises(MissingFieldError):
        render(patient_dict)
    del patient_dict[key]
    with pytest.raises(MissingFieldError):
        render(patient_dict)


def test_unknown_style(patient_dict):
    with pytest.raises(UnknownStyleError):
        render(patient_dict, style="fancy")


def test_accepts_stored_models(patient_dict, prescription_dict):
    from medicare.schemas.emr import Patient, Prescription

    patient = Patient(id="p-1", **patient_dict)
    rx = Prescription(id="rx-1", **prescription_dict)
    report = render(patient, [rx])
    assert "Amoxicillin" in pdf_text(report.content)


@pytest.mark.parametrize("key", sorted(STYLES))
def test_every_style_has_a_renderer(key):
    style = get_style(key)
    renderer = _RENDERERS[key]
    assert callable(renderer.decorate_page)
    assert set(style.sections) <= set(renderer.SECTIONS)

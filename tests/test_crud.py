"""Tests for the document collections."""

from medicare.crud import collections
from medicare.schemas.emr import (
    PatientCreate,
    PatientUpdate,
    PrescriptionCreate,
)


def test_create_and_get(db_session, patient_dict):
    created = collections.patients.create(db_session,
                                          PatientCreate(**patient_dict))
    assert created.id
    assert created.created_at
    fetched = collections.patients.get(db_session, created.id)
    assert fetched == created


def test_get_missing_returns_none(db_session):
    assert collections.patients.get(db_session, "nope") is None


def test_get_all_newest_first(db_session, patient_dict):
    ids = []
    for name in ("Ann", "Bob", "Cid"):
        patient_dict["firstName"] = name
        ids.append(
            collections.patients.create(db_session,
                                        PatientCreate(**patient_dict)).id)
    listed = [p.id for p in collections.patients.get_all(db_session)]
    assert listed == list(reversed(ids))


def test_collections_are_isolated(db_session, patient_dict,
                                  prescription_dict):
    collections.patients.create(db_session, PatientCreate(**patient_dict))
    collections.prescriptions.create(db_session,
                                     PrescriptionCreate(**prescription_dict))
    assert len(collections.patients.get_all(db_session)) == 1
    assert len(collections.prescriptions.get_all(db_session)) == 1
    assert collections.treatments.get_all(db_session) == []


def test_get_by_patient(db_session, prescription_dict):
    collections.prescriptions.create(db_session,
                                     PrescriptionCreate(**prescription_dict))
    prescription_dict["patientId"] = "p-2"
    collections.prescriptions.create(db_session,
                                     PrescriptionCreate(**prescription_dict))
    mine = collections.prescriptions.get_by_patient(db_session, "p-1")
    assert [r.patient_id for r in mine] == ["p-1"]


def test_partial_update(db_session, patient_dict):
    p = collections.patients.create(db_session, PatientCreate(**patient_dict))
    updated = collections.patients.update(db_session, p.id,
                                          PatientUpdate(status="critical"))
    assert updated.status == "critical"
    assert updated.first_name == "Jane"
    assert updated.created_at == p.created_at


def test_update_missing_returns_none(db_session):
    assert collections.patients.update(db_session, "nope",
                                       PatientUpdate(status="critical")) is None


def test_delete(db_session, patient_dict):
    p = collections.patients.create(db_session, PatientCreate(**patient_dict))
    assert collections.patients.delete(db_session, p.id) is True
    assert collections.patients.get(db_session, p.id) is None
    assert collections.patients.delete(db_session, p.id) is False


def test_dispense(db_session, prescription_dict):
    rx = collections.prescriptions.create(
        db_session, PrescriptionCreate(**prescription_dict))
    done = collections.dispense_prescription(db_session, rx.id, "pharm-1")
    assert done.dispensed is True
    assert done.dispensed_by == "pharm-1"
    assert done.status == "completed"
    assert done.dispensed_at

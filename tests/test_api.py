"""Tests for REST API endpoints."""

import io
from urllib.parse import quote

from pypdf import PdfReader

from conftest import auth


def create_patient(client, headers, data):
    resp = client.post("/api/patients", json=data, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_requires_token(client):
    resp = client.get("/api/patients")
    assert resp.status_code == 401
    body = resp.json()
    assert body["ok"] is False
    assert body["error"]["code"] == "unauthorized"


def test_rejects_bad_token(client):
    resp = client.get("/api/patients",
                      headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_create_and_list_patients(client, doctor_headers, patient_dict):
    created = create_patient(client, doctor_headers, patient_dict)
    assert created["firstName"] == "Jane"
    assert created["id"]

    resp = client.get("/api/patients", headers=doctor_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    assert [p["id"] for p in body["data"]] == [created["id"]]


def test_get_patient_not_found(client, doctor_headers):
    resp = client.get("/api/patients/missing", headers=doctor_headers)
    assert resp.status_code == 404
    assert resp.json()["error"]["msg"] == "Patient not found"


def test_invalid_patient_payload(client, doctor_headers, patient_dict):
    patient_dict["gender"] = "robot"
    resp = client.post("/api/patients", json=patient_dict,
                       headers=doctor_headers)
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "validation_error"


def test_pharmacist_cannot_create_patient(client, pharmacist_headers,
                                          patient_dict):
    resp = client.post("/api/patients", json=patient_dict,
                       headers=pharmacist_headers)
    assert resp.status_code == 403


def test_only_admin_deletes_patient(client, doctor_headers, admin_headers,
                                    patient_dict):
    p = create_patient(client, doctor_headers, patient_dict)
    assert client.delete(f"/api/patients/{p['id']}",
                         headers=doctor_headers).status_code == 403
    assert client.delete(f"/api/patients/{p['id']}",
                         headers=admin_headers).status_code == 200
    assert client.get(f"/api/patients/{p['id']}",
                      headers=admin_headers).status_code == 404


def test_patch_patient(client, doctor_headers, patient_dict):
    p = create_patient(client, doctor_headers, patient_dict)
    resp = client.patch(f"/api/patients/{p['id']}",
                        json={"status": "critical"},
                        headers=doctor_headers)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["status"] == "critical"
    assert data["updatedBy"] == "doc-1"


def test_patient_records_and_dispense(client, doctor_headers,
                                      pharmacist_headers, patient_dict,
                                      prescription_dict):
    p = create_patient(client, doctor_headers, patient_dict)
    prescription_dict["patientId"] = p["id"]

    # pharmacists dispense but do not prescribe
    assert client.post("/api/prescriptions", json=prescription_dict,
                       headers=pharmacist_headers).status_code == 403
    resp = client.post("/api/prescriptions", json=prescription_dict,
                       headers=doctor_headers)
    assert resp.status_code == 201
    rx_id = resp.json()["data"]["id"]

    listed = client.get(f"/api/patients/{p['id']}/prescriptions",
                        headers=doctor_headers).json()["data"]
    assert [r["id"] for r in listed] == [rx_id]

    assert client.post(f"/api/prescriptions/{rx_id}/dispense",
                       headers=doctor_headers).status_code == 403
    resp = client.post(f"/api/prescriptions/{rx_id}/dispense",
                       headers=pharmacist_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["dispensed"] is True
    assert client.post(f"/api/prescriptions/{rx_id}/dispense",
                       headers=pharmacist_headers).status_code == 409


def test_record_for_unknown_patient(client, doctor_headers,
                                    prescription_dict):
    prescription_dict["patientId"] = "missing"
    resp = client.post("/api/prescriptions", json=prescription_dict,
                       headers=doctor_headers)
    assert resp.status_code == 404


def test_patient_role_sees_only_own_record(client, doctor_headers,
                                           patient_dict):
    mine = create_patient(client, doctor_headers, patient_dict)
    patient_dict["firstName"] = "Other"
    other = create_patient(client, doctor_headers, patient_dict)
    headers = auth("patient", sub="u-9", patientId=mine["id"])

    listed = client.get("/api/patients", headers=headers).json()["data"]
    assert [p["id"] for p in listed] == [mine["id"]]
    assert client.get(f"/api/patients/{mine['id']}",
                      headers=headers).status_code == 200
    assert client.get(f"/api/patients/{other['id']}",
                      headers=headers).status_code == 403
    assert client.get(f"/api/patients/{other['id']}/report",
                      headers=headers).status_code == 403


def test_download_report(client, doctor_headers, patient_dict,
                         prescription_dict, treatment_dict):
    p = create_patient(client, doctor_headers, patient_dict)
    prescription_dict["patientId"] = p["id"]
    treatment_dict["patientId"] = p["id"]
    client.post("/api/prescriptions", json=prescription_dict,
                headers=doctor_headers)
    client.post("/api/treatments", json=treatment_dict,
                headers=doctor_headers)

    resp = client.get(f"/api/patients/{p['id']}/report",
                      headers=doctor_headers)
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    disposition = resp.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="MediCare_Doe_Jane_')
    text = "\n".join(pg.extract_text()
                     for pg in PdfReader(io.BytesIO(resp.content)).pages)
    assert "Amoxicillin" in text
    assert "Physiotherapy" in text


def test_download_report_unicode_name(client, doctor_headers, patient_dict):
    patient_dict.update({"firstName": "李", "lastName": "Nowak Łódź"})
    p = create_patient(client, doctor_headers, patient_dict)
    resp = client.get(f"/api/patients/{p['id']}/report",
                      headers=doctor_headers)
    assert resp.status_code == 200
    assert resp.content.startswith(b"%PDF")
    disposition = resp.headers["content-disposition"]
    assert disposition.startswith("attachment; filename=\"MediCare_Nowak-")
    utf8_name = quote("MediCare_Nowak-Łódź_李_")
    assert f"filename*=UTF-8''{utf8_name}" in disposition


def test_post_report_unicode_name(client, doctor_headers):
    resp = client.post("/api/reports",
                       json={"patient": {"firstName": "Ελένη",
                                         "lastName": "Иванова"}},
                       headers=doctor_headers)
    assert resp.status_code == 200
    assert "filename*=UTF-8''" in resp.headers["content-disposition"]


def test_download_form_report(client, doctor_headers, patient_dict):
    p = create_patient(client, doctor_headers, patient_dict)
    resp = client.get(f"/api/patients/{p['id']}/report?style=form",
                      headers=doctor_headers)
    assert resp.status_code == 200
    assert 'filename="Ordonnance_Doe_Jane_' in resp.headers[
        "content-disposition"]


def test_unknown_report_style(client, doctor_headers, patient_dict):
    p = create_patient(client, doctor_headers, patient_dict)
    resp = client.get(f"/api/patients/{p['id']}/report?style=fancy",
                      headers=doctor_headers)
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "report_error"


def test_post_report_payload(client, doctor_headers, prescription_dict):
    payload = {
        "patient": {"firstName": "Jane", "lastName": "Doe"},
        "prescriptions": [prescription_dict],
    }
    resp = client.post("/api/reports?style=form", json=payload,
                       headers=doctor_headers)
    assert resp.status_code == 200
    assert resp.content.startswith(b"%PDF")


def test_post_report_missing_name(client, doctor_headers):
    resp = client.post("/api/reports",
                       json={"patient": {"firstName": "Jane"}},
                       headers=doctor_headers)
    assert resp.status_code == 422
    assert "last name" in resp.json()["error"]["msg"]


def test_notifications_are_private(client, admin_headers):
    resp = client.post("/api/notifications",
                       json={"userId": "nurse-1", "title": "Shift",
                             "message": "Ward B tonight"},
                       headers=admin_headers)
    assert resp.status_code == 201
    nid = resp.json()["data"]["id"]

    nurse = auth("nurse", sub="nurse-1")
    body = client.get("/api/notifications", headers=nurse).json()
    assert [n["id"] for n in body["data"]] == [nid]
    assert body["meta"]["unread"] == 1

    other = auth("nurse", sub="nurse-2")
    assert client.get("/api/notifications", headers=other).json()["data"] == []
    assert client.post(f"/api/notifications/{nid}/read",
                       headers=other).status_code == 403

    resp = client.post(f"/api/notifications/{nid}/read", headers=nurse)
    assert resp.json()["data"]["read"] is True


def test_users_admin_only(client, admin_headers, doctor_headers):
    user = {"email": "nurse@medicare.health", "displayName": "Nurse Joy",
            "role": "nurse"}
    assert client.post("/api/users", json=user,
                       headers=doctor_headers).status_code == 403
    resp = client.post("/api/users", json=user, headers=admin_headers)
    assert resp.status_code == 201
    assert client.get("/api/users", headers=admin_headers).json()["data"][0][
        "displayName"] == "Nurse Joy"

    me = client.get("/api/users/me", headers=doctor_headers).json()["data"]
    assert me["role"] == "doctor"


def test_owner_manages_own_notification_others_follow_policy(
        client, admin_headers):
    nid = client.post("/api/notifications",
                      json={"userId": "nurse-1", "title": "Shift",
                            "message": "Ward B tonight"},
                      headers=admin_headers).json()["data"]["id"]

    doctor = auth("doctor", sub="doc-9")
    assert client.get(f"/api/notifications/{nid}",
                      headers=doctor).status_code == 403
    assert client.patch(f"/api/notifications/{nid}", json={"read": True},
                        headers=doctor).status_code == 403
    assert client.delete(f"/api/notifications/{nid}",
                         headers=doctor).status_code == 403

    assert client.get(f"/api/notifications/{nid}",
                      headers=admin_headers).status_code == 200

    nurse = auth("nurse", sub="nurse-1")
    resp = client.patch(f"/api/notifications/{nid}", json={"read": True},
                        headers=nurse)
    assert resp.status_code == 200
    assert resp.json()["data"]["read"] is True
    assert client.delete(f"/api/notifications/{nid}",
                         headers=nurse).status_code == 200

"""
HTTP API: Integration Tests (FastAPI TestClient, no network)
"""
from io import BytesIO

import openpyxl
import pytest
from fastapi.testclient import TestClient

from main import app

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@pytest.fixture
def client():
    return TestClient(app)


def department_upload():
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.append(["name", "description"])
    ws.append(["Engineering", None])
    ws.append(["X", None])
    output = BytesIO()
    wb.save(output)
    return {"file": ("departments.xlsx", output.getvalue(), XLSX)}


# ===================================================================
#  Form validation
# ===================================================================

class TestValidateFormEndpoint:
    def test_predefined_form(self, client):
        response = client.post("/api/validate/form", json={
            "form_name": "signin",
            "values": {"username": "a@b", "password": ""},
        })
        assert response.status_code == 200
        body = response.json()
        assert body["is_valid"] is False
        assert body["errors"] == {
            "username": "Please enter a valid email address",
            "password": "password is required",
        }
        assert body["issues"][0]["rule"] == "email"
        assert body["issues"][0]["kind"] == "format"

    def test_inline_rules(self, client):
        response = client.post("/api/validate/form", json={
            "rules": {"email": ["email"], "password": ["password"]},
            "values": {"email": "a@b", "password": "abc"},
        })
        assert response.json()["errors"] == {
            "email": "Please enter a valid email address",
            "password": "Password must be at least 8 characters long",
        }

    def test_valid_submission(self, client):
        response = client.post("/api/validate/form", json={
            "form_name": "department",
            "values": {"name": "Finance"},
        })
        assert response.json()["is_valid"] is True
        assert response.json()["errors"] == {}

    def test_unknown_form(self, client):
        response = client.post("/api/validate/form", json={"form_name": "payroll", "values": {}})
        assert response.status_code == 404

    def test_unknown_rule(self, client):
        response = client.post("/api/validate/form", json={"rules": {"x": ["zipCode"]}, "values": {}})
        assert response.status_code == 400
        assert "zipCode" in response.json()["detail"]

    def test_no_schema(self, client):
        response = client.post("/api/validate/form", json={"values": {}})
        assert response.status_code == 400

    @pytest.mark.parametrize("entry", [
        {"rule": "number", "params": ["x"]},
        {"rule": ["number"]},
        {"rule": "required", "params": [1, 2]},
    ])
    def test_bad_rule_entry(self, client, entry):
        response = client.post("/api/validate/form", json={"rules": {"age": [entry]}, "values": {"age": "5"}})
        assert response.status_code == 400


class TestValidateFieldEndpoint:
    def test_blur(self, client):
        response = client.post("/api/validate/field", json={
            "form_name": "create_user", "field": "age", "value": "120",
        })
        assert response.json() == {"field": "age", "error": "Age must be no more than 100"}

    def test_uses_sibling_values(self, client):
        response = client.post("/api/validate/field", json={
            "form_name": "admin_signup",
            "field": "confirmPassword",
            "value": "Secret124",
            "values": {"password": "Secret123"},
        })
        assert response.json()["error"] == "Passwords do not match"

    def test_field_outside_schema(self, client):
        response = client.post("/api/validate/field", json={"form_name": "signin", "field": "nickname", "value": ""})
        assert response.json() == {"field": "nickname", "error": None}

    def test_list_value_for_date(self, client):
        response = client.post("/api/validate/field", json={
            "rules": {"d": ["date"]}, "field": "d", "value": ["2020-01-01", "2021-01-01"],
        })
        assert response.status_code == 200
        assert response.json() == {"field": "d", "error": None}

    def test_label(self, client):
        response = client.post("/api/validate/field", json={
            "rules": {"dept": ["required"]}, "field": "dept", "value": " ", "label": "Department",
        })
        assert response.json()["error"] == "Department is required"


# ===================================================================
#  Spreadsheets
# ===================================================================

class TestUploadEndpoints:
    def test_upload(self, client):
        response = client.post("/api/validate/upload", params={"form_name": "department"}, files=department_upload())
        assert response.status_code == 200
        body = response.json()
        assert body["row_count"] == 2
        assert body["invalid_count"] == 1
        assert body["rows"][1]["errors"] == {"name": "Department Name must be at least 2 characters long"}

    def test_upload_wrong_extension(self, client):
        files = {"file": ("departments.csv", b"name\nFinance\n", "text/csv")}
        response = client.post("/api/validate/upload", params={"form_name": "department"}, files=files)
        assert response.status_code == 400

    def test_upload_unknown_form(self, client):
        response = client.post("/api/validate/upload", params={"form_name": "payroll"}, files=department_upload())
        assert response.status_code == 404

    def test_upload_corrupt(self, client):
        files = {"file": ("departments.xlsx", b"garbage", XLSX)}
        response = client.post("/api/validate/upload", params={"form_name": "department"}, files=files)
        assert response.status_code == 400

    def test_report(self, client):
        response = client.post("/api/validate/upload/report", params={"form_name": "department"},
                               files=department_upload())
        assert response.status_code == 200
        assert response.headers["content-type"].startswith(XLSX)
        ws = openpyxl.load_workbook(BytesIO(response.content)).active
        assert ws.cell(row=1, column=3).value == "errors"

    def test_template(self, client):
        response = client.get("/api/forms/team/template")
        assert response.status_code == 200
        ws = openpyxl.load_workbook(BytesIO(response.content)).active
        assert [c.value for c in ws[1]] == ["name", "description", "department_id"]

    def test_template_unknown_form(self, client):
        assert client.get("/api/forms/payroll/template").status_code == 404


# ===================================================================
#  Access
# ===================================================================

class TestAccessEndpoints:
    def test_profile(self, client):
        body = client.get("/api/access/hr_manager").json()
        assert body["dashboard_url"] == "/hr-dashboard"
        assert body["redirect_to_admin"] is False
        assert "teamBookings" in body["permissions"]
        assert body["urls"]["hrDashboard"] == "/hr-dashboard"

    def test_unknown_role_profile(self, client):
        body = client.get("/api/access/intern").json()
        assert body["effective_role"] == "employee"
        assert body["dashboard_url"] == "/dashboard"

    def test_admin_profile(self, client):
        body = client.get("/api/access/admin").json()
        assert body["permissions"] == ["all"]
        assert body["redirect_to_admin"] is True

    def test_feature(self, client):
        assert client.get("/api/access/employee/features/stressScore").json()["allowed"] is True
        assert client.get("/api/access/employee/features/supervisorTaskManagement").json()["allowed"] is False

    def test_guard(self, client):
        response = client.post("/api/access/guard", json={"role": "employee", "is_authenticated": False})
        assert response.json() == {"allowed": False, "redirect_to": "/signin"}


class TestConfigEndpoints:
    def test_forms_config(self, client):
        body = client.get("/api/config/forms").json()
        assert "signup" in body["forms"]
        assert body["forms"]["department"]["field_order"] == ["name", "description"]
        assert "textLength" in body["rules"]

    def test_health(self, client):
        assert client.get("/api/health").json()["status"] == "healthy"

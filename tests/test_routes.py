"""Route integration tests."""
import json
from io import BytesIO
from urllib.parse import quote

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from web.app import app
from web.dependencies import get_store
from web.store import EvaluationStore


@pytest.fixture
def saved(authenticated_client, store, general_report, class_session_report):
    """A teacher with one report of each kind, saved through the API."""
    teacher = authenticated_client.post("/teachers", json={"name": "أحمد علي"}).json()
    for report in (general_report, class_session_report):
        payload = report.model_dump(mode="json", by_alias=True)
        payload["teacherId"] = teacher["id"]
        response = authenticated_client.put("/reports", json=payload)
        assert response.status_code == 200
    return teacher


class TestTeacherRoutes:
    def test_create_and_list(self, authenticated_client):
        response = authenticated_client.post("/teachers", json={"name": "هدى"})
        assert response.status_code == 201
        created = response.json()
        assert created["name"] == "هدى"

        listed = authenticated_client.get("/teachers").json()
        assert [t["id"] for t in listed] == [created["id"]]

    def test_empty_name_rejected(self, authenticated_client):
        assert authenticated_client.post("/teachers", json={"name": ""}).status_code == 422

    def test_update(self, authenticated_client, saved):
        body = {**saved, "name": "أحمد محمد", "branch": "الشرقي"}
        response = authenticated_client.put(f"/teachers/{saved['id']}", json=body)
        assert response.status_code == 200
        assert response.json()["branch"] == "الشرقي"

    def test_saving_report_updates_teacher_location(self, authenticated_client, saved):
        teacher = authenticated_client.get("/teachers").json()[0]
        assert teacher["school"] == "مدرسة النور"

    def test_reports_newest_first(self, authenticated_client, saved):
        reports = authenticated_client.get(f"/teachers/{saved['id']}/reports").json()
        assert [r["date"] for r in reports] == ["2024-04-02", "2024-03-10"]
        assert reports[0]["evaluationType"] == "class_session"
        assert reports[0]["class"] == "السابع"

    def test_delete_cascades(self, authenticated_client, saved):
        response = authenticated_client.delete(f"/teachers/{saved['id']}")
        assert response.json() == {"deletedReports": 2}
        assert authenticated_client.get("/reports/report-general").status_code == 404

    def test_unknown_teacher(self, authenticated_client):
        response = authenticated_client.get("/teachers/missing/reports")
        assert response.status_code == 404
        assert "missing" in response.json()["detail"]


class TestCriteriaRoutes:
    def test_templates(self, authenticated_client):
        general = authenticated_client.get("/templates/general").json()
        assert len(general) == 10
        assert all(item["score"] == 0 for item in general)

        groups = authenticated_client.get("/templates/class-session/brief").json()
        assert [len(g["criteria"]) for g in groups] == [2, 3, 2, 2]

    def test_unknown_sub_type(self, authenticated_client):
        assert authenticated_client.get("/templates/class-session/long").status_code == 422

    def test_custom_criteria(self, authenticated_client):
        payload = {
            "school": "مدرسة النور",
            "evaluationType": "general",
            "criterion": {"id": "extra-1", "label": "الأنشطة اللاصفية"},
        }
        response = authenticated_client.post("/custom-criteria", json=payload)
        assert response.status_code == 201
        assert response.json()["id"].startswith("custom-")

        listed = authenticated_client.get("/custom-criteria").json()
        assert listed[0]["criterion"]["label"] == "الأنشطة اللاصفية"


class TestReportRoutes:
    def test_general_draft_includes_custom_criteria(self, authenticated_client, saved):
        authenticated_client.post(
            "/custom-criteria",
            json={"school": "مدرسة النور", "evaluationType": "general", "criterion": {"id": "x", "label": "إضافي"}},
        )
        response = authenticated_client.post(
            "/reports/draft", json={"teacherId": saved["id"], "evaluationType": "general"}
        )
        assert response.status_code == 200
        draft = response.json()
        assert draft["school"] == "مدرسة النور"
        assert draft["criteria"][-1]["label"] == "إضافي"
        assert all(c["score"] == 0 for c in draft["criteria"])

    def test_class_session_draft_carries_supervisor(self, authenticated_client, saved):
        draft = authenticated_client.post(
            "/reports/draft", json={"teacherId": saved["id"], "evaluationType": "class_session"}
        ).json()
        assert draft["supervisorName"] == "سعاد"
        assert draft["subType"] == "brief"
        assert all(c["score"] == 0 for g in draft["criterionGroups"] for c in g["criteria"])

    def test_draft_is_not_saved(self, authenticated_client, saved):
        authenticated_client.post("/reports/draft", json={"teacherId": saved["id"], "evaluationType": "general"})
        assert len(authenticated_client.get(f"/teachers/{saved['id']}/reports").json()) == 2

    def test_draft_for_unknown_teacher(self, authenticated_client):
        response = authenticated_client.post("/reports/draft", json={"teacherId": "x", "evaluationType": "general"})
        assert response.status_code == 404

    def test_save_rejects_bad_payload(self, authenticated_client, saved):
        response = authenticated_client.put("/reports", json={"id": "r", "evaluationType": "other"})
        assert response.status_code == 422

    def test_save_rejects_score_out_of_range(self, authenticated_client, saved, general_report):
        payload = general_report.model_dump(mode="json", by_alias=True)
        payload["teacherId"] = saved["id"]
        payload["criteria"][0]["score"] = 7
        assert authenticated_client.put("/reports", json=payload).status_code == 422

    def test_save_for_unknown_teacher(self, authenticated_client, general_report):
        payload = general_report.model_dump(mode="json", by_alias=True)
        assert authenticated_client.put("/reports", json=payload).status_code == 404

    def test_get_and_delete(self, authenticated_client, saved):
        assert authenticated_client.get("/reports/report-general").json()["evaluationType"] == "general"
        assert authenticated_client.delete("/reports/report-general").status_code == 204
        assert authenticated_client.get("/reports/report-general").status_code == 404


class TestSingleExports:
    def test_text(self, authenticated_client, saved):
        response = authenticated_client.get("/exports/reports/report-general.txt")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "النسبة المئوية النهائية: 50.00%" in response.text
        disposition = response.headers["content-disposition"]
        assert disposition == f"attachment; filename*=UTF-8''{quote('report_أحمد علي_2024-03-10.txt')}"

    def test_pdf(self, authenticated_client, saved):
        response = authenticated_client.get("/exports/reports/report-class.pdf")
        assert response.status_code == 200
        assert response.content.startswith(b"%PDF")

    def test_xlsx(self, authenticated_client, saved):
        response = authenticated_client.get("/exports/reports/report-general.xlsx")
        assert response.status_code == 200
        assert load_workbook(BytesIO(response.content)).sheetnames == ["Report"]

    def test_docx(self, authenticated_client, saved):
        response = authenticated_client.get("/exports/reports/report-general.docx")
        assert response.status_code == 200
        assert response.content.startswith(b"PK")

    def test_unknown_format(self, authenticated_client, saved):
        assert authenticated_client.get("/exports/reports/report-general.csv").status_code == 404

    def test_unknown_report(self, authenticated_client):
        assert authenticated_client.get("/exports/reports/missing.pdf").status_code == 404

    def test_share(self, authenticated_client, saved):
        url = authenticated_client.get("/exports/reports/report-general/share").json()["url"]
        assert url.startswith("https://api.whatsapp.com/send?text=")


class TestAggregatedExports:
    def test_text_and_header(self, authenticated_client, saved):
        response = authenticated_client.get("/exports/aggregated.txt")
        assert response.status_code == 200
        assert response.headers["x-skipped-reports"] == "0"
        assert response.text.startswith("--- تقارير مجمعة ---")
        # newest first
        assert response.text.index("تقييم حصة دراسية") < response.text.index("تقييم عام")

    def test_filter_by_type(self, authenticated_client, saved):
        response = authenticated_client.get("/exports/aggregated.xlsx", params={"evaluationType": "general"})
        sheet = load_workbook(BytesIO(response.content))["Aggregated Reports"]
        assert sheet.max_row == 2
        assert sheet["D2"].value == "عام"

    def test_bad_sort(self, authenticated_client, saved):
        assert authenticated_client.get("/exports/aggregated.txt", params={"sort": "score"}).status_code == 400

    def test_unknown_format(self, authenticated_client):
        assert authenticated_client.get("/exports/aggregated.zip").status_code == 404

    def test_share(self, authenticated_client, saved):
        assert authenticated_client.get("/exports/aggregated/share").json()["url"].startswith("https://")


def test_orphan_reports_are_counted(tmp_path, general_report, class_session_report, teacher):
    data_file = tmp_path / "evaluations.json"
    orphan = general_report.model_copy(update={"id": "report-orphan", "teacher_id": "teacher-gone"})
    document = {
        "teachers": [teacher.model_dump(mode="json", by_alias=True)],
        "reports": [
            r.model_dump(mode="json", by_alias=True) for r in (general_report, class_session_report, orphan)
        ],
        "customCriteria": [],
    }
    data_file.write_text(json.dumps(document, ensure_ascii=False), encoding="utf-8")
    store = EvaluationStore(data_file)

    app.dependency_overrides[get_store] = lambda: store
    try:
        client = TestClient(app)
        client.post("/login", data={"password": "supervisor2024"})
        response = client.get("/exports/aggregated.pdf")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.headers["x-skipped-reports"] == "1"
    assert response.content.startswith(b"%PDF")

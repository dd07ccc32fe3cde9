"""
Smoke tests for UI routes.

These tests verify that the dashboard pages render for a logged-in staff user
and that the form posts redirect the way the pages expect, catching 500
errors before manual testing.
"""

import re

import pytest

from tests.conftest import TEST_ADMIN_EMAIL, member_payload

pytestmark = pytest.mark.db


def create_member_via_api(client, **overrides):
    response = client.post("/api/members", json=member_payload(**overrides))
    assert response.status_code == 201, response.text[:200]
    return response.json()


def test_pages_redirect_to_login_when_anonymous(client):
    for path in ("/", "/members", "/members/new", "/pipeline", "/pipeline/stages", "/import"):
        response = client.get(path, follow_redirects=False)
        assert response.status_code == 303, path
        location = response.headers["location"]
        assert location in ("/members", "/login"), path


def test_login_with_wrong_password(client):
    response = client.post("/login", data={"email": TEST_ADMIN_EMAIL, "password": "nope"})

    assert response.status_code == 401
    assert "Invalid email or password" in response.text


def test_login_page_redirects_when_logged_in(auth_client):
    response = auth_client.get("/login", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/members"


def test_logout_clears_session(auth_client):
    auth_client.get("/logout")

    assert auth_client.get("/members", follow_redirects=False).status_code == 303


def test_main_pages_load_ok(auth_client):
    for path in ("/members", "/members/new", "/pipeline", "/pipeline/stages", "/import"):
        response = auth_client.get(path)
        assert response.status_code == 200, f"{path}: {response.text[:200]}"


def test_apply_page_is_public(client):
    response = client.get("/apply")

    assert response.status_code == 200
    assert "/api/apply" in response.text


def test_members_list_search_sort_and_pages(auth_client):
    for index in range(12):
        create_member_via_api(auth_client, full_name=f"Member {index:02d}", email=f"m{index}@example.com")

    first = auth_client.get("/members", params={"sort": "full_name_asc"})
    second = auth_client.get("/members", params={"sort": "full_name_asc", "page": 2})
    search = auth_client.get("/members", params={"q": "m11@"})

    assert "Member 00" in first.text
    assert "Member 11" not in first.text
    assert "Member 11" in second.text
    assert "Member 11" in search.text
    assert "Member 03" not in search.text


def test_member_create_form_flow(auth_client):
    form = {key: str(value) for key, value in member_payload().items() if key != "willing_to_relocate"}

    response = auth_client.post("/members/new", data=form, follow_redirects=False)

    assert response.status_code == 303
    match = re.match(r"^/members/([0-9a-f-]{36})\?msg=", response.headers["location"])
    assert match, response.headers["location"]

    detail = auth_client.get(f"/members/{match.group(1)}")
    assert detail.status_code == 200
    assert "Ana Torres" in detail.text
    assert "Member created" in detail.text


def test_member_create_form_shows_field_errors(auth_client):
    form = {key: str(value) for key, value in member_payload(linkedin_url="https://example.com").items()}

    response = auth_client.post("/members/new", data=form)

    assert response.status_code == 400
    assert "Must be a LinkedIn URL" in response.text


def test_member_edit_and_delete(auth_client):
    member = create_member_via_api(auth_client)

    edit = auth_client.post(
        f"/members/{member['id']}/edit",
        data={"current_role": "Engineering Manager", "location": "", "full_name": ""},
        follow_redirects=False,
    )
    assert edit.status_code == 303

    updated = auth_client.get(f"/api/members/{member['id']}").json()
    assert updated["current_role"] == "Engineering Manager"
    assert updated["location"] is None
    assert updated["full_name"] == "Ana Torres"

    delete = auth_client.post(f"/members/{member['id']}/delete", follow_redirects=False)
    assert delete.status_code == 303
    assert delete.headers["location"].startswith("/members?msg=")

    missing = auth_client.get(f"/members/{member['id']}", follow_redirects=False)
    assert missing.status_code == 303
    assert "error=Member+not+found" in missing.headers["location"]


def test_referral_forms(auth_client):
    member = create_member_via_api(auth_client)

    auth_client.post(
        f"/members/{member['id']}/referrals",
        data={"company_name": "Globex", "referral_date": "2026-04-02", "notes": ""},
    )
    referral = auth_client.get(f"/api/members/{member['id']}/referrals").json()[0]
    assert referral["company_name"] == "Globex"

    auth_client.post(
        f"/referrals/{referral['id']}/edit",
        data={"member_id": member["id"], "company_name": "Globex Corp", "referral_date": "2026-04-03"},
    )
    assert auth_client.get(f"/api/members/{member['id']}/referrals").json()[0]["company_name"] == "Globex Corp"

    page = auth_client.get(f"/members/{member['id']}")
    assert "Globex Corp" in page.text

    auth_client.post(f"/referrals/{referral['id']}/delete", data={"member_id": member["id"]})
    assert auth_client.get(f"/api/members/{member['id']}/referrals").json() == []


def test_pipeline_move_to_hired_stage_prompts_for_hire_info(auth_client):
    member = create_member_via_api(auth_client)

    prompt = auth_client.post("/pipeline/move", data={"member_id": member["id"], "stage_id": "contratado"})
    assert prompt.status_code == 200
    assert 'name="hired_company"' in prompt.text
    assert auth_client.get(f"/api/members/{member['id']}").json()["stage_id"] == "info-cargada"

    hired = auth_client.post(
        "/pipeline/move",
        data={
            "member_id": member["id"],
            "stage_id": "contratado",
            "hired_company": "Initech",
            "hired_date": "2026-05-01",
            "hired_salary_usd": "3000",
        },
        follow_redirects=False,
    )
    assert hired.status_code == 303

    stored = auth_client.get(f"/api/members/{member['id']}").json()
    assert stored["stage_id"] == "contratado"
    assert stored["hired_company"] == "Initech"


def test_pipeline_move_can_skip_hire_info(auth_client):
    member = create_member_via_api(auth_client)

    response = auth_client.post(
        "/pipeline/move",
        data={"member_id": member["id"], "stage_id": "contratado", "skip_hire_info": "1"},
        follow_redirects=False,
    )

    assert response.status_code == 303
    stored = auth_client.get(f"/api/members/{member['id']}").json()
    assert stored["stage_id"] == "contratado"
    assert stored["hired_company"] is None


def test_pipeline_move_to_regular_stage(auth_client):
    member = create_member_via_api(auth_client)

    auth_client.post("/pipeline/move", data={"member_id": member["id"], "stage_id": "referido"})

    board = auth_client.get("/pipeline")
    assert board.status_code == 200
    assert auth_client.get(f"/api/members/{member['id']}").json()["stage_id"] == "referido"


def test_stage_management_forms(auth_client):
    auth_client.post("/pipeline/stages", data={"name": "Oferta"})
    auth_client.post("/pipeline/stages/oferta/move", data={"direction": "up"})
    auth_client.post("/pipeline/stages/oferta/rename", data={"name": "Oferta Enviada"})

    stages = auth_client.get("/api/stages").json()
    assert [s["id"] for s in stages] == ["info-cargada", "calificado", "referido", "oferta", "contratado"]
    assert stages[3]["name"] == "Oferta Enviada"

    create_member_via_api(auth_client)
    blocked = auth_client.post("/pipeline/stages/info-cargada/delete", follow_redirects=False)
    assert "error=" in blocked.headers["location"]

    auth_client.post("/pipeline/stages/oferta/delete")
    assert "oferta" not in [s["id"] for s in auth_client.get("/api/stages").json()]


def test_import_page_upload(auth_client):
    content = "Nombre;Correo\nAna Torres;ana@example.com\n;skip@example.com\n".encode("utf-8")

    response = auth_client.post("/import", files={"file": ("members.csv", content, "text/csv")})

    assert response.status_code == 200
    assert auth_client.get("/api/members").json()[0]["email"] == "ana@example.com"

"""HTTP tests for the API, cron hook, web pages and the gate middleware."""

import pytest

from conftest import TEST_PASSWORD


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


BLOCKING_SETTINGS = {
    "is_enabled": True,
    "bypass_roles": ["administrator"],
    "whitelisted_ips": ["203.0.113.5"],
}


class TestMaintenanceSettingsApi:
    def test_requires_authentication(self, client):
        response = client.get("/api/v1/maintenance/settings")

        assert response.status_code == 401
        assert response.json()["status"] == "error"

    def test_requires_administrator(self, client, editor_token):
        response = client.get("/api/v1/maintenance/settings", headers=bearer(editor_token))

        assert response.status_code == 403

    def test_get_returns_merged_record(self, client, admin_token, store_settings):
        store_settings({"is_enabled": True, "heading": "Upgrading"})

        response = client.get("/api/v1/maintenance/settings", headers=bearer(admin_token))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["is_enabled"] is True
        assert data["heading"] == "Upgrading"
        assert data["bypass_roles"] == ["administrator"]

    def test_post_sanitizes_and_merges(self, client, admin_token, stored_settings):
        response = client.post(
            "/api/v1/maintenance/settings",
            headers=bearer(admin_token),
            json={
                "is_enabled": True,
                "heading": "<b>Back</b> soon",
                "whitelisted_ips": ["203.0.113.5", "bogus"],
                "cta_buttons": [{"label": "Status", "url": "javascript:alert(1)"}],
            },
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["heading"] == "Back soon"
        assert data["whitelisted_ips"] == ["203.0.113.5"]
        assert data["cta_buttons"] == [{"label": "Status", "url": ""}]
        assert data["seo_title"] == "Site Under Maintenance"
        assert stored_settings()["is_enabled"] is True

    def test_post_requires_administrator(self, client, editor_token, stored_settings):
        response = client.post(
            "/api/v1/maintenance/settings",
            headers=bearer(editor_token),
            json={"is_enabled": True},
        )

        assert response.status_code == 403
        assert stored_settings()["is_enabled"] is False

    def test_post_schedules_auto_disable(self, client, app, admin_token):
        response = client.post(
            "/api/v1/maintenance/settings",
            headers=bearer(admin_token),
            json={"is_enabled": True, "auto_disable_enabled": True, "countdown_datetime": "2099-01-01T00:00"},
        )

        assert response.status_code == 200
        assert app.state.auto_disable_scheduler.scheduled_at() is not None

    def test_roles(self, client, admin_token):
        response = client.get("/api/v1/maintenance/roles", headers=bearer(admin_token))

        assert response.status_code == 200
        slugs = [role["slug"] for role in response.json()["data"]]
        assert slugs == ["administrator", "editor", "author", "contributor", "subscriber"]

    def test_status_is_public(self, client, store_settings):
        store_settings({"is_enabled": True, "countdown_datetime": "2026-06-01T12:00"})

        response = client.get("/api/v1/maintenance/status")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["is_enabled"] is True
        assert data["countdown_target"].startswith("2026-06-01T12:00")


class TestAuthApi:
    def test_login_sets_cookie(self, client, admin_user):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": admin_user.email, "password": TEST_PASSWORD},
        )

        assert response.status_code == 200
        assert response.json()["data"]["access_token"]
        assert "access_token" in response.cookies

    def test_login_rejects_bad_password(self, client, admin_user):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": admin_user.email, "password": "wrong-password"},
        )

        assert response.status_code == 401

    def test_me(self, client, admin_token):
        response = client.get("/api/v1/auth/me", headers=bearer(admin_token))

        assert response.status_code == 200
        assert response.json()["data"]["role"] == "administrator"


class TestCron:
    def test_rejects_missing_token(self, client):
        assert client.post("/cron/auto-disable").status_code == 403

    def test_rejects_wrong_token(self, client):
        response = client.post("/cron/auto-disable", headers={"X-Cron-Token": "nope"})

        assert response.status_code == 403

    def test_runs_due_check(self, client, store_settings, stored_settings):
        store_settings(
            {"is_enabled": True, "auto_disable_enabled": True, "countdown_datetime": "2020-01-01T00:00"}
        )

        response = client.post("/cron/auto-disable", headers={"X-Cron-Token": "cron-secret"})

        assert response.status_code == 200
        assert response.json()["data"] == {"disabled": True}
        assert stored_settings()["is_enabled"] is False


class TestGateMiddleware:
    def test_site_served_when_disabled(self, client):
        response = client.get("/", follow_redirects=False)

        assert response.status_code == 302

    def test_blocked_editor_gets_maintenance_page(self, client, editor_token, store_settings):
        store_settings(BLOCKING_SETTINGS)

        response = client.get(
            "/",
            headers={**bearer(editor_token), "X-Forwarded-For": "198.51.100.9"},
            follow_redirects=False,
        )

        assert response.status_code == 503
        assert response.headers["retry-after"] == "3600"
        assert "no-store" in response.headers["cache-control"]
        assert "Right Back" in response.text

    def test_whitelisted_ip_is_allowed(self, client, store_settings):
        store_settings(BLOCKING_SETTINGS)

        response = client.get("/", headers={"X-Forwarded-For": "203.0.113.5, 10.0.0.1"}, follow_redirects=False)

        assert response.status_code == 302

    def test_administrator_is_allowed(self, client, admin_token, store_settings):
        store_settings(BLOCKING_SETTINGS)

        response = client.get("/", headers=bearer(admin_token), follow_redirects=False)

        assert response.status_code == 302

    @pytest.mark.parametrize("path", ["/login", "/health", "/api/v1/maintenance/status"])
    def test_bypass_paths_stay_reachable(self, client, store_settings, path):
        store_settings(BLOCKING_SETTINGS)

        assert client.get(path).status_code == 200

    def test_requested_with_header_does_not_bypass(self, client, store_settings):
        store_settings(BLOCKING_SETTINGS)

        plain = client.get("/shop")
        with_header = client.get("/shop", headers={"X-Requested-With": "XMLHttpRequest"})

        assert plain.status_code == 503
        assert with_header.status_code == 503

    def test_deactivated_administrator_is_blocked(self, client, admin_user, admin_token, store_settings, db_session):
        store_settings(BLOCKING_SETTINGS)
        admin_user.is_active = False
        db_session.add(admin_user)
        db_session.commit()

        response = client.get("/", headers=bearer(admin_token), follow_redirects=False)

        assert response.status_code == 503

    def test_admin_area_stays_reachable(self, client, store_settings):
        store_settings(BLOCKING_SETTINGS)

        response = client.get("/admin/maintenance", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"].startswith("/login")

    def test_language_from_query(self, client, store_settings):
        store_settings(BLOCKING_SETTINGS)

        response = client.get("/?lang=af", follow_redirects=False)

        assert response.status_code == 503
        assert '<html lang="af">' in response.text


class TestAdminPages:
    def test_login_form_flow(self, client, admin_user):
        response = client.post(
            "/login",
            data={"email": admin_user.email, "password": TEST_PASSWORD, "next": "/admin/maintenance"},
            follow_redirects=False,
        )

        assert response.status_code == 302
        assert response.headers["location"] == "/admin/maintenance"
        assert "access_token" in response.cookies

    def test_login_form_rejects_bad_password(self, client, admin_user):
        response = client.post(
            "/login",
            data={"email": admin_user.email, "password": "wrong-password"},
            follow_redirects=False,
        )

        assert response.status_code == 400
        assert "Invalid email or password" in response.text

    def test_settings_page_renders(self, client, admin_token):
        response = client.get("/admin/maintenance", headers=bearer(admin_token))

        assert response.status_code == 200
        assert 'name="heading"' in response.text

    def test_settings_page_refuses_editors(self, client, editor_token):
        response = client.get("/admin/maintenance", headers=bearer(editor_token))

        assert response.status_code == 403

    def test_settings_form_saves(self, client, admin_token, stored_settings):
        response = client.post(
            "/admin/maintenance",
            headers=bearer(admin_token),
            data={
                "is_enabled": "true",
                "heading": "Upgrading",
                "subheading": "Back <em>soon</em>",
                "logo_id": "0",
                "bypass_roles": ["administrator", "editor"],
                "whitelisted_ips": "203.0.113.5\nbogus\n",
                "cta_label": ["Status", ""],
                "cta_url": ["https://status.example.com", ""],
                "countdown_datetime": "",
            },
            follow_redirects=False,
        )

        assert response.status_code == 302
        raw = stored_settings()
        assert raw["is_enabled"] is True
        assert raw["heading"] == "Upgrading"
        assert raw["subheading"] == "Back <em>soon</em>"
        assert raw["bypass_roles"] == ["administrator", "editor"]
        assert raw["whitelisted_ips"] == ["203.0.113.5"]
        assert raw["cta_buttons"] == [{"label": "Status", "url": "https://status.example.com"}]
        assert raw["countdown_enabled"] is False


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"

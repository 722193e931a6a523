"""Tests for the gate decision order."""

import uuid

import pytest
from sqlalchemy.exc import OperationalError
from starlette.datastructures import Headers

from pausegate.schemas.maintenance import MaintenanceSettings
from pausegate.services.access_service import IdentityProvider
from pausegate.services.gate import Gate, GateContext, GateDecision
from pausegate.utils.security import create_access_token


class FakeStore:
    def __init__(self, settings: MaintenanceSettings | None = None, error: Exception | None = None):
        self.settings = settings or MaintenanceSettings()
        self.error = error
        self.reads = 0

    async def read(self) -> MaintenanceSettings:
        self.reads += 1
        if self.error:
            raise self.error
        return self.settings


SCENARIO = MaintenanceSettings(
    is_enabled=True,
    bypass_roles=["administrator"],
    whitelisted_ips=["203.0.113.5"],
)


def make_gate(settings: MaintenanceSettings = SCENARIO, **kwargs) -> tuple[Gate, FakeStore]:
    store = FakeStore(settings, **kwargs)
    return Gate(store, IdentityProvider()), store


def page_request(ip: str | None = None, role: str | None = None, **flags) -> GateContext:
    token = create_access_token(uuid.uuid4(), role=role) if role else None
    return GateContext(headers=Headers({}), remote_addr=ip, access_token=token, **flags)


@pytest.mark.parametrize("flag", ["is_admin_area", "is_ajax", "is_cron", "is_login_page"])
async def test_bypass_contexts_pass_without_reading_settings(flag):
    gate, store = make_gate()

    outcome = await gate.should_intercept(page_request(ip="198.51.100.9", **{flag: True}))

    assert outcome.decision is GateDecision.BYPASS_CONTEXT
    assert store.reads == 0


async def test_admin_area_beats_blocked_identity():
    gate, _ = make_gate()

    outcome = await gate.should_intercept(page_request(ip="198.51.100.9", role="editor", is_admin_area=True))

    assert outcome.decision.serves_request


async def test_disabled_serves_everyone():
    gate, _ = make_gate(MaintenanceSettings(is_enabled=False))

    outcome = await gate.should_intercept(page_request(ip="198.51.100.9"))

    assert outcome.decision is GateDecision.DISABLED


async def test_editor_from_unlisted_ip_is_blocked():
    gate, _ = make_gate()

    outcome = await gate.should_intercept(page_request(ip="198.51.100.9", role="editor"))

    assert outcome.decision is GateDecision.BLOCKED
    assert outcome.settings == SCENARIO


async def test_anonymous_from_whitelisted_ip_is_allowed():
    gate, _ = make_gate()

    outcome = await gate.should_intercept(page_request(ip="203.0.113.5"))

    assert outcome.decision is GateDecision.ALLOWED


async def test_administrator_is_allowed():
    gate, _ = make_gate()

    outcome = await gate.should_intercept(page_request(ip="198.51.100.9", role="administrator"))

    assert outcome.decision is GateDecision.ALLOWED


async def test_storage_failure_falls_back_to_defaults():
    gate, _ = make_gate(error=OperationalError("SELECT", {}, Exception("down")))

    outcome = await gate.should_intercept(page_request(ip="198.51.100.9"))

    assert outcome.decision is GateDecision.DISABLED


def test_context_from_request_flags():
    from starlette.requests import Request

    def build(path: str, headers: list[tuple[bytes, bytes]] | None = None) -> GateContext:
        scope = {
            "type": "http",
            "method": "GET",
            "path": path,
            "query_string": b"",
            "headers": headers or [],
            "client": ("198.51.100.9", 1234),
        }
        return GateContext.from_request(Request(scope))

    assert build("/admin/maintenance").is_admin_area
    assert not build("/administrivia").is_admin_area
    assert build("/api/v1/maintenance/status").is_ajax
    assert not build("/shop", [(b"x-requested-with", b"XMLHttpRequest")]).is_ajax
    assert build("/cron/auto-disable").is_cron
    assert build("/login").is_login_page

    plain = build("/shop", [(b"authorization", b"Bearer abc")])
    assert not plain.is_bypass_context
    assert plain.access_token == "abc"
    assert plain.remote_addr == "198.51.100.9"

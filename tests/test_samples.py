"""Tests for the sample request script."""

import json
from unittest.mock import MagicMock, patch

import httpx
import pytest
from conftest import json_body, relative_target

from storedge import samples
from storedge.restapi import ApiResponse


def _write_samples_config(tmp_path):
    path = tmp_path / "samples.json"
    path.write_text(
        json.dumps(
            {
                "base_url": "https://api.example.com/v1",
                "api_key": "key",
                "api_secret": "secret",
                "facility_id": "FAC1",
                "tenant_id": "TEN1",
            },
        ),
    )
    return path


def test_run_samples_issues_requests_in_order(api_client, handler):
    """The samples list units, list available units, sign up, change password."""
    responses = samples.run_samples(api_client, "FAC1", "TEN1")

    actual = [(r.method, relative_target(r)) for r in handler.requests]
    assert actual == [
        ("GET", "FAC1/units"),
        ("GET", "FAC1/units/available"),
        ("POST", "FAC1/tenants/TEN1/sign_up"),
        ("PUT", "FAC1/tenants/TEN1/change_password"),
    ]
    assert list(responses) == [
        "units",
        "available_units",
        "sign_up_tenant",
        "change_tenant_password",
    ]


def test_run_samples_sends_sample_bodies(api_client, handler):
    """Tenant sample bodies are sent as defined."""
    samples.run_samples(api_client, "FAC1", "TEN1")
    assert json_body(handler.requests[2]) == samples.SIGN_UP_BODY
    assert json_body(handler.requests[3]) == samples.CHANGE_PASSWORD_BODY


def test_run_samples_returns_error_responses(api_client, handler):
    """Error statuses are handed back to the caller, not raised."""
    handler.respond = lambda _: httpx.Response(401, json={"error": "unauthorized"})
    responses = samples.run_samples(api_client, "FAC1", "TEN1")
    assert all(r.status_code == 401 for r in responses.values())


def test_main_runs_with_config_file(tmp_path):
    """main loads the config and passes facility and tenant through."""
    path = _write_samples_config(tmp_path)
    run = MagicMock(return_value={"units": ApiResponse(status_code=200, body=[])})

    with (
        patch.object(samples, "run_samples", run),
        patch.object(samples, "configure_logging") as configure_logging,
    ):
        exit_code = samples.main([str(path)])

    assert exit_code == 0
    configure_logging.assert_called_once_with("INFO")
    _client, facility_id, tenant_id = run.call_args.args
    assert (facility_id, tenant_id) == ("FAC1", "TEN1")


def test_main_reports_failure_status(tmp_path, monkeypatch):
    """main returns non-zero when a sample response is not 2xx."""
    path = _write_samples_config(tmp_path)
    monkeypatch.setenv(samples.CONFIG_ENV_VAR, str(path))
    run = MagicMock(return_value={"units": ApiResponse(status_code=500, body={})})

    with (
        patch.object(samples, "run_samples", run),
        patch.object(samples, "configure_logging"),
    ):
        exit_code = samples.main([])

    assert exit_code == 1


def test_main_without_config_exits(monkeypatch):
    """main refuses to run without a config path."""
    monkeypatch.delenv(samples.CONFIG_ENV_VAR, raising=False)
    with pytest.raises(SystemExit, match="Usage"):
        samples.main([])

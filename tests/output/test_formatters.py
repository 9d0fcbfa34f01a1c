"""Tests for the format_result dispatcher and OutputSettings."""

import json

import pytest
from pydantic import ValidationError

from fluencectl.output.formatters import OutputSettings, format_result
from fluencectl.services.result import ServiceError, ServiceResult


def _ok(op: str = "test", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str = "test", msg: str = "fail") -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code="ERR", message=msg),
    )


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False
        assert s.verbose is False

    def test_frozen(self) -> None:
        s = OutputSettings(json_output=True)
        with pytest.raises(ValidationError):
            s.quiet = True  # type: ignore[misc]


class TestFormatResultJSON:
    def test_json_mode_returns_valid_json(self) -> None:
        result = _ok("service_new", name="svc1")
        output = format_result(result, settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is True
        assert data["op"] == "service_new"
        assert data["data"]["name"] == "svc1"

    def test_json_mode_error(self) -> None:
        settings = OutputSettings(json_output=True)
        output = format_result(_err("deal_deploy", "Bad"), settings=settings)
        data = json.loads(output)
        assert data["ok"] is False
        assert data["error"] == {"code": "ERR", "message": "Bad", "detail": {}}

    def test_json_beats_quiet(self) -> None:
        settings = OutputSettings(json_output=True, quiet=True)
        assert json.loads(format_result(_ok(), settings=settings))["ok"] is True

    def test_json_keeps_warnings(self) -> None:
        result = ServiceResult(
            ok=True, op="init_project", warnings=["Plugin hook post_init failed"]
        )
        data = json.loads(format_result(result, settings=OutputSettings(json_output=True)))
        assert data["warnings"] == ["Plugin hook post_init failed"]


class TestFormatResultHuman:
    def test_default_is_rich(self) -> None:
        output = format_result(_ok("service_new", name="svc1", modules=["facade"]))
        assert output.startswith("OK")
        assert "svc1" in output

    def test_quiet(self) -> None:
        assert format_result(_ok("check"), settings=OutputSettings(quiet=True)) == "OK: check"

    def test_quiet_error(self) -> None:
        output = format_result(_err("upgrade", "nope"), settings=OutputSettings(quiet=True))
        assert output == "ERROR: upgrade: nope"

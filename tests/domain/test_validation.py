"""Tests for structural and semantic validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from fluencectl.domain.errors import (
    SchemaValidationError,
    SemanticValidationError,
    VersionMismatch,
)
from fluencectl.domain.manifests import DEALS, PROJECT, SERVICE
from fluencectl.domain.manifests.service import ServiceConfigV0
from fluencectl.domain.validation import (
    check_document,
    format_location,
    validate_document,
    validate_structure,
)


def _service(**overrides: Any) -> dict[str, Any]:
    doc: dict[str, Any] = {
        "version": 0,
        "name": "svc1",
        "modules": {"facade": {"get": "modules/facade"}},
    }
    doc.update(overrides)
    return doc


class TestFormatLocation:
    @pytest.mark.parametrize(
        ("loc", "expected"),
        [
            ((), ""),
            (("name",), "name"),
            (("modules", "facade", "get"), "modules.facade.get"),
            (("deals", 0, "minWorkers"), "deals[0].minWorkers"),
        ],
    )
    def test_format(self, loc: tuple[int | str, ...], expected: str) -> None:
        assert format_location(loc) == expected


class TestValidateDocument:
    def test_valid_service(self) -> None:
        assert validate_document(SERVICE, _service()) is True

    def test_bad_name_is_semantic_error(self) -> None:
        verdict = validate_document(SERVICE, _service(name="Bad Name!"))
        assert isinstance(verdict, str)
        assert "Bad Name!" in verdict
        assert "service name" in verdict

    def test_missing_facade_is_schema_error(self) -> None:
        verdict = validate_document(SERVICE, _service(modules={}))
        assert verdict == "modules: missing required property 'facade'"

    def test_unknown_property_is_reported_at_root(self) -> None:
        verdict = validate_document(SERVICE, _service(bogus=1))
        assert verdict == "(root): unknown property 'bogus'"

    def test_non_mapping(self) -> None:
        verdict = validate_document(SERVICE, ["not", "a", "mapping"])
        assert isinstance(verdict, str)
        assert "expected a mapping" in verdict

    def test_too_new_version(self) -> None:
        verdict = validate_document(PROJECT, {"version": 7})
        assert isinstance(verdict, str)
        assert "newer version" in verdict


class TestCheckDocument:
    def test_returns_typed_value(self) -> None:
        value = check_document(SERVICE, _service())
        assert isinstance(value, ServiceConfigV0)
        assert value.name == "svc1"

    def test_requires_latest_version(self) -> None:
        with pytest.raises(SchemaValidationError) as exc_info:
            check_document(PROJECT, {"version": 0})
        assert exc_info.value.field_path == "version"

    def test_unknown_version(self) -> None:
        with pytest.raises(VersionMismatch):
            check_document(PROJECT, {"version": 9})

    def test_nested_list_location(self) -> None:
        with pytest.raises(SchemaValidationError) as exc_info:
            check_document(
                DEALS, {"version": 1, "deals": [{"workerName": "w", "minWorkers": 0}]}
            )
        assert exc_info.value.field_path == "deals[0].minWorkers"

    def test_semantic_rule(self) -> None:
        with pytest.raises(SemanticValidationError, match="must not exceed") as exc_info:
            check_document(
                DEALS,
                {
                    "version": 1,
                    "deals": [{"workerName": "w", "minWorkers": 5, "targetWorkers": 2}],
                },
            )
        assert exc_info.value.field_path == "deals[0].minWorkers"

    def test_duplicate_deals(self) -> None:
        with pytest.raises(SemanticValidationError, match="Duplicate") as exc_info:
            check_document(
                DEALS, {"version": 1, "deals": [{"workerName": "w"}, {"workerName": "w"}]}
            )
        assert exc_info.value.field_path == "deals[1].workerName"

    def test_semantic_error_names_field(self) -> None:
        with pytest.raises(SemanticValidationError) as exc_info:
            check_document(SERVICE, _service(name="Bad Name!"))
        assert exc_info.value.field_path == "name"
        assert str(exc_info.value).startswith("name: Invalid service name 'Bad Name!'")

    def test_project_service_key_field(self) -> None:
        with pytest.raises(SemanticValidationError) as exc_info:
            check_document(PROJECT, {"version": 1, "services": {"Bad-Name": {"get": "x"}}})
        assert exc_info.value.field_path == "services.Bad-Name"


class TestValidateStructure:
    def test_heap_size_format(self) -> None:
        doc = _service(modules={"facade": {"get": "f", "maxHeapSize": "lots"}})
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_structure(ServiceConfigV0, doc)
        assert exc_info.value.field_path == "modules.facade.maxHeapSize"

    def test_error_string_names_file_and_field(self, tmp_path: Path) -> None:
        exc = SchemaValidationError("bad", field_path="name", path=tmp_path / "service.yaml")
        assert str(exc) == f"{tmp_path / 'service.yaml'}: name: bad"

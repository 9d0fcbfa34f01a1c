"""Tests for the round-trip YAML codec."""

from __future__ import annotations

import datetime

import pytest

from fluencectl.domain.errors import ParseError
from fluencectl.infrastructure.yaml_io import dump_yaml, merge_into, parse_yaml, to_plain

_COMMENTED = """\
# header comment
version: 0  # config version

# services used by the project
services:
  svc1:
    get: src/services/svc1
"""


class TestParse:
    def test_empty_document(self) -> None:
        assert parse_yaml("") is None

    def test_malformed_yaml(self) -> None:
        with pytest.raises(ParseError, match="Invalid YAML"):
            parse_yaml("version: [0\n")

    def test_to_plain(self) -> None:
        tree = parse_yaml("a:\n  - 1\n  - b: c\n")
        plain = to_plain(tree)
        assert plain == {"a": [1, {"b": "c"}]}
        assert type(plain) is dict
        assert type(plain["a"]) is list

    def test_timestamps_become_strings(self) -> None:
        plain = to_plain(parse_yaml("day: 2024-01-02\n"))
        assert plain == {"day": datetime.date(2024, 1, 2).isoformat()}


class TestMergeInto:
    def test_keeps_comments(self) -> None:
        tree = parse_yaml(_COMMENTED)
        merge_into(
            tree,
            {
                "version": 1,
                "services": {"svc1": {"get": "src/services/svc1"}},
                "aquaInputPath": "src/aqua/main.aqua",
            },
        )
        text = dump_yaml(tree)
        assert "# header comment" in text
        assert "# services used by the project" in text
        assert "version: 1" in text
        assert "aquaInputPath: src/aqua/main.aqua" in text

    def test_removes_absent_keys(self) -> None:
        tree = parse_yaml("version: 0\nkeyPairName: main\n")
        merge_into(tree, {"version": 1, "defaultKeyPairName": "main"})
        assert to_plain(tree) == {"version": 1, "defaultKeyPairName": "main"}

    def test_merges_lists_by_position(self) -> None:
        tree = parse_yaml("deals:\n  - workerName: a  # first\n  - workerName: b\n")
        merge_into(tree, {"deals": [{"workerName": "a", "minWorkers": 2}]})
        text = dump_yaml(tree)
        assert "# first" in text
        assert to_plain(tree) == {"deals": [{"workerName": "a", "minWorkers": 2}]}

    def test_empty_flow_list_becomes_block(self) -> None:
        tree = parse_yaml("deals: []\n")
        merge_into(tree, {"deals": [{"workerName": "a"}]})
        assert dump_yaml(tree) == "deals:\n  - workerName: a\n"

    def test_key_order_preserved(self) -> None:
        tree = parse_yaml("b: 1\na: 2\n")
        merge_into(tree, {"a": 3, "b": 1})
        assert dump_yaml(tree) == "b: 1\na: 3\n"

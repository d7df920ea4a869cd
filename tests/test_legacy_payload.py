"""Unit tests for decoding legacy JSON submissions."""

import json

import pytest

from fintrack.errors import PayloadError
from fintrack.services.finance.legacy_payload import (
    EXAMPLE_LEGACY_DATA,
    describe_malformed,
    find_malformed,
    load_legacy_payload,
)


class TestLoadLegacyPayload:
    def test_array(self):
        records = load_legacy_payload(json.dumps(EXAMPLE_LEGACY_DATA))
        assert records == EXAMPLE_LEGACY_DATA

    def test_single_object(self):
        records = load_legacy_payload(json.dumps(EXAMPLE_LEGACY_DATA[0]))
        assert records == [EXAMPLE_LEGACY_DATA[0]]

    @pytest.mark.parametrize("content", ["", "  \n "])
    def test_empty(self, content):
        with pytest.raises(PayloadError, match="empty"):
            load_legacy_payload(content)

    def test_invalid_json(self):
        with pytest.raises(PayloadError, match="Invalid JSON"):
            load_legacy_payload('[{"tanggal": ')

    @pytest.mark.parametrize("content", ["42", '"text"', "null"])
    def test_not_objects(self, content):
        with pytest.raises(PayloadError):
            load_legacy_payload(content)


class TestFindMalformed:
    def test_example_data_is_well_formed(self):
        assert find_malformed(EXAMPLE_LEGACY_DATA) == []

    def test_reports_indices(self):
        records = [EXAMPLE_LEGACY_DATA[0], {"tanggal": "1/1/2025"}, "row", EXAMPLE_LEGACY_DATA[1]]
        assert find_malformed(records) == [1, 2]

    def test_message(self):
        assert describe_malformed([1, 2]) == (
            "Invalid data format. 2 item(s) don't match expected structure."
        )

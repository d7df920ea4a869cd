"""Decoding of pasted or uploaded legacy JSON submissions."""

import json
from typing import Any

from fintrack.errors import PayloadError
from fintrack.services.finance.legacy_importer import is_well_formed

EXAMPLE_LEGACY_DATA: list[dict[str, Any]] = [
    {
        "tanggal": "2/12/2025",
        "tipe": "Pengeluaran",
        "kategori": "Tagihan",
        "judul": "Pulsa XL",
        "jumlah": 7000,
    },
    {
        "tanggal": "2/12/2025",
        "tipe": "Pengeluaran",
        "kategori": "Lainnya",
        "judul": "Kemanusiaan",
        "jumlah": 30000,
    },
    {
        "tanggal": "1/12/2025",
        "tipe": "Pengeluaran",
        "kategori": "Lainnya",
        "judul": "Kondangan",
        "deskripsi": "Wawan",
        "jumlah": 150000,
    },
    {
        "tanggal": "1/12/2025",
        "tipe": "Pemasukan",
        "kategori": "Gaji",
        "judul": "Gaji",
        "jumlah": 8600000,
    },
]


def normalize_records(data: Any) -> list[Any]:
    """A single object is a one-record submission."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        return [data]
    raise PayloadError("Expected a JSON object or an array of objects")


def load_legacy_payload(content: str) -> list[Any]:
    if not content.strip():
        raise PayloadError("Payload is empty")
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise PayloadError(f"Invalid JSON: {exc.msg} (line {exc.lineno})") from exc
    return normalize_records(data)


def find_malformed(records: list[Any]) -> list[int]:
    return [index for index, data in enumerate(records) if not is_well_formed(data)]


def describe_malformed(indices: list[int]) -> str:
    return (
        f"Invalid data format. {len(indices)} item(s) don't match expected structure."
    )

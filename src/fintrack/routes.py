from typing import Any

from fastapi import APIRouter, Header, HTTPException
from pydantic import BaseModel, Field, model_validator

from fintrack.config import settings
from fintrack.errors import PayloadError
from fintrack.services.finance.category_resolver import CATEGORY_MAPPING
from fintrack.services.finance.legacy_importer import import_batch
from fintrack.services.finance.legacy_payload import (
    EXAMPLE_LEGACY_DATA,
    describe_malformed,
    find_malformed,
    load_legacy_payload,
    normalize_records,
)
from fintrack.services.finance.legacy_parser import EXPENSE_LABEL, INCOME_LABEL
from fintrack.services.supabase_auth import get_owner_id_from_token

router = APIRouter()


class LegacyImportRequest(BaseModel):
    """
    Request payload for a legacy spreadsheet import.

    Send either ``records`` (one object or an array of objects with the keys
    tanggal, tipe, kategori, judul, deskripsi, jumlah) or ``json_content``
    (the same data as raw JSON text, e.g. pasted from a spreadsheet export).
    """

    records: list[Any] | dict[str, Any] | None = Field(
        default=None, description="Legacy records as decoded JSON"
    )
    json_content: str | None = Field(
        default=None, description="Legacy records as raw JSON text"
    )

    @model_validator(mode="after")
    def _require_one_source(self) -> "LegacyImportRequest":
        if (self.records is None) == (self.json_content is None):
            raise ValueError("Provide exactly one of 'records' or 'json_content'")
        return self


@router.get("/healthz")
def healthz() -> dict:
    return {"status": "ok"}


def _extract_bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing Authorization header")
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid Authorization header")
    return authorization.split(" ", 1)[1]


def _resolve_owner(authorization: str | None) -> str:
    access_token = _extract_bearer_token(authorization)
    try:
        return get_owner_id_from_token(access_token)
    except Exception as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc


@router.get("/v1/imports/legacy/categories")
def legacy_categories() -> dict:
    return {
        "type_labels": {INCOME_LABEL: "income", EXPENSE_LABEL: "expense"},
        "categories": [
            {
                "label": label,
                "name": target.name,
                "type": target.transaction_type.value,
            }
            for label, target in CATEGORY_MAPPING.items()
        ],
    }


@router.get("/v1/imports/legacy/example")
def legacy_example() -> dict:
    return {"records": EXAMPLE_LEGACY_DATA}


@router.post("/v1/imports/legacy")
def legacy_import(
    request: LegacyImportRequest,
    authorization: str | None = Header(default=None),
) -> dict:
    """
    Import legacy transactions for the authenticated user.

    The whole submission is rejected when any item is malformed. After that,
    records fail individually (unknown category, bad date, ...) and are
    reported in ``errors`` without stopping the rest of the batch.
    """
    owner_id = _resolve_owner(authorization)

    try:
        if request.json_content is not None:
            records = load_legacy_payload(request.json_content)
        else:
            records = normalize_records(request.records)
    except PayloadError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    if not records:
        raise HTTPException(status_code=400, detail="No records to import")
    if len(records) > settings.legacy_import_max_records:
        raise HTTPException(
            status_code=400,
            detail=f"Too many records: {len(records)} (limit {settings.legacy_import_max_records})",
        )

    malformed = find_malformed(records)
    if malformed:
        raise HTTPException(
            status_code=400,
            detail={"message": describe_malformed(malformed), "indices": malformed},
        )

    result = import_batch(owner_id, records)
    return result.to_dict()

import argparse
import json
import logging
import sys

from fintrack.config import settings
from fintrack.errors import PayloadError
from fintrack.repositories.finance import MemoryFinanceStore, SupabaseFinanceStore
from fintrack.services.finance.legacy_importer import import_batch
from fintrack.services.finance.legacy_payload import (
    describe_malformed,
    find_malformed,
    load_legacy_payload,
)

logger = logging.getLogger(__name__)


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as handle:
        return handle.read()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fintrack-import",
        description="Import legacy spreadsheet transactions (JSON) for one user.",
    )
    parser.add_argument("source", help="JSON file with legacy records, or - for stdin")
    parser.add_argument("--user-id", required=True, help="Owner of the imported records")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run the import against an in-memory store; nothing is written",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level)

    try:
        records = load_legacy_payload(_read_source(args.source))
    except (OSError, PayloadError) as exc:
        logger.error("Cannot load %s: %s", args.source, exc)
        return 2

    malformed = find_malformed(records)
    if malformed:
        logger.error("%s Indices: %s", describe_malformed(malformed), malformed)
        return 2

    store = MemoryFinanceStore() if args.dry_run else SupabaseFinanceStore()
    result = import_batch(args.user_id, records, store)
    print(json.dumps(result.to_dict(), indent=2, default=str))
    return 1 if result.failed else 0


if __name__ == "__main__":
    sys.exit(main())

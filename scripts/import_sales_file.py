"""
Import a sales CSV for one period, straight against the database.

Usage:
    # Explicit mapping (column index → field key)
    python scripts/import_sales_file.py \
        --tenant 7c0f... \
        --file "exports/januar.csv" \
        --period 2026-01 \
        --mapping '{"0": "org_nr", "1": "name", "2": "total_sales", "3": "total_profit"}'

    # Saved template, file with a header row
    python scripts/import_sales_file.py \
        --tenant 7c0f... --file uke2.csv --period 2026-W02 \
        --template "Kasse standard" --header
"""

import argparse
import json
import os
import sys

# Allow imports from the project root when running as a script
_root_dir = os.path.join(os.path.dirname(__file__), "..")
sys.path.insert(0, _root_dir)

from dotenv import load_dotenv
load_dotenv(os.path.join(_root_dir, ".env"))

from exceptions import AppError
from parsers.csv_parser import parse_csv
from services.import_service import get_import_service
from services.template_service import get_template_service


def run(args: argparse.Namespace) -> int:
    with open(args.file, "rb") as f:
        content = f.read()

    service = get_import_service()
    parsed = parse_csv(content, filename=os.path.basename(args.file))

    if args.template:
        mapping = get_template_service().apply(args.tenant, args.template, parsed.column_count)
    else:
        mapping = json.loads(args.mapping)

    job = service.prepare(
        tenant_id=args.tenant,
        rows=parsed.rows,
        mapping=mapping,
        period_selector=args.period,
        has_header_row=args.header,
        strict_numbers=args.strict,
    )
    result = service.run(job)

    print(result.to_response().model_dump_json(indent=2))
    return 0 if result.success else 2


def main():
    parser = argparse.ArgumentParser(
        description="Replace one period's sales with the rows of a CSV export."
    )
    parser.add_argument("--tenant", required=True, help="Tenant UUID")
    parser.add_argument("--file", required=True, help="Path to the CSV file")
    parser.add_argument(
        "--period",
        required=True,
        help="Month (2026-01) or ISO week (2026-W02)",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--mapping",
        help='JSON object of column index to field key, e.g. {"0": "org_nr"}',
    )
    source.add_argument("--template", help="Name of a saved mapping template")
    parser.add_argument(
        "--header",
        action="store_true",
        help="First row holds column labels",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Report unreadable amounts as row errors instead of 0",
    )

    args = parser.parse_args()

    if not os.path.isfile(args.file):
        print(f"ERROR: File not found: {args.file}")
        sys.exit(1)

    try:
        code = run(args)
    except json.JSONDecodeError as e:
        print(f"ERROR: --mapping is not valid JSON: {e}")
        sys.exit(1)
    except AppError as e:
        print(f"ERROR [{e.code}]: {e.message}")
        sys.exit(1)

    sys.exit(code)


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Inspect a record from the command line.

Projects one record (or compares two records of the same type) and prints
the JSON payload the /api/record endpoint would return.

Usage:
    python scripts/inspect_record.py salesorder 42
    python scripts/inspect_record.py salesorder 42 --compare 43
    python scripts/inspect_record.py salesorder 42 --snapshots tests/fixtures/records
    python scripts/inspect_record.py salesorder 42 --fields entity,memo --max-lines 50
"""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.config import Config, build_record_source
from src.host.snapshot import SnapshotDirectorySource
from src.logging_config import setup_logging
from src.projection.comparator import RecordComparator
from src.projection.service import ProjectionOptions, RecordProjector


def _split(value):
    if not value:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def main() -> int:
    parser = argparse.ArgumentParser(description="Print a record projection as JSON")
    parser.add_argument("record_type", help="Record type, e.g. salesorder")
    parser.add_argument("record_id", help="Record internal id")
    parser.add_argument("--compare", metavar="ID", help="Compare with another record of the same type")
    parser.add_argument("--snapshots", type=Path, help="Read snapshots from this directory instead of the configured host")
    parser.add_argument("--fields", help="Comma-separated body field allow-list")
    parser.add_argument("--sublists", help="Comma-separated sublist allow-list")
    parser.add_argument("--max-lines", type=int, help="Line cap per sublist")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    load_dotenv()
    setup_logging(log_level=args.log_level)

    config = Config.load()
    if args.snapshots:
        source = SnapshotDirectorySource(args.snapshots, user_id=config.host.user_id or None)
    else:
        source = build_record_source(config)

    projector = RecordProjector(source, config.projection)

    if args.compare:
        result = RecordComparator(projector).compare(args.record_type, args.record_id, args.compare)
    else:
        options = ProjectionOptions(
            include_fields=_split(args.fields),
            include_sublists=_split(args.sublists),
            max_sublist_lines=args.max_lines,
        )
        result = projector.project(args.record_type, args.record_id, options)

    print(json.dumps(result.to_payload(), indent=2, ensure_ascii=False))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())

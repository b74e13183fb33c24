import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from app.backend.process import detect_file, merge_file, split_file, write_json_output
from tablesplit.errors import TableSplitError


def parse_assignments(pairs: Optional[List[str]]) -> Dict[str, str]:
    """``["Sheet1=p-1", "Sheet2=p-2"]`` → ``{"Sheet1": "p-1", "Sheet2": "p-2"}``."""
    assignments: Dict[str, str] = {}
    for pair in pairs or []:
        sheet, sep, group = pair.partition("=")
        if not sep or not sheet.strip():
            raise ValueError(f"invalid assignment {pair!r}, expected SHEET=GROUP")
        assignments[sheet.strip()] = group.strip()
    return assignments


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Detect, split and merge tables in spreadsheet workbooks."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    detect = sub.add_parser("detect", help="Report the tables found in each sheet.")
    detect.add_argument("input", help="Workbook path (.xlsx, .xlsm or .xls).")
    detect.add_argument("--json", action="store_true", help="Print the full JSON report.")

    split = sub.add_parser("split", help="Write one tab per detected table.")
    split.add_argument("input", help="Workbook path.")
    split.add_argument("--output-dir", default=None, help="Output directory (default: OUTPUT_DIR).")
    split.add_argument("--drop-summary-rows", action="store_true", help="Remove total/sum/avg rows.")
    split.add_argument("--drop-empty-columns", action="store_true", help="Remove fully empty columns.")

    merge = sub.add_parser("merge", help="Merge sheets on fuzzily aligned columns.")
    merge.add_argument("input", help="Workbook path.")
    merge.add_argument("--output-dir", default=None, help="Output directory (default: OUTPUT_DIR).")
    merge.add_argument("--sheets", nargs="+", default=None, help="Sheets to merge (default: all).")
    merge.add_argument(
        "--assign",
        nargs="+",
        default=None,
        metavar="SHEET=GROUP",
        help="Group assignment per sheet.",
    )
    merge.add_argument("--groups", nargs="+", default=None, help="Selected group ids.")
    merge.add_argument(
        "--resolve-labels",
        action="store_true",
        help="Fetch the project list and write project names instead of ids.",
    )

    for p in (split, merge):
        p.add_argument(
            "--output-json-name",
            default=None,
            help="Result JSON filename (default: result.json, or env OUTPUT_JSON_NAME).",
        )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    path = Path(args.input).expanduser()
    if not path.is_file():
        print(f"[error] input not found: {args.input}")
        return 1
    data = path.read_bytes()

    try:
        if args.command == "detect":
            result = detect_file(data, path.name)
            if args.json:
                print(json.dumps(result, ensure_ascii=False, indent=2, default=str))
            else:
                for sheet_name, tables in result["tables"].items():
                    for t in tables:
                        print(
                            f"{t['tab_name']}: rows {t['start_row'] + 1}-{t['end_row'] + 1}, "
                            f"{t['row_count']} rows, summary rows {t['summary_row_offsets']}, "
                            f"empty columns {t['empty_column_letters']}"
                        )
                print(f"{result['table_count']} table(s) detected")
            return 0

        if args.command == "split":
            result = split_file(
                data,
                path.name,
                output_dir=args.output_dir,
                drop_summary_rows=args.drop_summary_rows,
                drop_empty_columns=args.drop_empty_columns,
            )
        else:
            result = merge_file(
                data,
                path.name,
                output_dir=args.output_dir,
                sheet_names=args.sheets,
                assignments=parse_assignments(args.assign),
                selected_groups=args.groups,
                resolve_labels=args.resolve_labels,
            )
    except (TableSplitError, ValueError) as e:
        print(f"[error] {e}")
        return 1

    print("Workbook:", result["output_path"])
    print("JSON:", write_json_output(result, args.output_dir, output_filename=args.output_json_name))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

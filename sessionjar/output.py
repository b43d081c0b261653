from __future__ import annotations

import json
import sys
from typing import Any


def output_json(data: Any, file=None) -> None:
    file = file or sys.stdout
    json.dump(data, file, indent=2, ensure_ascii=False)
    print(file=file)


def output_error(errors: list[dict], file=None) -> None:
    file = file or sys.stderr
    json.dump({"errors": errors}, file, indent=2, ensure_ascii=False)
    print(file=file)


def make_error(
    message: str,
    code: str,
    details: str | None = None,
    path: str | None = None,
    userMessage: str | None = None,
) -> dict:
    return {
        "message": message,
        "code": code,
        "details": details,
        "path": path,
        "userMessage": userMessage or message,
    }


def _cell(row: dict, key: str) -> str:
    val = row.get(key)
    if val is None:
        return ""
    if isinstance(val, bool):
        return str(val).lower()
    return str(val)


def output_text(rows: list[dict], columns: list[str], file=None) -> None:
    file = file or sys.stdout
    if not rows:
        print("(no cookies)", file=file)
        return

    # compute column widths
    widths = {col: len(col) for col in columns}
    str_rows = []
    for row in rows:
        sr = {col: _cell(row, col) for col in columns}
        for col in columns:
            widths[col] = max(widths[col], len(sr[col]))
        str_rows.append(sr)

    # header
    header = "  ".join(col.ljust(widths[col]) for col in columns)
    print(header.rstrip(), file=file)
    print("  ".join("-" * widths[col] for col in columns), file=file)

    for sr in str_rows:
        line = "  ".join(sr[col].ljust(widths[col]) for col in columns)
        print(line.rstrip(), file=file)


def output_tsv(rows: list[dict], columns: list[str], file=None) -> None:
    file = file or sys.stdout
    if not rows:
        return
    print("\t".join(columns), file=file)
    for row in rows:
        print("\t".join(_cell(row, col) for col in columns), file=file)

"""
CSV input and output for achievement records.

Reading yields raw dicts (one per data row, header names lower-cased and
trimmed) for the loader to validate; writing produces quoted CSV text with the
Achievement field order.
"""

import csv
import io
from pathlib import Path
from typing import Dict, Iterable, List, Union

from snas.contexts.intake.achievement_data_structure import FIELDNAMES, Achievement
from snas.utils.errors import ErrorKind, SNASError

CsvSource = Union[str, Path]


def read_csv_text(text: str) -> List[Dict[str, str]]:
    """
    Parse CSV text with a header row into raw record dicts.

    Blank lines are skipped. Missing trailing cells come back as empty strings.

    Raises:
        SNASError(INVALID_INPUT): If there is no header row or it has no "name" column
    """
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")), restval="")
    if not reader.fieldnames:
        raise SNASError(ErrorKind.INVALID_INPUT, "CSV data has no header row")

    headers = [(name or "").strip().lower() for name in reader.fieldnames]
    if "name" not in headers:
        raise SNASError(
            ErrorKind.INVALID_INPUT,
            "CSV header must include a 'name' column",
            details=[f"Found columns: {', '.join(headers)}"],
        )

    records = []
    for row in reader:
        # Extra cells beyond the header land under the None key
        record = {
            key.strip().lower(): value or ""
            for key, value in row.items()
            if key is not None and key.strip()
        }
        if all(value.strip() == "" for value in record.values()):
            continue
        records.append(record)
    return records


def read_csv_file(path: Path) -> List[Dict[str, str]]:
    """
    Read a CSV file into raw record dicts.

    Raises:
        SNASError(INVALID_INPUT): If the file does not exist
    """
    if not path.exists():
        raise SNASError(ErrorKind.INVALID_INPUT, f"CSV file not found: {path}")

    with open(path, "r", newline="", encoding="utf-8") as f:
        return read_csv_text(f.read())


def read_csv(source: CsvSource) -> List[Dict[str, str]]:
    """Dispatch on Path (file) or str (CSV text)."""
    if isinstance(source, Path):
        return read_csv_file(source)
    return read_csv_text(source)


def write_csv(achievements: Iterable[Achievement], fieldnames: List[str] = None) -> str:
    """
    Serialize achievements to CSV text.

    Every non-numeric cell is quoted, so commas, quotes and newlines in
    descriptions survive a round trip through read_csv_text().
    """
    fieldnames = fieldnames or FIELDNAMES

    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer,
        fieldnames=fieldnames,
        quoting=csv.QUOTE_NONNUMERIC,
        extrasaction="ignore",
        lineterminator="\n",
    )
    writer.writeheader()
    for achievement in achievements:
        row = achievement.to_dict()
        writer.writerow({key: "" if row.get(key) is None else row.get(key) for key in fieldnames})
    return buffer.getvalue()

"""CSV reading shared by the payroll and records loaders."""

import csv
from pathlib import Path
from typing import Dict, Iterable, Iterator, Tuple, Union

from pydantic import ValidationError


def iter_csv_rows(path: Union[str, Path], required: Iterable[str]) -> Iterator[Tuple[int, Dict[str, str]]]:
    """Yield (line number, row) for each non-blank row of a CSV file.

    Header names and cell values are stripped. Blank rows are skipped.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If a required column is missing from the header
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(path, "r", newline="") as f:
        reader = csv.DictReader(f)
        fields = [name.strip() for name in (reader.fieldnames or [])]
        missing = set(required) - set(fields)
        if missing:
            raise ValueError(f"{path.name}: missing column(s): {', '.join(sorted(missing))}")

        for row in reader:
            row = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}
            if not any(row.values()):
                continue
            yield reader.line_num, row


def row_error(path: Union[str, Path], line_num: int, error: ValidationError) -> ValueError:
    """ValueError naming the file, line and first validation failure."""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    detail = f"{field}: {first['msg']}" if field else first["msg"]
    return ValueError(f"{Path(path).name} line {line_num}: {detail}")

"""Flat-text codec for the CSV backing files.

Everything on disk is text. Encoding turns typed record values into strings
(None -> "", booleans -> "true"/"false", dates -> ISO-8601, dicts -> JSON);
the decode helpers below turn those strings back into values that the
pydantic record models accept. Each repository composes the helpers it needs
into its own ``decode_row``.
"""
import json
import logging
import os
import types
import typing
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

import pandas as pd
from pydantic import BaseModel

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Decoding helpers
# ---------------------------------------------------------------------------


def _allows_none(annotation) -> bool:
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        return type(None) in typing.get_args(annotation)
    return annotation is type(None)


def nullable_aliases(model: type[BaseModel]) -> frozenset:
    """Return the on-disk names of every field that accepts None."""
    return frozenset(
        field.alias or name
        for name, field in model.model_fields.items()
        if _allows_none(field.annotation)
    )


def blank_to_none(row: dict[str, Any], names: Iterable[str]) -> dict[str, Any]:
    """Replace empty strings with None for the given (nullable) columns."""
    for name in names:
        if row.get(name) == "":
            row[name] = None
    return row


def drop_blank(row: dict[str, Any], *names: str) -> dict[str, Any]:
    """Remove empty columns so the model default applies instead."""
    for name in names:
        if row.get(name) in ("", None):
            row.pop(name, None)
    return row


def to_int(value):
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            try:
                number = float(value)
            except ValueError:
                return value  # left for schema validation to reject
            return int(number) if number.is_integer() else value
    return value


def to_float(value):
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return value
    return value


def to_bool(value):
    if value is None or value == "":
        return None
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return value


def to_json(value):
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return json.loads(value)
    return value


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def encode_value(value: Any) -> str:
    """Render one typed value as the text stored in a CSV cell."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return str(value)


def encode_record(record: BaseModel, fields: Sequence[str]) -> dict[str, str]:
    """Flatten a record to text cells, one per declared field."""
    data = record.model_dump(by_alias=True)
    return {name: encode_value(data.get(name)) for name in fields}


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def _skip_bad_line(bad_line: list[str]) -> Optional[list[str]]:
    logger.warning("Skipping malformed CSV line with %d fields: %r", len(bad_line), bad_line)
    return None


def read_rows(path: Path) -> list[dict[str, str]]:
    """Read a CSV file as a list of text rows keyed by header name.

    A missing or empty file reads as no rows. Lines with too many fields are
    skipped with a warning.
    """
    try:
        frame = pd.read_csv(
            path,
            dtype=str,
            keep_default_na=False,
            na_filter=False,
            index_col=False,
            engine="python",
            on_bad_lines=_skip_bad_line,
        )
    except FileNotFoundError:
        return []
    except pd.errors.EmptyDataError:
        return []
    return [
        {str(key): value if isinstance(value, str) else "" for key, value in row.items()}
        for row in frame.to_dict(orient="records")
    ]


def write_rows(path: Path, rows: list[dict[str, str]], fields: Sequence[str]) -> None:
    """Rewrite the whole file: header first, then one line per row.

    The rows go to a sibling temp file which then replaces ``path``, so a
    failed write leaves the previous content in place.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    frame = pd.DataFrame(rows, columns=list(fields))
    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        frame.to_csv(tmp_path, index=False, lineterminator="\n")
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

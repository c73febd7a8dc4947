"""
Reading and writing documents as JSON, YAML or CSV.

A target of ``-`` means standard input/output in JSON. Any other target is a
file path whose extension picks the format.

This module is part of MongoKit - MongoDB command line toolkit.
"""

import csv
import io
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping

import click
import yaml
from bson import json_util
from bson.json_util import JSONMode, JSONOptions

from .exceptions import CodecError, UnsupportedFormatError

logger = logging.getLogger(__name__)

STDIO = "-"

JSON = "json"
YAML = "yaml"
CSV = "csv"

FORMATS_BY_SUFFIX = {
    ".json": JSON,
    ".yaml": YAML,
    ".yml": YAML,
    ".csv": CSV,
}

CSV_VALUE_COLUMN = "value"

OUTPUT_JSON_OPTIONS = JSONOptions(json_mode=JSONMode.RELAXED)

# Extended JSON wrappers written as their bare string value
COLLAPSED_WRAPPERS = ("$oid", "$date", "$numberDecimal", "$uuid")

_INT_RE = re.compile(r"^-?(0|[1-9]\d*)$")
_FLOAT_RE = re.compile(r"^-?((\d+\.\d*|\.\d+)([eE][-+]?\d+)?|\d+[eE][-+]?\d+)$")


def detect_format(target: str) -> str:
    """
    Pick the data format for an input/output target.

    Raises:
        UnsupportedFormatError: If the file extension is not recognized
    """
    if target == STDIO:
        return JSON
    suffix = Path(target).suffix.lower()
    try:
        return FORMATS_BY_SUFFIX[suffix]
    except KeyError:
        supported = ", ".join(sorted(FORMATS_BY_SUFFIX))
        raise UnsupportedFormatError(
            f"Unsupported file format '{suffix or target}' (expected one of {supported})"
        ) from None


def _collapse(value: Any) -> Any:
    if isinstance(value, dict):
        if len(value) == 1:
            ((key, item),) = value.items()
            if key in COLLAPSED_WRAPPERS and isinstance(item, str):
                return item
        return {key: _collapse(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_collapse(item) for item in value]
    return value


def to_plain(value: Any) -> Any:
    """
    Convert BSON values into plain JSON/YAML friendly data.

    Values go through relaxed Extended JSON, so Int64 becomes a plain int and
    types with no plain form (Timestamp, Regex, Binary, MinKey...) keep their
    ``{"$type": ...}`` wrapper. ObjectIds, dates and decimals are then
    unwrapped to strings so ids normalize back to the same document when read
    in again.
    """
    return _collapse(json.loads(json_util.dumps(value, json_options=OUTPUT_JSON_OPTIONS)))


def _coerce_csv_value(text: Any) -> Any:
    if text is None:
        return None
    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if _INT_RE.match(text):
        return int(text)
    if _FLOAT_RE.match(text):
        return float(text)
    return text


def _csv_rows(data: Any) -> List[Any]:
    if data is None:
        return []
    if isinstance(data, Mapping):
        return [data]
    if isinstance(data, list):
        return data
    return [data]


def _encode_csv(data: Any) -> str:
    rows = []
    fieldnames: Dict[str, None] = {}
    for row in _csv_rows(data):
        if not isinstance(row, Mapping):
            row = {CSV_VALUE_COLUMN: row}
        for key in row:
            fieldnames.setdefault(key, None)
        rows.append(
            {
                key: json.dumps(value, ensure_ascii=False)
                if isinstance(value, (Mapping, list))
                else value
                for key, value in row.items()
            }
        )
    if not rows:
        return ""

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(fieldnames), lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


def _decode_csv(text: str) -> List[Dict[str, Any]]:
    reader = csv.DictReader(io.StringIO(text))
    return [
        {key: _coerce_csv_value(value) for key, value in row.items() if key is not None}
        for row in reader
    ]


def encode(data: Any, fmt: str) -> str:
    """Serialize plain data to text in the given format."""
    if fmt == JSON:
        return json.dumps(data, indent=2, ensure_ascii=False)
    if fmt == YAML:
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    if fmt == CSV:
        return _encode_csv(data)
    raise UnsupportedFormatError(f"Unsupported format '{fmt}'")


def decode(text: str, fmt: str) -> Any:
    """
    Parse text in the given format.

    Returns:
        Parsed data, or None for empty input

    Raises:
        CodecError: If the text is not valid for the format
    """
    if not text.strip():
        return None
    try:
        if fmt == JSON:
            return json.loads(text)
        if fmt == YAML:
            return yaml.safe_load(text)
        if fmt == CSV:
            return _decode_csv(text)
    except (ValueError, yaml.YAMLError, csv.Error) as e:
        raise CodecError(f"Invalid {fmt.upper()} input: {e}") from e
    raise UnsupportedFormatError(f"Unsupported format '{fmt}'")


def read_data(source: str = STDIO) -> Any:
    """
    Read and decode data from a file or standard input.

    Args:
        source: File path, or ``-`` for JSON on standard input
    """
    fmt = detect_format(source)
    if source == STDIO:
        text = click.get_text_stream("stdin").read()
    else:
        text = Path(source).read_text(encoding="utf-8")
    logger.debug(f"Read {len(text)} characters of {fmt} from {source}")
    return decode(text, fmt)


def write_data(target: str, data: Any) -> None:
    """
    Encode data and write it to a file or standard output.

    Args:
        target: File path, or ``-`` for JSON on standard output
        data: Documents or values, BSON types allowed
    """
    fmt = detect_format(target)
    text = encode(to_plain(data), fmt)
    if target == STDIO:
        click.echo(text)
    else:
        Path(target).write_text(text, encoding="utf-8")
        logger.debug(f"Wrote {len(text)} characters of {fmt} to {target}")

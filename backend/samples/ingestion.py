"""
CSV ingestion for sand samples.

The flow for one upload is:
- let Pandas split the file into rows (every cell kept as text),
- turn each row into an unsaved `SandSample`, dropping rows whose required
  columns are missing or not numeric,
- drop candidates whose (latitude, longitude, d50) is already stored or
  appeared earlier in the same file,
- bulk insert what is left and log the upload.

The duplicate check and the insert share one transaction and the table has
a unique constraint on the natural key, so a concurrent upload of the same
sample makes one of the two uploads fail instead of storing it twice.
"""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

import pandas as pd
from django.db import DatabaseError, transaction

from .conf import sand_samples_setting
from .models import SandSample, UploadHistory
from .sediment import classify

logger = logging.getLogger(__name__)

# CSV header -> model field.
CSV_COLUMNS: dict[str, str] = {
    "LAT": "latitude",
    "LON": "longitude",
    "Number_of_Grains": "number_of_grains",
    "D10": "d10",
    "D16": "d16",
    "D25": "d25",
    "D50": "d50",
    "D65": "d65",
    "D75": "d75",
    "D84": "d84",
    "D90": "d90",
    "Dmean": "dmean",
    "Dmed": "dmed",
}

# The natural key and the sediment class cannot be computed without these,
# whatever REQUIRED_FIELDS says.
ALWAYS_REQUIRED = frozenset({"LAT", "LON", "D50", "Dmed"})

INTEGER_COLUMNS = frozenset({"Number_of_Grains"})

# Largest value an IntegerField holds on every supported database.
MAX_INTEGER = 2_147_483_647

# Plain decimal or scientific notation; no digit separators, no nan/inf.
NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


class IngestionError(Exception):
    """Base class for failures that abort a whole upload."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details


class InputError(IngestionError):
    """The upload itself is unusable (no file, required columns absent)."""


class ParseError(IngestionError):
    """The file could not be read as CSV."""


class StorageError(IngestionError):
    """The database refused the batch."""


class ValidationRejection(Exception):
    """A single row cannot become a sample. Never escapes `ingest_csv`."""

    def __init__(self, column: str, reason: str):
        super().__init__(f"{column}: {reason}")
        self.column = column
        self.reason = reason


@dataclass
class RecordRejection:
    record: int
    reason: str

    def as_dict(self) -> dict[str, Any]:
        return {"record": self.record, "reason": self.reason}


@dataclass
class IngestionSummary:
    accepted_count: int = 0
    duplicate_skipped_count: int = 0
    rejected_count: int = 0
    rejections: list[RecordRejection] = field(default_factory=list)


def parse_number(value: Any, integer: bool = False) -> float | int | None:
    """
    Coerce one CSV cell to a number.

    Blank and absent cells give ``None``; anything else that is not a finite
    number in plain decimal or scientific notation raises ``ValueError``.
    Integers are truncated toward zero and must fit an IntegerField.
    """
    if not isinstance(value, str):
        # Short rows come back from Pandas as NaN instead of a string.
        return None
    text = value.strip()
    if not text:
        return None
    if not NUMBER_RE.fullmatch(text):
        raise ValueError(f"{text!r} is not a number")
    number = float(text)
    if not math.isfinite(number):
        raise ValueError(f"{text!r} is not a finite number")
    if not integer:
        return number
    if abs(number) > MAX_INTEGER:
        raise ValueError(f"{text!r} is out of range")
    return int(number)


class RecordValidator:
    """
    Turn one raw CSV row into an unsaved `SandSample`.

    Columns in ``required_fields`` must hold a finite number or the whole
    row is rejected. Every other known column is parsed best-effort and
    left as ``None`` when it cannot be read.
    """

    def __init__(self, required_fields: Iterable[str] | None = None):
        if required_fields is None:
            required_fields = sand_samples_setting("REQUIRED_FIELDS")
        unknown = set(required_fields).difference(CSV_COLUMNS)
        if unknown:
            raise ValueError(f"Unknown required column(s): {sorted(unknown)}")
        self.required_fields = frozenset(required_fields) | ALWAYS_REQUIRED

    def validate(self, row: Mapping[str, Any]) -> SandSample:
        values: dict[str, Any] = {}
        for column, field_name in CSV_COLUMNS.items():
            raw = row.get(column)
            try:
                number = parse_number(raw, integer=column in INTEGER_COLUMNS)
            except ValueError as exc:
                if column in self.required_fields:
                    raise ValidationRejection(column, str(exc)) from None
                number = None
            if number is None and column in self.required_fields:
                raise ValidationRejection(column, "missing value")
            values[field_name] = number

        values["sediment_type"] = classify(values["dmed"])
        return SandSample(**values)


class DeduplicationGate:
    """
    Decide whether a candidate sample is already known.

    A candidate is a duplicate when a stored sample, or a candidate accepted
    earlier by this gate, has exactly the same latitude, longitude and d50.
    Comparison is plain float equality.
    """

    def __init__(self, queryset=None):
        self.queryset = queryset if queryset is not None else SandSample.objects.all()
        self._accepted_keys: set[tuple[float, float, float]] = set()

    def is_duplicate(self, candidate: SandSample) -> bool:
        key = candidate.dedup_key
        if key in self._accepted_keys:
            return True
        latitude, longitude, d50 = key
        if self.queryset.filter(latitude=latitude, longitude=longitude, d50=d50).exists():
            return True
        self._accepted_keys.add(key)
        return False


def read_csv_rows(upload) -> pd.DataFrame:
    """
    Read the uploaded file into a DataFrame of text cells.

    Header names are trimmed (and stripped of the BOM Excel likes to add) so
    " LAT" and "LAT" mean the same column.
    """
    try:
        df = pd.read_csv(
            upload,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            encoding="utf-8",
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise ParseError("Error processing CSV file", details=str(exc)) from exc

    df.columns = [str(col).lstrip("\ufeff").strip() for col in df.columns]
    return df


def record_upload(original_filename: str, summary: IngestionSummary) -> UploadHistory:
    """Log the upload and keep only the newest UPLOAD_HISTORY_LIMIT entries."""
    entry = UploadHistory.objects.create(
        original_filename=original_filename[:255],
        accepted_count=summary.accepted_count,
        duplicate_count=summary.duplicate_skipped_count,
        rejected_count=summary.rejected_count,
    )
    limit = sand_samples_setting("UPLOAD_HISTORY_LIMIT")
    stale_ids = list(UploadHistory.objects.values_list("id", flat=True)[limit:])
    if stale_ids:
        UploadHistory.objects.filter(id__in=stale_ids).delete()
    return entry


def ingest_csv(
    upload,
    original_filename: str = "upload.csv",
    required_fields: Iterable[str] | None = None,
) -> IngestionSummary:
    """
    Validate, deduplicate and store every sample in an uploaded CSV.

    Raises `InputError` when required columns are absent from the header,
    `ParseError` when the file is not readable CSV and `StorageError` when
    the insert fails. Nothing is written in any of those cases.
    """
    if upload is None:
        raise InputError("No file uploaded")

    validator = RecordValidator(required_fields)
    df = read_csv_rows(upload)

    missing_columns = validator.required_fields.difference(df.columns)
    if missing_columns:
        raise InputError(
            "CSV is missing required column(s).",
            details={
                "missing_columns": sorted(missing_columns),
                "seen_columns": list(df.columns),
            },
        )

    max_reported = sand_samples_setting("MAX_REPORTED_REJECTIONS")
    summary = IngestionSummary()
    candidates: list[SandSample] = []

    # Records are counted from 1 after the header; blank lines are not records
    # and a quoted cell may span lines, so this is not a file line number.
    for record_number, row in enumerate(df.to_dict(orient="records"), start=1):
        try:
            candidates.append(validator.validate(row))
        except ValidationRejection as rejection:
            summary.rejected_count += 1
            if len(summary.rejections) < max_reported:
                summary.rejections.append(RecordRejection(record=record_number, reason=str(rejection)))

    try:
        with transaction.atomic():
            gate = DeduplicationGate()
            unique_samples = [sample for sample in candidates if not gate.is_duplicate(sample)]
            if unique_samples:
                SandSample.objects.bulk_create(unique_samples)

            summary.accepted_count = len(unique_samples)
            summary.duplicate_skipped_count = len(candidates) - len(unique_samples)
            record_upload(original_filename, summary)
    except DatabaseError as exc:
        logger.error(
            "Storing uploaded samples failed",
            extra={"upload_filename": original_filename, "candidates": len(candidates)},
            exc_info=True,
        )
        raise StorageError("Error saving data to database", details=str(exc)) from exc

    logger.info(
        "CSV upload ingested",
        extra={
            "upload_filename": original_filename,
            "accepted": summary.accepted_count,
            "duplicates_skipped": summary.duplicate_skipped_count,
            "rejected": summary.rejected_count,
        },
    )
    return summary

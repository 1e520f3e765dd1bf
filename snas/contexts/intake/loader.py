"""
Achievement import and maintenance.

AchievementLoader moves external achievement records into an AchievementStore:

- populate_achievement_data(): bulk import in fixed-size batches. Each record is
  validated, normalized and scored with the clamped import formula. Invalid
  records and (name, issuer) duplicates are skipped and counted; nothing is
  rolled back.
- upsert_achievement(): single-record create-or-update on (name, issuer). Unlike
  the bulk path, an existing record is updated rather than skipped.
- import_default_achievements(), validate_and_update_existing_data(),
  clean_achievement_data(), export_achievements_to_csv(): dataset maintenance.
"""

import time
from dataclasses import dataclass, field
from datetime import date
from math import ceil
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from omegaconf import OmegaConf

from snas.contexts.intake.achievement_data_structure import (
    Achievement,
    normalize_issuer,
    normalize_text,
)
from snas.contexts.intake.csv_reader import read_csv, write_csv
from snas.contexts.intake.logger import (
    _log_debug,
    _log_error,
    _log_info,
    _log_warning,
    log_batch_progress,
    log_import_result,
    log_import_start,
)
from snas.contexts.intake.validation import (
    UPSERT_REQUIRED_FIELDS,
    ValidationResult,
    validate_achievement_record,
)
from snas.contexts.targeting.scoring import import_score
from snas.utils.achievement_store import AchievementStore, DuplicateAchievementError
from snas.utils.config import SNASSettings, load_settings
from snas.utils.errors import ErrorKind, SNASError
from snas.utils.metrics import Stopwatch
from snas.utils.timestamp import Clock, now_exact, parse_iso_date, today as current_date

DEFAULT_ACHIEVEMENTS_PATH = Path(__file__).parent / "default_achievements.yaml"


@dataclass
class ImportRecordError:
    """A record that could not be imported. index is 0-based, row is 1-based."""

    index: int
    row: int
    message: str
    name: Optional[str] = None

    def __str__(self) -> str:
        return f"Record {self.row} (index {self.index}): {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "row": self.row, "name": self.name, "message": self.message}


@dataclass
class ImportResult:
    """
    Outcome of populate_achievement_data().

    Attributes:
        success: False only when the import could not run at all (bad input, no records)
        message: Summary message
        total_records: Records received
        successful_imports: Records inserted
        failed_imports: Records rejected by validation or by the store
        duplicates_skipped: Records whose (name, issuer) already existed
        errors: One ImportRecordError per failed record
        processing_time_ms: Wall-clock duration
        processed_records: Inserted record summaries, or in validation-only mode
            {original, processed, validation} per valid record
        batch_size: Batch size used
        validation_only: True when nothing was written
    """

    success: bool
    message: str
    total_records: int = 0
    successful_imports: int = 0
    failed_imports: int = 0
    duplicates_skipped: int = 0
    errors: List[ImportRecordError] = field(default_factory=list)
    processing_time_ms: int = 0
    processed_records: List[Dict[str, Any]] = field(default_factory=list)
    batch_size: int = 0
    validation_only: bool = False
    timestamp: str = field(default_factory=now_exact)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "processing_time_ms": self.processing_time_ms,
            "statistics": {
                "total_records": self.total_records,
                "successful_imports": self.successful_imports,
                "failed_imports": self.failed_imports,
                "duplicates_skipped": self.duplicates_skipped,
                "errors": [str(error) for error in self.errors],
            },
            "processed_records": self.processed_records,
            "batch_size": self.batch_size,
            "validation_only": self.validation_only,
            "timestamp": self.timestamp,
        }


def _text(record: Mapping[str, Any], key: str) -> str:
    value = record.get(key)
    return "" if value is None else str(value).strip()


class AchievementLoader:
    """
    Imports and maintains achievement records in a store.

    Args:
        store: AchievementStore receiving the records
        settings: SNASSettings (default: load_settings())
        clock: Callable returning today's date (recency scoring, date cleanup)
        timer: Monotonic seconds source used for timing
    """

    def __init__(
        self,
        store: AchievementStore,
        settings: Optional[SNASSettings] = None,
        clock: Clock = current_date,
        timer=time.perf_counter,
    ):
        self.store = store
        self.settings = settings or load_settings()
        self.clock = clock
        self._timer = timer

    def score(self, record) -> int:
        return import_score(
            record,
            today=self.clock(),
            weights=self.settings.importing,
            scoring=self.settings.scoring,
        )

    def transform_record(self, record: Mapping[str, Any]) -> Achievement:
        """
        Normalize a validated raw record into an Achievement ready for insert.

        Trims every field, lower-cases the type, collapses issuer aliases and
        computes the import-time priority score.
        """
        achievement = Achievement(
            name=_text(record, "name"),
            type=_text(record, "type").lower(),
            issuer=normalize_issuer(record.get("issuer")),
            description=_text(record, "description"),
            category=_text(record, "category"),
            date_earned=_text(record, "date_earned") or None,
            active=True,
        )
        achievement.priority_score = self.score(achievement)
        return achievement

    def _resolve_records(self, records) -> List[Any]:
        if isinstance(records, (str, Path)):
            return read_csv(records)
        if isinstance(records, list):
            return records
        raise SNASError(
            ErrorKind.INVALID_INPUT,
            f"Records must be a list, CSV text or a CSV file path, got {type(records).__name__}",
        )

    def _import_one(self, index: int, record, validate_only: bool, result: ImportResult) -> None:
        validation = validate_achievement_record(record)
        if not validation.valid:
            name = record.get("name") if isinstance(record, Mapping) else None
            result.failed_imports += 1
            result.errors.append(ImportRecordError(index, index + 1, ", ".join(validation.errors), name))
            return

        achievement = self.transform_record(record)

        if validate_only:
            result.processed_records.append(
                {
                    "original": dict(record),
                    "processed": achievement.to_dict(),
                    "validation": validation.to_dict(),
                }
            )
            return

        if self.store.exists(achievement.name, achievement.issuer):
            result.duplicates_skipped += 1
            _log_debug(f"Skipping duplicate record: {achievement.name}")
            return

        try:
            achievement_id = self.store.insert(achievement)
        except DuplicateAchievementError:
            result.duplicates_skipped += 1
            _log_debug(f"Skipping duplicate record: {achievement.name}")
            return
        except SNASError as e:
            result.failed_imports += 1
            result.errors.append(
                ImportRecordError(index, index + 1, f"Failed to import {achievement.name}: {e.message}", achievement.name)
            )
            return

        result.successful_imports += 1
        result.processed_records.append(
            {
                "id": achievement_id,
                "name": achievement.name,
                "priority_score": achievement.priority_score,
            }
        )

    def populate_achievement_data(
        self,
        records,
        clear_existing: bool = False,
        validate_only: bool = False,
        batch_size: Optional[int] = None,
    ) -> ImportResult:
        """
        Bulk import achievement records.

        Args:
            records: List of mappings, CSV text, or Path to a CSV file
            clear_existing: Delete every stored achievement first (ignored when validate_only)
            validate_only: Validate and transform without writing anything
            batch_size: Records per batch (default: importing.batch_size)

        Returns:
            ImportResult (success=False only when the input could not be read or was empty)
        """
        batch_size = batch_size or self.settings.importing.batch_size

        with Stopwatch(self._timer) as watch:
            result = ImportResult(
                success=True,
                message="Data import completed successfully",
                batch_size=batch_size,
                validation_only=validate_only,
            )

            try:
                if batch_size < 1:
                    raise SNASError(ErrorKind.INVALID_INPUT, f"Batch size must be positive, got {batch_size}")
                records = self._resolve_records(records)
                if not records:
                    raise SNASError(ErrorKind.INVALID_INPUT, "No valid achievement records found in CSV data")

                if clear_existing and not validate_only:
                    _log_info("Clearing existing achievement data")
                    deleted = self.store.delete_multiple()
                    _log_info(f"Existing achievement data cleared ({deleted} records)")

                result.total_records = len(records)
                log_import_start(len(records), batch_size, validate_only)

                total_batches = ceil(len(records) / batch_size)
                for batch_number, start in enumerate(range(0, len(records), batch_size), start=1):
                    for index in range(start, min(start + batch_size, len(records))):
                        self._import_one(index, records[index], validate_only, result)
                    log_batch_progress(batch_number, total_batches)

            except SNASError as e:
                result.success = False
                result.message = f"Data import failed: {e.message}"

            if validate_only and result.success:
                result.message = "Data validation completed successfully"

        result.processing_time_ms = watch.elapsed_ms
        log_import_result(result)
        return result

    def import_default_achievements(self, path: Optional[Path] = None) -> ImportResult:
        """
        Replace all stored achievements with the default portfolio dataset.

        Args:
            path: YAML file with an "achievements" list (default: packaged dataset)
        """
        path = path or DEFAULT_ACHIEVEMENTS_PATH
        _log_info(f"Importing default achievement dataset from {path.name}")

        config = OmegaConf.to_container(OmegaConf.load(path), resolve=True)
        return self.populate_achievement_data(
            config.get("achievements", []),
            clear_existing=True,
            batch_size=self.settings.importing.default_batch_size,
        )

    def validate_and_update_existing_data(self) -> Dict[str, Any]:
        """
        Backfill missing priority scores (import formula) and missing active flags.

        Returns:
            {success, updated_records, error_count, errors}
        """
        updated, errors = 0, []

        try:
            records = self.store.query()
        except SNASError as e:
            _log_error(f"Data validation failed: {e.message}")
            return {"success": False, "updated_records": 0, "error_count": 1, "errors": [e.message]}

        for achievement in records:
            needs_update = False
            if not achievement.priority_score:
                achievement.priority_score = self.score(achievement)
                needs_update = True
            if achievement.active is None:
                achievement.active = True
                needs_update = True

            if not needs_update:
                continue
            try:
                self.store.update(achievement)
                updated += 1
            except SNASError as e:
                errors.append(f"{achievement.name}: {e.message}")

        if errors:
            _log_warning(f"Updated {updated} records with {len(errors)} errors")
        else:
            _log_info(f"Updated {updated} records")
        return {
            "success": not errors,
            "updated_records": updated,
            "error_count": len(errors),
            "errors": errors,
        }

    def clean_achievement_data(self) -> Dict[str, Any]:
        """
        Normalize stored names and issuers and replace unreadable dates with today.

        Returns:
            {processed, cleaned, errors}
        """
        results = {"processed": 0, "cleaned": 0, "errors": []}
        today: date = self.clock()

        try:
            records = self.store.query()
        except SNASError as e:
            results["errors"].append(f"Cleaning failed: {e.message}")
            return results

        for achievement in records:
            results["processed"] += 1
            modified = False

            cleaned_name = normalize_text(achievement.name)
            if cleaned_name != achievement.name:
                achievement.name = cleaned_name
                modified = True

            cleaned_issuer = normalize_issuer(achievement.issuer)
            if cleaned_issuer != achievement.issuer:
                achievement.issuer = cleaned_issuer
                modified = True

            if achievement.date_earned and parse_iso_date(achievement.date_earned) is None:
                achievement.date_earned = today.isoformat()
                modified = True

            if not modified:
                continue
            try:
                self.store.update(achievement)
                results["cleaned"] += 1
            except SNASError as e:
                results["errors"].append(f"{achievement.name}: {e.message}")

        _log_info(f"Cleaned {results['cleaned']} of {results['processed']} records")
        return results

    def upsert_achievement(self, data) -> Dict[str, Any]:
        """
        Create or update a single achievement keyed on (name, issuer).

        Only name, type and issuer are required; an existing record with the
        same normalized name and issuer is overwritten (its id is kept).

        Returns:
            {success, action: "created" | "updated", achievement_id, achievement}
            or the structured error response
        """
        try:
            validation: ValidationResult = validate_achievement_record(data, UPSERT_REQUIRED_FIELDS)
            if not validation.valid:
                raise SNASError(ErrorKind.INVALID_INPUT, "Invalid achievement data", details=validation.errors)

            achievement = self.transform_record(data)
            existing = self.store.find_by_name_issuer(achievement.name, achievement.issuer)

            if existing is None:
                achievement.id = self.store.insert(achievement)
                action = "created"
            else:
                achievement.id = existing.id
                self.store.update(achievement)
                action = "updated"
        except SNASError as e:
            _log_warning(f"Upsert rejected: {e.message}")
            return e.to_response()

        _log_info(f"Achievement {action}: {achievement.name}")
        return {
            "success": True,
            "action": action,
            "achievement_id": achievement.id,
            "achievement": achievement.to_dict(),
        }

    def export_achievements_to_csv(self, **filters) -> str:
        """
        Export stored achievements as CSV text ordered by date earned.

        Args:
            **filters: Store filters (e.g., type="certification", active=True)
        """
        return write_csv(self.store.query(order_by="date_earned", **filters))

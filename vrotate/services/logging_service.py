"""
Keeps track of what happened to every file of a run.

``ConversionReport`` records each file as converted, skipped or failed, logs a
one-line summary when the run is over, and can write the full record as YAML
so that runs can be inspected or compared afterwards.
"""
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import yaml
from loguru import logger


@dataclass
class FileRecord:
    source: Path
    output: Optional[Path] = None
    reason: str = ""

    def to_dict(self) -> dict:
        record = {"source": str(self.source)}
        if self.output is not None:
            record["output"] = str(self.output)
        if self.reason:
            record["reason"] = self.reason
        return record


@dataclass
class ConversionReport:
    input_root: Path
    started_at: datetime = field(default_factory=datetime.now)
    converted: List[FileRecord] = field(default_factory=list)
    skipped: List[FileRecord] = field(default_factory=list)
    failed: List[FileRecord] = field(default_factory=list)

    def add_converted(self, source: Path, output: Path):
        self.converted.append(FileRecord(source, output))

    def add_skipped(self, source: Path, reason: str, output: Optional[Path] = None):
        self.skipped.append(FileRecord(source, output, reason))

    def add_failed(self, source: Path, reason: str, output: Optional[Path] = None):
        self.failed.append(FileRecord(source, output, reason))

    @property
    def total(self) -> int:
        return len(self.converted) + len(self.skipped) + len(self.failed)

    def summary(self) -> str:
        return (
            f"{len(self.converted)} converted, {len(self.skipped)} skipped, "
            f"{len(self.failed)} failed ({self.total} file(s) considered)"
        )

    def log_summary(self):
        if self.failed:
            logger.warning(f"Rotation of '{self.input_root}' finished: {self.summary()}")
            for record in self.failed:
                logger.warning(f"  failed: {record.source} ({record.reason})")
        else:
            logger.success(f"Rotation of '{self.input_root}' finished: {self.summary()}")

    def to_dict(self) -> dict:
        return {
            "input_root": str(self.input_root),
            "started_at": self.started_at.isoformat(timespec="seconds"),
            "counts": {
                "converted": len(self.converted),
                "skipped": len(self.skipped),
                "failed": len(self.failed),
            },
            "converted": [r.to_dict() for r in self.converted],
            "skipped": [r.to_dict() for r in self.skipped],
            "failed": [r.to_dict() for r in self.failed],
        }

    def write_yaml(self, path: Path):
        """
        Writes the report to ``path`` as YAML, creating parent directories.

        A failure to write is logged and otherwise ignored: the conversions
        themselves already happened.
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                yaml.safe_dump(self.to_dict(), f, allow_unicode=True, sort_keys=False)
            logger.info(f"Run report written to '{path}'")
        except OSError as e:
            logger.error(f"Could not write run report to '{path}': {e}")

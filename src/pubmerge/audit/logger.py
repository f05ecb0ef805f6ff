"""Structured audit logger for JSONL event logging.

Provides append-only structured event logging to JSONL files with
a persistent file handle for efficient I/O.
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from pubmerge.audit.models import LogEvent
from pubmerge.utils import get_iso_timestamp

__all__ = ["AuditLogger"]


class AuditLogger:
    """JSONL audit logger with persistent file handle.

    Writes structured log events to a JSONL file (one JSON object per line).
    Events are append-only and flushed after each write for durability.

    Attributes
    ----------
    run_id : str
        Unique run identifier.
    log_path : Path
        Path to JSONL log file.
    current_stage : str | None
        Current stage name for context.
    """

    def __init__(self, run_id: str, log_path: Path) -> None:
        """Initialize audit logger and open file handle.

        Parameters
        ----------
        run_id : str
            Unique run identifier.
        log_path : Path
            Path to JSONL log file.
        """
        self.run_id = run_id
        self.log_path = Path(log_path)
        self.current_stage: str | None = None

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.log_path.open("a", encoding="utf-8")

    def __enter__(self) -> "AuditLogger":
        """Enter context manager."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager and close file."""
        self.close()

    def close(self) -> None:
        """Flush and close the log file handle."""
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def set_stage(self, stage: str | None) -> None:
        """Set current stage context.

        Parameters
        ----------
        stage : str | None
            Stage name or None to clear.
        """
        self.current_stage = stage

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        stage: str | None = None,
    ) -> None:
        """Write structured event to log.

        Parameters
        ----------
        event_type : str
            Event type identifier (e.g., "source_started").
        data : dict[str, Any] | None, optional
            Event-specific data payload.
        level : str, optional
            Log level ("DEBUG", "INFO", "WARN", "ERROR").
        stage : str | None, optional
            Stage identifier, uses current_stage if not provided.
        """
        if data is None:
            data = {}

        if stage is None:
            stage = self.current_stage

        log_event = LogEvent(
            ts=get_iso_timestamp(),
            run_id=self.run_id,
            level=level,
            event=event_type,
            data=data,
            stage=stage,
        )

        self._write_event(log_event)

    def _write_event(self, event: LogEvent) -> None:
        event_dict = asdict(event)
        json.dump(event_dict, self._file, ensure_ascii=False, separators=(",", ":"))
        self._file.write("\n")
        self._file.flush()

    def run_started(self, command: list[str], parameters: dict[str, Any]) -> None:
        """Log run_started event.

        Parameters
        ----------
        command : list[str]
            Command-line arguments.
        parameters : dict[str, Any]
            Configuration parameters.
        """
        self.event(
            "run_started",
            data={"command": command, "parameters": parameters},
        )

    def run_finished(
        self,
        status: str,
        duration_seconds: float,
        publications: int | None = None,
    ) -> None:
        """Log run_finished event.

        Parameters
        ----------
        status : str
            Run status ("success", "failed", "partial").
        duration_seconds : float
            Total execution time in seconds.
        publications : int | None, optional
            Canonical publications produced.
        """
        data: dict[str, Any] = {
            "status": status,
            "duration_seconds": duration_seconds,
        }
        if publications is not None:
            data["publications"] = publications

        self.event("run_finished", data=data, stage=None)

    def source_started(self, source: str, records: int) -> None:
        """Log source_started event and enter the source's stage.

        Parameters
        ----------
        source : str
            Source name.
        records : int
            Normalized records received from the source.
        """
        self.set_stage(source)
        self.event("source_started", data={"source": source, "records": records})

    def source_finished(
        self,
        source: str,
        duration_seconds: float,
        counters: dict[str, int] | None = None,
    ) -> None:
        """Log source_finished event and leave the source's stage.

        Parameters
        ----------
        source : str
            Source name.
        duration_seconds : float
            Source pass execution time in seconds.
        counters : dict[str, int] | None, optional
            Per-source counters.
        """
        data: dict[str, Any] = {"source": source, "duration_seconds": duration_seconds}
        if counters:
            data["counters"] = counters

        self.event("source_finished", data=data, stage=source)
        self.set_stage(None)

    def source_skipped(self, source: str, reason: str) -> None:
        """Log source_skipped WARN event.

        Parameters
        ----------
        source : str
            Source name.
        reason : str
            Why the source was not processed.
        """
        self.event(
            "source_skipped",
            data={"source": source, "reason": reason},
            level="WARN",
            stage=source,
        )

    def record_dropped(self, source: str, index: int, reason: str) -> None:
        """Log record_dropped WARN event for a malformed raw record.

        Parameters
        ----------
        source : str
            Source name.
        index : int
            0-based position of the raw record in its source list.
        reason : str
            Why the record was dropped.
        """
        self.event(
            "record_dropped",
            data={"source": source, "index": index, "reason": reason},
            level="WARN",
            stage=source,
        )

    def record_matched(
        self,
        source: str,
        key: str,
        title: str,
        changed_fields: list[str],
    ) -> None:
        """Log record_matched DEBUG event.

        Parameters
        ----------
        source : str
            Source name.
        key : str
            Index key of the publication the record merged into.
        title : str
            Incoming record title.
        changed_fields : list[str]
            Canonical fields updated by the merge.
        """
        self.event(
            "record_matched",
            data={
                "source": source,
                "key": key,
                "title": title,
                "changed_fields": changed_fields,
            },
            level="DEBUG",
        )

    def record_inserted(self, source: str, key: str, title: str) -> None:
        """Log record_inserted DEBUG event.

        Parameters
        ----------
        source : str
            Source name.
        key : str
            Index key of the new publication.
        title : str
            Record title.
        """
        self.event(
            "record_inserted",
            data={"source": source, "key": key, "title": title},
            level="DEBUG",
        )

    def record_rekeyed(self, source: str, old_key: str, new_key: str) -> None:
        """Log record_rekeyed event.

        Parameters
        ----------
        source : str
            Source whose record supplied the new DOI.
        old_key : str
            Previous index key.
        new_key : str
            New index key.
        """
        self.event(
            "record_rekeyed",
            data={"source": source, "old_key": old_key, "new_key": new_key},
        )

    def error(
        self,
        exception_class: str,
        message: str,
        stage: str | None = None,
        traceback: str | None = None,
    ) -> None:
        """Log error event.

        Parameters
        ----------
        exception_class : str
            Exception class name.
        message : str
            Error message.
        stage : str | None, optional
            Stage where error occurred.
        traceback : str | None, optional
            Stack trace.
        """
        data: dict[str, Any] = {
            "exception_class": exception_class,
            "message": message,
        }
        if traceback is not None:
            data["traceback"] = traceback

        self.event("error", data=data, stage=stage, level="ERROR")

"""Audit logging subsystem for pubmerge.

Main Components
---------------
- AuditLogger: JSONL event logger
- generate_run_id: run identifier factory
"""

from pubmerge.audit.helpers import generate_run_id, get_package_version
from pubmerge.audit.logger import AuditLogger
from pubmerge.audit.models import LogEvent
from pubmerge.utils import get_iso_timestamp

__all__ = [
    "AuditLogger",
    "LogEvent",
    "generate_run_id",
    "get_iso_timestamp",
    "get_package_version",
]

"""
fuel_services -- Package init and public API.

Responsibility:
    Stateful shell around the pure engines: the shift entry wizard and
    commit pipeline, the in-memory ledger and audit trail, post-commit
    hooks, export renderings and the optional insight collaborator.
    This is the only layer that reads the wall clock or makes network
    calls.

Architecture position:
    Services -- stateful orchestration over engines + kernel.

    Dependency direction (enforced by tests/architecture/test_layer_boundaries.py):
        fuel_services/ -> fuel_engines/  (allowed)
        fuel_services/ -> fuel_kernel/   (allowed)
        fuel_services/ -> fuel_config/   (allowed)
        fuel_engines/  -> fuel_services/ (FORBIDDEN)
        fuel_kernel/   -> fuel_services/ (FORBIDDEN)
"""

from fuel_services.audit import AuditAction, AuditTrail
from fuel_services.demo import generate_sample_day
from fuel_services.export import (
    CSV_HEADER,
    export_filename,
    notification_summary,
    to_csv,
    write_csv,
)
from fuel_services.hooks import (
    CommitOutcome,
    MasterDataAdvancer,
    MasterDataStore,
    MeterReadingUpdate,
    PostCommitHook,
    TankVolumeUpdate,
    plan_master_data_updates,
)
from fuel_services.insight import FALLBACK_TEXT, InsightService
from fuel_services.ledger import ReconciliationLedger
from fuel_services.shift_service import ShiftService

__all__ = [
    "AuditAction",
    "AuditTrail",
    "CSV_HEADER",
    "CommitOutcome",
    "FALLBACK_TEXT",
    "InsightService",
    "MasterDataAdvancer",
    "MasterDataStore",
    "MeterReadingUpdate",
    "PostCommitHook",
    "ReconciliationLedger",
    "ShiftService",
    "TankVolumeUpdate",
    "export_filename",
    "generate_sample_day",
    "notification_summary",
    "plan_master_data_updates",
    "to_csv",
    "write_csv",
]

"""
Typed Exception Hierarchy for the Fuel Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Every error has a typed class (catch by type, not message), a ``code``
class attribute (machine-readable, API-safe), and structured attributes
carrying the data a caller needs to react.

Input mistakes made by an operator are NOT exceptions: the validation
engine returns them as a complete list of ``ValidationError`` descriptors
so the entry form can show every problem at once.  The service shell
raises ``ShiftValidationError`` only when a caller tries to advance or
commit a shift while that list is non-empty.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    FuelKernelError (base)
    |
    +-- ShiftError
    |   +-- ShiftValidationError
    |   +-- WizardStageError
    |   +-- UnknownAssetError
    |   +-- ShiftAlreadyCommittedError
    |
    +-- ReconciliationError
    |   +-- ReconciliationNotFoundError
    |   +-- ReconciliationLockedError
    |   +-- InvalidStatusTransitionError
    |
    +-- ConfigError
        +-- MissingPriceError
        +-- InvalidConfigError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                          | When Raised
----------------|-------------------------------|--------------------------------------
Shift           | SHIFT_VALIDATION_FAILED       | Advance/commit with input errors
                | WIZARD_STAGE_INVALID          | Operation not allowed at this stage
                | UNKNOWN_ASSET                 | Meter/tank id not in master data
                | SHIFT_ALREADY_COMMITTED       | Same shift draft committed twice
----------------|-------------------------------|--------------------------------------
Reconciliation  | RECONCILIATION_NOT_FOUND      | Record ID not in the ledger
                | RECONCILIATION_LOCKED         | Changing a signed-off record
                | INVALID_STATUS_TRANSITION     | Edge not in the lifecycle table
----------------|-------------------------------|--------------------------------------
Config          | MISSING_PRICE                 | No unit price for a fuel type
                | INVALID_CONFIG                | Site configuration cannot be parsed
"""

from __future__ import annotations

from typing import Any


class FuelKernelError(Exception):
    """
    Base exception for all fuel kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "FUEL_KERNEL_ERROR"


# Shift-related exceptions


class ShiftError(FuelKernelError):
    """Base exception for shift entry errors."""

    code: str = "SHIFT_ERROR"


class ShiftValidationError(ShiftError):
    """
    Shift readings or dips failed validation.

    Carries every violation, not just the first, so the caller can
    present the complete error set.
    """

    code: str = "SHIFT_VALIDATION_FAILED"

    def __init__(self, shift_id: str, stage: str, errors: tuple[Any, ...]):
        self.shift_id = shift_id
        self.stage = stage
        self.errors = errors
        super().__init__(
            f"Shift {shift_id} failed {stage} validation: "
            f"{len(errors)} error(s)"
        )


class WizardStageError(ShiftError):
    """Operation is not permitted at the draft's current wizard stage."""

    code: str = "WIZARD_STAGE_INVALID"

    def __init__(self, shift_id: str, stage: str, operation: str):
        self.shift_id = shift_id
        self.stage = stage
        self.operation = operation
        super().__init__(
            f"Cannot {operation} shift {shift_id} at stage {stage}"
        )


class UnknownAssetError(ShiftError):
    """Reading or dip entered for a meter/tank not in the site master data."""

    code: str = "UNKNOWN_ASSET"

    def __init__(self, asset_kind: str, asset_id: str):
        self.asset_kind = asset_kind
        self.asset_id = asset_id
        super().__init__(f"Unknown {asset_kind}: {asset_id}")


class ShiftAlreadyCommittedError(ShiftError):
    """Shift draft has already been committed to the ledger."""

    code: str = "SHIFT_ALREADY_COMMITTED"

    def __init__(self, shift_id: str):
        self.shift_id = shift_id
        super().__init__(f"Shift already committed: {shift_id}")


# Reconciliation-related exceptions


class ReconciliationError(FuelKernelError):
    """Base exception for reconciliation record errors."""

    code: str = "RECONCILIATION_ERROR"


class ReconciliationNotFoundError(ReconciliationError):
    """Reconciliation with given ID was not found."""

    code: str = "RECONCILIATION_NOT_FOUND"

    def __init__(self, reconciliation_id: str):
        self.reconciliation_id = reconciliation_id
        super().__init__(f"Reconciliation not found: {reconciliation_id}")


class ReconciliationLockedError(ReconciliationError):
    """Reconciliation has been signed off and is immutable."""

    code: str = "RECONCILIATION_LOCKED"

    def __init__(self, reconciliation_id: str, operation: str):
        self.reconciliation_id = reconciliation_id
        self.operation = operation
        super().__init__(
            f"Cannot {operation} locked reconciliation {reconciliation_id}"
        )


class InvalidStatusTransitionError(ReconciliationError):
    """Requested status change is not a legal lifecycle edge."""

    code: str = "INVALID_STATUS_TRANSITION"

    def __init__(self, reconciliation_id: str, from_status: str, to_status: str):
        self.reconciliation_id = reconciliation_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Invalid transition for {reconciliation_id}: "
            f"{from_status} -> {to_status}"
        )


# Configuration exceptions


class ConfigError(FuelKernelError):
    """Base exception for site configuration errors."""

    code: str = "CONFIG_ERROR"


class MissingPriceError(ConfigError):
    """No unit price is configured for a fuel type."""

    code: str = "MISSING_PRICE"

    def __init__(self, fuel_type: str):
        self.fuel_type = fuel_type
        super().__init__(f"No unit price configured for fuel type {fuel_type}")


class InvalidConfigError(ConfigError):
    """Site configuration could not be parsed."""

    code: str = "INVALID_CONFIG"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid configuration in {source}: {reason}")

"""
Fuel Kernel - shift reconciliation core

Domain model, typed exceptions, structured logging and clock abstraction
shared by the pure engines and the service shell:
- Immutable tank, meter and reconciliation records
- Decimal-only stock and money arithmetic
- Immutable shift drafts for the 3-stage entry wizard
"""

__version__ = "0.1.0"

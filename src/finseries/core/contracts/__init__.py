"""
Contract Validation Module

JSON Schema validation of raw input documents.
"""

from .validators import (
    ContractValidator,
    RawSeriesValidator,
    SchemaLoader,
    validate_raw_series,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "RawSeriesValidator",
    # Functions
    "validate_raw_series",
]

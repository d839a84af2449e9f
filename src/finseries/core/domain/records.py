"""
RawSeriesRecord — input record for a time series

Immutable Pydantic model of the JSON input contract
(contracts/schema/raw_series.json):

    {"key": "any id or name (optional)",
     "timestamps": ["2016-08-31", "2016-09-30", ...],
     "values": [1.23, 1.27, ...]}

Values may be null (missing); they become NaN when samples are built.
"""

from pydantic import BaseModel, Field, field_validator


class RawSeriesRecord(BaseModel):
    """
    Raw (timestamp text, value) columns of one series.

    Timestamps stay text here; they are parsed at sample construction.
    """

    key: str = Field("", description="Series id or name (may be empty)")
    timestamps: list[str] = Field(..., description="ISO-8601 date or date-time strings")
    values: list[float | None] = Field(..., description="Values, null = missing")

    model_config = {"frozen": True}

    @field_validator("values")
    @classmethod
    def validate_equal_length(cls, v: list[float | None], info) -> list[float | None]:
        """Timestamps and values must pair up one-to-one."""
        if "timestamps" in info.data:
            n = len(info.data["timestamps"])
            if len(v) != n:
                raise ValueError(
                    f"values length {len(v)} does not match timestamps length {n}"
                )
        return v

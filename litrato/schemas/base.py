# litrato/schemas/base.py
"""
Shared pydantic bases for the scheduling payloads.

Responses use ``StandardizedModel``; request bodies use ``StrictModel`` so
unknown fields are rejected instead of silently ignored.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer


class StandardizedModel(BaseModel):
    """Response base: enums as values, fields settable by name."""

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True)


class StrictModel(BaseModel):
    """Request base: extra fields forbidden, defaults and assignments validated."""

    model_config = ConfigDict(
        extra="forbid",
        validate_default=True,
        validate_assignment=True,
    )


def _to_centavos(value) -> Decimal:
    if isinstance(value, bool):
        raise ValueError("Amount cannot be a boolean")
    return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


# Peso amount, kept as Decimal internally and sent to clients as a JSON number
Money = Annotated[
    Decimal,
    BeforeValidator(_to_centavos),
    PlainSerializer(float, return_type=float, when_used="json"),
]

"""
Base Pydantic Schemas
========================

Provides base classes and common functionality for all schemas using Pydantic V2.
"""

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, model_validator
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Any
from typing_extensions import Annotated

DISPLAY_QUANT = Decimal('0.01')


def round_display_qty(value: Any) -> Optional[float]:
    """Pembulatan 2 desimal; hanya dipakai saat serialisasi ke API."""
    if value is None:
        return None
    return float(Decimal(str(value)).quantize(DISPLAY_QUANT, rounding=ROUND_HALF_UP))


# Kuantitas internal tetap Decimal penuh; dibulatkan hanya saat keluar dari API
DisplayQty = Annotated[Decimal, PlainSerializer(round_display_qty, return_type=float)]


class BaseSchema(BaseModel):
    """Base schema dengan common config, versi Pydantic V2."""

    model_config = ConfigDict(
        from_attributes=True,
        extra='ignore',
    )

    @model_validator(mode='before')
    @classmethod
    def strip_whitespace(cls, data: Any) -> Any:
        """Strip whitespace dari string fields sebelum validasi."""
        if isinstance(data, dict):
            data = {key: value.strip() if isinstance(value, str) else value
                    for key, value in data.items()}
        return data


class PaginationSchema(BaseModel):
    """Schema untuk pagination response, versi Pydantic V2."""
    page: int = Field(gt=0, description="Page must be at least 1")
    per_page: int = Field(gt=0, le=100, description="Per page must be between 1 and 100")
    pages: int
    total: int
    has_next: bool
    has_prev: bool


class TimestampMixin(BaseModel):
    """Mixin untuk timestamp fields."""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

"""Discount configuration — operator-defined, independent of the hierarchy.

Applied after rate computation.  Senior and PWD discounts are usually
VAT-exempt; a single VAT-exempt discount zeroes VAT for the transaction.
"""

from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import AliasChoices, AliasGenerator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DiscountType = Literal["senior", "pwd", "custom"]

# camelCase accepted on input; output stays snake_case
_CAMEL_INPUT = AliasGenerator(validation_alias=to_camel)


class DiscountConditions(BaseModel):
    """Eligibility predicate.

    Only the named fields are evaluated.  Extra keys are preserved so that
    operator-defined metadata survives a round trip through the store.
    """

    model_config = ConfigDict(alias_generator=_CAMEL_INPUT, populate_by_name=True, extra="allow")

    min_amount: float | None = Field(
        default=None, ge=0,
        description="Pre-discount amount must be at least this much",
    )
    max_usage: int | None = Field(
        default=None, ge=0,
        description="Discount no longer applies once the customer has used it this many times",
    )
    vehicle_types: list[str] | None = Field(
        default=None,
        description="Restrict to these vehicle types",
    )


class DiscountConfiguration(BaseModel):
    model_config = ConfigDict(alias_generator=_CAMEL_INPUT, populate_by_name=True)

    id: str
    operator_id: str | None = Field(default=None, description="None = platform-wide discount")
    name: str
    type: DiscountType = "custom"
    percentage: float = Field(ge=0, le=100)
    is_vat_exempt: bool = Field(default=False, validation_alias=AliasChoices("is_vat_exempt", "isVATExempt"))
    conditions: DiscountConditions = Field(default_factory=DiscountConditions)
    is_active: bool = True
    created_by: str | None = None
    created_at: dt.datetime | None = None

    @field_validator("conditions", mode="before")
    @classmethod
    def null_conditions_as_empty(cls, v):
        """Stored rows may carry NULL conditions."""
        return {} if v is None else v


class DiscountCreate(BaseModel):
    """Input for creating a discount; the store assigns the id."""

    model_config = ConfigDict(alias_generator=_CAMEL_INPUT, populate_by_name=True)

    operator_id: str | None = None
    name: str = Field(min_length=1)
    type: DiscountType = "custom"
    percentage: float = Field(ge=0, le=100)
    is_vat_exempt: bool = Field(default=False, validation_alias=AliasChoices("is_vat_exempt", "isVATExempt"))
    conditions: DiscountConditions = Field(default_factory=DiscountConditions)
    is_active: bool = True

    @field_validator("conditions", mode="before")
    @classmethod
    def null_conditions_as_empty(cls, v):
        return {} if v is None else v


class DiscountUpdate(BaseModel):
    """Partial update; only fields that are set are applied."""

    model_config = ConfigDict(alias_generator=_CAMEL_INPUT, populate_by_name=True)

    name: str | None = Field(default=None, min_length=1)
    percentage: float | None = Field(default=None, ge=0, le=100)
    is_vat_exempt: bool | None = Field(default=None, validation_alias=AliasChoices("is_vat_exempt", "isVATExempt"))
    conditions: DiscountConditions | None = None
    is_active: bool | None = None

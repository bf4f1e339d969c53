"""Pydantic models describing the public API surface."""

from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

__all__ = [
    "BreakdownItemInput",
    "CalculationRequest",
    "RangeEntry",
    "BracketResultEntry",
    "DeductionsEntry",
    "TaxableAmountsEntry",
    "SummaryLabels",
    "Summary",
    "ResponseMeta",
    "CalculationResponse",
    "format_validation_error",
]


class BreakdownItemInput(BaseModel):
    """A labelled income line item contributing to the yearly total."""

    model_config = ConfigDict(extra="forbid")

    label: str = ""
    amount: float = Field(default=0.0, ge=0, allow_inf_nan=False)

    @field_validator("label", mode="before")
    @classmethod
    def _coerce_label(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()


class CalculationRequest(BaseModel):
    """Top-level payload accepted by the calculation endpoint."""

    model_config = ConfigDict(extra="forbid")

    year: int | None = None
    locale: str | None = None
    gross_yearly_income: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    use_breakdown: bool = False
    breakdown_items: list[BreakdownItemInput] = Field(default_factory=list)

    @field_validator("breakdown_items", mode="before")
    @classmethod
    def _normalise_breakdown_items(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, dict):
            # Persisted client state keys line items by identifier.
            return list(value.values())
        return value

    @property
    def breakdown_total(self) -> float:
        return sum(item.amount for item in self.breakdown_items)

    @property
    def effective_gross_income(self) -> float:
        """Gross income from the line items when the breakdown is in use."""

        if self.use_breakdown:
            return self.breakdown_total
        return self.gross_yearly_income


class RangeEntry(BaseModel):
    """Bracket bounds; ``max`` is ``None`` for the open-ended bracket."""

    model_config = ConfigDict(extra="forbid")

    min: float
    max: float | None = None


class BracketResultEntry(BaseModel):
    """Serialised allocation for a single bracket."""

    model_config = ConfigDict(extra="forbid")

    range_in_units: RangeEntry
    range: RangeEntry
    label: str
    rate: float
    rate_label: str
    taxable_amount: float
    taxes: float


class FirstDeductionEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    label: str
    percentage: float
    limit_in_units: float
    limit: float
    limit_label: str
    deducted_amount: float


class SecondDeductionEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    label: str
    amount_in_units: float
    expected_amount: float
    deducted_amount: float


class DeductionsEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    first: FirstDeductionEntry
    second: SecondDeductionEntry
    total: float


class TaxableAmountsEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    initial_amount: float
    after_first_deduction: float
    after_second_deduction: float
    final_amount: float


class SummaryLabels(BaseModel):
    """Localized labels for summary fields."""

    model_config = ConfigDict(extra="forbid")

    gross_income: str
    total_deductions: str
    taxable_income: str
    tax_total: str
    net_income: str
    effective_tax_rate: str


class Summary(BaseModel):
    """Aggregated calculation results."""

    model_config = ConfigDict(extra="forbid")

    gross_income: float
    total_deductions: float
    taxable_income: float
    tax_total: float
    net_income: float
    effective_tax_rate: float
    labels: SummaryLabels


class ResponseMeta(BaseModel):
    """Metadata returned alongside the calculation output."""

    model_config = ConfigDict(extra="forbid")

    year: int
    locale: str
    unit_value: float
    income_source: str
    breakdown_item_count: int | None = None


class CalculationResponse(BaseModel):
    """Full response payload produced by the calculation service."""

    model_config = ConfigDict(extra="forbid")

    summary: Summary
    deductions: DeductionsEntry
    taxable_amounts: TaxableAmountsEntry
    brackets: list[BracketResultEntry]
    meta: ResponseMeta


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if "greater than or equal to 0" in message.lower():
            message = "value cannot be negative"
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation payload: {details}"

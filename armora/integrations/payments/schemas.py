"""Pydantic schemas for the payment gateway charge API."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, field_validator


class ChargeRequest(BaseModel):
    """Body posted to the gateway charge endpoint."""

    amount: Decimal
    currency: str
    idempotency_key: str
    summary: dict[str, Any] = {}

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        """Strip whitespace and uppercase."""
        return v.strip().upper()


class ChargeResponse(BaseModel):
    """Gateway response. ``status`` is "succeeded" on success."""

    status: str
    token: str | None = None
    failure_reason: str | None = None
    raw_response: dict = {}

# -*- coding: utf-8 -*-
"""Structured verdict schema aligned with the analysis prompt's JSON output."""

from __future__ import annotations

import math
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class Verdict(BaseModel):
    """The single JSON object the model must return for one candidate."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    is_valid: bool = Field(False, alias="isValid")
    entry: Optional[float] = None
    stop_loss: Optional[float] = Field(None, alias="stopLoss")
    rationale: Optional[str] = ""

    @field_validator("entry", "stop_loss", mode="before")
    @classmethod
    def _reject_bool_prices(cls, value: Any) -> Any:
        # JSON true/false would otherwise coerce to 1.0/0.0
        if isinstance(value, bool):
            raise ValueError("price must be a number, not a boolean")
        return value

    def is_actionable(self) -> bool:
        """True when the model says valid and both prices are finite and positive."""
        if not self.is_valid:
            return False
        for price in (self.entry, self.stop_loss):
            if price is None or not math.isfinite(price) or price <= 0:
                return False
        return True


def parse_verdict(payload: Dict[str, Any]) -> Optional[Verdict]:
    """Validate a raw payload; shape errors (e.g. entry="abc") yield None."""
    try:
        return Verdict.model_validate(payload)
    except ValidationError:
        return None


__all__ = ["Verdict", "parse_verdict"]

from __future__ import annotations

from pydantic import Field

from cvbuilder.schemas.cv import CamelModel


class PricingUpdateRequest(CamelModel):
    additional_cv_price: int = Field(ge=0, le=100_000)

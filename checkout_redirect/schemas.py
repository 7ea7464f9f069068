from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class VariantRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    variant_id: int
    product_id: int


class ModifierSelection(BaseModel):
    model_config = ConfigDict(frozen=True)

    option_id: int
    option_value: int | str


class CartLineItem(BaseModel):
    product_id: int
    variant_id: int
    quantity: int = Field(ge=1)
    option_selections: list[ModifierSelection] = Field(default_factory=list)


class CreateCartRequest(BaseModel):
    channel_id: int
    line_items: list[CartLineItem] = Field(min_length=1)

    def to_payload(self) -> dict:
        payload = self.model_dump()
        for line_item in payload["line_items"]:
            if not line_item["option_selections"]:
                del line_item["option_selections"]
        return payload


class ErrorBody(BaseModel):
    error: str
    detail: str | None = None

from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_validator

from checkout_redirect.errors import BadRequestError
from checkout_redirect.schemas import ModifierSelection

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)", re.ASCII)
# Longer digit runs are not a usable quantity and are treated as unparsable.
_MAX_QUANTITY_DIGITS = 18

BUNDLE_SKU = "PUL-30-SRV-2PAK"

DEFAULT_PLAN_TO_SKU: dict[str, str] = {
    "single order": "PUL-30-SRV",
    "1 bag subscription": "PUL-30-SRV-SUB",
    "2 bag subscription": BUNDLE_SKU,
    "single": "PUL-30-SRV",
    "1bag": "PUL-30-SRV-SUB",
    "2bag": BUNDLE_SKU,
    "monthly": "PUL-30-SRV-SUB",
    "double": BUNDLE_SKU,
}

# The bundle SKU already encodes two bags.
DEFAULT_QUANTITY_POLICY: dict[str, int] = {BUNDLE_SKU: 1}


def normalize_plan(plan: str | None) -> str:
    return (plan or "").strip().lower()


def parse_quantity(raw_qty: str | None) -> int:
    match = _LEADING_INT_RE.match(raw_qty or "")
    if not match:
        return 1
    signed = match.group(1)
    digits = signed.lstrip("+-").lstrip("0") or "0"
    if len(digits) > _MAX_QUANTITY_DIGITS:
        return 1
    if signed.startswith("-"):
        return 1
    return max(1, int(digits))


class StorefrontCatalog(BaseModel):
    """Read-only plan and per-SKU purchase rules for the storefront.

    ``plan_to_sku`` keys are matched after lowercasing and trimming, and their
    order is the order reported back to callers for an unknown plan.
    ``quantity_policy`` pins the cart quantity for SKUs whose bundling is
    already part of the SKU. ``modifier_overrides`` supplies explicit modifier
    selections and bypasses the upstream modifier lookup for that SKU.
    """

    model_config = ConfigDict(frozen=True, validate_default=True)

    plan_to_sku: Mapping[str, str] = Field(default_factory=lambda: dict(DEFAULT_PLAN_TO_SKU))
    quantity_policy: Mapping[str, int] = Field(default_factory=lambda: dict(DEFAULT_QUANTITY_POLICY))
    modifier_overrides: Mapping[str, tuple[ModifierSelection, ...]] = Field(default_factory=dict)

    @field_validator("plan_to_sku")
    @classmethod
    def normalize_plan_keys(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        normalized: dict[str, str] = {}
        for plan, sku in value.items():
            key = normalize_plan(plan)
            cleaned_sku = sku.strip()
            if not key:
                raise ValueError("Plan keys cannot be empty")
            if not cleaned_sku:
                raise ValueError(f"Plan '{key}' maps to an empty SKU")
            if key in normalized:
                raise ValueError(f"Duplicate plan key after normalization: {key}")
            normalized[key] = cleaned_sku
        return MappingProxyType(normalized)

    @field_validator("quantity_policy")
    @classmethod
    def validate_quantity_policy(cls, value: Mapping[str, int]) -> Mapping[str, int]:
        for sku, quantity in value.items():
            if quantity < 1:
                raise ValueError(f"Fixed quantity for {sku} must be at least 1")
        return MappingProxyType(dict(value))

    @field_validator("modifier_overrides")
    @classmethod
    def freeze_modifier_overrides(
        cls, value: Mapping[str, tuple[ModifierSelection, ...]]
    ) -> Mapping[str, tuple[ModifierSelection, ...]]:
        return MappingProxyType(dict(value))

    @property
    def plan_keys(self) -> list[str]:
        return list(self.plan_to_sku)

    def resolve_sku(self, *, plan: str | None, sku: str | None) -> str:
        if sku:
            return sku
        resolved = self.plan_to_sku.get(normalize_plan(plan))
        if not resolved:
            options = ", ".join(self.plan_keys)
            raise BadRequestError(message=f"Unknown plan. Try one of: {options}")
        return resolved

    def resolve_quantity(self, *, raw_qty: str | None, sku: str) -> int:
        fixed = self.quantity_policy.get(sku)
        if fixed is not None:
            return fixed
        return parse_quantity(raw_qty)

    def modifier_override(self, sku: str) -> list[ModifierSelection]:
        return list(self.modifier_overrides.get(sku, ()))


default_catalog = StorefrontCatalog()

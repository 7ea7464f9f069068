from __future__ import annotations

import logging
from typing import Any, Protocol

from checkout_redirect.bigcommerce_api import BigCommerceApiClient
from checkout_redirect.catalog import StorefrontCatalog
from checkout_redirect.errors import BadGatewayError, ConfigurationError
from checkout_redirect.schemas import ModifierSelection

logger = logging.getLogger(__name__)


class ModifierStrategy(Protocol):
    async def select(self, *, product_id: int, sku: str) -> list[ModifierSelection] | None:
        """Return selections, or None to defer to the next strategy."""


class OverrideStrategy:
    def __init__(self, catalog: StorefrontCatalog) -> None:
        self._catalog = catalog

    async def select(self, *, product_id: int, sku: str) -> list[ModifierSelection] | None:
        selections = self._catalog.modifier_override(sku)
        return selections or None


class DefaultValueStrategy:
    """Picks the default (or first) value of every required multi-choice modifier."""

    def __init__(self, api: BigCommerceApiClient) -> None:
        self._api = api

    async def select(self, *, product_id: int, sku: str) -> list[ModifierSelection] | None:
        modifiers = await self._api.list_required_modifiers(product_id=product_id)
        return [self._select_value(modifier, sku=sku) for modifier in modifiers]

    @staticmethod
    def _select_value(modifier: dict[str, Any], *, sku: str) -> ModifierSelection:
        name = modifier.get("display_name") or modifier.get("id")
        option_values = modifier.get("option_values") or []
        if not option_values:
            raise ConfigurationError(
                message=(
                    f"Required modifier '{name}' on SKU {sku} has no selectable values "
                    f"(type: {modifier.get('type') or 'unknown'}); set an explicit override"
                ),
            )

        chosen = next(
            (value for value in option_values if isinstance(value, dict) and value.get("is_default")),
            option_values[0],
        )
        option_id = modifier.get("id")
        option_value = chosen.get("id") if isinstance(chosen, dict) else None
        if not isinstance(option_id, int) or option_value is None:
            raise BadGatewayError(message=f"Modifier '{name}' response is missing id values")
        logger.info("Auto-selected value %s for required modifier '%s' on %s", option_value, name, sku)
        return ModifierSelection(option_id=option_id, option_value=option_value)


class ModifierResolver:
    def __init__(self, strategies: list[ModifierStrategy]) -> None:
        self._strategies = strategies

    @classmethod
    def build(
        cls,
        *,
        catalog: StorefrontCatalog,
        api: BigCommerceApiClient,
        auto_resolve: bool,
    ) -> "ModifierResolver":
        strategies: list[ModifierStrategy] = [OverrideStrategy(catalog)]
        if auto_resolve:
            strategies.append(DefaultValueStrategy(api))
        return cls(strategies)

    async def resolve(self, *, product_id: int, sku: str) -> list[ModifierSelection]:
        for strategy in self._strategies:
            selections = await strategy.select(product_id=product_id, sku=sku)
            if selections is not None:
                return selections
        return []

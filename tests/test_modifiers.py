from __future__ import annotations

import asyncio

import pytest

from checkout_redirect.bigcommerce_api import BigCommerceApiClient
from checkout_redirect.catalog import StorefrontCatalog
from checkout_redirect.config import Settings
from checkout_redirect.errors import ConfigurationError
from checkout_redirect.modifiers import ModifierResolver
from checkout_redirect.schemas import ModifierSelection


def _resolver(fake, *, catalog: StorefrontCatalog | None = None, auto_resolve: bool = True) -> ModifierResolver:
    api = BigCommerceApiClient(settings=Settings(BC_ADMIN_TOKEN="token"), transport=fake.transport())
    return ModifierResolver.build(catalog=catalog or StorefrontCatalog(), api=api, auto_resolve=auto_resolve)


def test_default_option_value_is_preferred(fake_bigcommerce):
    fake_bigcommerce.modifiers[11] = [
        {
            "id": 7,
            "display_name": "Flavor",
            "type": "dropdown",
            "required": True,
            "option_values": [
                {"id": 70, "label": "Original", "is_default": False},
                {"id": 71, "label": "Mint", "is_default": True},
            ],
        }
    ]

    result = asyncio.run(_resolver(fake_bigcommerce).resolve(product_id=11, sku="PUL-30-SRV"))

    assert result == [ModifierSelection(option_id=7, option_value=71)]


def test_first_option_value_is_used_without_default(fake_bigcommerce):
    fake_bigcommerce.modifiers[11] = [
        {
            "id": 8,
            "display_name": "Grind",
            "type": "radio_buttons",
            "is_required": True,
            "option_values": [{"id": 80, "label": "Whole"}, {"id": 81, "label": "Fine"}],
        },
        {"id": 9, "display_name": "Engraving", "type": "text", "required": False, "option_values": []},
    ]

    result = asyncio.run(_resolver(fake_bigcommerce).resolve(product_id=11, sku="PUL-30-SRV"))

    assert result == [ModifierSelection(option_id=8, option_value=80)]


def test_product_without_required_modifiers_yields_no_selections(fake_bigcommerce):
    result = asyncio.run(_resolver(fake_bigcommerce).resolve(product_id=11, sku="PUL-30-SRV"))

    assert result == []
    assert len(fake_bigcommerce.requests) == 1


def test_required_typed_modifier_is_never_guessed(fake_bigcommerce):
    fake_bigcommerce.modifiers[11] = [
        {"id": 9, "display_name": "Gift message", "type": "text", "required": True, "option_values": []},
    ]

    with pytest.raises(ConfigurationError) as exc_info:
        asyncio.run(_resolver(fake_bigcommerce).resolve(product_id=11, sku="PUL-30-SRV"))

    assert exc_info.value.status_code == 500
    assert "Gift message" in exc_info.value.message
    assert "PUL-30-SRV" in exc_info.value.message


def test_override_bypasses_modifier_lookup(fake_bigcommerce):
    catalog = StorefrontCatalog(
        modifier_overrides={"PUL-30-SRV": (ModifierSelection(option_id=9, option_value="Happy birthday"),)},
    )
    fake_bigcommerce.modifiers[11] = [
        {"id": 9, "display_name": "Gift message", "type": "text", "required": True, "option_values": []},
    ]

    result = asyncio.run(_resolver(fake_bigcommerce, catalog=catalog).resolve(product_id=11, sku="PUL-30-SRV"))

    assert result == [ModifierSelection(option_id=9, option_value="Happy birthday")]
    assert fake_bigcommerce.requests == []


def test_empty_override_falls_back_to_auto_selection(fake_bigcommerce):
    catalog = StorefrontCatalog(modifier_overrides={"PUL-30-SRV": ()})
    fake_bigcommerce.modifiers[11] = [
        {"id": 7, "display_name": "Flavor", "required": True, "option_values": [{"id": 70}]},
    ]

    result = asyncio.run(_resolver(fake_bigcommerce, catalog=catalog).resolve(product_id=11, sku="PUL-30-SRV"))

    assert result == [ModifierSelection(option_id=7, option_value=70)]


def test_disabled_auto_resolution_makes_no_calls(fake_bigcommerce):
    result = asyncio.run(
        _resolver(fake_bigcommerce, auto_resolve=False).resolve(product_id=11, sku="PUL-30-SRV")
    )

    assert result == []
    assert fake_bigcommerce.requests == []

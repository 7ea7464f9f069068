from __future__ import annotations

import logging
from typing import Any

import httpx

from checkout_redirect.config import Settings, settings as default_settings
from checkout_redirect.errors import (
    BadGatewayError,
    ConfigurationError,
    NotFoundError,
    UpstreamError,
)
from checkout_redirect.schemas import CreateCartRequest, VariantRef

logger = logging.getLogger(__name__)

_VARIANT_FIELDS = "id,product_id,sku"
_MODIFIER_FIELDS = "id,display_name,type,required,is_required,option_values"


class BigCommerceApiClient:
    def __init__(
        self,
        *,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or default_settings
        self._transport = transport

    async def get_variant_by_sku(self, *, sku: str) -> VariantRef:
        response = await self._request(
            "GET",
            "/catalog/variants",
            params={"sku": sku, "include_fields": _VARIANT_FIELDS},
        )
        not_found = NotFoundError(message=f"SKU not found or unavailable: {sku}")
        if not response.is_success:
            logger.warning("Variant lookup for %s failed with status %s", sku, response.status_code)
            raise not_found

        rows = self._json_object(response, context="Variant lookup").get("data")
        if not isinstance(rows, list) or not rows:
            raise not_found
        if len(rows) > 1:
            logger.warning("Variant lookup for %s returned %d rows; using the first", sku, len(rows))

        first = rows[0]
        if not isinstance(first, dict):
            raise BadGatewayError(message="Variant lookup response contains an invalid row")
        variant_id = first.get("id")
        product_id = first.get("product_id")
        if not isinstance(variant_id, int) or not isinstance(product_id, int):
            raise BadGatewayError(message="Variant lookup response is missing id or product_id")
        return VariantRef(variant_id=variant_id, product_id=product_id)

    async def list_required_modifiers(self, *, product_id: int) -> list[dict[str, Any]]:
        response = await self._request(
            "GET",
            f"/catalog/products/{product_id}/modifiers",
            params={"include_fields": _MODIFIER_FIELDS},
        )
        if not response.is_success:
            raise UpstreamError(status_code=response.status_code, body=response.content)

        modifiers = self._json_object(response, context="Modifier lookup").get("data") or []
        if not isinstance(modifiers, list):
            raise BadGatewayError(message="Modifier lookup response is invalid")
        return [
            modifier
            for modifier in modifiers
            if isinstance(modifier, dict) and (modifier.get("required") or modifier.get("is_required"))
        ]

    async def create_cart(self, *, cart: CreateCartRequest) -> str:
        response = await self._request(
            "POST",
            "/carts",
            params={"include": "redirect_urls"},
            json=cart.to_payload(),
        )
        if not response.is_success:
            logger.warning("Cart creation failed with status %s", response.status_code)
            raise UpstreamError(status_code=response.status_code, body=response.content)

        try:
            body = response.json()
        except ValueError:
            body = None
        data = body.get("data") if isinstance(body, dict) else None
        redirect_urls = data.get("redirect_urls") if isinstance(data, dict) else None
        checkout_url = redirect_urls.get("checkout_url") if isinstance(redirect_urls, dict) else None
        if not isinstance(checkout_url, str) or not checkout_url:
            raise BadGatewayError(message="No checkout_url returned")
        return checkout_url

    @staticmethod
    def _json_object(response: httpx.Response, *, context: str) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError as exc:
            raise BadGatewayError(message=f"{context} returned invalid JSON") from exc
        if not isinstance(body, dict):
            raise BadGatewayError(message=f"{context} response must be a JSON object")
        return body

    def _headers(self) -> dict[str, str]:
        token = self._settings.BC_ADMIN_TOKEN
        if not token:
            raise ConfigurationError(message="Server not configured: missing BC_ADMIN_TOKEN")
        return {
            "X-Auth-Token": token,
            "Accept": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str],
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        url = f"{self._settings.api_base_url}{path}"
        headers = self._headers()
        client_kwargs: dict[str, Any] = {}
        if self._settings.BC_REQUEST_TIMEOUT_SECONDS is not None:
            client_kwargs["timeout"] = self._settings.BC_REQUEST_TIMEOUT_SECONDS
        if self._transport is not None:
            client_kwargs["transport"] = self._transport

        logger.debug("%s %s params=%s", method, url, params)
        async with httpx.AsyncClient(**client_kwargs) as client:
            return await client.request(method, url, params=params, json=json, headers=headers)

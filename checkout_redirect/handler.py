from __future__ import annotations

import logging
from collections.abc import Mapping

from fastapi import status
from fastapi.responses import ORJSONResponse, RedirectResponse, Response

from checkout_redirect.bigcommerce_api import BigCommerceApiClient
from checkout_redirect.catalog import StorefrontCatalog
from checkout_redirect.config import Settings
from checkout_redirect.errors import CheckoutError, ConfigurationError, ServerError, UpstreamError
from checkout_redirect.modifiers import ModifierResolver
from checkout_redirect.schemas import CartLineItem, CreateCartRequest, ErrorBody

logger = logging.getLogger(__name__)


class CheckoutRedirectHandler:
    """Turns ``plan``/``sku``/``qty`` query parameters into a checkout redirect.

    Each call runs the same linear pipeline: resolve the SKU, look up its
    variant, pick required modifier values, compute the quantity, create a
    cart and redirect to its checkout URL. The first failing stage decides the
    error response. Every successful call creates a new upstream cart.
    """

    def __init__(
        self,
        *,
        settings: Settings,
        catalog: StorefrontCatalog,
        api: BigCommerceApiClient,
    ) -> None:
        self._settings = settings
        self._catalog = catalog
        self._api = api
        self._modifiers = ModifierResolver.build(
            catalog=catalog,
            api=api,
            auto_resolve=settings.BC_AUTO_RESOLVE_MODIFIERS,
        )

    async def handle(self, query: Mapping[str, str]) -> Response:
        try:
            checkout_url = await self._checkout_url(query)
        except UpstreamError as exc:
            return Response(
                content=exc.body,
                status_code=exc.status_code,
                media_type="application/json",
            )
        except CheckoutError as exc:
            return _error_response(exc)
        except Exception as exc:
            logger.exception("Unhandled checkout redirect failure", exc_info=exc)
            return _error_response(ServerError(message="Server error", detail=str(exc)))
        return RedirectResponse(url=checkout_url, status_code=status.HTTP_302_FOUND)

    async def _checkout_url(self, query: Mapping[str, str]) -> str:
        if not self._settings.BC_ADMIN_TOKEN:
            raise ConfigurationError(message="Server not configured: missing BC_ADMIN_TOKEN")

        sku = self._catalog.resolve_sku(plan=query.get("plan"), sku=query.get("sku"))
        variant = await self._api.get_variant_by_sku(sku=sku)
        selections = await self._modifiers.resolve(product_id=variant.product_id, sku=sku)
        quantity = self._catalog.resolve_quantity(raw_qty=query.get("qty"), sku=sku)
        logger.info(
            "Creating cart for sku=%s product_id=%s variant_id=%s quantity=%s",
            sku,
            variant.product_id,
            variant.variant_id,
            quantity,
        )

        cart = CreateCartRequest(
            channel_id=self._settings.BC_CHANNEL_ID,
            line_items=[
                CartLineItem(
                    product_id=variant.product_id,
                    variant_id=variant.variant_id,
                    quantity=quantity,
                    option_selections=selections,
                )
            ],
        )
        return await self._api.create_cart(cart=cart)


def _error_response(exc: CheckoutError) -> ORJSONResponse:
    if exc.status_code >= 500:
        logger.warning("Checkout redirect failed (%s): %s", exc.status_code, exc.message)
    body = ErrorBody(error=exc.message, detail=exc.detail)
    return ORJSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))

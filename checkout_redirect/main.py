from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse

from checkout_redirect.bigcommerce_api import BigCommerceApiClient
from checkout_redirect.catalog import StorefrontCatalog, default_catalog
from checkout_redirect.config import Settings, settings as default_settings
from checkout_redirect.handler import CheckoutRedirectHandler


def create_app(
    *,
    settings: Settings | None = None,
    catalog: StorefrontCatalog | None = None,
    api: BigCommerceApiClient | None = None,
) -> FastAPI:
    settings = settings or default_settings
    handler = CheckoutRedirectHandler(
        settings=settings,
        catalog=catalog or default_catalog,
        api=api or BigCommerceApiClient(settings=settings),
    )

    app = FastAPI(title="Checkout Redirect", default_response_class=ORJSONResponse)
    app.state.handler = handler

    @app.get("/health")
    def health() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/buy")
    async def buy(request: Request):
        return await handler.handle(request.query_params)

    return app


app = create_app()

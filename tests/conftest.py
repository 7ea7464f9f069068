import json
import os
import sys
from pathlib import Path

import httpx
import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("BC_ADMIN_TOKEN", "test_admin_token")
os.environ.setdefault("BC_STORE_HASH", "teststore")
os.environ.setdefault("BC_CHANNEL_ID", "1778657")


class FakeBigCommerce:
    """Routes outbound BigCommerce calls to canned responses and records them."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.variants: dict[str, list[dict]] = {}
        self.variant_status = 200
        self.modifiers: dict[int, list[dict]] = {}
        self.modifier_status = 200
        self.modifier_error_body: bytes | None = None
        self.cart_status = 200
        self.cart_body: dict | bytes = {
            "data": {
                "id": "cart-1",
                "redirect_urls": {"checkout_url": "https://get.example.com/cart.php?action=loadInCheckout&id=cart-1"},
            }
        }

    @property
    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    def cart_payloads(self) -> list[dict]:
        return [json.loads(request.content) for request in self.requests if request.method == "POST"]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.endswith("/catalog/variants"):
            sku = request.url.params.get("sku")
            return httpx.Response(self.variant_status, json={"data": self.variants.get(sku, [])})
        if path.endswith("/modifiers"):
            product_id = int(path.split("/")[-2])
            if self.modifier_error_body is not None:
                return httpx.Response(self.modifier_status, content=self.modifier_error_body)
            return httpx.Response(self.modifier_status, json={"data": self.modifiers.get(product_id, [])})
        if path.endswith("/carts"):
            if isinstance(self.cart_body, bytes):
                return httpx.Response(self.cart_status, content=self.cart_body)
            return httpx.Response(self.cart_status, json=self.cart_body)
        return httpx.Response(404, json={"title": "Not routed"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture()
def fake_bigcommerce() -> FakeBigCommerce:
    fake = FakeBigCommerce()
    fake.variants = {
        "PUL-30-SRV": [{"id": 101, "product_id": 11, "sku": "PUL-30-SRV"}],
        "PUL-30-SRV-SUB": [{"id": 102, "product_id": 12, "sku": "PUL-30-SRV-SUB"}],
        "PUL-30-SRV-2PAK": [{"id": 103, "product_id": 13, "sku": "PUL-30-SRV-2PAK"}],
    }
    return fake

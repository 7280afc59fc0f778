# tests/test_concurrency.py
import asyncio

import httpx
from fastapi.testclient import TestClient

from bolucompras.config import Settings
from bolucompras.main import create_app
from bolusdk import ShoppingListClient


def test_concurrent_increments_from_stale_copy_lose_one(tmp_path):
    app = create_app(Settings(database_url=f"sqlite:///{tmp_path / 'race.db'}", log_level="WARNING"))
    with TestClient(app) as client:
        product = client.post("/api/products", json={"name": "Pan"}).json()

        c = ShoppingListClient(base_url="http://testserver", async_transport=httpx.ASGITransport(app=app))

        async def both():
            # two tabs holding the same quantity=1 copy
            return await asyncio.gather(
                c.update_product_async(product["id"], quantity=product["quantity"] + 1),
                c.update_product_async(product["id"], quantity=product["quantity"] + 1),
            )

        results = asyncio.run(both())
        assert [r["quantity"] for r in results] == [2, 2]

        # last write wins: one increment is gone
        final = client.get(f"/api/products/{product['id']}").json()
        assert final["quantity"] == 2

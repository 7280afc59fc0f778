#!/usr/bin/env python
"""Two clients increment the same product at once.

Both read quantity 1 and both send quantity 2: the API has no atomic increment,
so the last write wins and one increment is lost.
"""
import asyncio

from bolucompras.config import load_settings
from bolusdk import ApiError, ShoppingListClient


async def increment_from(client: ShoppingListClient, who: str, product: dict):
    updated = await client.update_product_async(product["id"], quantity=product["quantity"] + 1)
    print(f"{who} wrote quantity={updated['quantity']}")


async def main():
    c = ShoppingListClient(base_url=load_settings().backend_url)

    try:
        c.reset()
    except ApiError as e:
        print(f"Reset unavailable ({e}), continuing with existing data")

    product = c.add_product("Pan", categoria="Panadería", force=True)
    print(f"\nCreated: {product['name']} quantity={product['quantity']}")

    # both "tabs" hold the same stale copy
    print("\nSimulating two concurrent increments...")
    await asyncio.gather(
        increment_from(c, "tab-1", product),
        increment_from(c, "tab-2", product),
    )

    final = c.get_product(product["id"])
    print(f"\nFinal quantity: {final['quantity']} (expected 3 if increments were atomic)")


if __name__ == "__main__":
    asyncio.run(main())

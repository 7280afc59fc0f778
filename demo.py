#!/usr/bin/env python
"""Walk through the main shopping-list scenarios against a running server.

Start the server with ENABLE_RESET=true so the demo can start from an empty list.
"""
from rich import print

from bolucompras.config import load_settings
from bolusdk import ConflictApiError, NotFoundApiError, ShoppingListClient


def main():
    c = ShoppingListClient(base_url=load_settings().backend_url)

    # -----------------------------
    # Reset everything for demo
    # -----------------------------
    print("Resetting list...")
    print(c.reset())

    # -----------------------------
    # Add a product
    # -----------------------------
    print("\nAdding 'Milk'...")
    milk = c.add_product("Milk", categoria="Lácteos", prioridad=3)
    print(milk)

    print("\nListing page 1...")
    print(c.list_products(page=1))

    # -----------------------------
    # Duplicate detection
    # -----------------------------
    print("\nAdding ' milk ' again...")
    try:
        c.add_product(" milk ")
    except ConflictApiError as e:
        print(f"Conflict: {e.message} -> existing id {e.product['id']}")

    print("\nForcing a second 'Milk'...")
    print(c.add_product("Milk", force=True))

    # -----------------------------
    # Purchased toggle
    # -----------------------------
    print("\nMarking 'Milk' as purchased and back...")
    print(c.update_product(milk["id"], purchased=True))
    print(c.update_product(milk["id"], purchased=False))

    # -----------------------------
    # Delete
    # -----------------------------
    print("\nDeleting 'Milk' twice...")
    print(c.delete_product(milk["id"]))
    try:
        c.delete_product(milk["id"])
    except NotFoundApiError as e:
        print(f"Second delete: {e.message}")

    print("\nFinal list:")
    print(c.list_products(page=1))


if __name__ == "__main__":
    main()

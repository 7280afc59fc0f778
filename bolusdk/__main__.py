# bolusdk/__main__.py
import argparse
import sys

from rich import print

from bolucompras.config import load_settings

from .client import ApiError, ShoppingListClient


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="bolusdk", description="Bolucompras API client")
    parser.add_argument("--base-url", help="API base URL (defaults to $BACKEND_URL)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    lp = subparsers.add_parser("list-products", help="List one page of products")
    lp.add_argument("--page", type=int, default=1)
    lp.add_argument("--limit", type=int, default=None)

    subparsers.add_parser("all-products", help="List every product, page by page")

    ap = subparsers.add_parser("add", help="Add a product")
    ap.add_argument("--name", required=True)
    ap.add_argument("--categoria", default="General")
    ap.add_argument("--prioridad", type=int, default=1)
    ap.add_argument("--force", action="store_true", help="Create even if the name already exists")

    pp = subparsers.add_parser("patch", help="Update quantity/purchased/categoria/prioridad")
    pp.add_argument("--id", required=True)
    pp.add_argument("--quantity", type=int)
    pp.add_argument("--purchased", choices=["true", "false"])
    pp.add_argument("--categoria")
    pp.add_argument("--prioridad", type=int)

    dp = subparsers.add_parser("delete", help="Delete a product")
    dp.add_argument("--id", required=True)

    args = parser.parse_args(argv)
    c = ShoppingListClient(base_url=args.base_url or load_settings().backend_url)

    try:
        if args.command == "list-products":
            print(c.list_products(page=args.page, limit=args.limit))
        elif args.command == "all-products":
            print(list(c.iter_products()))
        elif args.command == "add":
            print(c.add_product(args.name, categoria=args.categoria, prioridad=args.prioridad, force=args.force))
        elif args.command == "patch":
            purchased = None if args.purchased is None else args.purchased == "true"
            print(
                c.update_product(
                    args.id,
                    quantity=args.quantity,
                    purchased=purchased,
                    categoria=args.categoria,
                    prioridad=args.prioridad,
                )
            )
        elif args.command == "delete":
            print(c.delete_product(args.id))
    except ApiError as e:
        print(f"[red]Error {e.status_code or ''}:[/red] {e.message}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

# bolucompras/__main__.py
import argparse
import sys

from rich.console import Console
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .config import load_settings
from .database import init_db, make_engine, make_session_factory
from .errors import PersistenceError
from .logs import configure_logging
from .matching import render_stars
from .store import ProductStore

console = Console()


def serve(settings, host: str, port: int) -> int:
    import uvicorn

    from .main import create_app

    uvicorn.run(create_app(settings), host=host, port=port, log_level=settings.log_level.lower())
    return 0


def check_db(settings) -> int:
    console.print(f"Connecting to [bold]{settings.database_url}[/bold]...")
    try:
        engine = make_engine(settings.database_url)
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        console.print(f"[red]Connection failed:[/red] {e}")
        return 1
    console.print("[green]Connection OK[/green]")
    return 0


def list_products(settings) -> int:
    try:
        engine = make_engine(settings.database_url)
        init_db(engine)
        db = make_session_factory(engine)()
        try:
            products = ProductStore(db).all()
        finally:
            db.close()
    except (SQLAlchemyError, PersistenceError) as e:
        console.print(f"[red]Could not read products:[/red] {e}")
        return 1

    console.print(f"Total products: [bold]{len(products)}[/bold]")
    console.rule()
    if not products:
        console.print("[italic yellow]No products in the database[/italic yellow]")
        return 0
    for i, p in enumerate(products, start=1):
        precio = f"${p['precio']}" if p["precio"] is not None else "No definido"
        console.print(f"\n{i}. [bold]{p['name']}[/bold]")
        console.print(f"   ID: {p['id']}")
        console.print(f"   Precio: {precio}")
        console.print(f"   Cantidad: {p['quantity']}")
        console.print(f"   Cantidad predeterminada: {p['cantidad_predeterminada']}")
        console.print(f"   Categoría: {p['categoria']}")
        console.print(f"   Prioridad: {render_stars(p['prioridad'])} ({p['prioridad']})")
        console.print(f"   Comprado: {'Sí' if p['purchased'] else 'No'}")
        console.print(f"   Creado: {p['createdAt']}")
        console.print(f"   Actualizado: {p['updatedAt']}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="bolucompras", description="Bolucompras API server")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sv = subparsers.add_parser("serve", help="Run the API server")
    sv.add_argument("--host", default="0.0.0.0")
    sv.add_argument("--port", type=int, default=None, help="Defaults to $PORT or 9002")

    subparsers.add_parser("check-db", help="Check the database connection")
    subparsers.add_parser("list-products", help="Print every stored product")

    args = parser.parse_args(argv)
    settings = load_settings()
    configure_logging(settings.log_level)

    if args.command == "serve":
        return serve(settings, args.host, args.port or settings.port)
    if args.command == "check-db":
        return check_db(settings)
    return list_products(settings)


if __name__ == "__main__":
    sys.exit(main())

# cli.py
"""Interactive shopping list: add form with suggestions, paginated product list."""
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

from prompt_toolkit import prompt
from prompt_toolkit.completion import Completer, Completion, WordCompleter
from prompt_toolkit.styles import Style as PromptStyle
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt
from rich.table import Table

from bolucompras.config import load_settings
from bolucompras.logs import configure_logging
from bolucompras.matching import CATEGORIES, is_same_name, render_stars, suggest
from bolusdk import DuplicateResolver, PageController, ShoppingListClient, Stage

console = Console()

# Custom prompt style for prompt_toolkit
custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Estado")


def notify(message: str, is_error: bool) -> None:
    console.print(show_status(message, not is_error))


# ---------------------------
# List view
# ---------------------------
def purchased_label(product: Dict[str, Any]) -> str:
    return "[green]Comprado[/green]" if product.get("purchased") else "[yellow]Pendiente[/yellow]"


def created_label(product: Dict[str, Any]) -> str:
    raw = product.get("createdAt")
    if not raw:
        return "-"
    try:
        return datetime.fromisoformat(raw).strftime("%d/%m/%Y")
    except ValueError:
        return raw


def show_products(controller: PageController):
    state = controller.state
    if not state.products:
        console.print("[italic yellow]No hay productos disponibles.[/italic yellow]")
        return

    table = Table(
        title=f"🛒 Lista de compras (página {state.page}/{max(state.total_pages, 1)}, {state.total} productos)",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True,
    )
    table.add_column("#", style="dim", width=3)
    table.add_column("Nombre", style="bold", width=24)
    table.add_column("Cantidad", justify="right", width=9)
    table.add_column("Categoría", width=20)
    table.add_column("Prioridad", width=12)
    table.add_column("Estado", width=10)
    table.add_column("Creado", width=10)

    for i, p in enumerate(state.products, start=1):
        table.add_row(
            str(i),
            p.get("name", "N/A"),
            str(p.get("quantity", 0)),
            p.get("categoria", "General"),
            render_stars(p.get("prioridad", 1)),
            purchased_label(p),
            created_label(p),
        )
    console.print(table)

    prev_label = "[bold cyan]p[/bold cyan] Anterior" if state.has_previous else "[dim]p Anterior[/dim]"
    next_label = "[bold cyan]n[/bold cyan] Siguiente" if state.has_next else "[dim]n Siguiente[/dim]"
    console.print(f"{prev_label}    {next_label}")


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
class SuggestionCompleter(Completer):
    """Offers loaded products whose name loosely matches what has been typed."""

    def __init__(self, controller: PageController):
        self.controller = controller

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        for p in suggest(text, self.controller.products, limit=8):
            yield Completion(
                p["name"],
                start_position=-len(text),
                display_meta=f"x{p.get('quantity', 0)} · {p.get('categoria', '')}",
            )


def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_category(default: str = "General") -> str:
    while True:
        raw = prompt_with_autocomplete(
            "🏷️ Categoría", completer=WordCompleter(list(CATEGORIES), ignore_case=True, sentence=True), default=default
        ).strip()
        for category in CATEGORIES:
            if category.lower() == raw.lower():
                return category
        console.print(f"[red]Elige una de: {', '.join(CATEGORIES)}[/red]")


def ask_priority(default: int = 1) -> int:
    while True:
        value = IntPrompt.ask("⭐ Prioridad (1-5)", default=default)
        if 1 <= value <= 5:
            return value
        console.print("[red]La prioridad va de 1 a 5.[/red]")


def choose_product(controller: PageController, message: str = "Producto") -> Optional[Dict[str, Any]]:
    """Pick a product from the current page by row number or name."""
    products = controller.products
    if not products:
        console.print("[italic yellow]No hay productos en esta página.[/italic yellow]")
        return None
    completer = WordCompleter([p["name"] for p in products], ignore_case=True, sentence=True)
    raw = prompt_with_autocomplete(f"{message} (# o nombre)", completer=completer).strip()
    if raw.isdigit() and 1 <= int(raw) <= len(products):
        return products[int(raw) - 1]
    for p in products:
        if p["name"].lower() == raw.lower():
            return p
    console.print(f"[red]No encontré '{raw}' en esta página.[/red]")
    return None


# ---------------------------
# Add-product flow
# ---------------------------
def show_suggestions(suggestions: List[Dict[str, Any]]):
    table = Table(title="¿Te refieres a alguno de estos?", box=box.SIMPLE, header_style="bold yellow")
    table.add_column("#", width=3)
    table.add_column("Nombre", width=24)
    table.add_column("Cantidad", justify="right")
    for i, p in enumerate(suggestions, start=1):
        table.add_row(str(i), p["name"], str(p.get("quantity", 0)))
    console.print(table)


def review_duplicate(resolver: DuplicateResolver):
    while resolver.stage == Stage.REVIEWING:
        staged = resolver.staged or {}
        console.print(Panel.fit(
            f'El producto "[bold]{staged.get("name")}[/bold]" ya existe '
            f'(cantidad {staged.get("quantity")}, {staged.get("categoria")}, {render_stars(staged.get("prioridad", 1))}).\n'
            "[cyan]i[/cyan] sumar 1   [cyan]e[/cyan] editar categoría/prioridad   "
            "[cyan]f[/cyan] agregar como nuevo   [cyan]c[/cyan] cancelar",
            title="⚠️ Producto duplicado",
            border_style="yellow",
        ))
        choice = prompt_with_autocomplete("Opción", completer=WordCompleter(["i", "e", "f", "c"])).strip().lower()
        if choice == "i":
            resolver.increment()
        elif choice == "e":
            categoria = ask_category(staged.get("categoria", "General"))
            prioridad = ask_priority(staged.get("prioridad", 1))
            resolver.edit(categoria, prioridad)
        elif choice == "f":
            resolver.force_add()
        elif choice == "c":
            resolver.cancel()
            console.print("[dim]Cancelado.[/dim]")


def add_product_flow(controller: PageController, resolver: DuplicateResolver):
    name = prompt_with_autocomplete("📝 Nombre del producto", completer=SuggestionCompleter(controller))
    suggestions = resolver.set_name(name)
    if resolver.stage == Stage.IDLE:
        notify("Por favor, ingresa un nombre de producto.", True)
        return

    loose = [p for p in suggestions if not is_same_name(p["name"], name)]
    if loose:
        show_suggestions(suggestions)
        raw = prompt_with_autocomplete("Elige # para revisar uno, o Enter para seguir").strip()
        if raw.isdigit() and 1 <= int(raw) <= len(suggestions):
            resolver.pick(suggestions[int(raw) - 1])
            review_duplicate(resolver)
            return

    categoria = ask_category()
    prioridad = ask_priority()
    resolver.submit(categoria=categoria, prioridad=prioridad)
    review_duplicate(resolver)


# ---------------------------
# Layout and Header
# ---------------------------
def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🛍️ Bolucompras",
        "[bold blue]Tu lista de compras[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Main menu
# ---------------------------
def menu(controller: PageController):
    resolver = DuplicateResolver(controller)

    console.clear()
    console.print(create_header())
    controller.mount()

    while True:
        show_products(controller)

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("a", "➕ Agregar producto", "t", "✅ Comprado / pendiente"),
            ("+", "🔼 Sumar cantidad", "d", "🗑️ Eliminar"),
            ("-", "🔽 Restar cantidad", "r", "🔄 Recargar"),
            ("n", "➡️ Página siguiente", "p", "⬅️ Página anterior"),
            ("", "", "q", "👋 Salir"),
        ]
        for row in options:
            menu_table.add_row(*row)
        console.print(Panel(menu_table, title="📋 Menú", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nElige una opción",
            completer=WordCompleter(["a", "+", "-", "t", "d", "r", "n", "p", "q"]),
        ).strip().lower()

        if choice == "a":
            add_product_flow(controller, resolver)

        elif choice == "+":
            product = choose_product(controller)
            if product:
                controller.increase_quantity(product["id"])

        elif choice == "-":
            product = choose_product(controller)
            if product:
                if product["quantity"] <= 0:
                    console.print("[yellow]La cantidad ya está en 0.[/yellow]")
                else:
                    controller.decrease_quantity(product["id"])

        elif choice == "t":
            product = choose_product(controller)
            if product:
                controller.toggle_purchased(product["id"])

        elif choice == "d":
            product = choose_product(controller)
            if product and Confirm.ask(f"¿Eliminar [bold]{product['name']}[/bold]?"):
                controller.delete(product["id"])

        elif choice == "r":
            controller.refresh()

        elif choice == "n":
            if not controller.next_page():
                console.print("[dim]Ya estás en la última página.[/dim]")

        elif choice == "p":
            if not controller.previous_page():
                console.print("[dim]Ya estás en la primera página.[/dim]")

        elif choice in ("q", "quit", "exit"):
            if Confirm.ask("¿Seguro que quieres salir?"):
                console.print(Panel.fit("[bold green]¡Hasta la próxima! 👋[/bold green]", title="Adiós"))
                return

        console.print()
        console.rule(style="dim")


def main():
    settings = load_settings()
    configure_logging("WARNING")
    client = ShoppingListClient(base_url=settings.backend_url)
    menu(PageController(client, page_size=settings.page_size, notify=notify))


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)

"""Command-line interface for the grocery list."""

import logging
from contextlib import contextmanager
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import Config
from .grocery import (
    GroceryListEngine, IndexOutOfRange, category_icon, category_progress,
    shopping_summary, sort_categories, to_markdown,
)
from .ingredients import IngredientClassifier
from .models import GroceryList
from .service import GroceryListService
from .store import JsonDocumentStore, JsonPlanSource, StoreError

console = Console()
err_console = Console(stderr=True)


def load_app(env_path: str = None, verbose: bool = False):
    """Load configuration and build the service."""
    config = Config.from_env(Path(env_path) if env_path else None)

    level = logging.getLevelName(config.log_level)
    if verbose:
        level = logging.DEBUG
    elif not isinstance(level, int):
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )

    for error in config.validate():
        err_console.print(f"[yellow]Warning:[/yellow] {error}")

    classifier = None
    if config.vocabulary_path and config.vocabulary_path.exists():
        classifier = IngredientClassifier.from_file(config.vocabulary_path)

    service = GroceryListService(
        plans=JsonPlanSource(config.plans_path),
        store=JsonDocumentStore(config.lists_path),
        engine=GroceryListEngine(classifier=classifier),
    )
    return config, service


@contextmanager
def reported_errors():
    """Turn expected failures into a red message and exit status 1."""
    try:
        yield
    except IndexOutOfRange as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise click.exceptions.Exit(1)
    except KeyError as e:
        err_console.print(f"[red]Error:[/red] {e.args[0] if e.args else e}")
        raise click.exceptions.Exit(1)
    except (StoreError, ValueError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise click.exceptions.Exit(1)


def resolve_plan_id(ctx) -> str:
    """Pick the plan from --plan, else the latest plan of --user or GROCERY_USER."""
    if ctx.obj["plan"]:
        return ctx.obj["plan"]

    config, service = ctx.obj["app"]
    user = ctx.obj["user"] or config.default_user
    if not user:
        raise click.UsageError("Pass --plan or --user (or set GROCERY_USER)")

    plan = service.plans.get_latest_plan(user)
    if plan is None:
        raise KeyError(f"No meal plans found for user {user!r}")
    return plan.id


def resolve_category(grocery_list: GroceryList, name: str) -> str:
    """Match a category name case-insensitively against the list."""
    for category in grocery_list.categories:
        if category.lower() == name.lower():
            return category
    return name


def render_list(grocery_list: GroceryList, minutes_per_item: float):
    """Print the grocery list grouped by category."""
    summary = shopping_summary(grocery_list, minutes_per_item)

    console.print(Panel(
        f"[bold]Items to shop:[/bold] {summary.remaining_items} of {summary.total_items}\n"
        f"[bold]Estimated time:[/bold] {summary.estimated_minutes} minutes\n"
        f"[bold]Completion:[/bold] {summary.completion_percent}%\n"
        f"[bold]Generated:[/bold] {grocery_list.generated_at or 'unknown'}",
        title="📊 Shopping Summary",
    ))

    for category in sort_categories(grocery_list.categories):
        checked, total = category_progress(grocery_list, category)

        table = Table(title=f"{category_icon(category)} {category} ({checked}/{total})", title_justify="left")
        table.add_column("#", justify="right", style="dim")
        table.add_column("", width=3)
        table.add_column("Item", style="cyan")
        table.add_column("From recipe", style="dim")

        for index, item in enumerate(grocery_list.categories[category], start=1):
            if item.checked:
                table.add_row(str(index), "✅", f"[strike]{escape(item.name)}[/strike]", escape(item.original))
            else:
                table.add_row(str(index), "☐", escape(item.name), escape(item.original))

        console.print(table)


def show_no_list():
    console.print("[yellow]No grocery list found.[/yellow]")
    console.print("Create a meal plan first and the shopping list is generated from it.")


@click.group()
@click.option("--env", default=None, help="Path to .env file")
@click.option("--plan", "plan_id", default=None, help="Meal plan id")
@click.option("--user", default=None, help="Use this user's latest meal plan")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
@click.pass_context
def cli(ctx, env, plan_id, user, verbose):
    """🛒 Grocery lists generated from your meal plans."""
    ctx.ensure_object(dict)
    ctx.obj["app"] = load_app(env, verbose)
    ctx.obj["plan"] = plan_id
    ctx.obj["user"] = user


@cli.command()
@click.pass_context
def show(ctx):
    """Show the grocery list, generating it from the meal plan if needed."""
    config, service = ctx.obj["app"]

    with reported_errors():
        grocery_list = service.get_or_derive(resolve_plan_id(ctx))

    if grocery_list is None or grocery_list.is_empty():
        show_no_list()
        return

    render_list(grocery_list, config.minutes_per_item)


@cli.command()
@click.argument("category")
@click.argument("index", type=int)
@click.pass_context
def toggle(ctx, category, index):
    """Check or uncheck item INDEX (as numbered by `show`) in CATEGORY."""
    config, service = ctx.obj["app"]

    with reported_errors():
        plan_id = resolve_plan_id(ctx)
        grocery_list = service.get_or_derive(plan_id) or GroceryList()
        category = resolve_category(grocery_list, category)
        grocery_list = service.toggle_item(plan_id, category, index - 1)

    item = grocery_list.categories[category][index - 1]
    state = "checked" if item.checked else "unchecked"
    console.print(f"[green]✅ {escape(item.name)} {state}[/green]")


def _set_category(ctx, category, checked):
    config, service = ctx.obj["app"]

    with reported_errors():
        plan_id = resolve_plan_id(ctx)
        grocery_list = service.get_or_derive(plan_id) or GroceryList()
        category = resolve_category(grocery_list, category)
        if category not in grocery_list.categories:
            console.print(f"[yellow]No category {category!r} on this list.[/yellow]")
            return
        service.toggle_all(plan_id, category, checked)

    state = "checked" if checked else "unchecked"
    console.print(f"[green]✅ All {category} items {state}[/green]")


@cli.command("check-all")
@click.argument("category")
@click.pass_context
def check_all(ctx, category):
    """Check every item in CATEGORY."""
    _set_category(ctx, category, True)


@cli.command("uncheck-all")
@click.argument("category")
@click.pass_context
def uncheck_all(ctx, category):
    """Uncheck every item in CATEGORY."""
    _set_category(ctx, category, False)


@cli.command()
@click.argument("category")
@click.argument("index", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def remove(ctx, category, index, yes):
    """Remove item INDEX from CATEGORY."""
    config, service = ctx.obj["app"]

    with reported_errors():
        plan_id = resolve_plan_id(ctx)
        grocery_list = service.get_or_derive(plan_id) or GroceryList()
        category = resolve_category(grocery_list, category)

        items = grocery_list.categories.get(category, [])
        name = items[index - 1].name if 0 < index <= len(items) else None
        if name and not yes and not click.confirm(f"Remove {name} from your grocery list?"):
            return

        service.remove_item(plan_id, category, index - 1)

    console.print(f"[green]✅ Removed {escape(name or 'item')} from grocery list[/green]")


@cli.command()
@click.pass_context
def stats(ctx):
    """Show item counts for the grocery list."""
    config, service = ctx.obj["app"]

    with reported_errors():
        grocery_list = service.get_or_derive(resolve_plan_id(ctx))

    if grocery_list is None:
        show_no_list()
        return

    counts = service.engine.stats(grocery_list)
    summary = shopping_summary(grocery_list, config.minutes_per_item)

    table = Table(title="🛒 Grocery Stats")
    table.add_column("Stat", style="cyan")
    table.add_column("Value", justify="right", style="green")
    table.add_row("Total items", str(counts.total_items))
    table.add_row("Checked", str(counts.checked_items))
    table.add_row("Remaining", str(summary.remaining_items))
    table.add_row("Categories", str(counts.categories_count))
    table.add_row("Completion", f"{summary.completion_percent}%")
    console.print(table)


@cli.command()
@click.pass_context
def regenerate(ctx):
    """Rebuild the grocery list from its meal plan (clears checkmarks)."""
    config, service = ctx.obj["app"]

    with reported_errors():
        grocery_list = service.regenerate(resolve_plan_id(ctx))

    counts = service.engine.stats(grocery_list)
    console.print(
        f"[green]✅ Generated {counts.total_items} items in {counts.categories_count} categories[/green]"
    )


@cli.command()
@click.option("--output", "-o", default=None, help="Write markdown to this file")
@click.pass_context
def export(ctx, output):
    """Export the grocery list as a markdown checklist."""
    config, service = ctx.obj["app"]

    with reported_errors():
        plan_id = resolve_plan_id(ctx)
        grocery_list = service.get_or_derive(plan_id)
        plan = service.plans.get_plan(plan_id)

    if grocery_list is None or grocery_list.is_empty():
        show_no_list()
        return

    markdown = to_markdown(grocery_list, plan)

    if output:
        try:
            with open(output, "w", encoding="utf-8") as f:
                f.write(markdown)
        except OSError as e:
            err_console.print(f"[red]Error:[/red] Could not write {escape(output)}: {escape(str(e))}")
            raise click.exceptions.Exit(1)
        console.print(f"[green]✅ Saved grocery list to {output}[/green]")
    else:
        click.echo(markdown)


@cli.command()
@click.argument("ingredients", nargs=-1, required=True)
@click.pass_context
def categorize(ctx, ingredients):
    """Show how ingredient lines are cleaned and categorized."""
    config, service = ctx.obj["app"]
    engine = service.engine

    table = Table(title="🔍 Ingredients")
    table.add_column("Ingredient", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Category", style="green")

    for raw in ingredients:
        category = engine.categorize(raw)
        table.add_row(escape(raw), escape(engine.clean(raw)), f"{category_icon(category)} {category}")

    console.print(table)


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()

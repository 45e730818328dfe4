from datetime import datetime
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from yanductor import __version__
from yanductor.errors import YanductorError

console = Console()

DEFAULT_CONFIG_PATH = Path("~/.xc/config.yaml")


def _get_loader(ctx: click.Context):
    """Build an InventoryLoader from the --config file. Exits on config errors."""
    from yanductor.config.loader import ConfigLoader
    from yanductor.loader import InventoryLoader

    config_path = Path(ctx.obj["config_path"]).expanduser()
    try:
        config = ConfigLoader(config_path).load()
    except YanductorError as e:
        console.print(f"[red]Config error: {e}[/red]")
        raise SystemExit(1)
    return InventoryLoader(config)


def _load(ctx: click.Context, force: bool = False):
    loader = _get_loader(ctx)
    try:
        if force:
            loader.reload()
        else:
            loader.load()
    except YanductorError as e:
        console.print(f"[red]Error loading inventory: {e}[/red]")
        raise SystemExit(1)
    return loader


@click.group()
@click.version_option(version=__version__, prog_name="yanductor")
@click.option(
    "--config", "config_path", default=str(DEFAULT_CONFIG_PATH), type=click.Path(), help="Config file path"
)
@click.option("--log-level", default="WARNING", help="Log level")
@click.pass_context
def cli(ctx: click.Context, config_path: str, log_level: str) -> None:
    """Yanductor: Conductor inventory with a local fallback cache."""
    from yanductor.logging_config import configure_logging

    configure_logging(level=log_level)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command()
@click.option("--group", "-g", default=None, help="Only hosts of this group")
@click.option("--dc", "-d", default=None, help="Only hosts in this datacenter")
@click.pass_context
def hosts(ctx: click.Context, group: str | None, dc: str | None) -> None:
    """List hosts."""
    loader = _load(ctx)

    selected = [
        h
        for h in loader.hosts()
        if (group is None or h.group_id == group) and (dc is None or h.datacenter_id == dc)
    ]
    if not selected:
        console.print("No hosts found.")
        return

    table = Table(title="Hosts")
    table.add_column("FQDN", style="cyan")
    table.add_column("Group", style="magenta")
    table.add_column("Datacenter", style="blue")
    for h in selected:
        table.add_row(h.fqdn, h.group_id, h.datacenter_id or "-")
    console.print(table)


@cli.command()
@click.pass_context
def groups(ctx: click.Context) -> None:
    """List groups with their parents."""
    loader = _load(ctx)

    if not loader.groups():
        console.print("No groups found.")
        return

    table = Table(title="Groups")
    table.add_column("Name", style="cyan")
    table.add_column("Parent", style="magenta")
    table.add_column("Hosts", justify="right")
    for g in loader.groups():
        table.add_row(g.name, g.parent_id or "-", str(len(g.hosts)))
    console.print(table)


@cli.command()
@click.pass_context
def datacenters(ctx: click.Context) -> None:
    """List datacenters."""
    loader = _load(ctx)
    for d in loader.datacenters():
        console.print(d.name or "(unspecified)")


@cli.command()
@click.pass_context
def reload(ctx: click.Context) -> None:
    """Force a refresh from Conductor."""
    loader = _load(ctx, force=True)
    snapshot = loader.snapshot
    color = "green" if snapshot.source == "remote" else "yellow"
    console.print(
        f"[{color}]Loaded from {snapshot.source}:[/{color}] "
        f"{len(snapshot.hosts)} host(s), {len(snapshot.groups)} group(s), "
        f"{len(snapshot.datacenters)} datacenter(s)."
    )


@cli.command()
@click.option("--clear", is_flag=True, help="Remove the cache file")
@click.pass_context
def cache(ctx: click.Context, clear: bool) -> None:
    """Show or clear the local inventory cache."""
    loader = _get_loader(ctx)
    store = loader.store

    if clear:
        try:
            removed = store.remove()
        except YanductorError as e:
            console.print(f"[red]{e}[/red]")
            raise SystemExit(1)
        console.print("Cache removed." if removed else "No cache to remove.")
        return

    table = Table(title="Inventory cache", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    modified = store.modified_at()
    if modified is None:
        age = "-"
        state = "[red]missing[/red]"
    else:
        age = str(datetime.now() - modified).split(".")[0]
        state = "[green]fresh[/green]" if store.fresh(loader.cache_ttl) else "[yellow]stale[/yellow]"

    table.add_row("Path", str(store.filename))
    table.add_row("TTL", str(loader.cache_ttl))
    table.add_row("Age", age)
    table.add_row("State", state)
    console.print(table)

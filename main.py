"""Command line front-end for the slideshow media list and its tags.

Usage:
    python main.py add file:///photos/beach.jpg file:///photos/dog.mp4
    python main.py tag file:///photos/beach.jpg Summer
    python main.py filter --active Summer --mode and
    python main.py list
"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from app.viewmodels.gallery_vm import GalleryVM
from app.viewmodels.tag_catalog_vm import TagCatalogVM
from core.models import Ordering, TagFilterMode, TagSortOption
from infrastructure.kv_store import JsonFileKeyValueStore
from infrastructure.logging import APP_DIR_NAME, init_logging
from infrastructure.name_resolver import PathNameResolver
from infrastructure.preferences import PreferencesManager
from infrastructure.settings import JsonSettings

BASE_DIR = Path(__file__).parent

app = typer.Typer(help="Manage the slideshow media list and its tags.", no_args_is_help=True)


def _load_settings(path: Optional[Path]) -> JsonSettings:
    candidate = path or BASE_DIR / "settings.json"
    if candidate.exists():
        return JsonSettings(candidate)
    if path is not None:
        raise typer.BadParameter(f"settings file not found: {path}")
    return JsonSettings.from_dict({})


def _prefs(ctx: typer.Context) -> PreferencesManager:
    return ctx.obj


@app.callback()
def main(
    ctx: typer.Context,
    store: Annotated[
        Optional[Path], typer.Option("--store", help="Preference file (JSON).")
    ] = None,
    settings: Annotated[
        Optional[Path], typer.Option("--settings", help="settings.json to read.")
    ] = None,
    log_dir: Annotated[
        Optional[Path], typer.Option("--log-dir", help="Directory for log files.")
    ] = None,
) -> None:
    """Open the preference store and set up logging."""
    cfg = _load_settings(settings)
    log_path = log_dir or cfg.get_path("logging.dir")
    init_logging(
        str(log_path) if log_path else None,
        level=str(cfg.get("logging.level", "INFO")),
        console=True,
    )
    store_path = (
        store or cfg.get_path("store.path") or Path.home() / APP_DIR_NAME / "preferences.json"
    )
    ctx.obj = PreferencesManager(
        JsonFileKeyValueStore(store_path),
        resolver=PathNameResolver(),
        labels=cfg.labels(),
    )


@app.command()
def add(
    ctx: typer.Context,
    references: Annotated[list[str], typer.Argument(help="References to add.")],
) -> None:
    """Add references, skipping ones whose file name is already listed."""
    vm = GalleryVM(_prefs(ctx))
    added = vm.add_references(references)
    if vm.pending_auto_tag:
        vm.perform_auto_tag()
    typer.echo(f"Added {len(added)} of {len(references)}")


@app.command()
def remove(
    ctx: typer.Context,
    references: Annotated[list[str], typer.Argument(help="References to remove.")],
) -> None:
    """Remove references (exact match)."""
    _prefs(ctx).references.remove_all(references)


@app.command("list")
def list_references(
    ctx: typer.Context,
    show_all: Annotated[
        bool, typer.Option("--all", help="Ignore tag filters and ordering.")
    ] = False,
) -> None:
    """Print references with their tags, in display order."""
    prefs = _prefs(ctx)
    refs = prefs.references.references() if show_all else prefs.display_references()
    for ref in refs:
        tags = ", ".join(sorted(prefs.tags.tags_of(ref)))
        typer.echo(f"{ref}\t{tags}" if tags else ref)


@app.command()
def tag(
    ctx: typer.Context,
    reference: Annotated[str, typer.Argument()],
    tags: Annotated[list[str], typer.Argument(help="Tags to add.")],
) -> None:
    """Tag a reference."""
    store = _prefs(ctx).tags
    for name in tags:
        store.add_tag(reference, name)


@app.command()
def untag(
    ctx: typer.Context,
    reference: Annotated[str, typer.Argument()],
    tags: Annotated[list[str], typer.Argument(help="Tags to remove.")],
) -> None:
    """Remove tags from a reference."""
    store = _prefs(ctx).tags
    for name in tags:
        store.remove_tag(reference, name)


@app.command("tags")
def list_tags(
    ctx: typer.Context,
    sort: Annotated[TagSortOption, typer.Option("--sort")] = TagSortOption.NAME_ASC,
) -> None:
    """Print the tag catalog with usage counts."""
    vm = TagCatalogVM(_prefs(ctx), sort_option=sort)
    for info in vm.tags:
        marker = " (system)" if info.is_system_tag else ""
        typer.echo(f"{info.name}\t{info.count}{marker}")


@app.command("rename-tag")
def rename_tag(ctx: typer.Context, old: str, new: str) -> None:
    """Rename a tag everywhere."""
    _prefs(ctx).tags.rename(old, new)


@app.command("delete-tag")
def delete_tag(ctx: typer.Context, name: str) -> None:
    """Delete a tag from the catalog, references and filters."""
    _prefs(ctx).tags.remove_from_catalog(name)


@app.command("filter")
def set_filter(
    ctx: typer.Context,
    active: Annotated[Optional[list[str]], typer.Option("--active", help="Active tag.")] = None,
    hidden: Annotated[Optional[list[str]], typer.Option("--hidden", help="Hidden tag.")] = None,
    mode: Annotated[Optional[TagFilterMode], typer.Option("--mode")] = None,
    clear: Annotated[bool, typer.Option("--clear", help="Clear active and hidden tags.")] = False,
    clear_active: Annotated[
        bool, typer.Option("--clear-active", help="Clear active tags only.")
    ] = False,
    clear_hidden: Annotated[
        bool, typer.Option("--clear-hidden", help="Clear hidden tags only.")
    ] = False,
) -> None:
    """Show or change the tag filter."""
    prefs = _prefs(ctx)
    if clear or clear_active:
        prefs.tags.set_active_tags(set())
    if clear or clear_hidden:
        prefs.tags.set_hidden_tags(set())
    if active:
        prefs.tags.set_active_tags(active)
    if hidden:
        prefs.tags.set_hidden_tags(hidden)
    if mode is not None:
        prefs.tags.set_filter_mode(mode)
    typer.echo(f"active: {', '.join(sorted(prefs.tags.active_tags()))}")
    typer.echo(f"hidden: {', '.join(sorted(prefs.tags.hidden_tags()))}")
    typer.echo(f"mode: {prefs.describe(prefs.tags.filter_mode())}")


@app.command()
def order(
    ctx: typer.Context,
    ordering: Annotated[Optional[Ordering], typer.Argument()] = None,
) -> None:
    """Show or set the display ordering."""
    prefs = _prefs(ctx)
    if ordering is not None:
        prefs.set_ordering(ordering)
    typer.echo(prefs.describe(prefs.ordering()))


@app.command("export")
def export_tags(ctx: typer.Context, path: Path) -> None:
    """Write a tag backup to PATH."""
    if not TagCatalogVM(_prefs(ctx)).export_tags(path):
        typer.echo(f"Export to {path} failed", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Exported to {path}")


@app.command("import")
def import_tags(ctx: typer.Context, path: Path) -> None:
    """Merge the tag backup at PATH."""
    summary = TagCatalogVM(_prefs(ctx)).import_tags(path)
    if summary is None:
        typer.echo(f"Import from {path} failed", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Matched {len(summary.matched)}, skipped {len(summary.unmatched)}")


@app.command("auto-tag")
def auto_tag(
    ctx: typer.Context,
    tag_name: Annotated[Optional[str], typer.Option("--tag", help="Only this tag.")] = None,
    reference: Annotated[
        Optional[str], typer.Option("--reference", help="Only this reference.")
    ] = None,
) -> None:
    """Tag references whose names contain catalog tags."""
    added = TagCatalogVM(_prefs(ctx)).perform_auto_tag(tag_name, reference)
    typer.echo(f"Added {added} tags")


if __name__ == "__main__":
    app()

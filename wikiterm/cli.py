"""Command-line front door for wikiterm.

Loads settings and logging, then dispatches to the interactive session or to
one of the non-interactive page commands.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import actions
from .app import open_store, run_view
from .config import load_settings
from .convert import html_to_markdown, markdown_to_html
from .editor import EditorHandoff, editor_command
from .errors import ConfigError, PublishError, UserCancelled, WikitermError
from .logs import configure_logging

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wikiterm", description="Browse and edit wiki pages from the terminal.")
    commands = parser.add_subparsers(dest="command")
    commands.add_parser("view", help="Browse spaces and pages interactively (default).")

    edit = commands.add_parser("edit", help="Edit one page in $EDITOR and publish it.")
    target = edit.add_mutually_exclusive_group(required=True)
    target.add_argument("--id", dest="page_id", help="ID of the page to edit.")
    target.add_argument("--last", action="store_true", help="Re-open the last page that was published.")
    edit.add_argument(
        "--preview",
        type=_positive_int,
        metavar="N",
        help="Print the first N characters of the page as markdown instead of editing.",
    )

    new = commands.add_parser("new", help="Create a page in a space.")
    new.add_argument("--space", dest="space_id", required=True, help="ID of the space to create the page in.")
    new.add_argument("--title", required=True, help="Title of the new page.")
    new.add_argument("--path", type=Path, help="Markdown file to use as the initial content.")
    new.add_argument("--edit", action="store_true", help="Open the new page in the editor once created.")

    delete = commands.add_parser("delete", help="Delete a page.")
    delete.add_argument("--id", dest="page_id", required=True, help="ID of the page to delete.")

    listing = commands.add_parser("list", help="Print spaces or pages with their IDs.")
    kind = listing.add_mutually_exclusive_group(required=True)
    kind.add_argument("--spaces", action="store_true", help="List every space.")
    kind.add_argument("--pages", action="store_true", help="List pages; requires --space or --title.")
    listing.add_argument("--space", dest="space_id", help="ID of the space whose pages to list (required with --pages unless --title is given).")
    listing.add_argument("--title", help="List pages with exactly this title, in any space.")

    commands.add_parser("purge", help="Delete the local markdown copies of edited pages.")

    convert = commands.add_parser("convert", help="Convert stdin between markdown and page storage HTML.")
    direction = convert.add_mutually_exclusive_group(required=True)
    direction.add_argument("--md", action="store_true", help="Read markdown, print storage HTML.")
    direction.add_argument("--html", action="store_true", help="Read storage HTML, print markdown.")
    return parser


def _run(args: argparse.Namespace) -> None:
    if args.command == "convert":
        # Pure text filter; works without a config file.
        source = sys.stdin.read()
        converted = markdown_to_html(source) if args.md else html_to_markdown(source)
        sys.stdout.write(converted)
        return

    settings = load_settings()
    configure_logging(settings.log_level)
    logger.debug("running command %s", args.command or "view")

    if args.command == "purge":
        removed = actions.purge_local_files(settings.save_location)
        print(f"Removed {removed} local page file(s) from {settings.save_location}")
        return

    if args.command == "edit":
        page_id = actions.resolve_page_id(args.page_id, args.last, settings.history_location)
        with open_store(settings) as store:
            if args.preview is not None:
                print(actions.page_preview(store, page_id, args.preview))
                return
            handoff = EditorHandoff(settings.save_location, editor_command(settings.editor))
            actions.edit_page_by_id(store, page_id, handoff, settings.history_location)
        print("Page edited successfully!")
        return

    if args.command == "delete":
        with open_store(settings) as store:
            store.delete_page(args.page_id)
        print("Page deleted successfully")
        return

    if args.command == "list":
        with open_store(settings) as store:
            if args.spaces:
                items = store.list_spaces()
            elif args.title:
                items = store.find_pages_by_title(args.title)
            else:
                items = store.list_pages(args.space_id)
        for line in actions.format_id_list(items):
            print(line)
        return

    if args.command == "new":
        with open_store(settings) as store:
            page = actions.create_page(store, args.space_id, args.title, args.path)
            print("Page created successfully!")
            if args.edit:
                handoff = EditorHandoff(settings.save_location, editor_command(settings.editor))
                actions.edit_page_by_id(store, page.id, handoff, settings.history_location)
        return

    run_view(settings)


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and run the chosen command, mapping errors to exit codes."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "list" and args.pages and not (args.space_id or args.title):
        parser.error("list --pages needs --space or --title")
    try:
        _run(args)
    except UserCancelled as exc:
        print(str(exc))
    except PublishError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        print(f"Your edit is still saved at {exc.path}", file=sys.stderr)
        raise SystemExit(1) from exc
    except ConfigError as exc:
        print(f"ERROR: Error fetching config: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    except WikitermError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()

"""CLI for inspecting block types and rendering pages."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .block_engine import (
    ERROR_STRATEGIES,
    RenderResult,
    RenderState,
    coerce_setting_values,
    parse_setting_pairs,
)
from .blocks import build_block_registry
from .config import DEFAULT_PREVIEW_FILENAME_TEMPLATE
from .pages import render_page_file
from .rendering import render_results_pdf


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _add_plugin_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--block-plugin",
        action="append",
        default=[],
        help="Additional block plugin module path (repeatable).",
    )


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render the blocks of a page description.")
    parser.add_argument("page", type=Path, help="Page description JSON file.")
    parser.add_argument(
        "--block",
        action="append",
        default=[],
        help="Render only the block with this name (repeatable).",
    )
    parser.add_argument(
        "--param",
        action="append",
        default=[],
        help="Setting override in key=value form, applied to every block (repeatable).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Deployment config JSON file with per-type setting overrides.",
    )
    parser.add_argument(
        "--error-strategy",
        choices=ERROR_STRATEGIES,
        default="ignore",
        help="What a failed block renders as: nothing, or an inline error line.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write a PDF preview instead of printing. Use '-' for page_<name>.pdf.",
    )
    parser.add_argument("--workers", type=int, default=None, help="Render thread count.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    _add_plugin_argument(parser)
    return parser


def _build_types_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect registered block types.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List available block types.")
    _add_plugin_argument(list_parser)

    show_parser = subparsers.add_parser("show", help="Show details for one block type.")
    show_parser.add_argument("block_type", help="Block type id or alias.")
    _add_plugin_argument(show_parser)
    return parser


def _print_warnings(warnings: tuple[str, ...]) -> None:
    for warning in warnings:
        print(warning, file=sys.stderr)


def _run_types_cli(argv: list[str]) -> int:
    parser = _build_types_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(False)

    try:
        registry, warnings = build_block_registry(plugin_modules=args.block_plugin)
        _print_warnings(warnings)

        if args.command == "list":
            for descriptor in registry.list_descriptors():
                print(f"{descriptor.block_type}\t{descriptor.title}")
            return 0

        if args.command == "show":
            descriptor = registry.lookup(args.block_type)
            print(f"id: {descriptor.block_type}")
            print(f"title: {descriptor.title}")
            print(f"description: {descriptor.description}")
            if descriptor.aliases:
                print(f"aliases: {', '.join(descriptor.aliases)}")
            print("defaults:")
            if not descriptor.defaults:
                print("  (none)")
                return 0
            for key, value in descriptor.defaults.items():
                print(f"  {key}: {value!r}")
            return 0
    except ValueError as exc:
        parser.exit(status=2, message=f"error: {exc}\n")

    parser.exit(status=2, message=f"error: unknown types command '{args.command}'\n")
    return 2


def _print_results(results: tuple[RenderResult, ...]) -> None:
    for result in results:
        if result.state is RenderState.SKIPPED:
            continue
        print(f"== {result.block_id} ({result.block_type or '?'})")
        if result.content:
            print(result.content)


def main(argv: list[str] | None = None) -> int:
    argv_list = list(sys.argv[1:] if argv is None else argv)
    if argv_list and argv_list[0] == "types":
        return _run_types_cli(argv_list[1:])
    if argv_list and argv_list[0] == "render":
        argv_list = argv_list[1:]

    parser = _build_arg_parser()
    args = parser.parse_args(argv_list)
    _configure_logging(args.verbose)

    try:
        overrides = coerce_setting_values(parse_setting_pairs(args.param))
        page, results, warnings = render_page_file(
            args.page,
            block_names=args.block,
            overrides=overrides,
            config_path=args.config,
            plugin_modules=args.block_plugin,
            error_strategy=args.error_strategy,
            max_workers=args.workers,
        )
        _print_warnings(warnings)

        if args.output is None:
            _print_results(results)
        else:
            destination = args.output
            if str(destination) == "-":
                destination = Path(DEFAULT_PREVIEW_FILENAME_TEMPLATE.format(page=page.name))
            render_results_pdf(results, destination, title=page.name)
            print(f"Generated preview at: {destination}")
    except ValueError as exc:
        parser.exit(status=2, message=f"error: {exc}\n")

    return 1 if any(result.state is RenderState.FAILED for result in results) else 0


if __name__ == "__main__":
    raise SystemExit(main())

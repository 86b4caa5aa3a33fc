#!/usr/bin/env python3
"""
CLI interface for cleardir
"""

import sys
import argparse
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from . import __version__
from .core import (
    CleardirError,
    Options,
    display_path,
    error_kind,
    scan_directory,
    delete_duplicates,
    get_digest_report,
    get_deletion_summary,
)

# long digest lines must stay on one line when output is piped
console = Console(highlight=False, emoji=False, soft_wrap=True)
error_console = Console(stderr=True, highlight=False, emoji=False, soft_wrap=True)


def print_error(message: str) -> None:
    error_console.print(f"[red]Error:[/red] [yellow]{escape(message)}[/yellow]")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog="cleardir",
        description=(
            "cleardir compares the SHA256 checksums of the files in the specified "
            "directories. If multiple files with the same checksum are found in a "
            "directory, all files except the one with the shortest filename are deleted."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
CAUTION: Files will be deleted without further inquiry. Use at your own risk.

Examples:
  cleardir /path/to/directory
  cleardir /path/one /path/two
  cleardir /path/to/directory --verbose --dry-run
        """
    )

    parser.add_argument(
        "paths",
        nargs="*",
        help="The paths to be searched"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="More detailed output"
    )
    parser.add_argument(
        "-d", "--dry-run",
        action="store_true",
        help="Test run: no files will be deleted"
    )
    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser.parse_args(argv)


def format_paths(paths: List[str]) -> str:
    """Render paths as a bracketed, double-quoted list"""
    return "[" + ", ".join(f'"{display_path(p)}"' for p in paths) + "]"


def print_arguments(options: Options, paths: List[str]) -> None:
    """Echo the parsed command line"""
    console.print('[green]Command line option "verbose" set?[/green]',
                  f"[yellow]{str(options.verbose).lower()}[/yellow]")
    console.print('[green]Command line option "dry-run" set?[/green]',
                  f"[yellow]{str(options.dry_run).lower()}[/yellow]")
    console.print("[green]Which paths to search?[/green]", escape(format_paths(paths)))


def process_directory(directory: str, options: Options) -> bool:
    """
    Scan one directory and delete its duplicates

    Every error is reported here; nothing propagates to the caller.

    Returns:
        True if the directory was processed without any error
    """

    def on_file(filepath: Path, file_hash: str, is_duplicate: bool) -> None:
        mark = " [red](dup!)[/red]" if is_duplicate else ""
        console.print(f"{escape(display_path(filepath))} => {file_hash}{mark}")

    def on_skip(filepath: Path) -> None:
        if options.verbose:
            console.print(f"(ignoring directory: {escape(display_path(filepath))})")

    def on_keep(filepath: Path) -> None:
        if options.verbose:
            console.print(f"I want to keep {escape(display_path(filepath))}")

    def on_delete(filepath: Path) -> None:
        if options.verbose:
            console.print(f"I want to delete {escape(display_path(filepath))}")

    ok = True
    try:
        console.print("[green]Searching for duplicates in directory:[/green]",
                      f"[bold green]{escape(display_path(directory))}[/bold green]")

        scan_result = scan_directory(directory, progress_callback=on_file, skip_callback=on_skip)

        for filepath, error in scan_result.entry_errors:
            print_error(f"cannot read entry {display_path(filepath)}: {error_kind(error)}")
            ok = False

        if options.verbose:
            console.print(get_digest_report(scan_result.groups), markup=False)

        report = delete_duplicates(scan_result, options,
                                   delete_callback=on_delete, keep_callback=on_keep)

        for filepath, error in report.errors:
            print_error(f"cannot delete {display_path(filepath)}: {error_kind(error)}")
            ok = False

        # a dry run is only visible in verbose mode
        if options.verbose or not options.dry_run:
            console.print(get_deletion_summary(report), markup=False)

    except CleardirError as e:
        print_error(str(e))
        ok = False

    return ok


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""
    args = parse_args(argv)
    options = Options(verbose=args.verbose, dry_run=args.dry_run)

    if options.verbose:
        print_arguments(options, args.paths)

    if not args.paths:
        console.print("No paths given. Exiting.")
        return 0

    try:
        for directory in args.paths:
            process_directory(directory, options)
    except KeyboardInterrupt:
        error_console.print("\n\nOperation cancelled by user")
        sys.exit(130)

    return 0


if __name__ == "__main__":
    sys.exit(main())

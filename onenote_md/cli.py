"""CLI entry point for the OneNote to Markdown exporter."""

import argparse
import logging
import sys
from pathlib import Path

from onenote_md.config import ExportConfig, MediaScope, PrefixMode, load_settings_file
from onenote_md.converter.markdown import MarkdownExporter
from onenote_md.converter.pandoc import PandocConverter, pandoc_available
from onenote_md.errors import FilesystemUnavailable
from onenote_md.parser.manifest import ManifestSource


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="onenote-md-export",
        description="Export OneNote notebooks to a tree of Markdown files",
    )
    parser.add_argument(
        "-m",
        "--manifest",
        required=True,
        help="JSON manifest describing the notebooks to export",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Output directory for Markdown files",
    )
    parser.add_argument(
        "--settings",
        help="JSON settings file; command-line options override it",
    )
    parser.add_argument(
        "--notebook",
        help="Only export the notebook with this name",
    )
    parser.add_argument(
        "--prefix-mode",
        choices=[m.value for m in PrefixMode],
        help="Encode subpages as subfolders or as filename prefixes",
    )
    parser.add_argument(
        "--media-scope",
        choices=[s.value for s in MediaScope],
        help="Store media at the notebook root or next to each page",
    )
    parser.add_argument(
        "--flavor",
        help="Markdown flavor passed to the converter (default: gfm)",
    )
    parser.add_argument(
        "--no-timestamp",
        action="store_true",
        help="Do not add the page date below the title",
    )
    parser.add_argument(
        "--collapse-whitespace",
        action="store_true",
        help="Turn non-breaking spaces into line breaks and drop blank lines",
    )
    parser.add_argument(
        "--keep-escapes",
        action="store_true",
        help="Keep the backslash escapes written by the converter",
    )
    parser.add_argument(
        "--preserve-spaces",
        action="store_true",
        help="Keep spaces in file and folder names",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (very verbose)",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> ExportConfig:
    """Merge the settings file (if any) with command-line options."""
    base = load_settings_file(Path(args.settings)) if args.settings else ExportConfig()
    return base.with_overrides(
        destination_root=Path(args.output).resolve() if args.output else None,
        target_notebook_filter=args.notebook,
        prefix_mode=PrefixMode(args.prefix_mode) if args.prefix_mode else None,
        media_scope=MediaScope(args.media_scope) if args.media_scope else None,
        converter_flavor=args.flavor,
        include_timestamp_header=False if args.no_timestamp else None,
        collapse_whitespace=True if args.collapse_whitespace else None,
        strip_escapes=False if args.keep_escapes else None,
        preserve_spaces_in_names=True if args.preserve_spaces else None,
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the onenote-md-export CLI."""
    args = build_parser().parse_args(argv)

    # Configure logging
    if args.debug:
        log_level = logging.DEBUG
    elif args.verbose:
        log_level = logging.INFO
    else:
        log_level = logging.WARNING

    logging.basicConfig(
        level=log_level,
        format="%(levelname)s: %(message)s",
    )

    try:
        config = config_from_args(args)
        source = ManifestSource(args.manifest)
        notebooks = source.load()
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if config.destination_root is None:
        print(
            "Error: no output directory; pass -o/--output or set destination_root",
            file=sys.stderr,
        )
        return 1

    if not pandoc_available():
        print("Error: pandoc is required but was not found on PATH", file=sys.stderr)
        return 1

    print(f"Found {len(notebooks)} notebook(s) in {args.manifest}")

    exporter = MarkdownExporter(config, PandocConverter(), source.read_content)
    try:
        report = exporter.export(notebooks)
    except FilesystemUnavailable as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Summary
    print(f"\n{'=' * 50}")
    print("Export complete:")
    print(f"  Pages exported:  {report.pages_exported}")
    print(f"  Files written:   {len(report.files_written)}")
    print(f"  Output:          {config.destination_root}")

    if report.failures:
        print(f"\n  Errors ({len(report.failures)}):")
        for failure in report.failures:
            print(f"    {failure}")
        return 2 if report.pages_exported == 0 else 0

    return 0


if __name__ == "__main__":
    sys.exit(main())

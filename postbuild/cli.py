#!/usr/bin/env python3
"""
Postbuild CLI

Command-line interface for building blog posts with pandoc.

Usage:
    postbuild [sources...] [options]
    postbuild                          # build the post in the current directory
    postbuild posts/my-post/           # build one post
    postbuild posts/                   # build every post under posts/
    postbuild posts/my-post/draft.md   # build a specific Markdown file

Options:
    -i, --input-name NAME    Markdown file inside each post (default: content.md)
    -o, --output-name NAME   HTML file written next to it (default: index.html)
    --template PATH          pandoc template, relative to the post directory
    --toc-depth N            Heading depth for the table of contents
    --filter CMD             Post-processing filter (default: ../htmlhl)
    --dry-run                Print the commands instead of running them
    --show-config            Show the effective configuration and exit
"""

import argparse
import os
import shlex
import sys

from . import __version__
from .config import BuildConfig, MATH_MODES
from .core import PostBuilder, BatchReport
from .converters.pandoc_converter import PandocConverter, ConversionError
from .converters.filter_converter import FilterError


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="postbuild",
        description=(
            "Static Blog Post Builder\n\n"
            "Converts each post's Markdown into a standalone HTML page with\n"
            "pandoc, then runs it through the blog's highlighter filter."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Environment:\n"
            "  POSTBUILD_PANDOC, POSTBUILD_INPUT, POSTBUILD_OUTPUT, POSTBUILD_TEMPLATE,\n"
            "  POSTBUILD_MATH, POSTBUILD_HIGHLIGHT_STYLE, POSTBUILD_TOC, POSTBUILD_TOC_DEPTH,\n"
            "  POSTBUILD_FILTER, POSTBUILD_STANDALONE, POSTBUILD_EXTRA_ARGS\n"
            "  (also read from a .env file)\n\n"
            "Examples:\n"
            "  postbuild posts/                      # all posts\n"
            "  postbuild posts/ --changed-only       # only posts whose sources changed\n"
            "  postbuild . --no-filter --math katex  # one post, no highlighter\n"
            "  postbuild posts/ --dry-run            # show pandoc commands\n"
        ),
    )

    parser.add_argument(
        "sources",
        nargs="*",
        help="Post directories, posts roots, or Markdown files (default: .)",
    )
    parser.add_argument("--pandoc", default=None, help="pandoc executable (default: pandoc)")
    parser.add_argument("-i", "--input-name", default=None, help="Markdown file name in each post")
    parser.add_argument("-o", "--output-name", default=None, help="HTML file name in each post")
    parser.add_argument("--template", default=None, help="pandoc template, relative to the post")
    parser.add_argument("--no-template", action="store_true", help="Use pandoc's default template")
    parser.add_argument("--toc-depth", type=int, default=None, help="Table of contents depth")
    parser.add_argument("--no-toc", action="store_true", help="Omit the table of contents")
    parser.add_argument("--math", choices=MATH_MODES, default=None, help="Math rendering mode")
    parser.add_argument(
        "--highlight-style",
        default=None,
        help="Let pandoc highlight with this style instead of passing --no-highlight",
    )
    parser.add_argument("--filter", default=None, help="Post-processing filter command")
    parser.add_argument("--no-filter", action="store_true", help="Skip the post-processing filter")
    parser.add_argument("--env-file", default=None, help="Read settings from this .env file")
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Keep building remaining posts after a failure",
    )
    parser.add_argument(
        "--changed-only",
        action="store_true",
        help="Skip posts whose output is newer than their Markdown and template",
    )
    parser.add_argument("--dry-run", action="store_true", help="Print commands without running them")
    parser.add_argument("--show-config", action="store_true", help="Show configuration and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(argv)

    try:
        config = _build_config(args)
    except (ValueError, FileNotFoundError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2

    errors = config.validate()
    if errors:
        for error in errors:
            print(f"[ERROR] {error}", file=sys.stderr)
        return 2

    if args.show_config:
        _show_config(config)
        return 0

    sources = args.sources or ["."]

    if args.dry_run:
        return _dry_run(config, sources)

    print("=" * 60)
    print("  POSTBUILD - Static Blog Post Builder")
    print("=" * 60)
    print()

    success_count = 0
    skipped_count = 0
    error_count = 0

    for source in sources:
        try:
            report = _build_source(config, source, args.keep_going, args.changed_only)
        except Exception as e:
            print(f"[ERROR] {source}: {e}", file=sys.stderr)
            error_count += 1
            if not args.keep_going:
                break
            continue

        success_count += len(report.results)
        skipped_count += len(report.skipped)
        error_count += len(report.failures)
        for post_dir, message in report.failures.items():
            print(f"[ERROR] {post_dir}: {message}", file=sys.stderr)

    print()
    print("-" * 60)
    print(f"  Done: {success_count} built, {skipped_count} skipped, {error_count} errors")
    print("-" * 60)

    return 1 if error_count else 0


def _build_config(args) -> BuildConfig:
    config = BuildConfig.from_env(args.env_file)
    config = config.replace(
        pandoc=args.pandoc,
        input_name=args.input_name,
        output_name=args.output_name,
        template=args.template,
        toc_depth=args.toc_depth,
        math=args.math,
        highlight_style=args.highlight_style,
        filter_command=args.filter,
    )
    if args.no_template:
        config.template = None
    if args.no_toc:
        config.toc = False
    if args.no_filter:
        config.filter_command = None
    return config


def _resolve_source(config: BuildConfig, source: str):
    """Map a source to (post or root directory, config for it)."""
    if os.path.isdir(source):
        return source, config

    if os.path.isfile(source):
        if not PandocConverter.can_handle(source):
            raise ValueError(f"Not a Markdown file: {source}")
        post_dir = os.path.dirname(os.path.abspath(source))
        return post_dir, config.replace(input_name=os.path.basename(source))

    raise ValueError(
        f"Cannot handle source: {source}\n"
        f"Provide a post directory, a posts root, or a Markdown file."
    )


def _build_source(config: BuildConfig, source: str, keep_going: bool, changed_only: bool) -> BatchReport:
    directory, source_config = _resolve_source(config, source)
    builder = PostBuilder(source_config)
    return builder.build_all(directory, keep_going=keep_going, changed_only=changed_only)


def _dry_run(config: BuildConfig, sources: list) -> int:
    for source in sources:
        try:
            directory, source_config = _resolve_source(config, source)
            builder = PostBuilder(source_config)
            posts = builder.discover(directory)
            plans = [builder.plan(post_dir) for post_dir in posts]
        except (ValueError, FileNotFoundError, FilterError) as e:
            print(f"[ERROR] {source}: {e}", file=sys.stderr)
            return 1

        for plan in plans:
            print(f"# {plan.post_dir}")
            print(shlex.join(plan.command))
            if plan.filter_command:
                output = source_config.output_name
                print(f"{shlex.join(plan.filter_command)} > {output}.tmp && mv {output}.tmp {output}")
    return 0


def _show_config(config: BuildConfig):
    """Display the effective configuration."""
    print("\nEffective Configuration:")
    print("-" * 40)
    for key, value in config.as_dict().items():
        print(f"  {key}: {value}")
    print(f"\n  pandoc flags: {' '.join(config.pandoc_args())}")
    try:
        print(f"  pandoc version: {PandocConverter(config).version()}")
    except ConversionError:
        print(f"  pandoc version: not found ({config.pandoc})")
    print()


if __name__ == "__main__":
    sys.exit(main())

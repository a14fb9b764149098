import argparse
import json
import logging
import os
import sys

from templight import create_registry
from templight.config import load_config
from templight.exceptions import TemplightError
from templight.utils.html import render_document, tokens_to_data

logger = logging.getLogger("templight")


def cmd_highlight(args, config):
    if not os.path.exists(args.file):
        print(f"Error: File '{args.file}' does not exist.")
        sys.exit(1)

    with open(args.file, 'r', encoding='utf-8') as f:
        source = f.read()

    registry = create_registry(config)
    tokens = registry.highlight(source, config.language_id)

    if args.format == 'json':
        output = json.dumps(tokens_to_data(tokens), indent=2) + "\n"
    else:
        output = render_document(tokens, config.language_id, title=os.path.basename(args.file))

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(output)
        print(f"Wrote {args.output}")
    else:
        sys.stdout.write(output)


def cmd_build(args, config):
    from .builder import build_project
    build_project(os.path.abspath(args.directory), config, force=args.force)


def cmd_watch(args, config):
    from .builder import build_project
    from .watcher import watch_project
    builder = build_project(os.path.abspath(args.directory), config)
    watch_project(builder)


def cmd_version(args, config):
    from . import __version__ as cli_version
    import templight
    print(f"templight CLI version: {cli_version}")
    print(f"templight version: {templight.__version__}")


def configure_logging(level):
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv=None):
    parser = argparse.ArgumentParser(description="Syntax highlighting for templ templates")
    parser.add_argument("--config", help="Path to templight.toml (default: ./templight.toml)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # highlight command
    parser_highlight = subparsers.add_parser("highlight", help="Highlight a single file")
    parser_highlight.add_argument("file", help="templ source file")
    parser_highlight.add_argument("-o", "--output", help="Write to this file instead of stdout")
    parser_highlight.add_argument("--format", choices=['html', 'json'], default='html', help="Output format")
    parser_highlight.set_defaults(func=cmd_highlight)

    # build command
    parser_build = subparsers.add_parser("build", help="Highlight every templ file of a directory")
    parser_build.add_argument("directory", nargs="?", default=".", help="Source directory")
    parser_build.add_argument("--force", action="store_true", help="Ignore the build cache")
    parser_build.set_defaults(func=cmd_build)

    # watch command
    parser_watch = subparsers.add_parser("watch", help="Build, then rebuild on changes")
    parser_watch.add_argument("directory", nargs="?", default=".", help="Source directory")
    parser_watch.set_defaults(func=cmd_watch)

    # version command
    parser_version = subparsers.add_parser("version", help="Show version information")
    parser_version.set_defaults(func=cmd_version)

    args = parser.parse_args(argv)

    try:
        config_path = args.config
        if config_path is None and args.command in ("build", "watch"):
            config_path = os.path.abspath(args.directory)
        config = load_config(config_path)
        configure_logging(logging.DEBUG if args.verbose else config.log_level)
        args.func(args, config)
    except TemplightError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

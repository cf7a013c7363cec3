"""Command-line front door for studylenses.

Loads a virtual tree from a snapshot, repository URL, or gist, then lists
it, resolves a file's lens configuration, or prints a file.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence

from . import config
from .browser import render_tree, visible_file_paths
from .errors import StudyLensesError
from .github import GitHubClient
from .highlight import highlight_source, language_name, sanitize_terminal_text
from .session import StudySession


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="studylenses",
        description="Browse a virtual code tree and resolve per-file lens configuration.",
    )
    parser.add_argument(
        "--source",
        default=None,
        help="Snapshot JSON path, GitHub repository URL, or gist URL (default: saved source).",
    )
    parser.add_argument("--token", default=None, help="GitHub token for API requests.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug details to stderr.")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("tree", help="Print the learner-facing file tree.")

    files = sub.add_parser("files", help="List visible file paths.")
    files.add_argument("--long", action="store_true", help="Include each file's detected language.")

    resolve = sub.add_parser("config", help="Print the effective lens configuration for a file.")
    resolve.add_argument("path", help="File path inside the tree.")
    resolve.add_argument("--layers", action="store_true", help="Show every ancestor layer instead.")

    show = sub.add_parser("show", help="Print a file, falling back to a similar file if missing.")
    show.add_argument("path", nargs="?", default=None, help="File path inside the tree.")
    show.add_argument("--style", default=None, help="Pygments style name.")
    show.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")

    use = sub.add_parser("use", help="Save the default source for later runs.")
    use.add_argument("source", help="Snapshot JSON path or GitHub/gist URL.")
    return parser


def _load_session(args: argparse.Namespace) -> StudySession:
    source = args.source or config.load_default_source()
    if not source:
        raise SystemExit("No source given. Pass --source or run 'studylenses use SOURCE'.")
    token = args.token or config.load_github_token()
    session = StudySession(client=GitHubClient(token=token))
    try:
        session.load(source)
    except StudyLensesError as exc:
        raise SystemExit(f"Failed to load {source}: {exc}") from exc
    return session


def _cmd_show(session: StudySession, args: argparse.Namespace) -> None:
    resolution = session.open_file(args.path)
    file = resolution.file
    if file is None:
        raise SystemExit("The loaded tree has no files.")
    if args.path and not resolution.exact:
        print(f'"{args.path}" was not found, showing {file.path} instead', file=sys.stderr)
    try:
        content = session.load_file_content(file)
    except StudyLensesError as exc:
        raise SystemExit(f"Failed to load {file.path}: {exc}") from exc

    if args.no_color or not sys.stdout.isatty():
        sys.stdout.write(sanitize_terminal_text(content))
    else:
        sys.stdout.write(highlight_source(content, file.name, args.style or config.load_style_name()))
    if content and not content.endswith("\n"):
        sys.stdout.write("\n")


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments and run one subcommand."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "use":
        config.save_default_source(args.source)
        print(f"Default source set to {args.source}")
        return

    session = _load_session(args)
    assert session.tree is not None

    if args.command == "tree":
        print("\n".join(render_tree(session.tree)))
    elif args.command == "files":
        for path in visible_file_paths(session.tree):
            if args.long:
                print(f"{path}\t{language_name(path.rsplit('/', 1)[-1])}")
            else:
                print(path)
    elif args.command == "config":
        if session.get_file(args.path) is None:
            raise SystemExit(f"Path not found: {args.path}")
        if args.layers:
            payload: object = [
                {"path": layer.path, "status": layer.status, "data": layer.data}
                for layer in session.resolve_config_layers(args.path)
            ]
        else:
            payload = session.resolve_config(args.path)
        print(json.dumps(payload, indent=2))
    elif args.command == "show":
        _cmd_show(session, args)


if __name__ == "__main__":
    main()

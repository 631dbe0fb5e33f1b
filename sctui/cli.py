#!/usr/bin/env python3
"""sc-tui CLI entrypoint."""

import argparse
import logging
import os
import sys
from pathlib import Path

from sctui import __version__
from sctui.api.client import ShortcutClient
from sctui.commands import add as cmd_add_module
from sctui.commands import branch as cmd_branch_module
from sctui.commands import comment as cmd_comment_module
from sctui.commands import edit as cmd_edit_module
from sctui.commands import finish as cmd_finish_module
from sctui.commands import show as cmd_show_module
from sctui.commands import view as cmd_view_module
from sctui.lib.config import ConfigError, load_config, resolve_credentials
from sctui.lib.constants import EXIT_SUCCESS, EXIT_USAGE, STORY_TYPES
from sctui.lib.validate import ValidationError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def default_log_file() -> Path:
    xdg = os.environ.get("XDG_CACHE_HOME")
    base = Path(xdg) if xdg else Path.home() / ".cache"
    return base / "sc-tui" / "sc-tui.log"


def configure_logging(debug: bool, log_file: Path | None = None) -> None:
    """WARNING by default, DEBUG with --debug. With log_file, records go there instead of stderr."""
    level = logging.DEBUG if debug else logging.WARNING
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)


def get_client(args):
    """Resolve credentials and build a client. Exits with 2 on config problems."""
    try:
        config = load_config()
        creds = resolve_credentials(config, args.workspace, args.token, args.username)
    except (ConfigError, ValidationError) as e:
        print(f"ERROR: {e}")
        sys.exit(EXIT_USAGE)
    logger.debug(f"Using workspace {creds.workspace or '(token)'} at {creds.base_url}")
    return ShortcutClient(creds.api_key, base_url=creds.base_url), creds


def cmd_view(args):
    client, creds = get_client(args)
    with client:
        return cmd_view_module.cmd_view(args, client, creds)


def cmd_show(args):
    client, creds = get_client(args)
    with client:
        return cmd_show_module.cmd_show(args, client, creds)


def cmd_add(args):
    client, _ = get_client(args)
    with client:
        return cmd_add_module.cmd_add(args, client)


def cmd_finish(args):
    client, _ = get_client(args)
    with client:
        return cmd_finish_module.cmd_finish(args, client)


def cmd_edit(args):
    client, _ = get_client(args)
    with client:
        return cmd_edit_module.cmd_edit(args, client)


def cmd_comment(args):
    client, _ = get_client(args)
    with client:
        return cmd_comment_module.cmd_comment(args, client)


def cmd_branch(args):
    client, _ = get_client(args)
    with client:
        return cmd_branch_module.cmd_branch(args, client)


def cmd_version(args):
    print(f"sc-tui {__version__}")
    return EXIT_SUCCESS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='sc-tui', description='Terminal board for Shortcut stories')
    parser.add_argument('--workspace', '-w', help='Workspace name from the config file')
    parser.add_argument('--token', default=os.environ.get('SHORTCUT_API_TOKEN'),
                        help='API token (default: $SHORTCUT_API_TOKEN)')
    parser.add_argument('--username', '-u', help='Mention name used with --token')
    parser.add_argument('--debug', action='store_true', help='Verbose logging')
    parser.add_argument('--log-file', type=Path, help='Log file while the board is open')
    parser.add_argument('--limit', type=int, help='Stories to load up front (default: workspace fetch_limit)')
    parser.add_argument('--story-type', choices=STORY_TYPES, help='Only stories of this type')
    parser.add_argument('--search', '-s', help='Custom Shortcut search query (overrides filters)')
    who = parser.add_mutually_exclusive_group()
    who.add_argument('--all', '-a', action='store_true', help='All stories, not just yours')
    who.add_argument('--owner', action='store_true', help='Stories you own (default)')
    who.add_argument('--requester', '-r', action='store_true', help='Stories you requested')
    parser.set_defaults(func=cmd_view)

    subparsers = parser.add_subparsers(dest='command')

    # sc-tui view
    p_view = subparsers.add_parser('view', help='Interactive board (default)')
    p_view.set_defaults(func=cmd_view)

    # sc-tui show
    p_show = subparsers.add_parser('show', help='Print stories, or one story in full')
    p_show.add_argument('id', nargs='?', help='Story id (42 or sc-42)')
    p_show.set_defaults(func=cmd_show)

    # sc-tui add
    p_add = subparsers.add_parser('add', help='Create a story')
    p_add.add_argument('name', help='Story name')
    p_add.add_argument('--description', '-d', default='', help='Story description')
    p_add.add_argument('--type', '-t', choices=STORY_TYPES, default=STORY_TYPES[0], help='Story type')
    p_add.set_defaults(func=cmd_add)

    # sc-tui finish
    p_finish = subparsers.add_parser('finish', help='Move a story to done')
    p_finish.add_argument('id', help='Story id (42 or sc-42)')
    p_finish.set_defaults(func=cmd_finish)

    # sc-tui edit
    p_edit = subparsers.add_parser('edit', help="Change a story's name, description or type")
    p_edit.add_argument('id', help='Story id (42 or sc-42)')
    p_edit.add_argument('--name', '-n', help='New name')
    p_edit.add_argument('--description', '-d', help='New description')
    p_edit.add_argument('--type', '-t', choices=STORY_TYPES, help='New type')
    p_edit.set_defaults(func=cmd_edit)

    # sc-tui comment
    p_comment = subparsers.add_parser('comment', help='Comment on a story')
    p_comment.add_argument('id', help='Story id (42 or sc-42)')
    p_comment.add_argument('--message', '-m', help='Comment text (read from stdin if omitted)')
    p_comment.set_defaults(func=cmd_comment)

    # sc-tui branch
    p_branch = subparsers.add_parser('branch', help='Create a git branch for a story')
    p_branch.add_argument('id', help='Story id (42 or sc-42)')
    p_branch.add_argument('--default', action='store_true', help='Use the suggested name without asking')
    p_branch.add_argument('--worktree', action='store_true', help='Create a worktree instead of a branch')
    p_branch.add_argument('--name', help='Branch name to use')
    p_branch.set_defaults(func=cmd_branch)

    # sc-tui version
    p_version = subparsers.add_parser('version', help='Print version')
    p_version.set_defaults(func=cmd_version)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        args.command = 'view'
    if args.limit is not None and args.limit <= 0:
        parser.error('--limit must be positive')

    # The board owns the terminal, so its logs go to a file
    if args.command == 'view':
        configure_logging(args.debug, args.log_file or default_log_file())
    else:
        configure_logging(args.debug, args.log_file)

    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())

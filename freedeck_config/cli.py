"""
命令行入口 — 新建、查看、编辑设备配置文件
"""

import argparse
import logging
import sys
from typing import Optional

from .core.config_manager import ConfigManager
from .core.errors import ProfileError
from .core.image_processor import load_icon
from .core.rows import ActionRecord

logger = logging.getLogger(__name__)


def _cmd_new(manager: ConfigManager, args: argparse.Namespace) -> int:
    profile = manager.new_profile(args.width, args.height, pages=args.pages)
    manager.save_profile(profile, args.file)
    print(f"Created {args.file}: {profile.width}x{profile.height}, {profile.page_count} page(s)")
    return 0


def _cmd_info(manager: ConfigManager, args: argparse.Namespace) -> int:
    profile = manager.load_profile(args.file)
    print(f"Grid: {profile.width}x{profile.height}")
    print(f"Pages: {profile.page_count}")
    for page_index in range(profile.page_count):
        labels = [
            profile.get_row(page_index, display_index).label
            for display_index in range(profile.slots_per_page)
        ]
        print(f"  [{page_index}] " + ", ".join(labels))
    return 0


def _cmd_add_page(manager: ConfigManager, args: argparse.Namespace) -> int:
    profile = manager.load_profile(args.file)
    index = profile.add_page(args.back)
    manager.save_profile(profile, args.file)
    print(f"Added page {index}")
    return 0


def _cmd_delete_page(manager: ConfigManager, args: argparse.Namespace) -> int:
    profile = manager.load_profile(args.file)
    profile.delete_page(args.page)
    manager.save_profile(profile, args.file)
    print(f"Deleted page {args.page}, {profile.page_count} page(s) left")
    return 0


def _cmd_set_action(manager: ConfigManager, args: argparse.Namespace) -> int:
    profile = manager.load_profile(args.file)
    if args.goto is not None:
        record = ActionRecord.goto_page(args.goto)
    else:
        record = ActionRecord.noop()
    profile.set_row(record, args.page, args.slot)
    manager.save_profile(profile, args.file)
    print(f"Page {args.page} slot {args.slot}: {record.label}")
    return 0


def _cmd_set_icon(manager: ConfigManager, args: argparse.Namespace) -> int:
    profile = manager.load_profile(args.file)
    raw = load_icon(args.image, manager.settings.icon_width, manager.settings.icon_height)
    profile.set_image(raw, args.page, args.slot)
    manager.save_profile(profile, args.file)
    print(f"Page {args.page} slot {args.slot}: icon from {args.image}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="freedeck-config", description="FreeDeck profile editor")
    parser.add_argument("--settings", help="editor settings JSON file")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("new", help="create a new profile file")
    p.add_argument("file")
    p.add_argument("--width", type=int)
    p.add_argument("--height", type=int)
    p.add_argument("--pages", type=int, default=1)
    p.set_defaults(func=_cmd_new)

    p = sub.add_parser("info", help="print the pages and actions of a profile")
    p.add_argument("file")
    p.set_defaults(func=_cmd_info)

    p = sub.add_parser("add-page", help="append a page")
    p.add_argument("file")
    p.add_argument("--back", type=int, default=-1, help="page the back button returns to")
    p.set_defaults(func=_cmd_add_page)

    p = sub.add_parser("delete-page", help="delete a page and renumber page links")
    p.add_argument("file")
    p.add_argument("page", type=int)
    p.set_defaults(func=_cmd_delete_page)

    p = sub.add_parser("set-action", help="set a button action")
    p.add_argument("file")
    p.add_argument("page", type=int)
    p.add_argument("slot", type=int)
    p.add_argument("--goto", type=int, help="target page; omit for no-op")
    p.set_defaults(func=_cmd_set_action)

    p = sub.add_parser("set-icon", help="set a button icon from an image file")
    p.add_argument("file")
    p.add_argument("page", type=int)
    p.add_argument("slot", type=int)
    p.add_argument("image")
    p.set_defaults(func=_cmd_set_icon)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """命令行入口, 返回退出码"""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    manager = ConfigManager()
    try:
        if args.settings:
            manager.load_settings(args.settings)
        return args.func(manager, args)
    except (ProfileError, ValueError, OSError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI behavior
    raise SystemExit(main())

"""Entry point for `python -m mcpbrowse` / `mcpbrowse`.

Runs a single browser action against the configured automation server:

    mcpbrowse navigate --url https://example.com
    mcpbrowse type --selector "#q" --text "hello"
    mcpbrowse --transport rest --server-url http://localhost:13000 screenshot --path out.png
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Any

# Subcommand → (action name, [(flag, payload field, help)])
_COMMANDS: dict[str, tuple[str, list[tuple[str, str, str]]]] = {
    "navigate": ("NAVIGATE", [("--url", "url", "URL to open")]),
    "click": ("CLICK", [("--selector", "selector", "CSS/XPath selector to click")]),
    "type": (
        "TYPE",
        [
            ("--selector", "selector", "Selector of the input element"),
            ("--text", "text", "Text to type"),
        ],
    ),
    "select": (
        "SELECT",
        [
            ("--selector", "selector", "Selector of the select element"),
            ("--value", "value", "Option value to choose"),
        ],
    ),
    "screenshot": ("SCREENSHOT", [("--path", "path", "Where to save the image")]),
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcpbrowse",
        description="Run a browser action through a Playwright MCP server",
    )
    parser.add_argument("--server-url", help="Automation server URL (overrides config)")
    parser.add_argument(
        "--transport",
        choices=["streamable_http", "sse", "rest"],
        help="Wire mechanism (overrides config)",
    )
    sub = parser.add_subparsers(dest="command", required=True)
    for command, (action, fields) in _COMMANDS.items():
        p = sub.add_parser(command, help=f"Run the {action} action")
        for flag, dest, help_text in fields:
            p.add_argument(flag, dest=dest, default="", help=help_text)
    return parser


def _settings_for(args: argparse.Namespace) -> Any:
    from mcpbrowse.config import ServerConfig, Settings, get_settings

    s = get_settings()
    overrides = {}
    if args.server_url:
        overrides["url"] = args.server_url
    if args.transport:
        overrides["transport"] = args.transport
    if not overrides:
        return s
    return Settings(server=ServerConfig(**{**s.server.model_dump(), **overrides}))


async def _run(action: str, payload: dict[str, str], settings: Any) -> int:
    from mcpbrowse.actions import BrowserActions
    from mcpbrowse.errors import SessionConnectionError
    from mcpbrowse.logger import set_level
    from mcpbrowse.service import PlaywrightService

    set_level(settings.logging.level)
    service = PlaywrightService(settings)
    actions = BrowserActions(service)

    def _print(report: dict[str, Any]) -> None:
        stream = sys.stdout if report["content"].get("success") else sys.stderr
        print(report["text"], file=stream)

    try:
        await service.start()
    except SessionConnectionError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        ok = await actions.run(action, {"content": payload}, callback=_print)
    finally:
        await service.stop()
    return 0 if ok else 1


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    action, fields = _COMMANDS[args.command]
    payload = {dest: getattr(args, dest) for _, dest, _ in fields}
    return asyncio.run(_run(action, payload, _settings_for(args)))


if __name__ == "__main__":
    sys.exit(main())

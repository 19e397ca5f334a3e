"""Browser actions exposed to the host agent framework.

Each action validates its payload, performs exactly one client call, and
reports the outcome through the host's callback as ``{"text", "content"}``.
Handlers return a bool and never raise: this module is the one place where
client errors are caught.

Usage::

    actions = BrowserActions(get_service())
    ok = await actions.navigate.handler(runtime, message, state, {}, callback)
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from mcpbrowse.errors import ValidationError
from mcpbrowse.logger import logger

if TYPE_CHECKING:
    from mcpbrowse.client import SessionClient
    from mcpbrowse.service import PlaywrightService

# Receives {"text": ..., "content": {...}}; may be sync or async
HandlerCallback = Callable[[dict[str, Any]], Any]
Handler = Callable[..., Awaitable[bool]]


@dataclass(frozen=True)
class ActionSpec:
    """What an action needs and how it is carried out."""

    name: str
    required: tuple[str, ...]
    label: str  # used in failure text: "<label> failed: ..."
    run: Callable[[SessionClient, dict[str, str]], Awaitable[Any]]
    summary: Callable[[dict[str, str]], str]
    description: str = ""
    similes: tuple[str, ...] = ()
    examples: tuple[tuple[str, str], ...] = ()  # (user request, agent reply)


async def _navigate(client: SessionClient, p: dict[str, str]) -> Any:
    return await client.navigate(p["url"])


async def _click(client: SessionClient, p: dict[str, str]) -> Any:
    return await client.click(p["selector"])


async def _type(client: SessionClient, p: dict[str, str]) -> Any:
    return await client.type(p["selector"], p["text"])


async def _select(client: SessionClient, p: dict[str, str]) -> Any:
    return await client.select(p["selector"], p["value"])


async def _screenshot(client: SessionClient, p: dict[str, str]) -> Any:
    return await client.screenshot(p["path"])


ACTION_SPECS: dict[str, ActionSpec] = {
    spec.name: spec
    for spec in (
        ActionSpec(
            name="NAVIGATE",
            required=("url",),
            label="Navigation",
            run=_navigate,
            summary=lambda p: f"Navigated to {p['url']}",
            description="Navigate to a URL in the browser.",
            similes=("GO_TO", "OPEN_URL", "VISIT", "BROWSE_TO", "LOAD_PAGE"),
            examples=(("Go to https://example.com", "Navigating to the website..."),),
        ),
        ActionSpec(
            name="CLICK",
            required=("selector",),
            label="Click",
            run=_click,
            summary=lambda p: f"Clicked element {p['selector']}",
            description="Click an element on the page.",
            similes=("CLICK_ELEMENT", "PRESS_BUTTON", "TAP_ELEMENT"),
            examples=(("Click the submit button", "Clicking the button..."),),
        ),
        ActionSpec(
            name="TYPE",
            required=("selector", "text"),
            label="Type",
            run=_type,
            summary=lambda p: f'Typed "{p["text"]}" into {p["selector"]}',
            description="Type text into an input element.",
            similes=("INPUT_TEXT", "ENTER_TEXT", "FILL_INPUT", "WRITE_TEXT"),
            examples=(("Type 'hello' into the search box", "Typing into the search box..."),),
        ),
        ActionSpec(
            name="SELECT",
            required=("selector", "value"),
            label="Select",
            run=_select,
            summary=lambda p: f'Selected "{p["value"]}" in {p["selector"]}',
            description="Choose an option in a select element.",
            similes=("SELECT_OPTION", "CHOOSE_OPTION", "PICK_OPTION"),
            examples=(("Pick English in the language menu", "Selecting the option..."),),
        ),
        ActionSpec(
            name="SCREENSHOT",
            required=("path",),
            label="Screenshot",
            run=_screenshot,
            summary=lambda p: f"Screenshot saved to {p['path']}",
            description="Take a screenshot of the current page.",
            similes=("TAKE_SCREENSHOT", "CAPTURE_SCREEN", "SAVE_SCREENSHOT", "SCREEN_CAPTURE"),
            examples=(("Take a screenshot of this page", "Taking a screenshot..."),),
        ),
    )
}


def validate_payload(action: str, content: Any) -> dict[str, str]:
    """Return the required fields of ``content`` for ``action``.

    Raises:
        ValidationError: a required field is absent, not a string, or empty.
    """
    spec = ACTION_SPECS[action]
    if not isinstance(content, Mapping):
        raise ValidationError(action, spec.required[0])
    validated: dict[str, str] = {}
    for name in spec.required:
        value = content.get(name)
        if not isinstance(value, str) or not value:
            raise ValidationError(action, name)
        validated[name] = value
    return validated


def _payload_from(state: Any, options: Mapping[str, Any] | None) -> Any:
    if options and "content" in options:
        return options["content"]
    if isinstance(state, Mapping):
        return state.get("content")
    return getattr(state, "content", None)


def _conversation(action: str, request: str, reply: str) -> list[dict[str, Any]]:
    """One sample exchange in the host's {name, content} message shape."""
    return [
        {"name": "{{user}}", "content": {"text": request}},
        {"name": "{{agent}}", "content": {"text": reply, "actions": [action]}},
    ]


async def _report(callback: HandlerCallback | None, text: str, content: dict[str, Any]) -> None:
    if callback is None:
        return
    result = callback({"text": text, "content": content})
    if inspect.isawaitable(result):
        await result


@dataclass
class Action:
    """Registration record handed to the host framework."""

    name: str
    description: str
    similes: list[str]
    handler: Handler
    examples: list[list[dict[str, Any]]] = field(default_factory=list)

    async def validate(self, runtime: Any, message: Any) -> bool:
        # Payload checks happen in the handler; any message may trigger it.
        return True


class BrowserActions:
    """Builds action handlers bound to an injected service."""

    def __init__(self, service: PlaywrightService) -> None:
        self._service = service
        self._actions = {name: self._build(spec) for name, spec in ACTION_SPECS.items()}

    def __iter__(self):
        return iter(self._actions.values())

    def __getitem__(self, name: str) -> Action:
        return self._actions[name]

    @property
    def navigate(self) -> Action:
        return self._actions["NAVIGATE"]

    @property
    def click(self) -> Action:
        return self._actions["CLICK"]

    @property
    def type(self) -> Action:
        return self._actions["TYPE"]

    @property
    def select(self) -> Action:
        return self._actions["SELECT"]

    @property
    def screenshot(self) -> Action:
        return self._actions["SCREENSHOT"]

    def _build(self, spec: ActionSpec) -> Action:
        async def handler(
            runtime: Any,
            message: Any,
            state: Any,
            options: Mapping[str, Any] | None = None,
            callback: HandlerCallback | None = None,
        ) -> bool:
            return await self.run(spec.name, state, options, callback)

        handler.__name__ = f"{spec.name.lower()}_handler"
        return Action(
            name=spec.name,
            description=spec.description,
            similes=list(spec.similes),
            handler=handler,
            examples=[_conversation(spec.name, request, reply) for request, reply in spec.examples],
        )

    async def run(
        self,
        action: str,
        state: Any,
        options: Mapping[str, Any] | None = None,
        callback: HandlerCallback | None = None,
    ) -> bool:
        """Validate → invoke → report.  Returns True on success."""
        spec = ACTION_SPECS[action]
        try:
            payload = validate_payload(action, _payload_from(state, options))
        except ValidationError as exc:
            logger.info("Rejected browser action payload", action=action, field=exc.field)
            await _report(
                callback,
                f"Need a valid {exc.field}.",
                {"error": f"Invalid {action} content"},
            )
            return False

        try:
            await spec.run(self._service.get_client(), payload)
        except Exception as exc:
            message = str(exc) or type(exc).__name__
            logger.error("Browser action failed", action=action, error=message)
            await _report(callback, f"{spec.label} failed: {message}", {"error": message})
            return False

        await _report(callback, spec.summary(payload), {"success": True, **payload})
        return True

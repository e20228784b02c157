"""
Turns a raw model reply into either plain text or a structured command.

Plain text is the common case and not an error. A reply is treated as a
command only when, after stripping optional code fences, it parses as a JSON
object with an ``action`` key.
"""
import json
import re
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from ..enums import ActionType
from ..schemas.actions import ActionCommand, UnknownAction, action_command_adapter

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?\s*```$", re.DOTALL)

KNOWN_ACTIONS = {a.value for a in ActionType}


class InvalidActionPayload(Exception):
    """A catalog action whose data does not validate"""

    def __init__(self, action: str, error: ValidationError):
        self.action = action
        self.error = error
        super().__init__(f"Invalid data for {action}: {_summarize(error)}")


def _summarize(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"] if p not in ("data",))
        parts.append(f"{loc or 'payload'}: {err['msg']}")
    return "; ".join(parts)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` (or bare ```) fence if present."""
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def extract_action_payload(text: str) -> Optional[Dict[str, Any]]:
    """The reply as a JSON object with an action key, or None."""
    try:
        payload = json.loads(strip_code_fences(text))
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(payload, dict) or not payload.get("action"):
        return None
    return payload


def parse_action_reply(text: str) -> Union[ActionCommand, UnknownAction, str]:
    """
    Classify a model reply.

    Returns:
        A validated catalog command, an UnknownAction for names outside the
        catalog, or the original text when the reply is not an action.

    Raises:
        InvalidActionPayload: a catalog action whose data fails validation
    """
    payload = extract_action_payload(text)
    if payload is None:
        return text

    action = str(payload["action"])
    if action not in KNOWN_ACTIONS:
        response = payload.get("response")
        return UnknownAction(action=action, response=response if isinstance(response, str) else None)

    try:
        return action_command_adapter.validate_python(payload)
    except ValidationError as e:
        raise InvalidActionPayload(action, e) from e

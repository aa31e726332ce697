"""Helpers for time-locked, single-signature minting policy scripts.

The generated policy is the usual native script::

    {
      "type": "all",
      "scripts": [
        {"type": "before", "slot": <slot>},
        {"type": "sig", "keyHash": "<key hash>"}
      ]
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

from .errors import ParseError, ValidationError

DEFAULT_POLICY_LOCK_SLOTS = 10000


@dataclass(frozen=True)
class PolicyScript:
    slot: Optional[int]
    key_hash: Optional[str]


def build_policy_script(key_hash: str, before_slot: int) -> dict[str, Any]:
    """Return a policy that requires ``key_hash`` and expires at ``before_slot``."""

    if not key_hash:
        raise ValidationError("Policy script needs a key hash")
    if isinstance(before_slot, bool) or not isinstance(before_slot, int) or before_slot < 0:
        raise ValidationError(f"Policy slot must be a non-negative integer: {before_slot!r}")
    return {
        "type": "all",
        "scripts": [
            {"type": "before", "slot": before_slot},
            {"type": "sig", "keyHash": key_hash},
        ],
    }


def render_policy_script(key_hash: str, before_slot: int) -> str:
    return json.dumps(build_policy_script(key_hash, before_slot), indent=2)


def parse_policy_script(text: str) -> PolicyScript:
    """Extract the ``before`` slot and ``sig`` key hash from a policy document."""

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Policy script is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ParseError("Policy script must be a JSON object")
    scripts = payload.get("scripts") or []
    if not isinstance(scripts, list):
        raise ParseError("Policy script 'scripts' must be a list")

    slot: Optional[int] = None
    key_hash: Optional[str] = None
    for script in scripts:
        if not isinstance(script, dict):
            continue
        if script.get("type") == "before":
            slot = script.get("slot")
        elif script.get("type") == "sig":
            key_hash = script.get("keyHash")
    return PolicyScript(slot=slot, key_hash=key_hash)

"""Reader for Sphinx ``searchindex.js`` payloads.

Sphinx writes the index as ``Search.setIndex({...})``. Recent releases emit
strict JSON inside the call; older ones emit a JavaScript object literal
whose keys are left unquoted whenever they are plain identifiers, e.g.
``{docnames:["intro"],terms:{A:1,"abstract":[0,2]}}``.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict

from doclookup.errors import MalformedIndexError

LOGGER = logging.getLogger(__name__)

_CALL_PREFIX = "Search.setIndex("
_BARE_KEY_RE = re.compile(r"\s*([A-Za-z_$][A-Za-z0-9_$]*)\s*:")


def extract_payload(text: str) -> str:
    """Strip the ``Search.setIndex(...)`` wrapper if present."""
    payload = text.strip()
    if not payload.startswith(_CALL_PREFIX):
        return payload
    payload = payload[len(_CALL_PREFIX) :].rstrip().rstrip(";").rstrip()
    if not payload.endswith(")"):
        raise MalformedIndexError("Unterminated Search.setIndex( call")
    return payload[:-1]


def _string_end(payload: str, start: int) -> int:
    """Return the position just past the string literal opening at ``start``."""
    pos = start + 1
    length = len(payload)
    while pos < length:
        char = payload[pos]
        if char == "\\":
            pos += 2
            continue
        if char == '"':
            return pos + 1
        pos += 1
    raise MalformedIndexError(f"Unterminated string literal at offset {start}")


def quote_bare_keys(payload: str) -> str:
    """Rewrite a JavaScript object literal so that every key is a JSON string."""
    parts = []
    pos = 0
    length = len(payload)
    while pos < length:
        char = payload[pos]
        if char == '"':
            end = _string_end(payload, pos)
            parts.append(payload[pos:end])
            pos = end
            continue
        parts.append(char)
        pos += 1
        if char in "{,":
            match = _BARE_KEY_RE.match(payload, pos)
            if match:
                parts.append(f'"{match.group(1)}":')
                pos = match.end()
    return "".join(parts)


def loads(text: str) -> Dict[str, Any]:
    """Parse the text of a search index file into a raw mapping."""
    payload = extract_payload(text)
    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        LOGGER.debug("Index payload is not strict JSON, quoting bare keys")
        try:
            data = json.loads(quote_bare_keys(payload))
        except json.JSONDecodeError as exc:
            raise MalformedIndexError(f"Unable to parse search index: {exc}") from exc

    if not isinstance(data, dict):
        raise MalformedIndexError(
            f"Search index must be an object, got {type(data).__name__}"
        )
    return data


def decode(data: bytes) -> Dict[str, Any]:
    """Parse the raw bytes of a search index file."""
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise MalformedIndexError(f"Search index is not valid UTF-8: {exc}") from exc
    return loads(text)


def read_index_file(path: Path) -> Dict[str, Any]:
    """Read and parse a ``searchindex.js`` or JSON file."""
    return decode(Path(path).read_bytes())

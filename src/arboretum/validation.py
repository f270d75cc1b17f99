"""Decode and validate model output into a ParseResult.

The model is asked for JSON but nothing guarantees it complies, so every
response passes through this boundary before anything is laid out or
drawn. Validation is strict: missing fields are never filled in with
defaults, except for ``partsOfSpeech`` which is informational only.
"""

from __future__ import annotations

import json
from typing import Any

from arboretum.errors import (
    EmptyResponseError,
    InvalidJSONError,
    MalformedResponseError,
)
from arboretum.syntax import ParseResult, PartOfSpeech, Phrasal, SyntaxNode, Terminal

# Deepest node allowed below the root (root = 0).
MAX_TREE_DEPTH = 64


def decode_parse_result(text: str | None) -> ParseResult:
    """Decode a raw response body and validate it.

    Args:
        text: Response body from the model service.

    Returns:
        A validated ParseResult.

    Raises:
        EmptyResponseError: If the body is missing or blank.
        InvalidJSONError: If the body is not valid JSON.
        MalformedResponseError: If the JSON lacks the required shape.
    """
    if text is None or not text.strip():
        raise EmptyResponseError("The linguistic model returned an empty response.")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidJSONError(
            f"The model returned an invalid structure: {e.msg} "
            f"(line {e.lineno}, column {e.colno})"
        ) from e
    except (RecursionError, ValueError) as e:
        # Nesting too deep for the decoder, or numbers it cannot represent.
        raise InvalidJSONError(
            f"The model returned an invalid structure: {type(e).__name__}"
        ) from e

    return validate_parse_result(data)


def validate_parse_result(data: Any) -> ParseResult:
    """Validate decoded JSON and build a ParseResult.

    Raises:
        MalformedResponseError: If any required field is missing or invalid.
    """
    if not isinstance(data, dict):
        raise MalformedResponseError(
            f"expected a JSON object, got {type(data).__name__}"
        )
    if "tree" not in data:
        raise MalformedResponseError("missing required field 'tree'")
    if "explanation" not in data:
        raise MalformedResponseError("missing required field 'explanation'")

    explanation = data["explanation"]
    if not isinstance(explanation, str) or not explanation.strip():
        raise MalformedResponseError(
            "must be a non-empty string", path="explanation"
        )

    tree = _validate_node(data["tree"], "tree", 0)
    parts_of_speech = _validate_parts_of_speech(data.get("partsOfSpeech"))

    return ParseResult(
        tree=tree,
        explanation=explanation,
        parts_of_speech=parts_of_speech,
    )


def _validate_node(raw: Any, path: str, depth: int) -> SyntaxNode:
    if depth > MAX_TREE_DEPTH:
        raise MalformedResponseError(
            f"tree is deeper than {MAX_TREE_DEPTH} levels", path=path
        )
    if not isinstance(raw, dict):
        raise MalformedResponseError("node must be an object", path=path)

    label = raw.get("label")
    if not isinstance(label, str) or not label.strip():
        raise MalformedResponseError("node requires a non-empty label", path=path)

    word = raw.get("word")
    children = raw.get("children")
    has_children = children is not None and children != []

    if word is not None and has_children:
        raise MalformedResponseError(
            f"node {label!r} has both a word and children", path=path
        )

    if word is not None:
        if not isinstance(word, str) or not word:
            raise MalformedResponseError(
                f"node {label!r} has an invalid word", path=path
            )
        return Terminal(label=label, word=word)

    if not has_children:
        raise MalformedResponseError(
            f"node {label!r} has neither a word nor children", path=path
        )
    if not isinstance(children, list):
        raise MalformedResponseError(
            f"children of {label!r} must be a list", path=path
        )

    return Phrasal(
        label=label,
        children=tuple(
            _validate_node(child, f"{path}.children[{i}]", depth + 1)
            for i, child in enumerate(children)
        ),
    )


def _validate_parts_of_speech(raw: Any) -> tuple[PartOfSpeech, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise MalformedResponseError("must be a list", path="partsOfSpeech")

    items = []
    for i, entry in enumerate(raw):
        path = f"partsOfSpeech[{i}]"
        if not isinstance(entry, dict):
            raise MalformedResponseError("entry must be an object", path=path)
        word = entry.get("word")
        pos = entry.get("pos")
        if not isinstance(word, str) or not isinstance(pos, str):
            raise MalformedResponseError(
                "entry requires string 'word' and 'pos'", path=path
            )
        items.append(PartOfSpeech(word=word, pos=pos))
    return tuple(items)

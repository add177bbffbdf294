"""Restore original values into text that carries placeholder tokens."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, List

from pydantic import ValidationError

from ..errors import InvalidArgumentError
from ..schemas.redaction import Placeholder
from .primary import require_text


def coerce_placeholders(placeholders: Iterable[Any]) -> List[Placeholder]:
    """Accept Placeholder objects or their dict form; reject anything else."""
    if placeholders is None or isinstance(placeholders, (str, bytes)):
        raise InvalidArgumentError("'placeholders' must be a list of placeholders")

    coerced: List[Placeholder] = []
    for item in placeholders:
        if isinstance(item, Placeholder):
            coerced.append(item)
        elif isinstance(item, Mapping):
            try:
                coerced.append(Placeholder(**item))
            except ValidationError as e:
                raise InvalidArgumentError(f"Malformed placeholder {item!r}: {e}") from e
        else:
            raise InvalidArgumentError(
                f"Expected Placeholder, got {type(item).__name__}"
            )
    return coerced


def reinsert(text: str, placeholders: Iterable[Placeholder]) -> str:
    """Replace every placeholder token in text with its original value.

    Placeholders are applied by descending confidence (ties keep their
    order), and each id is replaced everywhere it occurs.
    """
    require_text(text, "text")
    ordered = sorted(coerce_placeholders(placeholders), key=lambda p: -p.confidence)

    result = text
    for placeholder in ordered:
        result = result.replace(placeholder.id, placeholder.original)
    return result


def restore(data: Any, placeholders: Iterable[Placeholder]) -> Any:
    """Reinsert original values throughout nested dicts, lists and strings."""
    placeholders = coerce_placeholders(placeholders)
    if not placeholders:
        return data
    return _restore_recursive(data, placeholders)


def _restore_recursive(data: Any, placeholders: List[Placeholder]) -> Any:
    if isinstance(data, str):
        return reinsert(data, placeholders)
    elif isinstance(data, dict):
        return {key: _restore_recursive(value, placeholders) for key, value in data.items()}
    elif isinstance(data, list):
        return [_restore_recursive(item, placeholders) for item in data]
    else:
        return data

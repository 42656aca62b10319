"""Conversion of arbitrary Python values into Open Telemetry attribute values.

Span attributes only accept `str`, `bool`, `int`, `float` and homogeneous
sequences of those. Everything else is encoded to a JSON string here, so that
callers can attach models, dicts or dates without worrying about the SDK
silently dropping them.
"""

import inspect
import json
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from opentelemetry.util.types import AttributeValue

PRIMITIVE_TYPES = (str, bool, int, float)

TRUNCATION_SUFFIX = '...[truncated]'


def _truncate(value: str, max_length: int) -> str:
    if len(value) > max_length:
        return value[:max_length] + TRUNCATION_SUFFIX
    return value


def _safe_str(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return f'<{type(value).__name__}>'


def _encode(value: Any, max_length: int) -> str:
    """Encode a value as JSON, falling back to its string representation."""
    try:
        if hasattr(value, 'model_dump_json'):
            result = value.model_dump_json()
        elif hasattr(value, 'model_dump'):
            result = json.dumps(value.model_dump(), default=str)
        else:
            result = json.dumps(value, default=str)
    except Exception:
        result = _safe_str(value)

    return _truncate(result, max_length)


def _homogeneous_sequence(value: Any) -> Optional[list]:
    if not isinstance(value, (list, tuple, set, frozenset)) or not value:
        return None

    items = list(value)
    first_type = type(items[0])

    if first_type not in PRIMITIVE_TYPES:
        return None
    if any(type(item) is not first_type for item in items):
        return None

    return sorted(items) if isinstance(value, (set, frozenset)) else items


def to_attribute_value(value: Any, max_length: int = 1000) -> Optional[AttributeValue]:
    """Convert a value into something a span accepts as attribute.

    Parameters
    ----------
    value : Any
        The value to convert.
    max_length : int, optional
        Maximum length of string values. Longer strings are truncated. Default 1000.

    Returns
    -------
    AttributeValue | None
        The converted value, or None when the value is None and should be dropped.
    """
    if value is None:
        return None

    if isinstance(value, Enum):
        value = value.value

    if isinstance(value, (datetime, date)):
        return value.isoformat()

    if isinstance(value, str):
        return _truncate(value, max_length)

    if isinstance(value, PRIMITIVE_TYPES):
        return value

    sequence = _homogeneous_sequence(value)
    if sequence is not None:
        if isinstance(sequence[0], str):
            return [_truncate(item, max_length) for item in sequence]
        return sequence

    return _encode(value, max_length)


def normalize_attributes(
    attributes: Optional[Mapping[str, Any]],
    prefix: Optional[str] = None,
    max_length: int = 1000,
) -> dict[str, AttributeValue]:
    """Flatten and convert a mapping into span attributes.

    Nested mappings become dotted keys and `None` values are dropped. A
    mapping nested inside itself is not followed again.

    Example
    -------
    >>> normalize_attributes({'order': {'id': 'o-1', 'coupon': None}}, prefix='shop')
    {'shop.order.id': 'o-1'}
    """
    normalized: dict[str, AttributeValue] = {}
    _flatten(attributes, prefix, max_length, normalized, set())
    return normalized


def _flatten(
    attributes: Optional[Mapping[str, Any]],
    prefix: Optional[str],
    max_length: int,
    normalized: dict[str, AttributeValue],
    seen: set[int],
) -> None:
    if not attributes or id(attributes) in seen:
        return

    seen.add(id(attributes))

    for key, value in attributes.items():
        full_key = f'{prefix}.{_safe_str(key)}' if prefix else _safe_str(key)

        if isinstance(value, Mapping):
            _flatten(value, full_key, max_length, normalized, seen)
            continue

        converted = to_attribute_value(value, max_length)
        if converted is not None:
            normalized[full_key] = converted

    seen.discard(id(attributes))


def serialize_args(
    func: Callable,
    args: tuple,
    kwargs: dict,
    exclude: Optional[set[str]] = None,
    max_length: int = 1000,
) -> dict[str, AttributeValue]:
    """Serialize the arguments of a call to `func` into span attributes.

    Arguments are keyed by parameter name, `arg.<name>`. Variadic parameters
    are expanded as `arg.<name>.<index>` and `arg.<name>.<key>`.
    """
    exclude = (exclude or set()) | {'self', 'cls'}
    attributes: dict[str, AttributeValue] = {}

    try:
        bound = inspect.signature(func).bind_partial(*args, **kwargs)
    except (TypeError, ValueError):
        for i, arg in enumerate(args):
            converted = to_attribute_value(arg, max_length)
            if converted is not None:
                attributes[f'arg.{i}'] = converted
        for key, value in kwargs.items():
            converted = to_attribute_value(value, max_length)
            if key not in exclude and converted is not None:
                attributes[f'arg.{key}'] = converted
        return attributes

    parameters = inspect.signature(func).parameters

    for name, value in bound.arguments.items():
        if name in exclude:
            continue

        kind = parameters[name].kind

        if kind is inspect.Parameter.VAR_POSITIONAL:
            expanded = {f'{name}.{i}': item for i, item in enumerate(value)}
        elif kind is inspect.Parameter.VAR_KEYWORD:
            expanded = {f'{name}.{key}': item for key, item in value.items()}
        else:
            expanded = {name: value}

        for key, item in expanded.items():
            converted = to_attribute_value(item, max_length)
            if converted is not None:
                attributes[f'arg.{key}'] = converted

    return attributes

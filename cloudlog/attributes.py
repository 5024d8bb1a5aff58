"""Structured attributes and the attribute tree they are merged into.

An :class:`Attr` is a key plus a value drawn from a closed set of shapes:
``bool``, ``int``, ``float``, ``str``, ``timedelta`` (duration),
``datetime`` (timestamp), :class:`Group` (or any ``Mapping``) for nested
attributes, and lazy values (:class:`Lazy` or any object with a
``log_value()`` method) that are resolved at render time. Values outside
that set render as their ``str()``.

:class:`AttributeTree` places attributes at a group path inside a nested
dict. Later insertions at the same fully-qualified key replace earlier
ones.
"""

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Callable, Protocol, runtime_checkable

logger = logging.getLogger("cloudlog.attributes")

# Upper bound on chained log_value() resolutions.
MAX_RESOLVE_DEPTH = 100

# Rendered in place of a group that contains itself.
CYCLE_MARKER = "!ERROR:cycle"


@dataclass(frozen=True)
class Attr:
    """A single key/value attribute."""

    key: str
    value: Any = None

    def is_empty(self) -> bool:
        """The zero attribute (no key, no value) is dropped everywhere."""
        return not self.key and self.value is None


class Group:
    """
    Ordered collection of attributes rendered as a nested object.

    Accepts positional :class:`Attr` instances followed by keyword
    attributes::

        Attr("request", Group(Attr("method", "GET"), status=200))
    """

    __slots__ = ("attrs",)

    def __init__(self, *attrs: Attr, **kwargs: Any):
        self.attrs: tuple[Attr, ...] = tuple(attrs) + tuple(
            Attr(k, v) for k, v in kwargs.items()
        )

    def __iter__(self):
        return iter(self.attrs)

    def __len__(self) -> int:
        return len(self.attrs)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Group) and self.attrs == other.attrs

    def __hash__(self) -> int:
        return hash(self.attrs)

    def __repr__(self) -> str:
        return f"Group{self.attrs!r}"


def group(key: str, *attrs: Attr, **kwargs: Any) -> Attr:
    """Shorthand for ``Attr(key, Group(*attrs, **kwargs))``."""
    return Attr(key, Group(*attrs, **kwargs))


@runtime_checkable
class LogValuer(Protocol):
    """Objects that compute their logged value on demand."""

    def log_value(self) -> Any: ...


class Lazy:
    """Wrap a zero-argument callable so it is only evaluated when rendered."""

    __slots__ = ("_fn",)

    def __init__(self, fn: Callable[[], Any]):
        self._fn = fn

    def log_value(self) -> Any:
        return self._fn()

    def __repr__(self) -> str:
        return f"Lazy({self._fn!r})"


def to_attrs(items: Mapping[str, Any] | Iterable[Attr] | None = None, /, **kwargs: Any) -> tuple[Attr, ...]:
    """Normalize a mapping, an iterable of ``Attr`` and/or keywords into a tuple."""
    attrs: list[Attr] = []
    if isinstance(items, Mapping):
        attrs.extend(Attr(str(k), v) for k, v in items.items())
    elif items is not None:
        for item in items:
            if not isinstance(item, Attr):
                raise TypeError(f"expected Attr, got {type(item).__name__}")
            attrs.append(item)
    attrs.extend(Attr(k, v) for k, v in kwargs.items())
    return tuple(attrs)


# =============================================================================
# Value conversion
# =============================================================================


def format_duration(value: timedelta) -> str:
    """
    Render a duration the way Go's ``time.Duration`` prints.

    Examples: ``0s``, ``250µs``, ``1.5ms``, ``1.5s``, ``1m30s``, ``2h0m0s``.
    """
    micros = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    if micros == 0:
        return "0s"

    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    if micros < 1_000:
        return f"{sign}{micros}µs"
    if micros < 1_000_000:
        return f"{sign}{_decimal(micros, 1_000, 3)}ms"

    hours, rest = divmod(micros, 3_600_000_000)
    minutes, rest = divmod(rest, 60_000_000)
    seconds = _decimal(rest, 1_000_000, 6)
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"


def _decimal(value: int, unit: int, digits: int) -> str:
    whole, frac = divmod(value, unit)
    if not frac:
        return str(whole)
    return f"{whole}." + f"{frac:0{digits}d}".rstrip("0")


def format_time(value: datetime) -> str:
    """
    Render a datetime as RFC 3339 with trailing fractional zeros trimmed.

    Naive datetimes are taken to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)

    text = value.strftime("%Y-%m-%dT%H:%M:%S")
    frac = f"{value.microsecond:06d}".rstrip("0")
    if frac:
        text += "." + frac
    return text + _format_offset(value.utcoffset())


def format_time_ns(timestamp_ns: int) -> str:
    """Render a Unix timestamp in nanoseconds as RFC 3339 (UTC, ``Z`` suffix)."""
    seconds, nanos = divmod(timestamp_ns, 1_000_000_000)
    text = datetime.fromtimestamp(seconds, tz=UTC).strftime("%Y-%m-%dT%H:%M:%S")
    frac = f"{nanos:09d}".rstrip("0")
    if frac:
        text += "." + frac
    return text + "Z"


def _format_offset(offset: timedelta | None) -> str:
    if not offset:
        return "Z"
    total = int(offset.total_seconds()) // 60
    sign = "+" if total >= 0 else "-"
    hours, minutes = divmod(abs(total), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def resolve(value: Any) -> Any:
    """Resolve lazy values until a concrete value is reached."""
    for _ in range(MAX_RESOLVE_DEPTH):
        if not isinstance(value, LogValuer):
            return value
        try:
            value = value.log_value()
        except Exception as e:
            logger.debug("log_value() failed", exc_info=True)
            return f"!ERROR:{type(e).__name__}: {e}"
    return f"!ERROR:log_value() resolved more than {MAX_RESOLVE_DEPTH} times"


def convert_value(value: Any) -> Any:
    """Convert an attribute value into a JSON-ready Python value."""
    return _convert(value, frozenset())


def _convert(value: Any, active: frozenset[int]) -> Any:
    # ``active`` holds the ids of the groups being converted on the current path.
    value = resolve(value)

    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        if math.isfinite(value):
            return value
        # JSON has no NaN/Infinity literals
        return "NaN" if math.isnan(value) else ("+Inf" if value > 0 else "-Inf")
    if isinstance(value, str):
        return value
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, datetime):
        return format_time(value)
    if isinstance(value, (Group, Mapping)):
        if id(value) in active:
            return CYCLE_MARKER
        node: dict[str, Any] = {}
        _put_all(node, _group_attrs(value), active | {id(value)})
        return node

    try:
        return str(value)
    except Exception:
        logger.debug("str() failed for %s", type(value).__name__, exc_info=True)
        return object.__repr__(value)


def _group_attrs(value: "Group | Mapping[Any, Any]") -> Iterable[Attr]:
    if isinstance(value, Group):
        return value.attrs
    return (Attr(str(k), v) for k, v in value.items())


def _put_all(node: dict[str, Any], attrs: Iterable[Attr], active: frozenset[int]) -> None:
    for attr in attrs:
        if attr.is_empty():
            continue
        value = resolve(attr.value)
        if not attr.key and isinstance(value, (Group, Mapping)):
            # A group with an empty key is inlined into its parent.
            if id(value) in active:
                continue
            _put_all(node, _group_attrs(value), active | {id(value)})
            continue
        node[attr.key] = _convert(value, active)


# =============================================================================
# Attribute tree
# =============================================================================


class AttributeTree:
    """
    Nested dict of rendered attributes built up by group path.

    ``insert(("a", "b"), attrs)`` places each attribute under
    ``tree["a"]["b"]``. Group names that collide with an existing
    non-object value replace that value with a fresh object. Groups are
    only created once something is actually placed in them.
    """

    def __init__(self) -> None:
        self._root: dict[str, Any] = {}

    def insert(self, path: Sequence[str], attrs: Iterable[Attr]) -> None:
        rendered: dict[str, Any] = {}
        _put_all(rendered, attrs, frozenset())
        if not rendered:
            return
        self._scope(path).update(rendered)

    def _scope(self, path: Sequence[str]) -> dict[str, Any]:
        node = self._root
        for name in path:
            child = node.get(name)
            if not isinstance(child, dict):
                child = {}
                node[name] = child
            node = child
        return node

    def as_dict(self) -> dict[str, Any]:
        return self._root

    def __bool__(self) -> bool:
        return bool(self._root)


def merge(group_path: Sequence[str], attrs: Iterable[Attr]) -> dict[str, Any]:
    """Place ``attrs`` in order at ``group_path`` of an empty tree."""
    tree = AttributeTree()
    tree.insert(group_path, attrs)
    return tree.as_dict()

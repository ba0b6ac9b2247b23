from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple, Union

from sinroute.exceptions import ConfigurationError

DEFAULT_ROUTE = "__default"

_EXTENDED_KEYS = {"functions", "has_children", "disabled"}


@dataclass(frozen=True)
class Shorthand:
    """Route written as a plain list of handlers."""
    handlers: Tuple[Callable, ...]

    @property
    def has_children(self) -> bool:
        return False

    @property
    def disabled(self) -> bool:
        return False


@dataclass(frozen=True)
class Extended:
    """
    Route written as a record.

    has_children marks a route whose page hosts its own nested Router; its
    handlers are skipped when the same path is visited twice in a row.
    disabled routes never match.
    """
    handlers: Tuple[Callable, ...]
    has_children: bool = False
    disabled: bool = False


RouteEntry = Union[Shorthand, Extended]


def _compile_handlers(key: str, handlers: Any) -> Tuple[Callable, ...]:
    if not isinstance(handlers, (list, tuple)):
        raise ConfigurationError(key, f"handlers must be a list of callables, got {type(handlers).__name__}")
    for index, handler in enumerate(handlers):
        if not callable(handler):
            raise ConfigurationError(key, f"handler at position {index} is not callable")
    return tuple(handlers)


def compile_route_entry(key: str, value: Any) -> RouteEntry:
    """Turn a raw route table value into a Shorthand or Extended entry."""
    if isinstance(value, (Shorthand, Extended)):
        _compile_handlers(key, value.handlers)
        return value

    if isinstance(value, (list, tuple)):
        return Shorthand(_compile_handlers(key, value))

    if isinstance(value, Mapping):
        unknown = set(value) - _EXTENDED_KEYS
        if unknown:
            raise ConfigurationError(key, f"unknown option(s) {', '.join(sorted(map(str, unknown)))}")
        if "functions" not in value:
            raise ConfigurationError(key, "'functions' is required")

        has_children = value.get("has_children", False)
        disabled = value.get("disabled", False)
        for option, flag in (("has_children", has_children), ("disabled", disabled)):
            if not isinstance(flag, bool):
                raise ConfigurationError(key, f"'{option}' must be a boolean")

        return Extended(_compile_handlers(key, value["functions"]), has_children=has_children, disabled=disabled)

    raise ConfigurationError(key, f"expected a list of handlers or a route record, got {type(value).__name__}")


class RouteTable:
    """Ordered pattern -> entry bindings. Declaration order decides which route wins."""

    def __init__(self, routes: Mapping[str, Any]):
        if not isinstance(routes, Mapping):
            raise ConfigurationError("<table>", f"routes must be a mapping, got {type(routes).__name__}")

        self._entries: Dict[str, RouteEntry] = {}
        self._default: Optional[RouteEntry] = None

        for key, value in routes.items():
            if not isinstance(key, str):
                raise ConfigurationError(key, "route keys must be strings")
            entry = compile_route_entry(key, value)
            if key == DEFAULT_ROUTE:
                self._default = entry
            else:
                self._entries[key] = entry

    @property
    def default(self) -> Optional[RouteEntry]:
        return self._default

    def items(self) -> Iterator[Tuple[str, RouteEntry]]:
        return iter(self._entries.items())

    def __getitem__(self, key: str) -> RouteEntry:
        if key == DEFAULT_ROUTE and self._default is not None:
            return self._default
        return self._entries[key]

    def __contains__(self, key) -> bool:
        if key == DEFAULT_ROUTE:
            return self._default is not None
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries) + (1 if self._default is not None else 0)

    def __repr__(self) -> str:
        keys = list(self._entries)
        if self._default is not None:
            keys.append(DEFAULT_ROUTE)
        return f"RouteTable({keys})"


def compile_routes(routes: Union[RouteTable, Mapping[str, Any]]) -> RouteTable:
    if isinstance(routes, RouteTable):
        return routes
    return RouteTable(routes)

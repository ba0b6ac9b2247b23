import urllib.parse
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sinroute.routes import DEFAULT_ROUTE, RouteEntry, RouteTable


@dataclass(frozen=True)
class RouteMatch:
    key: str
    entry: RouteEntry
    params: Dict[str, Optional[str]] = field(default_factory=dict)
    has_children: bool = False


def _segments_match(pattern_parts: List[str], path_parts: List[str]) -> bool:
    for index, segment in enumerate(pattern_parts):
        current = path_parts[index] if index < len(path_parts) else None

        if segment.startswith(':') or segment == '*':
            # match anything in this part
            continue
        if segment == '**':
            # match anything in this part and every part coming next
            return True
        if segment != current:
            return False
    return True


def extract_params(pattern: str, path: str) -> Dict[str, Optional[str]]:
    """Bind every ':name' segment of pattern to the path segment at the same position."""
    params = {}
    path_parts = path.split('/')
    for index, segment in enumerate(pattern.split('/')):
        if segment.startswith(':'):
            value = path_parts[index] if index < len(path_parts) else None
            params[segment[1:]] = value or None
    return params


def parse_query(location: str) -> Dict[str, str]:
    """Parse the query part of a full location into a flat dict. Repeated keys: last one wins."""
    if '?' not in location:
        return {}

    query_string = location[location.index('?') + 1:]
    query_string = query_string.split('#', 1)[0]
    return dict(urllib.parse.parse_qsl(query_string, keep_blank_values=True))


def match_route(path: str, routes: RouteTable, base: str = "", is_sub_router: bool = False) -> Optional[RouteMatch]:
    """
    Find the first route (in declaration order) whose pattern accepts path.

    Segment counts must agree unless the route has children, in which case a
    longer path belonging to the nested router still matches. Returns None
    when nothing matches and no default applies.
    """
    path_parts = path.split('/')

    for key, entry in routes.items():
        if entry.disabled:
            continue

        pattern = base + key
        pattern_parts = pattern.split('/')

        # skip routes with different length
        if len(pattern_parts) != len(path_parts) and not entry.has_children:
            continue

        if _segments_match(pattern_parts, path_parts):
            return RouteMatch(key, entry, extract_params(pattern, path), entry.has_children)

    # a sub router's default must not fire while its parent region is inactive
    if routes.default is not None and (not is_sub_router or base in path):
        return RouteMatch(DEFAULT_ROUTE, routes.default)

    return None

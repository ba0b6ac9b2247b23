import urllib.parse
from typing import Any, Callable, Dict, List, Optional

POP_NAVIGATION = "pop"
FRAGMENT_CHANGE = "fragment"
PROGRAMMATIC_NAVIGATION = "programmatic"


class NavigationAdapter:
    """
    Boundary between a Router and the host page.

    The adapter owns the location and its navigation signals. Routers
    subscribe to the three signal sources (back/forward, fragment change and
    programmatic push/replace) and never touch host primitives themselves, so
    any number of routers can share one adapter.

    Subclasses implement current_path, current_full_location, push, replace
    and intercept_link. push and replace must change the location first and
    then call self._dispatch(PROGRAMMATIC_NAVIGATION) before returning.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Callable]] = {
            POP_NAVIGATION: [],
            FRAGMENT_CHANGE: [],
            PROGRAMMATIC_NAVIGATION: [],
        }

    def current_path(self) -> str:
        raise NotImplementedError

    def current_full_location(self) -> str:
        raise NotImplementedError

    def push(self, path: str) -> List[Any]:
        raise NotImplementedError

    def replace(self, path: str) -> List[Any]:
        raise NotImplementedError

    def intercept_link(self, element: Any, on_navigate: Callable[[str], Any]) -> Callable[[], None]:
        """Make clicks on element call on_navigate(target) instead of following the link. Returns an unbind callable."""
        raise NotImplementedError

    def on_pop_navigation(self, callback: Callable) -> Callable[[], None]:
        return self._subscribe(POP_NAVIGATION, callback)

    def on_fragment_change(self, callback: Callable) -> Callable[[], None]:
        return self._subscribe(FRAGMENT_CHANGE, callback)

    def on_programmatic_navigation(self, callback: Callable) -> Callable[[], None]:
        return self._subscribe(PROGRAMMATIC_NAVIGATION, callback)

    def listener_count(self, kind: Optional[str] = None) -> int:
        if kind is not None:
            return len(self._listeners[kind])
        return sum(len(listeners) for listeners in self._listeners.values())

    def _subscribe(self, kind: str, callback: Callable) -> Callable[[], None]:
        self._listeners[kind].append(callback)

        def unsubscribe():
            if callback in self._listeners[kind]:
                self._listeners[kind].remove(callback)

        return unsubscribe

    def _dispatch(self, kind: str, event: Any = None) -> List[Any]:
        # snapshot, listeners may unsubscribe while being notified
        return [callback(event) for callback in list(self._listeners[kind])]


class MemoryNavigationAdapter(NavigationAdapter):
    """
    Navigation adapter that keeps the location in memory.

    Behaves like a browser tab's session history: push drops forward
    entries, back/forward move through the stack and fire pop signals.
    Useful outside the browser and in tests.
    """

    def __init__(self, initial: str = "/"):
        super().__init__()
        self._entries: List[str] = [initial]
        self._index = 0
        self.prevented_clicks: List[str] = []
        self.followed_links: List[str] = []
        self._links: Dict[int, Callable[[str], Any]] = {}

    @property
    def location(self) -> str:
        return self._entries[self._index]

    @property
    def entries(self) -> List[str]:
        return list(self._entries)

    def current_path(self) -> str:
        return urllib.parse.urlsplit(self.location).path

    def current_full_location(self) -> str:
        return self.location

    def _resolve(self, path: str) -> str:
        # fragment-only and query-only targets keep the current path, like a browser does
        if path.startswith('#'):
            return self.location.split('#', 1)[0] + path
        if path.startswith('?'):
            return self.current_path() + path
        return path

    def push(self, path: str) -> List[Any]:
        del self._entries[self._index + 1:]
        self._entries.append(self._resolve(path))
        self._index += 1
        return self._dispatch(PROGRAMMATIC_NAVIGATION)

    def replace(self, path: str) -> List[Any]:
        self._entries[self._index] = self._resolve(path)
        return self._dispatch(PROGRAMMATIC_NAVIGATION)

    def back(self) -> List[Any]:
        if self._index == 0:
            return []
        self._index -= 1
        return self._dispatch(POP_NAVIGATION)

    def forward(self) -> List[Any]:
        if self._index >= len(self._entries) - 1:
            return []
        self._index += 1
        return self._dispatch(POP_NAVIGATION)

    def set_fragment(self, fragment: str) -> List[Any]:
        """Change only the #fragment of the current entry, like following an in-page anchor."""
        base = self.location.split('#', 1)[0]
        del self._entries[self._index + 1:]
        self._entries.append(f"{base}#{fragment.lstrip('#')}")
        self._index += 1
        return self._dispatch(FRAGMENT_CHANGE)

    def intercept_link(self, element: Any, on_navigate: Callable[[str], Any]) -> Callable[[], None]:
        self._links[id(element)] = on_navigate

        def unbind():
            self._links.pop(id(element), None)

        return unbind

    def click(self, element: Any) -> Any:
        """
        Simulate a click on a link element (anything with an href attribute, or the href string itself).

        Returns whatever the bound navigation callback returned. A click on an
        element that is not intercepted would reload the page, it is only
        recorded in followed_links.
        """
        href = element if isinstance(element, str) else getattr(element, "href")
        on_navigate = self._links.get(id(element))
        if on_navigate is None:
            self.followed_links.append(href)
            return None

        self.prevented_clicks.append(href)
        return on_navigate(href)

from typing import Any, Callable, List

from js import window, console
from pyodide.ffi import create_proxy

from sinroute.adapter import (
    FRAGMENT_CHANGE,
    POP_NAVIGATION,
    PROGRAMMATIC_NAVIGATION,
    NavigationAdapter,
)


class BrowserNavigationAdapter(NavigationAdapter):
    """
    Navigation adapter bound to the page's window.

    Listens to popstate and hashchange once for every router that uses it
    and performs programmatic navigation through the History API, so routers
    never patch window.history themselves.
    """

    _instance = None

    def __init__(self):
        super().__init__()
        self._pop_proxy = create_proxy(self._handle_popstate)
        self._hash_proxy = create_proxy(self._handle_hashchange)
        window.addEventListener("popstate", self._pop_proxy)
        window.addEventListener("hashchange", self._hash_proxy)
        self._closed = False

    @staticmethod
    def shared() -> "BrowserNavigationAdapter":
        if BrowserNavigationAdapter._instance is None or BrowserNavigationAdapter._instance._closed:
            BrowserNavigationAdapter._instance = BrowserNavigationAdapter()
        return BrowserNavigationAdapter._instance

    def current_path(self) -> str:
        return window.location.pathname

    def current_full_location(self) -> str:
        return window.location.href

    def _handle_popstate(self, event) -> None:
        self._dispatch(POP_NAVIGATION, event)

    def _handle_hashchange(self, event) -> None:
        self._dispatch(FRAGMENT_CHANGE, event)

    def push(self, path: str) -> List[Any]:
        window.history.pushState(None, "", path)
        return self._dispatch(PROGRAMMATIC_NAVIGATION)

    def replace(self, path: str) -> List[Any]:
        window.history.replaceState(None, "", path)
        return self._dispatch(PROGRAMMATIC_NAVIGATION)

    def intercept_link(self, element: Any, on_navigate: Callable[[str], Any]) -> Callable[[], None]:
        path = element.getAttribute("href")
        if not path:
            console.warn("Link element has no href, clicks will not be intercepted")

        def handler(event):
            event.preventDefault()
            on_navigate(path)

        onclick_proxy = create_proxy(handler)
        element.addEventListener("click", onclick_proxy)

        def unbind():
            element.removeEventListener("click", onclick_proxy)
            onclick_proxy.destroy()

        return unbind

    def close(self) -> None:
        """Remove the window listeners. Routers still subscribed stop receiving signals."""
        if self._closed:
            return
        window.removeEventListener("popstate", self._pop_proxy)
        window.removeEventListener("hashchange", self._hash_proxy)
        self._pop_proxy.destroy()
        self._hash_proxy.destroy()
        self._closed = True


def navigate(path: str) -> List[Any]:
    """Push path on the shared browser adapter; every router listening to it re-matches."""
    return BrowserNavigationAdapter.shared().push(path)


def sinlink(element) -> Callable[[], None]:
    """Turn an anchor element into a client-side link that goes through navigate()."""
    return BrowserNavigationAdapter.shared().intercept_link(element, navigate)

from typing import Any, Callable, List, Tuple

from sinroute.context import ActiveRouteContext
from sinroute.exceptions import global_error_handler


class Store:
    """
    A writable value that notifies subscribers when it changes.

    Read it by calling it: store(). Subscribers are called with the current
    value right away and then after every change.
    """

    def __init__(self, initial_value: Any = None):
        self._value = initial_value
        self._subscribers: List[Callable[[Any], None]] = []

    def __call__(self) -> Any:
        return self._value

    def set(self, new_value: Any) -> None:
        previous_value = self._value
        self._value = new_value

        # Only notify if the value has actually changed
        if previous_value != new_value:
            for subscriber in list(self._subscribers):
                try:
                    subscriber(new_value)
                except Exception as e:
                    global_error_handler(e, "Error notifying store subscriber")

    def subscribe(self, subscriber: Callable[[Any], None]) -> Callable[[], None]:
        self._subscribers.append(subscriber)
        subscriber(self._value)

        def unsubscribe():
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe


def create_store(initial_value: Any = None) -> Tuple[Store, Callable[[Any], None]]:
    store = Store(initial_value)
    return store, store.set


router_params, set_router_params = create_store(None)


def get_router_params() -> ActiveRouteContext:
    return router_params()


def publish_route_params(context: ActiveRouteContext, proceed: Callable[[], None]) -> None:
    """Route handler that shares the matched route with the rest of the app. Use it as a global pre function."""
    set_router_params(context)
    proceed()

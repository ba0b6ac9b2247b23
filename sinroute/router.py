import asyncio
from typing import Any, Callable, List, Mapping, Optional, Set, Union

from js import console

from sinroute.adapter import NavigationAdapter
from sinroute.chain import assemble_chain, run_chain
from sinroute.context import ActiveRouteContext, RouterConfig
from sinroute.exceptions import report_task_failure
from sinroute.history import HistoryLog
from sinroute import matcher
from sinroute.routes import RouteTable, compile_routes


class Router:
    """
    Matches the current location against a route table and runs the
    matching handler chain on every navigation.

    Routes map a pattern to either a list of handlers or a record::

        {
            '/path/to': {
                'functions': [handler, ...],
                'has_children': True,
                'disabled': False,
            },
            '/other-path': [handler, ...],
            '__default': [not_found],
        }

    Every handler is called as handler(context, proceed) and must call
    proceed() once to let the next handler run. The chain is
    global_pre_functions + route handlers + global_post_functions.

    has_children marks a route whose page contains another Router (created
    with is_sub_router=True and a base). Its handlers do not run again when
    the exact same path is visited twice in a row. Only identical paths count:
    going from /example/sub-page1 to /example/sub-page2 runs them again.

    Navigations are not serialized. When a new navigation arrives while a
    slow handler is still pending, both chains keep running; handlers that
    must not act on an outdated route can check router.is_current(context).
    """

    def __init__(self, routes: Union[RouteTable, Mapping[str, Any]], base: str = "",
                 global_pre_functions: Optional[List[Callable]] = None,
                 global_post_functions: Optional[List[Callable]] = None,
                 is_sub_router: bool = False,
                 navigation: Optional[NavigationAdapter] = None,
                 handler_timeout: Optional[float] = None):

        self.config = RouterConfig(
            routes=compile_routes(routes),
            base=base,
            global_pre_functions=tuple(global_pre_functions or ()),
            global_post_functions=tuple(global_post_functions or ()),
            is_sub_router=is_sub_router,
            handler_timeout=handler_timeout,
        )

        if navigation is None:
            from sinroute.browser import BrowserNavigationAdapter
            navigation = BrowserNavigationAdapter.shared()
        self.navigation = navigation

        self.history = HistoryLog()
        self.active_route: Optional[ActiveRouteContext] = None
        self.generation = 0

        self._cycles: Set[asyncio.Task] = set()
        self._last_cycle: Optional[asyncio.Task] = None
        self._navigating = False
        self._unsubscribers: List[Callable[[], None]] = []
        self._link_unbinders: List[Callable[[], None]] = []

        self.start()

    @property
    def routes(self) -> RouteTable:
        return self.config.routes

    @property
    def base(self) -> str:
        return self.config.base

    @property
    def is_sub_router(self) -> bool:
        return self.config.is_sub_router

    @property
    def running(self) -> bool:
        return bool(self._unsubscribers)

    def start(self) -> None:
        """Subscribe to navigation signals and match the current location."""
        if self.running:
            return

        self._unsubscribers = [
            self.navigation.on_pop_navigation(self.handle_path_change),
            self.navigation.on_fragment_change(self.handle_path_change),
            self.navigation.on_programmatic_navigation(self.handle_path_change),
        ]
        self.handle_path_change()

    def stop(self) -> None:
        """Unsubscribe from the navigation adapter and release intercepted links."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

        for unbind in self._link_unbinders:
            unbind()
        self._link_unbinders = []

    async def __aenter__(self) -> "Router":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def handle_path_change(self, event=None) -> asyncio.Task:
        """
        Start a match cycle for the current location. Called by the navigation adapter.

        Handler errors are reported through global_error_handler, except for
        the cycle a navigate() call on this router is waiting for: that one
        raises into navigate().
        """
        cycle = self._begin_cycle()
        if not self._navigating:
            cycle.add_done_callback(report_task_failure)
        return cycle

    def _begin_cycle(self) -> asyncio.Task:
        cycle = asyncio.ensure_future(self.match_route())
        self._cycles.add(cycle)
        cycle.add_done_callback(self._cycles.discard)
        self._last_cycle = cycle
        return cycle

    async def match_route(self) -> bool:
        """
        Run one navigation cycle. Returns True when a handler chain ran.

        The path is logged in history on every cycle, matched or not. When no
        route applies the active route is left as it was.
        """
        path = self.navigation.current_path()
        config = self.config

        match = matcher.match_route(path, config.routes, config.base, config.is_sub_router)
        suppress = match is not None and self.history.should_suppress(match.has_children, path)
        self.history.append(path)

        if match is None:
            console.warn(f"No route matched for path: {path}")
            return False

        self.generation += 1
        context = ActiveRouteContext(
            path=path,
            path_parts=tuple(path[1:].split('/')),
            params=match.params,
            query=matcher.parse_query(self.navigation.current_full_location()),
            previous_path=self.history.previous,
            generation=self.generation,
        )
        self.active_route = context

        if suppress:
            return False

        handlers = assemble_chain(config.global_pre_functions, match.entry.handlers, config.global_post_functions)
        await run_chain(handlers, context, timeout=config.handler_timeout)
        return True

    def is_current(self, context: ActiveRouteContext) -> bool:
        """Whether context belongs to the latest matched navigation of this router."""
        return context.generation == self.generation

    async def navigate(self, path: str, replace: bool = False) -> bool:
        """
        Change the location to path and wait for this router's handler chain.

        Returns True when handlers ran, False when nothing matched or the
        route was suppressed. Handler errors are raised here.
        """
        self._last_cycle = None
        self._navigating = True
        try:
            if replace:
                self.navigation.replace(path)
            else:
                self.navigation.push(path)
        finally:
            self._navigating = False

        cycle = self._last_cycle
        if cycle is None:
            # not subscribed (stopped router), match anyway
            cycle = self._begin_cycle()
        return await cycle

    def link(self, element) -> Callable[[], None]:
        """Route clicks on an anchor element through navigate() instead of reloading the page."""
        def follow(path: str) -> asyncio.Task:
            task = asyncio.ensure_future(self.navigate(path))
            task.add_done_callback(report_task_failure)
            return task

        unbind = self.navigation.intercept_link(element, follow)
        self._link_unbinders.append(unbind)
        return unbind

    async def wait_idle(self) -> None:
        """Wait until every navigation cycle started so far has finished."""
        while self._cycles:
            await asyncio.gather(*list(self._cycles))

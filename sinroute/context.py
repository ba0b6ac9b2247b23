from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from sinroute.routes import RouteTable


@dataclass(frozen=True)
class ActiveRouteContext:
    """
    What handlers see for one navigation.

    A new context is built on every matched navigation; the router never
    mutates an existing one. generation increases with every context a router
    builds, so a handler can tell whether a newer navigation has happened
    since it was started (see Router.is_current).
    """
    path: str
    path_parts: Tuple[str, ...]
    params: Dict[str, Optional[str]] = field(default_factory=dict)
    query: Dict[str, str] = field(default_factory=dict)
    previous_path: Optional[str] = None
    generation: int = 0


@dataclass(frozen=True)
class RouterConfig:
    routes: RouteTable
    base: str = ""
    global_pre_functions: Tuple[Callable, ...] = ()
    global_post_functions: Tuple[Callable, ...] = ()
    is_sub_router: bool = False
    # seconds a handler may take before calling proceed(); None waits forever
    handler_timeout: Optional[float] = None

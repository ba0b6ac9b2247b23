from .exceptions import ConfigurationError, HandlerTimeoutError, RouterError
from .routes import DEFAULT_ROUTE, Extended, RouteTable, Shorthand, compile_routes
from .context import ActiveRouteContext, RouterConfig
from .adapter import MemoryNavigationAdapter, NavigationAdapter
from .router import Router
from .store import create_store, get_router_params, publish_route_params, router_params, set_router_params

__version__ = "0.1.0"

get_version = lambda: __version__

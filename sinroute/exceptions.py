from js import console


class RouterError(Exception):
    """Base exception for routing errors."""
    pass


class ConfigurationError(RouterError):
    """Raised when a route table entry cannot be understood."""

    def __init__(self, route_key, reason):
        self.route_key = route_key
        self.reason = reason
        super().__init__(f"Invalid route '{route_key}': {reason}")


class HandlerTimeoutError(RouterError):
    """Raised when a handler does not call proceed() within the configured timeout."""

    def __init__(self, handler, timeout):
        self.handler = handler
        self.timeout = timeout
        name = getattr(handler, "__name__", repr(handler))
        super().__init__(f"Handler '{name}' did not proceed within {timeout}s")


def global_error_handler(error: Exception, description: str = None):
    import traceback
    traceback.print_exception(type(error), error, error.__traceback__)
    prefix = f"{description}: " if description else ""
    console.error(f"%c {prefix}{error.__class__.__name__}: {str(error)}", "color: #7b110a; font-family:sans-serif; font-size: 18px")


def report_task_failure(task) -> None:
    """Done-callback for navigation tasks whose errors have no caller to raise into."""
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        global_error_handler(error, "Navigation failed")

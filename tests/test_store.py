import unittest
import sys
from unittest.mock import MagicMock, patch

# Mock browser-specific modules
sys.modules['js'] = MagicMock()
sys.modules['pyodide'] = MagicMock()
sys.modules['pyodide.ffi'] = MagicMock()

import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../')))

from sinroute.adapter import MemoryNavigationAdapter
from sinroute.router import Router
from sinroute.store import (
    create_store,
    get_router_params,
    publish_route_params,
    set_router_params,
)


class TestStore(unittest.TestCase):
    def test_read_and_write(self):
        count, set_count = create_store(0)
        self.assertEqual(count(), 0)
        set_count(3)
        self.assertEqual(count(), 3)

    def test_subscribers_get_current_value_then_changes(self):
        theme, set_theme = create_store("light")
        seen = []
        theme.subscribe(seen.append)

        set_theme("dark")
        set_theme("dark")
        self.assertEqual(seen, ["light", "dark"])

    def test_unsubscribe(self):
        theme, set_theme = create_store("light")
        seen = []
        unsubscribe = theme.subscribe(seen.append)
        unsubscribe()

        set_theme("dark")
        self.assertEqual(seen, ["light"])

    def test_failing_subscriber_does_not_block_others(self):
        value, set_value = create_store(None)
        seen = []

        def broken(new_value):
            if new_value is not None:
                raise ValueError("boom")

        value.subscribe(broken)
        value.subscribe(seen.append)

        with patch('sinroute.store.global_error_handler') as error_handler:
            set_value(1)

        error_handler.assert_called_once()
        self.assertEqual(seen, [None, 1])


class TestRouterParamsStore(unittest.IsolatedAsyncioTestCase):
    async def asyncTearDown(self):
        set_router_params(None)

    async def test_publish_route_params_as_global_pre_function(self):
        seen = []
        router = Router(
            {"/users/:id": [lambda context, proceed: seen.append(get_router_params()) or proceed()]},
            global_pre_functions=[publish_route_params],
            navigation=MemoryNavigationAdapter("/users/7"),
        )
        await router.wait_idle()

        self.assertEqual(get_router_params().params, {"id": "7"})
        self.assertIs(seen[0], router.active_route)
        router.stop()


if __name__ == '__main__':
    unittest.main()

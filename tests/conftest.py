pytest_plugins = ["staybook.testing.conftest"]

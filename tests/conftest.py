pytest_plugins = ["gerritclient.testing.conftest"]

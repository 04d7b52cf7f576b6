import os

import pytest

from skyfish.config import Credentials


def pytest_collection_modifyitems(config: pytest.Config, items: list) -> None:
    missing = not (
        os.getenv("SKYFISH_USERNAME")
        and os.getenv("SKYFISH_PASSWORD")
        and os.getenv("SKYFISH_API_KEY")
        and os.getenv("SKYFISH_API_SECRET")
    )
    if not missing:
        return
    mark_expr = getattr(config.option, "markexpr", "")
    if "integration" in mark_expr:
        return
    skip = pytest.mark.skip(reason="SKYFISH_* credentials not set")
    for item in items:
        if item.get_closest_marker("integration"):
            item.add_marker(skip)


@pytest.fixture(scope="session")
def live_credentials() -> Credentials:
    credentials = Credentials.from_env()
    if not (credentials.username and credentials.password):
        pytest.fail(
            "SKYFISH_USERNAME, SKYFISH_PASSWORD, SKYFISH_API_KEY and SKYFISH_API_SECRET "
            "must be set to run integration tests."
        )
    return credentials

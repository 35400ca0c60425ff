from contextlib import AbstractContextManager, contextmanager
from typing import Generator, Protocol

import pytest
from gapgrep import config


@pytest.fixture(autouse=True)
def restore_config() -> Generator[None, None, None]:
    """Restores config values changed by a test (e.g. by the command line `--verbose`)."""
    old_logging = config.TRACE_LOGGING
    old_max_group_depth = config.MAX_GROUP_DEPTH
    try:
        yield
    finally:
        config.TRACE_LOGGING = old_logging
        config.MAX_GROUP_DEPTH = old_max_group_depth


class ConfigFixtureProtocol(Protocol):
    def __call__(
        self,
        *,
        logging: bool = config.TRACE_LOGGING,
        max_group_depth: int = config.MAX_GROUP_DEPTH,
    ) -> AbstractContextManager[None]:
        ...


@pytest.fixture
def gapgrep_config() -> ConfigFixtureProtocol:
    @contextmanager
    def _with_config(
        *,
        logging: bool = config.TRACE_LOGGING,
        max_group_depth: int = config.MAX_GROUP_DEPTH,
    ) -> Generator[None, None, None]:
        old_logging = config.TRACE_LOGGING
        old_max_group_depth = config.MAX_GROUP_DEPTH
        config.TRACE_LOGGING = logging
        config.MAX_GROUP_DEPTH = max_group_depth
        try:
            yield
        finally:
            config.TRACE_LOGGING = old_logging
            config.MAX_GROUP_DEPTH = old_max_group_depth

    return _with_config

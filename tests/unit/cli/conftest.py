# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Shared fixtures for CLI tests."""

from collections.abc import Generator

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def _reset_logger() -> Generator[None, None, None]:
    """Drop sinks installed by the CLI callback; they point at CliRunner streams."""
    yield
    logger.remove()

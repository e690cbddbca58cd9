"""Pytest fixtures shared across the tschart test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pytest  # noqa: E402
from loguru import logger  # noqa: E402

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def ms(*args: int, tz: timezone = timezone.utc) -> int:
    """Return epoch milliseconds for a calendar datetime (UTC by default)."""

    return (datetime(*args, tzinfo=tz) - EPOCH) // timedelta(milliseconds=1)


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during a test."""

    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def close_figures():
    """Close matplotlib figures created by a test."""

    yield
    plt.close("all")

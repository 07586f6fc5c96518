"""Shared fixtures: clients wired to an in-memory httpx transport."""

from typing import Callable

import httpx
import pytest

from faunaquery import Client


@pytest.fixture
def make_client() -> Callable[..., Client]:
    """Build a client whose requests are answered by ``handler``."""

    def _make(handler, timeout: float = 5.0, secret: str = "secret") -> Client:
        return (
            Client.builder(secret)
            .uri("https://db.example.com")
            .timeout(timeout)
            .transport(httpx.MockTransport(handler))
            .build()
        )

    return _make

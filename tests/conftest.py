"""Shared fixtures: a scripted transport and a client wired to it."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import pytest

from dal_client import ClientSettings, DalClient, EventBus
from dal_client.models import DalRequest, TransportReply

BASE_URL = "http://dal.example.org/dal/"


class FakeTransport:
    """Replies with queued outcomes on the next loop iteration."""

    def __init__(self) -> None:
        self.requests: list[DalRequest] = []
        self._outcomes: list[tuple[bool, TransportReply]] = []

    def reply(self, body: str, status_code: int = 200, reason: str = "OK") -> None:
        self._outcomes.append((True, TransportReply(status_code, reason, body)))

    def reply_json(self, document: dict[str, Any]) -> None:
        self.reply(json.dumps(document))

    def fail(self, status_code: int, reason: str, body: str = "") -> None:
        self._outcomes.append((False, TransportReply(status_code, reason, body)))

    def perform(self, request, on_success, on_failure) -> None:
        self.requests.append(request)
        if self._outcomes:
            ok, reply = self._outcomes.pop(0)
        else:
            ok, reply = True, TransportReply(200, "OK", "{}")
        loop = asyncio.get_running_loop()
        loop.call_soon(on_success if ok else on_failure, reply)


class RecordingBus(EventBus):
    def __init__(self) -> None:
        super().__init__()
        self.published: list[str] = []

    def publish(self, event: str) -> None:
        self.published.append(event)
        super().publish(event)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def bus() -> RecordingBus:
    return RecordingBus()


@pytest.fixture
def client(transport: FakeTransport, bus: RecordingBus) -> DalClient:
    settings = ClientSettings(base_url=BASE_URL, local_error_delay_seconds=0)
    return DalClient(settings, transport=transport, events=bus)

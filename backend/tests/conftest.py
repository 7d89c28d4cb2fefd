import asyncio
import json
import os
import random
import sys

import pytest
import pytest_asyncio

# Ensure the backend root (containing the `app` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from app.config import Settings
from app.runtime import GameRuntime
from app.runtime_types import Challenge

FIXED_CHALLENGE = Challenge(prompt="Tape exactement : « ninja »", expect="ninja")


def fixed_challenge_source():
    return FIXED_CHALLENGE


class MockWebSocket:
    """Lightweight stand-in for fastapi.WebSocket that records outbound events."""

    def __init__(self, fail=False):
        self.sent_messages = []
        self.fail = fail

    async def send_json(self, data):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent_messages.append(data)

    def all(self, msg_type):
        return [m for m in self.sent_messages if m.get("type") == msg_type]

    def last(self, msg_type):
        for msg in reversed(self.sent_messages):
            if msg.get("type") == msg_type:
                return msg
        return None

    def types(self):
        return [m.get("type") for m in self.sent_messages]


class StalledWebSocket(MockWebSocket):
    """Peer that stops reading once an event of type `stall_on` is sent to it."""

    def __init__(self, stall_on):
        super().__init__()
        self.stall_on = stall_on
        self.stalled = False

    async def send_json(self, data):
        if data.get("type") == self.stall_on:
            self.stalled = True
        if self.stalled:
            await asyncio.sleep(3600)
        self.sent_messages.append(data)


async def send(runtime, session, **data):
    await runtime.handle_raw_message(session, json.dumps(data))


async def wait_for(ws, msg_type, count=1, timeout=2.0):
    """Poll until the mock socket has received `count` events of `msg_type`."""
    deadline = asyncio.get_running_loop().time() + timeout
    while len(ws.all(msg_type)) < count:
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError(f"Never received {count} x {msg_type}; got {ws.types()}")
        await asyncio.sleep(0.002)
    return ws.all(msg_type)[count - 1]


def make_settings(**overrides):
    values = {
        "tick_interval_ms": 1000,
        "next_round_delay_ms": 5,
        "default_target": 5,
        "default_round_seconds": 10,
    }
    values.update(overrides)
    return Settings(**values)


@pytest_asyncio.fixture
async def make_runtime():
    created = []

    def factory(**overrides):
        runtime = GameRuntime(
            make_settings(**overrides),
            challenge_source=fixed_challenge_source,
            rng=random.Random(7),
        )
        created.append(runtime)
        return runtime

    yield factory
    for runtime in created:
        await runtime.shutdown()


@pytest_asyncio.fixture
async def runtime(make_runtime):
    return make_runtime()


@pytest.fixture()
def connect():
    def _connect(runtime, fail=False):
        ws = MockWebSocket(fail=fail)
        session = runtime.open_session(ws)
        return session, ws

    return _connect

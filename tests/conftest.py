"""Fake Arduino controller behind a fake serial port."""

from __future__ import annotations

import time

import pytest
import serial

from arlo.comm import serial_link


class FakeController:
    """Answers commands the way the Arlo firmware does."""

    def __init__(self):
        self.encoders = [0, 0]
        self.sensors = {"0": "534", "1": "1200", "2": "87", "3": "3000"}
        self.overrides: dict[str, bytes] = {}

    def respond(self, cmd: str) -> bytes | None:
        if cmd in self.overrides:
            return self.overrides[cmd]
        if cmd == "k":
            return None
        if cmd == "c":
            self.encoders = [0, 0]
            return b"Encoders reset\n"
        if cmd in ("e0", "e1"):
            return f"{self.encoders[int(cmd[1])]}\n".encode()
        if cmd in self.sensors:
            return f"{self.sensors[cmd]}\n".encode()
        return b"OK\n"


class FakeSerial:
    """Stand-in for serial.Serial."""

    instances: list[FakeSerial] = []
    fail_open = False

    def __init__(self, port=None, baudrate=9600, timeout=None):
        if FakeSerial.fail_open:
            raise serial.SerialException(f"could not open port {port}")
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.controller = FakeController()
        self.written: list[bytes] = []
        self.is_open = True
        self.fail_write = False
        self._pending = b""
        FakeSerial.instances.append(self)

    @property
    def commands(self) -> list[str]:
        return [w.decode().strip() for w in self.written]

    def write(self, data: bytes) -> int:
        if not self.is_open:
            raise serial.PortNotOpenError()
        if self.fail_write:
            raise serial.SerialException("write failed")
        self.written.append(data)
        reply = self.controller.respond(data.decode().strip())
        if reply is not None:
            self._pending += reply
        return len(data)

    def readline(self) -> bytes:
        if not self.is_open:
            raise serial.PortNotOpenError()
        idx = self._pending.find(b"\n")
        if idx < 0:
            data, self._pending = self._pending, b""
            return data
        data, self._pending = self._pending[: idx + 1], self._pending[idx + 1:]
        return data

    def close(self):
        self.is_open = False


@pytest.fixture
def sleeps(monkeypatch):
    """Record time.sleep calls instead of sleeping."""
    calls = []
    monkeypatch.setattr(time, "sleep", calls.append)
    return calls


@pytest.fixture
def fake_serial(monkeypatch, sleeps):
    FakeSerial.instances = []
    FakeSerial.fail_open = False
    monkeypatch.setattr(serial_link.serial, "Serial", FakeSerial)
    return FakeSerial


@pytest.fixture
def robot(fake_serial):
    from arlo import Robot

    bot = Robot("/dev/ttyFAKE")
    yield bot
    bot.close()


@pytest.fixture
def port(robot) -> FakeSerial:
    return FakeSerial.instances[-1]

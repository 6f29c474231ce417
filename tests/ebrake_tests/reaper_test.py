# tests/ebrake_tests/reaper_test.py
import signal

import ebrake.reaper as reaper_mod
from ebrake.reaper import Reaper, exit_process, kill_current_process, reason_label, signal_pid


class KillRecorder:
    def __init__(self):
        self.reasons = []
    def __call__(self, reason: str):
        self.reasons.append(reason)


class FakeCounter:
    """Minimal prometheus-like metric stub."""
    def __init__(self):
        self.calls = []
        self.count = 0
    def labels(self, *, reason: str):
        self.calls.append({"reason": reason})
        return self
    def inc(self, n: float = 1.0):
        self.count += n


def test_trigger_calls_kill_logs_and_counts(monkeypatch, capsys):
    fake = FakeCounter()
    monkeypatch.setattr(reaper_mod, "reaper_trips_total", fake, raising=True)

    k = KillRecorder()
    reason = "HARD:ebrake_tripped failures=3 window=25 threshold=3"
    Reaper(kill=k).trigger(reason)

    assert k.reasons == [reason]
    assert f"[REAPER] trip #1, terminating: {reason}" in capsys.readouterr().err
    # only the first token becomes the label
    assert fake.count == 1
    assert fake.calls == [{"reason": "HARD:ebrake_tripped"}]


def test_kill_current_process_exits_with_1(monkeypatch):
    called = {}
    monkeypatch.setattr(reaper_mod.os, "_exit", lambda code: called.setdefault("code", code), raising=True)
    kill_current_process("ignored")
    assert called.get("code") == 1


def test_exit_process_uses_given_code(monkeypatch):
    codes = []
    monkeypatch.setattr(reaper_mod.os, "_exit", codes.append, raising=True)
    exit_process(75)("why")
    assert codes == [75]


def test_signal_pid_happy_path(monkeypatch, capsys):
    calls = []
    monkeypatch.setattr(reaper_mod.os, "kill", lambda pid, sig: calls.append((pid, sig)), raising=True)

    signal_pid(4321, sig=signal.SIGUSR1)("any-reason")
    assert calls == [(4321, signal.SIGUSR1)]
    assert capsys.readouterr().err == ""


def test_signal_pid_process_lookup_error(monkeypatch, capsys):
    def fake_kill(pid, sig):
        raise ProcessLookupError()
    monkeypatch.setattr(reaper_mod.os, "kill", fake_kill, raising=True)

    signal_pid(999999)("whatever")
    assert "PID 999999 not found" in capsys.readouterr().err


def test_signal_pid_permission_error_is_reported(monkeypatch, capsys):
    def fake_kill(pid, sig):
        raise PermissionError()
    monkeypatch.setattr(reaper_mod.os, "kill", fake_kill, raising=True)

    # must not raise: the monitor loop keeps running after a refused signal
    signal_pid(1, sig=signal.SIGTERM)("whatever")
    assert "not permitted to send SIGTERM to PID 1" in capsys.readouterr().err


def test_trigger_with_empty_reason_still_kills(monkeypatch, capsys):
    fake = FakeCounter()
    monkeypatch.setattr(reaper_mod, "reaper_trips_total", fake, raising=True)

    k = KillRecorder()
    r = Reaper(kill=k)
    r.trigger("")
    r.trigger("   ")

    assert k.reasons == ["", "   "]
    assert fake.calls == [{"reason": "unknown"}, {"reason": "unknown"}]
    assert "terminating: <no reason>" in capsys.readouterr().err


def test_trigger_counts_trips():
    r = Reaper(kill=KillRecorder())
    r.trigger("HARD:a")
    r.trigger("HARD:b")
    assert r.trips == 2


def test_reason_label():
    assert reason_label("HARD:ebrake_tripped failures=3") == "HARD:ebrake_tripped"
    assert reason_label("") == "unknown"
    assert reason_label(" \t") == "unknown"

# tests/observability_tests/metrics_test.py
import observability.metrics as m
from ebrake.brake import Brake
from ebrake.monitor import BrakeMonitor
from ebrake.reaper import Reaper

# ---------- helpers ----------
def _counter_value(counter, labels: dict) -> float:
    total = 0.0
    for metric in counter.collect():
        for sample in metric.samples:
            if sample.name.endswith("_total") and sample.labels == labels:
                total += sample.value
    return total

def _gauge_value(gauge) -> float:
    for metric in gauge.collect():
        for sample in metric.samples:
            if sample.name == gauge._name and not sample.labels:
                return sample.value
    raise AssertionError("Gauge sample not found")

def _histogram_count(histo) -> float:
    for metric in histo.collect():
        for sample in metric.samples:
            if sample.name.endswith("_count"):
                return sample.value
    raise AssertionError("Histogram count not found")

class KillRecorder:
    def __init__(self): self.reasons = []
    def __call__(self, reason: str): self.reasons.append(reason)

# ---------- tests ----------

def test_samples_counter_split_by_outcome():
    ok0 = _counter_value(m.samples_total, {"outcome": "success"})
    bad0 = _counter_value(m.samples_total, {"outcome": "failure"})

    mon = BrakeMonitor(brake=Brake(sample_window_size=5, threshold=5), check=lambda: True,
                       on_trip=KillRecorder())
    mon.observe(True)
    mon.observe(False)
    mon.observe(False)

    assert _counter_value(m.samples_total, {"outcome": "success"}) == ok0 + 1
    assert _counter_value(m.samples_total, {"outcome": "failure"}) == bad0 + 2

def test_window_gauges_track_latest_observation():
    mon = BrakeMonitor(brake=Brake(sample_window_size=2, threshold=5), check=lambda: True,
                       on_trip=KillRecorder())
    for o in (False, False, True):
        mon.observe(o)
    assert _gauge_value(m.window_failures) == 1
    assert _gauge_value(m.window_samples) == 2

def test_step_records_latency_and_trip():
    trips0 = _counter_value(m.brake_trips_total, {})
    count0 = _histogram_count(m.check_latency_ms)

    kills = KillRecorder()
    mon = BrakeMonitor(brake=Brake(sample_window_size=1, threshold=1), check=lambda: False,
                       on_trip=kills)
    mon.step()
    mon.step()  # latched, no second trip

    assert _histogram_count(m.check_latency_ms) == count0 + 2
    assert _counter_value(m.brake_trips_total, {}) == trips0 + 1
    assert len(kills.reasons) == 1

def test_reaper_counter_labels_first_token():
    lbls = {"reason": "HARD:ebrake_tripped"}
    base = _counter_value(m.reaper_trips_total, lbls)
    Reaper(kill=KillRecorder()).trigger("HARD:ebrake_tripped failures=1 window=1 threshold=1")
    assert _counter_value(m.reaper_trips_total, lbls) == base + 1

def test_serve_metrics_delegates(monkeypatch):
    ports = []
    monkeypatch.setattr(m, "start_http_server", ports.append, raising=True)
    m.serve_metrics(port=9911)
    assert ports == [9911]

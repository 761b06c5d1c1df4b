from datetime import datetime, timedelta

import pytz

from shared.state.DailyUpdateGate import LAST_STATUS_UPDATE_KEY, DailyUpdateGate
from shared.state.StateStore import StateStore


def test_first_call_updates_and_persists_marker(daily_gate, state_store):
    assert state_store.get(LAST_STATUS_UPDATE_KEY) is None

    assert daily_gate.should_update() is True
    assert state_store.get(LAST_STATUS_UPDATE_KEY) == "2026-10-19"


def test_repeated_calls_same_day_do_not_update(daily_gate, clock):
    assert daily_gate.should_update() is True

    clock.now = clock.now + timedelta(hours=6)
    assert daily_gate.should_update() is False
    assert daily_gate.should_update() is False


def test_next_day_updates_again(daily_gate, clock, state_store):
    assert daily_gate.should_update() is True

    clock.now = clock.now + timedelta(days=1)
    assert daily_gate.should_update() is True
    assert state_store.get(LAST_STATUS_UPDATE_KEY) == "2026-10-20"


def test_day_boundary_follows_configured_timezone(daily_gate, clock):
    # 22:30 UTC is already the next day in Berlin (UTC+2 in October)
    clock.now = pytz.utc.localize(datetime(2026, 10, 19, 22, 30))

    assert daily_gate.get_today() == "2026-10-20"


def test_marker_survives_a_new_gate(helper_config, clock, daily_gate):
    assert daily_gate.should_update() is True

    reloaded = DailyUpdateGate(helper_config=helper_config, state_store=StateStore(helper_config=helper_config), now=clock)
    assert reloaded.should_update() is False


def test_corrupt_state_file_counts_as_first_run(helper_config, clock, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    gate = DailyUpdateGate(helper_config=helper_config, state_store=StateStore(helper_config, path=str(path)), now=clock)

    assert gate.should_update() is True
    assert gate.get_last_update() == "2026-10-19"


def test_state_store_keeps_other_keys(state_store):
    state_store.set("other", "value")
    state_store.set(LAST_STATUS_UPDATE_KEY, "2026-10-19")

    assert state_store.get("other") == "value"
    assert state_store.get(LAST_STATUS_UPDATE_KEY) == "2026-10-19"


def test_unwritable_marker_still_reports_update_due(helper_config, clock, tmp_path):
    path = tmp_path / "state.json"
    (tmp_path / "state.json.tmp").mkdir()
    gate = DailyUpdateGate(helper_config=helper_config, state_store=StateStore(helper_config, path=str(path)), now=clock)

    assert gate.should_update() is True
    assert gate.get_last_update() is None
    # marker was not persisted, so the next call tries again
    assert gate.should_update() is True

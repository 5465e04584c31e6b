import logging

import pytest
import yaml

from napnap.core.models.data_models import SleepKind
from napnap.data_generation.sleep_history_generator import SleepHistoryGenerator
from napnap.utils.logging_setup import setup_logging


def test_event_count_and_order(dob_6_months, today):
    events = SleepHistoryGenerator(dob_6_months, seed=1).generate(days=5, end_date=today)

    # Three naps and one night per day
    assert len(events) == 5 * 4
    for earlier, later in zip(events, events[1:]):
        assert earlier.end_time < later.start_time
    assert events[-1].kind == SleepKind.NIGHT
    assert events[-1].end_time.date() == today


def test_seed_makes_output_reproducible(dob_6_months, today):
    first = SleepHistoryGenerator(dob_6_months, seed=42).generate(days=3, end_date=today)
    second = SleepHistoryGenerator(dob_6_months, seed=42).generate(days=3, end_date=today)
    assert first == second


def test_zero_days(dob_6_months, today):
    assert SleepHistoryGenerator(dob_6_months, seed=1).generate(days=0, end_date=today) == []


def test_negative_days_rejected(dob_6_months, today):
    with pytest.raises(ValueError):
        SleepHistoryGenerator(dob_6_months, seed=1).generate(days=-1, end_date=today)


def test_reads_data_generation_section(tmp_path, dob_6_months, today):
    path = tmp_path / 'config.yaml'
    path.write_text(yaml.safe_dump({'data_generation': {'wake_time_jitter_minutes': 0}}))

    events = SleepHistoryGenerator(dob_6_months, config_path=str(path), seed=3).generate(days=3, end_date=today)
    wake_ups = [e.end_time for e in events if e.kind == SleepKind.NIGHT]

    assert all(w.hour == 7 and w.minute == 0 for w in wake_ups)


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / 'logs' / 'napnap.log'
    root = setup_logging(logging.DEBUG, str(log_file))
    try:
        logging.getLogger('napnap.test').info('hello')
        for handler in root.handlers:
            handler.flush()

        assert root.level == logging.DEBUG
        assert 'napnap.test - INFO - hello' in log_file.read_text()
    finally:
        for handler in list(root.handlers):
            handler.close()
            root.removeHandler(handler)
        root.setLevel(logging.WARNING)

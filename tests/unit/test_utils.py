"""
Unit tests untuk utils: serialization, time units, metrics, config.
"""

import logging

import pytest

from coordcache.utils.config import Config
from coordcache.utils.log import setup_logging
from coordcache.utils.metrics import MetricsCollector, measure_time
from coordcache.utils.serialization import decode_value, encode_value
from coordcache.utils.timeunit import TimeUnit


def test_encode_is_canonical():
    assert encode_value({'b': 1, 'a': 2}) == encode_value({'a': 2, 'b': 1})
    assert encode_value('owner') == '"owner"'
    assert encode_value([1, 2]) == '[1,2]'


def test_decode_value():
    assert decode_value('{"a":1}') == {'a': 1}
    assert decode_value('42') == 42
    assert decode_value('not json') == 'not json'
    assert decode_value(None) is None


def test_time_units():
    assert TimeUnit.SECONDS.to_millis(1.5) == 1500
    assert TimeUnit.MINUTES.to_millis(2) == 120_000
    assert TimeUnit.DAYS.to_millis(1) == 86_400_000
    assert TimeUnit.MILLISECONDS.to_seconds(250) == 0.25
    assert TimeUnit.HOURS.from_millis(7_199_999) == 1


def test_metrics_collectors_are_independent():
    """Dua collector tidak berbagi registry"""
    first = MetricsCollector()
    second = MetricsCollector()
    
    first.record_cache_read(True)
    
    assert first.get_cache_hit_rate() == 1.0
    assert second.get_cache_hit_rate() == 0.0


def test_disabled_metrics_record_nothing():
    collector = MetricsCollector(enabled=False)
    collector.record_command('GET', 0.01)
    collector.record_lock_attempt(True)
    
    assert collector.registry.get_sample_value('store_commands_total', {'command': 'GET'}) is None
    assert collector.registry.get_sample_value('locks_acquired_total') == 0


def test_measure_time():
    with measure_time() as timer:
        sum(range(1000))
    
    assert timer.elapsed is not None
    assert timer.elapsed >= 0


def test_redis_url(monkeypatch):
    monkeypatch.setattr(Config, 'REDIS_PASSWORD', None)
    assert Config.redis_url() == f"redis://{Config.REDIS_HOST}:{Config.REDIS_PORT}/{Config.REDIS_DB}"
    
    monkeypatch.setattr(Config, 'REDIS_PASSWORD', 'secret')
    assert Config.redis_url().startswith('redis://:secret@')


def test_setup_logging(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    log_file = tmp_path / 'client.log'
    
    try:
        setup_logging(level='debug', log_file=str(log_file))
        logging.getLogger('coordcache.test').debug('hello')
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = saved_handlers
        root.setLevel(saved_level)
    
    assert 'coordcache.test - DEBUG - hello' in log_file.read_text()


if __name__ == "__main__":
    pytest.main([__file__, '-v'])

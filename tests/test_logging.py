"""
Tests for leveled logging and structured record sinks.
"""

import json

import pytest

from goop import logging as goop_logging
from goop.logging import (
    FileSink,
    LogLevel,
    NullSink,
    close_all_sinks,
    configure_logging,
    create_sink_for_environment,
    emit_record,
    get_logger,
    register_sink,
)


@pytest.fixture(autouse=True)
def restore_logging_config():
    """Keep configuration changes local to each test."""
    saved = {
        'default_level': goop_logging._config['default_level'],
        'module_levels': dict(goop_logging._config['module_levels']),
        'log_dir': goop_logging._config['log_dir'],
        'modules': dict(goop_logging._config['modules']),
    }
    yield
    close_all_sinks()
    goop_logging._config.update(saved)


class TestLogger:
    """Test GoopLogger level filtering and formatting."""

    def test_info_printed(self, capsys):
        configure_logging(level='INFO')
        get_logger('capture').info("Wild %s appeared", "Bloop")
        assert capsys.readouterr().out == "[capture] INFO: Wild Bloop appeared\n"

    def test_debug_filtered_at_info(self, capsys):
        configure_logging(level='INFO')
        get_logger('capture').debug("hidden")
        assert capsys.readouterr().out == ""

    def test_module_level_override(self, capsys):
        configure_logging(level='WARNING', modules={'spawner': 'DEBUG'})
        get_logger('spawner').debug("roll")
        get_logger('session').info("quiet")
        out = capsys.readouterr().out
        assert "[spawner] DEBUG: roll" in out
        assert "session" not in out

    def test_bad_format_args_still_logged(self, capsys):
        configure_logging(level='INFO')
        get_logger('app').info("%d goops", "many")
        assert "goops" in capsys.readouterr().out

    def test_exception_includes_traceback(self, capsys):
        configure_logging(level='INFO')
        try:
            raise IOError("disk full")
        except IOError:
            get_logger('session').exception("Failed to record catch")
        out = capsys.readouterr().out
        assert "[session] ERROR: Failed to record catch" in out
        assert "disk full" in out

    def test_unknown_level_defaults_to_info(self):
        configure_logging(level='CHATTY')
        assert get_logger('capture').level == LogLevel.INFO

    def test_loggers_cached(self):
        assert get_logger('capture') is get_logger('capture')


class TestSinks:
    """Test structured record sinks."""

    def test_no_sink_registered(self):
        assert emit_record('nobody_listens', {'type': 'x'}) is False

    def test_file_sink_writes_jsonl(self, tmp_path):
        sink = FileSink(log_dir=str(tmp_path), session_name="test")
        register_sink('catches', sink)

        assert emit_record('catches', {'type': 'persisted', 'creature_id': 3})
        path = sink.log_paths['catches']
        close_all_sinks()

        lines = [json.loads(line) for line in path.read_text().splitlines()]
        assert [line['type'] for line in lines] == ['header', 'persisted', 'footer']
        assert lines[1]['creature_id'] == 3
        assert 'wall_time' in lines[1]

    def test_null_sink_by_default(self):
        assert isinstance(create_sink_for_environment('encounters'), NullSink)

    def test_enabled_module_gets_file_sink(self, tmp_path):
        goop_logging._config['modules'] = {'catches': {'enabled': True}}
        configure_logging(log_dir=str(tmp_path))
        assert isinstance(create_sink_for_environment('catches'), FileSink)

    def test_env_config(self, monkeypatch, tmp_path):
        monkeypatch.setenv('GOOP_LOG_SPAWNER', 'TRACE')
        monkeypatch.setenv('GOOP_LOGGING_ENCOUNTERS_ENABLED', 'true')
        monkeypatch.setenv('GOOP_LOG_DIR', str(tmp_path))

        goop_logging._load_env_config()

        assert get_logger('spawner').level == LogLevel.TRACE
        assert goop_logging.get_module_config('encounters') == {'enabled': True}
        assert goop_logging.get_log_dir() == str(tmp_path)

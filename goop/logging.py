"""
Goop logging: per-module leveled console logs plus structured record sinks.

Console logging:
    log = get_logger('spawner')
    log.debug("Spawn roll %.2f", roll)     # printed as "[spawner] DEBUG: ..."

Structured records:
    Encounter and catch bookkeeping is written as JSON Lines through sinks
    registered per record stream ('encounters', 'catches'). Streams with no
    sink drop their records.

    emit_record('catches', {'type': 'persist_failed', 'creature_id': 3})

Environment:
    GOOP_LOG_LEVEL=DEBUG                    default level for every module
    GOOP_LOG_<MODULE>=TRACE                 level for one module
    GOOP_LOG_DIR=/tmp/goop-logs             where FileSink writes
    GOOP_LOGGING_<STREAM>_ENABLED=true      give a record stream a FileSink

The same settings can be applied from code with configure_logging().
"""

import json
import os
import sys
import time
import traceback
from abc import ABC, abstractmethod
from enum import IntEnum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, IO, Optional


class LogLevel(IntEnum):
    """Severity levels, numbered like the stdlib logging levels."""
    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50
    OFF = 100


_LEVEL_NAMES = {
    'TRACE': LogLevel.TRACE,
    'DEBUG': LogLevel.DEBUG,
    'INFO': LogLevel.INFO,
    'WARN': LogLevel.WARNING,
    'WARNING': LogLevel.WARNING,
    'ERROR': LogLevel.ERROR,
    'CRITICAL': LogLevel.CRITICAL,
    'OFF': LogLevel.OFF,
}

_config: Dict[str, Any] = {
    'default_level': LogLevel.INFO,
    'module_levels': {},     # module -> LogLevel
    'log_dir': None,         # None: GOOP_LOG_DIR or the per-user data dir
    'modules': {},           # stream -> settings from GOOP_LOGGING_*
}


def _parse_level(name: str) -> LogLevel:
    """Level for a name; unknown names mean INFO."""
    return _LEVEL_NAMES.get(name.strip().upper(), LogLevel.INFO)


# =============================================================================
# Record sinks
# =============================================================================

class LogSink(ABC):
    """Destination for structured records.

    Subclasses must implement:
        - emit(stream, record)
        - flush()
        - close()
    """

    @abstractmethod
    def emit(self, stream: str, record: Dict[str, Any]) -> None:
        """Write one JSON-serializable record for a stream."""

    @abstractmethod
    def flush(self) -> None:
        """Push buffered records to their destination."""

    @abstractmethod
    def close(self) -> None:
        """Flush and release resources."""

    def __enter__(self) -> 'LogSink':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class FileSink(LogSink):
    """JSON Lines files, one per stream: ``<session>_<stream>.jsonl``.

    Each file opens with a header record and is closed with a footer record.
    Records without a ``wall_time`` get one.

    Args:
        log_dir: Output directory (default: get_log_dir(), resolved on first write)
        session_name: File name prefix (default: start timestamp)
    """

    def __init__(self, log_dir: Optional[str] = None, session_name: Optional[str] = None):
        self._log_dir = Path(log_dir) if log_dir else None
        self.session_name = session_name or time.strftime("%Y%m%d_%H%M%S")
        self._handles: Dict[str, IO[str]] = {}

    def _directory(self) -> Path:
        if self._log_dir is None:
            self._log_dir = Path(get_log_dir())
        self._log_dir.mkdir(parents=True, exist_ok=True)
        return self._log_dir

    def _path(self, stream: str) -> Path:
        return self._directory() / f"{self.session_name}_{stream}.jsonl"

    def _write(self, handle: IO[str], record: Dict[str, Any]) -> None:
        handle.write(json.dumps(record) + "\n")

    def _handle(self, stream: str) -> IO[str]:
        handle = self._handles.get(stream)
        if handle is None:
            handle = open(self._path(stream), 'a')
            self._handles[stream] = handle
            self._write(handle, {
                'type': 'header',
                'module': stream,
                'session_name': self.session_name,
                'start_time': time.time(),
            })
        return handle

    def emit(self, stream: str, record: Dict[str, Any]) -> None:
        self._write(self._handle(stream), {'wall_time': time.time(), **record})

    def flush(self) -> None:
        for handle in self._handles.values():
            handle.flush()

    def close(self) -> None:
        for stream, handle in self._handles.items():
            self._write(handle, {'type': 'footer', 'module': stream, 'end_time': time.time()})
            handle.close()
        self._handles.clear()

    @property
    def log_paths(self) -> Dict[str, Path]:
        """Files opened so far, by stream."""
        return {stream: self._path(stream) for stream in self._handles}


class NullSink(LogSink):
    """Discards everything."""

    def emit(self, stream: str, record: Dict[str, Any]) -> None:
        pass

    def flush(self) -> None:
        pass

    def close(self) -> None:
        pass


_sinks: Dict[str, LogSink] = {}
_default_sink: Optional[LogSink] = None


def register_sink(stream: str, sink: LogSink) -> None:
    """Route a record stream to a sink, replacing any previous one."""
    _sinks[stream] = sink


def set_default_sink(sink: Optional[LogSink]) -> None:
    """Sink for streams without their own (None drops them)."""
    global _default_sink
    _default_sink = sink


def get_sink(stream: str) -> Optional[LogSink]:
    return _sinks.get(stream, _default_sink)


def emit_record(stream: str, record: Dict[str, Any]) -> bool:
    """Send a record to its stream's sink.

    Returns:
        False if the stream has nowhere to go
    """
    sink = get_sink(stream)
    if sink is None:
        return False
    sink.emit(stream, record)
    return True


def close_all_sinks() -> None:
    """Close and unregister every sink, including the default one."""
    global _default_sink
    for sink in list(_sinks.values()):
        sink.close()
    _sinks.clear()
    if _default_sink is not None:
        _default_sink.close()
        _default_sink = None


def create_sink_for_environment(stream: str, session_name: Optional[str] = None) -> LogSink:
    """FileSink if GOOP_LOGGING_<STREAM>_ENABLED is set, NullSink otherwise."""
    if get_module_config(stream).get('enabled', False):
        return FileSink(session_name=session_name)
    return NullSink()


# =============================================================================
# Configuration
# =============================================================================

def get_log_dir() -> str:
    """Directory for record files.

    Uses the configured directory, then GOOP_LOG_DIR, then the per-user data
    directory (~/.local/share/goop/logs, ~/Library/Application Support/Goop/logs
    or %APPDATA%/Goop/logs).
    """
    configured = _config.get('log_dir') or os.environ.get('GOOP_LOG_DIR')
    if configured:
        return str(Path(configured).expanduser())

    if sys.platform == 'darwin':
        base = Path.home() / 'Library' / 'Application Support' / 'Goop'
    elif sys.platform == 'win32':
        base = Path(os.environ.get('APPDATA', str(Path.home()))) / 'Goop'
    else:
        base = Path(os.environ.get('XDG_DATA_HOME', str(Path.home() / '.local' / 'share'))) / 'goop'
    return str(base / 'logs')


def get_module_config(stream: str) -> Dict[str, Any]:
    """Settings collected from GOOP_LOGGING_<STREAM>_* variables."""
    return _config['modules'].get(stream.lower(), {})


def configure_logging(
    level: str = 'INFO',
    modules: Optional[Dict[str, str]] = None,
    log_dir: Optional[str] = None,
) -> None:
    """Set the default level, per-module levels and record directory."""
    _config['default_level'] = _parse_level(level)
    for module, module_level in (modules or {}).items():
        _config['module_levels'][module.lower()] = _parse_level(module_level)
    if log_dir:
        _config['log_dir'] = log_dir


def _env_value(raw: str) -> Any:
    """Booleans and numbers from environment strings; anything else stays a string."""
    lowered = raw.strip().lower()
    if lowered in ('true', 'yes', 'on', '1'):
        return True
    if lowered in ('false', 'no', 'off', '0'):
        return False
    for convert in (int, float):
        try:
            return convert(raw)
        except ValueError:
            continue
    return raw


def _load_env_config() -> None:
    """Apply GOOP_LOG_* and GOOP_LOGGING_* environment variables."""
    for key, value in os.environ.items():
        if key == 'GOOP_LOG_LEVEL':
            _config['default_level'] = _parse_level(value)
        elif key == 'GOOP_LOG_DIR':
            _config['log_dir'] = value
        elif key.startswith('GOOP_LOG_'):
            _config['module_levels'][key[len('GOOP_LOG_'):].lower()] = _parse_level(value)
        elif key.startswith('GOOP_LOGGING_'):
            # GOOP_LOGGING_CATCHES_ENABLED -> modules['catches']['enabled']
            stream, _, setting = key[len('GOOP_LOGGING_'):].lower().partition('_')
            if stream and setting:
                _config['modules'].setdefault(stream, {})[setting] = _env_value(value)


_load_env_config()


# =============================================================================
# Console logger
# =============================================================================

class GoopLogger:
    """Leveled console logger for one module.

    The effective level is looked up on every call, so configure_logging()
    affects loggers that already exist.
    """

    def __init__(self, module: str):
        self.module = module
        self._key = module.lower().replace('.', '_').replace('/', '_')

    @property
    def level(self) -> LogLevel:
        return _config['module_levels'].get(self._key, _config['default_level'])

    def _log(self, level: LogLevel, label: str, msg: str, *args) -> None:
        if level < self.level:
            return
        if args:
            try:
                msg = msg % args
            except (TypeError, ValueError):
                msg = f"{msg} {args}"
        print(f"[{self.module}] {label}: {msg}")

    def trace(self, msg: str, *args) -> None:
        self._log(LogLevel.TRACE, 'TRACE', msg, *args)

    def debug(self, msg: str, *args) -> None:
        self._log(LogLevel.DEBUG, 'DEBUG', msg, *args)

    def info(self, msg: str, *args) -> None:
        self._log(LogLevel.INFO, 'INFO', msg, *args)

    def warning(self, msg: str, *args) -> None:
        self._log(LogLevel.WARNING, 'WARN', msg, *args)

    warn = warning

    def error(self, msg: str, *args) -> None:
        self._log(LogLevel.ERROR, 'ERROR', msg, *args)

    def critical(self, msg: str, *args) -> None:
        self._log(LogLevel.CRITICAL, 'CRIT', msg, *args)

    def exception(self, msg: str, *args) -> None:
        """Log at ERROR level followed by the traceback being handled."""
        self._log(LogLevel.ERROR, 'ERROR', msg, *args)
        if sys.exc_info()[0] is None:
            return
        for line in traceback.format_exc().rstrip().splitlines():
            self._log(LogLevel.ERROR, 'TRACE', line)


@lru_cache(maxsize=None)
def get_logger(module: str) -> GoopLogger:
    """Shared logger for a module name (e.g. 'spawner', 'session')."""
    return GoopLogger(module)

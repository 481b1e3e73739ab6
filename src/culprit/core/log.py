"""Logger with composable output sinks, backed by logfire."""

from __future__ import annotations

import contextlib
from abc import abstractmethod
from pathlib import Path
from typing import Any

from opentelemetry.proto.logs.v1 import logs_pb2
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult
from pydantic import Field, PrivateAttr, model_validator

from culprit.core.base import BaseConfig

_current_logger: Logger | None = None


class _LoggerProxy:
    """Forwards attribute access to the configured Logger.

    Before setup_logger() has run every method is a no-op, so modules
    can log at import time and in tests without configuring anything.
    """

    def __getattr__(self, name):
        if _current_logger is None:
            if name == "span":
                return lambda *args, **kwargs: contextlib.nullcontext()

            def _noop(*args, **kwargs):  # noqa: ARG001
                pass
            return _noop
        return getattr(_current_logger, name)

    def __enter__(self):
        if _current_logger is None:
            return self
        return _current_logger.__enter__()

    def __exit__(self, *args):
        if _current_logger is None:
            return False
        return _current_logger.__exit__(*args)


# Imported everywhere as `from culprit.core.log import logger`
logger = _LoggerProxy()

# Span attributes that are plumbing rather than caller-supplied context
_INTERNAL_KEYS = frozenset({
    "code.filepath", "code.lineno", "code.function",
    "logfire.msg", "logfire.level_num", "logfire.span_type",
    "logfire.msg_template", "logfire.json_schema",
})


# Level names to OpenTelemetry severity numbers, lowest first.
LEVELS = {
    'spew': logs_pb2.SEVERITY_NUMBER_TRACE,
    'trace': logs_pb2.SEVERITY_NUMBER_TRACE3,
    'debug': logs_pb2.SEVERITY_NUMBER_DEBUG,
    'info': logs_pb2.SEVERITY_NUMBER_INFO,
    'warn': logs_pb2.SEVERITY_NUMBER_WARN,
    'error': logs_pb2.SEVERITY_NUMBER_ERROR,
    'fatal': logs_pb2.SEVERITY_NUMBER_FATAL,
}


def level_name(level_num: int) -> str:
    """Map a severity number back to the closest level name."""
    for name in reversed(LEVELS):
        if level_num >= LEVELS[name]:
            return name
    return "spew"


class LevelFilteringExporter(SpanExporter):
    """Span exporter that drops spans below a minimum level."""

    def __init__(self, exporter: SpanExporter, min_level: str | None):
        self._exporter = exporter
        self._min_severity = LEVELS.get(
            (min_level or "info").lower(), logs_pb2.SEVERITY_NUMBER_INFO
        )

    def export(self, spans: list[ReadableSpan]) -> SpanExportResult:
        kept = [
            span for span in spans
            if (span.attributes or {}).get(
                'logfire.level_num', logs_pb2.SEVERITY_NUMBER_INFO
            ) >= self._min_severity
        ]
        if kept:
            return self._exporter.export(kept)
        return SpanExportResult.SUCCESS

    def shutdown(self) -> None:
        self._exporter.shutdown()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return self._exporter.force_flush(timeout_millis)


class Sink(BaseConfig):
    """One independent log destination.

    Sinks are closeable, so closing the Logger shuts down their span
    processors through the BaseCloseable cascade.
    """

    enabled: bool = Field(default=True, description="Enable this sink")
    level: str | None = Field(
        default=None,
        description=(
            "Log level for this sink; inherits Logger.level when unset. "
            "Valid: spew, trace, debug, info, warn, error, fatal"
        )
    )
    single_line: bool = Field(
        default=True,
        description="Fold multi-line messages onto one line"
    )
    format_template: str | None = Field(
        default=None,
        description=(
            "Line template with {timestamp}, {level}, {message} and "
            "{source}; None writes raw span JSON"
        )
    )

    _processor: Any = PrivateAttr(default=None)

    def _format_span(self, span) -> str:
        """Render one span as a log line, context attributes last."""
        if not self.format_template:
            return span.to_json() + "\n"

        from datetime import UTC, datetime

        attrs = dict(span.attributes or {})
        message = str(attrs.get("logfire.msg", span.name))
        if self.single_line:
            message = message.replace("\r", "").replace("\n", " | ")
        source = ""
        if attrs.get("code.filepath"):
            source = f"{attrs['code.filepath']}:{attrs.get('code.lineno', '')}"

        try:
            line = self.format_template.format(
                timestamp=datetime.fromtimestamp(
                    span.start_time / 1e9, tz=UTC
                ),
                level=level_name(attrs.get(
                    "logfire.level_num", logs_pb2.SEVERITY_NUMBER_INFO
                )),
                message=message,
                source=source,
            )
        except KeyError as e:
            return f"Unknown field {e} in format_template\n"

        context = sorted(
            (key, value) for key, value in attrs.items()
            if key not in _INTERNAL_KEYS
            and not key.startswith(("otel.", "telemetry.", "service.",
                                    "process."))
        )
        if context:
            line += " │ " + " ".join(f"{k}={v!r}" for k, v in context)
        return line + "\n"

    @abstractmethod
    def create_processor(self, log_root: Path, session_name: str):
        """Return a span processor for this sink, or None."""

    def close(self):
        if self._processor:
            with contextlib.suppress(Exception):
                self._processor.shutdown()


class ConsoleSink(Sink):
    """Console output through logfire's console exporter."""

    verbose: bool = Field(
        default=False,
        description="Show full span details"
    )
    colors: str = Field(
        default="auto",
        description="Color mode: auto, always, never"
    )

    def create_processor(self, log_root: Path, session_name: str):
        """Configured by logfire.configure() instead."""
        return None


class FileSink(Sink):
    """Plain-text log file, one line per span."""

    enabled: bool = Field(
        default=False,
        description="Enable file logging"
    )
    path: str = Field(
        default="{log_root}/{session_name}/culprit.log",
        description="Log file path template"
    )
    format_template: str | None = Field(
        default="{timestamp:%Y-%m-%d %H:%M:%S} {level:<5} {message}",
        description="Line template"
    )

    _file: Any = PrivateAttr(default=None)

    def create_processor(self, log_root: Path, session_name: str):
        from opentelemetry.sdk.trace.export import (
            BatchSpanProcessor,
            ConsoleSpanExporter,
        )

        log_path = Path(
            self.path.format(log_root=log_root, session_name=session_name)
        )
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # Line buffered so a killed session still leaves its log behind
        self._file = open(log_path, "a", buffering=1, encoding="utf-8")  # noqa: SIM115

        exporter = ConsoleSpanExporter(
            out=self._file,
            formatter=self._format_span
        )
        return BatchSpanProcessor(
            LevelFilteringExporter(exporter, self.level)
        )

    def close(self):
        """Flush the processor into the file, then close the file."""
        super().close()
        if self._file and not self._file.closed:
            with contextlib.suppress(OSError):
                self._file.flush()
                self._file.close()


class LogfireSink(Sink):
    """Logfire.dev cloud sink."""

    enabled: bool = Field(
        default=False,
        description="Send telemetry to logfire.dev cloud"
    )
    token: str | None = Field(
        default=None,
        description="API token (or use LOGFIRE_TOKEN env var)"
    )

    def create_processor(self, log_root: Path, session_name: str):
        """Configured globally by logfire.configure()."""
        return None


class Logger(BaseConfig):
    """Logger with composable output sinks.

    Closing the logger (directly or as a context manager) closes every
    sink through the BaseCloseable cascade.
    """

    level: str = Field(
        default="info",
        description=(
            "Default level for sinks that do not set one. "
            "Valid: spew, trace, debug, info, warn, error, fatal"
        )
    )
    console: ConsoleSink = Field(
        default_factory=ConsoleSink,
        description="Console output configuration"
    )
    file: FileSink = Field(
        default_factory=FileSink,
        description="File logging configuration"
    )
    logfire: LogfireSink = Field(
        default_factory=LogfireSink,
        description="Logfire.dev cloud configuration"
    )

    @model_validator(mode='after')
    def _cascade_level_to_sinks(self) -> 'Logger':
        for sink in (self.console, self.file):
            if sink.level is None:
                sink.level = self.level
        return self

    def setup(self, log_root: Path, session_name: str):
        """Create processors for the enabled sinks and configure logfire.

        Args:
            log_root: Root directory for log files
            session_name: Name of this session, used in file paths
        """
        for sink in (self.console, self.file, self.logfire):
            if sink.enabled:
                sink._processor = sink.create_processor(
                    log_root, session_name
                )

        import logfire
        from logfire import ConsoleOptions

        console = False
        if self.console.enabled:
            # logfire has no spew level
            level = self.console.level or self.level
            console = ConsoleOptions(
                min_log_level='trace' if level == 'spew' else level,
                verbose=self.console.verbose,
                colors=self.console.colors,
                include_timestamps=True,
            )

        processors = [self.file._processor] if self.file._processor else None
        logfire.configure(
            service_name=f"culprit-{session_name}",
            send_to_logfire=self.logfire.enabled,
            token=self.logfire.token if self.logfire.enabled else None,
            console=console,
            additional_span_processors=processors,
        )

    def info(self, msg: str, **kwargs):
        import logfire
        logfire.info(msg, **kwargs)

    def debug(self, msg: str, **kwargs):
        import logfire
        logfire.debug(msg, **kwargs)

    def trace(self, msg: str, **kwargs):
        import logfire
        logfire.log(
            level=LEVELS['trace'],
            msg_template=msg,
            attributes=kwargs or None,
        )

    def spew(self, msg: str, **kwargs):
        """Below trace: subprocess lifecycle and similar noise."""
        import logfire
        logfire.log(
            level=LEVELS['spew'],
            msg_template=msg,
            attributes=kwargs or None,
        )

    def warn(self, msg: str, **kwargs):
        import logfire
        logfire.warn(msg, **kwargs)

    warning = warn

    def error(self, msg: str, **kwargs):
        import logfire
        logfire.error(msg, **kwargs)

    def span(self, msg: str, **kwargs):
        """Span context manager:

            with logger.span("step", number=1):
                ...
        """
        import logfire
        return logfire.span(msg, **kwargs)

    def __getattr__(self, name):
        import logfire
        return getattr(logfire, name)


def setup_logger(
    log_root: Path,
    session_name: str,
    console: ConsoleSink | None = None,
    file: FileSink | None = None,
    logfire: LogfireSink | None = None,
    level: str = "info",
) -> Logger:
    """Create and set up the global logger.

    Called by Config after loading; tests call it directly.

    Returns:
        The Logger now behind the module-level `logger` proxy
    """
    global _current_logger

    _current_logger = Logger(
        level=level,
        console=console or ConsoleSink(),
        file=file or FileSink(),
        logfire=logfire or LogfireSink(),
    )
    _current_logger.setup(log_root, session_name)
    return _current_logger

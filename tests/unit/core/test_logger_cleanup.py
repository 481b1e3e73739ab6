"""Tests for logger cleanup cascade via BaseCloseable."""

import pytest

from culprit.core.log import ConsoleSink, FileSink, Logger, LogfireSink


def _file_logger(path):
    return Logger(
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True, path=str(path)),
        logfire=LogfireSink(enabled=False),
    )


def test_logger_closes_file_via_context_manager(tmp_path):
    """Test that logger closes files when used as context manager."""
    logger = _file_logger(tmp_path / "test.log")
    logger.setup(log_root=tmp_path, session_name="test")

    assert logger.file._file is not None
    assert not logger.file._file.closed

    with logger:
        logger.info("test message")

    assert logger.file._file.closed


def test_logger_closes_on_exception(tmp_path):
    """Test that logger closes files even when exception occurs."""
    logger = _file_logger(tmp_path / "test.log")
    logger.setup(log_root=tmp_path, session_name="test")

    with pytest.raises(ValueError), logger:
        logger.info("before exception")
        raise ValueError("test exception")

    assert logger.file._file.closed


def test_config_cascade_closes_logger(tmp_path):
    """Test Config.close() cascades to Logger then Sink.close()."""
    from culprit.core.config import Config

    config = Config(
        logger=_file_logger(tmp_path / "cascade.log"),
        log_root=tmp_path,
        session_name="cascade",
    )

    # The validator set up the global logger with the same sinks
    assert config.logger.file._file is not None
    assert not config.logger.file._file.closed

    config.close()

    assert config.logger.file._file.closed


def test_file_written_and_flushed_on_close(tmp_path):
    """Test that log file is written and flushed on close."""
    log_file = tmp_path / "written.log"
    logger = _file_logger(log_file)
    logger.setup(log_root=tmp_path, session_name="write-test")

    with logger:
        logger.info("test message to file")

    assert "test message to file" in log_file.read_text()

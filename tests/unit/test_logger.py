"""Unit tests for the shared loguru setup."""

from datetime import date

import pytest
from loguru import logger

from optrack.contexts.intake.logger import setup_intake_logger
from optrack.utils.logger import setup_logger


@pytest.fixture(autouse=True)
def reset_sinks():
    yield
    logger.remove()


@pytest.mark.unit
def test_daily_file_receives_header_and_messages(tmp_path):
    """Test the file name and the DEBUG session header."""
    log_file = setup_logger("track", tmp_path / "logs", extra_provenance={"Store": "store.json"})
    logger.info("hello")

    assert log_file == tmp_path / "logs" / f"track_{date.today():%Y%m%d}.log"
    content = log_file.read_text()
    assert "Context: track" in content
    assert "Store: store.json" in content
    assert "hello" in content


@pytest.mark.unit
def test_repeated_setup_does_not_duplicate_lines(tmp_path):
    """Test that calling setup twice leaves a single file sink."""
    setup_logger("track", tmp_path)
    log_file = setup_logger("track", tmp_path)
    logger.info("only once")

    assert log_file.read_text().count("only once") == 1


@pytest.mark.unit
def test_intake_logger_records_proxy(tmp_path):
    """Test that the intake setup names the read proxy in the header."""
    log_file = setup_intake_logger(tmp_path, proxy_base="https://r.jina.ai")

    assert "Read proxy: https://r.jina.ai" in log_file.read_text()

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-15
# Description: test_logging_utils.py
# -----------------------------------------------------------------------------
from logging.handlers import RotatingFileHandler

from utility.logging_utils import get_class_logger, get_logger


class _Probe:
    pass


class _OtherProbe:
    pass


def test_class_logger_name_includes_module_and_class():
    logger = get_class_logger(_Probe)
    assert logger.name == f"hsk_rag.{__name__}.{_Probe.__name__}"
    assert logger.propagate is False


def test_loggers_are_configured_once():
    first = get_logger("probe")
    handlers = list(first.handlers)
    assert get_logger("probe") is first
    assert first.handlers == handlers


def test_file_handler_is_shared(monkeypatch, tmp_path):
    monkeypatch.setenv("HSK_LOG_TO_FILE", "1")
    monkeypatch.setenv("HSK_LOG_FILE", str(tmp_path / "hsk.log"))

    a = get_logger(f"probe.file.{tmp_path.name}.a")
    b = get_class_logger(_OtherProbe)
    file_a = [h for h in a.handlers if isinstance(h, RotatingFileHandler)]
    file_b = [h for h in b.handlers if isinstance(h, RotatingFileHandler)]

    assert len(file_a) == 1
    assert file_a == file_b

    a.info("written to the shared file")
    file_a[0].flush()
    assert "written to the shared file" in (tmp_path / "hsk.log").read_text(encoding="utf-8")

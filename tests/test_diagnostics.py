import logging

from ziq import diagnostics


def _ziq_handlers(logger):
    return [h for h in logger.handlers if getattr(h, "_ziq_handler", False)]


def test_configure_logging_is_idempotent():
    logger = diagnostics.configure_logging("INFO")
    diagnostics.configure_logging("DEBUG")

    assert logger.name == "ziq"
    assert logger.level == logging.DEBUG
    assert len(_ziq_handlers(logger)) == 1


def test_configure_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "ziq.log"
    logger = diagnostics.configure_logging(logging.INFO, log_file)

    logging.getLogger("ziq.renderer").info("hello from the renderer")
    for handler in _ziq_handlers(logger):
        handler.flush()

    assert "hello from the renderer" in log_file.read_text(encoding="utf-8")
    diagnostics.configure_logging(logging.WARNING)
    assert len(_ziq_handlers(logger)) == 1


def test_render_timing_logs_at_debug(caplog):
    caplog.set_level(logging.DEBUG, logger="ziq")

    with diagnostics.render_timing("unit block"):
        pass

    assert any("unit block took" in record.getMessage() for record in caplog.records)

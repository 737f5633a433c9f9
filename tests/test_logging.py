import contextvars
import logging

from slidemaker.core.ctx import set_ctx
from slidemaker.core.logging import DEFAULT_FORMAT, UTCFormatter


def _record():
    return logging.getLogger("slidemaker.test").makeRecord(
        "slidemaker.test", logging.INFO, __file__, 1, "deck ready", None, None,
    )


def test_records_carry_request_context():
    def run():
        set_ctx(request_id="r-1", deck_id="d-9", file_name="notes.txt")
        return _record()

    rec = contextvars.copy_context().run(run)
    assert (rec.request_id, rec.deck_id, rec.file_name) == ("r-1", "d-9", "notes.txt")


def test_formatter_writes_utc_and_context():
    rec = contextvars.copy_context().run(lambda: (set_ctx(deck_id="d-9"), _record())[1])
    rec.created = 0
    line = UTCFormatter(DEFAULT_FORMAT).format(rec)
    assert line.startswith("1970-01-01T00:00:00Z INFO slidemaker.test")
    assert "deck=d-9" in line and line.endswith("msg=deck ready")


def test_formatter_tolerates_records_without_context():
    rec = logging.LogRecord("lib", logging.WARNING, __file__, 1, "hi", None, None)
    for f in ("request_id", "deck_id", "file_name"):
        rec.__dict__.pop(f, None)
    assert "req=None" in UTCFormatter(DEFAULT_FORMAT).format(rec)

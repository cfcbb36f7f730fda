from __future__ import annotations

import logging

from colorpick.logging_context import action_var, log_context, new_corr_id
from colorpick.logging_setup import ContextFilter


def _record(**extra) -> logging.LogRecord:
    rec = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
    rec.__dict__.update(extra)
    return rec


def test_filter_injects_context_fields() -> None:
    f = ContextFilter()

    rec = _record()
    f.filter(rec)
    assert (rec.corr_id, rec.session, rec.action) == ("-", "-", "-")

    with log_context(corr_id="abc", session="s1", action="summon"):
        rec = _record()
        f.filter(rec)
        assert (rec.corr_id, rec.session, rec.action) == ("abc", "s1", "summon")

    assert action_var.get() == "-"


def test_explicit_action_wins() -> None:
    with log_context(action="summon"):
        rec = _record(action="boot")
        ContextFilter().filter(rec)
    assert rec.action == "boot"


def test_nested_contexts_restore() -> None:
    with log_context(action="outer"):
        with log_context(action="inner", corr_id=new_corr_id()):
            assert action_var.get() == "inner"
        assert action_var.get() == "outer"
    assert len(new_corr_id()) == 12

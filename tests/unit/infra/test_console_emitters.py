from __future__ import annotations

"""
Unit tests for the Console Output Capability.
"""

import io

from slnpack.infra.console import (
    ROLE_ERROR,
    ROLE_FILE,
    ROLE_STRUCTURE,
    LineEmitter,
    MultiEmitter,
    StreamEmitter,
)


def test_line_emitter_joins_segments_per_line():
    e = LineEmitter()
    e.emit(ROLE_STRUCTURE, "├── ")
    e.emit(ROLE_FILE, "a.cs")
    e.newline()
    e.line("plain")
    e.line()

    assert e.lines == ["├── a.cs", "plain", ""]


def test_stream_emitter_plain_when_color_disabled():
    buf = io.StringIO()
    e = StreamEmitter(buf, color=False)
    e.emit(ROLE_ERROR, "X (NOT FOUND)")
    e.newline()

    assert buf.getvalue() == "X (NOT FOUND)\n"


def test_stream_emitter_colors_roles():
    buf = io.StringIO()
    e = StreamEmitter(buf, color=True)
    e.emit(ROLE_ERROR, "bad")

    assert buf.getvalue() == "\033[31mbad\033[0m"


def test_stream_emitter_autodetects_non_tty():
    buf = io.StringIO()
    StreamEmitter(buf).emit(ROLE_FILE, "a.cs")
    assert buf.getvalue() == "a.cs"


def test_multi_emitter_fans_out():
    a, b = LineEmitter(), LineEmitter()
    m = MultiEmitter(a, b)
    m.line("x")

    assert a.lines == b.lines == ["x"]

from __future__ import annotations

from stackwalk.diag import DefaultSink, Diag, Document, Severity, Sink

_DIAG = Diag(7, "parameter '%s' has no type")


def test_default_sink_counts_by_severity(doc) -> None:
    sink = DefaultSink()
    assert isinstance(sink, Sink)
    sink.warningf(doc, _DIAG, "region")
    assert sink.success()
    sink.errorf(doc, _DIAG, "zone")
    assert sink.count() == 2
    assert sink.errors() == 1
    assert sink.warnings() == 1
    assert not sink.success()
    assert [entry.severity for entry in sink.diagnostics] == [Severity.WARNING, Severity.ERROR]


def test_diagnostic_render_with_and_without_document() -> None:
    sink = DefaultSink()
    sink.errorf(Document(file="Mu.yaml"), _DIAG, "region")
    sink.errorf(None, Diag(12, "plain message"))
    assert sink.lines() == [
        "Mu.yaml: error SW0007: parameter 'region' has no type",
        "error SW0012: plain message",
    ]


def test_diag_format_leaves_message_without_args() -> None:
    assert Diag(1, "100% done").format() == "100% done"

from __future__ import annotations

import pytest

from conftest import make_run
from pdf_geometry import rect_from_transform
from pdf_index import build_page_text_index
from pdf_pipeline import _build_parser, highlight_query, index_document, main


@pytest.fixture
def document():
    indices = {
        2: build_page_text_index(2, [make_run("second page cat", tx=50, ty=700)]),
        1: build_page_text_index(1, [
            make_run("The cat ", tx=100, ty=500, width=48),
            make_run("sat", tx=148, ty=500, width=18),
        ]),
    }
    sizes = {1: (612.0, 792.0), 2: (612.0, 792.0)}
    return indices, sizes


def test_highlight_query_orders_pages_and_computes_rects(document):
    indices, sizes = document
    results = highlight_query(indices, sizes, "cat", scale=1.5)
    assert [(m.page, m.start_char) for m, _ in results] == [(1, 4), (2, 12)]
    for _, rects in results:
        assert len(rects) == 1


def test_highlight_query_spanning_runs_merges(document):
    indices, sizes = document
    [(match, rects)] = highlight_query(indices, sizes, "cat sat")
    assert match.text == "cat sat"
    assert len(rects) == 1
    assert rects[0].x + rects[0].width == pytest.approx(166)


def test_highlight_query_rotated(document):
    indices, sizes = document
    [(_, upright)] = highlight_query(indices, sizes, "sat")
    [(_, rotated)] = highlight_query(indices, sizes, "sat", rotation=90)
    assert rotated[0].width == pytest.approx(upright[0].height)
    assert rotated[0].height == pytest.approx(upright[0].width)


def test_highlight_query_empty(document):
    indices, sizes = document
    assert highlight_query(indices, sizes, "") == []


def test_missing_file_exits(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / "missing.pdf"), "query"])
    assert exc.value.code == 1
    assert "file not found" in capsys.readouterr().err


def test_parser_rejects_bad_rotation():
    with pytest.raises(SystemExit):
        _build_parser().parse_args(["doc.pdf", "q", "--rotation", "45"])


def test_parser_defaults():
    args = _build_parser().parse_args(["doc.pdf", "q"])
    assert (args.scale, args.rotation, args.verbose) == (1.0, 0, False)


def _write_pdf(path, lines):
    canvas = pytest.importorskip("reportlab.pdfgen.canvas")
    pdf = canvas.Canvas(str(path), pagesize=(612, 792))
    pdf.setFont("Helvetica", 12)
    for x, y, text in lines:
        pdf.drawString(x, y, text)
    pdf.save()


def test_index_document_reads_real_pdf(tmp_path):
    path = tmp_path / "doc.pdf"
    _write_pdf(path, [(100, 500, "typography")])

    indices, sizes = index_document(path)
    assert sizes == {1: (612.0, 792.0)}
    index = indices[1]
    assert index.normalized_text == "typography"

    run = index.runs[0]
    assert run.transform == pytest.approx((12.0, 0.0, 0.0, 12.0, 100.0, 500.0))
    rect = rect_from_transform(run.transform, run.width, run.height)
    assert rect.y == pytest.approx(497)
    assert rect.height == pytest.approx(15)


def test_real_pdf_highlight_covers_descenders(tmp_path):
    path = tmp_path / "doc.pdf"
    _write_pdf(path, [(100, 500, "the quick"), (100, 480, "typography")])

    indices, sizes = index_document(path)
    assert indices[1].normalized_text == "the quick typography"
    [(match, rects)] = highlight_query(indices, sizes, "typography")
    assert match.start_char == 10
    # baseline 480, 3pt descender: bottom edge at 792 - 477 from the top
    assert len(rects) == 1
    assert rects[0].y + rects[0].height == pytest.approx(792 - 477)

import pytest

from highlighting.colors import DEFAULT_HIGHLIGHT_COLOR, HIGHLIGHT_COLORS, UNIFIED_COLORS, color_by_name
from highlighting.geometry import Rect, capture_highlight, reference_rect, render_rects

PAGE = Rect(100, 50, 700, 850)


def _capture(rects, scale=1.0, text_layer=None, text="Marbury v. Madison"):
    return capture_highlight(
        selected_text=text,
        client_rects=rects,
        page_rect=PAGE,
        page_number=3,
        scale=scale,
        text_layer_rect=text_layer,
    )


def test_rects_are_stored_relative_to_page():
    h = _capture([Rect(110, 60, 150, 80)])
    assert h.rects == (Rect(10, 10, 50, 30),)
    assert h.page_number == 3
    assert h.base_scale == 1.0
    assert h.color == DEFAULT_HIGHLIGHT_COLOR
    assert h.id.startswith("highlight-")


def test_render_scales_with_zoom():
    h = _capture([Rect(110, 60, 150, 80)], scale=1.0)
    assert render_rects(h, 2.0) == [Rect(20, 20, 100, 60)]
    assert render_rects(h, 1.0) == [Rect(10, 10, 50, 30)]


def test_render_from_zoomed_capture():
    h = _capture([Rect(120, 70, 200, 110)], scale=2.0)
    assert render_rects(h, 1.0) == [Rect(10, 10, 50, 30)]


def test_offset_text_layer_is_the_reference():
    text_layer = Rect(110, 60, 690, 840)
    assert reference_rect(PAGE, text_layer) == text_layer

    h = _capture([Rect(120, 70, 160, 90)], text_layer=text_layer)
    assert h.rects == (Rect(10, 10, 50, 30),)


def test_aligned_text_layer_falls_back_to_page():
    text_layer = Rect(100.5, 50.5, 700, 850)
    assert reference_rect(PAGE, text_layer) == PAGE
    assert reference_rect(PAGE, None) == PAGE


def test_blank_selection_is_ignored():
    assert _capture([Rect(110, 60, 150, 80)], text="   ") is None
    assert _capture([]) is None


def test_scale_must_be_positive():
    with pytest.raises(ValueError):
        _capture([Rect(110, 60, 150, 80)], scale=0)


def test_rect_dimensions():
    r = Rect(10, 10, 50, 30)
    assert (r.width, r.height) == (40, 20)


def test_palette():
    assert len(UNIFIED_COLORS) == 8
    assert DEFAULT_HIGHLIGHT_COLOR == "#60A5FA"
    assert DEFAULT_HIGHLIGHT_COLOR in HIGHLIGHT_COLORS
    assert color_by_name("blue").value == "#3B82F6"
    with pytest.raises(KeyError):
        color_by_name("Chartreuse")

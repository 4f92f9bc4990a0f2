from mandelview.panel import PanelState, quality_label
from mandelview.viewport import SurfaceSize

SURFACE = SurfaceSize(1000, 500)


def test_hides_after_initial_delay():
    panel = PanelState(now=100.0)
    assert panel.visible
    assert panel.tick(104.9) is False
    assert panel.tick(105.0) is True
    assert not panel.visible
    assert panel.tick(200.0) is False


def test_top_left_region_reveals_and_cancels_hide():
    panel = PanelState(now=0.0)
    panel.tick(10.0)
    assert not panel.visible

    assert panel.pointer_moved(50, 50, SURFACE) is True
    assert panel.visible
    assert panel.tick(1000.0) is False
    assert panel.visible


def test_pointer_outside_region_changes_nothing():
    panel = PanelState(now=0.0)
    panel.tick(10.0)
    assert panel.pointer_moved(200, 50, SURFACE) is False
    assert panel.pointer_moved(50, 100, SURFACE) is False
    assert not panel.visible


def test_leaving_panel_hides_after_delay():
    panel = PanelState(now=0.0)
    panel.pointer_moved(10, 10, SURFACE)
    panel.pointer_left(now=20.0)
    assert panel.tick(22.0) is False
    assert panel.tick(23.0) is True
    assert not panel.visible


def test_instructions_toggle():
    panel = PanelState(now=0.0)
    assert panel.toggle_instructions() is True
    assert panel.toggle_instructions() is False


def test_quality_label():
    assert quality_label(0.5) == "Quality: 50%"
    assert quality_label(1.0) == "Quality: 100%"
    assert quality_label(0.2) == "Quality: 20%"

"""
Unit tests for crop geometry, the crop session state machine and drag gestures.
"""

import io

import pytest
from PIL import Image

from portrait_studio.editing.transfer import ResultImage
from portrait_studio.viewer import (
    CropPreset,
    CropRegion,
    CropSession,
    CropState,
    CropStateError,
    DragGesture,
)
from portrait_studio.viewer.crop import (
    clamp_position,
    crop_image,
    initial_crop_region,
    pixel_box,
    to_natural,
)


class TestGeometry:
    def test_scaling_to_natural_pixels(self):
        region = CropRegion(x=100, y=50, width=200, height=300)
        natural = to_natural(region, natural_size=(3000, 4000), displayed_size=(600, 800))
        assert natural == CropRegion(x=500, y=250, width=1000, height=1500)

    def test_scaling_is_per_axis(self):
        region = CropRegion(x=10, y=10, width=10, height=10)
        natural = to_natural(region, natural_size=(200, 50), displayed_size=(100, 100))
        assert natural == CropRegion(x=20, y=5, width=20, height=5)

    def test_initial_region_limited_by_width(self):
        region = initial_crop_region(CropPreset.P3X4, 600, 800)
        assert region.width == pytest.approx(540)
        assert region.height == pytest.approx(720)
        assert (region.x, region.y) == (pytest.approx(30), pytest.approx(40))

    def test_initial_region_limited_by_height(self):
        region = initial_crop_region(CropPreset.P4X6, 1000, 500)
        assert region.height == pytest.approx(450)
        assert region.width == pytest.approx(300)
        assert region.x == pytest.approx(350)
        assert region.y == pytest.approx(25)

    @pytest.mark.parametrize("preset", list(CropPreset))
    def test_initial_region_keeps_ratio_and_fits(self, preset):
        width, height = 640, 480
        region = initial_crop_region(preset, width, height)
        w, h = (int(n) for n in preset.value.split("x"))

        assert region.width / region.height == pytest.approx(w / h)
        assert 0 <= region.x and region.x + region.width <= width
        assert 0 <= region.y and region.y + region.height <= height

    def test_clamp_keeps_region_inside(self):
        region = CropRegion(x=0, y=0, width=100, height=150)
        assert clamp_position(region, -20, -5, 300, 400) == CropRegion(0, 0, 100, 150)
        assert clamp_position(region, 500, 500, 300, 400) == CropRegion(200, 250, 100, 150)
        assert clamp_position(region, 50, 60, 300, 400) == CropRegion(50, 60, 100, 150)

    def test_pixel_box_rounds_half_up(self):
        box = pixel_box(CropRegion(x=2.5, y=3.49, width=10.5, height=20.4), (100, 100))
        assert box == (3, 3, 14, 23)

    def test_pixel_box_shifts_origin_at_edge(self):
        # Rounded size would overflow the right edge by one pixel
        box = pixel_box(CropRegion(x=10.5, y=0, width=20.5, height=10), (30, 30))
        assert box == (9, 0, 30, 10)

    def test_pixel_box_never_empty(self):
        box = pixel_box(CropRegion(x=0, y=0, width=0.2, height=0.1), (10, 10))
        assert box == (0, 0, 1, 1)

    def test_crop_image_outputs_png(self, image_factory):
        data, size = crop_image(image_factory(100, 50, "JPEG"), CropRegion(10, 5, 40, 30))
        assert size == (40, 30)
        with Image.open(io.BytesIO(data)) as img:
            assert img.format == "PNG"
            assert img.size == (40, 30)


class TestCropSession:
    def test_starts_idle(self):
        session = CropSession()
        assert session.state == CropState.IDLE
        assert session.to_dict() == {
            "state": "idle", "preset": None, "region": None, "dragging": False,
        }

    def test_operations_require_cropping(self):
        session = CropSession()
        with pytest.raises(CropStateError):
            session.move_to(1, 1)
        with pytest.raises(CropStateError):
            session.begin_drag(1, 1)
        with pytest.raises(CropStateError):
            session.apply(ResultImage.from_bytes(b"", "image/png"))

    def test_start_rejects_unmeasured_image(self):
        with pytest.raises(ValueError):
            CropSession().start(CropPreset.P3X4, 0, 100)

    def test_apply_burns_crop_into_new_png(self, image_factory):
        result = ResultImage.from_bytes(image_factory(120, 160, "JPEG"), "image/jpeg")
        session = CropSession()
        session.start(CropPreset.P3X4, 60, 80)

        cropped = session.apply(result)

        assert cropped.media_type == "image/png"
        with Image.open(io.BytesIO(cropped.data)) as img:
            assert img.size == (108, 144)
        assert session.state == CropState.IDLE
        assert session.region is None

    def test_cancel_returns_to_idle(self):
        session = CropSession()
        session.start(CropPreset.P2X3, 300, 300)
        session.begin_drag(10, 10)
        session.cancel()

        assert session.state == CropState.IDLE
        assert session.gesture is None

    def test_drag_moves_by_pointer_delta(self):
        session = CropSession()
        start = session.start(CropPreset.P3X4, 600, 800)
        session.begin_drag(100, 100)

        region = session.drag(110, 95)

        assert region.x == pytest.approx(start.x + 10)
        assert region.y == pytest.approx(start.y - 5)

    def test_drag_is_clamped(self):
        session = CropSession()
        session.start(CropPreset.P3X4, 600, 800)
        session.begin_drag(0, 0)

        region = session.drag(-1000, 5000)

        assert region.x == 0
        assert region.y == pytest.approx(800 - region.height)

    def test_drag_without_gesture_is_noop(self):
        session = CropSession()
        start = session.start(CropPreset.P3X4, 600, 800)
        assert session.drag(500, 500) == start

    def test_new_drag_releases_previous(self):
        session = CropSession()
        session.start(CropPreset.P3X4, 600, 800)
        first = session.begin_drag(0, 0)
        second = session.begin_drag(5, 5)

        assert not first.active
        assert session.gesture is second


class TestDragGesture:
    def test_release_is_idempotent(self):
        released = []
        gesture = DragGesture(0, 0, 10, 10, on_move=lambda x, y: None, on_release=released.append)

        gesture.release()
        gesture.release()

        assert released == [gesture]

    def test_moves_ignored_after_release(self):
        moves = []
        gesture = DragGesture(0, 0, 10, 20, on_move=lambda x, y: moves.append((x, y)))

        gesture.move(5, 5)
        gesture.release()
        gesture.move(50, 50)

        assert moves == [(15, 25)]

    def test_context_exit_releases(self):
        with DragGesture(0, 0, 0, 0, on_move=lambda x, y: None) as gesture:
            assert gesture.active
        assert not gesture.active

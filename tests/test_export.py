"""Tests for SVG export."""

import xml.etree.ElementTree as ET

import pytest

from barnes_hut import Body, Universe, ValidationError
from barnes_hut.export import to_svg, to_svg_frames, write_svg_frames
from barnes_hut.export.svg import MIN_PIXEL_RADIUS

SVG_NS = "{http://www.w3.org/2000/svg}"


@pytest.fixture
def universe():
    return Universe(
        (
            Body(position=(25.0, 75.0), radius=2.0, color=(255, 0, 0)),
            None,
            Body(position=(100.0, 0.0), radius=0.0),
        ),
        width=100.0,
        time=12.5,
    )


def circles(svg):
    root = ET.fromstring(svg)
    return root.findall(f".//{SVG_NS}circle")


class TestSVGExport:
    """Tests for single-snapshot SVG rendering."""

    def test_valid_svg(self, universe):
        """Output parses as XML with one circle per present body."""
        svg = to_svg(universe, canvas_width=200)
        root = ET.fromstring(svg)

        assert root.tag == f"{SVG_NS}svg"
        assert root.get("width") == "200"
        assert len(circles(svg)) == 2

    def test_coordinates_flip_y(self, universe):
        """World coordinates are scaled and y points up."""
        first = circles(to_svg(universe, canvas_width=200))[0]
        assert float(first.get("cx")) == pytest.approx(50.0)
        assert float(first.get("cy")) == pytest.approx(50.0)

        corner = circles(to_svg(universe, canvas_width=200))[1]
        assert float(corner.get("cx")) == pytest.approx(200.0)
        assert float(corner.get("cy")) == pytest.approx(200.0)

    def test_radius_scaling(self, universe):
        """Radii are multiplied by the scaling factor with a minimum."""
        first, second = circles(to_svg(universe, canvas_width=100, scaling_factor=3.0))
        assert float(first.get("r")) == pytest.approx(6.0)
        assert float(second.get("r")) == pytest.approx(MIN_PIXEL_RADIUS)

    def test_fill_colour(self, universe):
        """Bodies are drawn in their own colour."""
        first = circles(to_svg(universe))[0]
        assert first.get("fill") == "rgb(255,0,0)"

    def test_background(self, universe):
        """Background rect is optional."""
        assert "<rect" in to_svg(universe)
        assert "<rect" not in to_svg(universe, background=None)

    def test_time_recorded(self, universe):
        """The snapshot time is recorded on the group."""
        assert 'data-time="12.5"' in to_svg(universe)

    def test_invalid_canvas(self, universe):
        """Non-positive canvas width raises."""
        with pytest.raises(ValidationError):
            to_svg(universe, canvas_width=0)


class TestFrames:
    """Tests for trajectory rendering and writing."""

    def test_frequency_sampling(self, universe):
        """Every frequency-th snapshot is rendered."""
        trajectory = [universe] * 7
        assert len(to_svg_frames(trajectory, frequency=1)) == 7
        assert len(to_svg_frames(trajectory, frequency=3)) == 3

    def test_invalid_frequency(self, universe):
        """Frequency below 1 raises."""
        with pytest.raises(ValidationError):
            to_svg_frames([universe], frequency=0)

    def test_write_frames(self, universe, tmp_path):
        """Frames are written to numbered files."""
        frames = to_svg_frames([universe, universe])
        paths = write_svg_frames(frames, tmp_path / "out", prefix="jupiter")

        assert [p.name for p in paths] == ["jupiter_00000.svg", "jupiter_00001.svg"]
        assert paths[0].read_text(encoding="utf-8") == frames[0]

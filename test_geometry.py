import math
import unittest

import config
from bending.logic import BendLogic
from bending.paths import (
    arc_control_distance, arc_to_cubic, bounding_viewport, command_points, path_data, render_svg,
    round_corners, sample_arc,
)
from core.components import Point, Rect, Viewport
from core.models import BendKind, Concentric, Offset, RollingOffset, Saddle3, Saddle4, Segmented

ALL_SPECS = [
    Offset(10, 30),
    Saddle3(20, 45),
    Saddle4(6, 12, 22.5),
    RollingOffset(4, 3, 30),
    Concentric(1, 60, 3),
    Segmented(24, 90, 5),
    Segmented(100, 30, 3),
    Segmented(200, 15, 2),
    Segmented(6, 10, 1),
]


def inside(vp: Viewport, p: Point) -> bool:
    eps = 1e-9
    return (vp.min_x - eps <= p.x <= vp.min_x + vp.width + eps
            and vp.min_y - eps <= p.y <= vp.min_y + vp.height + eps)


class TestCurveTools(unittest.TestCase):
    def test_round_corners_square(self):
        cmds = round_corners([Point(0, 0), Point(100, 0), Point(100, 100)], 15)
        self.assertEqual([c.op for c in cmds], ["M", "L", "Q", "L"])
        self.assertEqual(cmds[1].end, Point(85, 0))
        self.assertEqual(cmds[2].points, (Point(100, 0), Point(100, 15)))
        self.assertEqual(cmds[3].end, Point(100, 100))

    def test_round_corners_short_segments(self):
        # 10 / 2.2 = 4.545 caps the 15" radius
        cmds = round_corners([Point(0, 0), Point(10, 0), Point(10, 10)], 15)
        self.assertAlmostEqual(cmds[1].end.x, 10 - 10 / 2.2)
        self.assertAlmostEqual(cmds[2].end.y, 10 / 2.2)

    def test_round_corners_zero_length_segment(self):
        cmds = round_corners([Point(0, 0), Point(5, 5), Point(5, 5), Point(10, 5)], 15)
        self.assertIn("L", [c.op for c in cmds])
        self.assertEqual(cmds[-1].end, Point(10, 5))

    def test_arc_to_cubic(self):
        # Quarter circle of radius 1: handle = 4/3 * tan(22.5°) = 0.5523
        c1, c2, end = arc_to_cubic(Point(0, 0), 1.0, 90)
        f = arc_control_distance(1.0, 90)
        self.assertAlmostEqual(f, 0.5523, places=4)
        self.assertAlmostEqual(end.x, 1.0)
        self.assertAlmostEqual(end.y, 1.0)
        self.assertAlmostEqual(c1.x, f)
        self.assertAlmostEqual(c1.y, 0.0)
        self.assertAlmostEqual(c2.x, 1.0)
        self.assertAlmostEqual(c2.y, 1.0 - f)

    def test_sample_arc(self):
        samples = sample_arc(24, 90, 5)
        self.assertEqual(len(samples), 6)
        center = Point(0, 24)
        for p, _ in samples:
            self.assertAlmostEqual((p - center).length(), 24)
        self.assertAlmostEqual(samples[-1][0].x, 24)
        self.assertAlmostEqual(samples[-1][1], math.pi / 2)

    def test_bounding_viewport(self):
        vp = bounding_viewport([Point(0, 0), Point(10, 5)], 2)
        self.assertEqual(vp, Viewport(-2, -2, 14, 9))
        self.assertEqual(bounding_viewport([], 2), Viewport(0, 0, 100, 100))

    def test_path_data_flips_y(self):
        cmds = round_corners([Point(0, 1), Point(2, 3)])
        self.assertEqual(path_data(cmds), "M 0.00 -1.00 L 2.00 -3.00")


class TestBendGeometry(unittest.TestCase):
    def test_offset_layout(self):
        geo = BendLogic.synthesize(Offset(10, 30))
        run = 10 / math.tan(math.radians(30))
        b = config.STROKE_WIDTH / 2 + 1
        self.assertEqual(geo.kind, BendKind.OFFSET)
        self.assertEqual(len(geo.points), 4)
        self.assertAlmostEqual(geo.points[1].x, 25)
        self.assertAlmostEqual(geo.points[2].x, 25 + run)
        self.assertAlmostEqual(geo.points[2].y, 10 + b)
        self.assertEqual(geo.obstacles, (Rect(25 + run + 5, 0.0, 35.0, 10.0),))
        self.assertEqual([m.label for m in geo.marks], ["1", "2"])
        self.assertEqual(geo.dimensions[0].label, 'D: 17.32"')
        self.assertEqual([c.op for c in geo.strokes[0].commands], ["M", "L", "Q", "L", "Q", "L"])

        # Floor at y=0 and the tail end set the extents
        self.assertAlmostEqual(geo.viewport.min_x, -90)
        self.assertAlmostEqual(geo.viewport.min_y, -90)
        self.assertAlmostEqual(geo.viewport.width, 25 + run + 45 + 180)

    def test_saddle3_layout_is_symmetric(self):
        geo = BendLogic.synthesize(Saddle3(20, 45))
        pts = geo.points
        self.assertEqual(len(pts), 5)
        self.assertAlmostEqual(pts[2].x, 0.0)
        self.assertAlmostEqual(pts[1].x, -pts[3].x)
        self.assertAlmostEqual(pts[0].x, -pts[4].x)
        self.assertEqual(geo.obstacles[0], Rect(-15.0, 0.0, 30.0, 20.0))
        self.assertEqual([m.label for m in geo.marks], ["S", "C", "S"])

    def test_saddle4_bridge(self):
        geo = BendLogic.synthesize(Saddle4(6, 12, 22.5))
        self.assertEqual(len(geo.points), 6)
        self.assertAlmostEqual(geo.points[3].x - geo.points[2].x, 12)
        self.assertEqual(geo.points[2].y, geo.points[3].y)
        self.assertEqual(geo.dimensions[0].label, 'W: 12"')

    def test_rolling_offset_triangle(self):
        geo = BendLogic.synthesize(RollingOffset(4, 3, 30))
        labels = [d.label for d in geo.dimensions]
        self.assertIn('ROLL: 3"', labels)
        self.assertIn('RISE: 4"', labels)
        self.assertIn('TRUE: 5.00"', labels)
        true_dim = geo.dimensions[-1]
        self.assertAlmostEqual((true_dim.end - true_dim.start).length(), 5.0)

    def test_concentric_pipes(self):
        spec = Concentric(1, 60, 3)
        geo = BendLogic.synthesize(spec)
        stagger = math.tan(math.radians(30))
        self.assertEqual(len(geo.strokes), 3)
        for i, stroke in enumerate(geo.strokes):
            self.assertEqual([c.op for c in stroke.commands], ["M", "L", "C", "L"])
            bend_start = stroke.vertices[1]
            self.assertAlmostEqual(bend_start.y, -i * spec.spacing)
            self.assertAlmostEqual(bend_start.x, 2.0 + i * stagger)
            c1 = stroke.commands[2].points[0]
            self.assertAlmostEqual(c1.x - bend_start.x, arc_control_distance(1.0, 60))
        self.assertEqual(len(geo.marks), 3)
        self.assertTrue(geo.dimensions[0].label.startswith("Stagger"))

    def test_segmented_hash_marks(self):
        geo = BendLogic.synthesize(Segmented(24, 90, 5))
        self.assertEqual(len(geo.points), 6)
        self.assertEqual(len(geo.hash_marks), 6)
        step = math.radians(18)
        for i, mark in enumerate(geo.hash_marks):
            self.assertAlmostEqual(mark.tangent_angle, i * step)
        self.assertEqual(geo.dimensions[0].label, 'R: 24"')

    def test_viewport_contains_everything(self):
        for spec in ALL_SPECS:
            geo = BendLogic.synthesize(spec)
            emitted = []
            for stroke in geo.strokes:
                emitted.extend(command_points(stroke.commands))
            for rect in geo.obstacles:
                emitted.extend(rect.corners())
            for dim in geo.dimensions:
                emitted.extend((dim.start, dim.end))
            for mark in geo.hash_marks:
                emitted.extend(mark.endpoints(config.HASH_LENGTH))
            for p in emitted:
                self.assertTrue(inside(geo.viewport, p), f"{spec.kind.value}: {p} outside {geo.viewport}")

    def test_segmented_radius_line_in_view(self):
        geo = BendLogic.synthesize(Segmented(100, 30, 3))
        center = geo.dimensions[0].start
        self.assertEqual(center, Point(0.0, 100.0))
        self.assertTrue(inside(geo.viewport, center), f"{center} outside {geo.viewport}")
        self.assertGreaterEqual(geo.viewport.min_y + geo.viewport.height, 100.0 + config.PADDING_ARC - 1e-9)

    def test_svg_hash_marks_match_layout(self):
        geo = BendLogic.synthesize(Segmented(200, 90, 4))
        svg = render_svg(geo)
        a, b = geo.hash_marks[-1].endpoints(config.HASH_LENGTH)
        self.assertIn(f'x1="{a.x:.2f}" y1="{-a.y:.2f}" x2="{b.x:.2f}" y2="{-b.y:.2f}"', svg)
        self.assertTrue(inside(geo.viewport, a))
        self.assertTrue(inside(geo.viewport, b))

    def test_svg_rendering(self):
        for spec in ALL_SPECS:
            svg = render_svg(BendLogic.synthesize(spec))
            self.assertTrue(svg.startswith("<svg"))
            self.assertTrue(svg.endswith("</svg>"))
            self.assertIn("<path", svg)
        self.assertIn("&quot;", render_svg(BendLogic.synthesize(Offset(10, 30))))


if __name__ == '__main__':
    unittest.main()

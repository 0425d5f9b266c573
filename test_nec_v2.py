import math
import unittest

from core.errors import InvalidParameterError, UnknownLookupKeyError
from core.models import (
    BoxFillInput, BoxType, Conductor, ConduitFillInput, ConduitType, DetailedBoxFillInput, Insulation,
)
from standards.nec_logic import NECLogic
from standards.nec_tables import (
    conduit_sizes, get_conduit_area, get_min_bend_radius, get_springback_factor, get_wire_area, wire_gauges,
)


def fill_for(conductors, conduit_type=ConduitType.EMT, size="0.75", **kwargs):
    return NECLogic.conduit_fill(ConduitFillInput(conduit_type, size, tuple(conductors), **kwargs))


class TestConduitFill(unittest.TestCase):

    def test_three_number_12_in_three_quarter_emt(self):
        print("\n--- TEST: 3 x #12 THHN in 3/4 EMT ---")
        # 3 * 0.0133 = 0.0399 in² over 0.533 in² = 7.49 %
        res = fill_for([Conductor("12", 3)])
        print(f"Fill: {res.fill_percent:.2f}% (limit {res.max_allowed_percent}%)")
        self.assertAlmostEqual(res.total_conductor_area, 0.0399, places=4)
        self.assertAlmostEqual(res.fill_percent, 7.49, places=2)
        self.assertEqual(res.max_allowed_percent, 40.0)
        self.assertAlmostEqual(res.max_allowed_area, 0.533 * 0.40, places=6)
        self.assertEqual(res.conductor_count, 3)
        self.assertTrue(res.compliant)

    def test_fill_is_linear_in_count(self):
        steps = [fill_for([Conductor("10", n)], size="1").fill_percent for n in range(3, 12)]
        deltas = [b - a for a, b in zip(steps, steps[1:])]
        for d in deltas:
            self.assertAlmostEqual(d, deltas[0], places=9)
            self.assertGreater(d, 0)

    def test_fill_limits_by_conductor_count(self):
        self.assertEqual(fill_for([Conductor("6", 1)]).max_allowed_percent, 53.0)
        self.assertEqual(fill_for([Conductor("12", 2)]).max_allowed_percent, 31.0)
        self.assertEqual(fill_for([Conductor("12", 2), Conductor("14", 1)]).max_allowed_percent, 40.0)
        self.assertEqual(NECLogic.allowed_fill_percent(25), 40.0)

    def test_nipple_allowance(self):
        # 10 x #10: 0.211 / 0.533 = 39.6 % in 3/4 EMT
        short = fill_for([Conductor("10", 10)], conduit_length=24)
        self.assertTrue(short.is_nipple)
        self.assertEqual(short.max_allowed_percent, 60.0)

        long_run = fill_for([Conductor("10", 10)], conduit_length=24.5)
        self.assertFalse(long_run.is_nipple)
        self.assertEqual(long_run.max_allowed_percent, 40.0)

        self.assertFalse(fill_for([Conductor("10", 10)]).is_nipple)

    def test_undersized_conduit_is_a_result_not_an_error(self):
        # 10 x #10 in 1/2 EMT: 0.211 / 0.304 = 69.4 %
        res = fill_for([Conductor("10", 10)], size="0.5")
        self.assertGreater(res.fill_percent, 69.0)
        self.assertFalse(res.compliant)

    def test_xhhw_is_bigger_than_thhn(self):
        thhn = fill_for([Conductor("12", 3)])
        xhhw = fill_for([Conductor("12", 3)], insulation=Insulation.XHHW)
        self.assertAlmostEqual(xhhw.total_conductor_area, 3 * 0.0181, places=6)
        self.assertGreater(xhhw.fill_percent, thhn.fill_percent)

    def test_fractional_trade_size(self):
        a = fill_for([Conductor("#12", 3)], size="3/4")
        b = fill_for([Conductor("12", 3)], size="0.75")
        self.assertEqual(a, b)

    def test_unknown_keys_raise(self):
        with self.assertRaises(UnknownLookupKeyError):
            fill_for([Conductor("4/0", 1)])
        with self.assertRaises(UnknownLookupKeyError):
            fill_for([Conductor("12", 3)], conduit_type=ConduitType.RMC, size="2")
        with self.assertRaises(UnknownLookupKeyError) as ctx:
            fill_for([Conductor("12", 3)], size="jumbo")
        self.assertIsInstance(ctx.exception, KeyError)
        self.assertIn("Conduit area", str(ctx.exception))

    def test_duplicate_gauges_rejected(self):
        with self.assertRaises(InvalidParameterError):
            ConduitFillInput(ConduitType.EMT, "0.75", (Conductor("12", 2), Conductor("#12", 1)))

    def test_negative_count_rejected(self):
        with self.assertRaises(InvalidParameterError):
            Conductor("12", -1)

    def test_conduit_gauge(self):
        res = fill_for([Conductor("12", 3)])
        gauge = NECLogic.conduit_gauge(res)
        self.assertAlmostEqual(gauge.fill_radius, 60 * math.sqrt(res.fill_percent / 100), places=9)
        self.assertFalse(gauge.over_limit)

        over = NECLogic.conduit_gauge(fill_for([Conductor("6", 12)], size="0.5"))
        self.assertTrue(over.over_limit)
        self.assertEqual(over.ratio, 1.0)
        self.assertEqual(over.fill_radius, over.outer_radius)


class TestBoxFill(unittest.TestCase):

    def test_four_inch_square_box(self):
        # 2*2.0 + 4*2.25 + 1*4.5 = 17.5 in³ in a 21.0 in³ box
        res = NECLogic.box_fill(BoxFillInput(BoxType.SQUARE_4X1_1_2, count_14=2, count_12=4, device_count=1))
        self.assertEqual(res.volume_used, 17.5)
        self.assertEqual(res.capacity, 21.0)
        self.assertTrue(res.compliant)

    def test_exact_capacity_is_compliant(self):
        # 2*2.0 + 4*2.25 = 13.0 exactly fills a handy box
        full = NECLogic.box_fill(BoxFillInput(BoxType.HANDY_BOX, count_14=2, count_12=4))
        self.assertEqual(full.volume_used, 13.0)
        self.assertTrue(full.compliant)

        over = NECLogic.box_fill(BoxFillInput(BoxType.HANDY_BOX, count_14=2, count_12=5))
        self.assertEqual(over.volume_used, 15.25)
        self.assertFalse(over.compliant)

    def test_no_rounding(self):
        res = NECLogic.box_fill(BoxFillInput(BoxType.SQUARE_4_11_16, count_14=3, count_12=7, device_count=3))
        self.assertEqual(res.volume_used, 3 * 2.0 + 7 * 2.25 + 3 * 4.5)

    def test_unknown_box_raises(self):
        with self.assertRaises(UnknownLookupKeyError):
            NECLogic.box_fill(BoxFillInput("Gang Box", count_14=1))

    def test_detailed_breakdown(self):
        res = NECLogic.box_fill_detailed(DetailedBoxFillInput(
            box_type=BoxType.SQUARE_4X1_1_2,
            conductors=(Conductor("12", 4), Conductor("8", 0)),
            device_count=1,
            has_clamps=True,
            ground_count=2,
            largest_ground_gauge="12",
        ))
        self.assertEqual(res.largest_conductor, "12")
        self.assertEqual(res.conductor_volume, 9.0)
        self.assertEqual(res.device_volume, 4.5)
        self.assertEqual(res.clamp_volume, 2.25)
        self.assertEqual(res.ground_volume, 2.25)
        self.assertEqual(res.support_volume, 0.0)
        self.assertEqual(res.volume_used, 18.0)
        self.assertTrue(res.compliant)

    def test_detailed_extra_grounds_and_largest_conductor(self):
        res = NECLogic.box_fill_detailed(DetailedBoxFillInput(
            box_type=BoxType.SQUARE_4X2_1_8,
            conductors=(Conductor("14", 2), Conductor("10", 3)),
            device_count=2,
            ground_count=6,
            support_fittings=1,
        ))
        # Devices and fittings size on #10 (2.5); six #14 grounds = 2.0 + 2 * 0.5
        self.assertEqual(res.largest_conductor, "10")
        self.assertEqual(res.device_volume, 10.0)
        self.assertEqual(res.support_volume, 2.5)
        self.assertEqual(res.ground_volume, 3.0)
        self.assertEqual(res.volume_used, 4.0 + 7.5 + 10.0 + 2.5 + 3.0)

    def test_detailed_empty_box_sizes_on_14(self):
        res = NECLogic.box_fill_detailed(DetailedBoxFillInput(BoxType.HANDY_BOX, device_count=1))
        self.assertEqual(res.largest_conductor, "14")
        self.assertEqual(res.device_volume, 4.0)
        self.assertEqual(res.ground_volume, 0.0)

    def test_box_gauge(self):
        ok = NECLogic.box_gauge(NECLogic.box_fill(BoxFillInput(BoxType.SQUARE_4X1_1_2, 2, 4, 1)))
        self.assertAlmostEqual(ok.ratio, 17.5 / 21.0)
        self.assertFalse(ok.over_limit)

        over = NECLogic.box_gauge(NECLogic.box_fill(BoxFillInput(BoxType.HANDY_BOX, 0, 4, 2)))
        self.assertEqual(over.ratio, 1.0)
        self.assertGreater(over.percent, 100.0)
        self.assertTrue(over.over_limit)


class TestTables(unittest.TestCase):

    def test_lookups(self):
        self.assertEqual(get_wire_area("12"), 0.0133)
        self.assertEqual(get_conduit_area(ConduitType.EMT, 0.75), 0.533)
        self.assertEqual(get_springback_factor(ConduitType.RMC), 0.02)
        self.assertEqual(get_min_bend_radius("3/4"), 4.5)
        self.assertEqual(conduit_sizes(ConduitType.RMC), ["0.5", "0.75", "1"])
        self.assertIn("6", wire_gauges(Insulation.XHHW))

    def test_misses_raise(self):
        with self.assertRaises(UnknownLookupKeyError):
            get_wire_area("2")
        with self.assertRaises(UnknownLookupKeyError):
            get_min_bend_radius("4")
        with self.assertRaises(UnknownLookupKeyError):
            get_springback_factor("PVC")


if __name__ == '__main__':
    unittest.main()

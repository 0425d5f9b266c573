from bending.advisory import AngleSelection, PullRun, bend_warnings, springback_target
from bending.logic import BendLogic
from core.converters import format_inches
from core.models import (
    BendKind, BoxFillInput, BoxType, Conductor, ConduitFillInput, ConduitType, Offset, Saddle3, Segmented,
)
from standards.nec_logic import NECLogic


def test_field_job():
    print("--- Reproducing Field Job ---")

    # 3/4 EMT run: kick over a 6" beam, saddle a 2" pipe, 90 into a panel, 4 x #12 + 2 x #10
    trade_size = "3/4"
    material = ConduitType.EMT

    selection = AngleSelection.auto(6, trade_size)
    offset = Offset(6, selection.angle)
    saddle = Saddle3(2, 45)
    sweep = Segmented(radius=18, angle=90, shot_count=6)

    run = PullRun()
    for spec in (offset, saddle, sweep):
        result = BendLogic.compute_bend(spec)
        geometry = BendLogic.synthesize(spec)
        print(BendLogic.describe(spec, result))
        print(f"  Shrink: {format_inches(result.shrinkage)} | Strokes: {len(geometry.strokes)}")
        assert bend_warnings(spec) == []
        assert geometry.kind == spec.kind
        run = run.add(spec.angle)

    print(f"Degrees since pull point: {run.total}")
    assert selection.angle == 30
    assert run.total == 165
    assert run.warnings(180) == []
    assert run.warnings(196) != []

    per_shot = springback_target(sweep.angle, material, BendKind.SEGMENTED, sweep.shot_count)
    assert abs(per_shot - 15.75) < 1e-9

    fill = NECLogic.conduit_fill(ConduitFillInput(
        ConduitType.EMT, trade_size, (Conductor("12", 4), Conductor("10", 2))
    ))
    # 4 * 0.0133 + 2 * 0.0211 = 0.0954 in² / 0.533 = 17.9 %
    print(f"Fill: {fill.fill_percent:.2f}%")
    assert abs(fill.total_conductor_area - 0.0954) < 1e-9
    assert fill.compliant

    box = NECLogic.box_fill(BoxFillInput(BoxType.SQUARE_4X2_1_8, count_14=0, count_12=6, device_count=2))
    print(f"Box: {box.volume_used} / {box.capacity}")
    assert box.volume_used == 22.5
    assert box.compliant


if __name__ == "__main__":
    test_field_job()

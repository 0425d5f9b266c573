import sys
import datetime
import logging
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

import config
from bending.advisory import PullRun, bend_warnings, radius_warnings, springback_summary, suggest_angle
from bending.logic import BendLogic
from core.converters import clamp_angle, format_inches
from core.errors import UnknownLookupKeyError
from core.models import (
    BendKind, BoxFillInput, BoxType, Concentric, Conductor, ConduitFillInput, ConduitType,
    Insulation, Offset, RollingOffset, Saddle3, Saddle4, Segmented,
)
from standards.nec_logic import NECLogic
from standards.nec_tables import conduit_sizes

logger = logging.getLogger(__name__)

BEND_MENU = {
    "1": BendKind.OFFSET,
    "2": BendKind.SADDLE_3,
    "3": BendKind.SADDLE_4,
    "4": BendKind.ROLLING_OFFSET,
    "5": BendKind.CONCENTRIC,
    "6": BendKind.SEGMENTED,
}


def ask_float(prompt, default):
    raw = input(f"{prompt} [{default:g}]: ").strip()
    return float(raw) if raw else float(default)


def ask_int(prompt, default):
    raw = input(f"{prompt} [{default}]: ").strip()
    return int(raw) if raw else int(default)


def ask_angle(default):
    angle, was_clamped = clamp_angle(ask_float("Angle (°)", default))
    if was_clamped:
        print(f"  Angle clamped to {angle:g}°")
    return angle


def get_bend_spec(kind, trade_size):
    d = config.BEND_DEFAULTS[kind.value]
    if kind is BendKind.OFFSET:
        h = ask_float("Offset height (in)", d["height"])
        return Offset(h, ask_angle(suggest_angle(h, trade_size)))
    if kind is BendKind.SADDLE_3:
        h = ask_float("Obstacle height (in)", d["height"])
        return Saddle3(h, ask_angle(suggest_angle(h, trade_size)))
    if kind is BendKind.SADDLE_4:
        h = ask_float("Obstacle height (in)", d["height"])
        w = ask_float("Obstacle width (in)", d["width"])
        return Saddle4(h, w, ask_angle(suggest_angle(h, trade_size)))
    if kind is BendKind.ROLLING_OFFSET:
        rise = ask_float("Rise (in)", d["rise"])
        roll = ask_float("Roll (in)", d["roll"])
        return RollingOffset(rise, roll, ask_angle(d["angle"]))
    if kind is BendKind.CONCENTRIC:
        s = ask_float("Center spacing (in)", d["spacing"])
        n = ask_int("Number of pipes", d["pipe_count"])
        return Concentric(s, ask_angle(d["angle"]), n)
    r = ask_float("Radius (in)", d["radius"])
    n = ask_int("Number of shots", d["shot_count"])
    return Segmented(r, ask_angle(d["angle"]), n)


def print_bend(spec, result, material, trade_size, pull_run):
    rows = [
        ("Travel", result.travel),
        ("Distance", result.run),
        ("Center to Side", result.center_to_side),
        ("True Offset", result.true_offset),
        ("Stagger", result.stagger),
        ("Arc Length", result.arc_length),
        ("Chord Length", result.chord_length),
        ("Shrinkage", result.shrinkage),
    ]
    print("-" * 50)
    for label, value in rows:
        if value is not None:
            print(f"{label:<16} | {value:>8.2f}\" | {format_inches(value)}")
    if result.per_shot_angle is not None:
        print(f"{'Per Shot Angle':<16} | {result.per_shot_angle:>8.2f}°")
    print("-" * 50)
    print(springback_summary(spec.angle, material, spec.kind, getattr(spec, "shot_count", 1)))

    warnings = bend_warnings(spec) + radius_warnings(spec, trade_size) + pull_run.warnings(spec.angle)
    for w in warnings:
        print(f"  ({w.severity.value.upper()}) {w.message}")


def bending_session(material, trade_size):
    bends = []
    pull_run = PullRun()
    while True:
        print("\n--- Bends ---")
        print("(1) Offset  (2) 3-Pt Saddle  (3) 4-Pt Saddle  (4) Rolling Offset  (5) Concentric  (6) Segmented")
        choice = input("Select bend (Enter to finish): ").strip()
        if not choice:
            break
        kind = BEND_MENU.get(choice)
        if kind is None:
            print("Unknown option.")
            continue

        try:
            spec = get_bend_spec(kind, trade_size)
            result = BendLogic.compute_bend(spec)
            print_bend(spec, result, material, trade_size, pull_run)
        except (ValueError, UnknownLookupKeyError) as e:
            print(f"Input error: {e}. Try again.")
            continue

        pull_run = pull_run.add(spec.angle)
        bends.append((spec, result))
        logger.debug("Added %s; %g° since last pull point", kind.value, pull_run.total)
        print(f"Degrees since last pull point: {pull_run.total:g}°")
        if input("Pull point here? (y/n) [n]: ").lower() == "y":
            pull_run = pull_run.reset()
    return bends


def conduit_fill_session():
    print("\n--- Conduit Fill ---")
    print("Conduit: (1) EMT, (2) IMC, (3) RMC")
    c_type = {"2": ConduitType.IMC, "3": ConduitType.RMC}.get(input("Select [1]: ").strip(), ConduitType.EMT)
    print(f"Sizes: {', '.join(conduit_sizes(c_type))}")
    size = input(f"Trade size [{config.DEFAULT_TRADE_SIZE}]: ").strip() or config.DEFAULT_TRADE_SIZE
    insulation = Insulation.XHHW if input("Insulation (1) THHN, (2) XHHW [1]: ").strip() == "2" else Insulation.THHN

    conductors = []
    while True:
        gauge = input("Gauge (e.g. 12, Enter to finish): ").strip()
        if not gauge:
            break
        conductors.append(Conductor(gauge, ask_int(f"  Count of #{gauge}", 1)))

    length_raw = input("Conduit length in inches (Enter to skip): ").strip()
    length = float(length_raw) if length_raw else None

    fill = NECLogic.conduit_fill(ConduitFillInput(c_type, size, tuple(conductors), insulation, length))
    print(f"Fill: {fill.fill_percent:.2f}% of {fill.conduit_internal_area} in² "
          f"(max {fill.max_allowed_percent:g}%{' nipple' if fill.is_nipple else ''}) -> "
          f"{'COMPLIANT' if fill.compliant else 'VIOLATION'}")
    return fill


def box_fill_session():
    print("\n--- Box Fill ---")
    boxes = list(BoxType)
    for i, b in enumerate(boxes, 1):
        print(f"({i}) {b.value}")
    idx = ask_int("Select box", 1)
    box_type = boxes[idx - 1] if 1 <= idx <= len(boxes) else boxes[0]
    d = config.BOX_FILL_DEFAULTS
    box = NECLogic.box_fill(BoxFillInput(
        box_type,
        ask_int("#14 conductors", d["count_14"]),
        ask_int("#12 conductors", d["count_12"]),
        ask_int("Devices", d["device_count"]),
    ))
    print(f"Volume: {box.volume_used:.2f} / {box.capacity:g} in³ -> {'COMPLIANT' if box.compliant else 'VIOLATION'}")
    return box_type, box


def export_to_excel(bends, fill=None, box=None):
    wb = Workbook()

    # --- Sheet 1: Bends ---
    ws1 = wb.active
    ws1.title = "Bends"

    headers = ["Bend", "Angle", "Travel", "Distance", "Shrinkage", "Summary"]
    ws1.append(headers)

    header_fill = PatternFill(start_color="DDDDDD", end_color="DDDDDD", fill_type="solid")
    header_font = Font(bold=True)
    for cell in ws1[1]:
        cell.font = header_font
        cell.fill = header_fill

    for spec, result in bends:
        ws1.append([
            spec.kind.value,
            spec.angle,
            round(result.travel, 2) if result.travel is not None else None,
            round(result.run, 2) if result.run is not None else None,
            round(result.shrinkage, 2),
            BendLogic.describe(spec, result),
        ])

    for col in ws1.columns:
        ws1.column_dimensions[col[0].column_letter].width = 15
    ws1.column_dimensions["F"].width = 60

    # --- Sheet 2: Fill ---
    ws2 = wb.create_sheet("Fill")
    ws2.append(["FILL CALCULATIONS (NEC Chapter 9 / 314.16)"])
    ws2.append(["Date:", datetime.datetime.now().strftime("%Y-%m-%d %H:%M")])
    ws2.append([])
    ws2.append(["Parameter", "Value"])
    if fill is not None:
        ws2.append(["Conductor area (in²)", round(fill.total_conductor_area, 4)])
        ws2.append(["Conduit area (in²)", fill.conduit_internal_area])
        ws2.append(["Fill (%)", round(fill.fill_percent, 2)])
        ws2.append(["Max allowed (%)", fill.max_allowed_percent])
        ws2.append(["Conduit fill", "COMPLIANT" if fill.compliant else "VIOLATION"])
    if box is not None:
        box_type, box_res = box
        ws2.append(["Box", box_type.value])
        ws2.append(["Box volume used (in³)", box_res.volume_used])
        ws2.append(["Box capacity (in³)", box_res.capacity])
        ws2.append(["Box fill", "COMPLIANT" if box_res.compliant else "VIOLATION"])
    ws2.column_dimensions["A"].width = 28

    filename = f"Conduit_Report_{datetime.datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx"
    wb.save(filename)
    print(f"\n[INFO] Excel saved: {filename}")
    return filename


def main():
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)

    print("==========================================================")
    print(f" {config.APP_NAME.upper()}")
    print("==========================================================")

    print("Material: (1) EMT, (2) IMC, (3) RMC")
    material = {"2": ConduitType.IMC, "3": ConduitType.RMC}.get(input("Select [1]: ").strip(), ConduitType.EMT)
    trade_size = input(f"Bender trade size [{config.DEFAULT_TRADE_SIZE}]: ").strip() or config.DEFAULT_TRADE_SIZE

    bends = bending_session(material, trade_size)

    fill = box = None
    try:
        if input("\nCheck conduit fill? (y/n): ").lower() == "y":
            fill = conduit_fill_session()
        if input("\nCheck box fill? (y/n): ").lower() == "y":
            box = box_fill_session()
    except (ValueError, UnknownLookupKeyError) as e:
        print(f"Input error: {e}")

    if not bends and fill is None and box is None:
        print("Nothing calculated.")
        sys.exit()

    if input("\nExport report to Excel? (y/n): ").lower() == "y":
        export_to_excel(bends, fill, box)


if __name__ == "__main__":
    main()

import io
import logging

import pandas as pd
import streamlit as st

import config
from bending.advisory import (
    AngleSelection, PullRun, bend_warnings, level_status, radius_warnings, springback_summary,
)
from bending.logic import BendLogic
from bending.paths import render_svg
from core.converters import clamp_angle, format_decimal, format_inches
from core.errors import InvalidParameterError, UnknownLookupKeyError
from core.models import (
    BendKind, BoxFillInput, BoxType, Concentric, Conductor, ConduitFillInput, ConduitType,
    DetailedBoxFillInput, Insulation, LevelStatus, Offset, RollingOffset, Saddle3, Saddle4,
    Segmented, Severity,
)
from standards.nec_logic import NECLogic
from standards.nec_tables import (
    BOX_FILL_12, BOX_FILL_14, BOX_FILL_DEVICE, conduit_sizes, get_box_capacity, wire_gauges,
)

logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
logger = logging.getLogger(__name__)

# --- Page Config ---
st.set_page_config(
    page_title=config.APP_NAME,
    page_icon=config.PAGE_ICON,
    layout="wide",
    initial_sidebar_state="expanded"
)

# --- Custom CSS ---
st.markdown("""
<style>
    .main-header { font-family: 'Inter', sans-serif; color: #1E3A8A; font-weight: 700; }
    .verdict-ok { color: #16a34a; font-weight: 800; letter-spacing: .15em; text-align: center; }
    .verdict-bad { color: #dc2626; font-weight: 800; letter-spacing: .15em; text-align: center; }
    .stDataFrame { border-radius: 10px; overflow: hidden; }
</style>
""", unsafe_allow_html=True)

BEND_LABELS = {
    BendKind.OFFSET: "Offset",
    BendKind.SADDLE_3: "3-Point Saddle",
    BendKind.SADDLE_4: "4-Point Saddle",
    BendKind.ROLLING_OFFSET: "Rolling Offset",
    BendKind.CONCENTRIC: "Concentric (Parallel)",
    BendKind.SEGMENTED: "Segmented",
}
CONDUCTOR_COLUMNS = ["Gauge", "Count"]
JOB_COLUMNS = ["Bend", "Summary", "Travel", "Shrinkage", "Angle"]


def conductors_frame(pairs):
    return pd.DataFrame([{"Gauge": g, "Count": c} for g, c in pairs], columns=CONDUCTOR_COLUMNS)


# --- Session State Init ---
def reset_bend(kind: BendKind):
    for field, value in config.BEND_DEFAULTS[kind.value].items():
        st.session_state[f"{kind.value}_{field}"] = value
    st.session_state.pop(f"angle_sel_{kind.value}", None)


def reset_conduit_fill():
    d = config.CONDUIT_FILL_DEFAULTS
    st.session_state.fill_type = d["conduit_type"]
    st.session_state.fill_size = d["conduit_size"]
    st.session_state.fill_conductors = conductors_frame(d["conductors"])


def reset_box_fill():
    for field, value in config.BOX_FILL_DEFAULTS.items():
        st.session_state[f"box_{field}"] = value


if "initialized" not in st.session_state:
    for k in BendKind:
        reset_bend(k)
    reset_conduit_fill()
    reset_box_fill()
    st.session_state.material = config.DEFAULT_MATERIAL
    st.session_state.trade_size = config.DEFAULT_TRADE_SIZE
    st.session_state.pull_run = PullRun()
    st.session_state.job_log = []
    st.session_state.initialized = True


def fmt_in(value) -> str:
    if value is None:
        return "-"
    if st.session_state.get("fractions", True):
        return format_inches(value)
    return format_decimal(value) + '"'


def show_warnings(warnings):
    for w in warnings:
        if w.severity is Severity.ERROR:
            st.error(w.message, icon="🚫")
        else:
            st.warning(w.message, icon="⚠️")


def angle_input(kind: BendKind, height: float) -> float:
    """Angle slider for the offset family: follows the suggestion until moved by hand."""
    sel_key, widget_key = f"angle_sel_{kind.value}", f"{kind.value}_angle"
    sel = st.session_state.get(sel_key)
    if sel is None:
        sel = AngleSelection.auto(height, st.session_state.trade_size)
    else:
        sel = sel.with_height(height).with_trade_size(st.session_state.trade_size)
    st.session_state[sel_key] = sel
    if sel.is_auto:
        st.session_state[widget_key] = float(sel.angle)

    def on_manual():
        st.session_state[sel_key] = st.session_state[sel_key].with_manual_angle(st.session_state[widget_key])

    c_a, c_b = st.columns([4, 1])
    angle = c_a.slider("Angle (°)", 10.0, 90.0, step=0.5, key=widget_key, on_change=on_manual)
    c_b.caption("Mode")
    if sel.is_auto:
        c_b.markdown("**AUTO**")
    elif c_b.button("Auto", key=f"auto_{kind.value}"):
        st.session_state[sel_key] = AngleSelection.auto(height, st.session_state.trade_size)
        st.rerun()
    return angle


def free_angle(kind: BendKind) -> float:
    key = f"{kind.value}_angle"
    raw = st.number_input("Angle (°)", step=0.5, key=key)
    angle, was_clamped = clamp_angle(raw)
    if was_clamped:
        st.caption(f"Angle clamped to {angle:g}°")
    return angle


def bend_inputs(kind: BendKind):
    p = kind.value
    if kind is BendKind.OFFSET:
        h = st.number_input("Offset Height (in)", min_value=0.1, step=0.25, key=f"{p}_height")
        return Offset(height=h, angle=angle_input(kind, h))
    if kind is BendKind.SADDLE_3:
        h = st.number_input("Obstacle Height (in)", min_value=0.1, step=0.25, key=f"{p}_height")
        return Saddle3(height=h, angle=angle_input(kind, h))
    if kind is BendKind.SADDLE_4:
        c1, c2 = st.columns(2)
        h = c1.number_input("Obstacle Height (in)", min_value=0.1, step=0.25, key=f"{p}_height")
        w = c2.number_input("Obstacle Width (in)", min_value=0.1, step=0.25, key=f"{p}_width")
        return Saddle4(height=h, width=w, angle=angle_input(kind, h))
    if kind is BendKind.ROLLING_OFFSET:
        c1, c2 = st.columns(2)
        rise = c1.number_input("Rise (in)", min_value=0.1, step=0.25, key=f"{p}_rise")
        roll = c2.number_input("Roll (in)", min_value=0.1, step=0.25, key=f"{p}_roll")
        return RollingOffset(rise=rise, roll=roll, angle=free_angle(kind))
    if kind is BendKind.CONCENTRIC:
        c1, c2 = st.columns(2)
        s = c1.number_input("Center Spacing (in)", min_value=0.1, step=0.125, key=f"{p}_spacing")
        n = c2.number_input("Pipes", min_value=2, max_value=12, step=1, key=f"{p}_pipe_count")
        return Concentric(spacing=s, angle=free_angle(kind), pipe_count=int(n))
    c1, c2 = st.columns(2)
    r = c1.number_input("Radius (in)", min_value=0.1, step=1.0, key=f"{p}_radius")
    n = c2.number_input("Shots", min_value=2, max_value=60, step=1, key=f"{p}_shot_count")
    return Segmented(radius=r, angle=free_angle(kind), shot_count=int(n))


def result_rows(result):
    rows = [
        ("Travel", result.travel),
        ("Distance (Run)", result.run),
        ("Center to Side", result.center_to_side),
        ("True Offset", result.true_offset),
        ("Stagger", result.stagger),
        ("Arc Length", result.arc_length),
        ("Chord Length", result.chord_length),
        ("Developed Length", result.developed_length),
        ("Shrinkage", result.shrinkage),
    ]
    data = [{"Measurement": label, "Value": fmt_in(v)} for label, v in rows if v is not None]
    if result.per_shot_angle is not None:
        data.append({"Measurement": "Per Shot Angle", "Value": f"{result.per_shot_angle:.2f}°"})
    return pd.DataFrame(data)


def bend_panel(kind: BendKind):
    try:
        spec = bend_inputs(kind)
        result = BendLogic.compute_bend(spec)
        geometry = BendLogic.synthesize(spec)
    except (InvalidParameterError, UnknownLookupKeyError) as e:
        logger.warning("Rejected input: %s", e)
        st.error(f"Invalid input: {e}")
        return

    col_res, col_draw = st.columns([2, 3])
    with col_res:
        st.dataframe(result_rows(result), hide_index=True, use_container_width=True)
        material = ConduitType(st.session_state.material)
        shots = getattr(spec, "shot_count", 1)
        st.info(springback_summary(spec.angle, material, kind, shots))

        warnings = bend_warnings(spec)
        try:
            warnings += radius_warnings(spec, st.session_state.trade_size)
        except UnknownLookupKeyError as e:
            st.error(str(e))
        warnings += st.session_state.pull_run.warnings(spec.angle)
        show_warnings(warnings)

        summary = BendLogic.describe(spec, result)
        st.code(summary, language=None)

        if st.button("➕ Add to Job", use_container_width=True):
            st.session_state.job_log.append({
                "Bend": BEND_LABELS[kind],
                "Summary": summary,
                "Travel": result.travel,
                "Shrinkage": round(result.shrinkage, 4),
                "Angle": spec.angle,
            })
        if st.button("🔁 Count toward pull", use_container_width=True):
            st.session_state.pull_run = st.session_state.pull_run.add(spec.angle)
            st.rerun()

    with col_draw:
        st.markdown(render_svg(geometry), unsafe_allow_html=True)


# --- Helper: Export Excel ---
def to_excel(sheets):
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine='openpyxl') as writer:
        for name, df in sheets.items():
            if df is not None and not df.empty:
                df.to_excel(writer, index=False, sheet_name=name)
    return output.getvalue()


# --- Sidebar ---
with st.sidebar:
    st.title("Setup")
    st.selectbox("Conduit Material", [t.value for t in ConduitType], key="material")
    st.selectbox("Trade Size (in)", config.BENDER_TRADE_SIZES, key="trade_size")
    st.toggle("Show fractions (1/16\")", True, key="fractions")

    st.markdown("---")
    st.subheader("🔁 Pull Point Tracker")
    run = st.session_state.pull_run
    st.metric("Degrees since pull point", f"{run.total:g}° / {config.MAX_DEGREES_BETWEEN_PULLS:g}°")
    if st.button("Reset (new pull point)", use_container_width=True):
        st.session_state.pull_run = run.reset()
        st.rerun()

    st.markdown("---")
    st.subheader("📐 Digital Level")
    level_target = st.number_input("Target angle (°)", 0.0, 90.0, 30.0, 0.5)
    tilt = st.number_input("Current reading (°)", -180.0, 180.0, 0.0, 0.1)
    status = level_status(tilt, level_target)
    if status is LevelStatus.EXACT:
        st.success("On target")
    elif status is LevelStatus.CLOSE:
        st.warning("Close")
    else:
        st.info("Keep bending")

# --- Main Area ---
st.markdown(f"<h1 class='main-header'>{config.PAGE_ICON} {config.APP_NAME}</h1>", unsafe_allow_html=True)
st.markdown("---")

tab_bend, tab_fill, tab_box = st.tabs(["🔧 Bending", "🧵 Conduit Fill", "📦 Box Fill"])

with tab_bend:
    c_kind, c_reset = st.columns([4, 1])
    kind = c_kind.selectbox("Bend Type", list(BendKind), format_func=BEND_LABELS.get)
    c_reset.write("")
    if c_reset.button("↺ Reset", key="reset_bend", use_container_width=True):
        reset_bend(kind)
        st.rerun()

    bend_panel(kind)

    st.markdown("### 📋 Job Sheet")
    job_df = pd.DataFrame(st.session_state.job_log, columns=JOB_COLUMNS)
    st.dataframe(job_df, hide_index=True, use_container_width=True)
    if not job_df.empty:
        j1, j2 = st.columns([1, 4])
        if j1.button("🗑️ Clear", use_container_width=True):
            st.session_state.job_log = []
            st.rerun()
        j2.download_button(
            "📥 Download Job Sheet (Excel)",
            data=to_excel({"Bends": job_df}),
            file_name="bend_job_sheet.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

with tab_fill:
    c1, c2, c3, c4 = st.columns([1, 1, 1, 1])
    c_type = c1.selectbox("Conduit", [t.value for t in ConduitType], key="fill_type")
    sizes = conduit_sizes(ConduitType(c_type))
    if st.session_state.fill_size not in sizes:
        st.session_state.fill_size = sizes[0]
    c_size = c2.selectbox("Trade Size (in)", sizes, key="fill_size")
    insulation = c3.selectbox("Insulation", [i.value for i in Insulation])
    nipple = c4.toggle("Nipple (≤ 24\")")
    length = c4.number_input("Length (in)", 1.0, 600.0, 12.0, 1.0) if nipple else None

    st.caption("One row per gauge. Edit the table to recalculate.")
    gauges = wire_gauges(Insulation(insulation))
    edited = st.data_editor(
        st.session_state.fill_conductors,
        key="fill_editor",
        num_rows="dynamic",
        use_container_width=True,
        column_config={
            "Gauge": st.column_config.SelectboxColumn(options=gauges, required=True),
            "Count": st.column_config.NumberColumn(min_value=0, step=1, required=True),
        },
    )
    if st.button("↺ Reset", key="reset_fill"):
        reset_conduit_fill()
        st.rerun()

    try:
        rows = edited.dropna()
        conductors = tuple(Conductor(str(r["Gauge"]), int(r["Count"])) for _, r in rows.iterrows())
        fill = NECLogic.conduit_fill(ConduitFillInput(
            conduit_type=ConduitType(c_type),
            conduit_size=c_size,
            conductors=conductors,
            insulation=Insulation(insulation),
            conduit_length=length,
        ))
    except (InvalidParameterError, UnknownLookupKeyError) as e:
        logger.warning("Rejected input: %s", e)
        st.error(f"Invalid input: {e}")
        fill = None

    if fill is not None:
        gauge = NECLogic.conduit_gauge(fill)
        m1, m2, m3, m4 = st.columns(4)
        m1.metric("Conductors", fill.conductor_count)
        m2.metric("Wire Area", f"{fill.total_conductor_area:.4f} in²")
        m3.metric("Fill", f"{fill.fill_percent:.1f} %")
        m4.metric("Allowed", f"{fill.max_allowed_percent:g} %" + (" (nipple)" if fill.is_nipple else ""))

        color = "#dc2626" if gauge.over_limit else "#3b82f6"
        r = gauge.outer_radius
        st.markdown(
            f'<svg viewBox="{-r - 5} {-r - 5} {2 * r + 10} {2 * r + 10}" width="180">'
            f'<circle r="{r}" fill="none" stroke="#94a3b8" stroke-width="3"/>'
            f'<circle r="{gauge.fill_radius:.2f}" fill="{color}" opacity="0.7"/></svg>',
            unsafe_allow_html=True,
        )
        verdict = "verdict-ok" if fill.compliant else "verdict-bad"
        text = "COMPLIANT" if fill.compliant else "VIOLATION - UNDERSIZED"
        st.markdown(f"<p class='{verdict}'>{text}</p>", unsafe_allow_html=True)

        fill_df = pd.DataFrame([
            {"Parameter": "Conduit", "Value": f"{c_type} {c_size}\""},
            {"Parameter": "Insulation", "Value": insulation},
            {"Parameter": "Conductor Area (in²)", "Value": round(fill.total_conductor_area, 4)},
            {"Parameter": "Conduit Area (in²)", "Value": fill.conduit_internal_area},
            {"Parameter": "Fill (%)", "Value": round(fill.fill_percent, 2)},
            {"Parameter": "Max Allowed (%)", "Value": fill.max_allowed_percent},
            {"Parameter": "Max Allowed Area (in²)", "Value": round(fill.max_allowed_area, 4)},
            {"Parameter": "Compliant", "Value": "YES" if fill.compliant else "NO"},
        ])
        st.download_button(
            "📥 Download Fill Report (Excel)",
            data=to_excel({"Conduit Fill": fill_df, "Conductors": rows}),
            file_name="conduit_fill.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

with tab_box:
    mode = st.radio("Method", ["Quick", "Detailed"], horizontal=True)
    box_type = st.selectbox(
        "Box", [b.value for b in BoxType], key="box_box_type",
        format_func=lambda v: f"{v} ({get_box_capacity(BoxType(v)):g} in³)",
    )

    try:
        if mode == "Quick":
            b1, b2, b3 = st.columns(3)
            n14 = b1.number_input("#14 conductors", 0, 50, step=1, key="box_count_14")
            n12 = b2.number_input("#12 conductors", 0, 50, step=1, key="box_count_12")
            dev = b3.number_input("Devices", 0, 10, step=1, key="box_device_count")
            if st.button("↺ Reset", key="reset_box"):
                reset_box_fill()
                st.rerun()
            box = NECLogic.box_fill(BoxFillInput(BoxType(box_type), int(n14), int(n12), int(dev)))
            breakdown = pd.DataFrame([
                {"Item": "#14 conductors", "Volume (in³)": n14 * BOX_FILL_14},
                {"Item": "#12 conductors", "Volume (in³)": n12 * BOX_FILL_12},
                {"Item": "Devices", "Volume (in³)": dev * BOX_FILL_DEVICE},
            ])
        else:
            st.caption("Conductors entering the box, one row per gauge.")
            box_rows = st.data_editor(
                conductors_frame([("14", 0), ("12", 4)]),
                key="box_editor",
                num_rows="dynamic",
                use_container_width=True,
                column_config={
                    "Gauge": st.column_config.SelectboxColumn(options=wire_gauges(), required=True),
                    "Count": st.column_config.NumberColumn(min_value=0, step=1, required=True),
                },
            ).dropna()
            d1, d2, d3, d4 = st.columns(4)
            dev = d1.number_input("Devices", 0, 10, 1, 1)
            grounds = d2.number_input("Grounds", 0, 20, 2, 1)
            g_gauge = d3.selectbox("Largest ground", wire_gauges())
            supports = d4.number_input("Support fittings", 0, 4, 0, 1)
            clamps = st.toggle("Internal cable clamps")
            box = NECLogic.box_fill_detailed(DetailedBoxFillInput(
                box_type=BoxType(box_type),
                conductors=tuple(Conductor(str(r["Gauge"]), int(r["Count"])) for _, r in box_rows.iterrows()),
                device_count=int(dev),
                has_clamps=clamps,
                ground_count=int(grounds),
                largest_ground_gauge=g_gauge,
                support_fittings=int(supports),
            ))
            breakdown = pd.DataFrame([
                {"Item": "Conductors", "Volume (in³)": box.conductor_volume},
                {"Item": f"Devices (2 × #{box.largest_conductor})", "Volume (in³)": box.device_volume},
                {"Item": "Clamps", "Volume (in³)": box.clamp_volume},
                {"Item": "Grounds", "Volume (in³)": box.ground_volume},
                {"Item": "Support fittings", "Volume (in³)": box.support_volume},
            ])
    except (InvalidParameterError, UnknownLookupKeyError) as e:
        logger.warning("Rejected input: %s", e)
        st.error(f"Invalid input: {e}")
        box = None

    if box is not None:
        gauge = NECLogic.box_gauge(box)
        st.progress(gauge.ratio, text=f"{box.volume_used:.2f} / {box.capacity:g} in³ ({gauge.percent:.0f} %)")
        st.dataframe(breakdown, hide_index=True, use_container_width=True)
        verdict = "verdict-ok" if box.compliant else "verdict-bad"
        text = "COMPLIANT" if box.compliant else "VIOLATION - UNDERSIZED"
        st.markdown(f"<p class='{verdict}'>{text}</p>", unsafe_allow_html=True)

        st.download_button(
            "📥 Download Box Fill (Excel)",
            data=to_excel({"Box Fill": breakdown}),
            file_name="box_fill.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

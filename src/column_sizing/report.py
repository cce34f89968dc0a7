"""
Result export and PDF calculation report for column sizing.

``results_to_dict`` gives a JSON-ready summary in engineering units;
``generate_report`` produces the calculation report using reportlab.
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from . import __version__
from .column import ColumnDesignProblem
from .models import ColumnInput
from .solver import IterationRecord
from .utils import mm_to_m, n_to_kn, nmm_to_knm


_INK = colors.HexColor("#1F3A5F")
_ACCENT = colors.HexColor("#4A6FA5")
_STRIPE = colors.HexColor("#EEF2F7")
_PASS = colors.HexColor("#D5F5E3")
_FAIL = colors.HexColor("#FADBD8")

PAGE_W, PAGE_H = A4
_MARGIN = 20 * mm
_FRAME_W = PAGE_W - 2 * _MARGIN

_BASE_TABLE_STYLE = [
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("BACKGROUND", (0, 0), (-1, 0), _INK),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, _STRIPE]),
    ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
    ("LINEBELOW", (0, 0), (-1, -1), 0.25, _ACCENT),
    ("BOX", (0, 0), (-1, -1), 0.6, _INK),
]


# ── result export ────────────────────────────────────────────────────────

def _knm(val: Optional[float]) -> Optional[float]:
    return None if val is None else nmm_to_knm(val)


def _kn(val: Optional[float]) -> Optional[float]:
    return None if val is None else n_to_kn(val)


def results_to_dict(
    problem: ColumnDesignProblem,
    history: Sequence[IterationRecord] = (),
) -> dict[str, Any]:
    """Summarise a solved problem in mm, mm2, kN and kN.m."""
    return {
        "column_id": problem.label,
        "input": {
            "M1_kNm": nmm_to_knm(problem.m1),
            "M2_kNm": nmm_to_knm(problem.m2),
            "NEd_kN": n_to_kn(problem.NEd),
            "fck_MPa": problem.fck,
            "rho": problem.rho,
            "l0_m": mm_to_m(problem.l0),
            "phi_eff": problem.phi_eff,
            "M0Ed_kNm": nmm_to_knm(problem.M0Ed),
        },
        "result": {
            "validity": problem.validity,
            "phase": problem.phase,
            "iterations": problem.iterations,
            "width_mm": problem.width,
            "height_mm": problem.height,
            "As_per_layer_mm2": problem.As,
            "MRd_kNm": _knm(problem.MRd),
            "NRd_kN": _kn(problem.NRd),
            "M0Ed_M2_kNm": _knm(problem.M0Ed_M2),
        },
        "history": [
            {
                "phase": rec.phase,
                "count": rec.count,
                "width_mm": rec.width,
                "NRd_kN": n_to_kn(rec.NRd),
                "MRd_kNm": _knm(rec.moment),
                "target_kNm": _knm(rec.target),
                "factor": rec.factor,
                "divisor": rec.divisor,
            }
            for rec in history
        ],
    }


# ── layout helpers ───────────────────────────────────────────────────────

def _styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()["Normal"]
    return {
        "body": base,
        "title": ParagraphStyle(
            "ColumnTitle", parent=base, fontName="Helvetica-Bold",
            fontSize=16, leading=20, alignment=TA_CENTER,
            textColor=_INK, spaceAfter=4 * mm,
        ),
        "section": ParagraphStyle(
            "ColumnSection", parent=base, fontName="Helvetica-Bold",
            fontSize=12, leading=15, textColor=_INK,
            spaceBefore=5 * mm, spaceAfter=2 * mm,
        ),
        "note": ParagraphStyle(
            "ColumnNote", parent=base, fontSize=7.5, leading=9, textColor=_ACCENT,
        ),
    }


def _table(rows: list[list[str]], widths: Optional[list[float]] = None, size: float = 9) -> Table:
    if widths is None:
        widths = [_FRAME_W / len(rows[0])] * len(rows[0])
    table = Table(rows, colWidths=widths, repeatRows=1)
    table.setStyle(TableStyle(_BASE_TABLE_STYLE + [("FONTSIZE", (0, 0), (-1, -1), size)]))
    return table


def _fmt(value: Optional[float], decimals: int = 1, unit: str = "") -> str:
    if value is None:
        return "-"
    return f"{value:.{decimals}f} {unit}".rstrip()


def _footer(canvas, doc):
    canvas.saveState()
    canvas.setFont("Helvetica", 7.5)
    canvas.setFillColor(_ACCENT)
    canvas.drawString(_MARGIN, 12 * mm, f"column-sizing {__version__} | NEN-EN 1992-1-1")
    canvas.drawRightString(PAGE_W - _MARGIN, 12 * mm, str(doc.page))
    canvas.restoreState()


# ── report ───────────────────────────────────────────────────────────────

def generate_report(
    output_path: str,
    config: ColumnInput,
    problem: ColumnDesignProblem,
    history: Sequence[IterationRecord] = (),
) -> None:
    """
    Write the column sizing calculation report as a PDF.

    Args:
        output_path: Destination of the PDF.
        config: Validated input the problem was built from.
        problem: The solved problem.
        history: Solver iteration records; the history table is left out
            when empty.
    """
    styles = _styles()
    story: List = _title_block(config, styles)
    story += _input_block(problem, styles)
    story += _result_block(problem, styles)
    if history:
        story += _history_block(history, styles)

    SimpleDocTemplate(
        str(output_path),
        pagesize=A4,
        leftMargin=_MARGIN,
        rightMargin=_MARGIN,
        topMargin=25 * mm,
        bottomMargin=25 * mm,
        title=f"Column {config.project.column_id}",
    ).build(story, onFirstPage=_footer, onLaterPages=_footer)


def _title_block(config: ColumnInput, styles: dict) -> list:
    proj = config.project
    meta = Table(
        [
            ["Project", proj.name, "Column", proj.column_id],
            ["Designer", proj.designer, "Checker", proj.checker],
            ["Date", proj.date, "", ""],
        ],
        colWidths=[25 * mm, 60 * mm, 25 * mm, 60 * mm],
    )
    meta.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
        ("FONTNAME", (2, 0), (2, -1), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
    ]))
    return [
        Paragraph("Minimum column section", styles["title"]),
        meta,
        Spacer(1, 4 * mm),
    ]


def _input_block(problem: ColumnDesignProblem, styles: dict) -> list:
    rows = [
        ["Quantity", "Value"],
        ["End moment M1", _fmt(nmm_to_knm(problem.m1), 1, "kN.m")],
        ["End moment M2", _fmt(nmm_to_knm(problem.m2), 1, "kN.m")],
        ["Axial force NEd", _fmt(n_to_kn(problem.NEd), 1, "kN")],
        ["Equivalent moment M0Ed (5.8.8.2)", _fmt(nmm_to_knm(problem.M0Ed), 1, "kN.m")],
        ["Concrete fck / fcd", f"{problem.fck:.0f} / {problem.fcd:.2f} MPa"],
        ["Reinforcement ratio", _fmt(problem.rho * 100.0, 2, "%")],
        ["Effective length l0", _fmt(mm_to_m(problem.l0), 2, "m")],
        ["Creep ratio phi_eff", _fmt(problem.phi_eff, 2)],
    ]
    return [
        Paragraph("1  Design input", styles["section"]),
        _table(rows, [80 * mm, 50 * mm]),
    ]


def _result_block(problem: ColumnDesignProblem, styles: dict) -> list:
    heading = Paragraph("2  Minimum section", styles["section"])
    if not problem.is_assigned:
        return [heading, Paragraph(
            "The trial width diverged; no section satisfies the checks.",
            styles["body"],
        )]

    rows = [
        ["Quantity", "Value"],
        ["Width x height", f"{problem.width:.0f} x {problem.height:.0f} mm"],
        ["As per layer (2 layers)", _fmt(problem.As, 0, "mm2")],
        ["NRd", _fmt(_kn(problem.NRd), 1, "kN")],
        ["MRd", _fmt(_knm(problem.MRd), 1, "kN.m")],
        ["max(M0Ed + M2, M02, M01 + 0.5 M2)", _fmt(_knm(problem.M0Ed_M2), 1, "kN.m")],
        ["Sized by", f"{problem.phase} search, {problem.iterations} iterations"],
        ["Status", "OK" if problem.validity else "NOT VALID"],
    ]
    table = _table(rows, [80 * mm, 50 * mm])
    table.setStyle(TableStyle([
        ("BACKGROUND", (1, -1), (1, -1), _PASS if problem.validity else _FAIL),
    ]))
    return [heading, table]


def _history_block(history: Sequence[IterationRecord], styles: dict) -> list:
    rows = [["Phase", "#", "b [mm]", "NRd [kN]", "MRd [kN.m]", "Target [kN.m]", "Factor", "Div"]]
    rows += [
        [
            rec.phase,
            str(rec.count),
            _fmt(rec.width),
            _fmt(n_to_kn(rec.NRd)),
            _fmt(_knm(rec.moment)),
            _fmt(_knm(rec.target)),
            _fmt(rec.factor, 4),
            str(rec.divisor),
        ]
        for rec in history
    ]
    return [
        Paragraph("3  Iteration history", styles["section"]),
        Paragraph("Factor is the width correction applied after each trial.", styles["note"]),
        _table(rows, size=7.5),
    ]

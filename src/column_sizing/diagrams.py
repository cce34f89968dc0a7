"""
Cross-section and convergence diagrams using Matplotlib.
"""

from __future__ import annotations

import io
import math
from pathlib import Path
from typing import Sequence

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
from matplotlib.patches import Circle, FancyBboxPatch  # noqa: E402

from .column import ColumnDesignProblem  # noqa: E402
from .solver import IterationRecord  # noqa: E402

STANDARD_BAR_SIZES = [12, 16, 20, 25, 32, 40]  # mm


def bar_arrangement(As: float, width: float, a_offset: float) -> tuple[int, int]:
    """Pick a bar count and diameter for one layer of area ``As``.

    Uses the smallest standard diameter whose bars fit in the layer with a
    clear spacing of at least one diameter (and 20 mm).

    Returns
    -------
    (n_bars, bar_dia)

    Raises
    ------
    ValueError
        If the layer dimensions are not finite and positive.
    """
    if not all(math.isfinite(v) and v > 0 for v in (As, width, width - 2.0 * a_offset)):
        raise ValueError(
            f"cannot arrange bars for As={As} mm2 in a {width} mm wide layer"
        )
    available = width - 2.0 * a_offset
    for dia in STANDARD_BAR_SIZES:
        n = max(2, math.ceil(As / (math.pi * dia**2 / 4.0)))
        clear = (available - n * dia) / (n - 1) if n > 1 else available
        if clear >= max(dia, 20.0):
            return n, dia
    dia = STANDARD_BAR_SIZES[-1]
    return max(2, math.ceil(As / (math.pi * dia**2 / 4.0))), dia


def plot_cross_section(problem: ColumnDesignProblem, return_figure: bool = True):
    """
    Draw the designed column section with its two reinforcement layers.

    Args:
        problem: A solved problem (``width`` and ``height`` assigned).
        return_figure: If True, return figure; if False, return PNG bytes

    Returns:
        Matplotlib figure or PNG bytes
    """
    if not problem.is_assigned:
        raise ValueError("problem has no assigned section to draw")

    width = problem.width
    depth = problem.height
    offset = problem.a * depth
    n_bars, dia = bar_arrangement(problem.As, width, offset)

    fig, ax = plt.subplots(1, 1, figsize=(6, 6))

    concrete = FancyBboxPatch(
        (0, 0), width, depth,
        boxstyle="round,pad=0,rounding_size=5",
        linewidth=2, edgecolor='#2c3e50', facecolor='#ecf0f1'
    )
    ax.add_patch(concrete)

    # Layers at a*h from the bottom and top faces
    xs = np.linspace(offset, width - offset, n_bars)
    for y, face, edge in ((offset, '#e74c3c', '#c0392b'),
                          (depth - offset, '#3498db', '#2980b9')):
        for x in xs:
            ax.add_patch(Circle((x, y), dia / 2, facecolor=face, edgecolor=edge, linewidth=1))
        ax.text(width / 2, y + (dia if y > depth / 2 else -dia) * 1.5,
                f'{n_bars}-{dia}φ  (As = {problem.As:.0f} mm²)',
                ha='center', va='center', fontsize=9, color=edge, fontweight='bold')

    dim_offset = 0.06 * max(width, depth)
    ax.annotate(
        '', xy=(0, -dim_offset), xytext=(width, -dim_offset),
        arrowprops=dict(arrowstyle='<->', color='black', lw=1)
    )
    ax.text(width / 2, -dim_offset * 1.5, f'{width:.0f} mm',
            ha='center', va='top', fontsize=10, fontweight='bold')
    ax.annotate(
        '', xy=(width + dim_offset, 0), xytext=(width + dim_offset, depth),
        arrowprops=dict(arrowstyle='<->', color='black', lw=1)
    )
    ax.text(width + dim_offset * 1.3, depth / 2, f'{depth:.0f} mm',
            ha='left', va='center', fontsize=10, fontweight='bold', rotation=90)

    margin = 3 * dim_offset
    ax.set_xlim(-margin, width + margin)
    ax.set_ylim(-margin, depth + margin)
    ax.set_aspect('equal')
    ax.axis('off')

    status = "valid" if problem.validity else "NOT valid"
    ax.set_title(f'Column {problem.label} ({status})', fontsize=12, fontweight='bold', pad=20)

    plt.tight_layout()
    return _finish(fig, return_figure)


def plot_convergence(history: Sequence[IterationRecord], return_figure: bool = True):
    """
    Plot trial width and moment ratio per solver iteration.

    Args:
        history: Solver iteration records.
        return_figure: If True, return figure; if False, return PNG bytes
    """
    fig, (ax_w, ax_m) = plt.subplots(2, 1, figsize=(8, 6), sharex=True)

    steps = np.arange(len(history))
    widths = np.array([rec.width for rec in history])
    colours = ['#2980b9' if rec.phase == "axial" else '#c0392b' for rec in history]

    ax_w.plot(steps, widths, color='#7f8c8d', lw=1)
    ax_w.scatter(steps, widths, c=colours, s=18, zorder=3)
    ax_w.set_ylabel('Trial width [mm]')
    ax_w.grid(True, alpha=0.3)

    joint = [(k, rec) for k, rec in enumerate(history) if rec.target is not None]
    if joint:
        ks = [k for k, _ in joint]
        ratio = [abs(rec.moment) / rec.target if rec.target else math.nan for _, rec in joint]
        ax_m.plot(ks, ratio, marker='o', ms=4, color='#c0392b')
        ax_m.axhspan(0.95, 0.99, color='#27ae60', alpha=0.2, label='Convergence band')
        ax_m.axhline(1.0, color='black', lw=0.8, ls='--')
        ax_m.legend(loc='best', fontsize=8)
    ax_m.set_ylabel('|MRd| / (M0Ed + M2)')
    ax_m.set_xlabel('Iteration')
    ax_m.grid(True, alpha=0.3)

    ax_w.set_title('Dimension convergence (blue: axial, red: joint)', fontsize=11, fontweight='bold')
    plt.tight_layout()
    return _finish(fig, return_figure)


def save_figure(fig, path: Path, dpi: int = 150) -> Path:
    """Write ``fig`` to ``path`` as PNG and close it."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, format='png', dpi=dpi, bbox_inches='tight')
    plt.close(fig)
    return path


def _finish(fig, return_figure: bool):
    if return_figure:
        return fig
    buf = io.BytesIO()
    fig.savefig(buf, format='png', dpi=150, bbox_inches='tight')
    plt.close(fig)
    buf.seek(0)
    return buf.getvalue()

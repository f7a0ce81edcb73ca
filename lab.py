#!/usr/bin/env python3
"""
Qualia Space Explorer

Two complexes with the same number of elements but different causal
architectures (Divergent vs Chain, Tononi 2004, Fig. 2). Drag the sliders to
set element activity; the same activity pattern lands on a different point in
each complex's qualia space because the EI matrix shapes the projection.
"""
import time
script_start_time = time.time()
import argparse
from collections import deque
import numpy as np
import matplotlib
import matplotlib.pyplot as plt
import matplotlib.widgets as mwidgets
from matplotlib.colors import to_rgb
import pandas as pd

from models.qualia import compute_point, FALLBACK_POINT
from models.registry import registry as default_registry

# View configuration
FIGURE_SIZE = (15, 10)
AXIS_DOMAIN = (-0.1, 1.1)
TRAIL_LENGTH = 40
NODE_SIZE = 700
NODE_COLOR = 'blue'
# (marker color, marker, overlay letter, legend label) for the first and last complex
POINT_STYLES = [
    ('red', 'o', 'D', 'Divergent Complex State'),
    ('green', 's', 'C', 'Chain Complex State'),
]
# Node layout: one apex, three along the bottom
NODE_POSITIONS = np.array([[0.5, 0.85], [0.1, 0.15], [0.5, 0.15], [0.9, 0.15]])

INTRO_TEXT = (
    "IIT proposes that the quality of an experience (a 'quale') is determined by the geometry of its "
    "'qualia space'. This space is defined by the web of causal relationships within a system, captured by "
    "its Effective Information Matrix.\nTwo systems can have the same quantity of consciousness (Φ) but "
    "different experiences if their internal informational structures differ.  Based on Tononi, G. (2004)."
)
PLOT_TEXT = (
    "The markers show the current state of each complex. The same activity pattern produces different "
    "points because the underlying geometry (the EI matrix) is different."
)
REFERENCES = [
    "Tononi, G. 2004. An Information Integration Theory of Consciousness. BMC Neuroscience 5 (1): 42. "
    "https://doi.org/10.1186/1471-2202-5-42",
    "Tononi, G., Sporns, O. 2003. Measuring Information Integration. BMC Neuroscience 4 (1): 31. "
    "https://doi.org/10.1186/1471-2202-4-31",
    "Edelman, G. M., Tononi, G. 2000. A Universe of Consciousness. New York: Basic Books.",
]


def select_backend(headless=False):
    """Pick an interactive backend, or Agg when there is no display or none is wanted."""
    if headless:
        matplotlib.use('Agg')
        return 'Agg'
    for name in ('Qt5Agg', 'GTK3Agg', 'TkAgg'):
        try:
            matplotlib.use(name)
            return name
        except ImportError:
            continue
    print("[select_backend] No interactive backend available, falling back to Agg")
    matplotlib.use('Agg')
    return 'Agg'


def plotted_points(reg):
    """Points for the D and C markers: first and last complex, (0, 0) when missing."""
    if not reg.complexes:
        return [FALLBACK_POINT, FALLBACK_POINT]
    return [compute_point(reg.complexes[0]), compute_point(reg.complexes[-1])]


def set_activities(reg, name, levels):
    """Apply a preset activity pattern to the complex called `name` (ignored if unknown)."""
    complex_ = reg.by_name(name)
    if complex_ is None:
        print(f"[set_activities] Unknown complex: {name}")
        return
    for el, level in zip(complex_.elements, levels):
        reg.update_activity(complex_.id, el.id, float(level))


def node_colors(complex_):
    rgba = np.zeros((len(complex_.elements), 4))
    rgba[:, :3] = to_rgb(NODE_COLOR)
    rgba[:, 3] = np.clip(complex_.activity_vector(), 0.0, 1.0)
    return rgba


def draw_architecture(ax, complex_):
    """Nodes at fixed positions, an edge for every non-zero EI entry, fill opacity = activity."""
    ax.set_xlim(-0.05, 1.05)
    ax.set_ylim(-0.05, 1.05)
    ax.axis('off')
    ax.set_title(complex_.name, fontsize=12, fontweight='bold')

    n = min(len(complex_.elements), len(NODE_POSITIONS))
    # Edges follow the EI table literally (Chain: 1-2, 2-3, 3-4), not a schematic layout
    ei = complex_.ei_matrix.as_array()
    for i in range(n):
        for j in range(i + 1, n):
            if ei[i, j] != 0.0:
                ax.plot(NODE_POSITIONS[[i, j], 0], NODE_POSITIONS[[i, j], 1],
                        color='gray', linewidth=2, zorder=1)

    nodes = ax.scatter(NODE_POSITIONS[:n, 0], NODE_POSITIONS[:n, 1], s=NODE_SIZE,
                       facecolors=node_colors(complex_)[:n], edgecolors=NODE_COLOR,
                       linewidths=2, zorder=2)
    for i in range(n):
        ax.text(NODE_POSITIONS[i, 0], NODE_POSITIONS[i, 1], str(i + 1), ha='center', va='center',
                fontsize=9, fontweight='bold', color='white', zorder=3)
    return nodes


def build_qualia_explorer(reg=None, trail_length=TRAIL_LENGTH):
    """
    Build the explorer figure for a registry and wire sliders to it.
    Returns a dict of the figure, widgets and artists so callers (and tests)
    can drive and inspect the view.
    """
    reg = default_registry if reg is None else reg

    fig = plt.figure(figsize=FIGURE_SIZE)
    fig.suptitle("Problem 2: The Quality of Consciousness - Qualia Space Explorer",
                 fontsize=15, fontweight='bold')
    fig.text(0.5, 0.905, INTRO_TEXT, ha='center', va='top', fontsize=9, color='dimgray', wrap=True)

    view = {
        'fig': fig,
        'registry': reg,
        'panels': [],
        'sliders': [],
        'points': [],
        'trails': [],
    }

    # Architecture panels and sliders: first complex on the left, second on the right
    columns = [0.04, 0.71]
    for col_x, complex_ in zip(columns, reg.complexes):
        ax_arch = fig.add_axes([col_x, 0.56, 0.25, 0.22])
        nodes = draw_architecture(ax_arch, complex_)
        fig.text(col_x + 0.125, 0.53, complex_.description, ha='center', va='top',
                 fontsize=8, color='dimgray', wrap=True)
        panel_sliders = []
        for k, el in enumerate(complex_.elements):
            ax_slider = fig.add_axes([col_x + 0.03, 0.42 - k * 0.05, 0.2, 0.03])
            slider = mwidgets.Slider(ax_slider, f"E{el.id}", 0.0, 1.0,
                                     valinit=el.activity_level, color=NODE_COLOR)
            slider.on_changed(lambda val, cid=complex_.id, eid=el.id:
                              reg.update_activity(cid, eid, float(val)))
            panel_sliders.append(slider)
        view['panels'].append({'complex': complex_, 'ax': ax_arch, 'nodes': nodes})
        view['sliders'].append(panel_sliders)

    # Shared qualia space
    ax_q = fig.add_axes([0.38, 0.2, 0.27, 0.58])
    ax_q.set_title("Conceptual Qualia Space", fontsize=12, fontweight='bold')
    ax_q.set_xlim(*AXIS_DOMAIN)
    ax_q.set_ylim(*AXIS_DOMAIN)
    ax_q.set_xlabel("Qualia Dimension X (Conceptual)")
    ax_q.set_ylabel("Qualia Dimension Y (Conceptual)")
    ax_q.grid(alpha=0.3)
    for (color, marker, letter, legend), point in zip(POINT_STYLES, plotted_points(reg)):
        trail_line, = ax_q.plot([], [], color=color, alpha=0.3, linewidth=1.5)
        marker_artist = ax_q.scatter([point[0]], [point[1]], s=350, c=color, marker=marker,
                                     label=legend, zorder=3)
        letter_artist = ax_q.text(point[0], point[1], letter, ha='center', va='center',
                                  fontsize=8, fontweight='bold', color='white', zorder=4)
        view['points'].append({'marker': marker_artist, 'letter': letter_artist})
        view['trails'].append({'line': trail_line, 'history': deque(maxlen=trail_length)})
    ax_q.legend(loc='upper center', bbox_to_anchor=(0.5, -0.1), ncol=2, fontsize=8)
    fig.text(0.515, 0.08, PLOT_TEXT, ha='center', va='top', fontsize=8, color='dimgray', wrap=True)
    coords_text = ax_q.text(0.02, 0.98, "", transform=ax_q.transAxes, fontsize=8, va='top',
                            bbox=dict(boxstyle='round', facecolor='white', alpha=0.8))
    view['ax_qualia'] = ax_q
    view['coords_text'] = coords_text

    def refresh():
        for panel in view['panels']:
            panel['nodes'].set_facecolors(node_colors(panel['complex']))
        lines = []
        for (color, marker, letter, legend), point, artists, trail in zip(
                POINT_STYLES, plotted_points(reg), view['points'], view['trails']):
            artists['marker'].set_offsets([point])
            artists['letter'].set_position(point)
            trail['history'].append(point)
            hist = np.array(trail['history'])
            trail['line'].set_data(hist[:, 0], hist[:, 1])
            lines.append(f"{letter}: ({point[0]:.3f}, {point[1]:.3f})")
        coords_text.set_text("\n".join(lines))
        fig.canvas.draw_idle()

    def on_activity_changed(complex_, element):
        try:
            refresh()
        except Exception as e:
            print(f"[on_activity_changed] Error redrawing {complex_.name} E{element.id}: {e}")

    def reset(event=None):
        reg.reset()
        for panel_sliders in view['sliders']:
            for slider in panel_sliders:
                slider.eventson = False
                slider.set_val(0.0)
                slider.eventson = True
        for trail in view['trails']:
            trail['history'].clear()
        refresh()

    ax_reset = fig.add_axes([0.47, 0.02, 0.09, 0.04])
    btn_reset = mwidgets.Button(ax_reset, 'Reset')
    btn_reset.on_clicked(reset)

    def handle_close(evt):
        """Detach from the registry when the window is closed."""
        reg.remove_listener(on_activity_changed)

    reg.add_listener(on_activity_changed)
    fig.canvas.mpl_connect('close_event', handle_close)

    view['refresh'] = refresh
    view['reset'] = reset
    view['reset_button'] = btn_reset
    view['listener'] = on_activity_changed
    refresh()
    return view


def qualia_report(reg=None):
    """Per-complex activity and projected point as a DataFrame."""
    reg = default_registry if reg is None else reg
    rows = []
    for snap in reg.snapshot():
        row = {'Complex': snap['name']}
        for k, level in enumerate(snap['activities']):
            row[f"E{k + 1}"] = level
        row['X'] = snap['point'][0]
        row['Y'] = snap['point'][1]
        rows.append(row)
    return pd.DataFrame(rows)


def render_to_file(view, path, dpi=150):
    view['fig'].savefig(path, dpi=dpi, bbox_inches='tight')
    print(f"Qualia space view saved as: {path}")
    return path


def activity_level(text):
    """argparse type: a float in [0, 1]."""
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid activity level: {text!r}")
    if not 0.0 <= value <= 1.0:
        raise argparse.ArgumentTypeError(f"activity level must be in [0, 1], got {value}")
    return value


def main(argv=None):
    parser = argparse.ArgumentParser(description='Interactive qualia space explorer (Divergent vs Chain complexes)')
    parser.add_argument('--headless', action='store_true', help='Do not open a window (use the Agg backend)')
    parser.add_argument('--save', type=str, default=None, help='Write the view to this image file')
    parser.add_argument('--divergent', type=activity_level, nargs=4, metavar='A', default=None,
                        help='Initial activity levels E1..E4 for the Divergent complex')
    parser.add_argument('--chain', type=activity_level, nargs=4, metavar='A', default=None,
                        help='Initial activity levels E1..E4 for the Chain complex')
    parser.add_argument('--report', action='store_true', help='Print activity and qualia points per complex')
    parser.add_argument('--trail', type=int, default=TRAIL_LENGTH, help='Number of recent points kept per complex')
    args = parser.parse_args(argv)

    for name, levels in (("Divergent Complex", args.divergent), ("Chain Complex", args.chain)):
        if levels is not None:
            set_activities(default_registry, name, levels)

    backend = select_backend(headless=args.headless)
    print(f"[{time.time() - script_start_time:.4f}s] Using matplotlib backend: {backend}")

    if args.report:
        print("\nQualia Space Summary:")
        print(qualia_report(default_registry).to_string(index=False))

    view = build_qualia_explorer(default_registry, trail_length=args.trail)
    if args.save:
        render_to_file(view, args.save)

    if backend == 'Agg':
        plt.close(view['fig'])
        return view

    print("\nReferences:")
    for ref in REFERENCES:
        print(f"  - {ref}")
    print(f"[{time.time() - script_start_time:.4f}s] About to show plot. The GUI window should appear now.")
    plt.show()
    return view


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Headless sweep over activity patterns for the example complexes.
Projects every pattern on a regular grid of [0,1]^4 and measures how often
the Divergent and Chain complexes land on different qualia points.
"""
import argparse
import time
import numpy as np
import matplotlib
import matplotlib.pyplot as plt
import pandas as pd

from models.qualia import project_activity_grid, N_ELEMENTS
from models.registry import build_example_registry

DEFAULT_LEVELS = 5
DISTINCT_TOL = 1e-12
POINT_COLORS = ['red', 'green']


def activity_grid(levels=DEFAULT_LEVELS):
    """All patterns with each element on `levels` evenly spaced values in [0, 1]."""
    values = np.linspace(0.0, 1.0, levels)
    mesh = np.meshgrid(*([values] * N_ELEMENTS), indexing='ij')
    return np.stack([m.ravel() for m in mesh], axis=1)


def column_keys(reg):
    """Column prefix per complex: first word of its name, or its position when empty or taken."""
    keys = []
    for k, c in enumerate(reg.complexes):
        words = c.name.split()
        key = words[0] if words else f"complex{k}"
        if key in keys:
            key = f"{key}{k}"
        keys.append(key)
    return keys


def sweep_activity_patterns(reg=None, levels=DEFAULT_LEVELS):
    """
    One row per activity pattern: E1..E4, then x/y for each complex and the
    distance between the first and last complex's points.
    """
    reg = build_example_registry() if reg is None else reg
    acts = activity_grid(levels)
    df = pd.DataFrame(acts, columns=[f"E{i + 1}" for i in range(N_ELEMENTS)])
    points = []
    for c, key in zip(reg.complexes, column_keys(reg)):
        pts = project_activity_grid(c.ei_matrix, acts)
        df[f"{key}_x"] = pts[:, 0]
        df[f"{key}_y"] = pts[:, 1]
        points.append(pts)
    if len(points) > 1:
        df['distance'] = np.linalg.norm(points[0] - points[-1], axis=1)
    else:
        df['distance'] = 0.0
    return df


def summarize_differentiation(df, tol=DISTINCT_TOL):
    dist = df['distance'].to_numpy()
    return {
        'patterns': len(dist),
        'distinct_fraction': float(np.mean(dist > tol)) if len(dist) else 0.0,
        'mean_distance': float(np.mean(dist)) if len(dist) else 0.0,
        'max_distance': float(np.max(dist)) if len(dist) else 0.0,
    }


def plot_sweep(df, reg=None, save_path=None, show=False):
    reg = build_example_registry() if reg is None else reg
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(12, 5))
    for color, c, key in zip(POINT_COLORS, reg.complexes, column_keys(reg)):
        ax1.scatter(df[f"{key}_x"], df[f"{key}_y"], s=12, alpha=0.4, color=color, label=c.name)
    ax1.set_xlim(-0.1, 1.1)
    ax1.set_ylim(-0.1, 1.1)
    ax1.set_title('Reachable Qualia Points')
    ax1.set_xlabel('Qualia Dimension X (Conceptual)')
    ax1.set_ylabel('Qualia Dimension Y (Conceptual)')
    ax1.legend(fontsize=8)

    ax2.hist(df['distance'], bins=30, color='purple', alpha=0.7)
    ax2.set_title('Divergent vs Chain Point Distance')
    ax2.set_xlabel('Euclidean distance')
    ax2.set_ylabel('# Activity patterns')

    plt.tight_layout()
    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Sweep figure saved as: {save_path}")
    if show:
        plt.show()
    else:
        plt.close(fig)
    return fig


def main(argv=None):
    parser = argparse.ArgumentParser(description='Sweep activity patterns and compare qualia points of the example complexes')
    parser.add_argument('--levels', type=int, default=DEFAULT_LEVELS, help='Grid values per element (levels^4 patterns)')
    parser.add_argument('--save', type=str, default=None, help='Write the sweep figure to this image file')
    parser.add_argument('--show', action='store_true', help='Open the sweep figure in a window')
    args = parser.parse_args(argv)

    if not args.show:
        matplotlib.use('Agg')

    start = time.time()
    reg = build_example_registry()
    df = sweep_activity_patterns(reg, levels=args.levels)
    summary = summarize_differentiation(df)
    print(f"Sweep: {summary['patterns']} patterns in {time.time() - start:.3f}s")
    print(f"  Distinct points: {100 * summary['distinct_fraction']:.1f}%")
    print(f"  Mean distance: {summary['mean_distance']:.3f}")
    print(f"  Max distance: {summary['max_distance']:.3f}")

    if args.save or args.show:
        plot_sweep(df, reg, save_path=args.save, show=args.show)
    return summary


if __name__ == "__main__":
    main()

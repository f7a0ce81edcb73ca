#!/usr/bin/env python3
"""
Checks for the headless activity sweep
"""
import numpy as np
import sys
import os
import matplotlib
matplotlib.use('Agg')

# Add current directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from qualia_sweep import (
    activity_grid,
    column_keys,
    sweep_activity_patterns,
    summarize_differentiation,
    plot_sweep,
    main,
)
from models.qualia import ConsciousComplex, EffectiveInformationMatrix, make_elements
from models.registry import ComplexRegistry, build_example_registry, DIVERGENT_EI, CHAIN_EI


def test_activity_grid_shape():
    grid = activity_grid(3)
    assert grid.shape == (81, 4)
    assert grid.min() == 0.0 and grid.max() == 1.0
    assert len({tuple(row) for row in grid}) == 81


def test_sweep_differentiation():
    # Divergent and Chain coincide only when E1, E3 and E4 are all at rest
    df = sweep_activity_patterns(levels=2)
    assert len(df) == 16
    summary = summarize_differentiation(df)
    assert summary['patterns'] == 16
    assert np.isclose(summary['distinct_fraction'], 14 / 16)
    all_on = df[(df[['E1', 'E2', 'E3', 'E4']] == 1.0).all(axis=1)].iloc[0]
    assert (all_on['Divergent_x'], all_on['Divergent_y']) == (0.5, 0.5)
    assert (all_on['Chain_x'], all_on['Chain_y']) == (1.0, 0.0)
    assert np.isclose(summary['max_distance'], np.hypot(0.5, 0.5))
    print(f"[OK] Sweep summary: {summary}")


def test_sweep_levels_five():
    summary = summarize_differentiation(sweep_activity_patterns(levels=5))
    assert summary['patterns'] == 625
    assert np.isclose(summary['distinct_fraction'], 620 / 625)


def test_plot_sweep_saves(tmp_path):
    reg = build_example_registry()
    df = sweep_activity_patterns(reg, levels=3)
    out = tmp_path / "sweep.png"
    plot_sweep(df, reg, save_path=str(out))
    assert out.exists() and out.stat().st_size > 0


def test_sweep_without_pairs_has_zero_distance():
    summary = summarize_differentiation(sweep_activity_patterns(ComplexRegistry([]), levels=2))
    assert summary == {'patterns': 16, 'distinct_fraction': 0.0, 'mean_distance': 0.0, 'max_distance': 0.0}

    single = build_example_registry()
    single.complexes = single.complexes[:1]
    df = sweep_activity_patterns(single, levels=2)
    assert 'Divergent_x' in df.columns
    assert summarize_differentiation(df)['distinct_fraction'] == 0.0
    print("[OK] Sweep with fewer than two complexes")


def test_column_keys_unique_for_empty_and_shared_names():
    reg = ComplexRegistry([
        ConsciousComplex("", "", make_elements(), EffectiveInformationMatrix(DIVERGENT_EI)),
        ConsciousComplex("Loop A", "", make_elements(), EffectiveInformationMatrix(DIVERGENT_EI)),
        ConsciousComplex("Loop B", "", make_elements(), EffectiveInformationMatrix(CHAIN_EI)),
    ])
    assert column_keys(reg) == ["complex0", "Loop", "Loop2"]
    df = sweep_activity_patterns(reg, levels=2)
    all_on = df[(df[['E1', 'E2', 'E3', 'E4']] == 1.0).all(axis=1)].iloc[0]
    assert (all_on['Loop_x'], all_on['Loop_y']) == (0.5, 0.5)
    assert (all_on['Loop2_x'], all_on['Loop2_y']) == (1.0, 0.0)


def test_main_headless():
    summary = main(['--levels', '2'])
    assert summary['patterns'] == 16


if __name__ == "__main__":
    print("Testing activity sweep...\n")
    test_activity_grid_shape()
    test_sweep_differentiation()
    test_sweep_levels_five()
    test_sweep_without_pairs_has_zero_distance()
    test_column_keys_unique_for_empty_and_shared_names()
    test_main_headless()
    # test_plot_sweep_saves needs the tmp_path fixture; run it with pytest
    print("\nOK All sweep checks passed")

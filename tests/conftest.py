"""
Pytest configuration for the curvature solver test suite.

Shared fixtures provide a benchmark vector dark matter point and
synthetic one-loop derivative data, so that most lifecycle tests run
without evaluating the Coleman-Weinberg potential.
"""

import pytest
import sys
from pathlib import Path

import numpy as np

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from curvature_solver.core.derivatives import OneLoopDerivatives
from curvature_solver.models.vdm import VectorDarkMatterModel, VDMInputs


def pytest_configure(config):
    """Called after command line options have been parsed."""
    # Add markers for test organization
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


BENCHMARK_RECORD = "95 650 0.3 246 1000 1.0"


def make_synthetic_derivatives(n=6, seed=7, third=True):
    """
    One-loop-like derivative data with the CP-conserving pattern of the
    vector dark matter model: diagonal Hessian plus the (φ2, φ4) mixing
    entry, arbitrary gradient.
    """
    rng = np.random.default_rng(seed)
    hessian = np.diag(rng.uniform(-2000.0, 2000.0, n))
    hessian[2, 4] = hessian[4, 2] = rng.uniform(-500.0, 500.0)
    gradient = rng.uniform(-1e4, 1e4, n)
    third_tensor = None
    if third:
        raw = rng.normal(0.0, 10.0, (n, n, n))
        third_tensor = sum(
            raw.transpose(p) for p in
            [(0, 1, 2), (0, 2, 1), (1, 0, 2), (1, 2, 0), (2, 0, 1), (2, 1, 0)]
        ) / 6.0
    return OneLoopDerivatives(gradient, hessian, third_tensor)


@pytest.fixture
def benchmark_record():
    """Input record: MH1 MH2 alpha v MX gX."""
    return BENCHMARK_RECORD


@pytest.fixture
def benchmark_inputs():
    """Benchmark point m1 = 95, m2 = 650, alpha = 0.3, v = 246, MX = 1000, gX = 1 (vs = 1000)."""
    return VDMInputs(MH1=95.0, MH2=650.0, alpha=0.3, v=246.0, MX=1000.0, gX=1.0)


@pytest.fixture
def vdm_model():
    """Fresh, uninitialized model."""
    return VectorDarkMatterModel()


@pytest.fixture
def populated_model(benchmark_inputs):
    """Model with parameters set and curvature tensors populated."""
    model = VectorDarkMatterModel()
    model.set_gen(benchmark_inputs, point=1)
    model.set_curvature_arrays()
    return model


@pytest.fixture
def diagonalized_model(populated_model):
    """Populated model after tree-level mass diagonalization."""
    populated_model.calculate_physical_couplings()
    return populated_model


@pytest.fixture
def synthetic_derivatives():
    return make_synthetic_derivatives()


@pytest.fixture
def synthetic_engine():
    """Derivative engine returning synthetic data (ignores the model)."""
    def engine(model):
        return make_synthetic_derivatives(n=model.basis.n_higgs)
    return engine

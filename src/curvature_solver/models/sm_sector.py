"""
Standard Model gauge and Yukawa tensor entries.

The SM Higgs doublet occupies four consecutive real fields
(φ0, φ1 charged; φ2 CP-even, φ3 CP-odd neutral), the gauge bosons are
W¹, W², W³, B in that order. Fermion index layout:

    quarks:  0-2 up-type (u, c, t), 3-5 down-type (d, s, b),
             6-8 up-type partners, 9-11 down-type partners
    leptons: 2l, 2l+1 charged lepton l (e, μ, τ), 6+l neutrino l

All entries are written with set_symmetric, so the tensors are
symmetric in the gauge pair, the fermion pair and the scalar pair.
"""

import numpy as np
from numpy.typing import NDArray
from typing import Sequence

from curvature_solver.core.constants import SMConstants
from curvature_solver.core.tensors import CurvatureTensor

N_QUARKS = 12
N_LEPTONS = 9


def fill_sm_gauge(tensor: CurvatureTensor, g: float, gs: float, doublet: Sequence[int] = (0, 1, 2, 3)) -> None:
    """
    SU(2) x U(1) entries of G_abij for one Higgs doublet.

    Gives M_W² = g² v²/4, M_Z² = (g² + gs²) v²/4 and a massless photon
    for a VEV v in the CP-even doublet component.
    """
    p0, p1, p2, p3 = doublet
    for a in range(3):
        for i in doublet:
            tensor.set_symmetric((a, a, i, i), 0.5 * g**2)
    for i in doublet:
        tensor.set_symmetric((3, 3, i, i), 0.5 * gs**2)

    mixed = 0.5 * g * gs
    tensor.set_symmetric((0, 3, p0, p2), mixed)
    tensor.set_symmetric((0, 3, p1, p3), mixed)
    tensor.set_symmetric((1, 3, p0, p3), mixed)
    tensor.set_symmetric((1, 3, p1, p2), -mixed)
    tensor.set_symmetric((2, 3, p0, p0), mixed)
    tensor.set_symmetric((2, 3, p1, p1), mixed)
    tensor.set_symmetric((2, 3, p2, p2), -mixed)
    tensor.set_symmetric((2, 3, p3, p3), -mixed)


def fill_sm_quarks(
    tensor: CurvatureTensor,
    constants: SMConstants,
    v: float,
    doublet: Sequence[int] = (0, 1, 2, 3),
) -> None:
    """
    Quark Yukawa entries Y_IJk, normalized to give the input masses at VEV v.

    Args:
        tensor: Quark F2H1 tensor (12 x 12 x n).
        constants: Supplies masses and the CKM matrix.
        v: Electroweak VEV of the doublet.
        doublet: Field indices of the doublet components.
    """
    p0, p1, p2, p3 = doublet
    V: NDArray[np.complexfloating] = constants.ckm
    m_up = constants.up_type_masses
    m_down = constants.down_type_masses

    for i in range(3):
        m = m_up[i] / v
        tensor.set_symmetric((i, 6 + i, p2), m)
        tensor.set_symmetric((i, 6 + i, p3), -1j * m)
        for j in range(3):
            tensor.set_symmetric((i, 9 + j, p0), -m * np.conj(V[i, j]))
            tensor.set_symmetric((i, 9 + j, p1), 1j * m * np.conj(V[i, j]))

    for j in range(3):
        m = m_down[j] / v
        for i in range(3):
            tensor.set_symmetric((3 + j, 6 + i, p0), m * V[i, j])
            tensor.set_symmetric((3 + j, 6 + i, p1), 1j * m * V[i, j])
        tensor.set_symmetric((3 + j, 9 + j, p2), m)
        tensor.set_symmetric((3 + j, 9 + j, p3), 1j * m)


def fill_sm_leptons(
    tensor: CurvatureTensor,
    constants: SMConstants,
    v: float,
    doublet: Sequence[int] = (0, 1, 2, 3),
) -> None:
    """Charged-lepton Yukawa entries (massless neutrinos)."""
    p0, p1, p2, p3 = doublet
    for l, mass in enumerate(constants.charged_lepton_masses):
        m = mass / v
        tensor.set_symmetric((2 * l, 2 * l + 1, p2), m)
        tensor.set_symmetric((2 * l, 2 * l + 1, p3), 1j * m)
        tensor.set_symmetric((2 * l + 1, 6 + l, p0), m)
        tensor.set_symmetric((2 * l + 1, 6 + l, p1), 1j * m)

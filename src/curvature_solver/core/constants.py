"""
Standard Model input constants for the curvature solver.

Electroweak, fermion-mass and CKM inputs are loaded from constants.json
if available, otherwise default values are used. Derived quantities
(electroweak VEV, gauge couplings, CKM matrix) are computed from these
inputs by SMConstants so that every model sees one consistent set.
"""

import json
import warnings
import numpy as np
from numpy.typing import NDArray
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, Any, Optional, Union

# =============================================================================
# Load Standard Model Inputs from JSON
# =============================================================================

# Path to constants.json (same directory as this file)
_CONSTANTS_JSON_PATH = Path(__file__).parent / "constants.json"

# Default values (used if constants.json is missing or incomplete)
_DEFAULT_CONSTANTS: Dict[str, Any] = {
    "G_F": 1.1663787e-5,  # GeV^-2 (Fermi constant)
    "mass_W": 80.379,  # GeV
    "mass_Z": 91.1876,  # GeV
    "mass_up": 0.1,  # GeV
    "mass_down": 0.1,  # GeV
    "mass_strange": 0.1,  # GeV
    "mass_charm": 1.51,  # GeV
    "mass_bottom": 4.92,  # GeV
    "mass_top": 172.5,  # GeV
    "mass_electron": 0.510998928e-3,  # GeV
    "mass_muon": 0.1056583715,  # GeV
    "mass_tau": 1.77682,  # GeV
    "V_us": 0.22500,  # |V_us| (sets theta_12)
    "V_ub": 0.00369,  # |V_ub| (sets theta_13)
    "V_cb": 0.04182,  # |V_cb| (sets theta_23)
    "ckm_delta": 1.144,  # CP-violating phase (rad)
    "n_colour": 3,
}

# Divisors (VEVs, couplings) below this value are treated as zero
NUMERICAL_FLOOR: float = 1e-12


def load_constants_from_json(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load Standard Model inputs from constants.json.

    If the file doesn't exist or is invalid, returns default values.

    Args:
        path: Optional alternative JSON file. Defaults to the packaged
              constants.json.

    Returns:
        Dictionary with constant names as keys and values.
    """
    json_path = Path(path) if path is not None else _CONSTANTS_JSON_PATH
    if json_path.exists():
        try:
            with open(json_path, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
                # Merge with defaults to ensure all keys exist
                result = _DEFAULT_CONSTANTS.copy()
                result.update(loaded)
                return result
        except (json.JSONDecodeError, IOError) as e:
            warnings.warn(f"Failed to load {json_path.name}: {e}. Using defaults.")
            return _DEFAULT_CONSTANTS.copy()
    else:
        return _DEFAULT_CONSTANTS.copy()


def save_constants_to_json(constants: Dict[str, Any], path: Optional[Union[str, Path]] = None) -> None:
    """
    Save Standard Model inputs to constants.json.

    Args:
        constants: Dictionary with constant names and values.
        path: Optional alternative JSON file.
    """
    json_path = Path(path) if path is not None else _CONSTANTS_JSON_PATH
    with open(json_path, 'w', encoding='utf-8') as f:
        json.dump(constants, f, indent=4)


def get_constants_json_path() -> Path:
    """Return the path to the constants.json file."""
    return _CONSTANTS_JSON_PATH


def ckm_matrix(V_us: float, V_ub: float, V_cb: float, delta: float) -> NDArray[np.complexfloating]:
    """
    CKM matrix in the standard (PDG) parametrization.

    s12 = |V_us|, s13 = |V_ub|, s23 = |V_cb|, all mixing angles taken
    from the sines directly.

    Returns:
        Complex 3x3 unitary matrix, rows (u, c, t), columns (d, s, b).
    """
    theta12 = np.arcsin(V_us)
    theta13 = np.arcsin(V_ub)
    theta23 = np.arcsin(V_cb)
    s12, c12 = np.sin(theta12), np.cos(theta12)
    s13, c13 = np.sin(theta13), np.cos(theta13)
    s23, c23 = np.sin(theta23), np.cos(theta23)
    phase = np.exp(1j * delta)

    return np.array([
        [c12 * c13, s12 * c13, s13 / phase],
        [-s12 * c23 - c12 * s23 * s13 * phase, c12 * c23 - s12 * s23 * s13 * phase, s23 * c13],
        [s12 * s23 - c12 * c23 * s13 * phase, -c12 * s23 - s12 * c23 * s13 * phase, c23 * c13],
    ], dtype=complex)


@dataclass(frozen=True)
class SMConstants:
    """
    Standard Model inputs shared by every model.

    Attributes:
        G_F: Fermi constant (GeV^-2).
        mass_W, mass_Z: Gauge boson masses (GeV).
        mass_up ... mass_top: Quark masses (GeV).
        mass_electron, mass_muon, mass_tau: Charged-lepton masses (GeV).
        V_us, V_ub, V_cb, ckm_delta: CKM inputs.
        n_colour: Number of quark colours.
    """
    G_F: float
    mass_W: float
    mass_Z: float
    mass_up: float
    mass_down: float
    mass_strange: float
    mass_charm: float
    mass_bottom: float
    mass_top: float
    mass_electron: float
    mass_muon: float
    mass_tau: float
    V_us: float
    V_ub: float
    V_cb: float
    ckm_delta: float
    n_colour: int = 3

    def __post_init__(self):
        if self.G_F <= 0:
            raise ValueError(f"G_F must be positive, got {self.G_F}")
        if self.mass_W <= 0 or self.mass_Z <= self.mass_W:
            raise ValueError(
                f"Need 0 < mass_W < mass_Z, got mass_W={self.mass_W}, mass_Z={self.mass_Z}"
            )

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "SMConstants":
        """Build from a constants dictionary, ignoring unknown keys."""
        merged = _DEFAULT_CONSTANTS.copy()
        merged.update(values)
        known = cls.__dataclass_fields__.keys()
        return cls(**{key: merged[key] for key in known})

    @classmethod
    def default(cls) -> "SMConstants":
        """Constants from constants.json (or built-in defaults)."""
        return cls.from_dict(_LOADED_CONSTANTS)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def vev0(self) -> float:
        """Electroweak VEV v = (sqrt(2) G_F)^(-1/2) ≈ 246.22 GeV."""
        return float(1.0 / np.sqrt(np.sqrt(2.0) * self.G_F))

    @property
    def g(self) -> float:
        """SU(2)_L coupling g = 2 M_W / v."""
        return 2.0 * self.mass_W / self.vev0

    @property
    def gs(self) -> float:
        """U(1)_Y coupling g' = 2 sqrt(M_Z^2 - M_W^2) / v."""
        return 2.0 * np.sqrt(self.mass_Z**2 - self.mass_W**2) / self.vev0

    @property
    def up_type_masses(self) -> NDArray[np.floating]:
        return np.array([self.mass_up, self.mass_charm, self.mass_top])

    @property
    def down_type_masses(self) -> NDArray[np.floating]:
        return np.array([self.mass_down, self.mass_strange, self.mass_bottom])

    @property
    def charged_lepton_masses(self) -> NDArray[np.floating]:
        return np.array([self.mass_electron, self.mass_muon, self.mass_tau])

    @property
    def ckm(self) -> NDArray[np.complexfloating]:
        return ckm_matrix(self.V_us, self.V_ub, self.V_cb, self.ckm_delta)


# Load constants at module import time
_LOADED_CONSTANTS = load_constants_from_json()

# Electroweak VEV from the loaded Fermi constant
C_VEV0: float = SMConstants.from_dict(_LOADED_CONSTANTS).vev0

"""
Models module: the PotentialModel lifecycle, the vector dark matter
model and the model registry.
"""

from typing import Dict, List, Type

from curvature_solver.models.base import PotentialModel
from curvature_solver.models.vdm import (
    VectorDarkMatterModel,
    VDMInputs,
    VDMLagrangianParameters,
    reparametrize,
    cp_even_mass_matrix,
)

MODEL_REGISTRY: Dict[str, Type[PotentialModel]] = {
    VectorDarkMatterModel.model_id: VectorDarkMatterModel,
}


def available_models() -> List[str]:
    """Identifiers of all registered models."""
    return sorted(MODEL_REGISTRY)


def create_model(name: str, **kwargs) -> PotentialModel:
    """
    Create a fresh model instance.

    Args:
        name: Model identifier (case-insensitive).
        **kwargs: Passed to the model constructor.

    Raises:
        ValueError: If the identifier is unknown.
    """
    key = name.strip().lower()
    if key not in MODEL_REGISTRY:
        raise ValueError(
            f"Unknown model '{name}'. Available models: {', '.join(available_models())}"
        )
    return MODEL_REGISTRY[key](**kwargs)


__all__ = [
    "PotentialModel",
    "VectorDarkMatterModel",
    "VDMInputs",
    "VDMLagrangianParameters",
    "reparametrize",
    "cp_even_mass_matrix",
    "MODEL_REGISTRY",
    "available_models",
    "create_model",
]

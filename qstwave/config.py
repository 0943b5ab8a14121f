from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

import torch

# Device & dtypes (shared)
DEVICE = torch.device("cuda" if torch.cuda.is_available() else "cpu")
DTYPE = torch.double  # real-valued RBM parameters and energies


@dataclass(frozen=True)
class WavefunctionConfig:
    """Hyperparameters needed to build a ComplexWaveFunction."""
    num_visible: int
    num_hidden: Optional[int] = None
    num_chains: int = 1
    seed: int = 13579
    sigma: float = 0.01
    max_rotated_sites: int = 20

    def __post_init__(self):
        if self.num_visible <= 0:
            raise ValueError(f"num_visible must be positive, got {self.num_visible}")
        if self.num_hidden is not None and self.num_hidden <= 0:
            raise ValueError(f"num_hidden must be positive, got {self.num_hidden}")
        if self.num_chains <= 0:
            raise ValueError(f"num_chains must be positive, got {self.num_chains}")
        if self.sigma < 0:
            raise ValueError(f"sigma must be non-negative, got {self.sigma}")
        if self.max_rotated_sites < 0:
            raise ValueError(f"max_rotated_sites must be non-negative, got {self.max_rotated_sites}")

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "WavefunctionConfig":
        """Build from a plain mapping; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in known})

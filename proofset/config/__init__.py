from .loader import load_config
from .models import (
    ChainConfig,
    MatchConfig,
    OutputConfig,
    ProofsetSettings,
    ScanConfig,
)

__all__ = [
    "ChainConfig",
    "MatchConfig",
    "OutputConfig",
    "ProofsetSettings",
    "ScanConfig",
    "load_config",
]

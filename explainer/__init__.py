"""Adversarial example explainer: image normalization, demo perturbation and a
local/remote execution pipeline."""

from .config import Mode, Settings
from .errors import DecodeError, ExplainerError, TransportError
from .formatting import PredictionResult, format_prediction
from .imaging import CanonicalImage, decode_image
from .orchestrator import Orchestrator, SessionState
from .perturbation import PerturbedImage, synthesize
from .tensor import Tensor, encode_tensor

__all__ = [
    "CanonicalImage",
    "DecodeError",
    "ExplainerError",
    "Mode",
    "Orchestrator",
    "PerturbedImage",
    "PredictionResult",
    "SessionState",
    "Settings",
    "Tensor",
    "TransportError",
    "decode_image",
    "encode_tensor",
    "format_prediction",
    "synthesize",
]

__version__ = "0.1.0"

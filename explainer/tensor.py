# explainer/tensor.py
from dataclasses import dataclass

import numpy as np

from .imaging import SIDE, CanonicalImage

TENSOR_SHAPE = (1, 1, SIDE, SIDE)


@dataclass(frozen=True, eq=False)
class Tensor:
    values: np.ndarray

    @property
    def shape(self) -> tuple:
        return tuple(self.values.shape)

    def to_payload(self) -> dict:
        """JSON body fragment understood by the /predict and /attack routes."""
        return {"data": self.values.ravel().tolist(), "shape": list(self.shape)}


def encode_tensor(image: CanonicalImage) -> Tensor:
    """
    Scale the luminance plane to [0, 1] and shape it (1, 1, 28, 28).

    Pixels stay in row-major order, so element k of the flattened data is
    pixel (k // 28, k % 28).
    """
    x = image.luminance.astype(np.float64) / 255.0
    return Tensor(x.reshape(TENSOR_SHAPE))

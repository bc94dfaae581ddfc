# explainer/api_client.py
from collections.abc import Mapping

import requests

from .config import REQUEST_TIMEOUT_S, Mode
from .errors import TransportError
from .formatting import PredictionResult
from .imaging import CanonicalImage, decode_data_url, load_image_bytes
from .logging import get_logger
from .perturbation import SOURCE_REMOTE, PerturbedImage
from .tensor import encode_tensor

log = get_logger("api_client")


class ApiClient:
    """Client for a classifier service exposing POST /predict and POST /attack."""

    mode = Mode.REMOTE

    def __init__(self, base_url: str, timeout: float = REQUEST_TIMEOUT_S, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _post(self, endpoint: str, payload: dict):
        """POST a JSON body and return the decoded JSON reply."""
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        log.debug("POST %s", url)
        try:
            resp = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e
        if not resp.ok:
            # The body usually explains the failure better than the status line
            detail = resp.text or f"HTTP {resp.status_code}"
            raise TransportError(detail, status_code=resp.status_code)
        try:
            return resp.json()
        except ValueError as e:
            raise TransportError(f"invalid JSON from {endpoint}: {e}", status_code=resp.status_code) from e

    def predict(self, image: CanonicalImage) -> PredictionResult:
        x = encode_tensor(image).to_payload()
        out = self._post("/predict", {"x": x})
        return PredictionResult.from_payload(out)

    def attack(self, image: CanonicalImage, epsilon: float):
        """Returns (result, perturbed image or None)."""
        x = encode_tensor(image).to_payload()
        out = self._post("/attack", {"x": x, "eps": epsilon})

        perturbed = None
        if isinstance(out, Mapping) and out.get("image"):
            out = dict(out)
            png = load_image_bytes(decode_data_url(out.pop("image")))
            perturbed = PerturbedImage(png=png, source=SOURCE_REMOTE)
        elif isinstance(out, Mapping) and "image" in out:
            log.debug("attack reply carried an empty image field")
            out = {k: v for k, v in out.items() if k != "image"}
        return PredictionResult.from_payload(out), perturbed

    def close(self):
        self.session.close()

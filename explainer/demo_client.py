# explainer/demo_client.py
"""
Demo backend used when no classifier service is configured.

Predictions are fixed, illustrative strings; nothing is computed from the
pixels. Only the adversarial preview is real, and it is synthesized noise.
"""
from .config import Mode
from .formatting import PredictionResult
from .imaging import CanonicalImage
from .perturbation import PerturbedImage, synthesize

DEMO_CLEAN = "Demo: predicted '7' with 96% (illustrative)"
DEMO_ADVERSARIAL = "Demo: misclassified as '1' with 78% (illustrative)"


class DemoClient:
    mode = Mode.LOCAL

    def predict(self, image: CanonicalImage) -> PredictionResult:
        return PredictionResult.from_payload(DEMO_CLEAN)

    def attack(self, image: CanonicalImage, epsilon: float):
        return PredictionResult.from_payload(DEMO_ADVERSARIAL), synthesize(image, epsilon)

    def preview(self, image: CanonicalImage, epsilon: float) -> PerturbedImage:
        return synthesize(image, epsilon)

    def close(self):
        pass

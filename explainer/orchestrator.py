# explainer/orchestrator.py
"""
Session state and the two execution modes behind one interface.

The orchestrator owns a single SessionState value. Every transition
(upload, set_epsilon, predict_clean, run_attack) builds a new state with
`dataclasses.replace`, so the page never sees half-updated fields.

Each backend call is tagged with the image version (and epsilon, for
attacks) it was issued for. When the reply comes back for a state that has
since moved on, it is dropped instead of overwriting newer results.
"""
import hashlib
from dataclasses import dataclass, replace
from typing import NamedTuple

from .api_client import ApiClient
from .config import DEFAULT_EPSILON, Mode, Settings
from .demo_client import DemoClient
from .errors import DecodeError, TransportError
from .formatting import PredictionResult, result_text
from .imaging import CanonicalImage, decode_image, sample_digit
from .logging import get_logger
from .perturbation import PerturbedImage, check_epsilon

log = get_logger("orchestrator")

STATUS_TEXT = {
    Mode.LOCAL: "Demo mode (no backend)",
    Mode.REMOTE: "API mode",
}


@dataclass(frozen=True)
class SessionState:
    image: CanonicalImage
    epsilon: float = DEFAULT_EPSILON
    image_version: int = 0
    perturbed: PerturbedImage | None = None
    clean: PredictionResult | None = None
    adversarial: PredictionResult | None = None
    busy: bool = False

    @property
    def clean_text(self) -> str:
        return result_text(self.clean)

    @property
    def adversarial_text(self) -> str:
        return result_text(self.adversarial)


def file_hash(uploaded_file) -> str:
    uploaded_file.seek(0)
    h = hashlib.md5(uploaded_file.read()).hexdigest()
    uploaded_file.seek(0)
    return h


class _Tag(NamedTuple):
    image_version: int
    epsilon: float | None


def build_backend(settings: Settings, session=None):
    if settings.mode is Mode.REMOTE:
        return ApiClient(settings.api_url, timeout=settings.timeout_s, session=session)
    return DemoClient()


class Orchestrator:
    def __init__(self, backend, image: CanonicalImage | None = None, epsilon: float = DEFAULT_EPSILON):
        self.backend = backend
        if image is None:
            image = sample_digit()
        self._state = SessionState(image=image, epsilon=check_epsilon(epsilon))
        self._upload_hash = None
        self._state = replace(self._state, perturbed=self._preview(self._state))
        log.info("explainer ready mode=%s", self.mode.value)

    @classmethod
    def from_settings(cls, settings: Settings, session=None, **kwargs) -> "Orchestrator":
        return cls(build_backend(settings, session=session), **kwargs)

    # ------------------------------
    # Read-only views
    # ------------------------------
    @property
    def mode(self) -> Mode:
        return self.backend.mode

    @property
    def status(self) -> str:
        return STATUS_TEXT[self.mode]

    @property
    def state(self) -> SessionState:
        return self._state

    # ------------------------------
    # Input handlers
    # ------------------------------
    def upload(self, source) -> SessionState:
        """
        Replace the current picture with a decoded upload.

        DecodeError propagates and the previous state is kept as is.
        """
        image = decode_image(source)
        return self._replace_image(image)

    def sync_upload(self, uploaded_file) -> SessionState:
        """
        Apply the file-uploader widget value on every page run.

        The same file is decoded only once; `None` (uploader cleared) forgets
        it, so picking that file again counts as a new upload.
        """
        if uploaded_file is None:
            self._upload_hash = None
            return self._state
        h = file_hash(uploaded_file)
        if h == self._upload_hash:
            return self._state
        state = self.upload(uploaded_file)
        self._upload_hash = h
        return state

    def use_sample(self) -> SessionState:
        return self._replace_image(sample_digit())

    def set_epsilon(self, epsilon: float) -> SessionState:
        eps = check_epsilon(epsilon)
        if eps == self._state.epsilon:
            return self._state
        self._state = replace(self._state, epsilon=eps)
        if self.mode is Mode.LOCAL:
            self._state = replace(self._state, perturbed=self._preview(self._state))
        return self._state

    def _replace_image(self, image: CanonicalImage) -> SessionState:
        # Stale results go first, then anything derived from the new image
        self._state = replace(
            self._state,
            image=image,
            image_version=self._state.image_version + 1,
            perturbed=None,
            clean=None,
            adversarial=None,
        )
        log.info("image replaced version=%d", self._state.image_version)
        self._state = replace(self._state, perturbed=self._preview(self._state))
        return self._state

    def _preview(self, state: SessionState) -> PerturbedImage | None:
        # Remote mode only ever shows what the service sends back
        if self.mode is Mode.LOCAL:
            return self.backend.preview(state.image, state.epsilon)
        return None

    # ------------------------------
    # Backend calls
    # ------------------------------
    def predict_clean(self) -> PredictionResult | None:
        """Classify the current image. Returns None if the call was skipped or superseded."""
        if self._state.busy:
            log.debug("predict ignored: busy")
            return None
        tag = _Tag(self._state.image_version, None)
        image = self._state.image
        self._state = replace(self._state, busy=True)
        try:
            try:
                result = self.backend.predict(image)
            except TransportError as e:
                log.warning("predict failed: %s", e.detail)
                result = PredictionResult.failure(e.detail)
        finally:
            self._state = replace(self._state, busy=False)

        if not self._matches(tag):
            log.info("discarding stale predict reply for version=%d", tag.image_version)
            return None
        self._state = replace(self._state, clean=result)
        return result

    def run_attack(self, epsilon: float | None = None) -> PredictionResult | None:
        """
        Attack the current image at `epsilon` (defaults to the session value).

        Failures come back as an error result; the image, epsilon and the
        current preview are left untouched.
        """
        if self._state.busy:
            log.debug("attack ignored: busy")
            return None
        if epsilon is not None:
            self.set_epsilon(epsilon)
        tag = _Tag(self._state.image_version, self._state.epsilon)
        image = self._state.image
        self._state = replace(self._state, busy=True)
        perturbed = None
        try:
            try:
                result, perturbed = self.backend.attack(image, tag.epsilon)
            except TransportError as e:
                log.warning("attack failed: %s", e.detail)
                result = PredictionResult.failure(e.detail)
            except DecodeError as e:
                log.warning("attack returned an unreadable image: %s", e)
                result = PredictionResult.failure(e)
        finally:
            self._state = replace(self._state, busy=False)

        if not self._matches(tag):
            log.info(
                "discarding stale attack reply for version=%d eps=%s",
                tag.image_version,
                tag.epsilon,
            )
            return None
        changes = {"adversarial": result}
        if perturbed is not None:
            changes["perturbed"] = perturbed
        self._state = replace(self._state, **changes)
        return result

    def _matches(self, tag: _Tag) -> bool:
        if tag.image_version != self._state.image_version:
            return False
        return tag.epsilon is None or tag.epsilon == self._state.epsilon

    def close(self):
        self.backend.close()

# explainer/formatting.py
"""
Turn whatever a backend sent back into one line of text.

Backends answer with a plain string, a {"top", "conf"} pair, a {"probs"}
vector or something else entirely. None of these may crash the page, so
unrecognized shapes are shown as JSON instead of raising.
"""
import json
import numbers
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

UNKNOWN = "—"
ERROR_PREFIX = "Error: "

KIND_LABEL = "label"
KIND_PROBS = "probs"
KIND_RAW = "raw"
KIND_ERROR = "error"


def _is_number(v) -> bool:
    return isinstance(v, numbers.Real) and not isinstance(v, bool)


def _structured(out):
    if isinstance(out, Mapping) and out.get("top") is not None and _is_number(out.get("conf")):
        return str(out["top"]), float(out["conf"])
    return None


def _probs(out):
    if not isinstance(out, Mapping):
        return None
    probs = out.get("probs")
    if isinstance(probs, (str, bytes)) or not isinstance(probs, Sequence) or not probs:
        return None
    if not all(_is_number(p) for p in probs):
        return None
    return tuple(float(p) for p in probs)


def _argmax(probs) -> int:
    # First maximum wins on ties
    best = 0
    for i, p in enumerate(probs):
        if p > probs[best]:
            best = i
    return best


def label_text(label, confidence: float) -> str:
    return f"'{label}' with {confidence * 100:.1f}%"


def dump_value(out) -> str:
    try:
        return json.dumps(out, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError):
        return repr(out)


def format_prediction(out) -> str:
    """Render a backend response; never raises."""
    if out is None:
        return UNKNOWN
    if isinstance(out, str):
        return out or UNKNOWN
    pair = _structured(out)
    if pair is not None:
        return label_text(*pair)
    probs = _probs(out)
    if probs is not None:
        idx = _argmax(probs)
        return label_text(idx, probs[idx])
    return dump_value(out)


@dataclass(frozen=True)
class PredictionResult:
    """One prediction outcome; exactly one representation is filled in."""

    kind: str
    label: str | None = None
    confidence: float | None = None
    probs: tuple | None = None
    raw: object = None
    error: str | None = None

    @classmethod
    def from_payload(cls, payload) -> "PredictionResult":
        pair = _structured(payload)
        if pair is not None:
            return cls(kind=KIND_LABEL, label=pair[0], confidence=pair[1])
        probs = _probs(payload)
        if probs is not None:
            return cls(kind=KIND_PROBS, probs=probs)
        return cls(kind=KIND_RAW, raw=payload)

    @classmethod
    def failure(cls, detail) -> "PredictionResult":
        return cls(kind=KIND_ERROR, error=str(detail))

    @property
    def is_error(self) -> bool:
        return self.kind == KIND_ERROR

    @property
    def text(self) -> str:
        if self.kind == KIND_ERROR:
            return ERROR_PREFIX + (self.error or "")
        if self.kind == KIND_LABEL:
            return label_text(self.label, self.confidence)
        if self.kind == KIND_PROBS:
            idx = _argmax(self.probs)
            return label_text(idx, self.probs[idx])
        return format_prediction(self.raw)


def result_text(result: PredictionResult | None) -> str:
    """Text for a result slot; empty slots show the unknown placeholder."""
    if result is None:
        return UNKNOWN
    return result.text

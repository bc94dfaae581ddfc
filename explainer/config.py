# explainer/config.py
import os
from dataclasses import dataclass
from enum import Enum

API_URL_ENV = "CONFIABLE_API_URL"

# Same budget the upload client used for its POSTs
REQUEST_TIMEOUT_S = 60.0

DEFAULT_EPSILON = 0.03
MAX_EPSILON = 0.2
EPSILON_STEP = 0.01


class Mode(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"


def clean_api_url(value) -> str | None:
    """Blank values mean "no backend"; a trailing slash is dropped."""
    if value is None:
        return None
    url = str(value).strip().rstrip("/")
    return url or None


@dataclass(frozen=True)
class Settings:
    api_url: str | None = None
    timeout_s: float = REQUEST_TIMEOUT_S

    @property
    def mode(self) -> Mode:
        return Mode.REMOTE if self.api_url is not None else Mode.LOCAL

    @classmethod
    def load(cls, fallback=None) -> "Settings":
        # Environment wins; `fallback` lets the page pass in a value from st.secrets
        url = clean_api_url(os.environ.get(API_URL_ENV))
        if url is None and fallback is not None:
            url = clean_api_url(fallback)
        return cls(api_url=url)

# ======================================================
# ConfIAble · Adversarial Example Explainer
# ======================================================

import io
import sys
from pathlib import Path

import streamlit as st
from PIL import Image
from streamlit.errors import StreamlitAPIException

# ======================================================
# PATHS
# ======================================================
ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from explainer.config import API_URL_ENV, EPSILON_STEP, MAX_EPSILON, Settings
from explainer.errors import DecodeError
from explainer.logging import init_logging
from explainer.orchestrator import Orchestrator

DISPLAY_SIZE = (224, 224)

# ======================================================
# STREAMLIT CONFIG
# ======================================================
st.set_page_config(page_title="ConfIAble", layout="wide")
init_logging()


def _secret_api_url():
    # Streamlit Cloud provides secrets in TOML; the env var still wins
    try:
        return st.secrets.get(API_URL_ENV)
    except (FileNotFoundError, StreamlitAPIException):
        # No secrets.toml in this deployment
        return None


def enlarge(img: Image.Image) -> Image.Image:
    """Blow the 28x28 buffer up without smoothing so pixels stay visible."""
    return img.resize(DISPLAY_SIZE, resample=Image.Resampling.NEAREST)


# ======================================================
# SESSION
# ======================================================
if "orchestrator" not in st.session_state:
    settings = Settings.load(fallback=_secret_api_url())
    st.session_state.orchestrator = Orchestrator.from_settings(settings)

orch: Orchestrator = st.session_state.orchestrator

# ======================================================
# HEADER
# ======================================================
st.title("ConfIAble · Adversarial Example Explainer")
st.caption(
    f"{orch.status}. Move ε to see perturbations. "
    "In API mode, the backend computes real adversarial examples."
)

col_in, col_ctl, col_adv = st.columns(3)

# ======================================================
# 1) INPUT
# ======================================================
with col_in:
    st.subheader("1) Input")
    uploaded_file = st.file_uploader("Upload (PNG/JPG)", type=["png", "jpg", "jpeg"])

    try:
        orch.sync_upload(uploaded_file)
    except DecodeError as e:
        st.error(f"Could not read this image: {e}")

    if st.button("Use sample digit"):
        orch.use_sample()

    st.image(enlarge(orch.state.image.to_pil()), caption="Normalized 28×28 input")

# ======================================================
# 2) EPSILON + ACTIONS
# ======================================================
with col_ctl:
    st.subheader("2) ε (epsilon) · perturbation size")
    eps = st.slider(
        "ε",
        min_value=0.0,
        max_value=MAX_EPSILON,
        value=orch.state.epsilon,
        step=EPSILON_STEP,
        format="%.2f",
    )
    orch.set_epsilon(round(eps, 2))

    b1, b2 = st.columns(2)
    busy = orch.state.busy
    if b1.button("Predict (clean)", disabled=busy):
        with st.spinner("Classifying..."):
            orch.predict_clean()
    if b2.button("Attack (FGSM-style)", disabled=busy):
        with st.spinner("Attacking..."):
            orch.run_attack(orch.state.epsilon)

    st.markdown(f"**Clean:** {orch.state.clean_text}")
    st.markdown(f"**Adversarial:** {orch.state.adversarial_text}")

# ======================================================
# 3) ADVERSARIAL PREVIEW
# ======================================================
with col_adv:
    st.subheader("3) Adversarial preview")
    perturbed = orch.state.perturbed
    if perturbed is not None:
        preview = Image.open(io.BytesIO(perturbed.png))
        st.image(enlarge(preview), caption=f"ε = {orch.state.epsilon:.2f}")
        st.download_button(
            "Download adversarial image (PNG)",
            data=perturbed.png,
            file_name="adversarial.png",
            mime="image/png",
        )
    else:
        st.info("Run an attack to get the adversarial image from the backend.")
    st.caption(
        "In demo mode we add signed noise for intuition. "
        "Hook a backend to compute true gradients."
    )

# ======================================================
# EXPLANATION
# ======================================================
st.divider()
st.subheader("What's happening?")
st.markdown(
    """
Adversarial examples add a small perturbation (bounded by ε) that is often
imperceptible but can change a model's prediction. In API mode the backend
crafts such perturbations with a gradient-based method like FGSM. In demo mode
the preview is deterministic signed noise and the predictions are fixed,
illustrative strings.
"""
)

import streamlit as st

st.set_page_config(page_title="Architecture · ConfIAble", layout="centered")

st.title("🏗️ Architecture Overview")
st.caption("How an uploaded picture becomes a clean and an adversarial prediction")

st.divider()

st.subheader("🔄 Pipeline")

st.markdown(
    """
    ```text
    Image Upload (any size, any mode)
            │
            ▼
    Normalization
    (stretch to 28×28, BT.601 grayscale)
            │
            ├─────────────── demo mode ───────────────┐
            ▼                                         ▼
    Tensor Encoding                         Signed-noise Preview
    (1×1×28×28, values / 255)               (sign from pixel index, ±ε·255)
            │                                         │
            ▼                                         │
    Remote /predict and /attack                       │
            │                                         │
            └──────────────────┬──────────────────────┘
                               ▼
                     Result Formatting
               ('label' with xx.x% | Error: …)
    ```
    """
)

st.divider()

st.subheader("🧩 Component Breakdown")

with st.expander("1️⃣ Normalization", expanded=True):
    st.markdown(
        """
        - Decodes PNG/JPG uploads with Pillow and applies EXIF orientation
        - Stretches to 28×28 without keeping the aspect ratio
        - Stores luminance in all three color channels, alpha fully opaque
        """
    )

with st.expander("2️⃣ Demo Perturbation", expanded=False):
    st.markdown(
        """
        - Deterministic: the same image and ε always give the same preview
        - Each pixel moves by exactly ε·255 up or down, clamped to [0, 255]
        - Illustrative noise only, not a gradient-based attack
        """
    )

with st.expander("3️⃣ Remote Service", expanded=False):
    st.markdown(
        """
        - Enabled by setting `CONFIABLE_API_URL`
        - Receives `{"x": {"data": [...784 floats], "shape": [1, 1, 28, 28]}}`
        - `/attack` also gets `eps` and may return the adversarial `image`
        """
    )

with st.expander("4️⃣ Result Formatting", expanded=False):
    st.markdown(
        """
        - Accepts plain strings, `{top, conf}` pairs and `{probs}` vectors
        - Anything else is shown as JSON rather than failing
        - Network and HTTP failures are shown inline as `Error: …`
        """
    )

st.caption("© ConfIAble · Architecture")

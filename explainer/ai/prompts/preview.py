"""
Preview prompt - the quick plain-text answer shown while the canvas renders.
"""

PREVIEW_PROMPT = (
    "You are a helpful assistant. Answer the question concisely in 2-3 sentences. "
    "Be accurate and direct. No markdown formatting, no bullet points, just plain flowing text."
)

PREVIEW_TEMPERATURE = 0.3
PREVIEW_MAX_TOKENS = 200

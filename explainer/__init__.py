"""
Visual Explainer - question in, infographic canvas out.

Run with: uvicorn explainer.main:app --reload
"""

__version__ = "0.1.0"

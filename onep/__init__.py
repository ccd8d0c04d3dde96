"""one-p: AI-powered story writing assistant."""

__version__ = "1.0.0"

"""AI-assisted development commands with an interactive chat session."""

__version__ = "0.1.0"

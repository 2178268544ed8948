"""API routes package."""

from . import ai_check, diff, health, high_accuracy, history, stats, transform

__all__ = ["ai_check", "diff", "health", "high_accuracy", "history", "stats", "transform"]

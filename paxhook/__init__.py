"""Pax AI Hook: routes game chat/action calls to Google, OpenRouter or Copilot backends."""

__version__ = "0.1.0"

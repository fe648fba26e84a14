"""Dated updates: filtering, month navigation and the updates portal."""

"""Data models for ZenFocus."""

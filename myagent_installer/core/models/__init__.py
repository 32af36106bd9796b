"""Data models shared across the installer."""

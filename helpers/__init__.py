"""Key loading and atomic file writing helpers."""

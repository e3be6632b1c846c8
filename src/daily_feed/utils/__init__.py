"""Small shared helpers for dates, text and numbers."""

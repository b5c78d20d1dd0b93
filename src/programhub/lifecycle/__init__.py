"""Parent/child relationship lifecycle."""

"""Core domain packages for tomtimer."""

"""Core infrastructure: logging, configuration loading and field paths."""

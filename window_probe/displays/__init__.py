"""Rich display helpers for the window-probe CLI."""

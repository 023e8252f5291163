"""tripatch command-line interface."""

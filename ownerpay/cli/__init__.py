"""Owner Pay command-line interface."""

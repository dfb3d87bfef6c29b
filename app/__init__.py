"""Application wiring, use cases and the command-line interface."""

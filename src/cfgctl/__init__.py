"""Command-line entry point for inspecting resolved configuration."""

"""Observability helpers shared by the server binaries."""

"""Helpers for HTTP, HTML, images and logging."""

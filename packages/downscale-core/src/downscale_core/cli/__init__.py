"""Downscale CLI package."""

"""Container image metadata, platform parsing, source detection, manifests and node trees."""

__version__ = "0.1.0"
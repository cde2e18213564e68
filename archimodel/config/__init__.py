"""Configuration for archimodel."""

from .constants import CODEC_CONFIG, NAMESPACES, VIEW_LAYOUT, CodecConfig, apply_config, load_config

__all__ = ["CODEC_CONFIG", "NAMESPACES", "VIEW_LAYOUT", "CodecConfig", "apply_config", "load_config"]

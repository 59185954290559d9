"""Configuration and run manifest of a glyphdump run."""

from .file import dump_config, dump_manifest, load_config
from .model import Manifest, RenderConfig, new_manifest

__all__ = ["dump_config", "dump_manifest", "load_config", "Manifest", "RenderConfig", "new_manifest"]

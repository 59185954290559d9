"""Read and write configuration and manifest files."""

import os

from serde import SerdeError
from serde.json import to_json
from serde.toml import from_toml, to_toml

from glyphdump.errors import InvalidConfig
from glyphdump.project.model import Manifest, RenderConfig

MANIFEST_NAME = "manifest.json"


def load_config(path: str) -> RenderConfig:
    try:
        with open(path) as config_file:
            return from_toml(RenderConfig, config_file.read())
    except OSError as e:
        raise InvalidConfig(f"cannot read config file {path}: {e}") from e
    except (SerdeError, ValueError) as e:
        raise InvalidConfig(f"invalid config file {path}: {e}") from e


def dump_config(config: RenderConfig) -> str:
    return to_toml(config)


def _manifest_path(dir: str):
    return os.path.join(dir, MANIFEST_NAME)


def dump_manifest(dir: str, manifest: Manifest):
    s = to_json(manifest)
    with open(_manifest_path(dir), "w") as manifest_file:
        manifest_file.write(s)

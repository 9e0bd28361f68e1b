"""
Version information for the Sui wallet SDK.

An installed distribution reports its version through package metadata.
A source checkout that was never installed falls back to pyproject.toml,
and to DEFAULT_VERSION when that cannot be read either.
"""
import importlib.metadata
import logging
import pathlib

import tomli

DISTRIBUTION = "suiwallet-sdk"
DEFAULT_VERSION = "0.1.0"
PYPROJECT_PATH = pathlib.Path(__file__).parent.parent / "pyproject.toml"

logger = logging.getLogger(__name__)


def read_pyproject_version(path: pathlib.Path = PYPROJECT_PATH) -> str:
    """
    Read `project.version` from a pyproject.toml file.

    Raises:
        OSError: If the file cannot be opened
        KeyError: If the file has no project version
        tomli.TOMLDecodeError: If the file is not valid TOML
    """
    with path.open("rb") as f:
        return tomli.load(f)["project"]["version"]


def get_version() -> str:
    try:
        return importlib.metadata.version(DISTRIBUTION)
    except importlib.metadata.PackageNotFoundError:
        pass
    try:
        return read_pyproject_version()
    except (OSError, KeyError, tomli.TOMLDecodeError) as e:
        logger.debug(f"No version in {PYPROJECT_PATH} ({e!r}), using {DEFAULT_VERSION}")
        return DEFAULT_VERSION


__version__ = get_version()

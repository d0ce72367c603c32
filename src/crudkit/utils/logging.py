"""
Project metadata helpers used to stamp log records (service name and version).

Installed distributions are asked first (importlib.metadata); a source checkout
falls back to the nearest pyproject.toml.
"""

import sys
from importlib import metadata as importlib_metadata
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

DISTRIBUTION_NAME = "crudkit"


def find_pyproject(start: Path, max_up: int = 5) -> Path | None:
    """Walk up from `start` (at most `max_up` levels) looking for pyproject.toml."""
    current = start
    for _ in range(max_up):
        candidate = current / "pyproject.toml"
        if candidate.exists():
            return candidate
        if current.parent == current:
            break
        current = current.parent
    return None


def load_pyproject_data(pyproject_path: Path) -> dict:
    with pyproject_path.open("rb") as f:
        return tomllib.load(f)


def get_pyproject_value(
    key: str,
    start: str | Path | None = None,
    max_up: int = 5,
    default: Any = None,
) -> Any:
    """
    Value at dotted `key` (e.g. "project.version") in the nearest pyproject.toml.

    Returns `default` when no file is found, it cannot be parsed, or the key is missing.
    """
    start_path = Path(start).resolve() if start is not None else Path(__file__).resolve().parent

    pyproject = find_pyproject(start_path, max_up=max_up)
    if pyproject is None or not key:
        return default

    try:
        data = load_pyproject_data(pyproject)
    except (OSError, tomllib.TOMLDecodeError):
        return default

    current: Any = data
    for part in key.split("."):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def get_project_name(start: str | Path | None = None, max_up: int = 5, default: str | None = None) -> str | None:
    return get_pyproject_value("project.name", start=start, max_up=max_up, default=default)


def get_project_version(
    start: str | Path | None = None,
    max_up: int = 5,
    default: str = "unknown",
    prefer_installed: bool = True,
) -> str:
    """
    Version of the running project: the installed distribution's version when
    available, else `project.version` from pyproject.toml, else `default`.
    """
    if prefer_installed:
        name = get_project_name(start=start, max_up=max_up, default=DISTRIBUTION_NAME)
        try:
            return importlib_metadata.version(name)
        except importlib_metadata.PackageNotFoundError:
            pass

    value = get_pyproject_value("project.version", start=start, max_up=max_up, default=None)
    return value if value is not None else default


__all__ = [
    "DISTRIBUTION_NAME",
    "find_pyproject",
    "load_pyproject_data",
    "get_pyproject_value",
    "get_project_name",
    "get_project_version",
]

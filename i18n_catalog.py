#!/usr/bin/env python3
"""Load, flatten and persist nested JSON locale catalogs.

Catalog layout on disk:
    <locales-dir>/<lang>/<file-name>      e.g. public/locales/es/translation.json

A catalog is a JSON object whose leaves are strings or arrays of strings.
Flattening turns it into a `{"dotted.path": leaf}` map; unflattening rebuilds
the tree. Keys containing the path separator are rejected so that the round
trip is lossless.

Examples:
    python i18n_catalog.py --locales-dir public/locales --language es
"""

from __future__ import annotations

import argparse
import json
import os
import tempfile
from pathlib import Path
from typing import Any

PATH_SEPARATOR = "."
DEFAULT_FILE_NAME = "translation.json"

Catalog = dict[str, Any]
FlatCatalog = dict[str, Any]


class CatalogKeyError(ValueError):
    """A key or path cannot be represented as a dotted path."""


class CatalogFormatError(ValueError):
    """A catalog document is valid JSON but not an object."""


def _copy_leaf(value: Any) -> Any:
    if isinstance(value, list):
        return list(value)
    if isinstance(value, dict):
        return {}
    return value


def flatten(catalog: Catalog, prefix: str = "") -> FlatCatalog:
    """Flatten a nested catalog into a dotted-path map.

    Arrays are stored whole, never element-wise. Empty objects are kept as
    `{}` leaves so they survive a round trip.
    """
    flat: FlatCatalog = {}
    for key, value in catalog.items():
        if not isinstance(key, str) or not key:
            raise CatalogKeyError(f"Empty catalog key under {prefix or '<root>'!r}")
        if PATH_SEPARATOR in key:
            where = f"{prefix}{PATH_SEPARATOR}{key}" if prefix else key
            raise CatalogKeyError(
                f"Catalog key contains path separator {PATH_SEPARATOR!r}: {where!r}"
            )
        path = f"{prefix}{PATH_SEPARATOR}{key}" if prefix else key
        if isinstance(value, dict) and value:
            flat.update(flatten(value, path))
        else:
            flat[path] = _copy_leaf(value)
    return flat


def unflatten(flat: FlatCatalog) -> Catalog:
    root: Catalog = {}
    for path, value in flat.items():
        parts = path.split(PATH_SEPARATOR)
        node = root
        for part in parts[:-1]:
            child = node.setdefault(part, {})
            if not isinstance(child, dict):
                raise CatalogKeyError(
                    f"Cannot set {path!r}: segment {part!r} already holds a value"
                )
            node = child
        leaf = parts[-1]
        if leaf in node:
            raise CatalogKeyError(f"Cannot set {path!r}: path already holds an object")
        node[leaf] = _copy_leaf(value)
    return root


def ancestor_paths(path: str) -> list[str]:
    parts = path.split(PATH_SEPARATOR)
    return [PATH_SEPARATOR.join(parts[:i]) for i in range(1, len(parts))]


class CatalogStore:
    def __init__(self, locales_dir: Path, file_name: str = DEFAULT_FILE_NAME) -> None:
        self.locales_dir = locales_dir
        self.file_name = file_name

    def path_for(self, language: str) -> Path:
        return self.locales_dir / language / self.file_name

    def exists(self, language: str) -> bool:
        return self.path_for(language).is_file()

    def read(self, language: str) -> Catalog:
        """Read a catalog, raising on missing, corrupt or non-object files."""
        path = self.path_for(language)
        raw = path.read_text(encoding="utf-8").strip()
        if not raw:
            return {}
        payload = json.loads(raw)
        if not isinstance(payload, dict):
            raise CatalogFormatError(f"Catalog must be a JSON object: {path}")
        return payload

    def load(self, language: str) -> Catalog:
        """Read a catalog; a missing or unreadable file becomes an empty catalog."""
        path = self.path_for(language)
        if not path.is_file():
            print(f"[WARN] Catalog not found: {path}")
            return {}
        try:
            return self.read(language)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, CatalogFormatError) as exc:
            print(f"[WARN] Cannot read catalog {path}: {exc}")
            return {}

    def save(self, language: str, catalog: Catalog) -> Path:
        path = self.path_for(language)
        path.parent.mkdir(parents=True, exist_ok=True)
        text = json.dumps(catalog, ensure_ascii=False, indent=2) + "\n"

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return path


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Print the flattened dotted-path view of a locale catalog."
    )
    parser.add_argument("--locales-dir", type=Path, default=Path("public/locales"))
    parser.add_argument("--file-name", default=DEFAULT_FILE_NAME)
    parser.add_argument("--language", required=True)
    args = parser.parse_args()

    store = CatalogStore(args.locales_dir.resolve(), args.file_name)
    flat = flatten(store.load(args.language))
    for path, value in flat.items():
        print(f"{path} = {json.dumps(value, ensure_ascii=False)}")
    print(f"Keys: {len(flat)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

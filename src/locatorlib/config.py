"""Key-value lookup of remote provider base URLs."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Optional

from locatorlib.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

GEOCODE_KEY = "googleGeoCode"
DISTANCE_MATRIX_KEY = "googleDistanceMatrix"

# Base URLs are plain prefixes: the query is appended verbatim.
DEFAULT_URIS = {
    GEOCODE_KEY: "https://maps.googleapis.com/maps/api/geocode/json?address=",
    DISTANCE_MATRIX_KEY: "https://maps.googleapis.com/maps/api/distancematrix/json?",
}

# Environment variables take priority over the file.
ENV_VARS = {
    GEOCODE_KEY: "LOCATOR_GOOGLE_GEOCODE_URL",
    DISTANCE_MATRIX_KEY: "LOCATOR_GOOGLE_DISTANCE_MATRIX_URL",
}

CONFIG_PATH_VAR = "LOCATOR_URI_CONFIG"


class UriConfig(Mapping[str, str]):
    """
    Read-only mapping of symbolic keys to base URL strings.

    Build one directly from a dict, or use ``load()`` to merge the
    built-in defaults, a JSON file and the environment.
    """

    def __init__(self, uris: Optional[Mapping[str, str]] = None):
        self._uris = dict(uris or {})

    def __getitem__(self, key: str) -> str:
        return self._uris[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._uris)

    def __len__(self) -> int:
        return len(self._uris)

    def url_for(self, key: str) -> Optional[str]:
        """Return the base URL for *key*, or None if it is not configured."""
        return self._uris.get(key) or None

    @classmethod
    def from_file(cls, path: str | Path) -> UriConfig:
        """
        Read a flat JSON object of key -> URL.

        Raises ConfigurationError if the file is not valid JSON or does
        not hold string values.
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ConfigurationError(str(path), str(exc)) from exc
        if not isinstance(data, dict) or not all(
            isinstance(v, str) for v in data.values()
        ):
            raise ConfigurationError(
                str(path), "expected an object of string values"
            )
        return cls(data)

    @classmethod
    def load(
        cls,
        path: str | Path | None = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> UriConfig:
        """
        Merge defaults, the JSON file at *path* and environment overrides.

        *path* defaults to ``$LOCATOR_URI_CONFIG`` or ``uri_config.json``
        in the current directory. A missing file is not an error.
        """
        env = os.environ if environ is None else environ
        if path is None:
            path = env.get(CONFIG_PATH_VAR, str(Path.cwd() / "uri_config.json"))
        uris = dict(DEFAULT_URIS)

        path = Path(path)
        if path.is_file():
            uris.update(cls.from_file(path))
            logger.debug("Loaded URI config from %s", path)

        for key, var in ENV_VARS.items():
            if env.get(var):
                uris[key] = env[var]
        return cls(uris)

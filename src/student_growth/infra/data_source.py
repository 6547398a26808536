"""Loading of the manifest, the CSV payload and the geo boundaries.

Locations are either local paths or ``http(s)`` URLs. Blocking reads run in a
worker thread so the event loop stays responsive while a view waits for data.
"""

from __future__ import annotations

import asyncio
import io
import json
from pathlib import Path
from typing import Any
from urllib.parse import urljoin, urlsplit

import polars as pl
import requests
from pydantic import ValidationError

from student_growth.core.config import Settings
from student_growth.core.errors import DataUnavailableError, ManifestParseError, ManifestUnavailableError
from student_growth.core.models import Manifest
from student_growth.infra.logging import get_logger, redact_url

logger = get_logger(__name__)


def is_remote(location: str) -> bool:
    """Return True for http(s) URLs."""
    return urlsplit(location).scheme in {"http", "https"}


class DataSource:
    """Fetches dataset metadata and payloads."""

    def __init__(self, settings: Settings, session: requests.Session | None = None) -> None:
        """Initialize the data source.

        Args:
            settings: Application settings
            session: Optional HTTP session for remote locations
        """
        self.settings = settings
        self._session = session or requests.Session()
        self._manifest_location = settings.info_file
        self._frames: dict[str, pl.DataFrame] = {}

    @property
    def manifest_location(self) -> str:
        """Location of the manifest most recently requested."""
        return self._manifest_location

    def resolve(self, reference: str) -> str:
        """Resolve a reference found in the manifest against the manifest location.

        Args:
            reference: Relative or absolute path or URL

        Returns:
            Absolute location
        """
        if is_remote(reference) or Path(reference).is_absolute():
            return reference
        if is_remote(self._manifest_location):
            return urljoin(self._manifest_location, reference)
        return str(Path(self._manifest_location).parent / reference)

    def _read_bytes(self, location: str) -> bytes:
        """Read raw bytes from a path or URL.

        Raises:
            OSError: If a local file cannot be read
            requests.RequestException: If a remote fetch fails or returns an error status
        """
        if is_remote(location):
            # Manifest and data must never come from a stale HTTP cache
            response = self._session.get(
                location,
                timeout=self.settings.http_timeout,
                headers={"Cache-Control": "no-cache"},
            )
            response.raise_for_status()
            return response.content
        return Path(location).read_bytes()

    async def fetch_manifest(self, location: str | None = None) -> Manifest:
        """Fetch and parse the manifest.

        Args:
            location: Manifest path or URL; defaults to ``settings.info_file``

        Returns:
            Parsed manifest

        Raises:
            ManifestUnavailableError: If the file cannot be fetched
            ManifestParseError: If the file is not a valid manifest
        """
        self._manifest_location = location or self.settings.info_file
        safe_location = redact_url(self._manifest_location)
        logger.debug("Fetching manifest", location=safe_location)

        try:
            raw = await asyncio.to_thread(self._read_bytes, self._manifest_location)
        except (OSError, requests.RequestException) as e:
            msg = f"Manifest is not available: {e}"
            raise ManifestUnavailableError(msg, source=safe_location) from e

        try:
            manifest = Manifest.model_validate(json.loads(raw))
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            msg = f"Manifest could not be parsed: {e}"
            raise ManifestParseError(msg, source=safe_location) from e

        logger.info(
            "Manifest loaded",
            location=safe_location,
            title=manifest.title,
            attributes=sorted(manifest.attributes),
        )
        return manifest

    async def fetch_csv(self, location: str) -> pl.DataFrame:
        """Fetch and parse the CSV payload.

        Every column is read as a string; views coerce the value columns they
        plot. The first column is always renamed to ``settings.period_column``.
        Parsed frames are kept for the lifetime of the data source.

        Args:
            location: CSV path or URL

        Returns:
            Parsed data frame

        Raises:
            DataUnavailableError: If the file cannot be fetched or parsed
        """
        if location in self._frames:
            return self._frames[location]

        safe_location = redact_url(location)
        try:
            raw = await asyncio.to_thread(self._read_bytes, location)
            frame = pl.read_csv(io.BytesIO(raw), infer_schema_length=0)
        except (OSError, requests.RequestException, pl.exceptions.PolarsError) as e:
            msg = f"Data file is not available: {e}"
            raise DataUnavailableError(msg, source=safe_location) from e

        if frame.width == 0:
            msg = "Data file has no columns"
            raise DataUnavailableError(msg, source=safe_location)

        period_column = self.settings.period_column
        first = frame.columns[0]
        if first != period_column and period_column not in frame.columns:
            frame = frame.rename({first: period_column})

        logger.debug("Data file parsed", location=safe_location, rows=frame.height, cols=frame.width)
        self._frames[location] = frame
        return frame

    async def fetch_geojson(self, location: str) -> dict[str, Any]:
        """Fetch a GeoJSON FeatureCollection.

        Raises:
            DataUnavailableError: If the file cannot be fetched or is not a FeatureCollection
        """
        safe_location = redact_url(location)
        try:
            raw = await asyncio.to_thread(self._read_bytes, location)
            geo = json.loads(raw)
        except (OSError, requests.RequestException, json.JSONDecodeError, UnicodeDecodeError) as e:
            msg = f"Geo file is not available: {e}"
            raise DataUnavailableError(msg, source=safe_location) from e

        if not isinstance(geo, dict) or not isinstance(geo.get("features"), list):
            msg = "Geo file is not a GeoJSON FeatureCollection"
            raise DataUnavailableError(msg, source=safe_location)
        for index, feature in enumerate(geo["features"]):
            if not isinstance(feature, dict) or not isinstance(feature.get("properties") or {}, dict):
                msg = f"Geo file contains an invalid feature at index {index}"
                raise DataUnavailableError(msg, source=safe_location)
        return geo

    def clear_cache(self) -> None:
        """Forget parsed CSV frames."""
        self._frames.clear()

    def download(self, url: str, data_dir: Path) -> Path:
        """Download a remote manifest and its CSV file into a local directory.

        The stored manifest references the CSV by file name so it can be
        loaded from ``data_dir`` afterwards.

        Args:
            url: Manifest URL
            data_dir: Target directory (created if missing)

        Returns:
            Path of the stored manifest

        Raises:
            ManifestUnavailableError: If the manifest cannot be fetched
            ManifestParseError: If the manifest is invalid
            DataUnavailableError: If the CSV cannot be fetched
        """
        safe_url = redact_url(url)
        try:
            raw = self._read_bytes(url)
        except (OSError, requests.RequestException) as e:
            msg = f"Manifest is not available: {e}"
            raise ManifestUnavailableError(msg, source=safe_url) from e

        try:
            manifest = Manifest.model_validate(json.loads(raw))
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            msg = f"Manifest could not be parsed: {e}"
            raise ManifestParseError(msg, source=safe_url) from e

        csv_url = manifest.file if is_remote(manifest.file) else urljoin(url, manifest.file)
        try:
            payload = self._read_bytes(csv_url)
        except (OSError, requests.RequestException) as e:
            msg = f"Data file is not available: {e}"
            raise DataUnavailableError(msg, source=redact_url(csv_url)) from e

        data_dir.mkdir(parents=True, exist_ok=True)
        file_name = Path(urlsplit(csv_url).path).name or "data.csv"
        (data_dir / file_name).write_bytes(payload)

        manifest_path = data_dir / "info.json"
        local_manifest = manifest.model_copy(update={"file": file_name})
        manifest_path.write_text(
            json.dumps(local_manifest.model_dump(), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )

        logger.info("Data set downloaded", source=safe_url, data_dir=str(data_dir), file=file_name)
        return manifest_path

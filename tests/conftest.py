"""Shared fixtures: a small data set written to disk."""

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from student_growth.core.config import Settings
from student_growth.infra.logging import configure_logging

CSV_TEXT = """\
,state,Deutsche männlich,Deutsche weiblich,Ausländer männlich,Ausländer weiblich
WS 2015/16,Bayern,100,110,20,25
WS 2016/17,Bayern,105,115,22,x
WS 2017/18,Bayern,108,120,24,30
WS 2015/16,Berlin,80,90,30,35
WS 2016/17,Berlin,82,95,33,36
WS 2017/18,Berlin,85,99,35,40
WS 2015/16,Deutschland,180,200,50,60
WS 2016/17,Deutschland,187,210,55,71
WS 2017/18,Deutschland,193,219,59,70
"""

MANIFEST: dict[str, Any] = {
    "title": "Studierende an Hochschulen",
    "author": "Statistisches Bundesamt",
    "url": "https://www-genesis.destatis.de/genesis/online",
    "file": "data.csv",
    "attributes": {
        "nationality": ["Deutsche", "Ausländer"],
        "sex": ["männlich", "weiblich"],
        "semester": ["WS 2015/16", "WS 2016/17", "WS 2017/18"],
    },
}


def _square(x: float, y: float) -> list[list[list[float]]]:
    return [[[x, y], [x + 1, y], [x + 1, y + 1], [x, y + 1], [x, y]]]


GEOJSON: dict[str, Any] = {
    "type": "FeatureCollection",
    "features": [
        {
            "type": "Feature",
            "properties": {"name": "Bayern"},
            "geometry": {"type": "Polygon", "coordinates": _square(11.0, 48.0)},
        },
        {
            "type": "Feature",
            "properties": {"name": "Berlin"},
            "geometry": {"type": "Polygon", "coordinates": _square(13.0, 52.0)},
        },
        {
            "type": "Feature",
            "properties": {"name": "Bremen"},
            "geometry": {"type": "Polygon", "coordinates": _square(8.0, 53.0)},
        },
    ],
}


@pytest.fixture
def dataset_dir(tmp_path: Path) -> Path:
    """Directory holding manifest, CSV and boundaries."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "info.json").write_text(json.dumps(MANIFEST, ensure_ascii=False), encoding="utf-8")
    (data_dir / "data.csv").write_text(CSV_TEXT, encoding="utf-8")
    (data_dir / "germany.geo.json").write_text(json.dumps(GEOJSON), encoding="utf-8")
    return data_dir


@pytest.fixture
def settings(dataset_dir: Path) -> Settings:
    """Settings pointing at the test data set."""
    return Settings(
        info_file=str(dataset_dir / "info.json"),
        geo_file=str(dataset_dir / "germany.geo.json"),
    )


@pytest.fixture
def manifest_data() -> dict[str, Any]:
    """Raw manifest payload."""
    return json.loads(json.dumps(MANIFEST))


@pytest.fixture
def csv_text() -> str:
    """Raw CSV payload."""
    return CSV_TEXT


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Restore the package log handler a test may have redirected."""
    yield
    configure_logging()

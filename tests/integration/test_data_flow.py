"""Integration tests: manifest, CSV and boundaries through to the rendered page."""

import asyncio
import json
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

from student_growth.core.config import Settings
from student_growth.core.enums import ControllerState
from student_growth.infra.data_source import DataSource
from student_growth.interfaces.page import Page
from student_growth.orchestration.controller import Controller


def _inline_values(spec: dict[str, Any]) -> list[dict[str, Any]]:
    """Collect inline data rows wherever Altair placed them."""
    rows: list[dict[str, Any]] = []
    for dataset in spec.get("datasets", {}).values():
        rows.extend(dataset)
    for part in [spec, *spec.get("layer", [])]:
        rows.extend(part.get("data", {}).get("values", []))
    return rows


class TestDataFlow:
    """End-to-end flow on local files."""

    def test_page_with_preselection(self, settings: Settings) -> None:
        """Test that a preselected filter set reaches both figures."""
        page = Page(settings, preselected={"nationality": "Ausländer", "sex": "weiblich", "semester": "WS 2017/18"})
        controller = Controller.create(settings, page=page)
        controller.map.set_region("Berlin")

        assert asyncio.run(controller.initialize()) == ControllerState.INTERACTIVE

        chart_spec = controller.chart.to_dict()
        assert chart_spec is not None
        chart_rows = _inline_values(chart_spec)
        assert {"x": "WS 2017/18", "y": 40.0, "active": True} in chart_rows
        assert {"x": "WS 2015/16", "y": 35.0, "active": False} in chart_rows

        map_spec = controller.map.to_dict()
        assert map_spec is not None
        shaded = {
            row["properties"]["name"]: row["properties"]["value"] for row in _inline_values(map_spec)
        }
        assert shaded == {"Bayern": 30.0, "Berlin": 40.0, "Bremen": None}

        html = page.to_html()
        assert "<title>Student Growth: Studierende an Hochschulen</title>" in html
        assert "visibility: visible;" in html

    def test_region_switch(self, settings: Settings) -> None:
        """Test switching the charted region after loading."""
        controller = Controller.create(settings)
        asyncio.run(controller.initialize())

        asyncio.run(controller.map.select_region("Bayern"))

        assert controller.chart.title == "Bayern"
        chart_spec = controller.chart.to_dict()
        assert chart_spec is not None
        assert {"x": "WS 2016/17", "y": 105.0, "active": False} in _inline_values(chart_spec)

    def test_fallback_page(self, tmp_path: Path) -> None:
        """Test the page rendered before any data set was downloaded."""
        settings = Settings(info_file=str(tmp_path / "data" / "info.json"), geo_file=str(tmp_path / "geo.json"))
        controller = Controller.create(settings)

        assert asyncio.run(controller.initialize()) == ControllerState.ERROR_DISPLAYED

        html = controller.page.to_html()
        assert "<h1>Data is not available yet.</h1>" in html
        assert "<main hidden>" in html
        assert "vegaEmbed(" not in html


class TestDownloadThenBuild:
    """Download a remote data set and render it from disk."""

    def test_downloaded_data_set_renders(
        self, settings: Settings, tmp_path: Path, manifest_data: dict[str, Any], csv_text: str
    ) -> None:
        """Test that a downloaded data set can be loaded without network access."""
        manifest_response = MagicMock()
        manifest_response.content = json.dumps(manifest_data).encode("utf-8")
        csv_response = MagicMock()
        csv_response.content = csv_text.encode("utf-8")
        session = MagicMock()
        session.get.side_effect = [manifest_response, csv_response]

        target = tmp_path / "downloaded"
        manifest_path = DataSource(settings, session=session).download("https://example.org/info.json", target)

        local = Settings(info_file=str(manifest_path), geo_file=settings.geo_file)
        controller = Controller.create(local)

        assert asyncio.run(controller.initialize()) == ControllerState.INTERACTIVE
        assert controller.data_file == str(target / "data.csv")
        assert controller.chart.figure is not None

"""Command line entry point for student_growth."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from student_growth import __version__
from student_growth.core.config import Settings
from student_growth.core.enums import ControllerState, FilterAttribute, OutputFormat, ViewName
from student_growth.core.errors import StudentGrowthError
from student_growth.infra.data_source import DataSource
from student_growth.infra.logging import configure_logging, get_logger
from student_growth.interfaces.page import Page
from student_growth.orchestration.controller import Controller
from student_growth.views.export import FigureExporter

logger = get_logger(__name__)


def _settings_from_args(args: argparse.Namespace) -> Settings:
    overrides = {
        key: value
        for key, value in {"info_file": getattr(args, "info", None), "geo_file": getattr(args, "geo", None)}.items()
        if value is not None
    }
    return Settings(**overrides)  # type: ignore[arg-type]


def _page_from_args(args: argparse.Namespace, settings: Settings) -> Page:
    preselected = {
        attribute.value: getattr(args, attribute.value)
        for attribute in FilterAttribute
        if getattr(args, attribute.value, None) is not None
    }
    cookies = f"{settings.device_notice_cookie}=true" if getattr(args, "device_notice_confirmed", False) else ""
    return Page(settings, cookies=cookies, preselected=preselected)


async def _run_controller(args: argparse.Namespace) -> Controller:
    settings = _settings_from_args(args)
    page = _page_from_args(args, settings)
    controller = Controller.create(settings, page=page)
    if args.region:
        controller.map.set_region(args.region)
    await controller.initialize()
    return controller


def cmd_build(args: argparse.Namespace) -> int:
    """Render the page and write it as HTML."""
    controller = asyncio.run(_run_controller(args))

    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(controller.page.to_html(), encoding="utf-8")
    logger.info("Page written", out=str(out), state=controller.state.value)

    if controller.state != ControllerState.INTERACTIVE:
        sys.stderr.write("Data is not available yet. Run 'student-growth download' first.\n")
        return 1
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """Render one view and export it as an image."""
    controller = asyncio.run(_run_controller(args))
    view = controller.chart if args.view == ViewName.CHART.value else controller.map
    if view.figure is None:
        sys.stderr.write(f"Nothing to export: the {args.view} could not be rendered.\n")
        return 1

    data, actual_format, fallback = FigureExporter().export_with_fallback(
        view.figure, OutputFormat(args.format), dpi=args.dpi
    )
    out = Path(args.out)
    if fallback:
        out = out.with_suffix(f".{actual_format.value}")
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(data)
    logger.info("Figure exported", view=args.view, out=str(out), format=actual_format.value, fallback=fallback)
    return 0


def cmd_download(args: argparse.Namespace) -> int:
    """Download a remote manifest and its data file."""
    settings = _settings_from_args(args)
    manifest_path = DataSource(settings).download(args.url, Path(args.data_dir))
    sys.stdout.write(f"{manifest_path}\n")
    return 0


def _add_selection_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--info", help="manifest path or URL (default: STUDENT_GROWTH_INFO_FILE or data/info.json)")
    parser.add_argument("--geo", help="GeoJSON path or URL")
    parser.add_argument("--nationality", help="preselected nationality")
    parser.add_argument("--sex", help="preselected sex")
    parser.add_argument("--semester", help="preselected semester")
    parser.add_argument("--region", help="region shown in the chart")
    parser.add_argument(
        "--device-notice-confirmed", action="store_true", help="render as if the device notice was confirmed"
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="student-growth",
        description="Choropleth map and line chart of student numbers in Germany",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Download the data set
  student-growth download https://example.org/student-growth/info.json --data-dir data

  # Build the page
  student-growth build --out dist/index.html --nationality Ausländer --sex weiblich

  # Export the chart for Bavaria
  student-growth export chart --region Bayern --format svg --out chart.svg
        """.strip(),
    )
    parser.add_argument("--version", action="version", version=f"student-growth {__version__}")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="render the page as static HTML")
    build.add_argument("--out", required=True, help="output HTML file")
    _add_selection_arguments(build)
    build.set_defaults(func=cmd_build)

    export = subparsers.add_parser("export", help="export the chart or the map as an image")
    export.add_argument("view", choices=[view.value for view in ViewName])
    export.add_argument("--out", required=True, help="output image file")
    export.add_argument("--format", choices=[fmt.value for fmt in OutputFormat], default=OutputFormat.SVG.value)
    export.add_argument("--dpi", type=int, default=144, help="resolution for PNG output")
    _add_selection_arguments(export)
    export.set_defaults(func=cmd_export)

    download = subparsers.add_parser("download", help="download the data set")
    download.add_argument("url", help="URL of the remote manifest")
    download.add_argument("--data-dir", default="data", help="target directory (default: data)")
    download.set_defaults(func=cmd_download)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the student-growth command."""
    args = build_parser().parse_args(argv)

    # Logs go to stderr, command output to stdout
    configure_logging(level=logging.DEBUG if args.debug else logging.WARNING, stream=sys.stderr)

    try:
        return int(args.func(args))
    except StudentGrowthError as e:
        logger.error("Command failed", command=args.command, code=e.code.value, error=e.message)
        sys.stderr.write(f"Error: {e.message}\n")
        if e.hint:
            sys.stderr.write(f"Hint: {e.hint}\n")
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""Static export of rendered figures."""

from student_growth.core.enums import OutputFormat
from student_growth.core.errors import ExportError
from student_growth.infra.logging import get_logger
from student_growth.views.themes import FigureT

logger = get_logger(__name__)


class FigureExporter:
    """Exports Altair figures to PNG or SVG with vl-convert."""

    def export(
        self,
        figure: FigureT,
        format: OutputFormat = OutputFormat.SVG,  # noqa: A002
        dpi: int = 144,
    ) -> bytes:
        """Export a figure.

        Args:
            figure: Altair figure
            format: Output format (PNG or SVG)
            dpi: DPI for PNG export

        Returns:
            Encoded image

        Raises:
            ExportError: If export fails
        """
        try:
            if format == OutputFormat.PNG:
                return self._export_png(figure, dpi)
            return self._export_svg(figure).encode("utf-8")
        except ExportError:
            raise
        except Exception as e:
            msg = f"{format.value.upper()} export failed: {e}"
            raise ExportError(msg, format=format.value) from e

    def _export_png(self, figure: FigureT, dpi: int) -> bytes:
        try:
            import vl_convert as vlc  # noqa: PLC0415
        except ImportError as e:
            msg = "vl-convert-python not installed"
            raise ExportError(msg, format=OutputFormat.PNG.value) from e

        return vlc.vegalite_to_png(vl_spec=figure.to_json(), scale=dpi / 96.0)  # type: ignore[no-any-return]

    def _export_svg(self, figure: FigureT) -> str:
        try:
            import vl_convert as vlc  # noqa: PLC0415
        except ImportError as e:
            msg = "vl-convert-python not installed"
            raise ExportError(msg, format=OutputFormat.SVG.value) from e

        return vlc.vegalite_to_svg(vl_spec=figure.to_json())  # type: ignore[no-any-return]

    def export_with_fallback(
        self,
        figure: FigureT,
        preferred_format: OutputFormat = OutputFormat.PNG,
        dpi: int = 144,
    ) -> tuple[bytes, OutputFormat, bool]:
        """Export a figure, falling back to the other format on failure.

        Returns:
            Tuple of (output_data, actual_format, fallback_applied)

        Raises:
            ExportError: If both formats fail
        """
        try:
            return self.export(figure, preferred_format, dpi), preferred_format, False
        except ExportError as first_error:
            fallback_format = OutputFormat.SVG if preferred_format == OutputFormat.PNG else OutputFormat.PNG
            logger.info(
                "Falling back to alternative format",
                from_format=preferred_format.value,
                to_format=fallback_format.value,
                error=first_error.message,
            )
            try:
                return self.export(figure, fallback_format, dpi), fallback_format, True
            except ExportError as e:
                msg = f"Export failed for both formats: {e.message}"
                raise ExportError(msg) from e

"""
Vector Barcode Drawing for ReportLab canvases.

Barcodes are produced by ReportLab's barcode widgets and flattened into a plain
geometry list (rectangles, circles, text runs) with native, top-down
coordinates. Drawing groups the shapes by color so each color is set once and
all of its shapes are filled as a single path.
"""
import logging
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from reportlab.graphics import shapes
from reportlab.graphics.barcode import createBarcodeDrawing, getCodeNames
from reportlab.graphics.transform import mmult, transformPoint
from reportlab.lib import colors

from qrbill.constants import COLOR_CODES
from qrbill.errors import ConfigurationError
from qrbill.utils.pdf_text import aligned_x
from qrbill.utils.qr_vector import saved_state

logger = logging.getLogger(__name__)

HALIGNS = ("left", "center", "right")
_ANCHOR_TO_HALIGN = {"start": "left", "middle": "center", "end": "right"}

# Color code used for shapes whose color is not in the color table.
FOREGROUND_CODE = 0


@dataclass(frozen=True)
class GeometryRect:
    x: float
    y: float
    width: float
    height: float
    color: int = FOREGROUND_CODE


@dataclass(frozen=True)
class GeometryCircle:
    x: float
    y: float
    diameter: float
    color: int = FOREGROUND_CODE


@dataclass(frozen=True)
class TextRun:
    x: float
    y: float
    text: str
    font_size: float
    halign: str = "center"

    def __post_init__(self):
        if self.halign not in HALIGNS:
            raise ConfigurationError(f"Text alignment must be one of {', '.join(HALIGNS)}, not {self.halign!r}")


@dataclass(frozen=True)
class VectorGeometry:
    """Shapes in native units; ``y`` grows downward from the top edge."""
    width: float
    height: float
    rects: Tuple[GeometryRect, ...] = ()
    circles: Tuple[GeometryCircle, ...] = ()
    strings: Tuple[TextRun, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.rects or self.circles or self.strings)


@dataclass(frozen=True)
class EncodedBarcode:
    geometry: VectorGeometry
    foreground_color: object = colors.black
    background_color: object = colors.white


def resolve_dimensions(native_width: float, native_height: float,
                       width: Optional[float] = None, height: Optional[float] = None):
    """
    Compute the rendered size and the scale factors for a native geometry.

    - neither width nor height: native size, scale 1
    - both: independent scale factors (aspect ratio not preserved)
    - one of them: uniform scale, the other dimension keeps the aspect ratio

    Returns:
        Tuple of (width, height, scale_x, scale_y)
    """
    if native_width <= 0 or native_height <= 0:
        raise ConfigurationError(
            f"Barcode geometry must have a positive size, got {native_width}x{native_height}"
        )

    if width is None and height is None:
        return native_width, native_height, 1.0, 1.0
    if width is not None and height is not None:
        return width, height, width / native_width, height / native_height
    if width is not None:
        scale = width / native_width
        return width, native_height * scale, scale, scale
    scale = height / native_height
    return native_width * scale, height, scale, scale


def _color_code(color, color_table) -> int:
    if color is None:
        return FOREGROUND_CODE
    hexval = colors.toColor(color).hexval()
    for code, table_color in color_table.items():
        if colors.toColor(table_color).hexval() == hexval:
            return code
    return FOREGROUND_CODE


def _resolve_symbology(symbology: str) -> str:
    names = {name.lower(): name for name in getCodeNames()}
    key = str(symbology or "").lower().replace("-", "").replace("_", "")
    for candidate in (str(symbology or "").lower(), key):
        if candidate in names:
            return names[candidate]
    raise ConfigurationError(
        f"Unknown barcode symbology {symbology!r}; available: {', '.join(sorted(names.values()))}"
    )


def _flatten(node, matrix, height, color_table, out):
    """Walk a drawing tree and collect primitive shapes in top-down coordinates."""
    if isinstance(node, shapes.Group):
        matrix = mmult(matrix, node.transform)
        for child in node.getContents():
            _flatten(child, matrix, height, color_table, out)
        return

    if isinstance(node, shapes.Rect):
        if node.fillColor is None:
            return  # invisible bounding box added by the widgets
        x0, y0 = transformPoint(matrix, (node.x, node.y))
        x1, y1 = transformPoint(matrix, (node.x + node.width, node.y + node.height))
        out["rects"].append(GeometryRect(
            x=min(x0, x1), y=height - max(y0, y1),
            width=abs(x1 - x0), height=abs(y1 - y0),
            color=_color_code(node.fillColor, color_table),
        ))
    elif isinstance(node, shapes.Circle):
        if node.fillColor is None:
            return
        cx, cy = transformPoint(matrix, (node.cx, node.cy))
        out["circles"].append(GeometryCircle(
            x=cx, y=height - cy, diameter=2 * node.r * abs(matrix[0]),
            color=_color_code(node.fillColor, color_table),
        ))
    elif isinstance(node, shapes.String):
        x, y = transformPoint(matrix, (node.x, node.y))
        out["strings"].append(TextRun(
            x=x, y=height - y, text=node.text,
            font_size=node.fontSize * abs(matrix[3]),
            halign=_ANCHOR_TO_HALIGN.get(node.textAnchor, "left"),
        ))
    else:
        logger.debug(f"[Barcode] skipping unsupported shape {type(node).__name__}")


def encode_barcode(symbology: str, value, background_color=colors.white,
                   color_table: Mapping[int, object] = COLOR_CODES, **encoder_options) -> EncodedBarcode:
    """
    Encode a value with a ReportLab barcode widget and flatten it to vector geometry.

    Args:
        symbology: ReportLab barcode code name, case-insensitive ("Code128", "qr", "ean13")
        value: The value to encode
        background_color: Color used to fill the geometry's bounding box
        color_table: Maps color codes to colors when classifying shape colors
        **encoder_options: Passed unchanged to the barcode widget

    Returns:
        EncodedBarcode in native units (points)

    Raises:
        ConfigurationError: Unknown symbology or value rejected by the encoder
    """
    code_name = _resolve_symbology(symbology)
    try:
        drawing = createBarcodeDrawing(code_name, value=value, **encoder_options)
    except (ValueError, TypeError, AttributeError) as e:
        raise ConfigurationError(f"Barcode {code_name} cannot encode {value!r}: {e}") from e

    collected = {"rects": [], "circles": [], "strings": []}
    _flatten(drawing.expandUserNodes(), (1, 0, 0, 1, 0, 0), drawing.height, color_table, collected)

    geometry = VectorGeometry(
        width=drawing.width,
        height=drawing.height,
        rects=tuple(collected["rects"]),
        circles=tuple(collected["circles"]),
        strings=tuple(collected["strings"]),
    )
    logger.debug(
        f"[Barcode] {code_name} {geometry.width:.1f}x{geometry.height:.1f}: "
        f"{len(geometry.rects)} rects, {len(geometry.circles)} circles, {len(geometry.strings)} strings"
    )
    return EncodedBarcode(
        geometry=geometry,
        foreground_color=encoder_options.get("barFillColor", colors.black),
        background_color=background_color,
    )


def _color_groups(geometry: VectorGeometry):
    """Group rects and circles by color code in order of first appearance."""
    groups = {}
    for shape in geometry.rects + geometry.circles:
        groups.setdefault(shape.color, []).append(shape)
    return groups


def draw_geometry(c, encoded: EncodedBarcode, at=(0, 0), width: Optional[float] = None,
                  height: Optional[float] = None, font: str = "Helvetica",
                  color_table: Mapping[int, object] = COLOR_CODES):
    """
    Draw encoded barcode geometry onto a ReportLab canvas.

    All shapes share one transform (translate to ``at`` + scale), so the
    geometry is drawn in native units.

    Args:
        c: ReportLab canvas object
        encoded: Geometry plus foreground/background colors
        at: Bottom-left corner
        width, height: Requested size (see resolve_dimensions)
        font: Font used for the text runs
        color_table: Color code -> color; other codes use the foreground color

    Returns:
        Tuple of (width, height) actually drawn

    Raises:
        ConfigurationError: For a color code that is neither in the table nor
                            covered by a foreground color
    """
    geometry = encoded.geometry
    native_w, native_h = geometry.width, geometry.height
    out_w, out_h, sx, sy = resolve_dimensions(native_w, native_h, width, height)

    groups = _color_groups(geometry)
    fills = {}
    for code in groups:
        color = color_table.get(code, encoded.foreground_color)
        if color is None:
            raise ConfigurationError(f"Unknown barcode color code {code} and no foreground color set")
        fills[code] = color
    if geometry.strings and encoded.foreground_color is None:
        raise ConfigurationError("Barcode text needs a foreground color")

    with saved_state(c):
        c.translate(*at)
        c.scale(sx, sy)

        if encoded.background_color is not None:
            c.setFillColor(encoded.background_color)
            c.rect(0, 0, native_w, native_h, stroke=0, fill=1)

        for code, group in groups.items():
            c.setFillColor(fills[code])
            path = c.beginPath()
            for shape in group:
                if isinstance(shape, GeometryRect):
                    path.rect(shape.x, native_h - shape.y - shape.height, shape.width, shape.height)
                else:
                    path.circle(shape.x, native_h - shape.y, shape.diameter / 2)
            c.drawPath(path, stroke=0, fill=1)

        if geometry.strings:
            c.setFillColor(encoded.foreground_color)
        for run in geometry.strings:
            c.setFont(font, run.font_size)
            x = aligned_x(run.text, run.x, font, run.font_size, run.halign)
            c.drawString(x, native_h - run.y, run.text)

    return out_w, out_h


@dataclass(frozen=True)
class BarcodeConfig:
    """
    Configuration for drawing a barcode.

    at:              Bottom-left corner (default: (0, 0))
    width, height:   Requested size (default: None, see resolve_dimensions)
    font:            Font for human readable text (default: "Helvetica")
    symbology:       ReportLab barcode code name (required for drawing)
    value:           The value to encode (required for drawing)
    encoder_options: Passed unchanged to the barcode widget (e.g. barHeight, humanReadable)
    """
    at: Tuple[float, float] = (0, 0)
    width: Optional[float] = None
    height: Optional[float] = None
    font: str = "Helvetica"
    symbology: Optional[str] = None
    value: object = None
    encoder_options: Mapping[str, object] = field(default_factory=lambda: MappingProxyType({}))

    def configure(self, **changes) -> "BarcodeConfig":
        """
        Return a copy with all non-None ``changes`` applied.

        Keywords that are not configuration fields are merged into
        ``encoder_options``.
        """
        known = {f.name for f in fields(self)}
        own = {k: v for k, v in changes.items() if k in known and v is not None}
        extra = {k: v for k, v in changes.items() if k not in known}
        if extra or "encoder_options" in own:
            merged = dict(self.encoder_options)
            merged.update(own.pop("encoder_options", {}))
            merged.update(extra)
            own["encoder_options"] = MappingProxyType(merged)
        return replace(self, **own)

    def encode(self) -> EncodedBarcode:
        if self.symbology is None or self.value is None:
            raise ConfigurationError("Barcode symbology and value must be provided")
        return encode_barcode(self.symbology, self.value, **dict(self.encoder_options))

    def draw(self, c):
        """Encode and draw the barcode; returns the drawn (width, height)."""
        return draw_geometry(c, self.encode(), at=self.at, width=self.width,
                             height=self.height, font=self.font)

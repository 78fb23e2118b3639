"""
Vector QR Code Drawing for ReportLab canvases.

Each row of the QR module grid is drawn as ONE horizontal line whose dash
pattern lands the "on" segments exactly on the dark modules. The line width
equals the module size and uses butt caps, so neighbouring rows and segments
tile without gaps or overlaps. No raster images are involved.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass, fields, replace
from typing import List, NamedTuple, Optional, Sequence, Tuple

import qrcode
import qrcode.constants
import qrcode.exceptions
import qrcode.util

from qrbill.errors import ConfigurationError

logger = logging.getLogger(__name__)

LINE_CAP_BUTT = 0

ERROR_LEVELS = {
    "L": qrcode.constants.ERROR_CORRECT_L,  # 7%
    "M": qrcode.constants.ERROR_CORRECT_M,  # 15%
    "Q": qrcode.constants.ERROR_CORRECT_Q,  # 25%
    "H": qrcode.constants.ERROR_CORRECT_H,  # 30%
}

DATA_MODES = {
    "number": qrcode.util.MODE_NUMBER,
    "alphanumeric": qrcode.util.MODE_ALPHA_NUM,
    "byte": qrcode.util.MODE_8BIT_BYTE,
}


@contextmanager
def saved_state(c):
    """Scope graphics state changes; the state is restored on every exit path."""
    c.saveState()
    try:
        yield c
    finally:
        c.restoreState()


class ModuleGrid:
    """Immutable rectangular matrix of QR modules (True = dark)."""

    def __init__(self, rows: Sequence[Sequence[bool]]):
        self.rows = tuple(tuple(bool(m) for m in row) for row in rows)
        widths = {len(row) for row in self.rows}
        if len(widths) > 1:
            raise ConfigurationError(f"Module grid rows must have equal length, got {sorted(widths)}")

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def col_count(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def __iter__(self):
        return iter(self.rows)

    def __eq__(self, other):
        return isinstance(other, ModuleGrid) and self.rows == other.rows

    def __repr__(self):
        return f"ModuleGrid({self.row_count}x{self.col_count})"


@dataclass(frozen=True)
class RenderParams:
    size: float
    origin: Tuple[float, float] = (0, 0)
    dark_color: object = "black"
    light_color: object = None


class StrokeRow(NamedTuple):
    dash: List[float]
    y: float


def row_dash_pattern(row: Sequence[bool], module_size: float) -> List[float]:
    """
    Run-length encode one module row into an on/off dash pattern.

    Element 0 is always an "on" (dark) segment: a row that starts with a light
    module gets a zero-length leading segment.
    """
    pattern = [0.0]
    last_is_dark = row[0]
    for is_dark in row:
        if is_dark == last_is_dark:
            pattern[-1] += module_size
        else:
            last_is_dark = is_dark
            pattern.append(module_size)
    if not row[0]:
        pattern.insert(0, 0.0)
    return pattern


def scanline_strokes(grid: ModuleGrid, size: float) -> List[StrokeRow]:
    """
    Compute one stroke per grid row for a QR code of edge length ``size``.

    Rows are listed top to bottom; ``y`` is the vertical center of the row's
    module band measured from the bottom edge.
    """
    if grid.col_count == 0:
        raise ConfigurationError("Module grid must contain at least one column")
    if size is None or size <= 0:
        raise ConfigurationError(f"QR code size must be positive, got {size}")

    module_size = size / grid.col_count
    y_start = size - module_size / 2
    return [
        StrokeRow(row_dash_pattern(row, module_size), y_start - module_size * index)
        for index, row in enumerate(grid)
    ]


def draw_module_grid(c, grid: ModuleGrid, params: RenderParams) -> None:
    """
    Draw a module grid onto a ReportLab canvas.

    Args:
        c: ReportLab canvas object
        grid: The QR modules
        params: Bottom-left origin, edge length and colors. Without a light
                color the light modules are not painted at all.

    Raises:
        ConfigurationError: If the grid has no columns or the size is not positive
    """
    strokes = scanline_strokes(grid, params.size)
    module_size = params.size / grid.col_count

    with saved_state(c):
        c.translate(*params.origin)
        if params.light_color is not None:
            c.setFillColor(params.light_color)
            c.rect(0, 0, params.size, params.size, stroke=0, fill=1)

        c.setLineCap(LINE_CAP_BUTT)
        c.setLineWidth(module_size)
        c.setStrokeColor(params.dark_color)
        for stroke in strokes:
            c.setDash(stroke.dash, 0)
            c.line(0, stroke.y, params.size, stroke.y)


def encode_qr(data, version: Optional[int] = None, max_version: Optional[int] = None,
              level: Optional[str] = None, mode: Optional[str] = None) -> ModuleGrid:
    """
    Encode data into a QR module grid using the ``qrcode`` library.

    Args:
        data: The string (or bytes) to encode
        version: QR version 1-40 (None = smallest that fits)
        max_version: Largest acceptable version when auto-fitting
        level: Error correction level L/M/Q/H (None = M)
        mode: "number", "alphanumeric" or "byte" (None = most compact)

    Returns:
        ModuleGrid without quiet zone.

    Raises:
        ConfigurationError: For invalid parameters or data that does not fit
    """
    level_key = (level or "M").upper()
    if level_key not in ERROR_LEVELS:
        raise ConfigurationError(f"Unknown QR error correction level: {level}")

    try:
        qr = qrcode.QRCode(version=version, error_correction=ERROR_LEVELS[level_key], border=0)
        if mode is not None:
            if mode not in DATA_MODES:
                raise ConfigurationError(f"Unknown QR data mode: {mode}")
            qr.add_data(qrcode.util.QRData(data, mode=DATA_MODES[mode]))
        else:
            qr.add_data(data)
        qr.make(fit=version is None)
    except (ValueError, qrcode.exceptions.DataOverflowError) as e:
        raise ConfigurationError(f"QR code cannot be generated: {e or type(e).__name__}") from e

    if max_version is not None and qr.version > max_version:
        raise ConfigurationError(f"QR code needs version {qr.version}, maximum is {max_version}")

    logger.debug(f"[QR] encoded {len(data)} chars as version {qr.version} level {level_key}")
    return ModuleGrid(qr.modules)


@dataclass(frozen=True)
class QRCodeConfig:
    """
    Configuration for drawing a QR code.

    at:            Bottom-left corner of the QR code (default: (0, 0))
    size:          Edge length of the whole rendered QR code (required for drawing)
    dark_color:    Color of the dark modules (default: "black")
    light_color:   Color of the light modules (default: None, i.e. not drawn)
    data:          The data to encode (required for drawing)
    code_size:     QR version (default: None, smallest that fits)
    max_code_size: Maximum QR version (default: None)
    level:         Error correction level (default: None, i.e. M)
    mode:          Data mode (default: None, most compact)
    """
    at: Tuple[float, float] = (0, 0)
    size: Optional[float] = None
    dark_color: object = "black"
    light_color: object = None
    data: Optional[str] = None
    code_size: Optional[int] = None
    max_code_size: Optional[int] = None
    level: Optional[str] = None
    mode: Optional[str] = None

    def configure(self, **changes) -> "QRCodeConfig":
        """Return a copy with all non-None ``changes`` applied."""
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise ConfigurationError(f"Unknown QR code option(s): {', '.join(sorted(unknown))}")
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def module_grid(self) -> ModuleGrid:
        if self.data is None:
            raise ConfigurationError("QR code data must be provided")
        return encode_qr(self.data, version=self.code_size, max_version=self.max_code_size,
                         level=self.level, mode=self.mode)

    def draw(self, c) -> None:
        """Draw the QR code onto the canvas at ``at`` with edge length ``size``."""
        if self.size is None:
            raise ConfigurationError("QR code size must be provided")
        params = RenderParams(size=self.size, origin=self.at,
                              dark_color=self.dark_color, light_color=self.light_color)
        draw_module_grid(c, self.module_grid(), params)


def draw_vector_qr(c, qr_value: str, x: float, y: float, size: float,
                   dark_color="black", light_color=None, level: str = "M") -> None:
    """
    Draw a QR code as vector strokes on a ReportLab canvas.

    Args:
        c: ReportLab canvas object
        qr_value: Data to encode
        x, y: Bottom-left corner of the QR code (no quiet zone is added)
        size: QR code edge length in points
        dark_color: Color of the dark modules
        light_color: Optional background color for the light modules
        level: Error correction level ('L', 'M', 'Q', 'H')
    """
    QRCodeConfig(at=(x, y), size=size, dark_color=dark_color, light_color=light_color,
                 data=qr_value, level=level).draw(c)

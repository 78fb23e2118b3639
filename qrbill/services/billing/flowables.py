"""
Box-fitting building blocks for the QR-bill, built on ReportLab platypus.

Every block follows the Flowable protocol: ``wrapOn`` measures the block and
records where its children go (nothing is drawn), ``drawOn`` draws it at the
recorded positions. After wrapping, ``fit_successful`` tells whether the block
and everything inside it fit the space it was given.
"""
import logging

from reportlab.platypus import Flowable

from qrbill.services.billing.layout_utils import draw_corner_marks
from qrbill.utils.barcode_vector import draw_geometry, resolve_dimensions
from qrbill.utils.qr_vector import QRCodeConfig, RenderParams, draw_module_grid

logger = logging.getLogger(__name__)

# Tolerance for sums of mm values that should fill a box exactly.
EPSILON = 1e-6


def _padding(value):
    """Normalize padding to (top, right, bottom, left)."""
    if isinstance(value, (int, float)):
        return (value,) * 4
    return tuple(value)


def _child_fits(child) -> bool:
    return getattr(child, "fit_successful", True)


class Stack(Flowable):
    """
    Vertical container: children are placed top to bottom.

    Without a fixed width the stack takes the available width; without a fixed
    height it shrinks to its content. A child's ``spaceAfter`` is honoured
    between children.
    """

    def __init__(self, children, width=None, height=None, padding=0, name=None):
        Flowable.__init__(self)
        self.children = [child for child in children if child is not None]
        self.fixed_width = width
        self.fixed_height = height
        self.padding = _padding(padding)
        self.name = name
        self.placements = []
        self.fit_successful = False

    def wrap(self, availWidth, availHeight):
        top, right, bottom, left = self.padding
        canv = getattr(self, "canv", None)
        width = self.fixed_width if self.fixed_width is not None else availWidth
        max_height = self.fixed_height if self.fixed_height is not None else availHeight
        inner_width = width - left - right
        inner_height = max_height - top - bottom

        fit = width <= availWidth + EPSILON and max_height <= availHeight + EPSILON
        used = 0
        offsets = []
        for index, child in enumerate(self.children):
            if index:
                used += self.children[index - 1].getSpaceAfter()
            _, child_height = child.wrapOn(canv, inner_width, max(inner_height - used, 0))
            if used + child_height > inner_height + EPSILON or not _child_fits(child):
                fit = False
            offsets.append((child, used, child_height))
            used += child_height

        height = self.fixed_height if self.fixed_height is not None else used + top + bottom
        self.placements = [
            (child, left, height - top - offset - child_height)
            for child, offset, child_height in offsets
        ]
        self.fit_successful = fit
        self.width, self.height = width, height
        if not fit:
            logger.debug(f"[Layout] {self.name or 'stack'} overflows: {used:.2f}pt used of {inner_height:.2f}pt")
        return width, height

    def draw(self):
        for child, x, y in self.placements:
            child.drawOn(self.canv, x, y)


class Row(Flowable):
    """
    Horizontal container with column widths; ``None`` columns share the remainder.

    Children are top-aligned; the row is as high as its tallest child unless a
    fixed height is given.
    """

    def __init__(self, children, widths, height=None):
        Flowable.__init__(self)
        self.children = list(children)
        self.widths = list(widths)
        self.fixed_height = height
        self.placements = []
        self.fit_successful = False

    def wrap(self, availWidth, availHeight):
        canv = getattr(self, "canv", None)
        fixed = sum(w for w in self.widths if w is not None)
        flexible = [w for w in self.widths if w is None]
        remainder = (availWidth - fixed) / len(flexible) if flexible else 0
        max_height = self.fixed_height if self.fixed_height is not None else availHeight

        fit = fixed <= availWidth + EPSILON and remainder >= 0 and max_height <= availHeight + EPSILON
        x = 0
        columns = []
        for child, column_width in zip(self.children, self.widths):
            column_width = remainder if column_width is None else column_width
            _, child_height = child.wrapOn(canv, column_width, max_height)
            if child_height > max_height + EPSILON or not _child_fits(child):
                fit = False
            columns.append((child, x, child_height))
            x += column_width

        height = self.fixed_height
        if height is None:
            height = max((child_height for _, _, child_height in columns), default=0)
        self.placements = [(child, cx, height - child_height) for child, cx, child_height in columns]
        self.fit_successful = fit
        self.width, self.height = availWidth, height
        return availWidth, height

    def draw(self):
        for child, x, y in self.placements:
            child.drawOn(self.canv, x, y)


class QRCodeFlowable(Flowable):
    """
    Square QR code as large as the available space allows (minus padding).

    The module grid is encoded while wrapping, so encoding errors surface
    before anything is drawn. ``overlay(c, center_x, center_y)`` is drawn on
    top of the code, e.g. the Swiss cross.
    """

    def __init__(self, config: QRCodeConfig, padding=0, overlay=None):
        Flowable.__init__(self)
        self.config = config
        self.padding = _padding(padding)
        self.overlay = overlay
        self.size = 0
        self.grid = None
        self.fit_successful = False

    def wrap(self, availWidth, availHeight):
        top, right, bottom, left = self.padding
        self.size = min(availWidth - left - right, availHeight - top - bottom)
        self.fit_successful = self.size > 0
        if self.grid is None:
            self.grid = self.config.module_grid()
        self.width, self.height = availWidth, max(self.size, 0) + top + bottom
        return self.width, self.height

    def draw(self):
        top, right, bottom, left = self.padding
        params = RenderParams(size=self.size, origin=(left, bottom),
                              dark_color=self.config.dark_color, light_color=self.config.light_color)
        draw_module_grid(self.canv, self.grid, params)
        if self.overlay is not None:
            self.overlay(self.canv, left + self.size / 2, bottom + self.size / 2)


class BarcodeFlowable(Flowable):
    """Barcode box sized by its configuration (see resolve_dimensions)."""

    def __init__(self, config):
        Flowable.__init__(self)
        self.config = config
        self.encoded = None
        self.fit_successful = False

    def wrap(self, availWidth, availHeight):
        if self.encoded is None:
            self.encoded = self.config.encode()
        geometry = self.encoded.geometry
        width, height, _, _ = resolve_dimensions(geometry.width, geometry.height,
                                                 self.config.width, self.config.height)
        self.fit_successful = width <= availWidth + EPSILON and height <= availHeight + EPSILON
        self.width, self.height = width, height
        return width, height

    def draw(self):
        draw_geometry(self.canv, self.encoded, width=self.config.width,
                      height=self.config.height, font=self.config.font)


class BlankField(Flowable):
    """Empty field for manual entry, marked by L-shaped corner marks."""

    def __init__(self, width, height):
        Flowable.__init__(self)
        self.width = width
        self.height = height
        self.fit_successful = False

    def wrap(self, availWidth, availHeight):
        self.fit_successful = self.width <= availWidth + EPSILON and self.height <= availHeight + EPSILON
        return self.width, self.height

    def draw(self):
        draw_corner_marks(self.canv, self.width, self.height)

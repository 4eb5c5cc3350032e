"""Line fitting and density adjustment for AF Form 1206 / EPB statements."""

from statement_fitter.fitting.controller import FitController, FitReport, SlotState
from statement_fitter.fitting.density import compress, expand, normalize, toggle_segment
from statement_fitter.fitting.measure import (
    AF1206_LINE_WIDTH_PX,
    CompressionMarker,
    measure_width,
)
from statement_fitter.fitting.segmenter import (
    VisualLineSegment,
    rendered_line_count,
    segment_into_lines,
)

__all__ = [
    "AF1206_LINE_WIDTH_PX",
    "CompressionMarker",
    "FitController",
    "FitReport",
    "SlotState",
    "VisualLineSegment",
    "compress",
    "expand",
    "measure_width",
    "normalize",
    "rendered_line_count",
    "segment_into_lines",
    "toggle_segment",
]

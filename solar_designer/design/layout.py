"""Rectangular roof layout for a chosen panel count."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional

from .catalog import PanelOption
from .requirements import RoofConstraints

DEFAULT_ROOF_AREA_M2 = 100.0
DEFAULT_LAYOUT_TILT = 30.0
DEFAULT_LAYOUT_AZIMUTH = 180.0
ROW_SPACING_M = 1.5
PANEL_SPACING_M = 0.02


@dataclass(frozen=True)
class RoofLayout:
    """
    Grid of panels on the roof.

    ``panels_per_row`` lists the count of each row; the last row may be
    partially filled.
    """

    total_panels: int
    rows: int
    panels_per_row: List[int]
    row_spacing_m: float
    panel_spacing_m: float
    tilt: float
    azimuth: float
    total_roof_area_m2: float
    panel_area_m2: float
    utilization_percentage: float


def plan_roof_layout(
    panel: PanelOption,
    quantity: int,
    roof: Optional[RoofConstraints] = None,
) -> RoofLayout:
    """Pack ``quantity`` panels into rows of at most sqrt(area / panel area)."""
    if quantity < 1:
        raise ValueError("quantity must be at least 1")
    roof = roof or RoofConstraints()
    roof_area = roof.available_area or DEFAULT_ROOF_AREA_M2
    single_area = panel.area_m2

    max_per_row = max(1, math.floor(math.sqrt(roof_area / single_area)))
    rows = math.ceil(quantity / max_per_row)
    per_row = [max_per_row] * (rows - 1) + [quantity - max_per_row * (rows - 1)]

    panel_area = quantity * single_area
    return RoofLayout(
        total_panels=quantity,
        rows=rows,
        panels_per_row=per_row,
        row_spacing_m=ROW_SPACING_M,
        panel_spacing_m=PANEL_SPACING_M,
        tilt=roof.tilt_angle if roof.tilt_angle is not None else DEFAULT_LAYOUT_TILT,
        azimuth=roof.azimuth_angle if roof.azimuth_angle is not None else DEFAULT_LAYOUT_AZIMUTH,
        total_roof_area_m2=roof_area,
        panel_area_m2=panel_area,
        utilization_percentage=panel_area / roof_area * 100.0,
    )

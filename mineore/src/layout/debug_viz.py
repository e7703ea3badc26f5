"""Debug visualization for planned mining layouts.

Renders the selection, the deposit tiles and every placed marker to a PNG so
a layout can be checked without starting the game.

Usage:
    visualizer = LayoutVisualizer(scenario.deposits, bounds=scenario.bounds)
    visualizer.render(report.markers, "layout.png", title="iron-ore")
"""

from pathlib import Path
from typing import AbstractSet, Dict, Iterable, Optional, Tuple

from mineore.src.common.constants import (
    STAGE_BOOSTERS,
    STAGE_PIPES,
    STAGE_RELAYS,
    STAGE_TRANSPORTERS,
    STAGE_UNITS,
)
from mineore.src.common.geometry import BoundingBox, Tile
from mineore.src.placement.markers import PlaceholderMarker

# Optional dependencies for visualization
try:
    import matplotlib

    matplotlib.use("Agg")  # Non-interactive backend
    import matplotlib.pyplot as plt
    from matplotlib.patches import Rectangle

    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False


STAGE_COLORS: Dict[str, str] = {
    STAGE_UNITS: "#4a6fa5",
    STAGE_TRANSPORTERS: "#e0b020",
    STAGE_PIPES: "#6fb0c0",
    STAGE_RELAYS: "#8a5a2b",
    STAGE_BOOSTERS: "#9b59b6",
}

DEPOSIT_COLORS = ["#c8c8c8", "#d9a38c", "#9cc79c", "#c7b99c", "#b0b0d8"]


class LayoutVisualizer:
    """Draw deposits and markers of one placement run."""

    def __init__(
        self,
        deposits: Dict[str, AbstractSet[Tile]],
        bounds: Optional[BoundingBox] = None,
        figsize: Tuple[float, float] = (10, 10),
        dpi: int = 100,
    ):
        if not HAS_MATPLOTLIB:
            raise RuntimeError("matplotlib is required for visualization")

        self.deposits = deposits
        self.bounds = bounds
        self.figsize = figsize
        self.dpi = dpi

    def render(
        self,
        markers: Iterable[PlaceholderMarker],
        output_path: str,
        title: str = "",
    ) -> Path:
        """Save the layout to ``output_path`` and return the path."""
        markers = list(markers)
        fig, ax = plt.subplots(figsize=self.figsize, dpi=self.dpi)

        self._draw_deposits(ax)
        self._draw_markers(ax, markers)
        self._setup_axes(ax, markers, title)

        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        plt.savefig(path, bbox_inches="tight", dpi=self.dpi)
        plt.close(fig)
        return path

    def _draw_deposits(self, ax) -> None:
        for index, (name, tiles) in enumerate(sorted(self.deposits.items())):
            color = DEPOSIT_COLORS[index % len(DEPOSIT_COLORS)]
            for tx, ty in tiles:
                ax.add_patch(Rectangle((tx, ty), 1, 1, facecolor=color, edgecolor="none"))
            # Legend entry only
            ax.add_patch(Rectangle((0, 0), 0, 0, facecolor=color, label=name))

    def _draw_markers(self, ax, markers) -> None:
        for marker in markers:
            area = marker.area
            color = STAGE_COLORS.get(marker.stage, "#333333")
            ax.add_patch(
                Rectangle(
                    (area.left, area.top),
                    area.width,
                    area.height,
                    facecolor=color,
                    edgecolor="black",
                    linewidth=0.5,
                    alpha=0.85,
                )
            )
            if marker.direction is not None:
                ax.text(
                    marker.position.x,
                    marker.position.y,
                    marker.direction.value[0].upper(),
                    ha="center",
                    va="center",
                    fontsize=6,
                    color="white",
                )

    def _setup_axes(self, ax, markers, title: str) -> None:
        areas = [marker.area for marker in markers]
        if self.bounds is not None:
            areas.append(self.bounds)
        if areas:
            ax.set_xlim(min(a.left for a in areas) - 1, max(a.right for a in areas) + 1)
            ax.set_ylim(max(a.bottom for a in areas) + 1, min(a.top for a in areas) - 1)

        if self.bounds is not None:
            ax.add_patch(
                Rectangle(
                    (self.bounds.left, self.bounds.top),
                    self.bounds.width,
                    self.bounds.height,
                    fill=False,
                    edgecolor="red",
                    linestyle="--",
                )
            )

        ax.set_aspect("equal")
        ax.set_title(title or f"{len(markers)} markers")
        if self.deposits:
            ax.legend(loc="upper right", fontsize=8)

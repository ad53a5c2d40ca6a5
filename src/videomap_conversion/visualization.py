"""Preview plots of aggregated video maps."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from .artifacts import VideoMap
from .coordinates import points_to_array

logger = logging.getLogger(__name__)

try:
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    _HAS_MATPLOTLIB = True
except ImportError:
    _HAS_MATPLOTLIB = False


def plot_video_maps(
    video_maps: dict[str, VideoMap],
    output_path: Optional[Path] = None,
    title: Optional[str] = None,
    ax: Any = None,
) -> Any:
    """Draw every line of every video map in lon/lat space.

    Args:
        video_maps: Aggregated maps keyed by display name.
        output_path: Save PNG to this path when set.
        title: Plot title.
        ax: Existing matplotlib Axes to draw on. A new figure is created if None.

    Returns:
        The matplotlib Axes object used for drawing.
    """
    if not _HAS_MATPLOTLIB:
        raise ImportError(
            "matplotlib is required for video map previews. "
            "Install it with: pip install matplotlib"
        )

    if not video_maps:
        logger.warning("No video maps to plot.")
        return ax

    created_fig = False
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(10, 10))
        created_fig = True

    cmap = plt.get_cmap("tab20")
    for i, (name, video_map) in enumerate(sorted(video_maps.items())):
        color = cmap(i % cmap.N)
        labelled = False
        for line in video_map.lines:
            if len(line) < 2:
                continue
            arr = points_to_array(line)
            ax.plot(
                arr[:, 0], arr[:, 1],
                color=color,
                linewidth=0.6,
                alpha=0.9 if video_map.group == 0 else 0.5,
                label=None if labelled else name,
            )
            labelled = True

    ax.set_aspect("equal", "datalim")
    ax.set_xlabel("Longitude (deg)")
    ax.set_ylabel("Latitude (deg)")
    if title:
        ax.set_title(title)
    if len(video_maps) <= 20:
        ax.legend(loc="upper right", fontsize=6)

    if output_path is not None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        ax.get_figure().savefig(str(output_path), dpi=150, bbox_inches="tight")
        logger.info("Saved video map preview to %s", output_path)

    if created_fig:
        plt.close(fig)

    return ax

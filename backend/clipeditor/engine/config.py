"""Editor configuration: interaction tolerances and geometry sample counts."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class EditorConfig:
    """Tunables shared by the mutation engine, viewport and interaction controller."""

    # Default handle length (percent units) for freshly added points
    handle_length: float = 5.0
    # Below this distance (percent units) a new point keeps the default handles
    min_direction_distance: float = 1.0
    # handle_out shorter than this has no usable direction when locking mirror
    degenerate_handle_length: float = 0.001

    # Zoom
    min_scale: float = 0.1
    max_scale: float = 10.0
    zoom_step: float = 1.2
    wheel_zoom_in: float = 1.1
    wheel_zoom_out: float = 0.9
    fit_padding: float = 100.0
    fit_max_scale: float = 2.0

    # Hit targets, in screen pixels (drawn as r / scale in image space)
    point_hit_radius: float = 7.0
    handle_hit_radius: float = 5.0
    # Click tolerance for inserting on a segment, in screen pixels
    segment_hit_threshold: float = 10.0
    # Marquee smaller than this on both axes is a plain click
    marquee_min_size: float = 5.0

    # Undo depth
    history_limit: int = 50

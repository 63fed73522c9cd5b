"""Viewport transform: pan/zoom state and screen <-> image coordinate mapping.

The image is drawn centred in its container, then translated by (pan_x, pan_y)
and scaled by ``scale`` about the container centre:

    screen = container_centre + pan + (image_px - image_size / 2) * scale
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from clipeditor.engine.config import EditorConfig

_DEFAULTS = EditorConfig()


@dataclass(frozen=True)
class ContainerRect:
    """Screen-space bounds of the canvas element."""

    left: float = 0.0
    top: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def center(self) -> tuple[float, float]:
        return (self.left + self.width / 2.0, self.top + self.height / 2.0)


@dataclass(frozen=True)
class Viewport:
    pan_x: float = 0.0
    pan_y: float = 0.0
    scale: float = 1.0

    @classmethod
    def identity(cls) -> Viewport:
        return cls()

    @staticmethod
    def clamp_scale(scale: float, config: EditorConfig = _DEFAULTS) -> float:
        return max(config.min_scale, min(config.max_scale, scale))

    def zoom_in(self, config: EditorConfig = _DEFAULTS) -> Viewport:
        """Centre-anchored zoom step; pan is unaffected."""
        return replace(self, scale=self.clamp_scale(self.scale * config.zoom_step, config))

    def zoom_out(self, config: EditorConfig = _DEFAULTS) -> Viewport:
        return replace(self, scale=self.clamp_scale(self.scale / config.zoom_step, config))

    def zoom_to_cursor(
        self,
        cursor_x: float,
        cursor_y: float,
        factor: float,
        config: EditorConfig = _DEFAULTS,
    ) -> Viewport:
        """Zoom by ``factor`` keeping the content under the cursor fixed.

        cursor_x/cursor_y are offsets from the container centre.
        """
        new_scale = self.clamp_scale(self.scale * factor, config)
        ratio = new_scale / self.scale
        return Viewport(
            pan_x=cursor_x - (cursor_x - self.pan_x) * ratio,
            pan_y=cursor_y - (cursor_y - self.pan_y) * ratio,
            scale=new_scale,
        )

    def panned_to(self, pan_x: float, pan_y: float) -> Viewport:
        return replace(self, pan_x=pan_x, pan_y=pan_y)

    @classmethod
    def fit(
        cls,
        image_w: float,
        image_h: float,
        container_w: float,
        container_h: float,
        config: EditorConfig = _DEFAULTS,
    ) -> Viewport:
        """Scale the image into the padded container (never above 2x), pan reset."""
        if not image_w or not image_h or not container_w or not container_h:
            return cls.identity()
        avail_w = container_w - config.fit_padding
        avail_h = container_h - config.fit_padding
        scale = min(avail_w / image_w, avail_h / image_h, config.fit_max_scale)
        return cls(pan_x=0.0, pan_y=0.0, scale=cls.clamp_scale(scale, config))

    def screen_to_image_percent(
        self,
        screen_x: float,
        screen_y: float,
        rect: ContainerRect,
        image_w: float,
        image_h: float,
    ) -> tuple[float, float] | None:
        """Inverse render transform. Values outside 0-100 lie outside the image.

        None when the image has no size.
        """
        if not image_w or not image_h:
            return None
        cx, cy = rect.center
        canvas_x = (screen_x - cx - self.pan_x) / self.scale
        canvas_y = (screen_y - cy - self.pan_y) / self.scale
        image_x = canvas_x + image_w / 2.0
        image_y = canvas_y + image_h / 2.0
        return (image_x / image_w * 100.0, image_y / image_h * 100.0)

    def image_percent_to_screen(
        self,
        x: float,
        y: float,
        rect: ContainerRect,
        image_w: float,
        image_h: float,
    ) -> tuple[float, float]:
        """Forward render transform of a percent-space position."""
        cx, cy = rect.center
        image_x = x / 100.0 * image_w
        image_y = y / 100.0 * image_h
        return (
            cx + self.pan_x + (image_x - image_w / 2.0) * self.scale,
            cy + self.pan_y + (image_y - image_h / 2.0) * self.scale,
        )

    def locate(
        self,
        screen_x: float,
        screen_y: float,
        rect: ContainerRect,
        image_w: float,
        image_h: float,
    ) -> tuple[float, float] | None:
        """Percent position on the image, or None when the cursor is off the image."""
        pos = self.screen_to_image_percent(screen_x, screen_y, rect, image_w, image_h)
        if pos is None:
            return None
        x, y = pos
        if 0.0 <= x <= 100.0 and 0.0 <= y <= 100.0:
            return pos
        return None

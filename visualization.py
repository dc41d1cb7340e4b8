# visualization.py
"""
Handles drawing the particle field using Pygame.

PygameCanvas is the drawing surface the engine renders onto: it owns a
transparent backing layer sized in device pixels and scales every call
so that callers draw in device-independent units. FieldRenderer turns
particles and links into circles and lines with the field's colour and
alpha rules.
"""
import logging
import math
import pygame
import numpy as np
from typing import Optional, Tuple

from particle import ParticleSystem
from constants import (
    SATURATION, LIGHTNESS, PARTICLE_ALPHA_BOOST, PARTICLE_ALPHA_CAP,
    LINK_MIN_WIDTH, LINK_WIDTH_SCALE
)

# --- Data Contracts ---
#
# Canvas (duck-typed; PygameCanvas is the production implementation):
#   - pixel_ratio: float, device pixels per device-independent unit.
#   - client_size() -> Optional[Tuple[float, float]]: drawable size in
#     device-independent units, or None when no surface is attached.
#   - set_transform(ratio: float) -> None: from now on one drawing unit
#     equals one device-independent pixel.
#   - clear() -> None
#   - fill_circle(x, y, radius, hsla) -> None
#   - stroke_line(x1, y1, x2, y2, width, hsla) -> None
#     hsla is (hue degrees, saturation %, lightness %, alpha in [0, 1]).
#
# class FieldRenderer:
#   - __init__(self, opacity: float)
#   - draw_particles(self, canvas, particles: ParticleSystem) -> None
#   - draw_links(self, canvas, particles, pairs, strengths, hues) -> None


def hsla_to_color(hsla: Tuple[float, float, float, float]) -> pygame.Color:
    """Converts (hue, saturation %, lightness %, alpha 0-1) into a pygame.Color."""
    hue, saturation, lightness, alpha = hsla
    color = pygame.Color(0, 0, 0, 0)
    # pygame.Color expects hue in [0, 360] and the rest as percentages.
    color.hsla = (hue % 360, saturation, lightness, min(max(alpha, 0.0), 1.0) * 100)
    return color


def with_coverage(hsla, coverage: float):
    """Scales the alpha of an hsla tuple by pixel coverage, capped at full coverage."""
    hue, saturation, lightness, alpha = hsla
    return hue, saturation, lightness, alpha * min(1.0, coverage)


class PygameCanvas:
    """
    A transparent drawing layer over a target pygame surface.

    Each circle and line is drawn onto its own small transparent stamp
    and blitted onto the layer, so translucent shapes blend source-over
    with what is already there instead of replacing it.
    """
    def __init__(self, pixel_ratio: float = 1.0, target: Optional[pygame.Surface] = None):
        self.pixel_ratio = float(pixel_ratio) if pixel_ratio and pixel_ratio > 0 else 1.0
        self.scale = 1.0
        self.target: Optional[pygame.Surface] = None
        self.layer: Optional[pygame.Surface] = None
        if target is not None:
            self.attach(target)

    def attach(self, target: Optional[pygame.Surface]):
        """Points the canvas at a (new) target surface, e.g. after a window resize."""
        self.target = target
        self.layer = None

    def client_size(self) -> Optional[Tuple[float, float]]:
        if self.target is None:
            return None
        width, height = self.target.get_size()
        return width / self.pixel_ratio, height / self.pixel_ratio

    def set_transform(self, ratio: float):
        """
        Sizes the backing layer to floor(client * ratio) device pixels and
        scales all further drawing by ratio.
        """
        size = self.client_size()
        if size is None:
            return
        self.scale = float(ratio)
        backing = (math.floor(size[0] * ratio), math.floor(size[1] * ratio))
        self.layer = pygame.Surface(backing, pygame.SRCALPHA)
        logging.debug(f"Canvas backing layer resized to {backing[0]}x{backing[1]} (ratio {ratio:g}).")

    def clear(self):
        if self.layer is not None:
            self.layer.fill((0, 0, 0, 0))

    def fill_circle(self, x: float, y: float, radius: float, hsla):
        if self.layer is None:
            return
        s = self.scale
        true_radius = radius * s
        # Whole-pixel radius; the lost (or gained) area goes into alpha.
        pixel_radius = max(1, int(round(true_radius)))
        coverage = (true_radius / pixel_radius) ** 2
        color = hsla_to_color(with_coverage(hsla, coverage))

        size = pixel_radius * 2 + 1
        stamp = pygame.Surface((size, size), pygame.SRCALPHA)
        pygame.draw.circle(stamp, color, (pixel_radius, pixel_radius), pixel_radius)
        self.layer.blit(stamp, (int(round(x * s)) - pixel_radius, int(round(y * s)) - pixel_radius))

    def stroke_line(self, x1: float, y1: float, x2: float, y2: float, width: float, hsla):
        if self.layer is None:
            return
        s = self.scale
        true_width = width * s
        # Hairlines are one pixel wide and fade with the missing width.
        pixel_width = max(1, int(round(true_width)))
        color = hsla_to_color(with_coverage(hsla, true_width / pixel_width))

        px1, py1, px2, py2 = x1 * s, y1 * s, x2 * s, y2 * s
        pad = pixel_width + 1
        left = math.floor(min(px1, px2)) - pad
        top = math.floor(min(py1, py2)) - pad
        right = math.ceil(max(px1, px2)) + pad
        bottom = math.ceil(max(py1, py2)) + pad

        stamp = pygame.Surface((right - left, bottom - top), pygame.SRCALPHA)
        pygame.draw.line(
            stamp, color, (px1 - left, py1 - top), (px2 - left, py2 - top), pixel_width
        )
        self.layer.blit(stamp, (left, top))

    def composite(self, layer_opacity: float = 1.0):
        """Blits the layer onto the target surface at the given opacity."""
        if self.target is None or self.layer is None:
            return
        self.layer.set_alpha(int(255 * min(max(layer_opacity, 0.0), 1.0)))
        self.target.blit(self.layer, (0, 0))


class FieldRenderer:
    """
    Renders particles and link lines onto a canvas.
    """
    def __init__(self, opacity: float):
        self.opacity = opacity
        self.particle_alpha = min(PARTICLE_ALPHA_CAP, opacity + PARTICLE_ALPHA_BOOST)

    def draw_particles(self, canvas, particles: ParticleSystem):
        """Draws every particle as a filled circle of its own size and hue."""
        positions = particles.positions
        sizes = particles.sizes
        hues = particles.hues
        alpha = self.particle_alpha
        for i in range(particles.particle_count):
            canvas.fill_circle(
                positions[i, 0], positions[i, 1], sizes[i],
                (hues[i], SATURATION, LIGHTNESS, alpha)
            )

    def draw_links(self, canvas, particles: ParticleSystem,
                   pairs: np.ndarray, strengths: np.ndarray, hues: np.ndarray):
        """
        Draws one line per linked pair.

        Closer pairs (strength near 1) get more opaque and wider lines.
        """
        positions = particles.positions
        for k in range(pairs.shape[0]):
            a, b = pairs[k]
            t = strengths[k]
            canvas.stroke_line(
                positions[a, 0], positions[a, 1], positions[b, 0], positions[b, 1],
                max(LINK_MIN_WIDTH, t * LINK_WIDTH_SCALE),
                (hues[k], SATURATION, LIGHTNESS, self.opacity * t)
            )

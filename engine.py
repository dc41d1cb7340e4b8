# engine.py
"""
The particle-field engine: lifecycle, frame loop and resize handling.

The engine does not know about any windowing toolkit. Its host hands it
a frame scheduler (request_frame / cancel_frame) and a resize
subscription (subscribe / unsubscribe), and start() hands it a canvas.
Everything runs on the host's thread: frames and resize notifications
are delivered one after another, never interleaved.
"""
import logging
import numpy as np
from typing import Optional

from particle import ParticleSystem
from simulation import Simulation
from visualization import FieldRenderer
from utils import FieldConfig

# --- Data Contracts ---
#
# Frame scheduler (duck-typed; host.PygameHost in production):
#   - request_frame(callback) -> handle: callback() runs once on the next frame.
#   - cancel_frame(handle) -> None: the callback will not run.
#
# Resize subscription (duck-typed; host.PygameHost in production):
#   - subscribe(callback) -> None, unsubscribe(callback) -> None.
#
# class ParticleFieldEngine:
#   - __init__(self, frames, resize_events=None, rng=None)
#   - start(self, canvas, config: FieldConfig) -> Optional[ParticleFieldEngine]
#     - Outputs: self while running, None if the canvas or scheduler is missing.
#     - Side Effects: Seeds particles, schedules the first frame,
#       subscribes to resize notifications.
#   - on_resize(self) -> None: re-seeds for the current canvas size.
#   - stop(self) -> None: idempotent.
#   - Invariants:
#     - self.scheduled_frame_id is None whenever the engine is stopped.
#     - len(particles) == max(40, floor(width * height * base_count / 1296000)).


class ParticleFieldEngine:
    """
    Owns the particle set and drives it one frame at a time.
    """
    def __init__(self, frames, resize_events=None, rng: Optional[np.random.Generator] = None):
        """
        Args:
            frames: Frame scheduler provided by the host.
            resize_events: Resize subscription provided by the host.
            rng (np.random.Generator): Random source for seeding. Tests
                pass a seeded generator; a fresh one is used otherwise.
        """
        self.frames = frames
        self.resize_events = resize_events
        self.rng = rng
        # An injected generator is kept across restarts; otherwise each start() seeds from config.
        self.rng_injected = rng is not None

        self.canvas = None
        self.config: Optional[FieldConfig] = None
        self.renderer: Optional[FieldRenderer] = None
        self.particles: Optional[ParticleSystem] = None
        self.simulation: Optional[Simulation] = None

        # Surface state, refreshed only by start() and on_resize()
        self.width = 0.0
        self.height = 0.0
        self.pixel_ratio = 1.0

        self.running = False
        self.scheduled_frame_id = None
        self.frame_count = 0
        self.last_link_count = 0

    @property
    def particle_count(self) -> int:
        return self.particles.particle_count if self.particles is not None else 0

    def start(self, canvas, config: Optional[FieldConfig] = None) -> Optional["ParticleFieldEngine"]:
        """
        Starts the engine against a canvas.

        A missing canvas or frame scheduler means the field simply does
        not appear; this is not reported as an error.
        """
        if self.running:
            logging.warning("Particle field already running; start() ignored.")
            return self
        if canvas is None or canvas.client_size() is None:
            logging.debug("No drawable surface available; particle field not started.")
            return None
        if self.frames is None:
            logging.debug("No frame scheduler available; particle field not started.")
            return None

        self.canvas = canvas
        self.config = config if config is not None else FieldConfig()
        self.renderer = FieldRenderer(self.config.opacity)
        if not self.rng_injected:
            self.rng = np.random.default_rng(self.config.seed)

        self.running = True
        self.frame_count = 0
        self._reseed()
        self.scheduled_frame_id = self.frames.request_frame(self._on_frame)
        if self.resize_events is not None:
            self.resize_events.subscribe(self.on_resize)

        logging.info(
            f"Particle field started: {self.particle_count} particles, "
            f"base_count={self.config.base_count}, opacity={self.config.opacity}, "
            f"link={self.config.link}."
        )
        return self

    def on_resize(self):
        """Re-seeds the whole particle set for the canvas's current size."""
        if not self.running or self.canvas is None:
            return
        if self._reseed():
            logging.info(
                f"Surface resized to {self.width:g}x{self.height:g}; "
                f"re-seeded {self.particle_count} particles."
            )

    def stop(self):
        """Cancels the pending frame and drops the resize subscription."""
        if not self.running:
            return
        self.running = False
        if self.scheduled_frame_id is not None:
            self.frames.cancel_frame(self.scheduled_frame_id)
            self.scheduled_frame_id = None
        if self.resize_events is not None:
            self.resize_events.unsubscribe(self.on_resize)
        logging.info(f"Particle field stopped after {self.frame_count} frames.")

    def _reseed(self) -> bool:
        size = self.canvas.client_size()
        if size is None:
            logging.debug("Surface unavailable; keeping the current particle set.")
            return False
        self.width, self.height = size
        self.pixel_ratio = self.canvas.pixel_ratio
        self.canvas.set_transform(self.pixel_ratio)

        self.particles = ParticleSystem.for_surface(
            self.width, self.height, self.config.base_count, self.rng
        )
        self.simulation = Simulation(self.particles, self.width, self.height)
        return True

    def _on_frame(self):
        self.scheduled_frame_id = None
        if not self.running:
            return

        canvas = self.canvas
        # A surface that went away mid-run skips drawing but keeps the loop alive.
        if canvas is not None and canvas.client_size() is not None and self.simulation is not None:
            self.simulation.step()
            canvas.clear()
            self.renderer.draw_particles(canvas, self.particles)
            if self.config.link:
                pairs, strengths, hues = self.simulation.find_links()
                self.renderer.draw_links(canvas, self.particles, pairs, strengths, hues)
                self.last_link_count = len(pairs)
            else:
                self.last_link_count = 0
            self.frame_count += 1

        self.scheduled_frame_id = self.frames.request_frame(self._on_frame)


def start_particle_field(canvas, config: Optional[FieldConfig], frames, resize_events=None,
                         rng: Optional[np.random.Generator] = None) -> Optional[ParticleFieldEngine]:
    """
    Creates and starts an engine in one call.

    Returns the running engine, or None when it could not start.
    """
    engine = ParticleFieldEngine(frames, resize_events, rng)
    return engine.start(canvas, config)

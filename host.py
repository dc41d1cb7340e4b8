# host.py
"""
Hosts the particle field in a Pygame window.

PygameHost plays the part a browser plays for a canvas animation: it
owns the window, hands out frame callbacks once per display tick, and
tells subscribers when the window size changes. Resize notifications are
dispatched before any frame callback of the same tick, so a frame never
sees a half-applied resize.
"""
import logging
import pygame
from typing import Any, Callable, Dict, List, Optional

from visualization import PygameCanvas
from constants import FPS, WINDOW_SIZE, BACKGROUND_COLOR, LAYER_OPACITY

# --- Data Contracts ---
#
# class PygameHost:
#   - __init__(self, window_params: Optional[Dict[str, Any]] = None):
#     - Inputs: the "window" section of config.json.
#       - "width", "height": int, windowed size in device pixels.
#       - "fullscreen": bool, "resizable": bool
#       - "pixel_ratio": float, device pixels per drawing unit.
#       - "fps": int, "background_color": [r, g, b], "layer_opacity": float
#     - Side Effects: Initializes Pygame and opens the display.
#
#   - request_frame(callback) -> int / cancel_frame(handle) -> None
#   - subscribe(callback) -> None / unsubscribe(callback) -> None
#   - tick(self) -> bool:
#     - Outputs: False once the user has quit, True otherwise.
#     - Side Effects: Dispatches resize notifications, runs the frame
#       callbacks requested before this tick, composites and flips.

RESIZE_EVENTS = (pygame.VIDEORESIZE, pygame.WINDOWSIZECHANGED)


class PygameHost:
    """
    A Pygame window that schedules frames and reports resizes.
    """
    def __init__(self, window_params: Optional[Dict[str, Any]] = None):
        params = window_params if window_params is not None else {}
        pygame.init()

        self.fps = params.get('fps', FPS)
        self.background_color = tuple(params.get('background_color', BACKGROUND_COLOR))
        self.layer_opacity = params.get('layer_opacity', LAYER_OPACITY)

        if params.get('fullscreen', False):
            display_info = pygame.display.Info()
            size = (display_info.current_w, display_info.current_h)
            self.screen = pygame.display.set_mode(size, pygame.FULLSCREEN)
        else:
            size = (params.get('width', WINDOW_SIZE[0]), params.get('height', WINDOW_SIZE[1]))
            flags = pygame.RESIZABLE if params.get('resizable', True) else 0
            self.screen = pygame.display.set_mode(size, flags)

        pygame.display.set_caption("Particle Field")
        self.clock = pygame.time.Clock()
        self.canvas = PygameCanvas(params.get('pixel_ratio', 1.0), self.screen)

        self._next_handle = 1
        self._pending: Dict[int, Callable[[], None]] = {}
        self._resize_listeners: List[Callable[[], None]] = []

        logging.info(f"Host window opened ({size[0]}x{size[1]}, {self.fps} FPS).")

    # --- Frame scheduling ---
    def request_frame(self, callback: Callable[[], None]) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int):
        self._pending.pop(handle, None)

    # --- Resize subscription ---
    def subscribe(self, callback: Callable[[], None]):
        if callback not in self._resize_listeners:
            self._resize_listeners.append(callback)

    def unsubscribe(self, callback: Callable[[], None]):
        if callback in self._resize_listeners:
            self._resize_listeners.remove(callback)

    def run_frame_callbacks(self):
        """Runs the callbacks requested so far; ones requested meanwhile wait a tick."""
        due = self._pending
        self._pending = {}
        for callback in due.values():
            callback()

    def notify_resize(self):
        self.screen = pygame.display.get_surface()
        self.canvas.attach(self.screen)
        width, height = self.screen.get_size()
        logging.debug(f"Window resized to {width}x{height}.")
        for callback in list(self._resize_listeners):
            callback()

    def tick(self) -> bool:
        """
        Runs one display tick.

        Returns:
            bool: False if the user quit, True otherwise.
        """
        resized = False
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down host.")
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down host.")
                return False
            if event.type in RESIZE_EVENTS:
                resized = True

        # One notification per tick, however many resize events arrived.
        if resized:
            self.notify_resize()

        self.screen.fill(self.background_color)
        self.run_frame_callbacks()
        self.canvas.composite(self.layer_opacity)
        pygame.display.flip()
        self.clock.tick(self.fps)
        return True

    def close(self):
        """Shuts down Pygame."""
        self._pending.clear()
        self._resize_listeners.clear()
        pygame.quit()

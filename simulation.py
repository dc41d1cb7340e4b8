# simulation.py
"""
Handles the per-frame motion of the particle field.

This module defines the Simulation class, which advances a ParticleSystem
by one frame (drift, edge wrapping, hue cycling) and finds the pairs of
particles close enough to be linked.
"""
import logging
import numpy as np
from typing import Tuple
from numba import jit

from particle import ParticleSystem
from constants import WRAP_MARGIN, HUE_DRIFT, HUE_MIN, HUE_MAX, LINK_MAX_DISTANCE

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, particles: ParticleSystem, width: float, height: float):
#     - Inputs:
#       - particles: A freshly seeded ParticleSystem.
#       - width, height: surface size used for wrapping.
#     - Side Effects: Allocates link buffers sized for every possible pair.
#
#   - step(self) -> None:
#     - Side Effects: Moves every particle by its velocity, wraps it into
#       the margin band and advances its hue.
#     - Invariants: -20 <= x <= width + 20, -20 <= y <= height + 20 and
#       210 <= hue <= 320 for every particle after the call.
#
#   - find_links(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
#     - Outputs: (pairs (K, 2) int32, strengths (K,), hues (K,)) where
#       strength = 1 - distance / 140 and hue is the mean of both hues.
#       Views into the preallocated buffers, valid until the next call.
#     - Invariants: Only pairs with distance strictly below 140.

@jit(nopython=True)
def _find_links_numba(positions, hues, max_dist, max_dist_sq, pairs, strengths, link_hues):
    """
    Numba-jitted scan over every unordered pair of particles.

    Squared distances are compared against the squared threshold so the
    square root is only taken for pairs that will actually be drawn.
    Returns the number of links written into the buffers.
    """
    particle_count = positions.shape[0]
    count = 0
    for i in range(particle_count):
        ax = positions[i, 0]
        ay = positions[i, 1]
        for j in range(i + 1, particle_count):
            dx = ax - positions[j, 0]
            dy = ay - positions[j, 1]
            distance_sq = dx * dx + dy * dy
            if distance_sq < max_dist_sq:
                pairs[count, 0] = i
                pairs[count, 1] = j
                strengths[count] = 1.0 - np.sqrt(distance_sq) / max_dist
                link_hues[count] = (hues[i] + hues[j]) / 2.0
                count += 1
    return count


class Simulation:
    """
    Advances the particle field one frame at a time.
    """
    def __init__(self, particles: ParticleSystem, width: float, height: float):
        """
        Initializes the simulation for one particle set and surface size.

        Args:
            particles (ParticleSystem): The particle set to animate.
            width (float): Surface width in device-independent units.
            height (float): Surface height in device-independent units.
        """
        self.particles = particles
        self.width = float(width)
        self.height = float(height)
        self.max_dist = LINK_MAX_DISTANCE
        # Pre-calculate the squared distance so the pair scan can reject without a sqrt.
        self.max_dist_sq = LINK_MAX_DISTANCE ** 2

        # One slot per unordered pair: the scan can never overflow.
        n = particles.particle_count
        capacity = max(1, n * (n - 1) // 2)
        self._link_pairs = np.zeros((capacity, 2), dtype=np.int32)
        self._link_strengths = np.zeros(capacity, dtype=np.float64)
        self._link_hues = np.zeros(capacity, dtype=np.float64)
        self.link_count = 0

        logging.debug(
            f"Simulation ready for {n} particles on {self.width:g}x{self.height:g}, "
            f"link buffer capacity {capacity}."
        )

    def step(self):
        """
        Executes one frame of motion.
        """
        pos = self.particles.positions

        # 1. Constant drift
        pos += self.particles.velocities

        # 2. Wrap particles that left the margin band to the opposite edge.
        #    Low side first: a particle placed at width + margin is not past it.
        x = pos[:, 0]
        y = pos[:, 1]
        x[x < -WRAP_MARGIN] = self.width + WRAP_MARGIN
        x[x > self.width + WRAP_MARGIN] = -WRAP_MARGIN
        y[y < -WRAP_MARGIN] = self.height + WRAP_MARGIN
        y[y > self.height + WRAP_MARGIN] = -WRAP_MARGIN

        # 3. Hue drift, fixed per frame
        hues = self.particles.hues
        hues += HUE_DRIFT
        hues[hues > HUE_MAX] = HUE_MIN

    def find_links(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Finds all pairs of particles closer than the link distance.
        """
        self.link_count = _find_links_numba(
            self.particles.positions, self.particles.hues,
            self.max_dist, self.max_dist_sq,
            self._link_pairs, self._link_strengths, self._link_hues
        )
        k = self.link_count
        return self._link_pairs[:k], self._link_strengths[:k], self._link_hues[:k]

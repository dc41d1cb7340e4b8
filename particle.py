# particle.py
"""
Manages the state of all particles in the field.

This module defines the ParticleSystem class, which seeds and stores
particle data (position, velocity, size, hue) in NumPy arrays, and the
density rule that decides how many particles a surface gets.
"""
import logging
import math
import numpy as np
from typing import Optional

from constants import (
    REFERENCE_AREA, MIN_PARTICLE_COUNT, VELOCITY_RANGE, SIZE_RANGE,
    HUE_MIN, HUE_MAX
)

# --- Data Contracts ---
#
# target_particle_count(width: float, height: float, base_count: float) -> int:
#   - Inputs: surface size in device-independent units, density anchor.
#   - Outputs: max(40, floor(width * height * base_count / (1440 * 900))).
#
# class ParticleSystem:
#   - __init__(self, count: int, width: float, height: float,
#              rng: Optional[np.random.Generator] = None):
#     - Inputs:
#       - count: number of particles to seed.
#       - width, height: surface size the positions are spread across.
#       - rng: random source. A fresh unseeded generator when omitted.
#     - Outputs: None
#     - Side Effects: Allocates the particle arrays.
#     - Invariants:
#       - self.positions is a NumPy array of shape (N, 2) of dtype float64.
#       - self.velocities is a NumPy array of shape (N, 2), never modified.
#       - self.sizes is a NumPy array of shape (N,), never modified.
#       - self.hues is a NumPy array of shape (N,) within [210, 320].


def target_particle_count(width: float, height: float, base_count: float) -> int:
    """
    Number of particles for a surface of the given size.

    The base count is the number of particles a 1440x900 surface gets;
    other surfaces scale linearly with area, with a floor of 40.
    """
    area = max(0.0, width) * max(0.0, height)
    # Multiply before dividing so integer areas land exactly on the anchor.
    return max(MIN_PARTICLE_COUNT, math.floor(area * base_count / REFERENCE_AREA))


class ParticleSystem:
    """
    A container for all particles, managing their state via NumPy arrays.
    """
    def __init__(self, count: int, width: float, height: float,
                 rng: Optional[np.random.Generator] = None):
        """
        Seeds a new particle set.

        Args:
            count (int): The number of particles.
            width (float): The width of the drawing surface.
            height (float): The height of the drawing surface.
            rng (np.random.Generator): Random source for every seeded value.
        """
        self.particle_count = count
        self.rng = rng if rng is not None else np.random.default_rng()

        self.positions = self.rng.uniform(
            low=[0.0, 0.0],
            high=[width, height],
            size=(count, 2)
        )
        self.velocities = self.rng.uniform(
            low=VELOCITY_RANGE[0],
            high=VELOCITY_RANGE[1],
            size=(count, 2)
        )
        self.sizes = self.rng.uniform(low=SIZE_RANGE[0], high=SIZE_RANGE[1], size=count)
        self.hues = self.rng.uniform(low=HUE_MIN, high=HUE_MAX, size=count)

        logging.info(
            f"ParticleSystem seeded with {count} particles "
            f"on a {width:g}x{height:g} surface."
        )
        logging.debug(
            f"Particle data arrays created. "
            f"Positions shape: {self.positions.shape}, "
            f"Velocities shape: {self.velocities.shape}, "
            f"Sizes shape: {self.sizes.shape}, "
            f"Hues shape: {self.hues.shape}"
        )

    @classmethod
    def for_surface(cls, width: float, height: float, base_count: float,
                    rng: Optional[np.random.Generator] = None) -> "ParticleSystem":
        """Seeds a particle set sized by the density rule for this surface."""
        return cls(target_particle_count(width, height, base_count), width, height, rng)

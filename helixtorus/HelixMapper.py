import math
import numpy as np

from dataclasses import dataclass
from helixtorus import Utility

# Two interleaved strands: even indices on strand 0, odd on strand 1.
STRAND_COUNT = 2


@dataclass
class HelixPosition:
    x: float
    y: float
    z: float
    strand: int


def major_radius(height: float) -> float:
    # The full height is laid out along one loop of the enclosing circle.
    return height / (2.0 * math.pi)


def strand_progress(i, particle_count, time_offset=0.0):
    """Normalized progress t in [0, 1) of particle(s) i along their strand."""
    rank = np.asarray(i) // STRAND_COUNT
    particles_per_strand = particle_count / STRAND_COUNT
    # A zero count gives inf or nan, not an exception.
    with np.errstate(divide="ignore", invalid="ignore"):
        return Utility.wrap_unit(rank / particles_per_strand + time_offset)


def map_particle(i: int,
                 particle_count: int,
                 minor_radius: float,
                 height: float,
                 turns: float,
                 time_offset: float = 0.0) -> HelixPosition:
    """
    Map a particle index onto a double helix wrapped around a torus.

    The helix spirals `turns` times around a circle of radius height / 2pi in
    the XZ plane, with a spiral radius of `minor_radius`. The strand with odd
    indices is half a turn out of phase with the even one.

    Preconditions: particle_count is positive and even, minor_radius and
    height are positive. Violations are not checked here; they produce
    meaningless (inf or nan) coordinates rather than exceptions.
    """
    strand = i % STRAND_COUNT
    t = float(strand_progress(i, particle_count, time_offset))

    major_angle = t * 2.0 * math.pi
    helix_angle = t * turns * 2.0 * math.pi + strand * math.pi

    local_radial = math.cos(helix_angle) * minor_radius
    y = math.sin(helix_angle) * minor_radius

    radius_at_angle = major_radius(height) + local_radial

    return HelixPosition(
        radius_at_angle * math.cos(major_angle),
        y,
        radius_at_angle * math.sin(major_angle),
        strand
    )


def map_particles(indices: np.ndarray,
                  particle_count: int,
                  minor_radius: float,
                  height: float,
                  turns: float,
                  time_offset: float = 0.0):
    """
    Vectorized map_particle over an index array.

    Returns (positions, strands, t): an (N, 3) float64 array, the (N,) strand
    ids and the (N,) wrapped progress values used to place each particle.
    """
    indices = np.asarray(indices, dtype=np.int64)

    strands = indices % STRAND_COUNT
    t = strand_progress(indices, particle_count, time_offset)

    major_angle = t * 2.0 * np.pi
    helix_angle = t * turns * 2.0 * np.pi + strands * np.pi

    local_radial = np.cos(helix_angle) * minor_radius
    radius_at_angle = major_radius(height) + local_radial

    positions = np.stack([
        radius_at_angle * np.cos(major_angle),
        np.sin(helix_angle) * minor_radius,
        radius_at_angle * np.sin(major_angle)
    ], axis=-1)

    return positions, strands, t


def axis_distance(position, t, height: float):
    # Distance from the spiral's moving axis, the circle of radius major_radius(height).
    major_angle = np.asarray(t) * 2.0 * np.pi
    r = major_radius(height)
    p = np.asarray(position, dtype=np.float64)
    return np.sqrt(
        (p[..., 0] - r * np.cos(major_angle)) ** 2 +
        p[..., 1] ** 2 +
        (p[..., 2] - r * np.sin(major_angle)) ** 2
    )

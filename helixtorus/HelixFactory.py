import math
import numpy as np

from dataclasses import dataclass
from helixtorus import HelixMapper


@dataclass
class Settings:
    # Helix
    particle_count: int = 2000
    helix_radius: float = 3.0
    helix_height: float = 60.0
    turns: float = 4.0

    # Grid
    grid_size: int = 5
    grid_spacing: float = 35.0

    # Animation
    time_step: float = 0.005
    flow_speed: float = 0.08
    base_rotation_speed: float = 0.3
    rotation_variation: float = 0.03
    rotation_variation_cycle: int = 7
    tilt_angle: float = 0.5

    # Glow
    glow_speed: float = 0.3
    glow_radius: float = 0.08
    glow_phase_step: float = 0.1

    # Zoom
    min_zoom: float = 10.0
    max_zoom: float = 40.0
    zoom_oscillation_speed: float = 0.5
    zoom_base: float = 1.05

    # Look
    saturation: float = 0.8
    lightness: float = 0.6
    particle_size: float = 1.0


@dataclass
class HelixGrid:
    grid_size: int
    helix_ids: np.ndarray  # (H,) row-major gridX * grid_size + gridZ
    offsets: np.ndarray    # (H, 3) translation of each helix in the XZ plane

    @property
    def helix_count(self):
        return self.grid_size * self.grid_size


def validate_settings(settings: Settings):
    if int(settings.particle_count) != settings.particle_count or settings.particle_count <= 0:
        raise ValueError(f"particle_count must be a positive integer, not {settings.particle_count!r}")

    if settings.particle_count % HelixMapper.STRAND_COUNT != 0:
        raise ValueError(
            f"particle_count must be even so both strands get the same number of particles, "
            f"not {settings.particle_count!r}"
        )

    for name in ("helix_radius", "helix_height", "turns", "grid_spacing", "zoom_base", "particle_size"):
        value = getattr(settings, name)
        if not math.isfinite(value) or value <= 0.0:
            raise ValueError(f"{name} must be positive, not {value!r}")

    if int(settings.grid_size) != settings.grid_size or settings.grid_size <= 0:
        raise ValueError(f"grid_size must be a positive integer, not {settings.grid_size!r}")

    if settings.rotation_variation_cycle <= 0:
        raise ValueError(f"rotation_variation_cycle must be positive, not {settings.rotation_variation_cycle!r}")

    if settings.min_zoom > settings.max_zoom:
        raise ValueError(
            f"min_zoom ({settings.min_zoom!r}) must not exceed max_zoom ({settings.max_zoom!r})"
        )

    # Wrap-around distance never exceeds half a loop.
    if not 0.0 < settings.glow_radius <= 0.5:
        raise ValueError(f"glow_radius must be in (0, 0.5], not {settings.glow_radius!r}")

    for name in ("saturation", "lightness"):
        value = getattr(settings, name)
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"{name} must be in [0, 1], not {value!r}")


def build_grid(settings: Settings) -> HelixGrid:
    n = settings.grid_size
    center = (n - 1) / 2.0

    grid_x, grid_z = np.meshgrid(np.arange(n), np.arange(n), indexing="ij")
    grid_x = grid_x.ravel()
    grid_z = grid_z.ravel()

    offsets = np.zeros((n * n, 3), dtype=np.float64)
    offsets[:, 0] = (grid_x - center) * settings.grid_spacing
    offsets[:, 2] = (grid_z - center) * settings.grid_spacing

    return HelixGrid(n, grid_x * n + grid_z, offsets)


def total_particle_count(settings: Settings) -> int:
    return settings.grid_size * settings.grid_size * settings.particle_count

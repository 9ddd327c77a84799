import math
import numpy as np

from dataclasses import dataclass
from typing import Optional
from helixtorus import Budgets
from helixtorus import HelixFactory
from helixtorus import HelixMapper
from helixtorus import Utility


@dataclass
class SimulationState:
    time: float
    frame: int
    zoom_factor: float
    grid: HelixFactory.HelixGrid
    positions: np.ndarray  # (N, 3)
    colors: np.ndarray     # (N, 3)
    sizes: np.ndarray      # (N,)
    glows: np.ndarray      # (N,)

    @property
    def particle_count(self):
        return self.sizes.size


def zoom_factor(time: float, settings: HelixFactory.Settings) -> float:
    # Bounce between min_zoom and max_zoom, applied exponentially.
    zoom_range = settings.max_zoom - settings.min_zoom
    level = settings.min_zoom + (math.sin(time * settings.zoom_oscillation_speed) * 0.5 + 0.5) * zoom_range
    return settings.zoom_base ** level


def strand_hue(t, strands):
    return Utility.wrap_unit(np.asarray(t) + np.asarray(strands) * 0.5)


def glow_position(time: float, helix_id: int, settings: HelixFactory.Settings) -> float:
    return Utility.wrap_unit_scalar(time * settings.glow_speed + helix_id * settings.glow_phase_step)


def glow_intensity(t, glow_pos, glow_radius):
    d = Utility.wrap_distance(np.asarray(t), glow_pos)
    return np.where(d < glow_radius, 1.0 - d / glow_radius, 0.0)


def rotation_speed(helix_id: int, settings: HelixFactory.Settings) -> float:
    return settings.base_rotation_speed + (helix_id % settings.rotation_variation_cycle) * settings.rotation_variation


def tilt_angles(time: float, helix_id: int, settings: HelixFactory.Settings):
    tilt_x = math.sin(time * 0.2 + helix_id * 0.1) * settings.tilt_angle
    tilt_z = math.cos(time * 0.4 + helix_id * 0.1) * settings.tilt_angle
    return tilt_x, tilt_z


def transform_helix(positions: np.ndarray, time: float, helix_id: int, settings: HelixFactory.Settings) -> np.ndarray:
    # Spin about Y, then tilt about X, then about Z.
    p = Utility.rotate_y(positions, time * rotation_speed(helix_id, settings))
    tilt_x, tilt_z = tilt_angles(time, helix_id, settings)
    p = Utility.rotate_x(p, tilt_x)
    return Utility.rotate_z(p, tilt_z)


def strand_colors(t, strands, settings: HelixFactory.Settings) -> np.ndarray:
    return Utility.hsl_to_rgb_array(strand_hue(t, strands), settings.saturation, settings.lightness)


def create_state(settings: Optional[HelixFactory.Settings] = None) -> SimulationState:
    if settings is None:
        settings = HelixFactory.Settings()

    HelixFactory.validate_settings(settings)

    if HelixFactory.total_particle_count(settings) > Budgets.MAX_PARTICLES:
        raise ValueError(
            f"{HelixFactory.total_particle_count(settings)} particles exceeds the budget of {Budgets.MAX_PARTICLES}"
        )

    grid = HelixFactory.build_grid(settings)
    pc = settings.particle_count
    n = grid.helix_count * pc

    base, strands, t = HelixMapper.map_particles(
        np.arange(pc),
        pc,
        settings.helix_radius,
        settings.helix_height,
        settings.turns,
        0.0
    )

    # The first frame is laid out flat: grid offsets only, no spin, tilt or zoom.
    positions = (base[np.newaxis, :, :] + grid.offsets[:, np.newaxis, :]).reshape(n, 3)
    colors = np.tile(strand_colors(t, strands, settings), (grid.helix_count, 1))

    return SimulationState(
        time=0.0,
        frame=0,
        zoom_factor=1.0,
        grid=grid,
        positions=positions,
        colors=colors,
        sizes=np.full(n, settings.particle_size, dtype=np.float64),
        glows=np.zeros(n, dtype=np.float64)
    )


def update(state: SimulationState, settings: HelixFactory.Settings, dt: Optional[float] = None) -> SimulationState:
    """
    Advance the simulation by one tick and refresh every particle buffer.

    The mapper is evaluated once per tick; each helix of the grid then applies
    its own spin, tilt, offset and glow phase to the shared layout.
    """
    state.time += settings.time_step if dt is None else dt
    state.frame += 1
    state.zoom_factor = zoom_factor(state.time, settings)

    pc = settings.particle_count
    base, strands, t = HelixMapper.map_particles(
        np.arange(pc),
        pc,
        settings.helix_radius,
        settings.helix_height,
        settings.turns,
        state.time * settings.flow_speed
    )

    colors = strand_colors(t, strands, settings)

    for slot, helix_id in enumerate(state.grid.helix_ids):
        begin = slot * pc
        end = begin + pc

        p = transform_helix(base, state.time, int(helix_id), settings)
        state.positions[begin:end] = (p + state.grid.offsets[slot]) / state.zoom_factor

        state.glows[begin:end] = glow_intensity(
            t,
            glow_position(state.time, int(helix_id), settings),
            settings.glow_radius
        )
        state.colors[begin:end] = colors

    return state


def pack_particles(state: SimulationState) -> np.ndarray:
    # [x, y, z, size, r, g, b, glow] per particle, matching ParticleSplat.hlsl
    packed = np.empty((state.particle_count, Budgets.PARTICLE_FORMAT_FLOATS), dtype='f')
    packed[:, 0:3] = state.positions
    packed[:, 3] = state.sizes
    packed[:, 4:7] = state.colors
    packed[:, 7] = state.glows
    return packed

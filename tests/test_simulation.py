import colorsys
import math
import numpy as np
import pytest

from helixtorus import Budgets
from helixtorus import HelixFactory
from helixtorus import HelixMapper
from helixtorus import Simulation


@pytest.fixture
def settings():
    return HelixFactory.Settings(particle_count=40, helix_radius=0.8, helix_height=6.0, grid_size=3, grid_spacing=10.0)


def test_create_state_lays_out_flat_grid(settings):
    state = Simulation.create_state(settings)

    assert state.particle_count == 9 * 40
    assert state.positions.shape == (360, 3)
    assert state.colors.shape == (360, 3)
    assert state.time == 0.0
    assert state.frame == 0
    assert state.zoom_factor == 1.0
    assert np.all(state.glows == 0.0)
    assert np.all(state.sizes == settings.particle_size)

    base, _, _ = HelixMapper.map_particles(np.arange(40), 40, 0.8, 6.0, settings.turns)
    for slot in range(9):
        np.testing.assert_allclose(state.positions[slot * 40:(slot + 1) * 40], base + state.grid.offsets[slot])


def test_create_state_defaults_to_fresh_settings():
    a = Simulation.create_state()
    b = Simulation.create_state()

    assert a.particle_count == HelixFactory.total_particle_count(HelixFactory.Settings())
    assert a.positions is not b.positions
    np.testing.assert_allclose(a.positions, b.positions)


def test_create_state_validates_settings():
    with pytest.raises(ValueError):
        Simulation.create_state(HelixFactory.Settings(particle_count=7))


def test_create_state_respects_particle_budget():
    settings = HelixFactory.Settings(particle_count=Budgets.MAX_PARTICLES + 2, grid_size=1)
    with pytest.raises(ValueError, match="budget"):
        Simulation.create_state(settings)


def test_update_advances_time(settings):
    state = Simulation.create_state(settings)
    Simulation.update(state, settings)
    Simulation.update(state, settings, 0.1)

    assert state.frame == 2
    assert state.time == pytest.approx(settings.time_step + 0.1)
    assert state.zoom_factor == pytest.approx(Simulation.zoom_factor(state.time, settings))


def test_update_matches_per_helix_transform(settings):
    state = Simulation.create_state(settings)
    Simulation.update(state, settings, 1.7)

    base, _, _ = HelixMapper.map_particles(np.arange(40), 40, 0.8, 6.0, settings.turns, 1.7 * settings.flow_speed)
    for slot, helix_id in enumerate(state.grid.helix_ids):
        expected = (Simulation.transform_helix(base, 1.7, int(helix_id), settings) + state.grid.offsets[slot])
        expected /= state.zoom_factor
        np.testing.assert_allclose(state.positions[slot * 40:(slot + 1) * 40], expected, atol=1e-12)


def test_update_preserves_helix_shape(settings):
    state = Simulation.create_state(settings)
    Simulation.update(state, settings, 3.3)

    base, _, _ = HelixMapper.map_particles(np.arange(40), 40, 0.8, 6.0, settings.turns, 3.3 * settings.flow_speed)
    for slot in range(9):
        local = state.positions[slot * 40:(slot + 1) * 40] * state.zoom_factor - state.grid.offsets[slot]
        np.testing.assert_allclose(np.linalg.norm(local, axis=1), np.linalg.norm(base, axis=1), atol=1e-9)


def test_update_refreshes_glow_and_color(settings):
    state = Simulation.create_state(settings)
    Simulation.update(state, settings, 0.5)

    assert np.all((state.glows >= 0.0) & (state.glows <= 1.0))
    assert np.any(state.glows > 0.0)
    assert np.all((state.colors >= 0.0) & (state.colors <= 1.0))

    # Every helix shares the same coloring.
    np.testing.assert_allclose(state.colors[0:40], state.colors[40:80])


def test_zoom_factor_oscillates_between_bounds(settings):
    times = np.linspace(0.0, 40.0, 400)
    zooms = [Simulation.zoom_factor(t, settings) for t in times]

    assert min(zooms) >= settings.zoom_base ** settings.min_zoom - 1e-9
    assert max(zooms) <= settings.zoom_base ** settings.max_zoom + 1e-9
    assert Simulation.zoom_factor(0.0, settings) == pytest.approx(1.05 ** 25)
    assert Simulation.zoom_factor(math.pi, settings) == pytest.approx(1.05 ** 40)


def test_glow_intensity_falls_off_linearly():
    t = np.array([0.5, 0.54, 0.58, 0.7])
    np.testing.assert_allclose(Simulation.glow_intensity(t, 0.5, 0.08), [1.0, 0.5, 0.0, 0.0], atol=1e-12)


def test_glow_intensity_wraps_around_loop():
    assert float(Simulation.glow_intensity(0.99, 0.01, 0.08)) == pytest.approx(0.75)


def test_glow_position_varies_per_helix(settings):
    assert Simulation.glow_position(0.0, 0, settings) == 0.0
    assert Simulation.glow_position(0.0, 3, settings) == pytest.approx(0.3)


def test_rotation_speed_cycles_every_seven_helices(settings):
    assert Simulation.rotation_speed(0, settings) == pytest.approx(0.3)
    assert Simulation.rotation_speed(6, settings) == pytest.approx(0.48)
    assert Simulation.rotation_speed(7, settings) == pytest.approx(0.3)


def test_strand_hue_offsets_second_strand_by_half():
    np.testing.assert_allclose(Simulation.strand_hue([0.1, 0.1, 0.75], [0, 1, 1]), [0.1, 0.6, 0.25])


def test_strand_colors_match_colorsys(settings):
    t = np.array([0.0, 0.1, 0.3, 0.5, 0.72, 0.95])
    strands = np.array([0, 1, 0, 1, 0, 1])
    colors = Simulation.strand_colors(t, strands, settings)

    for c, h in zip(colors, Simulation.strand_hue(t, strands)):
        np.testing.assert_allclose(c, colorsys.hls_to_rgb(h, settings.lightness, settings.saturation), atol=1e-12)


def test_pack_particles_layout(settings):
    state = Simulation.create_state(settings)
    Simulation.update(state, settings)
    packed = Simulation.pack_particles(state)

    assert packed.dtype == np.float32
    assert packed.shape == (state.particle_count, Budgets.PARTICLE_FORMAT_FLOATS)
    np.testing.assert_allclose(packed[:, 0:3], state.positions, rtol=1e-6)
    np.testing.assert_allclose(packed[:, 3], state.sizes)
    np.testing.assert_allclose(packed[:, 4:7], state.colors, rtol=1e-6)
    np.testing.assert_allclose(packed[:, 7], state.glows, rtol=1e-6)

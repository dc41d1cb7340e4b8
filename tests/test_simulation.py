import numpy as np
import pytest

from particle import ParticleSystem
from simulation import Simulation


def make_pair(rng, a, b, width=400, height=400):
    particles = ParticleSystem(2, width, height, rng)
    particles.positions[:] = [a, b]
    return particles, Simulation(particles, width, height)


def test_step_moves_by_velocity_and_drifts_hue(rng):
    particles = ParticleSystem(100, 800, 600, rng)
    sim = Simulation(particles, 800, 600)
    start = particles.positions.copy()
    hues = particles.hues.copy()

    sim.step()

    np.testing.assert_allclose(particles.positions, start + particles.velocities, rtol=0, atol=1e-12)
    expected_hues = hues + 0.02
    expected_hues[expected_hues > 320] = 210
    np.testing.assert_allclose(particles.hues, expected_hues, rtol=0, atol=1e-12)


def test_velocity_never_changes(rng):
    particles = ParticleSystem(60, 300, 200, rng)
    sim = Simulation(particles, 300, 200)
    velocities = particles.velocities.copy()
    for _ in range(50):
        sim.step()
    np.testing.assert_array_equal(particles.velocities, velocities)


@pytest.mark.parametrize("position, velocity, expected", [
    ((-19.9, 50.0), (-0.25, 0.0), (120.0, 50.0)),
    ((119.9, 50.0), (0.25, 0.0), (-20.0, 50.0)),
    ((50.0, -19.9), (0.0, -0.25), (50.0, 120.0)),
    ((50.0, 119.9), (0.0, 0.25), (50.0, -20.0)),
    ((-19.9, 119.9), (-0.25, 0.25), (120.0, -20.0)),
])
def test_wrap_teleports_to_opposite_margin(rng, position, velocity, expected):
    particles = ParticleSystem(1, 100, 100, rng)
    particles.positions[0] = position
    particles.velocities[0] = velocity
    sim = Simulation(particles, 100, 100)

    sim.step()

    np.testing.assert_allclose(particles.positions[0], expected)


def test_particles_inside_margin_band_are_not_wrapped(rng):
    particles = ParticleSystem(1, 100, 100, rng)
    particles.positions[0] = (-19.5, 119.5)
    particles.velocities[0] = (-0.25, 0.25)
    sim = Simulation(particles, 100, 100)

    sim.step()

    np.testing.assert_allclose(particles.positions[0], (-19.75, 119.75))


def test_positions_stay_in_margin_band(rng):
    particles = ParticleSystem(200, 120, 80, rng)
    sim = Simulation(particles, 120, 80)
    for _ in range(2000):
        sim.step()
        x = particles.positions[:, 0]
        y = particles.positions[:, 1]
        assert np.all((x >= -20) & (x <= 140))
        assert np.all((y >= -20) & (y <= 100))


def test_hue_wraps_to_start_of_cycle(rng):
    particles = ParticleSystem(3, 100, 100, rng)
    particles.hues[:] = [319.99, 319.97, 210.0]
    sim = Simulation(particles, 100, 100)

    sim.step()

    assert particles.hues[0] == 210.0
    assert particles.hues[1] == pytest.approx(319.99)
    assert particles.hues[2] == pytest.approx(210.02)


def test_hue_stays_in_cycle(rng):
    particles = ParticleSystem(80, 100, 100, rng)
    sim = Simulation(particles, 100, 100)
    for _ in range(6000):
        sim.step()
        assert np.all((particles.hues >= 210) & (particles.hues <= 320))


def test_pair_at_exact_link_distance_is_not_linked(rng):
    _, sim = make_pair(rng, (0.0, 0.0), (140.0, 0.0))
    pairs, strengths, hues = sim.find_links()
    assert len(pairs) == 0
    assert sim.link_count == 0


def test_pair_just_inside_link_distance_is_linked(rng):
    _, sim = make_pair(rng, (0.0, 0.0), (139.999, 0.0))
    pairs, strengths, hues = sim.find_links()
    assert len(pairs) == 1
    assert tuple(pairs[0]) == (0, 1)
    assert strengths[0] > 0


def test_link_strength_and_hue(rng):
    particles, sim = make_pair(rng, (10.0, 10.0), (10.0 + 42.0, 10.0 + 56.0))
    particles.hues[:] = [220.0, 300.0]

    pairs, strengths, hues = sim.find_links()

    # distance 70 -> halfway to the threshold
    assert strengths[0] == pytest.approx(0.5)
    assert hues[0] == pytest.approx(260.0)


def test_every_pair_found_when_all_close(rng):
    particles = ParticleSystem(30, 50, 50, rng)
    sim = Simulation(particles, 50, 50)

    pairs, strengths, _ = sim.find_links()

    assert len(pairs) == 30 * 29 // 2
    assert np.all(pairs[:, 0] < pairs[:, 1])
    assert np.all((strengths > 0) & (strengths <= 1))


def test_links_match_brute_force(rng):
    particles = ParticleSystem(120, 600, 400, rng)
    sim = Simulation(particles, 600, 400)

    pairs, _, _ = sim.find_links()

    expected = set()
    pos = particles.positions
    for i in range(120):
        for j in range(i + 1, 120):
            if np.sum((pos[i] - pos[j]) ** 2) < 140 ** 2:
                expected.add((i, j))
    assert {tuple(p) for p in pairs} == expected

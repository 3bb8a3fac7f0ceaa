import pytest

from starfield.constants import RECYCLE_Z
from starfield.particle import Particle
from starfield.particle_field import ParticleField
from starfield.projector import project


def test_create_samples_within_ranges(rng):
    field = ParticleField.create(500, (0.5, 2.0), (180, 260), rng=rng)
    assert len(field) == 500
    for p in field:
        assert -1000 <= p.x < 1000
        assert -1000 <= p.y < 1000
        assert 0 <= p.z < 2000
        assert 0.5 <= p.base_size <= 2.0
        assert 180 <= p.hue <= 260


def test_resize_keeps_untouched_prefix(rng):
    field = ParticleField.create(200, (0.5, 2.0), (180, 260), rng=rng)
    originals = list(field)
    values = [p.as_tuple() for p in field]

    field.resize(250)
    assert len(field) == 250
    assert all(field[i] is originals[i] for i in range(200))

    field.resize(200)
    assert len(field) == 200
    assert [p.as_tuple() for p in field] == values
    assert all(field[i] is originals[i] for i in range(200))


def test_resize_rejects_negative(rng):
    field = ParticleField.create(10, (1, 1), (0, 0), rng=rng)
    with pytest.raises(ValueError):
        field.resize(-1)


def test_advance_moves_towards_camera(rng):
    field = ParticleField.create(50, (0.5, 2.0), (180, 260), rng=rng)
    for p in field:
        p.z = 500.0
    field.advance(2.5)
    assert all(p.z == 497.5 for p in field)


def test_advance_respawns_passed_particles(rng):
    field = ParticleField.create(3, (1.0, 3.0), (10, 20), rng=rng)
    passed = field[0]
    passed.x, passed.y, passed.z = 5000.0, -5000.0, -150.0
    passed.base_size, passed.hue = 99.0, 999.0
    field[1].z = 100.0
    field[2].z = -139.0  # stays alive

    recycled = field.advance(60)

    assert recycled == 1
    assert field[0] is passed
    assert 0 <= passed.z < 2000
    assert -1000 <= passed.x < 1000
    assert -1000 <= passed.y < 1000
    assert 1.0 <= passed.base_size <= 3.0
    assert 10 <= passed.hue <= 20
    assert field[1].z == 40.0
    assert field[2].z == -199.0 > RECYCLE_Z


def test_no_live_particle_behind_recycle_depth(rng):
    field = ParticleField.create(300, (0.5, 2.0), (180, 260), rng=rng)
    for _ in range(400):
        field.advance(7.3)
        assert all(p.z > RECYCLE_Z for p in field)


def test_restyle_only_resamples_requested_attributes(rng):
    field = ParticleField.create(100, (0.5, 2.0), (180, 260), rng=rng)
    positions = [(p.x, p.y, p.z) for p in field]
    sizes = [p.base_size for p in field]

    field.restyle(hue_range=(0, 0))
    assert all(p.hue == 0 for p in field)
    assert [p.base_size for p in field] == sizes
    assert [(p.x, p.y, p.z) for p in field] == positions

    field.restyle(size_range=(4.0, 5.0))
    assert all(4.0 <= p.base_size <= 5.0 for p in field)
    assert all(p.hue == 0 for p in field)
    assert [(p.x, p.y, p.z) for p in field] == positions

    # New stars follow the new style too
    field.resize(150)
    assert all(p.hue == 0 and 4.0 <= p.base_size <= 5.0 for p in field)


def test_project_scales_by_depth():
    p = project(100, -50, 0, 300, 400, 300)
    assert p.scale == 1
    assert (p.screen_x, p.screen_y) == (500, 250)

    far = project(100, -50, 300, 300, 400, 300)
    assert far.scale == pytest.approx(0.5)
    assert far.screen_x == pytest.approx(450)
    assert far.screen_y == pytest.approx(275)


def test_project_behind_focal_plane_has_non_positive_scale():
    assert project(10, 10, -400, 300, 0, 0).scale <= 0
    assert project(10, 10, -300, 300, 0, 0).scale <= 0


def test_particle_repr():
    assert "hue=42.0" in repr(Particle(0, 0, 0, 1, 42))

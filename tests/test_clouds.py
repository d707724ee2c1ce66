import math
import random

import pytest

from worldcore.clouds import (
    CLOUD_SECTORS,
    build_sectors,
    cluster_clouds,
    collective_mass,
    emit_rain,
    group_clouds_by_sector,
    in_sector,
    rain_probability,
    update_clouds,
)
from worldcore.constants import TAU
from worldcore.data_models import CloudState, WorldSettings
from worldcore.geometry import angular_to_linear_velocity
from worldcore.snapshot import take_snapshot
from worldcore.vector_utils import vec_len, vec_sub
from worldcore.world_factory import create_initial_world_state

NEVER = 0.99  # above every emission and spawn probability


def test_ten_overlapping_sectors():
    sectors = build_sectors()
    width = TAU / 10
    assert len(sectors) == 10
    assert sectors[0] == pytest.approx((TAU - width / 2, 1.5 * width))
    assert sectors[9] == pytest.approx((8.5 * width, width / 2))
    for begin, end in sectors:
        span = end - begin if end > begin else end + TAU - begin
        assert span == pytest.approx(2 * width)


def test_every_angle_is_in_one_or_two_sectors():
    for i in range(997):
        angle = TAU * i / 997
        count = sum(in_sector(angle, sector) for sector in CLOUD_SECTORS)
        assert 1 <= count <= 2


def test_zero_angle_falls_in_wrapping_sectors():
    members = [i for i, sector in enumerate(CLOUD_SECTORS) if in_sector(0.0, sector)]
    assert members == [0, 9]


def test_groups_keep_cloud_order(make_cloud):
    a = make_cloud(1, 0.30)
    b = make_cloud(2, 0.31)
    c = make_cloud(3, math.pi)
    groups = group_clouds_by_sector([a, b, c])
    assert len(groups) == 10
    assert groups[0] == [a, b]
    assert all(c not in group for group in groups[:3])


def test_close_clouds_become_mutual_friends(make_cloud):
    a = make_cloud(1, 1.0)
    b = make_cloud(2, 1.0 + 0.05 / 7.0)
    assert vec_len(vec_sub(a.location, b.location)) == pytest.approx(0.05, rel=1e-3)

    cluster_clouds([a, b])

    assert a.friends == {2}
    assert b.friends == {1}


def test_distant_clouds_stay_apart(make_cloud):
    a = make_cloud(1, 1.0)
    b = make_cloud(2, 1.2)
    cluster_clouds([a, b])
    assert a.friends == set()
    assert b.friends == set()


def test_friendship_is_symmetric():
    world = create_initial_world_state(WorldSettings(initial_cloud_count=60), rng=random.Random(7))
    cluster_clouds(world.water.clouds)
    index = world.cloud_index()
    pairs = 0
    for cloud in world.water.clouds:
        for friend_id in cloud.friends:
            assert cloud.cloud_id in index[friend_id].friends
            pairs += 1
    assert pairs > 0


def test_earlier_cloud_velocity_wins(make_cloud):
    a = make_cloud(1, 1.0, velocity=0.01)
    b = make_cloud(2, 1.001, velocity=0.02)
    cluster_clouds([a, b])
    assert a.orbit.rotational_velocity == 0.01
    assert b.orbit.rotational_velocity == 0.01

    c = make_cloud(3, 1.0, velocity=0.01)
    d = make_cloud(4, 1.001, velocity=0.02)
    cluster_clouds([d, c])
    assert c.orbit.rotational_velocity == 0.02
    assert d.orbit.rotational_velocity == 0.02


def test_friends_are_rebuilt_every_pass(make_cloud):
    a = make_cloud(1, 1.0)
    b = make_cloud(2, 1.001)
    cluster_clouds([a, b])
    assert a.friends == {2}

    b.location = (100.0, 100.0)
    cluster_clouds([a, b])
    assert a.friends == set()
    assert b.friends == set()


def test_collective_mass_is_two_hops(make_cloud):
    a = make_cloud(1, 1.0, mass=1.0)
    b = make_cloud(2, 1.0, mass=2.0)
    c = make_cloud(3, 1.0, mass=4.0)
    d = make_cloud(4, 1.0, mass=8.0)
    # chain a - b - c - d
    a.friends, b.friends, c.friends, d.friends = {2}, {1, 3}, {2, 4}, {3}
    index = {cloud.cloud_id: cloud for cloud in (a, b, c, d)}

    # a: own + b + b's friends (a, c); d is three hops away
    assert collective_mass(a, index) == 1.0 + 2.0 + (1.0 + 4.0)
    assert collective_mass(b, index) == 2.0 + (1.0 + 2.0) + (4.0 + 2.0 + 8.0)
    assert collective_mass(d, index) == 8.0 + 4.0 + (2.0 + 8.0)


def test_rain_probability_bounds():
    assert rain_probability(0.0, 1.0) == pytest.approx(0.1 * 0.2)
    assert rain_probability(5.0, 1.0) == pytest.approx(0.1 * 0.25)
    assert rain_probability(100.0, 1.0) == pytest.approx(0.1)
    assert rain_probability(100.0, 50.0) == pytest.approx(0.2)
    assert rain_probability(100.0, 0.0) == 0.0


def test_crossing_threshold_starts_rain_for_good(empty_world, make_cloud, scripted_random):
    a = make_cloud(1, 1.0, mass=10.5)
    b = make_cloud(2, 1.001, mass=10.0)
    empty_world.water.clouds = [a, b]
    settings = WorldSettings(cloud_target_count=0)

    msg = update_clouds(empty_world, 1.0, scripted_random(default=NEVER), settings)

    assert a.state is CloudState.RAINING
    assert b.state is CloudState.RAINING
    assert msg == "Cloud 2 started raining"

    # apart and lighter, they keep raining
    b.orbit.rotation = 3.0
    b.location = b.orbit_location()
    a.mass = b.mass = 1.0
    update_clouds(empty_world, 1.0, scripted_random(default=NEVER), settings)
    assert a.friends == set()
    assert a.state is CloudState.RAINING
    assert b.state is CloudState.RAINING


def test_below_threshold_keeps_floating(empty_world, make_cloud, scripted_random):
    a = make_cloud(1, 1.0, mass=10.0)
    b = make_cloud(2, 1.001, mass=10.0)
    empty_world.water.clouds = [a, b]

    update_clouds(empty_world, 1.0, scripted_random(default=0.0), WorldSettings(cloud_target_count=0))

    # 10 + 10 + 10 == 30 is not above the threshold
    assert a.state is CloudState.FLOATING
    assert b.state is CloudState.FLOATING
    assert (a.mass, b.mass) == (10.0, 10.0)
    assert empty_world.water.rain == []


def test_raining_cloud_emits_a_drop(empty_world, make_cloud, scripted_random):
    cloud = make_cloud(1, 2.0, mass=5.0, velocity=0.004)
    cloud.start_raining()
    empty_world.water.clouds = [cloud]
    rng = scripted_random([0.0, 0.5, 0.5], default=NEVER)

    update_clouds(empty_world, 1.0, rng, WorldSettings())

    assert cloud.mass == pytest.approx(4.9)
    assert empty_world.water.clouds == [cloud]
    [drop] = empty_world.water.rain
    assert drop.location == cloud.location
    assert drop.velocity == angular_to_linear_velocity(7.0, 2.0, 0.004)


def test_emitted_drop_is_jittered(make_cloud, scripted_random):
    cloud = make_cloud(1, 0.0)
    drop = emit_rain(cloud, scripted_random([1.0, 0.0]))
    assert drop.location == pytest.approx((cloud.location[0] + 0.5, cloud.location[1] - 0.15))


def test_raining_cloud_without_emission_keeps_mass(empty_world, make_cloud, scripted_random):
    cloud = make_cloud(1, 2.0, mass=5.0)
    cloud.start_raining()
    empty_world.water.clouds = [cloud]
    update_clouds(empty_world, 1.0, scripted_random(default=NEVER), WorldSettings())
    assert cloud.mass == 5.0
    assert empty_world.water.rain == []


def test_empty_cloud_is_removed(empty_world, make_cloud, scripted_random):
    dying = make_cloud(1, 2.0, mass=0.1)
    dying.start_raining()
    floating = make_cloud(2, 4.0)
    empty_world.water.clouds = [dying, floating]

    msg = update_clouds(empty_world, 1.0, scripted_random([0.0], default=NEVER), WorldSettings())

    assert empty_world.water.clouds == [floating]
    assert len(empty_world.water.rain) == 1
    assert msg == "Cloud 1 rained out"


def test_spawns_below_target(empty_world, scripted_random):
    update_clouds(empty_world, 1.0, scripted_random(default=0.01), WorldSettings(cloud_target_count=3))
    [cloud] = empty_world.water.clouds
    assert cloud.cloud_id == 100
    assert cloud.state is CloudState.FLOATING
    assert cloud.friends == set()
    assert cloud.mass == 5.0
    assert cloud.orbit.target is empty_world.planet


def test_no_spawn_at_target(empty_world, make_cloud, scripted_random):
    empty_world.water.clouds = [make_cloud(1, 2.0)]
    update_clouds(empty_world, 1.0, scripted_random(default=0.0), WorldSettings(cloud_target_count=1))
    assert len(empty_world.water.clouds) == 1


def test_no_spawn_without_elapsed_time(empty_world, scripted_random):
    update_clouds(empty_world, 0.0, scripted_random(default=0.0), WorldSettings(cloud_target_count=3))
    assert empty_world.water.clouds == []


def test_rained_out_cloud_leaves_no_friend_ids(empty_world, make_cloud, scripted_random):
    dying = make_cloud(1, 1.0, mass=0.1)
    dying.start_raining()
    neighbour = make_cloud(2, 1.001)
    empty_world.water.clouds = [dying, neighbour]

    update_clouds(empty_world, 1.0, scripted_random([0.0, 0.5, 0.5], default=NEVER), WorldSettings())

    assert empty_world.water.clouds == [neighbour]
    assert neighbour.friends == set()
    [cloud_snap] = take_snapshot(empty_world).clouds
    assert cloud_snap.friend_ids == ()

#!/usr/bin/env python3
"""
Cloud handling for Tiny World.

Each tick clouds go through:
- Sectoring: the orbit is cut into ten overlapping angular sectors and each cloud is
  listed in every sector containing its orbital phase. Only clouds sharing a sector
  are compared, which keeps clustering well below all-pairs cost.
- Clustering: close clouds become mutual friends and the later cloud takes over the
  earlier cloud's orbital velocity, so clusters drift together.
- Raining: a cloud whose collective mass (own + friends + friends' friends) exceeds the
  threshold starts raining together with its friends, for good. Raining clouds shed
  drops at random, lose mass, and disappear once empty.
- Spawning: while the population is below target, a fresh cloud appears now and then.
"""
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .constants import (
    CLOUD_SECTOR_COUNT,
    RAIN_BASE_RATE,
    RAIN_JITTER,
    RAIN_MAX_PROBABILITY,
    RAIN_MIN_ADJUSTMENT,
    TAU,
)
from .data_models import Cloud, Rain, WorldSettings, WorldState
from .geometry import angular_to_linear_velocity
from .vector_utils import clamp, vec_len, vec_sub
from .world_factory import create_random_cloud

logger = logging.getLogger(__name__)

Sector = Tuple[float, float]


def build_sectors(count: int = CLOUD_SECTOR_COUNT) -> List[Sector]:
    """
    Split [0, 2*pi) into count sectors, each widened by half its width on both sides.

    The first and last sectors wrap across 0, so their begin is larger than their end.
    """
    width = TAU / count
    fuzz = width / 2
    sectors: List[Sector] = []
    for i in range(count):
        begin = width * i
        fuzzy_begin = TAU - fuzz if i == 0 else begin - fuzz
        fuzzy_end = fuzz if i == count - 1 else begin + width + fuzz
        sectors.append((fuzzy_begin, fuzzy_end))
    return sectors


CLOUD_SECTORS = build_sectors()


def in_sector(angle: float, sector: Sector) -> bool:
    begin, end = sector
    if end < begin:
        return angle > begin or angle < end
    return begin < angle < end


def group_clouds_by_sector(clouds: Sequence[Cloud],
                           sectors: Sequence[Sector] = CLOUD_SECTORS) -> List[List[Cloud]]:
    """List the clouds of each sector, keeping the input order."""
    return [[cloud for cloud in clouds if in_sector(cloud.orbit.rotation, sector)]
            for sector in sectors]


def friend_distance(cloud: Cloud, other: Cloud) -> float:
    return cloud.shape.smallest_extent + other.shape.smallest_extent / 4


def cluster_clouds(clouds: Sequence[Cloud], sectors: Sequence[Sector] = CLOUD_SECTORS) -> None:
    """
    Rebuild every cloud's friend set from current proximity.

    For each pair sharing a sector and closer than friend_distance, the two become
    friends and the later cloud adopts the earlier cloud's orbital velocity.
    """
    for cloud in clouds:
        cloud.friends.clear()

    for group in group_clouds_by_sector(clouds, sectors):
        for i, cloud in enumerate(group):
            for other in group[i + 1:]:
                distance = vec_len(vec_sub(other.location, cloud.location))
                if distance < friend_distance(cloud, other):
                    other.orbit.rotational_velocity = cloud.orbit.rotational_velocity
                    cloud.friends.add(other.cloud_id)
                    other.friends.add(cloud.cloud_id)


def collective_mass(cloud: Cloud, index: Dict[int, Cloud]) -> float:
    """Own mass plus each friend's mass plus the masses of each friend's friends."""
    total = cloud.mass
    for friend_id in cloud.friends:
        friend = index[friend_id]
        total += friend.mass + sum(index[other_id].mass for other_id in friend.friends)
    return total


def rain_probability(mass: float, elapsed: float) -> float:
    """Chance that a raining cloud with this collective mass sheds a drop this tick."""
    adjustment = clamp(0.01 * mass ** 2, RAIN_MIN_ADJUSTMENT, 1.0)
    return min(RAIN_BASE_RATE * elapsed * adjustment, RAIN_MAX_PROBABILITY)


def emit_rain(cloud: Cloud, rng) -> Rain:
    """A drop just under the cloud, moving with the cloud's orbital velocity."""
    x, y = cloud.location
    jitter_x, jitter_y = RAIN_JITTER
    location = (x + (rng.random() - 0.5) * jitter_x, y + (rng.random() - 0.5) * jitter_y)
    velocity = angular_to_linear_velocity(
        cloud.orbit_radius, cloud.orbit.rotation, cloud.orbit.rotational_velocity
    )
    return Rain(location=location, velocity=velocity)


def update_clouds(world: WorldState, elapsed: float, rng, settings: WorldSettings) -> Optional[str]:
    """
    Cluster, rain, despawn and spawn clouds for one tick.

    Returns a human-readable message for the most notable event, if any.
    """
    clouds = world.water.clouds
    cluster_clouds(clouds)
    index = world.cloud_index()

    last_msg: Optional[str] = None
    retained: List[Cloud] = []

    for cloud in clouds:
        mass = collective_mass(cloud, index)

        if mass > settings.rain_threshold:
            for member in [cloud, *(index[i] for i in cloud.friends)]:
                if not member.is_raining:
                    member.start_raining()
                    logger.info("%s started raining (collective mass %.2f)", member.name, mass)
                    last_msg = f"{member.name} started raining"

        if not cloud.is_raining:
            retained.append(cloud)
            continue

        if rng.random() < rain_probability(mass, elapsed):
            cloud.mass -= settings.rain_drop_mass
            world.water.rain.append(emit_rain(cloud, rng))

        if cloud.mass > 0:
            retained.append(cloud)
        else:
            logger.info("%s rained out", cloud.name)
            last_msg = f"{cloud.name} rained out"

    world.water.clouds = retained
    if len(retained) < len(clouds):
        # friends that rained out this tick are gone
        retained_ids = {cloud.cloud_id for cloud in retained}
        for cloud in retained:
            cloud.friends &= retained_ids

    if (elapsed > 0 and len(retained) < settings.cloud_target_count
            and rng.random() < settings.cloud_spawn_probability):
        cloud = create_random_cloud(world.planet, world.allocate_cloud_id(), rng, settings)
        retained.append(cloud)
        logger.debug("Spawned %s, %d clouds", cloud.name, len(retained))

    return last_msg

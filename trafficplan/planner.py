"""Choosing departure times and routes for every car of a network."""

from __future__ import annotations

import enum
import heapq
import logging
from collections.abc import Iterable
from dataclasses import replace
from os import PathLike

from trafficplan.car import Car, start_order_key
from trafficplan.road import HORIZON
from trafficplan.scheduler import Network

logger = logging.getLogger(__name__)

#: Arrival time standing for a cross that cannot be reached.
UNREACHABLE = 1_000_000

# How many of the shortest trips are planned last, longest of them first.
_SHORT_TRIP_COUNT = 10001
# How far the search start is pulled back before planning the next car.
_START_PULLBACK = 50
# How far the departure is pushed when no uncongested route exists.
_RETRY_DELAY = 10


class Strategy(enum.Enum):
    """Order in which cars are routed, and how their search start moves."""

    #: Cars by planned start time, then id; every search starts at time 0.
    IN_START_ORDER = "in-start-order"
    #: Longer trips in start order, then the shortest trips from the longest
    #: down; the search start carries over from one car to the next.
    SHORT_TRIPS_LAST = "short-trips-last"


def _search(
    network: Network, car: Car, departure: int, congestion_aware: bool
) -> tuple[dict[int, int], dict[int, int], dict[int, int]]:
    """Earliest arrival times at every cross for ``car`` leaving at ``departure``.

    Returns the arrival times, the cross each one was reached from, and the
    road used to reach it.
    """
    arrival = dict.fromkeys(network.crosses, UNREACHABLE)
    came_from = {cross_id: cross_id for cross_id in network.crosses}
    via_road = dict.fromkeys(network.crosses, 0)
    arrival[car.origin] = departure
    heap = [(departure, car.origin)]
    settled: set[int] = set()
    while heap:
        time, cross_id = heapq.heappop(heap)
        if cross_id in settled:
            continue
        settled.add(cross_id)
        for road_id, road in sorted(network.crosses[cross_id].outgoing.items()):
            speed = min(car.speed, road.speed)
            through = (road.length + speed - 1) // speed
            next_id = road.destination
            if congestion_aware:
                load = road.congestion(time, time + through - 1)
                if not load < 1:
                    continue
                candidate: float = time + through * (1 + load)
            else:
                candidate = time + through
            if arrival[next_id] > candidate:
                arrival[next_id] = int(candidate)
                came_from[next_id] = cross_id
                via_road[next_id] = road_id
                heapq.heappush(heap, (arrival[next_id], next_id))
    return arrival, came_from, via_road


def _check_ends(network: Network, car: Car) -> None:
    for cross_id in (car.origin, car.destination):
        if cross_id not in network.crosses:
            raise ValueError(f"car {car.id} uses unknown cross {cross_id}")


def _route(network: Network, car: Car, start_time: int) -> int:
    """Route ``car``, reserve its roads and return the search start used."""
    while True:
        departure = max(car.plan_time, start_time)
        if departure >= HORIZON:
            raise ValueError(f"no route found for car {car.id}")
        arrival, came_from, via_road = _search(network, car, departure, True)
        if arrival[car.destination] == UNREACHABLE:
            start_time += _RETRY_DELAY
            continue
        path = []
        cross_id = car.destination
        while cross_id != car.origin:
            leave_next = arrival[cross_id]
            road_id = via_road[cross_id]
            path.append(road_id)
            cross_id = came_from[cross_id]
            road = network.crosses[cross_id].outgoing[road_id]
            road.reserve(arrival[cross_id], leave_next - 1)
        path.reverse()
        car.set_schedule([car.id, arrival[car.destination], *path])
        return start_time


def _fresh_copy(car: Car) -> Car:
    return replace(car, schedule_start_time=car.plan_time)


def _planning_order(network: Network, strategy: Strategy) -> list[Car]:
    if strategy is Strategy.IN_START_ORDER:
        copies = [_fresh_copy(car) for car in network.cars.values()]
        return sorted(copies, key=start_order_key)
    trips = []
    for car in network.cars.values():
        arrival, _, _ = _search(network, car, 0, False)
        if arrival[car.destination] == UNREACHABLE:
            logger.error("car %d cannot reach cross %d", car.id, car.destination)
        trips.append((arrival[car.destination], car.id))
    trips.sort()
    shortest = trips[:_SHORT_TRIP_COUNT]
    longer = trips[_SHORT_TRIP_COUNT:]
    first = sorted(
        (_fresh_copy(network.cars[car_id]) for _, car_id in longer),
        key=start_order_key,
    )
    last = [_fresh_copy(network.cars[car_id]) for _, car_id in reversed(shortest)]
    return first + last


def plan_routes(
    network: Network, strategy: Strategy = Strategy.IN_START_ORDER
) -> list[Car]:
    """Plan a route for every car and return planned copies in planning order.

    Each car takes the quickest route whose roads are not congested by the
    cars planned before it; roads used are reserved on the network. The start
    time recorded in a plan is the arrival time found for its destination.
    Raises ValueError when a car uses an unknown cross or no route is found
    within the tracked time horizon.
    """
    for car in network.cars.values():
        _check_ends(network, car)
    order = _planning_order(network, strategy)
    start_time = 0
    for count, car in enumerate(order, start=1):
        if strategy is Strategy.IN_START_ORDER:
            start_time = 0
        else:
            start_time = max(0, start_time - _START_PULLBACK)
        start_time = _route(network, car, start_time)
        logger.debug("count = %d start_time = %d", count, start_time)
    return order


def format_answer(cars: Iterable[Car]) -> str:
    """Return one ``(id,start_time,road1,...)`` line per car."""
    return "".join(car.answer_line() + "\n" for car in cars)


def save_answer(cars: Iterable[Car], path: str | PathLike[str]) -> None:
    """Write the plans of ``cars`` to the answer file at ``path``."""
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(format_answer(cars))
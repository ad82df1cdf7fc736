"""Loading a road network and simulating cars driving their planned routes."""

from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass, field, replace
from os import PathLike

from trafficplan.car import Car, start_order_key
from trafficplan.cross import Cross, RunStats
from trafficplan.parsing import read_records
from trafficplan.road import EntryResult, Road

logger = logging.getLogger(__name__)


class DeadlockError(RuntimeError):
    """Raised when no waiting car can move in a time unit."""

    def __init__(self, message: str, report: str = "") -> None:
        super().__init__(message)
        self.report = report


def _format_record(values: list[int]) -> str:
    return "(" + ",".join(str(value) for value in values) + ")"


@dataclass
class Network:
    """Cars, roads and crosses, with every road direction linked to its crosses."""

    cars: dict[int, Car] = field(default_factory=dict)
    roads: dict[int, Road] = field(default_factory=dict)
    crosses: dict[int, Cross] = field(default_factory=dict)
    road_instances: list[Road] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.cars = dict(sorted(self.cars.items()))
        self.roads = dict(sorted(self.roads.items()))
        self.crosses = dict(sorted(self.crosses.items()))
        self._connect()

    def _cross(self, cross_id: int) -> Cross:
        if cross_id not in self.crosses:
            self.crosses[cross_id] = Cross(cross_id)
            self.crosses = dict(sorted(self.crosses.items()))
        return self.crosses[cross_id]

    def _link(self, road_id: int, road: Road) -> None:
        self.road_instances.append(road)
        self._cross(road.destination).add_incoming(road)
        self._cross(road.origin).add_outgoing(road_id, road)

    def _connect(self) -> None:
        # Roads are linked in id order, so each cross sees its incoming
        # roads from the smallest id to the largest.
        self.road_instances = []
        for road_id, road in self.roads.items():
            self._link(road_id, replace(road))
            if road.is_duplex:
                self._link(road_id, road.reversed())

    @classmethod
    def load(
        cls,
        car_path: str | PathLike[str],
        road_path: str | PathLike[str],
        cross_path: str | PathLike[str],
    ) -> Network:
        """Read the car, road and cross files; unreadable files give nothing."""
        cars = {}
        for values in read_records(car_path):
            car = Car.from_line(_format_record(values))
            cars[car.id] = car
        roads = {}
        for values in read_records(road_path):
            road = Road.from_line(_format_record(values))
            roads[road.id] = road
        crosses = {}
        for values in read_records(cross_path):
            cross = Cross.from_line(_format_record(values))
            crosses[cross.id] = cross
        return cls(cars, roads, crosses)

    def load_answer(self, path: str | PathLike[str]) -> None:
        """Apply the ``(id,start_time,road1,...)`` plans found in ``path``."""
        for values in read_records(path):
            if not values:
                continue
            car = self.cars.get(values[0])
            if car is None:
                raise ValueError(f"answer names unknown car {values[0]}")
            car.set_schedule(values)


class Simulation:
    """Time-stepped run of the cars of a network along their planned routes."""

    def __init__(self, network: Network) -> None:
        self.network = network
        self.time = 0
        self.stats = RunStats()
        self.pending: list[tuple[int, int, int, Car]] = []
        self.waiting_to_run: list[Car] = []
        for order, car in enumerate(network.cars.values()):
            if car.next_road() is None:
                raise ValueError(f"car {car.id} has no planned route")
            copy = replace(car)
            heapq.heappush(
                self.pending, (copy.schedule_start_time, copy.id, order, copy)
            )

    @property
    def finished(self) -> bool:
        """Tell whether every car has reached its destination."""
        return not self.pending and not self.waiting_to_run and self.stats.running == 0

    def _ordered_crosses(self) -> list[Cross]:
        return [self.network.crosses[key] for key in sorted(self.network.crosses)]

    def _launch_cars(self) -> None:
        while self.pending and self.pending[0][0] <= self.time:
            self.waiting_to_run.append(heapq.heappop(self.pending)[3])
        self.waiting_to_run.sort(key=start_order_key)
        still_waiting = []
        for car in self.waiting_to_run:
            cross = self.network.crosses.get(car.origin)
            if cross is None:
                raise ValueError(f"car {car.id} starts at unknown cross {car.origin}")
            result = cross.send_car(car)
            if result == EntryResult.ENTERED:
                self.stats.running += 1
            elif result == EntryResult.FULL:
                still_waiting.append(car)
            else:
                raise RuntimeError(
                    f"car {car.id} could not start: {result.name.lower()}"
                )
        self.waiting_to_run = still_waiting

    def step(self) -> None:
        """Simulate one time unit.

        Raises DeadlockError when waiting cars block each other for good.
        """
        waiting = sum(road.drive_all() for road in self.network.road_instances)
        crosses = self._ordered_crosses()
        for cross in crosses:
            cross.update_all_road_states()
        while waiting > 0:
            settled = sum(cross.schedule(self.stats, self.time) for cross in crosses)
            if settled == 0:
                report = self.status_report()
                raise DeadlockError(
                    f"deadlock at T = {self.time} with {waiting} cars waiting",
                    report,
                )
            waiting -= settled
        self._launch_cars()
        self.time += 1

    def run(self) -> int:
        """Run until every car has arrived and return the time taken."""
        while not self.finished:
            self.step()
        logger.info("all cars running time = %d", self.stats.total_running_time)
        return self.time

    def status_report(self) -> str:
        """Describe the counters and the cars on every road."""
        waiting_ids = " ".join(str(car.id) for car in self.waiting_to_run)
        lines = [
            "========show schedule status=========",
            f"T = {self.time}",
            f"cars_wait_schedule_start_time_n = {len(self.pending)}",
            f"cars_wait_run_n = {len(self.waiting_to_run)}",
            f"car is list which wait run: {waiting_ids}",
            f"cars_running_n = {self.stats.running}",
            f"cars_arrive_destination_n = {self.stats.arrived}",
            "car running in the road:",
        ]
        lines.extend(road.status_report() for road in self.network.road_instances)
        lines.append("=====================================")
        return "\n".join(lines)
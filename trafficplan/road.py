"""Roads: lanes of cars, crossing priorities and capacity bookkeeping."""

from __future__ import annotations

import enum
import heapq
import itertools
import logging
import math
from collections import deque
from dataclasses import dataclass, field, replace
from itertools import islice

from trafficplan.car import Car, CarStatus
from trafficplan.parsing import parse_ints

logger = logging.getLogger(__name__)

#: Number of time units tracked for capacity reservations.
HORIZON = 10000


class EntryResult(enum.IntEnum):
    """Outcome of a car trying to move onto a road."""

    FULL = -2
    STAYS = -1
    BLOCKED = 0
    ENTERED = 1


@dataclass(eq=False)
class Road:
    """One direction of a road between two crosses, with its lanes of cars."""

    id: int
    length: int
    speed: int
    channel: int
    origin: int
    destination: int
    is_duplex: bool
    into_channel_id: int = field(default=0, init=False)
    waiting_directions: list[int] = field(init=False)
    lanes: list[deque[Car]] = field(init=False)
    usage: list[int] = field(init=False, repr=False)
    capacity: int = field(init=False)
    _waiting: list[tuple[int, int, int, Car]] = field(init=False, repr=False)
    _counter: itertools.count = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.waiting_directions = [0, 0, 0]
        self.lanes = [deque() for _ in range(self.channel)]
        self.usage = [0] * HORIZON
        self.capacity = self.channel * max(1, self.length - self.speed) * 6 // 10
        self._waiting = []
        self._counter = itertools.count()

    def __lt__(self, other: Road) -> bool:
        return self.id < other.id

    @classmethod
    def from_line(cls, line: str) -> Road:
        """Build a road from ``(id,length,speed,channel,from,to,isDuplex)``."""
        values = parse_ints(line)
        if len(values) < 7:
            raise ValueError(f"road record needs 7 values: {line!r}")
        road_id, length, speed, channel, origin, destination, duplex = values[:7]
        return cls(road_id, length, speed, channel, origin, destination, duplex == 1)

    def reversed(self) -> Road:
        """Return a fresh road running the opposite way."""
        return replace(self, origin=self.destination, destination=self.origin)

    def reaches(self, cross_id: int) -> bool:
        """Tell whether travelling along this road can end at ``cross_id``."""
        return cross_id == self.destination or (
            self.is_duplex and cross_id == self.origin
        )

    def reset_round(self) -> None:
        """Clear the per-time-unit entry channel, direction counts and queue."""
        self.into_channel_id = 0
        self.waiting_directions = [0, 0, 0]
        self._waiting.clear()

    def has_waiting_car(self) -> bool:
        """Tell whether some car on this road waits to pass the cross."""
        return bool(self._waiting)

    def priority_car(self) -> Car:
        """Return the waiting car that passes the cross first."""
        if not self._waiting:
            raise IndexError(f"no car waits on road {self.id}")
        return self._waiting[0][3]

    def pass_car_through(self, channel_id: int) -> Car:
        """Remove the priority car, which leads ``channel_id``, from the road."""
        car = self.lanes[channel_id].popleft()
        heapq.heappop(self._waiting)
        return car

    def add_waiting_direction(self, direction: int) -> None:
        """Count one more car waiting to enter in ``direction``."""
        self.waiting_directions[direction] += 1

    def remove_waiting_direction(self, direction: int) -> None:
        """Count one fewer car waiting to enter in ``direction``."""
        self.waiting_directions[direction] -= 1

    def direction_has_priority(self, direction: int) -> bool:
        """Tell whether no car of a stronger direction waits to enter."""
        for count in self.waiting_directions[:direction]:
            if count > 0:
                return False
            if count < 0:
                logger.error(
                    "negative waiting count on road id = %d from = %d to = %d",
                    self.id,
                    self.origin,
                    self.destination,
                )
        return True

    def _push_waiting(self, car: Car) -> None:
        heapq.heappush(
            self._waiting,
            (car.dis_to_cross, car.channel_id, next(self._counter), car),
        )

    def drive_channel(self, channel_id: int) -> int:
        """Move the waiting cars of one channel as far as they can go.

        Returns how many cars changed from waiting to terminated.
        """
        lane = self.lanes[channel_id]
        if not lane:
            return 0
        terminated = 0
        front = lane[0]
        if front.status == CarStatus.WAITING:
            speed = min(self.speed, front.speed)
            if front.dis_to_cross >= speed:
                front.dis_to_cross -= speed
                front.status = CarStatus.TERMINATED
                terminated += 1
            else:
                self._push_waiting(front)
        previous = front
        for car in islice(lane, 1, None):
            if car.status != CarStatus.WAITING:
                break
            gap = car.dis_to_cross - previous.dis_to_cross - 1
            speed = min(self.speed, car.speed)
            if gap >= speed:
                car.dis_to_cross -= speed
                car.status = CarStatus.TERMINATED
                terminated += 1
            elif previous.status == CarStatus.TERMINATED:
                car.dis_to_cross = previous.dis_to_cross + 1
                car.status = CarStatus.TERMINATED
                terminated += 1
            previous = car
        return terminated

    def drive_all(self) -> int:
        """Start a time unit: mark all cars waiting, then drive every channel.

        Returns how many cars are still waiting afterwards.
        """
        self.reset_round()
        waiting = 0
        for channel_id, lane in enumerate(self.lanes):
            for car in lane:
                car.status = CarStatus.WAITING
            waiting += len(lane)
            waiting -= self.drive_channel(channel_id)
        return waiting

    def hold_forefront_car(self, channel_id: int) -> int:
        """Keep the priority car at the cross and drive the rest of its channel.

        Returns how many cars changed from waiting to terminated.
        """
        heapq.heappop(self._waiting)
        front = self.lanes[channel_id][0]
        front.status = CarStatus.TERMINATED
        front.dis_to_cross = 0
        return 1 + self.drive_channel(channel_id)

    def is_full(self) -> bool:
        """Tell whether every channel is blocked at its entry by a settled car."""
        if self.into_channel_id == self.channel:
            return True
        while True:
            lane = self.lanes[self.into_channel_id]
            if not lane:
                return False
            last = lane[-1]
            if last.dis_to_cross != self.length - 1 or last.status != CarStatus.TERMINATED:
                return False
            self.into_channel_id += 1
            if self.into_channel_id == self.channel:
                return True

    def admit_car(self, car: Car) -> EntryResult:
        """Try to move ``car`` onto this road through the current entry channel.

        On success the car itself is updated and appended to the channel.
        """
        speed = min(self.speed, car.speed)
        move = speed - car.dis_to_cross
        if move <= 0:
            return EntryResult.STAYS
        target = self.length - move
        lane = self.lanes[self.into_channel_id]
        if not lane or target > lane[-1].dis_to_cross:
            position = target
        elif lane[-1].status == CarStatus.TERMINATED:
            position = lane[-1].dis_to_cross + 1
        else:
            return EntryResult.BLOCKED
        if car.next_road() is None:
            return EntryResult.ENTERED
        car.advance_path()
        car.status = CarStatus.TERMINATED
        car.dis_to_cross = position
        car.channel_id = self.into_channel_id
        lane.append(car)
        return EntryResult.ENTERED

    def status_report(self) -> str:
        """Describe the road and the ``(id,status,distance)`` of its cars."""
        lines = [
            f"road id = {self.id} from = {self.origin} to = {self.destination} "
            f"length = {self.length} speed = {self.speed}"
        ]
        for channel_id, lane in enumerate(self.lanes):
            cars = "".join(
                f"({car.id},{int(car.status)},{car.dis_to_cross})" for car in lane
            )
            lines.append(f"   channel id = {channel_id}:{cars}")
        return "\n".join(lines)

    def _check_window(self, start: int, end: int) -> None:
        if start <= end and (start < 0 or end >= HORIZON):
            raise ValueError(
                f"time window {start}..{end} is outside 0..{HORIZON - 1}"
            )

    def congestion(self, start: int, end: int) -> float:
        """Return the reserved share of capacity over time units start..end.

        Returns 2.0 as soon as one time unit is over capacity, and NaN when
        the window holds no capacity at all.
        """
        self._check_window(start, end)
        running = 0
        total_capacity = 0
        for used in self.usage[start:end + 1]:
            if used > self.capacity:
                return 2.0
            running += max(0, used)
            total_capacity += self.capacity
        if not total_capacity:
            return math.nan
        return running / total_capacity

    def reserve(self, start: int, end: int) -> None:
        """Record one car using the road during time units start..end."""
        self._check_window(start, end)
        for moment in range(start, end + 1):
            self.usage[moment] += 1
"""Cars, their planned routes and the orderings used when scheduling them."""

from __future__ import annotations

import enum
from collections import deque
from dataclasses import dataclass, field

from trafficplan.parsing import parse_ints


class CarStatus(enum.IntEnum):
    """Scheduling state of a car within one time unit."""

    TERMINATED = 0
    WAITING = 1


@dataclass
class Car:
    """A car with its trip description and its state on the road network."""

    id: int
    origin: int
    destination: int
    speed: int
    plan_time: int
    schedule_start_time: int | None = None
    schedule_path: deque[int] = field(default_factory=deque)
    status: CarStatus = CarStatus.TERMINATED
    dis_to_cross: int = 0
    channel_id: int = -1

    def __post_init__(self) -> None:
        if self.schedule_start_time is None:
            self.schedule_start_time = self.plan_time
        self.schedule_path = deque(self.schedule_path)

    @classmethod
    def from_line(cls, line: str) -> Car:
        """Build a car from a record ``(id,from,to,speed,planTime)``."""
        values = parse_ints(line)
        if len(values) < 5:
            raise ValueError(f"car record needs 5 values: {line!r}")
        car_id, origin, destination, speed, plan_time = values[:5]
        return cls(car_id, origin, destination, speed, plan_time)

    def set_schedule(self, schedule_info: list[int]) -> None:
        """Apply ``[id, start_time, road1, road2, ...]``.

        Records holding no road are ignored.
        """
        if len(schedule_info) > 2:
            self.schedule_start_time = schedule_info[1]
            self.schedule_path = deque(schedule_info[2:])

    def next_road(self) -> int | None:
        """Return the next road on the path, or None when the path is done."""
        return self.schedule_path[0] if self.schedule_path else None

    def advance_path(self) -> None:
        """Drop the road the car has just entered from its path."""
        self.schedule_path.popleft()

    def answer_line(self) -> str:
        """Format the car's plan as ``(id,start_time,road1,...)``."""
        values = [self.id, self.schedule_start_time, *self.schedule_path]
        return "(" + ",".join(str(value) for value in values) + ")"


def start_order_key(car: Car) -> tuple[int, int]:
    """Order cars by scheduled start time, then by id."""
    return (car.schedule_start_time, car.id)


def forefront_key(car: Car) -> tuple[int, int]:
    """Order waiting cars by distance to the cross, then by channel."""
    return (car.dis_to_cross, car.channel_id)
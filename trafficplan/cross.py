"""Crosses: turn directions between roads and moving cars across them."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from trafficplan.car import Car
from trafficplan.parsing import parse_ints
from trafficplan.road import EntryResult, Road


class Turn(enum.IntEnum):
    """Direction of a move through a cross; lower values go first."""

    STRAIGHT = 0
    LEFT = 1
    RIGHT = 2


@dataclass
class RunStats:
    """Counters a simulation keeps while cars cross and arrive."""

    running: int = 0
    arrived: int = 0
    total_running_time: int = 0


def _record_arrival(stats: RunStats, car: Car, time: int) -> None:
    stats.running -= 1
    stats.arrived += 1
    stats.total_running_time += time - car.plan_time


# Offset in the clockwise road list of a cross, and the turn it stands for.
_TURN_OFFSETS = ((1, Turn.LEFT), (2, Turn.STRAIGHT), (3, Turn.RIGHT))


@dataclass(eq=False)
class Cross:
    """A cross joining up to four roads."""

    id: int
    road_ids: list[int] = field(default_factory=list)
    turns: dict[tuple[int, int], Turn] = field(default_factory=dict)
    incoming: list[Road] = field(default_factory=list)
    outgoing: dict[int, Road] = field(default_factory=dict)

    @classmethod
    def from_line(cls, line: str) -> Cross:
        """Build a cross from ``(id,roadId1,roadId2,roadId3,roadId4)``.

        A missing road is written as -1.
        """
        values = parse_ints(line)
        if len(values) < 5:
            raise ValueError(f"cross record needs 5 values: {line!r}")
        cross_id, *slots = values[:5]
        turns: dict[tuple[int, int], Turn] = {}
        for position, road_id in enumerate(slots):
            for offset, turn in _TURN_OFFSETS:
                turns[(road_id, slots[(position + offset) % 4])] = turn
        road_ids = [road_id for road_id in slots if road_id != -1]
        return cls(cross_id, road_ids, turns)

    def turn(self, from_road_id: int, to_road_id: int) -> Turn:
        """Return the turn from one road into another; unknown pairs go straight."""
        return self.turns.get((from_road_id, to_road_id), Turn.STRAIGHT)

    def add_incoming(self, road: Road) -> None:
        """Register a road that ends at this cross."""
        self.incoming.append(road)

    def add_outgoing(self, road_id: int, road: Road) -> None:
        """Register a road that starts at this cross."""
        self.outgoing[road_id] = road

    def _straight_exits(self, road_id: int) -> list[int]:
        return [
            exit_id
            for exit_id in sorted(self.outgoing)
            if exit_id != road_id and self.turn(road_id, exit_id) == Turn.STRAIGHT
        ]

    def update_road_state(self, road: Road) -> None:
        """Count the direction of the priority car of ``road`` on its target road."""
        if not road.has_waiting_car():
            return
        next_id = road.priority_car().next_road()
        if next_id is None:
            # An arriving car counts as going straight on.
            for exit_id in self._straight_exits(road.id):
                self.outgoing[exit_id].add_waiting_direction(Turn.STRAIGHT)
            return
        direction = self.turn(road.id, next_id)
        self.outgoing[next_id].add_waiting_direction(direction)

    def update_all_road_states(self) -> None:
        """Update the direction counts for every road entering this cross."""
        for road in self.incoming:
            self.update_road_state(road)

    def send_car(self, car: Car) -> EntryResult:
        """Try to move ``car`` onto the next road of its path from this cross."""
        target = self.outgoing[car.next_road()]
        if target.is_full():
            return EntryResult.FULL
        return target.admit_car(car)

    def schedule(self, stats: RunStats, time: int) -> int:
        """Move waiting cars through this cross as far as priorities allow.

        ``stats`` is updated for cars that arrive. Returns how many cars
        changed from waiting to terminated.
        """
        settled = 0
        for road in self.incoming:
            while road.has_waiting_car():
                car = road.priority_car()
                channel_id = car.channel_id
                next_id = car.next_road()
                if next_id is None:
                    exits = self._straight_exits(road.id)
                    settled += 1
                    _record_arrival(stats, car, time)
                    road.pass_car_through(channel_id)
                    settled += road.drive_channel(channel_id)
                    if exits:
                        self.outgoing[exits[-1]].remove_waiting_direction(Turn.STRAIGHT)
                    self.update_road_state(road)
                    continue
                target = self.outgoing[next_id]
                direction = self.turn(road.id, target.id)
                if not target.direction_has_priority(direction):
                    break
                if target.is_full():
                    settled += road.hold_forefront_car(channel_id)
                else:
                    result = target.admit_car(car)
                    if result == EntryResult.BLOCKED:
                        break
                    if result == EntryResult.STAYS:
                        settled += road.hold_forefront_car(channel_id)
                    else:
                        settled += 1
                        road.pass_car_through(channel_id)
                        settled += road.drive_channel(channel_id)
                target.remove_waiting_direction(direction)
                self.update_road_state(road)
        return settled
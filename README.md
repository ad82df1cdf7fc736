# trafficplan

`trafficplan` plans a route and a departure for every car on a road
network. The network is made of crosses joined by roads. Each road has a
length, a speed limit and a number of channels, and it may run in both
directions. Every car has a start cross, a destination cross, a top speed
and a planned departure time.

For each car the planner runs a quickest-time search over the crosses. The
search avoids roads whose capacity is already taken up by cars planned
earlier. When no route is free, the planner moves the car's departure 10
time units later and searches again. The package also has a simulator. It
replays a network whose cars have routes, one time unit at a time, using
channels, queues and turn priorities at the crosses. If the cars lock each
other up, it raises an error.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Input files

There are three input files. Each holds one record per line, written as a
parenthesised, comma-separated list of integers. Empty lines and lines that
start with `#` are skipped. If a file cannot be opened, it is read as empty.

| File    | Record                                                   |
|---------|----------------------------------------------------------|
| cars    | `(id,from,to,speed,planTime)`                            |
| roads   | `(id,length,speed,channel,from,to,isDuplex)`             |
| crosses | `(id,roadId1,roadId2,roadId3,roadId4)` (`-1` = no road)  |

In a cross record the roads are listed in order around the cross. From any
road, the next road in the list is a left turn, the one after is straight
on, and the third is a right turn. Straight on goes first at a cross, then
left, then right.

A road marked `isDuplex` of 1 is used in both directions, under the same
road id.

## Output

The answer file has one line per car:

```
(carId,startTime,roadId1,roadId2,...)
```

The `startTime` written for a car is the arrival time the search found for
its destination.

## Command line

```
trafficplan car.txt road.txt cross.txt answer.txt
```

This reads the three input files, plans every car and writes the answer
file. With fewer than four paths it prints a usage line and exits with
status 1.

`--strategy` sets the order in which cars are planned:

- `in-start-order` (default): cars in order of planned departure, then by
  id. Every car's search starts at time 0, or at its planned departure if
  that is later.
- `short-trips-last`: cars are first ranked by their travel time on an
  empty network. All but the 10001 quickest trips are planned first, in
  start order. The 10001 quickest trips then follow, slowest first. The
  search start carries over from one car to the next, pulled back by 50
  time units each time.

## Library use

```python
from trafficplan.scheduler import Network
from trafficplan.planner import Strategy, plan_routes, save_answer

network = Network.load("car.txt", "road.txt", "cross.txt")
cars = plan_routes(network, Strategy.IN_START_ORDER)
save_answer(cars, "answer.txt")
```

`plan_routes` returns planned copies of the cars, in the order they were
planned. It records the roads each car uses as capacity reservations on the
network, so plan each freshly loaded network only once. Reservations cover
time units 0 to 9999. If a car would have to leave later than that, or it
names a cross that does not exist, the function raises `ValueError`.
`format_answer` returns the answer lines without writing a file.

To replay a plan:

```python
from trafficplan.scheduler import DeadlockError, Network, Simulation

network = Network.load("car.txt", "road.txt", "cross.txt")
network.load_answer("answer.txt")
simulation = Simulation(network)
try:
    total_time = simulation.run()
except DeadlockError as error:
    print(error.report)
```

`Simulation.step()` advances one time unit. `run()` steps until every car
has arrived and returns the time taken. The counters are in
`simulation.stats`: cars running, cars arrived, and their total running
time. `status_report()` describes the counters and the position of every
car on every road. A car without a route makes `Simulation` raise
`ValueError`.

The building blocks are in their own modules:

- `trafficplan.parsing`: `parse_ints`, `read_records`
- `trafficplan.car`: `Car`, `CarStatus`, `start_order_key`, `forefront_key`
- `trafficplan.road`: `Road`, `EntryResult`
- `trafficplan.cross`: `Cross`, `Turn`, `RunStats`

Progress messages go through the standard `logging` module.

## What it does not do

The command only plans. It does not run the simulator on its answer. To
check a plan, use `Simulation` from Python as shown above.
from collections import deque

import pytest

from trafficplan.scheduler import Network, Simulation


def _write(tmp_path, cars, roads, crosses, answer=None):
    car_file = tmp_path / "car.txt"
    road_file = tmp_path / "road.txt"
    cross_file = tmp_path / "cross.txt"
    car_file.write_text("#(id,from,to,speed,planTime)\n" + "\n".join(cars) + "\n")
    road_file.write_text("\n".join(roads) + "\n")
    cross_file.write_text("\n".join(crosses) + "\n")
    paths = [car_file, road_file, cross_file]
    if answer is not None:
        answer_file = tmp_path / "answer.txt"
        answer_file.write_text("\n".join(answer) + "\n")
        paths.append(answer_file)
    return paths


@pytest.fixture
def two_cross_files(tmp_path):
    return _write(
        tmp_path,
        cars=["(1000,1,2,5,1)"],
        roads=["(100,10,5,1,1,2,1)"],
        crosses=["(1,100,-1,-1,-1)", "(2,-1,-1,100,-1)"],
        answer=["(1000,1,100)"],
    )


def test_load_reads_records(two_cross_files):
    network = Network.load(*two_cross_files[:3])
    assert list(network.cars) == [1000]
    assert list(network.roads) == [100]
    assert sorted(network.crosses) == [1, 2]


def test_duplex_road_links_both_directions(two_cross_files):
    network = Network.load(*two_cross_files[:3])
    assert len(network.road_instances) == 2
    forward, backward = network.road_instances
    assert (forward.origin, forward.destination) == (1, 2)
    assert (backward.origin, backward.destination) == (2, 1)
    assert network.crosses[2].incoming == [forward]
    assert network.crosses[1].outgoing[100] is forward
    assert network.crosses[2].outgoing[100] is backward


def test_missing_files_give_empty_network(tmp_path):
    missing = tmp_path / "absent.txt"
    network = Network.load(missing, missing, missing)
    assert network.cars == {}
    assert network.road_instances == []


def test_load_answer_sets_plan(two_cross_files):
    network = Network.load(*two_cross_files[:3])
    network.load_answer(two_cross_files[3])
    car = network.cars[1000]
    assert car.schedule_start_time == 1
    assert list(car.schedule_path) == [100]


def test_load_answer_unknown_car(two_cross_files, tmp_path):
    network = Network.load(*two_cross_files[:3])
    bad = tmp_path / "bad.txt"
    bad.write_text("(9999,1,100)\n")
    with pytest.raises(ValueError):
        network.load_answer(bad)


def test_car_without_route_is_rejected(two_cross_files):
    network = Network.load(*two_cross_files[:3])
    with pytest.raises(ValueError):
        Simulation(network)


def test_single_car_run(two_cross_files):
    network = Network.load(*two_cross_files[:3])
    network.load_answer(two_cross_files[3])
    simulation = Simulation(network)
    assert simulation.run() == 4
    assert simulation.finished
    assert simulation.stats.arrived == 1
    assert simulation.stats.running == 0


def test_run_leaves_network_cars_untouched(two_cross_files):
    network = Network.load(*two_cross_files[:3])
    network.load_answer(two_cross_files[3])
    Simulation(network).run()
    assert network.cars[1000].schedule_path == deque([100])


def test_every_car_arrives(tmp_path):
    paths = _write(
        tmp_path,
        cars=["(1,1,2,5,1)", "(2,1,2,3,1)", "(3,2,1,4,2)"],
        roads=["(100,10,5,2,1,2,1)"],
        crosses=["(1,100,-1,-1,-1)", "(2,-1,-1,100,-1)"],
        answer=["(1,1,100)", "(2,1,100)", "(3,2,100)"],
    )
    network = Network.load(*paths[:3])
    network.load_answer(paths[3])
    simulation = Simulation(network)
    total = simulation.run()
    assert simulation.stats.arrived == len(network.cars)
    assert simulation.stats.running == 0
    assert simulation.time == total
    assert not any(lane for road in network.road_instances for lane in road.lanes)


def test_step_advances_time(two_cross_files):
    network = Network.load(*two_cross_files[:3])
    network.load_answer(two_cross_files[3])
    simulation = Simulation(network)
    simulation.step()
    simulation.step()
    assert simulation.time == 2
    assert simulation.stats.running == 1
    assert simulation.pending == []


def test_status_report_lists_roads(two_cross_files):
    network = Network.load(*two_cross_files[:3])
    network.load_answer(two_cross_files[3])
    simulation = Simulation(network)
    report = simulation.status_report()
    assert "T = 0" in report
    assert "cars_wait_schedule_start_time_n = 1" in report
    assert report.count("road id = 100") == 2
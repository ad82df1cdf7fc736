import pytest

from trafficplan.car import Car, CarStatus, forefront_key, start_order_key


def test_from_line_reads_fields():
    car = Car.from_line("(10000, 15, 35, 6, 1)")
    assert (car.id, car.origin, car.destination, car.speed, car.plan_time) == (
        10000,
        15,
        35,
        6,
        1,
    )
    assert car.status is CarStatus.TERMINATED
    assert car.dis_to_cross == 0
    assert car.channel_id == -1
    assert car.schedule_start_time == car.plan_time
    assert car.next_road() is None


def test_from_line_rejects_short_record():
    with pytest.raises(ValueError):
        Car.from_line("(1,2,3)")


def test_set_schedule_and_path_walk():
    car = Car.from_line("(1,2,3,4,5)")
    car.set_schedule([1, 9, 500, 501])
    assert car.schedule_start_time == 9
    assert car.next_road() == 500
    car.advance_path()
    assert car.next_road() == 501
    car.advance_path()
    assert car.next_road() is None


def test_set_schedule_without_roads_is_ignored():
    car = Car.from_line("(1,2,3,4,5)")
    car.set_schedule([1, 9])
    assert car.schedule_start_time == 5
    assert list(car.schedule_path) == []


def test_answer_line_round_trip():
    car = Car.from_line("(7,2,3,4,5)")
    car.set_schedule([7, 12, 100, 101, 102])
    line = car.answer_line()
    assert " " not in line
    other = Car.from_line("(7,2,3,4,5)")
    from trafficplan.parsing import parse_ints

    other.set_schedule(parse_ints(line))
    assert other.schedule_start_time == 12
    assert list(other.schedule_path) == [100, 101, 102]
    assert other.answer_line() == line


def test_start_order_key_sorts_by_time_then_id():
    a = Car(3, 1, 2, 5, 0, schedule_start_time=4)
    b = Car(1, 1, 2, 5, 0, schedule_start_time=4)
    c = Car(2, 1, 2, 5, 0, schedule_start_time=1)
    assert [car.id for car in sorted([a, b, c], key=start_order_key)] == [2, 1, 3]


def test_forefront_key_sorts_by_distance_then_channel():
    a = Car(1, 1, 2, 5, 0, dis_to_cross=2, channel_id=0)
    b = Car(2, 1, 2, 5, 0, dis_to_cross=1, channel_id=1)
    c = Car(3, 1, 2, 5, 0, dis_to_cross=1, channel_id=0)
    assert [car.id for car in sorted([a, b, c], key=forefront_key)] == [3, 2, 1]


def test_car_status_values():
    assert CarStatus(0) is CarStatus.TERMINATED
    assert CarStatus(1) is CarStatus.WAITING
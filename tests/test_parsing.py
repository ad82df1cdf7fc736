from trafficplan.parsing import parse_ints, read_records


def test_parse_parenthesised_record():
    assert parse_ints("(10000,15,35,6,1)") == [10000, 15, 35, 6, 1]


def test_parse_with_spaces():
    assert parse_ints("(1, 2, 3)") == [1, 2, 3]


def test_parse_negative_values():
    assert parse_ints("(7,-1,3,-1,4)") == [7, -1, 3, -1, 4]


def test_trailing_digits_without_terminator_are_dropped():
    assert parse_ints("1,2,3") == [1, 2]


def test_empty_and_non_numeric_text():
    assert parse_ints("") == []
    assert parse_ints("(,,)") == []


def test_minus_after_digits_starts_a_negative_number():
    assert parse_ints("1-2)") == [1, -2]


def test_read_records_skips_comments_and_blank_lines(tmp_path):
    path = tmp_path / "car.txt"
    path.write_text("#(id,from,to,speed,planTime)\n\n(1,2,3,4,5)\r\n(6,7,8,9,10)\n")
    assert list(read_records(path)) == [[1, 2, 3, 4, 5], [6, 7, 8, 9, 10]]


def test_read_records_missing_file_yields_nothing(tmp_path):
    assert list(read_records(tmp_path / "absent.txt")) == []
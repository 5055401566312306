from counter import COUNT_DURATION, counter_value, counter_values, format_count, is_finished

def test_starts_at_zero():
    assert counter_value(1250, 0) == 0
    assert counter_value(1250, -1) == 0

def test_reaches_target_at_duration():
    assert counter_value(1250, COUNT_DURATION) == 1250
    assert counter_value(1250, COUNT_DURATION * 3) == 1250

def test_linear_midpoint():
    assert counter_value(100000, COUNT_DURATION / 2) == 50000

def test_monotonic():
    values = [counter_value(45, i * 0.1) for i in range(30)]
    assert values == sorted(values)

def test_zero_duration_jumps_to_target():
    assert counter_value(18, 0, duration=0) == 18

def test_counter_values_and_finished():
    values = counter_values({"farmers": 100, "states": 18}, COUNT_DURATION)
    assert values == {"farmers": 100, "states": 18}
    assert is_finished(COUNT_DURATION)
    assert not is_finished(COUNT_DURATION - 0.01)

def test_format_count():
    assert format_count(100000) == "100,000"
    assert format_count(1249.6) == "1,250"

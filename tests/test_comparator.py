import pytest

from optimizer.base import Comparator, ConfigurationError, ObjectiveType


def test_minimize_prefers_smaller():
    c = Comparator(ObjectiveType.MINIMIZE)
    assert c.better(10, 20)
    assert not c.better(20, 10)


def test_maximize_reverses_both():
    c = Comparator(ObjectiveType.MAXIMIZE)
    assert not c.better(10, 20)
    assert c.better(20, 10)


def test_equal_scores_are_not_better():
    for direction in ObjectiveType:
        assert not Comparator(direction).better(5.0, 5.0)


def test_string_directions_accepted():
    assert Comparator("minimize").direction is ObjectiveType.MINIMIZE
    assert Comparator("MAXIMIZE").direction is ObjectiveType.MAXIMIZE
    # callable form is the same predicate
    assert Comparator("maximize")(3, 1)


def test_unrecognized_direction_is_fatal():
    with pytest.raises(ConfigurationError):
        Comparator("sideways")
    with pytest.raises(ConfigurationError):
        Comparator(3)


def test_callable_form_follows_overridden_better():
    class WithinTolerance(Comparator):
        def better(self, a, b):
            return super().better(a, b) and abs(a - b) > 1.0

    c = WithinTolerance("minimize")
    assert not c(9.5, 10)
    assert c(8, 10)

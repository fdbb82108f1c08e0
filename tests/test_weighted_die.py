import numpy as np
import pytest

from dice_server.domain.weighted_die import (
    DEFAULT_ALPHA,
    FALLBACK_FACE,
    ExponentialDecay,
    InverseCount,
    WeightedDie,
    build_policy,
    select_face,
)


def make_dice(seed=1234):
    return [
        WeightedDie.new_exponential(0.3, rng=np.random.default_rng(seed)),
        WeightedDie.new_inverse_count(rng=np.random.default_rng(seed)),
    ]


# Construction

def test_new_dice_start_with_zero_counts():
    for die in make_dice():
        assert die.counts == (0, 0, 0, 0, 0, 0)
        assert die.total_rolls == 0


def test_counts_snapshot_is_read_only():
    die = WeightedDie.new_inverse_count()
    snapshot = die.counts
    assert isinstance(snapshot, tuple)
    with pytest.raises(AttributeError):
        die.counts = (1, 1, 1, 1, 1, 1)


@pytest.mark.parametrize("counts", [
    [0] * 5,
    [0] * 7,
    [0, 0, -1, 0, 0, 0],
    [1.5, 0, 0, 0, 0, 0],
])
def test_invalid_counts_raise(counts):
    with pytest.raises(ValueError):
        WeightedDie(InverseCount(), counts=counts)


def test_build_policy():
    assert build_policy("exponential", 0.5) == ExponentialDecay(0.5)
    assert build_policy("exponential") == ExponentialDecay(DEFAULT_ALPHA)
    assert build_policy("inverse") == InverseCount()
    with pytest.raises(ValueError):
        build_policy("loaded")


def test_non_positive_alpha_is_accepted():
    die = WeightedDie.new_exponential(-0.1)
    assert die.policy.alpha == -0.1


# Roll contract

def test_roll_range_and_count_conservation():
    for die in make_dice():
        for _ in range(1000):
            before = die.counts
            face = die.roll()
            assert face in {1, 2, 3, 4, 5, 6}
            changed = [i for i in range(6) if die.counts[i] != before[i]]
            assert changed == [face - 1]
            assert die.counts[face - 1] == before[face - 1] + 1
        assert sum(die.counts) == 1000


def test_roll_uses_injected_draw(sequence_random):
    # Fresh inverse die: weights all 1, total 6. Draw 0.5 -> r = 3.0 -> face 4.
    die = WeightedDie.new_inverse_count(rng=sequence_random([0.5, 0.0]))
    assert die.roll() == 4
    assert die.counts == (0, 0, 0, 1, 0, 0)
    assert die.roll() == 1


def test_roll_fallback_selects_last_face(sequence_random):
    # A draw of 1.0 makes r equal to the total weight, so no running sum exceeds it.
    die = WeightedDie.new_exponential(0.3, rng=sequence_random([1.0, 1.0]))
    assert die.roll() == 6
    assert die.counts == (0, 0, 0, 0, 0, 1)
    assert die.roll() == 6
    assert die.counts == (0, 0, 0, 0, 0, 2)


@pytest.mark.parametrize("die_factory", [
    lambda rng: WeightedDie.new_exponential(0.3, rng=rng),
    lambda rng: WeightedDie.new_inverse_count(rng=rng),
])
def test_fairness_over_many_rolls(die_factory):
    die = die_factory(np.random.default_rng(2024))
    n = 100_000
    for _ in range(n):
        die.roll()
    frequencies = np.array(die.counts) / n
    assert np.all(np.abs(frequencies - 1 / 6) < 0.01)


def test_weights_correct_towards_least_rolled_face():
    die = WeightedDie(ExponentialDecay(0.3), counts=[10, 0, 0, 0, 0, 0])
    probabilities = die.probabilities()
    assert probabilities.sum() == pytest.approx(1.0)
    assert probabilities[0] < probabilities[1]
    assert np.allclose(probabilities[1:], probabilities[1])


# Selection rule

@pytest.mark.parametrize("r, expected", [
    (0.0, 0),
    (0.999, 0),
    (1.0, 1),
    (2.5, 2),
    (5.5, 5),
])
def test_select_face_first_running_sum_above_draw(r, expected):
    assert select_face(np.ones(6), r) == expected


def test_select_face_uneven_weights():
    weights = np.array([0.5, 0.25, 1.0, 0.25, 2.0, 1.0])
    assert select_face(weights, 0.6) == 1
    assert select_face(weights, 0.75) == 2
    assert select_face(weights, 4.0) == 5


def test_select_face_fallback():
    assert FALLBACK_FACE == 5
    assert select_face(np.ones(6), 6.0) == FALLBACK_FACE
    assert select_face(np.ones(6), 100.0) == FALLBACK_FACE


# Policies

def test_exponential_weight_strictly_decreases():
    policy = ExponentialDecay(0.3)
    weights = [policy.weight(c) for c in range(51)]
    assert weights[0] == 1.0
    assert all(a > b for a, b in zip(weights, weights[1:]))
    assert all(w > 0 for w in weights)


def test_exponential_alpha_zero_is_uniform():
    for counts in ([0] * 6, [100, 3, 0, 7, 2, 50], [1, 1, 1, 1, 1, 99999]):
        die = WeightedDie(ExponentialDecay(0.0), counts=counts)
        weights = die.weights()
        assert np.all(weights == weights[0])
        assert np.allclose(die.probabilities(), 1 / 6)


def test_exponential_small_alpha_approaches_uniform():
    counts = [40, 0, 5, 0, 0, 12]
    deviations = []
    for alpha in (0.3, 0.01, 1e-6):
        probabilities = WeightedDie(ExponentialDecay(alpha), counts=counts).probabilities()
        deviations.append(np.max(np.abs(probabilities - 1 / 6)))
    assert deviations[0] > deviations[1] > deviations[2]
    assert deviations[2] < 1e-4


def test_inverse_weight_strictly_decreases():
    policy = InverseCount()
    weights = [policy.weight(c) for c in range(1001)]
    assert weights[0] == 1.0
    assert all(a > b for a, b in zip(weights, weights[1:]))
    assert policy.weight(10**9) < 1e-8


def test_inverse_count_scenario():
    die = WeightedDie(InverseCount(), counts=[5, 0, 0, 0, 0, 0])
    weights = die.weights()
    assert weights[0] == pytest.approx(1 / 6)
    assert np.all(weights[1:] == 1.0)
    probabilities = die.probabilities()
    assert probabilities[0] / probabilities[1] == pytest.approx(1 / 6)
    assert probabilities.sum() == pytest.approx(1.0)


def test_exponential_weights_stay_positive_for_large_counts():
    die = WeightedDie(ExponentialDecay(0.3), counts=[5000] * 6)
    weights = die.weights()
    assert np.all(weights > 0)
    assert np.all(np.isfinite(weights))
    assert np.allclose(die.probabilities(), 1 / 6)

    die = WeightedDie(ExponentialDecay(0.3), counts=[5010, 5000, 5000, 5000, 5000, 5000])
    expected = np.exp(-0.3 * np.array([10, 0, 0, 0, 0, 0]))
    assert np.allclose(die.probabilities(), expected / expected.sum())


def test_strong_alpha_keeps_rolling_every_face():
    die = WeightedDie.new_exponential(1000.0, rng=np.random.default_rng(3))
    # 600 is a multiple of six, so every face ends level.
    for _ in range(600):
        die.roll()
    assert max(die.counts) - min(die.counts) <= 1
    assert np.all(die.weights() > 0)


@pytest.mark.parametrize("alpha", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_alpha_raises(alpha):
    with pytest.raises(ValueError):
        ExponentialDecay(alpha)
    with pytest.raises(ValueError):
        build_policy("exponential", alpha)

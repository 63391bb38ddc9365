import pytest

from smp.data.generation import generate_participants, generate_random_preferences
from smp.data.preferences import EmptyInput, validate_preferences


def test_participant_naming_scheme():
    participants = generate_participants(4)
    assert participants['group_a'] == ['A1', 'A2', 'A3', 'A4']
    assert participants['group_b'] == ['B1', 'B2', 'B3', 'B4']


def test_zero_participants_is_empty_input():
    with pytest.raises(EmptyInput):
        generate_participants(0)


@pytest.mark.parametrize("n", [1, 3, 10])
def test_random_preferences_are_strict_permutations(n):
    participants = generate_participants(n)
    preferences = generate_random_preferences(participants['group_a'], participants['group_b'], seed=n)
    prefs_a, prefs_b = preferences['prefs_a'], preferences['prefs_b']

    assert list(prefs_a) == participants['group_a']
    assert list(prefs_b) == participants['group_b']
    for ranking in prefs_a.values():
        assert sorted(ranking) == sorted(participants['group_b'])
    for ranking in prefs_b.values():
        assert sorted(ranking) == sorted(participants['group_a'])
    validate_preferences(prefs_a, prefs_b)


def test_seed_makes_generation_reproducible():
    participants = generate_participants(8)
    first = generate_random_preferences(participants['group_a'], participants['group_b'], seed=42)
    second = generate_random_preferences(participants['group_a'], participants['group_b'], seed=42)
    assert first == second


def test_different_seeds_differ():
    participants = generate_participants(8)
    first = generate_random_preferences(participants['group_a'], participants['group_b'], seed=1)
    second = generate_random_preferences(participants['group_a'], participants['group_b'], seed=2)
    assert first != second

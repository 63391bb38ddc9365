import pytest


@pytest.fixture
def single_pair():
    return {'A1': ['B1']}, {'B1': ['A1']}


@pytest.fixture
def classic_2x2():
    prefs_a = {'A1': ['B1', 'B2'], 'A2': ['B1', 'B2']}
    prefs_b = {'B1': ['A1', 'A2'], 'B2': ['A2', 'A1']}
    return prefs_a, prefs_b


@pytest.fixture
def latin_3x3():
    # Three stable matchings: A-optimal (everyone in A gets a first choice), B-optimal, and one in between
    prefs_a = {'A1': ['B1', 'B2', 'B3'], 'A2': ['B2', 'B3', 'B1'], 'A3': ['B3', 'B1', 'B2']}
    prefs_b = {'B1': ['A2', 'A3', 'A1'], 'B2': ['A3', 'A1', 'A2'], 'B3': ['A1', 'A2', 'A3']}
    return prefs_a, prefs_b


@pytest.fixture
def stable_with_unhappy_4x4():
    # Every A gets its first choice, B1 ends up with its last choice
    prefs_a = {'A1': ['B1', 'B2', 'B3', 'B4'], 'A2': ['B2', 'B3', 'B4', 'B1'],
               'A3': ['B3', 'B4', 'B1', 'B2'], 'A4': ['B4', 'B1', 'B2', 'B3']}
    prefs_b = {'B1': ['A2', 'A3', 'A4', 'A1'], 'B2': ['A1', 'A2', 'A3', 'A4'],
               'B3': ['A1', 'A2', 'A3', 'A4'], 'B4': ['A4', 'A1', 'A2', 'A3']}
    return prefs_a, prefs_b

import itertools

import pytest

from smp.data.generation import generate_participants, generate_random_preferences
from smp.solutions.algorithms import run_gale_shapley
from smp.solutions.handling import analyze_matching, compute_metrics, describe_matching, find_blocking_pairs

UNSTABLE_2X2 = {'A1': 'B2', 'B2': 'A1', 'A2': 'B1', 'B1': 'A2'}


def perfect_matchings(prefs_a, prefs_b):
    for perm in itertools.permutations(prefs_b):
        matching = {}
        for a, b in zip(prefs_a, perm):
            matching[a], matching[b] = b, a
        yield matching


# -------------------------------
# Blocking pairs
# -------------------------------

def test_blocking_pair_found(classic_2x2):
    assert find_blocking_pairs(UNSTABLE_2X2, *classic_2x2) == [('A1', 'B1')]


def test_empty_matching_blocks_every_combination(classic_2x2):
    pairs = find_blocking_pairs({}, *classic_2x2)
    assert pairs == [('A1', 'B1'), ('A1', 'B2'), ('A2', 'B1'), ('A2', 'B2')]


def test_unmatched_participant_blocks_with_anyone_who_wants_them(classic_2x2):
    # A2 and B2 are unmatched; B1 keeps its first choice
    matching = {'A1': 'B1', 'B1': 'A1'}
    assert find_blocking_pairs(matching, *classic_2x2) == [('A2', 'B2')]


def test_blocking_pairs_bounded_for_perfect_matchings():
    participants = generate_participants(3)
    for seed in range(5):
        prefs = generate_random_preferences(participants['group_a'], participants['group_b'], seed=seed)
        for matching in perfect_matchings(prefs['prefs_a'], prefs['prefs_b']):
            pairs = find_blocking_pairs(matching, prefs['prefs_a'], prefs['prefs_b'])
            assert len(pairs) <= 3 * 3 - 3
            metrics = compute_metrics(matching, prefs['prefs_a'], prefs['prefs_b'], pairs)
            assert 0 < metrics['stability_score'] <= 1


# -------------------------------
# Metrics
# -------------------------------

def test_single_pair_metrics(single_pair):
    matching = run_gale_shapley(*single_pair)['matching']
    metrics = compute_metrics(matching, *single_pair, [])
    assert metrics['stability_score'] == 1.0
    assert metrics['avg_happiness'] == 1.0
    assert metrics['a_happiness_scores'] == {'A1': 1}


def test_classic_2x2_metrics(classic_2x2):
    matching = run_gale_shapley(*classic_2x2)['matching']
    metrics = compute_metrics(matching, *classic_2x2, [])

    assert metrics['stability_score'] == 1.0
    assert metrics['a_happiness_scores'] == {'A1': 1, 'A2': 2}
    assert metrics['b_happiness_scores'] == {'B1': 1, 'B2': 1}
    assert metrics['avg_a_happiness'] == pytest.approx(1.5)
    assert metrics['avg_b_happiness'] == pytest.approx(1.0)
    assert metrics['avg_a_satisfaction'] == pytest.approx(0.75)
    assert metrics['avg_b_satisfaction'] == pytest.approx(1.0)

    # "avg_happiness" is the overall satisfaction
    assert metrics['avg_happiness'] == pytest.approx(0.875)
    assert metrics['proposer_satisfaction'] == pytest.approx(0.75)
    assert metrics['receiver_satisfaction'] == pytest.approx(1.0)
    assert metrics['num_unmatched'] == 0


def test_proposer_side_b_swaps_roles(classic_2x2):
    matching = run_gale_shapley(*classic_2x2)['matching']
    metrics = compute_metrics(matching, *classic_2x2, [], proposer_side='B')
    assert metrics['proposer_satisfaction'] == pytest.approx(1.0)
    assert metrics['receiver_satisfaction'] == pytest.approx(0.75)


def test_invalid_proposer_side(classic_2x2):
    with pytest.raises(ValueError):
        compute_metrics({}, *classic_2x2, [], proposer_side='C')


def test_unmatched_happiness_is_worst(classic_2x2):
    matching = {'A1': 'B1', 'B1': 'A1'}
    pairs = find_blocking_pairs(matching, *classic_2x2)
    metrics = compute_metrics(matching, *classic_2x2, pairs)
    assert metrics['a_happiness_scores']['A2'] == 2
    assert metrics['b_happiness_scores']['B2'] == 2
    assert metrics['num_unmatched'] == 2


def test_stability_score_one_iff_no_blocking_pairs(classic_2x2):
    stable = run_gale_shapley(*classic_2x2)['matching']
    assert compute_metrics(stable, *classic_2x2, find_blocking_pairs(stable, *classic_2x2))['stability_score'] == 1.0

    pairs = find_blocking_pairs(UNSTABLE_2X2, *classic_2x2)
    assert compute_metrics(UNSTABLE_2X2, *classic_2x2, pairs)['stability_score'] == pytest.approx(0.75)


def test_stability_score_decreases_with_blocking_pairs(classic_2x2):
    candidates = [('A1', 'B1'), ('A1', 'B2'), ('A2', 'B1'), ('A2', 'B2')]
    scores = [compute_metrics({}, *classic_2x2, candidates[:k])['stability_score'] for k in range(5)]
    assert scores == sorted(scores, reverse=True)
    assert len(set(scores)) == 5
    assert scores[-1] == 0


# -------------------------------
# Analysis
# -------------------------------

def test_analysis_of_unstable_matching(classic_2x2):
    pairs = find_blocking_pairs(UNSTABLE_2X2, *classic_2x2)
    metrics = compute_metrics(UNSTABLE_2X2, *classic_2x2, pairs)
    analysis = analyze_matching(UNSTABLE_2X2, *classic_2x2, pairs, metrics)

    assert analysis['blocking_pair_counts'] == {'A1': 1, 'A2': 0, 'B1': 1, 'B2': 0}
    assert analysis['has_blocking_pairs']
    assert not analysis['is_stable']
    assert analysis['proposer_advantage'] == pytest.approx(
        metrics['proposer_satisfaction'] - metrics['receiver_satisfaction'])
    assert analysis['summary'].startswith('This matching has 1 blocking pair.')


def test_unhappy_worst_quartile(stable_with_unhappy_4x4):
    prefs_a, prefs_b = stable_with_unhappy_4x4
    matching = run_gale_shapley(prefs_a, prefs_b)['matching']
    pairs = find_blocking_pairs(matching, prefs_a, prefs_b)
    metrics = compute_metrics(matching, prefs_a, prefs_b, pairs)
    analysis = analyze_matching(matching, prefs_a, prefs_b, pairs, metrics)

    # ceil(0.75 * 4) = 3, only B1 holds its partner at rank 3
    assert analysis['unhappy_a'] == []
    assert analysis['unhappy_b'] == ['B1']
    assert analysis['is_stable']
    assert not analysis['has_blocking_pairs']
    assert analysis['proposer_advantage'] > 0


def test_explicit_unhappy_threshold(stable_with_unhappy_4x4):
    prefs_a, prefs_b = stable_with_unhappy_4x4
    matching = run_gale_shapley(prefs_a, prefs_b)['matching']
    metrics = compute_metrics(matching, prefs_a, prefs_b, [])

    assert analyze_matching(matching, prefs_a, prefs_b, [], metrics, threshold=4)['unhappy_b'] == []
    assert analyze_matching(matching, prefs_a, prefs_b, [], metrics, quantile=0.1, threshold=3)['unhappy_b'] == ['B1']


def test_unmatched_participants_are_unhappy(classic_2x2):
    matching = {'A1': 'B1', 'B1': 'A1'}
    pairs = find_blocking_pairs(matching, *classic_2x2)
    metrics = compute_metrics(matching, *classic_2x2, pairs)
    analysis = analyze_matching(matching, *classic_2x2, pairs, metrics)
    assert analysis['unhappy_a'] == ['A2']
    assert analysis['unhappy_b'] == ['B2']


def test_describe_matching_bands():
    analysis = {'is_stable': True, 'proposer_advantage': 0.2, 'unhappy_a': ['A1'], 'unhappy_b': ['B2']}
    text = describe_matching(analysis, {'stability_score': 1.0}, 0)
    assert 'stable with no blocking pairs' in text
    assert 'proposers got significantly better outcomes' in text
    assert '2 participants are quite unhappy' in text
    assert text.endswith('high-quality matching.')

    analysis = {'is_stable': False, 'proposer_advantage': -0.2, 'unhappy_a': [], 'unhappy_b': []}
    text = describe_matching(analysis, {'stability_score': 0.8}, 3)
    assert text.startswith('This matching has 3 blocking pairs.')
    assert 'receivers got better outcomes' in text
    assert 'unhappy' not in text
    assert text.endswith('some preference adjustments.')

    analysis = {'is_stable': False, 'proposer_advantage': 0.0, 'unhappy_a': ['A1'], 'unhappy_b': []}
    text = describe_matching(analysis, {'stability_score': 0.5}, 8)
    assert 'fairly balanced' in text
    assert '1 participant is quite unhappy' in text
    assert text.endswith('should be addressed.')

"""
This module proposes small edits to the preference lists that are likely to improve a matching, and applies them.

A suggestion is a single adjacent swap in one participant's list:

    {'target': 'A2', 'action': 'swap', 'indices': (1, 2), 'rationale': '...', 'estimated': True,
     'expected_delta': {'stability': 0.04, 'avg_happiness': -0.1}}

The expected delta is a rough heuristic. The happiness part follows from how far the participant's current partner
moves in the list, while the stability part is a bounded random guess. `simulate_suggestion` computes the exact
delta by re-solving the edited instance when a real number is needed.
"""
import numpy as np

# smp modules
import smp.data.preferences
import smp.solutions.algorithms
import smp.solutions.handling


def generate_suggestions(matching, prefs_a, prefs_b, blocking_pairs, analysis, max_suggestions=3, max_problematic=3,
                         max_unhappy_targets=2, swap_window=2, top_positions=3, happiness_step=0.1,
                         stability_noise=0.1, seed=None, rng=None):
    """
    Proposes up to `max_suggestions` adjacent swaps.

    Parameters:
        matching (dict): The current (symmetric) matching.
        prefs_a, prefs_b (dict): Preference tables of both groups.
        blocking_pairs (list): Output of `find_blocking_pairs`.
        analysis (dict): Output of `analyze_matching`.
        max_suggestions (int): Maximum number of suggestions returned. Default is 3.
        max_problematic (int): Number of participants (most involved in blocking pairs) to consider. Default is 3.
        max_unhappy_targets (int): Number of unhappy participants to consider when the matching is stable.
        swap_window (int): Swaps further than this from the current partner's rank are skipped. Default is 2.
        top_positions (int): List positions explored for unhappy participants. Default is 3.
        happiness_step (float): Happiness change per position the partner moves. Default is 0.1.
        stability_noise (float): Bound of the random stability estimate. Default is 0.1.
        seed (int): Seed of the numpy generator used for the stability estimate.
        rng (numpy.random.Generator): Generator to draw from instead of seeding a new one.

    Returns:
        list: The suggestion dictionaries, in priority order.

    The participants most involved in blocking pairs come first (descending count, ties in table order). For each
    of them, every swap (i, i + 1) within `swap_window` of the current partner's rank is proposed. When there are no
    blocking pairs but some participants are unhappy, the first `max_unhappy_targets` of them get swaps among their
    top `top_positions` list positions instead.
    """
    if rng is None:
        rng = np.random.default_rng(seed)

    rank_a = smp.data.preferences.build_rank_index(prefs_a)
    rank_b = smp.data.preferences.build_rank_index(prefs_b)
    suggestions = []

    def add(participant, indices, rationale):
        if participant in prefs_a:
            prefs, rank_index = prefs_a, rank_a
        else:
            prefs, rank_index = prefs_b, rank_b
        suggestions.append({'target': participant, 'action': 'swap', 'indices': indices, 'rationale': rationale,
                            'estimated': True,
                            'expected_delta': estimate_impact(participant, indices, matching, prefs, rng,
                                                              rank_index=rank_index, happiness_step=happiness_step,
                                                              stability_noise=stability_noise)})
        return len(suggestions) >= max_suggestions

    # Participants most involved in blocking pairs
    counts = [(p, c) for p, c in analysis['blocking_pair_counts'].items() if c > 0]
    most_problematic = [p for p, _ in sorted(counts, key=lambda x: -x[1])[:max_problematic]]

    for participant in most_problematic:
        prefs = prefs_a.get(participant, prefs_b.get(participant))
        if prefs is None or len(prefs) < 2:
            continue

        # Keep to swaps near the current partner
        partner = matching.get(participant)
        current_rank = -1 if partner is None else list(prefs).index(partner)
        for i in range(len(prefs) - 1):
            if current_rank != -1 and abs(i - current_rank) > swap_window:
                continue
            if add(participant, (i, i + 1), 'May reduce blocking pairs involving ' + participant):
                return suggestions

    # Stable but some participants are unhappy
    if len(blocking_pairs) == 0 and (analysis['unhappy_a'] or analysis['unhappy_b']):
        very_unhappy = (list(analysis['unhappy_a']) + list(analysis['unhappy_b']))[:max_unhappy_targets]
        for participant in very_unhappy:
            prefs = prefs_a.get(participant, prefs_b.get(participant))
            if prefs is None or len(prefs) < 2:
                continue
            for i in range(1, min(top_positions, len(prefs))):
                if add(participant, (i - 1, i), 'May improve happiness for ' + participant):
                    return suggestions

    return suggestions


def estimate_impact(target, indices, matching, prefs, rng, rank_index=None, happiness_step=0.1,
                    stability_noise=0.1):
    """
    Estimates the effect of swapping two positions of `target`'s list (`prefs` is the target's own group table).

    If the current partner sits on one of the swapped positions, the partner moves by `rank_delta` positions and
    the happiness estimate is `-happiness_step * rank_delta`. Any nonzero move also gets a random stability
    estimate in [-stability_noise, stability_noise]. This is a guess, not a simulation.
    """
    partner = matching.get(target)
    if partner is None or target not in prefs:
        return {'stability': 0.0, 'avg_happiness': 0.0}

    current_rank = smp.data.preferences.get_rank(target, partner, prefs, rank_index)
    i, j = indices

    # Rank change of the current partner
    rank_delta = 0
    if current_rank == i:
        rank_delta = j - i
    elif current_rank == j:
        rank_delta = i - j

    happiness_delta = -rank_delta * happiness_step
    stability_delta = rng.uniform(-stability_noise, stability_noise) if rank_delta != 0 else 0.0

    return {'stability': round(float(stability_delta), 2), 'avg_happiness': round(float(happiness_delta), 2)}


def apply_suggestion(suggestion, prefs_a, prefs_b):
    """
    Applies a swap suggestion and returns new tables as `{'prefs_a': ..., 'prefs_b': ...}`. The input tables are
    never modified.
    """
    if suggestion.get('action') != 'swap':
        raise ValueError("Error. Unsupported suggestion action '" + str(suggestion.get('action')) + "'.")

    indices = suggestion.get('indices')
    if indices is None or len(indices) != 2:
        raise ValueError("Error. A swap needs exactly two indices, got " + str(indices) + ".")

    # Deep copies of both tables
    new_prefs_a = smp.data.preferences.copy_preferences(prefs_a)
    new_prefs_b = smp.data.preferences.copy_preferences(prefs_b)

    target = suggestion.get('target')
    group = smp.data.preferences.group_of(target, new_prefs_a, new_prefs_b)
    if group == 'A':
        prefs = new_prefs_a[target]
    elif group == 'B':
        prefs = new_prefs_b[target]
    else:
        raise ValueError("Error. Participant '" + str(target) + "' is in neither preference table.")

    i, j = indices
    if not (0 <= i < len(prefs) and 0 <= j < len(prefs)):
        raise ValueError("Error. Indices " + str(indices) + " are out of range for '" + str(target) + "'.")

    prefs[i], prefs[j] = prefs[j], prefs[i]
    return {'prefs_a': new_prefs_a, 'prefs_b': new_prefs_b}


def simulate_suggestion(suggestion, prefs_a, prefs_b, proposer_side='A'):
    """
    Exact counterpart of `estimate_impact`: solves the instance before and after the edit and returns the change in
    stability score and overall satisfaction (`avg_happiness`), rounded to 2 decimals.
    """

    def evaluate(pa, pb):
        matching = smp.solutions.algorithms.run_gale_shapley(pa, pb)['matching']
        blocking_pairs = smp.solutions.handling.find_blocking_pairs(matching, pa, pb)
        return smp.solutions.handling.compute_metrics(matching, pa, pb, blocking_pairs, proposer_side)

    before = evaluate(prefs_a, prefs_b)
    edited = apply_suggestion(suggestion, prefs_a, prefs_b)
    after = evaluate(edited['prefs_a'], edited['prefs_b'])

    return {'stability': round(after['stability_score'] - before['stability_score'], 2),
            'avg_happiness': round(after['avg_happiness'] - before['avg_happiness'], 2)}


def describe_suggestion(suggestion):
    """
    One-line description of a suggestion, with 1-based list positions
    """
    i, j = suggestion['indices']
    delta = suggestion['expected_delta']
    text = 'Swap items ' + str(i + 1) + ' and ' + str(j + 1) + ' in ' + suggestion['target'] + "'s list"
    text += ' (expected: stability ' + '{:+.2f}'.format(delta['stability']) + \
            ', happiness ' + '{:+.2f}'.format(delta['avg_happiness']) + ')'
    return text

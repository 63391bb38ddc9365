"""
This module evaluates a matching once the solver has produced it: it enumerates the blocking pairs, computes the
scalar quality metrics, and derives the qualitative analysis (unhappy participants, proposer advantage, blocking
pair involvement) that the suggestion engine consumes.

All functions are pure. They read the matching and both preference tables and return new dictionaries.
"""
import numpy as np

# smp modules
import smp.data.preferences
import smp.data.support


def find_blocking_pairs(matching, prefs_a, prefs_b):
    """
    Calculate blocking pairs in a given matching.

    Parameters:
    - matching (dict): The current (symmetric) matching.
    - prefs_a (dict): Preference table of group A.
    - prefs_b (dict): Preference table of group B.

    Returns:
    - blocking_pairs (list): A list of `(a, b)` tuples, in group A x group B iteration order.

    Description:
    A pair (a, b) that is not matched together is blocking if a is unmatched or strictly prefers b over its current
    partner, and b is unmatched or strictly prefers a over its current partner. Every combination is visited once,
    so no deduplication is needed.

    Reference:
    - Gale, D., & Shapley, L. S. (1962). College Admissions and the Stability of
      Marriage. American Mathematical Monthly, 69(1), 9-15.
    """

    # Reverse indices for O(1) rank lookups
    rank_a = smp.data.preferences.build_rank_index(prefs_a)
    rank_b = smp.data.preferences.build_rank_index(prefs_b)

    blocking_pairs = []
    for a in prefs_a:
        a_partner = matching.get(a)
        for b in prefs_b:

            # Skip the current pairs
            if a_partner == b:
                continue

            b_partner = matching.get(b)
            a_prefers = a_partner is None or smp.data.preferences.prefers(a, b, a_partner, prefs_a, rank_a)
            b_prefers = b_partner is None or smp.data.preferences.prefers(b, a, b_partner, prefs_b, rank_b)
            if a_prefers and b_prefers:
                blocking_pairs.append((a, b))

    return blocking_pairs


def happiness_scores(matching, prefs, n):
    """
    1-based rank of each participant's partner (n, the worst possible value, if unmatched)
    """
    scores = {}
    for person in prefs:
        partner = matching.get(person)
        if partner is None:
            scores[person] = n
        else:
            scores[person] = smp.data.preferences.get_rank(person, partner, prefs) + 1
    return scores


def compute_metrics(matching, prefs_a, prefs_b, blocking_pairs, proposer_side='A'):
    """
    Compute the quality metrics of a matching.

    Parameters
    ----------
    matching : dict
        The current (symmetric) matching.
    prefs_a, prefs_b : dict
        Preference tables of both groups.
    blocking_pairs : list
        Output of `find_blocking_pairs`.
    proposer_side : str
        Which group acted as proposer ("A" or "B").

    Returns
    -------
    dict
        - `stability_score`: 1 - |blocking pairs| / n^2
        - `a_happiness_scores`, `b_happiness_scores`: 1-based rank of each participant's partner
        - `avg_a_happiness`, `avg_b_happiness`: mean happiness per group (lower is better)
        - `avg_a_satisfaction`, `avg_b_satisfaction`: (n + 1 - average happiness) / n (higher is better)
        - `avg_happiness`: overall *satisfaction* (mean of both groups); the name is kept for compatibility
        - `proposer_satisfaction`, `receiver_satisfaction`
        - `num_blocking_pairs`, `num_unmatched`
    """
    if proposer_side not in ['A', 'B']:
        raise ValueError("Error. Proposer side must be 'A' or 'B', not '" + str(proposer_side) + "'.")

    n = len(prefs_a)

    # Stability Score: 1 - (blocking pairs / total possible pairs)
    stability_score = 1 - len(blocking_pairs) / (n * n)

    # Happiness (rank of partner, lower is better)
    a_happiness = happiness_scores(matching, prefs_a, n)
    b_happiness = happiness_scores(matching, prefs_b, n)
    avg_a_happiness = float(np.mean(list(a_happiness.values())))
    avg_b_happiness = float(np.mean(list(b_happiness.values())))

    # Convert to satisfaction (higher is better)
    avg_a_satisfaction = (n + 1 - avg_a_happiness) / n
    avg_b_satisfaction = (n + 1 - avg_b_happiness) / n
    avg_satisfaction = (avg_a_satisfaction + avg_b_satisfaction) / 2

    if proposer_side == 'A':
        proposer_satisfaction, receiver_satisfaction = avg_a_satisfaction, avg_b_satisfaction
    else:
        proposer_satisfaction, receiver_satisfaction = avg_b_satisfaction, avg_a_satisfaction

    num_unmatched = len([x for x in list(prefs_a) + list(prefs_b) if matching.get(x) is None])

    return {'stability_score': stability_score, 'avg_happiness': avg_satisfaction,
            'avg_a_happiness': avg_a_happiness, 'avg_b_happiness': avg_b_happiness,
            'avg_a_satisfaction': avg_a_satisfaction, 'avg_b_satisfaction': avg_b_satisfaction,
            'proposer_satisfaction': proposer_satisfaction, 'receiver_satisfaction': receiver_satisfaction,
            'a_happiness_scores': a_happiness, 'b_happiness_scores': b_happiness,
            'num_blocking_pairs': len(blocking_pairs), 'num_unmatched': num_unmatched}


def analyze_matching(matching, prefs_a, prefs_b, blocking_pairs, metrics, quantile=0.75, advantage_threshold=0.15,
                     threshold=None):
    """
    Derives the qualitative insights of a matching.

    A participant is "unhappy" when the 0-based rank of its partner is at least `threshold` (ceil(quantile * n)
    unless given), or when it has no partner. The proposer advantage is the proposer satisfaction minus the
    receiver satisfaction (positive means the proposers fared better). Every participant gets a count of the
    blocking pairs it appears in.
    """
    n = len(prefs_a)
    if threshold is None:
        threshold = smp.data.support.unhappy_threshold(n, quantile)

    def unhappy(prefs):
        found = []
        for person in prefs:
            partner = matching.get(person)
            if partner is None or smp.data.preferences.get_rank(person, partner, prefs) >= threshold:
                found.append(person)
        return found

    # Count blocking pairs involving each participant
    blocking_pair_counts = {x: 0 for x in list(prefs_a) + list(prefs_b)}
    for a, b in blocking_pairs:
        blocking_pair_counts[a] += 1
        blocking_pair_counts[b] += 1

    analysis = {'unhappy_a': unhappy(prefs_a), 'unhappy_b': unhappy(prefs_b),
                'proposer_advantage': metrics['proposer_satisfaction'] - metrics['receiver_satisfaction'],
                'blocking_pair_counts': blocking_pair_counts,
                'has_blocking_pairs': len(blocking_pairs) > 0,
                'is_stable': len(blocking_pairs) == 0}
    analysis['summary'] = describe_matching(analysis, metrics, len(blocking_pairs), advantage_threshold)
    return analysis


def describe_matching(analysis, metrics, num_blocking_pairs, advantage_threshold=0.15):
    """
    Builds a short plain-text explanation of a matching from its analysis and metrics
    """

    if analysis['is_stable']:
        text = 'This matching is stable with no blocking pairs. '
    else:
        text = 'This matching has ' + str(num_blocking_pairs) + ' blocking pair' + \
               ('s' if num_blocking_pairs > 1 else '') + '. '

    # Proposer advantage
    if analysis['proposer_advantage'] > advantage_threshold:
        text += 'The proposers got significantly better outcomes than the receivers, which is typical of ' \
                'Gale-Shapley since proposers have the advantage. '
    elif analysis['proposer_advantage'] < -advantage_threshold:
        text += 'The receivers got better outcomes than the proposers in this case. '
    else:
        text += 'Both groups achieved fairly balanced satisfaction levels. '

    # Unhappy participants
    total_unhappy = len(analysis['unhappy_a']) + len(analysis['unhappy_b'])
    if total_unhappy > 0:
        text += str(total_unhappy) + (' participants are' if total_unhappy > 1 else ' participant is') + \
                ' quite unhappy with their assignment. '

    # Overall assessment
    if metrics['stability_score'] > 0.9:
        text += 'Overall, this is a high-quality matching.'
    elif metrics['stability_score'] > 0.7:
        text += 'This matching could be improved with some preference adjustments.'
    else:
        text += 'This matching has significant stability issues that should be addressed.'

    return text

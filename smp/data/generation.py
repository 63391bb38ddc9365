"""
`smp.data.generation`
=====================

Provides the random instance generation functions for the SMP framework. An instance is made of two equal-size
groups of participants (`A1..An` and `B1..Bn`) and one strict preference list per participant over the opposite
group.

Main Capabilities
-----------------
- **Participant generation** (`generate_participants`):
  Builds the identifiers of both groups using the fixed naming scheme.

- **Preference generation** (`generate_random_preferences`):
  Produces uniformly shuffled preference lists for every participant of both groups.

Dependencies
------------
- **numpy**: for the random permutations (`numpy.random.Generator.permutation`).
"""
import numpy as np

# smp modules
import smp.data.preferences


def generate_participants(n):
    """
    Generates the identifiers of both groups.

    Parameters:
        n (int): Number of participants per group

    Returns:
        dict: `{'group_a': ['A1', ..., 'An'], 'group_b': ['B1', ..., 'Bn']}`
    """
    if n < 1:
        raise smp.data.preferences.EmptyInput("Error. Cannot generate " + str(n) + " participants per group.")

    group_a = ['A' + str(i + 1) for i in range(n)]
    group_b = ['B' + str(i + 1) for i in range(n)]
    return {'group_a': group_a, 'group_b': group_b}


def generate_random_preferences(group_a, group_b, seed=None, rng=None):
    """
    This procedure gives every participant a uniformly random strict ranking of the opposite group.
    :param group_a: list of group A identifiers
    :param group_b: list of group B identifiers
    :param seed: seed for numpy's random generator (ignored if rng is given)
    :param rng: an existing numpy Generator to draw from
    :return: dictionary with the 'prefs_a' and 'prefs_b' preference tables
    """
    if rng is None:
        rng = np.random.default_rng(seed)

    # Each A member ranks all B members
    prefs_a = {a: [group_b[k] for k in rng.permutation(len(group_b))] for a in group_a}

    # Each B member ranks all A members
    prefs_b = {b: [group_a[k] for k in rng.permutation(len(group_a))] for b in group_b}

    return {'prefs_a': prefs_a, 'prefs_b': prefs_b}

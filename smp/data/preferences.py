"""
This module contains the functions that represent and query the strict preference rankings of both groups in the
Stable Marriage Problem (SMP).

These utilities operate on the two preference tables (`prefs_a`, `prefs_b`) to:
- Validate that every list is a strict permutation of the opposite group
- Build reverse rank indices (participant -> 0-based rank) for O(1) lookups
- Compare two candidate partners from one participant's point of view

Every other module in `smp` relies on these lookups, so they are kept free of side effects. A preference table is
never modified here.
"""


# ____________________________________________________ERRORS____________________________________________________________
class SMPError(ValueError):
    """
    Base class for the errors raised when the input to the Stable Marriage Problem is invalid.
    """


class MalformedPreferences(SMPError):
    """
    A preference list is missing entries, contains duplicates, or references unknown identifiers.
    """


class EmptyInput(SMPError):
    """
    There are no participants to match.
    """


# ___________________________________________________VALIDATION_________________________________________________________
def validate_preferences(prefs_a, prefs_b):
    """
    Checks that both preference tables describe a well-formed SMP instance.

    Parameters
    ----------
    prefs_a : dict
        Preference table of group A (participant -> ordered list of group B participants).
    prefs_b : dict
        Preference table of group B (participant -> ordered list of group A participants).

    Raises
    ------
    EmptyInput
        If either table has no participants.
    MalformedPreferences
        If the groups differ in size, share identifiers, or any list is not a strict permutation of the
        opposite group (missing entries, duplicates, unknown identifiers).
    """

    if not prefs_a or not prefs_b:
        raise EmptyInput("Error. Both preference tables must contain at least one participant.")

    if len(prefs_a) != len(prefs_b):
        raise MalformedPreferences(
            "Error. Group sizes differ (" + str(len(prefs_a)) + " in group A, " + str(len(prefs_b)) +
            " in group B). Both groups must have the same number of participants.")

    overlap = set(prefs_a) & set(prefs_b)
    if overlap:
        raise MalformedPreferences("Error. Identifiers " + str(sorted(overlap)) + " appear in both groups.")

    for prefs, opposite in [(prefs_a, prefs_b), (prefs_b, prefs_a)]:
        for participant, ranking in prefs.items():
            _validate_list(participant, ranking, opposite)


def _validate_list(participant, ranking, opposite):
    ranking = list(ranking)
    unknown = [x for x in ranking if x not in opposite]
    if unknown:
        raise MalformedPreferences(
            "Error. Preference list of '" + str(participant) + "' references unknown participants " + str(unknown) + ".")

    seen, duplicates = set(), []
    for x in ranking:
        if x in seen:
            duplicates.append(x)
        seen.add(x)
    if duplicates:
        raise MalformedPreferences(
            "Error. Preference list of '" + str(participant) + "' contains duplicates " + str(duplicates) + ".")

    missing = [x for x in opposite if x not in seen]
    if missing:
        raise MalformedPreferences(
            "Error. Preference list of '" + str(participant) + "' is missing " + str(missing) + ".")


# _________________________________________________RANK LOOKUPS_________________________________________________________
def build_rank_index(prefs):
    """
    Builds the reverse index of a preference table.

    Parameters
    ----------
    prefs : dict
        Preference table (participant -> ordered list of opposite-group participants).

    Returns
    -------
    dict
        Nested dictionary `rank[person][partner]` holding the 0-based position of `partner` in `person`'s list.
    """
    return {person: {partner: r for r, partner in enumerate(ranking)} for person, ranking in prefs.items()}


def get_rank(person, partner, prefs, rank_index=None):
    """
    Returns the 0-based rank of `partner` in `person`'s list, or -1 if either is unknown. A prebuilt
    `rank_index` (see `build_rank_index`) turns this into an O(1) lookup.
    """
    if rank_index is not None:
        return rank_index.get(person, {}).get(partner, -1)

    ranking = prefs.get(person)
    if ranking is None or partner not in ranking:
        return -1
    return list(ranking).index(partner)


def prefers(person, new_partner, current_partner, prefs, rank_index=None):
    """
    True if `person` strictly prefers `new_partner` over `current_partner`. Unknown participants never win a
    comparison.
    """
    rank_new = get_rank(person, new_partner, prefs, rank_index)
    rank_current = get_rank(person, current_partner, prefs, rank_index)
    return rank_new != -1 and rank_current != -1 and rank_new < rank_current


def group_of(participant, prefs_a, prefs_b):
    """
    Returns "A" or "B" depending on which table the participant belongs to (None if neither).
    """
    if participant in prefs_a:
        return "A"
    if participant in prefs_b:
        return "B"
    return None


def copy_preferences(prefs):
    """
    Returns a deep copy of a preference table (new dict, new lists).
    """
    return {person: list(ranking) for person, ranking in prefs.items()}

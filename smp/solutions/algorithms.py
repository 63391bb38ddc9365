import collections

# smp modules
import smp.data.preferences


# Matching algorithms
def run_gale_shapley(prefs_a, prefs_b, collect_iterations=False, printing=False):
    """
    Matches the two groups using the proposer-optimal Gale-Shapley (deferred acceptance) algorithm with group A
    proposing.

    Parameters:
        prefs_a (dict): Preference table of the proposers (group A).
        prefs_b (dict): Preference table of the receivers (group B).
        collect_iterations (bool): Whether to record every offer made during the run. Default is False.
        printing (bool): Whether to print every offer as it is made. Default is False.

    Returns:
        dict: The solution dictionary containing the symmetric 'matching', the 'proposal_counts' (number of offers
        each proposer made), the 'unmatched' proposers that exhausted their lists, and the 'num_offers' made.

    Both tables are validated first, so malformed input raises `MalformedPreferences` (or `EmptyInput`) instead of
    producing an inconsistent matching.

    Unmatched proposers wait in a FIFO queue built in group A table order. A proposer that gets rejected keeps
    offering (it stays at the front of the queue) while a proposer that gets displaced by a better offer goes to the
    back of the queue. Each proposer has an offer cursor into its own list which only ever advances, so the loop
    ends after at most n * n offers. The proposer-optimal outcome does not depend on this order.

    Example usage:
        solution = run_gale_shapley(prefs_a, prefs_b)
    """

    # Fail fast on malformed input
    smp.data.preferences.validate_preferences(prefs_a, prefs_b)

    if printing:
        print("Solving the Stable Marriage Problem with Gale-Shapley (group A proposing)...")

    # Receivers compare offers through their reverse index
    rank_b = smp.data.preferences.build_rank_index(prefs_b)
    n = len(prefs_b)

    # Initialize solution dictionary
    solution = {'method': 'GS', 'proposer_side': 'A'}
    if collect_iterations:
        solution['iterations'] = []

    matching = {}  # Will hold both the A->B and B->A directions
    proposal_counts = {a: 0 for a in prefs_a}  # Offer cursor of each proposer
    free_a = collections.deque(prefs_a.keys())
    exhausted = []  # Proposers that have been rejected by every receiver

    while free_a:
        a = free_a.popleft()

        # This proposer has offered to everyone and stays unmatched (unreachable with complete, validated lists)
        if proposal_counts[a] >= n:
            exhausted.append(a)
            continue

        # Offer to the next receiver on the list
        b = prefs_a[a][proposal_counts[a]]
        proposal_counts[a] += 1
        current = matching.get(b)
        displaced = None

        # The receiver is free, so the pair is matched
        if current is None:
            accepted = True

        # The receiver trades up and the previous partner is free again
        elif smp.data.preferences.prefers(b, a, current, prefs_b, rank_b):
            accepted = True
            displaced = current
            del matching[displaced]
            free_a.append(displaced)

        # The receiver keeps the current partner
        else:
            accepted = False
            free_a.appendleft(a)

        if accepted:
            matching[a] = b
            matching[b] = a

        # Solution iteration components
        if collect_iterations:
            solution['iterations'].append({'proposer': a, 'receiver': b, 'accepted': accepted,
                                           'displaced': displaced})
        if printing:
            status = 'accepted' if accepted else 'rejected'
            if displaced is not None:
                status += ' (' + displaced + ' is free again)'
            print('Offer', sum(proposal_counts.values()), ':', a, '->', b, status)

    solution['matching'] = matching
    solution['proposal_counts'] = proposal_counts
    solution['unmatched'] = exhausted
    solution['num_offers'] = sum(proposal_counts.values())

    if printing:
        print("Matched", len(matching) // 2, "pairs using", solution['num_offers'], "offers.")

    return solution


def compare_solutions(matching_1, matching_2):
    """
    Returns the proportion of participants that have the same partner (or lack of one) in both matchings.
    """
    participants = set(matching_1) | set(matching_2)
    if not participants:
        return 1
    same = sum(1 for x in participants if matching_1.get(x) == matching_2.get(x))
    return same / len(participants)


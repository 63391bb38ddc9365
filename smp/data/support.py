import math


def initialize_instance_functional_parameters(N):
    """
    Initializes the various instance parameters for the StableMarriageProblem object.

    Parameters:
        N (int): The number of participants in each group.

    Returns:
        dict: A dictionary containing the initialized instance parameters.

    This function initializes the hyperparameters and toggles for the StableMarriageProblem object. It sets default
    values for the parameters that control the solver output, the analysis thresholds, and the suggestion heuristics.

    Note: The analyst can modify the default parameter values by specifying new values in this initialization
    function or by passing them as arguments when calling the StableMarriageProblem object methods.
    """

    mdl_p = {

        # Instance bounds (number of participants per group)
        'min_participants': 3, 'max_participants': 10,

        # Matching Algorithm Parameters
        'ma_printing': False, 'collect_solution_iterations': True,

        # Analysis Parameters
        'unhappy_quantile': 0.75, 'advantage_threshold': 0.15,

        # Suggestion Parameters
        'max_suggestions': 3, 'max_problematic': 3, 'max_unhappy_targets': 2, 'unhappy_top_positions': 3,
        'swap_window': 2, 'happiness_step': 0.1, 'stability_noise': 0.1, 'exact_impact': False,

        # Random generation (None draws fresh entropy)
        'seed': None,

        # Exporting
        'export_folder': 'instances/', 'add_to_dict': True,
    }

    # The unhappy threshold is only meaningful relative to the group size
    mdl_p['unhappy_threshold'] = unhappy_threshold(N, mdl_p['unhappy_quantile'])

    return mdl_p


def unhappy_threshold(N, quantile=0.75):
    """
    0-based rank at or beyond which a participant's partner falls in the worst quartile of their list
    """
    return int(math.ceil(N * quantile))

# Import libraries
import copy

import numpy as np

# smp modules
import smp.data.generation
import smp.data.preferences
import smp.data.processing
import smp.data.support
import smp.solutions.algorithms
import smp.solutions.handling
import smp.solutions.suggestions


# Main Problem Class
class StableMarriageProblem:
    def __init__(self, n=5, prefs_a=None, prefs_b=None, data_name="Random", p_dict=None, printing=True):
        """
        Represents a Stable Marriage Problem instance together with its current solution.

        Parameters:
            n (int): Number of participants per group to generate. Ignored if preference tables are given.
                     Defaults to 5.
            prefs_a (dict, optional): Preference table of group A (the proposers).
            prefs_b (dict, optional): Preference table of group B (the receivers).
            data_name (str): Name of the instance, used when exporting. Defaults to "Random".
            p_dict (dict, optional): Functional parameters overriding the defaults (see
                                     `smp.data.support.initialize_instance_functional_parameters`).
            printing (bool): Whether to print status updates or not. Defaults to True.

        The instance owns the preference tables. Every solve runs the full pipeline from scratch (solver, blocking
        pairs, metrics, analysis, suggestions), and the only way to change the tables is through the methods of
        this class (`regenerate`, `update_preferences`, `what_if`), between solves.

        Example usage:
            instance = StableMarriageProblem(n=6, p_dict={'seed': 3})
            instance.solve()
        """
        self.printing = printing
        self.data_name = data_name
        self.solution, self.solution_name = None, None  # Dictionary of solution elements (and the name)
        self.solutions = {}  # Dictionary of solutions found for this instance
        self.rng = None

        # Imported tables
        if prefs_a is not None or prefs_b is not None:
            if prefs_a is None or prefs_b is None:
                raise ValueError("Error. Both preference tables must be provided together.")
            smp.data.preferences.validate_preferences(prefs_a, prefs_b)
            self.prefs_a = smp.data.preferences.copy_preferences(prefs_a)
            self.prefs_b = smp.data.preferences.copy_preferences(prefs_b)
            self.group_a, self.group_b = list(self.prefs_a), list(self.prefs_b)
            self.n = len(self.group_a)
            self.reset_functional_parameters(p_dict)

            if self.printing:
                print("Imported '" + self.data_name + "' instance with " + str(self.n) + " participants per group.")

        # Generated tables
        else:
            self.n = n
            self.reset_functional_parameters(p_dict)
            self.check_participant_count(n)
            self.regenerate()

    # Method helper functions
    def reset_functional_parameters(self, p_dict=None):
        """
        Resets the instance functional parameters and updates them with the new values from p_dict.

        If a parameter specified in p_dict does not exist, a warning message is printed and it is ignored.
        Changing the seed restarts the random generator.
        """
        if p_dict is None:
            p_dict = {}

        self.mdl_p = smp.data.support.initialize_instance_functional_parameters(self.n)
        for key in p_dict:
            if key in self.mdl_p:
                self.mdl_p[key] = p_dict[key]
            else:
                print("WARNING. Specified parameter '" + str(key) + "' does not exist.")

        # The threshold follows the (possibly overridden) quantile unless it was given directly
        if 'unhappy_threshold' not in p_dict:
            self.mdl_p['unhappy_threshold'] = smp.data.support.unhappy_threshold(
                self.n, self.mdl_p['unhappy_quantile'])
        self.rng = np.random.default_rng(self.mdl_p['seed'])

    def check_participant_count(self, n):
        if not self.mdl_p['min_participants'] <= n <= self.mdl_p['max_participants']:
            raise ValueError("Error. Number of participants (" + str(n) + ") must be between " +
                             str(self.mdl_p['min_participants']) + " and " + str(self.mdl_p['max_participants']) +
                             ".")

    def clear_solution(self):
        self.solution, self.solution_name = None, None

    # Instance data
    def regenerate(self, printing=None):
        """
        Draws new participants and random preferences for the current group size and discards the solution.
        """
        if printing is None:
            printing = self.printing

        participants = smp.data.generation.generate_participants(self.n)
        self.group_a, self.group_b = participants['group_a'], participants['group_b']
        preferences = smp.data.generation.generate_random_preferences(self.group_a, self.group_b, rng=self.rng)
        self.prefs_a, self.prefs_b = preferences['prefs_a'], preferences['prefs_b']
        self.clear_solution()
        self.solutions = {}

        if printing:
            print("Generated '" + self.data_name + "' instance with " + str(self.n) + " participants per group.")

    def set_participant_count(self, n, printing=None):
        """
        Changes the group size (within the configured bounds) and regenerates the instance. Nothing happens if the
        size does not change.
        """
        self.check_participant_count(n)
        if n == self.n:
            return
        self.n = n
        self.mdl_p['unhappy_threshold'] = smp.data.support.unhappy_threshold(n, self.mdl_p['unhappy_quantile'])
        self.regenerate(printing=printing)

    def update_preferences(self, participant, ranking):
        """
        Replaces one participant's preference list (an external edit between solves). The edited tables are
        validated before they are kept.
        """
        prefs_a = smp.data.preferences.copy_preferences(self.prefs_a)
        prefs_b = smp.data.preferences.copy_preferences(self.prefs_b)
        group = smp.data.preferences.group_of(participant, prefs_a, prefs_b)
        if group == 'A':
            prefs_a[participant] = list(ranking)
        elif group == 'B':
            prefs_b[participant] = list(ranking)
        else:
            raise ValueError("Error. Participant '" + str(participant) + "' is in neither preference table.")

        smp.data.preferences.validate_preferences(prefs_a, prefs_b)
        self.prefs_a, self.prefs_b = prefs_a, prefs_b
        self.clear_solution()

    # Solving
    def solve(self, p_dict=None, printing=None):
        """
        Runs the full pipeline on the current tables and sets the solution attribute.

        Returns:
            dict: The solution dictionary ('matching', 'proposal_counts', 'blocking_pairs', 'metrics', 'analysis',
            'suggestions', ...).
        """
        if printing is None:
            printing = self.printing
        if p_dict:
            self.reset_functional_parameters(p_dict)

        # Shorthand
        mdl_p = self.mdl_p
        prefs_a, prefs_b = self.prefs_a, self.prefs_b

        if not prefs_a or not prefs_b:
            raise smp.data.preferences.EmptyInput("Error. Empty preferences detected, nothing to solve.")

        solution = smp.solutions.algorithms.run_gale_shapley(
            prefs_a, prefs_b, collect_iterations=mdl_p['collect_solution_iterations'], printing=mdl_p['ma_printing'])
        matching = solution['matching']

        solution['blocking_pairs'] = smp.solutions.handling.find_blocking_pairs(matching, prefs_a, prefs_b)
        solution['metrics'] = smp.solutions.handling.compute_metrics(
            matching, prefs_a, prefs_b, solution['blocking_pairs'], solution['proposer_side'])
        solution['analysis'] = smp.solutions.handling.analyze_matching(
            matching, prefs_a, prefs_b, solution['blocking_pairs'], solution['metrics'],
            quantile=mdl_p['unhappy_quantile'], advantage_threshold=mdl_p['advantage_threshold'],
            threshold=mdl_p['unhappy_threshold'])
        solution['suggestions'] = smp.solutions.suggestions.generate_suggestions(
            matching, prefs_a, prefs_b, solution['blocking_pairs'], solution['analysis'],
            max_suggestions=mdl_p['max_suggestions'], max_problematic=mdl_p['max_problematic'],
            max_unhappy_targets=mdl_p['max_unhappy_targets'], swap_window=mdl_p['swap_window'],
            top_positions=mdl_p['unhappy_top_positions'], happiness_step=mdl_p['happiness_step'],
            stability_noise=mdl_p['stability_noise'], rng=self.rng)

        # Exact deltas next to the estimates
        if mdl_p['exact_impact']:
            for suggestion in solution['suggestions']:
                suggestion['exact_delta'] = smp.solutions.suggestions.simulate_suggestion(
                    suggestion, prefs_a, prefs_b, solution['proposer_side'])

        self.solution_handling(solution)

        if printing:
            print(self.solution['analysis']['summary'])

        return self.solution

    def solution_handling(self, solution):
        """
        Sets the solution to the instance and adds it to the solutions dictionary under a unique name ("GS",
        "GS_2", ...), unless an identical matching of the same tables is already there.
        """
        solution['prefs_a'] = smp.data.preferences.copy_preferences(self.prefs_a)
        solution['prefs_b'] = smp.data.preferences.copy_preferences(self.prefs_b)
        self.solution = solution

        # Check if this solution is a new solution
        for s_name in self.solutions:
            other = self.solutions[s_name]
            p_i = smp.solutions.algorithms.compare_solutions(other['matching'], solution['matching'])
            if p_i == 1 and other['prefs_a'] == solution['prefs_a'] and other['prefs_b'] == solution['prefs_b']:
                self.solution_name = s_name
                self.solution['name'] = s_name
                return

        # Determine solution name
        solution_name = solution['method']
        count = 2
        while solution_name in self.solutions:
            solution_name = solution['method'] + '_' + str(count)
            count += 1

        self.solution_name = solution_name
        self.solution['name'] = solution_name
        if self.mdl_p['add_to_dict']:
            self.solutions[solution_name] = copy.deepcopy(self.solution)

    # What-if analysis
    def what_if(self, index=0, printing=None):
        """
        Applies one of the current suggestions (the first by default), keeps the edited tables, and solves again.

        Returns:
            dict: The new solution, or None if there is no suggestion to apply.
        """
        if printing is None:
            printing = self.printing

        if self.solution is None:
            self.solve(printing=False)

        suggestions = self.solution['suggestions']
        if len(suggestions) == 0:
            if printing:
                print("WARNING. No suggestions available.")
            return None
        if not 0 <= index < len(suggestions):
            raise ValueError("Error. Suggestion index " + str(index) + " is out of range (" + str(len(suggestions)) +
                             " suggestions available).")

        suggestion = suggestions[index]
        new_prefs = smp.solutions.suggestions.apply_suggestion(suggestion, self.prefs_a, self.prefs_b)
        self.prefs_a, self.prefs_b = new_prefs['prefs_a'], new_prefs['prefs_b']

        if printing:
            print("Applied suggestion: " + smp.solutions.suggestions.describe_suggestion(suggestion))

        return self.solve(printing=printing)

    # Export
    def export_to_excel(self, filepath=None):
        """
        Exports the current solution to an Excel workbook (see `smp.data.processing`).
        """
        if self.solution is None:
            self.solve(printing=False)
        return smp.data.processing.export_solution_results_excel(self, filepath)

"""
`smp` solves and evaluates instances of the two-sided Stable Marriage Problem (SMP).

Given two equal-size groups where every member strictly ranks all members of the opposite group, the package
produces the proposer-optimal Gale-Shapley matching, verifies its stability by enumerating blocking pairs, scores its
quality, and proposes preference edits likely to improve it.

Subpackages
-----------
- **data**: participant and preference generation, validation and rank lookups, DataFrame/Excel reporting
- **solutions**: the Gale-Shapley solver, blocking pairs/metrics/analysis, and the suggestion engine

The `StableMarriageProblem` class in `smp.main` ties everything together as an explicit session object.
"""
from smp.data.preferences import SMPError, MalformedPreferences, EmptyInput
from smp.data.generation import generate_participants, generate_random_preferences
from smp.solutions.algorithms import run_gale_shapley
from smp.solutions.handling import find_blocking_pairs, compute_metrics, analyze_matching
from smp.solutions.suggestions import generate_suggestions, apply_suggestion
from smp.main import StableMarriageProblem

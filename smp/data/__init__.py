"""
The `data` module holds everything the solver needs to know about the participants:

- **generation**: participant identifiers (`A1..An`, `B1..Bn`) and uniformly random preference tables
- **preferences**: validation errors, reverse rank indices, rank lookups and preference comparison
- **support**: default functional parameters of a `StableMarriageProblem` instance
- **processing**: pandas DataFrames of tables and solutions, and the Excel export
"""

"""
The `solutions` module solves and evaluates matchings. Data flows one way through it:

- **algorithms**: proposer-optimal Gale-Shapley (`run_gale_shapley`)
- **handling**: blocking pairs, quality metrics, and qualitative analysis of a matching
- **suggestions**: candidate adjacent swaps with estimated impact, and the pure operation applying one
"""

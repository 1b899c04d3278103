"""
slippy-find - resolve routing slips from local git commit history.

Walks the first-parent ancestry of a checkout's HEAD, looks the candidate
commits up in the slip store and prints the correlation id of the nearest
matching slip so CI pipelines can recover their own tracking identifier.
"""

__version__ = "1.2.0"

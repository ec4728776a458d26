"""megaverse: rebuilds a remote megaverse from its goal map.

Reads the goal map from the challenge API and creates every astral object
it lists, in small rate-limit friendly batches.
"""

__version__ = "1.0.0"

"""Domain Layer: value objects, entities, ports and errors of the megaverse.

Has no knowledge of HTTP, configuration files or the console.
"""

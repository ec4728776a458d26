"""Core Application Layer: Orchestrates use cases and application logic.

Connects the domain layer with the infrastructure layer through interfaces.
Contains the goal map decoder, the batch scheduler and the command handler.
"""

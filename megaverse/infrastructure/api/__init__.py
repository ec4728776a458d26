"""Adapters for the megaverse challenge HTTP API."""

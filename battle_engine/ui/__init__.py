"""
User interface module for the battle engine.

Provides the console front end that drives a Battle through its public API.
"""

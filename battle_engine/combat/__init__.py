"""
Combat system module for the battle engine.

This module handles damage resolution results, the battle log and the
turn-based battle state machine.
"""

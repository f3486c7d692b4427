"""
User interface module for the Skirmish combat resolver.

This module provides the command-line interface and the rich tables used to
show the state of an encounter.
"""

"""
Job sync module

Runs source adapters, reconciles their output into the jobs table and
cleans up cross-source duplicates.
"""

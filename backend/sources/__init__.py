"""
Job source adapters.

REST aggregators, keyword searches and per-company ATS boards. Every adapter
yields NormalizedJob records; sources.registry maps names to adapters.
"""

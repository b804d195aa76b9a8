"""
Six Cities Backend — Services Package
=======================================

Business and persistence logic, independent of HTTP. Every service receives
the session factory at construction (see sixcities.composition).
"""

"""
Models Package

This package contains the estimator interface, the persistence baseline,
a random forest estimator and evaluation utilities.
"""

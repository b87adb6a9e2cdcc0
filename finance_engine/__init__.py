"""
Household Finance Engine - Source Package

A deterministic, side-effect-free engine that turns a household's raw
transaction and account records into monthly snapshots, forecasts,
risk assessments, end-of-month projections and notification actions.

DESIGN PRINCIPLES:
1. Pure functions only: no I/O, inputs are never mutated
2. Same input, same output (callers re-run the whole pipeline on refresh)
3. Notifications carry message keys + params, never rendered text
4. Degraded data means degraded confidence, never an exception
5. Persistence and presentation are external collaborators
"""

__version__ = "1.0.0"
__author__ = "Household Finance Team"

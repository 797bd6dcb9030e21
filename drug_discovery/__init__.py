"""
Drug Discovery Dashboard backend.

In-memory REST API for targets, drugs, interactions, ADMET predictions,
projects and activities, plus a set of deterministic pseudo-prediction
services.
"""

__version__ = "1.0.0"

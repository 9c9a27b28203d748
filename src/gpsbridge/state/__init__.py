"""State layer.

Holds the snapshots shared between the periodic jobs: currently the
platform's zone list.
"""

"""
Asset policies

Rules checked before an asset lifecycle transition is applied.
"""

from asset_tracker.buisness.assets.policies.open_assignment import OpenAssignmentPolicy

__all__ = ['OpenAssignmentPolicy']

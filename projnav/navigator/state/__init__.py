"""Reactive State Management for the Project Navigator.

Architecture:
- ProjectNavigatorViewModel: inputs from the host screen, outputs for the
  pager, the dismissal animator and the delegate
"""

from .project_navigator import (
    ProjectNavigatorInputs,
    ProjectNavigatorOutputs,
    ProjectNavigatorViewModel,
)

__all__ = ["ProjectNavigatorInputs", "ProjectNavigatorOutputs", "ProjectNavigatorViewModel"]

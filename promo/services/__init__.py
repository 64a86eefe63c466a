"""Workflows behind the CLI commands.

Services coordinate the promotion policy (promo.promotion) with the git
adapter, the project manifest and the file system.
"""

from promo.services.deploy import DeployReport, DeployRequest, run_deploy
from promo.services.merge import MergeReport, run_release_merge
from promo.services.release import ReleaseReport, ReleaseRequest, run_release

__all__ = [
    # deploy
    "DeployReport",
    "DeployRequest",
    "run_deploy",
    # merge
    "MergeReport",
    "run_release_merge",
    # release
    "ReleaseReport",
    "ReleaseRequest",
    "run_release",
]

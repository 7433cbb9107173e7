"""Exit codes for the release CLI.

Every release run ends with exactly one of these codes. Rollout problems are
reported in the summary but never map to a non-zero code on their own.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes.

    These values are consumed by CI pipelines and should remain stable:
    - 0: Success (rollout warnings included)
    - 1: User error (bad flags, invalid run id, invalid config)
    - 2: Environment error (az/kubectl missing)
    - 3: Build error (a first-party image failed to build or publish)
    - 4: Registry error (a seed import failed and was not tolerated)
    - 5: Cluster error (presence check or first deploy failed)
    - 130: Cancelled by the operator
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    REGISTRY_ERROR = 4
    CLUSTER_ERROR = 5
    CANCELLED = 130

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

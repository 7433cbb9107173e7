from __future__ import annotations

# Registry reads (show-tags)
AZ_TIMEOUT_SECONDS = 2 * 60.0

# Registry writes: import pulls from upstream, build runs remotely
AZ_IMPORT_TIMEOUT_SECONDS = 15 * 60.0
AZ_BUILD_TIMEOUT_SECONDS = 30 * 60.0

# kubectl get/apply/set/restart
KUBECTL_TIMEOUT_SECONDS = 60.0

# Added on top of the rollout status --timeout so kubectl reports first
ROLLOUT_WAIT_GRACE_SECONDS = 30.0

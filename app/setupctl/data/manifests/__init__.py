"""Default manifests shipped with setupctl."""

"""Application services for the release CLI.

Services hold the release logic and talk to the registry and the cluster
only through the collaborator protocols in ``ship.services.release``.
"""

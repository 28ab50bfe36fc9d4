"""medinfo: a small disease-information catalog with an admin console."""

__version__ = "1.0.0"

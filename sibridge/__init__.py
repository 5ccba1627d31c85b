"""Result models, Web Inspector RPC handling and device-support helpers for iOS device tooling."""

__version__ = "0.1.0"
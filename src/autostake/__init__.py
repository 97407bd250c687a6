"""autostake - wallet-driven package purchase and auto-stake client."""

__version__ = "0.1.0"

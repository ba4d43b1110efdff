"""Copy a local SSH public key into a remote ``authorized_keys`` file."""

__version__ = "0.1.0"

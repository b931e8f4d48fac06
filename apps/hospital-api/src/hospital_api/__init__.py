"""Hospital registry and nearby facility search HTTP service."""

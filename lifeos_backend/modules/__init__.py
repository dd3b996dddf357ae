"""Feature modules of the Life OS backend."""

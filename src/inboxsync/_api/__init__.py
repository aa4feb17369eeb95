"""REST implementations of the collaborator protocols."""

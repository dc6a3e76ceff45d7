"""Project navigator screen logic and replay tooling."""

"""gitpick: build git commands one decision at a time."""

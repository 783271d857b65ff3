"""Root conftest — shared test configuration."""

import os

# Ensure tests never talk to real upstreams or pick up a developer's .env values
os.environ.setdefault("CLIENT_ID", "test-client-id")
os.environ.setdefault("CLIENT_SECRET", "")
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ.setdefault("LEADERBOARD_ACCESS_TOKEN", "test-leaderboard-token")
os.environ.setdefault("STATIC_DIR", "__no_static_dir__")
os.environ.setdefault("LOG_FORMAT", "text")

"""Domain models, states and errors. Nothing here knows about HTTP or the terminal."""

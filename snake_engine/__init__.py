"""Single-player snake simulation engine with a websocket host."""

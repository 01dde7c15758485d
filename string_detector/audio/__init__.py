"""Frame decoding, loudness and pitch analysis, and frame sources."""

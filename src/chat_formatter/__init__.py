"""Chat-style text to Word and HTML documents."""

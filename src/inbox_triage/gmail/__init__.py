"""Gmail API access, payload decoding and record building."""

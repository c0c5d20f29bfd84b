"""Core — error hierarchy and the fan-out join. No database imports."""

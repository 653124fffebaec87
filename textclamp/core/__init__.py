"""Core clamp engine: truncation state machine, scheduler and measurements."""

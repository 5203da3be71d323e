"""Controller, state container, result type and ports."""

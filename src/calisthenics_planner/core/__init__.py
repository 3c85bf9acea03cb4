"""Pure generation engine: safety caps, goals, prescriptions, methods and assembly."""

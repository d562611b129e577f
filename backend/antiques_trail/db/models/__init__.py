from . import analytics, opening_hours, place, specialty  # noqa: F401  register every mapper

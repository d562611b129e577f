from __future__ import annotations

from .models.base import Base  # noqa: F401  re-export for Alembic
from .models.analytics import RequestStatus, SpecialtyRequest, SpecialtySearch  # noqa: F401
from .models.opening_hours import OpeningHour  # noqa: F401
from .models.place import OnlineSalesLink, Place, PlaceType  # noqa: F401
from .models.specialty import PlaceSpecialty, PlaceTypeSpecialty, Specialty  # noqa: F401

# Check-in service — Database Models
# Import all models here for SQLAlchemy discovery

from app.models.organization import Organization      # noqa
from app.models.place import Place                    # noqa
from app.models.checkin import CheckIn                # noqa
from app.models.infection import Infection, InfectionPlace  # noqa

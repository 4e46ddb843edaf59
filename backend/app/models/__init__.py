# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les clés étrangères inter-modèles.

from app.models.user import User, Family  # noqa: F401  doit précéder les autres
from app.models.school_class import SchoolClass  # noqa: F401
from app.models.child import Child  # noqa: F401
from app.models.schedule import Schedule, ScheduleStudent  # noqa: F401
from app.models.attendance import Attendance  # noqa: F401
from app.models.event import Event  # noqa: F401
from app.models.content import GalleryImage, Resource  # noqa: F401
from app.models.feedback import Feedback  # noqa: F401
from app.models.grade import Grade  # noqa: F401
from app.models.volunteer import VolunteerSignup, VolunteerSlot  # noqa: F401
from app.models.appointment import AppointmentRequest  # noqa: F401

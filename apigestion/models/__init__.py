# ApiGestión: Database Models
# Import all models here for SQLAlchemy discovery

from apigestion.models.user import User                   # noqa
from apigestion.models.apiary import Apiary               # noqa
from apigestion.models.hive import Hive                   # noqa
from apigestion.models.swarm import Swarm                 # noqa
from apigestion.models.nucleus import Nucleus             # noqa
from apigestion.models.inspection import Inspection       # noqa
from apigestion.models.alert import Alert                 # noqa
from apigestion.models.activity import Activity           # noqa

# models_bootstrap.py
from worker import models as _worker_models
from mastercalendar import models as _mastercalendar_models
from workeravailability import models as _workeravailability_models
from job import models as _job_models
from quote import models as _quote_models

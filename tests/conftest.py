import os

os.environ["INCIDENT_DESK_STORE"] = "memory"

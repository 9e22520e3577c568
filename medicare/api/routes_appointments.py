# FILE: medicare/api/routes_appointments.py
from medicare.api.emr_router_utils import patient_records_router
from medicare.crud import collections
from medicare.schemas.emr import AppointmentCreate, AppointmentUpdate

router = patient_records_router(collections.appointments, AppointmentCreate,
                                AppointmentUpdate)

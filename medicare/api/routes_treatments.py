# FILE: medicare/api/routes_treatments.py
from medicare.api.emr_router_utils import patient_records_router
from medicare.crud import collections
from medicare.schemas.emr import TreatmentCreate, TreatmentUpdate

router = patient_records_router(collections.treatments, TreatmentCreate,
                                TreatmentUpdate)

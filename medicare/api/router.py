# FILE: medicare/api/router.py
from fastapi import APIRouter

from medicare.api import (
    routes_appointments,
    routes_notifications,
    routes_patients,
    routes_prescriptions,
    routes_reports,
    routes_treatments,
    routes_users,
)

api_router = APIRouter()

api_router.include_router(routes_patients.router,
                          prefix="/patients",
                          tags=["Patients"])
api_router.include_router(routes_prescriptions.router,
                          prefix="/prescriptions",
                          tags=["Prescriptions"])
api_router.include_router(routes_treatments.router,
                          prefix="/treatments",
                          tags=["Treatments"])
api_router.include_router(routes_appointments.router,
                          prefix="/appointments",
                          tags=["Appointments"])
api_router.include_router(routes_notifications.router,
                          prefix="/notifications",
                          tags=["Notifications"])
api_router.include_router(routes_users.router, prefix="/users", tags=["Users"])
api_router.include_router(routes_reports.router,
                          prefix="/reports",
                          tags=["Reports"])


@api_router.get("/health", tags=["Health"])
def health():
    return {"status": "ok"}

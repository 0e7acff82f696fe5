from fastapi import APIRouter

from . import employees, months, shift_types

api_router = APIRouter()

api_router.include_router(employees.router, prefix="/employees", tags=["employees"])
api_router.include_router(shift_types.router, prefix="/shift-types", tags=["shift_types"])
api_router.include_router(months.router, prefix="/months", tags=["months"])

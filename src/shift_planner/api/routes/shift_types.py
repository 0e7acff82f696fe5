from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from shift_planner.db.session import get_db_session
from shift_planner.repositories import shift_type as shift_type_repo
from shift_planner.schemas.roster import ShiftTypeCreate, ShiftTypeRead, ShiftTypeUpdate

router = APIRouter()


@router.get("/", response_model=list[ShiftTypeRead])
async def list_shift_types(
    session: Annotated[AsyncSession, Depends(get_db_session)]
) -> list[ShiftTypeRead]:
    shift_types = await shift_type_repo.list_shift_types(session)
    return [ShiftTypeRead.model_validate(shift_type) for shift_type in shift_types]


@router.post("/", response_model=ShiftTypeRead, status_code=status.HTTP_201_CREATED)
async def create_shift_type(
    payload: ShiftTypeCreate, session: Annotated[AsyncSession, Depends(get_db_session)]
) -> ShiftTypeRead:
    shift_type = await shift_type_repo.create_shift_type(session, payload)
    await session.commit()
    await session.refresh(shift_type)
    return ShiftTypeRead.model_validate(shift_type)


@router.put("/{shift_type_id}", response_model=ShiftTypeRead)
async def update_shift_type(
    shift_type_id: int,
    payload: ShiftTypeUpdate,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ShiftTypeRead:
    shift_type = await shift_type_repo.get_shift_type(session, shift_type_id)
    if not shift_type:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Shift type not found")
    shift_type = await shift_type_repo.update_shift_type(session, shift_type, payload)
    await session.commit()
    await session.refresh(shift_type)
    return ShiftTypeRead.model_validate(shift_type)


@router.delete("/{shift_type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_shift_type(
    shift_type_id: int, session: Annotated[AsyncSession, Depends(get_db_session)]
) -> None:
    shift_type = await shift_type_repo.get_shift_type(session, shift_type_id)
    if not shift_type:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Shift type not found")
    await shift_type_repo.delete_shift_type(session, shift_type)
    await session.commit()

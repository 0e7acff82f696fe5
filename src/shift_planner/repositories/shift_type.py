from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shift_planner.db.models.roster import ShiftType
from shift_planner.schemas.roster import ShiftTypeCreate, ShiftTypeUpdate


async def list_shift_types(session: AsyncSession) -> list[ShiftType]:
    # Order matters: the scheduler fills shifts of a day in this order.
    result = await session.execute(select(ShiftType).order_by(ShiftType.start_time.asc(), ShiftType.id.asc()))
    return list(result.scalars().all())


async def create_shift_type(session: AsyncSession, payload: ShiftTypeCreate) -> ShiftType:
    shift_type = ShiftType(**payload.model_dump())
    session.add(shift_type)
    await session.flush()
    await session.refresh(shift_type)
    return shift_type


async def get_shift_type(session: AsyncSession, shift_type_id: int) -> ShiftType | None:
    return await session.get(ShiftType, shift_type_id)


async def update_shift_type(
    session: AsyncSession, shift_type: ShiftType, payload: ShiftTypeUpdate
) -> ShiftType:
    data = payload.model_dump(exclude_unset=True)
    for field, value in data.items():
        setattr(shift_type, field, value)
    await session.flush()
    await session.refresh(shift_type)
    return shift_type


async def delete_shift_type(session: AsyncSession, shift_type: ShiftType) -> None:
    await session.delete(shift_type)

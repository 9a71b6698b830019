"""Activity schedules: creation, status changes, conversion and backfill."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from jaothui.adapters.clock import SystemClock
from jaothui.adapters.sqlite.repos import (
    SQLiteActivityRepo,
    SQLiteAnimalRepo,
    SQLiteFarmRepo,
    SQLiteScheduleRepo,
)
from jaothui.api.deps import (
    RecurrenceRulesAdapter,
    get_activity_repo,
    get_animal_repo,
    get_clock,
    get_current_profile,
    get_farm_repo,
    get_recurrence_rules,
    get_schedule_repo,
    require_cron_secret,
)
from jaothui.api.errors import raise_for_errors
from jaothui.api.schemas import (
    ActivityResponse,
    AnimalHistoryResponse,
    ConvertToActivityRequest,
    ConvertToActivityResponse,
    OccurrenceResultModel,
    ProcessRecurringResponse,
    ScheduleCreateRequest,
    ScheduleCreateResponse,
    ScheduleResponse,
    StatusUpdateRequest,
)
from jaothui.components.recurrence import ProcessRecurringInput, run_process_recurring
from jaothui.components.schedules import (
    ConvertToActivityInput,
    CreateScheduleInput,
    ListAnimalHistoryInput,
    UpdateStatusInput,
    run_convert_to_activity,
    run_create,
    run_list_history,
    run_update_status,
)
from jaothui.domain.entities import Profile

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=ScheduleCreateResponse, status_code=status.HTTP_201_CREATED)
def create_schedule(
    data: ScheduleCreateRequest,
    current_profile: Profile = Depends(get_current_profile),
    schedule_repo: SQLiteScheduleRepo = Depends(get_schedule_repo),
    animal_repo: SQLiteAnimalRepo = Depends(get_animal_repo),
    farm_repo: SQLiteFarmRepo = Depends(get_farm_repo),
    clock: SystemClock = Depends(get_clock),
    recurrence_rules: RecurrenceRulesAdapter = Depends(get_recurrence_rules),
) -> ScheduleCreateResponse:
    """Create a schedule; recurring ones get their next occurrences created too."""
    result = run_create(
        CreateScheduleInput(
            animal_id=data.animal_id,
            actor_id=current_profile.id,
            title=data.title,
            scheduled_date=data.scheduled_date,
            description=data.description,
            notes=data.notes,
            status=data.status,
            is_recurring=data.is_recurring,
            recurrence_type=data.recurrence_type,
        ),
        repo=schedule_repo,
        animals=animal_repo,
        farms=farm_repo,
        time_port=clock,
        recurrence_rules=recurrence_rules,
    )
    raise_for_errors(result.errors)
    assert result.schedule is not None

    if result.additional_occurrences:
        message = f"สร้างกำหนดการสำเร็จ และสร้างกำหนดการซ้ำอีก {result.additional_occurrences} รายการ"
    else:
        message = "สร้างกำหนดการสำเร็จ"

    return ScheduleCreateResponse(
        message=message,
        schedule=ScheduleResponse.from_entity(result.schedule),
        additional_occurrences=result.additional_occurrences,
    )


@router.post(
    "/process-recurring",
    response_model=ProcessRecurringResponse,
    dependencies=[Depends(require_cron_secret)],
)
def process_recurring(
    schedule_repo: SQLiteScheduleRepo = Depends(get_schedule_repo),
    animal_repo: SQLiteAnimalRepo = Depends(get_animal_repo),
    clock: SystemClock = Depends(get_clock),
    recurrence_rules: RecurrenceRulesAdapter = Depends(get_recurrence_rules),
) -> ProcessRecurringResponse:
    """Backfill trigger for the external scheduler."""
    result = run_process_recurring(
        ProcessRecurringInput(),
        repo=schedule_repo,
        time_port=clock,
        rules=recurrence_rules,
        owners=animal_repo,
    )
    return ProcessRecurringResponse(
        success=result.success,
        message=f"ประมวลผลกำหนดการซ้ำ {result.processed} รายการ สร้างใหม่ {result.created} รายการ",
        processed=result.processed,
        created=result.created,
        total=result.total,
        results=[
            OccurrenceResultModel(
                source_schedule_id=r.source_schedule_id,
                scheduled_date=r.scheduled_date,
                schedule_id=r.schedule_id,
                error=r.error,
            )
            for r in result.results
        ],
    )


@router.patch("/{schedule_id}/status", response_model=ScheduleResponse)
def update_status(
    schedule_id: UUID,
    data: StatusUpdateRequest,
    current_profile: Profile = Depends(get_current_profile),
    schedule_repo: SQLiteScheduleRepo = Depends(get_schedule_repo),
    animal_repo: SQLiteAnimalRepo = Depends(get_animal_repo),
    farm_repo: SQLiteFarmRepo = Depends(get_farm_repo),
    clock: SystemClock = Depends(get_clock),
) -> ScheduleResponse:
    result = run_update_status(
        UpdateStatusInput(schedule_id=schedule_id, actor_id=current_profile.id, status=data.status),
        repo=schedule_repo,
        animals=animal_repo,
        farms=farm_repo,
        time_port=clock,
    )
    raise_for_errors(result.errors)
    assert result.schedule is not None
    return ScheduleResponse.from_entity(result.schedule)


@router.post("/{schedule_id}/convert-to-activity", response_model=ConvertToActivityResponse)
def convert_to_activity(
    schedule_id: UUID,
    data: ConvertToActivityRequest | None = None,
    current_profile: Profile = Depends(get_current_profile),
    schedule_repo: SQLiteScheduleRepo = Depends(get_schedule_repo),
    animal_repo: SQLiteAnimalRepo = Depends(get_animal_repo),
    farm_repo: SQLiteFarmRepo = Depends(get_farm_repo),
    clock: SystemClock = Depends(get_clock),
) -> ConvertToActivityResponse:
    """Record the schedule as a completed activity."""
    body = data or ConvertToActivityRequest()
    result = run_convert_to_activity(
        ConvertToActivityInput(
            schedule_id=schedule_id,
            actor_id=current_profile.id,
            notes=body.notes,
            activity_date=body.activity_date,
        ),
        repo=schedule_repo,
        animals=animal_repo,
        farms=farm_repo,
        time_port=clock,
    )
    raise_for_errors(result.errors)
    assert result.activity is not None and result.schedule is not None

    return ConvertToActivityResponse(
        message="บันทึกกิจกรรมสำเร็จ",
        activity=ActivityResponse.from_entity(result.activity),
        schedule=ScheduleResponse.from_entity(result.schedule),
    )


@router.get("/animal/{animal_id}", response_model=AnimalHistoryResponse)
def animal_history(
    animal_id: UUID,
    current_profile: Profile = Depends(get_current_profile),
    schedule_repo: SQLiteScheduleRepo = Depends(get_schedule_repo),
    activity_repo: SQLiteActivityRepo = Depends(get_activity_repo),
    animal_repo: SQLiteAnimalRepo = Depends(get_animal_repo),
    farm_repo: SQLiteFarmRepo = Depends(get_farm_repo),
) -> AnimalHistoryResponse:
    """Every schedule of the animal (occurrences included) and its recorded activities."""
    result = run_list_history(
        ListAnimalHistoryInput(animal_id=animal_id, actor_id=current_profile.id),
        repo=schedule_repo,
        activities=activity_repo,
        animals=animal_repo,
        farms=farm_repo,
    )
    raise_for_errors(result.errors)
    return AnimalHistoryResponse(
        schedules=[ScheduleResponse.from_entity(s) for s in result.schedules],
        activities=[ActivityResponse.from_entity(a) for a in result.activities],
    )

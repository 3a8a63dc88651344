import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from dropbox_tasks.services import errors
from dropbox_tasks.services.run_context import RunContext
from dropbox_tasks.services.storage import LocalStorage
from dropbox_tasks.api.storage import get_storage
from dropbox_tasks.tasks.registry import TASK_TYPES, build_task

logger = logging.getLogger(__name__)

router = APIRouter()

STATUS_CODES = {
    errors.ValidationError: status.HTTP_400_BAD_REQUEST,
    errors.AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    errors.NotFoundError: status.HTTP_404_NOT_FOUND,
    errors.ConflictError: status.HTTP_409_CONFLICT,
    errors.RateLimitError: status.HTTP_429_TOO_MANY_REQUESTS,
    errors.StorageIOError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class RunRequest(BaseModel):
    task: Dict[str, Any]
    variables: Dict[str, Any] = Field(default_factory=dict)


class RunResponse(BaseModel):
    outputs: Dict[str, Any]
    metrics: list


@router.get("")
async def list_task_types():
    """List the task types that can be run"""
    return {"types": sorted(TASK_TYPES)}


@router.post("/run", response_model=RunResponse)
def run_task(request: RunRequest, storage: LocalStorage = Depends(get_storage)):
    """Run one task to completion and return its outputs"""
    try:
        task = build_task(request.task)
    except errors.ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PydanticValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    run_context = RunContext(storage, variables=request.variables, task_id=task.id)
    logger.info(f"Running task {task.id} ({task.type})")
    try:
        output = task.run(run_context)
    except errors.TaskError as e:
        status_code = STATUS_CODES.get(type(e), status.HTTP_502_BAD_GATEWAY)
        logger.error(f"Task {task.id} failed: {e}")
        raise HTTPException(status_code=status_code, detail=str(e))
    finally:
        run_context.cleanup()

    return RunResponse(
        outputs=output.to_dict(),
        metrics=[metric.model_dump() for metric in run_context.metrics],
    )

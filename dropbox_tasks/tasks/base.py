from abc import abstractmethod
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field

from dropbox_tasks.models.outputs import TaskOutput
from dropbox_tasks.services import dropbox_service
from dropbox_tasks.services.errors import RemoteOperationError, ValidationError


class DropboxTask(BaseModel):
    """Base of every Dropbox task.

    Properties hold raw configuration values. They are rendered through the
    run context when the task runs, so any of them may be a template such as
    ``"{{ secret('DROPBOX_ACCESS_TOKEN') }}"``.
    """
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    type: ClassVar[str]

    id: str = "task"
    access_token: Any = Field(alias="accessToken")

    @abstractmethod
    def run(self, run_context) -> TaskOutput:
        """Execute the task once and return its outputs"""

    def create_client(self, run_context):
        token = run_context.render_as(self.access_token, str, field_name="accessToken")
        if not token:
            raise ValidationError("'accessToken' is required")
        return dropbox_service.create_client(token)

    @staticmethod
    def remote_error(prefix: str, error: Optional[Any]) -> RemoteOperationError:
        return RemoteOperationError(f"{prefix} Error: {error}")

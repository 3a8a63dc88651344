import os
import shutil
import tempfile
import logging
from typing import Any, Dict, List, Optional

from jinja2 import Environment, StrictUndefined, TemplateError
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from dropbox_tasks import config
from dropbox_tasks.services.errors import ValidationError
from dropbox_tasks.services.storage import LocalStorage

logger = logging.getLogger(__name__)


class Counter(BaseModel):
    name: str
    value: float
    type: str = "counter"


class RunContext:
    """Everything a task needs from its host during one execution"""

    def __init__(self, storage: LocalStorage, variables: Optional[Dict[str, Any]] = None, task_id: str = "task"):
        self.storage = storage
        self.variables = dict(variables or {})
        self.task_id = task_id
        self.logger = logging.getLogger(f"dropbox_tasks.tasks.{task_id}")
        self.metrics: List[Counter] = []
        self._working_dir: Optional[str] = None

        self._env = Environment(undefined=StrictUndefined, autoescape=False)
        self._env.globals["secret"] = config.get_secret

    def render(self, value):
        """Render a templated value, recursing into lists"""
        if isinstance(value, str):
            if "{{" not in value and "{%" not in value:
                return value
            try:
                return self._env.from_string(value).render(**self.variables)
            except (TemplateError, KeyError) as e:
                raise ValidationError(f"Could not render '{value}': {e}") from e
        if isinstance(value, list):
            return [self.render(item) for item in value]
        return value

    def render_as(self, value, type_, default=None, field_name="value"):
        """Render a value and coerce it to `type_`; None or blank yields `default`"""
        rendered = self.render(value)
        if rendered is None or (isinstance(rendered, str) and not rendered.strip()):
            return default
        try:
            return TypeAdapter(type_).validate_python(rendered)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid '{field_name}': {rendered!r}") from e

    def metric(self, name, value):
        self.metrics.append(Counter(name=name, value=value))
        self.logger.debug(f"Metric {name}={value}")

    @property
    def working_dir(self):
        if self._working_dir is None:
            self._working_dir = tempfile.mkdtemp(prefix=f"{self.task_id}-", dir=config.WORKING_DIR)
        return self._working_dir

    def create_temp_file(self, suffix=""):
        fd, path = tempfile.mkstemp(suffix=suffix, dir=self.working_dir)
        os.close(fd)
        return path

    def cleanup(self):
        if self._working_dir is not None:
            shutil.rmtree(self._working_dir, ignore_errors=True)
            self._working_dir = None

"""Resolution of task path inputs.

A path input is either a literal Dropbox path or a ``storage://`` URI of a
blob whose whole content is the path, typically the output of an upstream task.
"""
from dataclasses import dataclass
from typing import Optional, Union

from dropbox_tasks.services.errors import TaskError, ValidationError
from dropbox_tasks.services.storage import is_storage_uri


@dataclass(frozen=True)
class LiteralPath:
    value: str


@dataclass(frozen=True)
class StoragePath:
    uri: str


PathInput = Union[LiteralPath, StoragePath]


def parse_path_input(rendered: str) -> PathInput:
    if is_storage_uri(rendered.strip()):
        return StoragePath(rendered.strip())
    return LiteralPath(rendered)


def _read_path(run_context, path_input: PathInput) -> str:
    if isinstance(path_input, LiteralPath):
        return path_input.value

    try:
        with run_context.storage.get_file(path_input.uri) as f:
            path = f.read().decode("utf-8").strip()
    except (TaskError, OSError, UnicodeDecodeError) as e:
        raise ValidationError(f"Failed to read path from storage reference: {path_input.uri}") from e

    run_context.logger.debug(f"Read Dropbox path '{path}' from '{path_input.uri}'")
    return path


def _check_path(path: str, field_name: str) -> str:
    if not path.startswith("/"):
        raise ValidationError(f"'{field_name}' path must start with '/'")
    return path


def _render(run_context, raw) -> str:
    rendered = run_context.render(raw)
    return "" if rendered is None else str(rendered)


def resolve_path(run_context, raw, field_name: str) -> str:
    """Render `raw` and resolve it into an absolute Dropbox path"""
    rendered = _render(run_context, raw)
    if not rendered.strip():
        raise ValidationError(f"'{field_name}' is required and cannot be empty")

    path = _read_path(run_context, parse_path_input(rendered))
    if not path.strip():
        raise ValidationError(f"'{field_name}' resolved to an empty path")
    return _check_path(path, field_name)


def resolve_optional_path(run_context, raw, field_name: str) -> Optional[str]:
    """Like `resolve_path`, but a missing or blank input means no path"""
    rendered = _render(run_context, raw)
    if not rendered.strip():
        return None

    path = _read_path(run_context, parse_path_input(rendered))
    if not path.strip():
        return None
    return _check_path(path, field_name)

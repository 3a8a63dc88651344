from dropbox_tasks.services.errors import ValidationError
from dropbox_tasks.tasks.copy import Copy
from dropbox_tasks.tasks.create_folder import CreateFolder
from dropbox_tasks.tasks.delete import Delete
from dropbox_tasks.tasks.download import Download
from dropbox_tasks.tasks.get_metadata import GetMetadata
from dropbox_tasks.tasks.list_files import ListFiles
from dropbox_tasks.tasks.move import Move
from dropbox_tasks.tasks.search import Search
from dropbox_tasks.tasks.upload import Upload

TASK_TYPES = {
    task.type: task
    for task in (Upload, Download, Move, Copy, Delete, CreateFolder, GetMetadata, ListFiles, Search)
}


def build_task(definition):
    """Build a task from a definition such as {"type": "Move", "accessToken": ..., "from": ..., "to": ...}"""
    definition = dict(definition)
    task_type = definition.pop("type", None)
    if task_type not in TASK_TYPES:
        raise ValidationError(f"Unknown task type: {task_type}. Must be one of {', '.join(TASK_TYPES)}")
    return TASK_TYPES[task_type].model_validate(definition)

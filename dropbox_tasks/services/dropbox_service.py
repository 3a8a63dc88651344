import os
import logging

import dropbox
from dropbox.files import CommitInfo, UploadSessionCursor

from dropbox_tasks import config

logger = logging.getLogger(__name__)

# Dropbox rejects single-request uploads above 150 MB, upload bigger files in sessions
UPLOAD_CHUNK_SIZE = 8 * 1024 * 1024


def create_client(access_token):
    """Create a Dropbox client for one task execution"""
    logger.info("Initializing Dropbox client")
    return dropbox.Dropbox(
        oauth2_access_token=access_token,
        user_agent=config.DROPBOX_USER_AGENT,
        timeout=config.DROPBOX_TIMEOUT,
    )


def upload_stream(client, stream, size, path, mode, autorename, chunk_size=UPLOAD_CHUNK_SIZE):
    """Upload a binary stream of `size` bytes to `path` and return its FileMetadata"""
    if size <= chunk_size:
        logger.info(f"Uploading {size} bytes to {path}")
        return client.files_upload(stream.read(), path, mode=mode, autorename=autorename)

    logger.info(f"Uploading {size} bytes to {path} in chunks of {chunk_size} bytes")
    session = client.files_upload_session_start(stream.read(chunk_size))
    cursor = UploadSessionCursor(session_id=session.session_id, offset=stream.tell())

    while size - stream.tell() > chunk_size:
        client.files_upload_session_append_v2(stream.read(chunk_size), cursor)
        cursor.offset = stream.tell()
        logger.debug(f"Uploaded {cursor.offset}/{size} bytes")

    commit = CommitInfo(path=path, mode=mode, autorename=autorename)
    return client.files_upload_session_finish(stream.read(chunk_size), cursor, commit)


def download_to_file(client, path, local_path):
    """Download `path` into `local_path` and return its FileMetadata"""
    logger.info(f"Downloading file: {path}")
    metadata = client.files_download_to_file(local_path, path)
    logger.info(f"Downloaded {os.path.getsize(local_path)} bytes from {path}")
    return metadata

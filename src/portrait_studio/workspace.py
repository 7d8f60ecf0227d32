"""Per-session editing workspace.

A workspace owns everything a single editing screen needs: the uploaded
source, the current result, comparison and crop state, prompt options and
the busy flag. It is only mutated by its owner's requests.
"""

import logging
import uuid
from enum import Enum

from .editing.base import BaseImageEditor
from .editing.errors import ERROR_MESSAGES, EditFailed, ErrorCategory, UploadRejected
from .editing.transfer import (
    ResultImage,
    SourceImage,
    download_filename,
    load_source_image,
    submit_edit,
)
from .progress import EditProgress
from .prompts import RestorationPrompt, build_id_photo_prompt, toggle_face_option
from .prompts.schemas import FaceFlag, IdPhotoOptions
from .viewer import ComparisonView, CropPreset, CropRegion, CropSession, CropStateError

logger = logging.getLogger(__name__)

SELECT_FILE_MESSAGE = "Please select an image file."


class EditFlow(str, Enum):
    ID_PHOTO = "id_photo"
    RESTORATION = "restoration"


class WorkspaceBusy(RuntimeError):
    """A submission is already in flight for this workspace."""


class Workspace:
    """Editing state for one user session."""

    def __init__(self, owner: str) -> None:
        self.id = uuid.uuid4().hex[:12]
        self.owner = owner
        self.source: SourceImage | None = None
        self.result: ResultImage | None = None
        self.caption: str | None = None
        self.error: str | None = None
        self.view = ComparisonView()
        self.crop = CropSession()
        self.id_photo_options = IdPhotoOptions()
        self.restoration = RestorationPrompt()
        self.progress = EditProgress()

    # Source image

    def upload(self, filename: str, media_type: str | None, data: bytes) -> SourceImage:
        """Replace the source image, discarding any previous result."""
        try:
            source = load_source_image(filename, media_type, data)
        except UploadRejected as e:
            self.error = str(e)
            raise

        self.source = source
        self.result = None
        self.caption = None
        self.error = None
        self.crop.cancel()
        return source

    # Prompt options

    def set_id_photo_options(self, options: IdPhotoOptions) -> None:
        self.id_photo_options = options

    def toggle_face(self, key: str | FaceFlag) -> IdPhotoOptions:
        face = toggle_face_option(self.id_photo_options.face, key)
        self.id_photo_options = self.id_photo_options.model_copy(update={"face": face})
        return self.id_photo_options

    def prompt_for(self, flow: EditFlow) -> str:
        if flow == EditFlow.RESTORATION:
            return self.restoration.text
        return build_id_photo_prompt(self.id_photo_options)

    # Submission

    async def submit(self, editor: BaseImageEditor, flow: EditFlow) -> ResultImage | None:
        """Send the source image with the flow's prompt to the editor.

        Returns the new result, or None when the editor produced no image.

        Raises:
            UploadRejected: no source image was uploaded
            WorkspaceBusy: another submission is still running
            EditFailed: the editor call failed
        """
        if self.source is None:
            self.error = SELECT_FILE_MESSAGE
            raise UploadRejected(SELECT_FILE_MESSAGE)
        if self.progress.active:
            raise WorkspaceBusy("An edit is already in progress")

        prompt = self.prompt_for(flow)
        self.progress.start()
        self.error = None
        self.result = None
        self.caption = None
        self.crop.cancel()

        try:
            outcome = await submit_edit(editor, self.source, prompt)
        except EditFailed as e:
            self.error = e.message
            raise
        finally:
            self.progress.finish()

        self.caption = outcome.caption
        if outcome.result is None:
            self.error = ERROR_MESSAGES[ErrorCategory.NO_IMAGE]
            return None

        self.result = outcome.result
        self.view.reset()
        logger.info(f"Workspace {self.id}: new result ({self.result.size} bytes)")
        return self.result

    # Crop

    def start_crop(self, preset: CropPreset, displayed_width: float, displayed_height: float) -> CropRegion:
        if self.result is None:
            raise CropStateError("There is no result image to crop")
        return self.crop.start(preset, displayed_width, displayed_height)

    def apply_crop(self) -> ResultImage:
        if self.result is None:
            raise CropStateError("There is no result image to crop")
        self.result = self.crop.apply(self.result)
        self.view.reset()
        return self.result

    def escape(self) -> None:
        """Cancel any crop and leave fullscreen."""
        self.crop.cancel()
        self.view.close_fullscreen()

    # Download

    def download(self) -> tuple[bytes, str, str]:
        """Return (bytes, media type, filename) of the current result."""
        if self.result is None or self.source is None:
            raise LookupError("There is no result image to download")
        media_type = self.result.media_type
        return self.result.data, media_type, download_filename(self.source.filename, media_type)

    def close(self) -> None:
        self.crop.cancel()

    def to_dict(self):
        return {
            "id": self.id,
            "owner": self.owner,
            "source": self.source.to_dict() if self.source else None,
            "result": self.result.to_dict() if self.result else None,
            "caption": self.caption,
            "error": self.error,
            "busy": self.progress.to_dict(),
            "view": self.view.to_dict(),
            "crop": self.crop.to_dict(),
            "id_photo_options": self.id_photo_options.model_dump(mode="json"),
            "restoration": self.restoration.to_dict(),
        }


class WorkspaceRegistry:
    """Open workspaces for the running process."""

    def __init__(self) -> None:
        self._workspaces: dict[str, Workspace] = {}

    def create(self, owner: str) -> Workspace:
        workspace = Workspace(owner)
        self._workspaces[workspace.id] = workspace
        logger.info(f"Opened workspace {workspace.id} for {owner}")
        return workspace

    def get(self, workspace_id: str, owner: str) -> Workspace | None:
        workspace = self._workspaces.get(workspace_id)
        if workspace is None or workspace.owner != owner:
            return None
        return workspace

    def close(self, workspace_id: str) -> None:
        workspace = self._workspaces.pop(workspace_id, None)
        if workspace is not None:
            workspace.close()
            logger.info(f"Closed workspace {workspace_id}")

    def close_all(self) -> None:
        for workspace_id in list(self._workspaces):
            self.close(workspace_id)

"""Editing workspace API router.

Each UI event of the editor (upload, option change, submit, comparison
slider, crop gesture, escape, download) maps to one endpoint here.
"""

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, HTTPException, Path, Query, Response, UploadFile

from ..editing.base import BaseImageEditor
from ..editing.errors import EditFailed, ErrorCategory, UploadRejected
from ..prompts import build_id_photo_prompt
from ..prompts.schemas import IdPhotoOptions, RestoreOptions
from ..schemas import (
    CropStartRequest,
    CustomPromptRequest,
    EditErrorDetail,
    PanelUpdateRequest,
    PointerRequest,
    ViewModeRequest,
)
from ..viewer import CropStateError
from ..workspace import EditFlow, Workspace, WorkspaceBusy, WorkspaceRegistry
from .deps import current_user, get_editor, get_workspace, get_workspaces

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workspaces", tags=["workspaces"])


@router.post("", status_code=201)
async def create_workspace(
    username: str = Depends(current_user),
    registry: WorkspaceRegistry = Depends(get_workspaces),
):
    """Open a new editing workspace for the logged-in user."""
    return registry.create(username).to_dict()


@router.get("/{workspace_id}")
async def get_workspace_state(workspace: Workspace = Depends(get_workspace)):
    return workspace.to_dict()


@router.delete("/{workspace_id}", status_code=204)
async def close_workspace(
    workspace: Workspace = Depends(get_workspace),
    registry: WorkspaceRegistry = Depends(get_workspaces),
):
    registry.close(workspace.id)
    return Response(status_code=204)


@router.post("/{workspace_id}/upload")
async def upload_image(
    image: UploadFile | None = File(None, description="Portrait to edit (PNG, JPG or WEBP)"),
    workspace: Workspace = Depends(get_workspace),
):
    """Set the source image. Any previous result is discarded."""
    if image is None:
        raise HTTPException(400, "Please select an image file.")

    contents = await image.read()
    try:
        workspace.upload(image.filename or "image", image.content_type, contents)
    except UploadRejected as e:
        logger.info(f"Workspace {workspace.id}: upload rejected ({image.content_type})")
        raise HTTPException(400, str(e))
    return workspace.to_dict()


@router.get(
    "/{workspace_id}/source",
    responses={200: {"content": {"image/png": {}, "image/jpeg": {}, "image/webp": {}}}},
)
async def get_source_image(workspace: Workspace = Depends(get_workspace)):
    if workspace.source is None:
        raise HTTPException(404, "No source image uploaded")
    return Response(content=workspace.source.data, media_type=workspace.source.media_type)


@router.get(
    "/{workspace_id}/result",
    responses={200: {"content": {"image/png": {}}, "description": "Current result image"}},
)
async def get_result_image(workspace: Workspace = Depends(get_workspace)):
    if workspace.result is None:
        raise HTTPException(404, "No result image yet")
    return Response(content=workspace.result.data, media_type=workspace.result.media_type)


# Prompt options


@router.put("/{workspace_id}/id-photo")
async def set_id_photo_options(
    options: IdPhotoOptions,
    workspace: Workspace = Depends(get_workspace),
):
    workspace.set_id_photo_options(options)
    return {
        "options": workspace.id_photo_options.model_dump(mode="json"),
        "prompt": build_id_photo_prompt(workspace.id_photo_options),
    }


@router.post("/{workspace_id}/id-photo/face/{key}")
async def toggle_face_option(
    key: str = Path(..., description="'keep' or a face modification flag"),
    workspace: Workspace = Depends(get_workspace),
):
    try:
        options = workspace.toggle_face(key)
    except ValueError:
        raise HTTPException(400, f"Unknown face option '{key}'")
    return {
        "options": options.model_dump(mode="json"),
        "prompt": build_id_photo_prompt(options),
    }


@router.put("/{workspace_id}/restoration/options")
async def set_restoration_options(
    options: RestoreOptions,
    workspace: Workspace = Depends(get_workspace),
):
    """Update retouch options. A customized prompt is left untouched."""
    workspace.restoration.update_options(options)
    return workspace.restoration.to_dict()


@router.put("/{workspace_id}/restoration/prompt")
async def customize_restoration_prompt(
    request: CustomPromptRequest,
    workspace: Workspace = Depends(get_workspace),
):
    workspace.restoration.customize(request.prompt)
    return workspace.restoration.to_dict()


@router.post("/{workspace_id}/restoration/reset")
async def reset_restoration_prompt(workspace: Workspace = Depends(get_workspace)):
    workspace.restoration.reset()
    return workspace.restoration.to_dict()


# Submission


@router.post(
    "/{workspace_id}/submit",
    responses={
        400: {"description": "No image selected"},
        409: {"description": "An edit is already in progress"},
        422: {"model": EditErrorDetail, "description": "No image was generated"},
        502: {"model": EditErrorDetail, "description": "Edit service failed"},
    },
)
async def submit(
    flow: EditFlow = Query(EditFlow.ID_PHOTO, description="Which prompt to send"),
    workspace: Workspace = Depends(get_workspace),
    editor: BaseImageEditor = Depends(get_editor),
):
    """Send the source image and the flow's prompt to the image editor."""
    try:
        result = await workspace.submit(editor, flow)
    except UploadRejected as e:
        raise HTTPException(400, str(e))
    except WorkspaceBusy as e:
        logger.warning(f"Workspace {workspace.id}: submit rejected, edit already running")
        raise HTTPException(409, str(e))
    except EditFailed as e:
        logger.error(f"Workspace {workspace.id}: {flow.value} edit failed ({e.category.value})")
        raise HTTPException(
            status_code=502,
            detail=EditErrorDetail(category=e.category.value, message=e.message).model_dump(),
        )

    if result is None:
        raise HTTPException(
            status_code=422,
            detail=EditErrorDetail(
                category=ErrorCategory.NO_IMAGE.value,
                message=workspace.error,
                caption=workspace.caption,
            ).model_dump(),
        )
    return workspace.to_dict()


# Comparison view


@router.put("/{workspace_id}/view")
async def set_view_mode(
    request: ViewModeRequest,
    workspace: Workspace = Depends(get_workspace),
):
    workspace.view.mode = request.mode
    return workspace.view.to_dict()


@router.put("/{workspace_id}/view/{context}")
async def update_panel(
    request: PanelUpdateRequest,
    context: str = Path(..., pattern="^(inline|fullscreen)$"),
    workspace: Workspace = Depends(get_workspace),
):
    """Move the reveal slider or flip the toggle of one viewing context."""
    panel = workspace.view.panel(context)
    if request.slider_position is not None:
        panel.set_slider(request.slider_position)
    if request.show_result is not None:
        panel.set_show_result(request.show_result)
    if request.open is not None and context == "fullscreen":
        if request.open:
            workspace.view.open_fullscreen()
        else:
            workspace.view.close_fullscreen()
    return workspace.view.to_dict()


# Crop


@router.post("/{workspace_id}/crop/start")
async def start_crop(
    request: CropStartRequest,
    workspace: Workspace = Depends(get_workspace),
):
    try:
        workspace.start_crop(request.preset, request.displayed_width, request.displayed_height)
    except CropStateError as e:
        raise HTTPException(409, str(e))
    return workspace.crop.to_dict()


@router.post("/{workspace_id}/crop/drag/start")
async def start_drag(
    request: PointerRequest,
    workspace: Workspace = Depends(get_workspace),
):
    try:
        workspace.crop.begin_drag(request.x, request.y)
    except CropStateError as e:
        raise HTTPException(409, str(e))
    return workspace.crop.to_dict()


@router.post("/{workspace_id}/crop/drag/move")
async def move_drag(
    request: PointerRequest,
    workspace: Workspace = Depends(get_workspace),
):
    try:
        workspace.crop.drag(request.x, request.y)
    except CropStateError as e:
        raise HTTPException(409, str(e))
    return workspace.crop.to_dict()


@router.post("/{workspace_id}/crop/drag/end")
async def end_drag(workspace: Workspace = Depends(get_workspace)):
    workspace.crop.release_gesture()
    return workspace.crop.to_dict()


@router.post("/{workspace_id}/crop/apply")
async def apply_crop(workspace: Workspace = Depends(get_workspace)):
    """Burn the crop rectangle into a new result image."""
    try:
        workspace.apply_crop()
    except CropStateError as e:
        raise HTTPException(409, str(e))
    return workspace.to_dict()


@router.post("/{workspace_id}/crop/cancel")
async def cancel_crop(workspace: Workspace = Depends(get_workspace)):
    workspace.crop.cancel()
    return workspace.crop.to_dict()


@router.post("/{workspace_id}/escape")
async def escape(workspace: Workspace = Depends(get_workspace)):
    """Escape key: cancel cropping and close fullscreen."""
    workspace.escape()
    return workspace.to_dict()


@router.get("/{workspace_id}/download")
async def download_result(workspace: Workspace = Depends(get_workspace)):
    try:
        data, media_type, filename = workspace.download()
    except LookupError as e:
        raise HTTPException(404, str(e))
    return Response(
        content=data,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )

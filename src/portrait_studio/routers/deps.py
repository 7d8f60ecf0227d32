"""Request dependencies shared by routers."""

from fastapi import Depends, Header, HTTPException, Path, Request

from ..accounts import ADMIN_USERNAME, AccountService
from ..editing.base import BaseImageEditor
from ..workspace import Workspace, WorkspaceRegistry


def get_accounts(request: Request) -> AccountService:
    return request.app.state.accounts


def get_workspaces(request: Request) -> WorkspaceRegistry:
    return request.app.state.workspaces


def get_editor(request: Request) -> BaseImageEditor:
    return request.app.state.editor


def current_user(
    x_session_token: str | None = Header(default=None),
    accounts: AccountService = Depends(get_accounts),
) -> str:
    """Username of the logged-in session, or 401."""
    username = accounts.sessions.lookup(x_session_token)
    if username is None:
        raise HTTPException(status_code=401, detail="Please log in")
    return username


def require_admin(username: str = Depends(current_user)) -> str:
    if username != ADMIN_USERNAME:
        raise HTTPException(status_code=403, detail="Administrator access required")
    return username


def get_workspace(
    workspace_id: str = Path(..., description="Workspace id"),
    username: str = Depends(current_user),
    registry: WorkspaceRegistry = Depends(get_workspaces),
) -> Workspace:
    workspace = registry.get(workspace_id, username)
    if workspace is None:
        raise HTTPException(status_code=404, detail=f"Workspace '{workspace_id}' not found")
    return workspace

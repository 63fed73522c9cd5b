"""CRUD endpoints for saved projects."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from clipeditor.api.export import build_export
from clipeditor.dependencies import get_project_store
from clipeditor.models.project import Project, ProjectSummary
from clipeditor.models.requests import ProjectRequest
from clipeditor.models.responses import DeletedResponse, ExportResponse, ProjectSavedResponse
from clipeditor.storage.projects import ProjectStore

router = APIRouter(prefix="/projects")


def _get_or_404(store: ProjectStore, project_id: str) -> Project:
    project = store.load(project_id)
    if project is None:
        raise HTTPException(status_code=404, detail=f"Project {project_id} not found")
    return project


@router.get("", response_model=list[ProjectSummary])
def list_projects(store: ProjectStore = Depends(get_project_store)) -> list[ProjectSummary]:
    return store.list()


@router.post("", response_model=ProjectSavedResponse, status_code=201)
def create_project(
    req: ProjectRequest,
    store: ProjectStore = Depends(get_project_store),
) -> ProjectSavedResponse:
    project_id = store.save(
        req.name, req.image_data_url, req.image_width, req.image_height, req.points, req.is_closed
    )
    return ProjectSavedResponse(id=project_id)


@router.get("/{project_id}", response_model=Project)
def get_project(project_id: str, store: ProjectStore = Depends(get_project_store)) -> Project:
    return _get_or_404(store, project_id)


@router.put("/{project_id}", response_model=ProjectSavedResponse)
def update_project(
    project_id: str,
    req: ProjectRequest,
    store: ProjectStore = Depends(get_project_store),
) -> ProjectSavedResponse:
    _get_or_404(store, project_id)
    store.save(
        req.name,
        req.image_data_url,
        req.image_width,
        req.image_height,
        req.points,
        req.is_closed,
        existing_id=project_id,
    )
    return ProjectSavedResponse(id=project_id)


@router.delete("/{project_id}", response_model=DeletedResponse)
def delete_project(project_id: str, store: ProjectStore = Depends(get_project_store)) -> DeletedResponse:
    if not store.delete(project_id):
        raise HTTPException(status_code=404, detail=f"Project {project_id} not found")
    return DeletedResponse(id=project_id)


@router.get("/{project_id}/export", response_model=ExportResponse)
def export_project(project_id: str, store: ProjectStore = Depends(get_project_store)) -> ExportResponse:
    project = _get_or_404(store, project_id)
    return build_export(project.points, project.image_width, project.image_height, project.is_closed)

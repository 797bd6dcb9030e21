"""
CRUD endpoints for the dashboard's stored entities.
"""
import logging
from typing import List

from fastapi import APIRouter, HTTPException, Response
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from ..models import (
    UserInsert, UserPublic,
    Target, TargetInsert, TargetUpdate,
    Drug, DrugInsert, DrugUpdate,
    Interaction, InteractionInsert,
    AdmetPrediction, AdmetPredictionInsert,
    Project, ProjectInsert, ProjectUpdate,
    Activity, ActivityInsert,
)
from ..storage import storage

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["resources"],
    responses={404: {"description": "Not found"}},
)


def _not_found(entity: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{entity} not found")


async def _apply_update(update_fn, entity_id: int, update):
    """Run a store update; a merged record that fails validation is a 422"""
    try:
        return await update_fn(entity_id, update)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))


# ============= Users =============

@router.post("/users", response_model=UserPublic, status_code=201)
async def create_user(user: UserInsert):
    """Register a user; usernames are unique"""
    if await storage.get_user_by_username(user.username):
        raise HTTPException(status_code=409, detail="Username already exists")
    return await storage.create_user(user)


@router.get("/users/{user_id}", response_model=UserPublic)
async def get_user(user_id: int):
    user = await storage.get_user(user_id)
    if user is None:
        raise _not_found("User")
    return user


# ============= Targets =============

@router.get("/targets", response_model=List[Target])
async def list_targets():
    return await storage.get_targets()


@router.get("/targets/{target_id}", response_model=Target)
async def get_target(target_id: int):
    target = await storage.get_target(target_id)
    if target is None:
        raise _not_found("Target")
    return target


@router.post("/targets", response_model=Target, status_code=201)
async def create_target(target: TargetInsert):
    created = await storage.create_target(target)
    logger.info(f"Created target {created.id}: {created.name}")
    return created


@router.put("/targets/{target_id}", response_model=Target)
async def update_target(target_id: int, update: TargetUpdate):
    """Apply only the supplied fields to a target"""
    target = await _apply_update(storage.update_target, target_id, update)
    if target is None:
        raise _not_found("Target")
    return target


@router.delete("/targets/{target_id}", status_code=204, response_class=Response)
async def delete_target(target_id: int):
    if not await storage.delete_target(target_id):
        raise _not_found("Target")
    logger.info(f"Deleted target {target_id}")
    return Response(status_code=204)


@router.get("/targets/{target_id}/drugs", response_model=List[Drug])
async def list_target_drugs(target_id: int):
    return await storage.get_drugs_by_target(target_id)


@router.get("/targets/{target_id}/interactions", response_model=List[Interaction])
async def list_target_interactions(target_id: int):
    return await storage.get_interactions_by_target(target_id)


# ============= Drugs =============

@router.get("/drugs", response_model=List[Drug])
async def list_drugs():
    return await storage.get_drugs()


@router.get("/drugs/{drug_id}", response_model=Drug)
async def get_drug(drug_id: int):
    drug = await storage.get_drug(drug_id)
    if drug is None:
        raise _not_found("Drug")
    return drug


@router.post("/drugs", response_model=Drug, status_code=201)
async def create_drug(drug: DrugInsert):
    created = await storage.create_drug(drug)
    logger.info(f"Created drug {created.id}: {created.name}")
    return created


@router.put("/drugs/{drug_id}", response_model=Drug)
async def update_drug(drug_id: int, update: DrugUpdate):
    drug = await _apply_update(storage.update_drug, drug_id, update)
    if drug is None:
        raise _not_found("Drug")
    return drug


@router.delete("/drugs/{drug_id}", status_code=204, response_class=Response)
async def delete_drug(drug_id: int):
    if not await storage.delete_drug(drug_id):
        raise _not_found("Drug")
    logger.info(f"Deleted drug {drug_id}")
    return Response(status_code=204)


@router.get("/drugs/{drug_id}/interactions", response_model=List[Interaction])
async def list_drug_interactions(drug_id: int):
    return await storage.get_interactions_by_drug(drug_id)


@router.get("/drugs/{drug_id}/admet-prediction", response_model=AdmetPrediction)
async def get_drug_admet_prediction(drug_id: int):
    prediction = await storage.get_admet_prediction_by_drug(drug_id)
    if prediction is None:
        raise _not_found("ADMET prediction for this drug")
    return prediction


# ============= Interactions =============

@router.get("/interactions", response_model=List[Interaction])
async def list_interactions():
    return await storage.get_interactions()


@router.post("/interactions", response_model=Interaction, status_code=201)
async def create_interaction(interaction: InteractionInsert):
    return await storage.create_interaction(interaction)


# ============= ADMET predictions =============

@router.get("/admet-predictions", response_model=List[AdmetPrediction])
async def list_admet_predictions():
    return await storage.get_admet_predictions()


@router.post("/admet-predictions", response_model=AdmetPrediction, status_code=201)
async def create_admet_prediction(prediction: AdmetPredictionInsert):
    return await storage.create_admet_prediction(prediction)


# ============= Projects =============

@router.get("/projects", response_model=List[Project])
async def list_projects():
    return await storage.get_projects()


@router.get("/projects/{project_id}", response_model=Project)
async def get_project(project_id: int):
    project = await storage.get_project(project_id)
    if project is None:
        raise _not_found("Project")
    return project


@router.post("/projects", response_model=Project, status_code=201)
async def create_project(project: ProjectInsert):
    created = await storage.create_project(project)
    logger.info(f"Created project {created.id}: {created.name}")
    return created


@router.put("/projects/{project_id}", response_model=Project)
async def update_project(project_id: int, update: ProjectUpdate):
    project = await _apply_update(storage.update_project, project_id, update)
    if project is None:
        raise _not_found("Project")
    return project


@router.get("/projects/{project_id}/activities", response_model=List[Activity])
async def list_project_activities(project_id: int):
    """Project timeline, newest first"""
    return await storage.get_activities_by_project(project_id)


# ============= Activities =============

@router.get("/activities", response_model=List[Activity])
async def list_activities():
    """All activities, newest first"""
    return await storage.get_activities()


@router.post("/activities", response_model=Activity, status_code=201)
async def create_activity(activity: ActivityInsert):
    return await storage.create_activity(activity)

"""
FastAPI Main Application for the Drug Discovery Dashboard
"""
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from loguru import logger

from .api import resources_router, predictions_router
from .config import settings
from .models import DashboardSummary, DashboardCounts
from .storage import storage

RECENT_ACTIVITY_LIMIT = 5


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    logger.info(f"Starting {settings.app_name} v{settings.version}")
    targets = await storage.get_targets()
    logger.info(f"Store ready with {len(targets)} targets")
    yield
    logger.info(f"Shutting down {settings.app_name}")


app = FastAPI(
    title=settings.app_name,
    description="Target discovery, drug design and clinical analysis dashboard API",
    version=settings.version,
    lifespan=lifespan
)

# CORS middleware - configurable via ALLOWED_ORIGINS env var
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(resources_router)
app.include_router(predictions_router)


# ============= API Endpoints =============

@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "name": settings.app_name,
        "version": settings.version,
        "status": "running",
        "endpoints": {
            "dashboard": "/api/dashboard",
            "targets": "/api/targets",
            "drugs": "/api/drugs",
            "interactions": "/api/interactions",
            "admet_predictions": "/api/admet-predictions",
            "projects": "/api/projects",
            "activities": "/api/activities",
            "validate_target": "/api/nlp/validate-target",
            "generate_drug": "/api/generate/drug",
            "predict_interaction": "/api/predict/interaction",
            "predict_admet": "/api/predict/admet",
            "virtual_screening": "/api/screen/virtual",
            "clinical_trial": "/api/analyze/clinical-trial",
            "docs": "/docs"
        }
    }


@app.get("/api/dashboard", response_model=DashboardSummary)
async def dashboard():
    """Summary cards and recent activity for the active project"""
    projects = await storage.get_projects()
    project = projects[0] if projects else None

    drugs = await storage.get_drugs()
    if project is not None:
        activities = await storage.get_activities_by_project(project.id)
    else:
        activities = await storage.get_activities()

    return DashboardSummary(
        project=project,
        counts=DashboardCounts(
            targets=len(await storage.get_targets()),
            drugs=len(drugs),
            leads=sum(1 for d in drugs if d.status == "lead"),
            interactions=len(await storage.get_interactions()),
            admet_predictions=len(await storage.get_admet_predictions()),
        ),
        recent_activities=activities[:RECENT_ACTIVITY_LIMIT],
    )


# ============= Health Check =============

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "services": {
            "storage": "ready",
            "target_validation": "ready",
            "drug_generation": "ready",
            "interaction_prediction": "ready",
            "admet_prediction": "ready",
            "virtual_screening": "ready",
            "clinical_trial_analysis": "ready"
        }
    }


# Prebuilt dashboard client, mounted last so API routes take precedence
if settings.static_dir is not None:
    if settings.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="client")
        logger.info(f"Serving dashboard client from {settings.static_dir}")
    else:
        logger.warning(f"STATIC_DIR {settings.static_dir} is not a directory; client not served")


def run():
    """Console entry point"""
    import uvicorn
    uvicorn.run(
        "drug_discovery.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )


# ============= Main Entry Point =============

if __name__ == "__main__":
    run()

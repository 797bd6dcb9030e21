"""
Pydantic models for the Drug Discovery Dashboard API

Field names are snake_case in Python and camelCase on the wire; both spellings
are accepted on input.
"""
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any
from enum import Enum
from datetime import datetime


class CamelModel(BaseModel):
    """Base model serialised with camelCase field names"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ActivityType(str, Enum):
    """Activity tags recorded on the project timeline"""
    TARGET_IDENTIFICATION = "target_identification"
    TARGET_VALIDATION = "target_validation"
    DRUG_GENERATION = "drug_generation"
    INTERACTION_PREDICTION = "interaction_prediction"
    ADMET_ANALYSIS = "admet_analysis"
    VIRTUAL_SCREENING = "virtual_screening"
    CLINICAL_TRIAL_ANALYSIS = "clinical_trial_analysis"


# ============= Users =============

class UserInsert(CamelModel):
    """Payload for creating a user"""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    name: Optional[str] = None
    role: Optional[str] = None


class User(UserInsert):
    id: int


class UserPublic(CamelModel):
    """User as returned over HTTP (no password)"""
    id: int
    username: str
    name: Optional[str] = None
    role: Optional[str] = None


# ============= Targets =============

class TargetInsert(CamelModel):
    """Payload for creating a target"""
    name: str = Field(..., description="Target protein name")
    description: Optional[str] = None
    uniprot_id: Optional[str] = Field(None, description="UniProt accession, e.g. P19438")
    gene_name: Optional[str] = None
    confidence: Optional[int] = None
    druggability_score: Optional[int] = None
    molecular_weight: Optional[str] = None
    subcellular_location: Optional[str] = None
    publication_count: Optional[int] = None
    pathway_count: Optional[int] = None
    existing_drug_count: Optional[int] = None
    evidence_summary: Optional[str] = None


class TargetUpdate(CamelModel):
    """Partial target update; only supplied fields are applied"""
    name: Optional[str] = None
    description: Optional[str] = None
    uniprot_id: Optional[str] = None
    gene_name: Optional[str] = None
    confidence: Optional[int] = None
    druggability_score: Optional[int] = None
    molecular_weight: Optional[str] = None
    subcellular_location: Optional[str] = None
    publication_count: Optional[int] = None
    pathway_count: Optional[int] = None
    existing_drug_count: Optional[int] = None
    evidence_summary: Optional[str] = None


class Target(TargetInsert):
    id: int
    created_at: datetime


# ============= Drugs =============

class DrugInsert(CamelModel):
    """Payload for creating a drug"""
    name: str
    smiles: str = Field(..., description="SMILES string, stored as-is")
    target_id: Optional[int] = None
    status: Optional[str] = Field(None, description="e.g. generated, optimized, lead")
    properties: Optional[Dict[str, Any]] = None


class DrugUpdate(CamelModel):
    name: Optional[str] = None
    smiles: Optional[str] = None
    target_id: Optional[int] = None
    status: Optional[str] = None
    properties: Optional[Dict[str, Any]] = None


class Drug(DrugInsert):
    id: int
    created_at: datetime


# ============= Interactions =============

class InteractionInsert(CamelModel):
    drug_id: Optional[int] = None
    target_id: Optional[int] = None
    score: Optional[int] = None
    confidence: Optional[int] = None
    prediction_method: Optional[str] = None


class Interaction(InteractionInsert):
    id: int
    created_at: datetime


# ============= ADMET predictions =============

class AdmetPredictionInsert(CamelModel):
    drug_id: Optional[int] = None
    absorption: Optional[int] = None
    distribution: Optional[int] = None
    metabolism: Optional[int] = None
    excretion: Optional[int] = None
    toxicity: Optional[int] = None  # lower is better
    overall_score: Optional[int] = None
    prediction_method: Optional[str] = None


class AdmetPrediction(AdmetPredictionInsert):
    id: int
    created_at: datetime


# ============= Projects and activities =============

class ProjectInsert(CamelModel):
    name: str
    description: Optional[str] = None
    status: Optional[str] = "active"


class ProjectUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None


class Project(ProjectInsert):
    id: int
    created_at: datetime


class ActivityInsert(CamelModel):
    project_id: Optional[int] = None
    description: str
    activity_type: str = Field(..., description="e.g. target_identification, drug_generation")


class Activity(ActivityInsert):
    id: int
    timestamp: datetime


# ============= Target validation =============

class TargetValidationRequest(CamelModel):
    """Free-text target validation query"""
    query: Optional[str] = Field(None, description="Natural language description of the target hypothesis")
    gene_name: Optional[str] = None
    disease: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "query": "JAK2 inhibition reduces cytokine signalling in rheumatoid arthritis",
                "disease": "rheumatoid arthritis"
            }
        }


class SuggestedTarget(CamelModel):
    name: str
    score: float


class TargetValidationResponse(CamelModel):
    confidence: int
    relevant_publications: int
    suggested_targets: List[SuggestedTarget]


# ============= Drug generation =============

class GenerationConstraints(CamelModel):
    """Property constraints that penalise candidate scores"""
    max_weight: Optional[float] = None
    min_log_p: Optional[float] = None
    max_log_p: Optional[float] = None


class GenerationParameters(CamelModel):
    similar_to: Optional[str] = Field(None, description="Reference SMILES to derive analogues from")
    constraints: Optional[GenerationConstraints] = None
    count: Optional[int] = None
    novelty: Optional[float] = Field(None, ge=0, le=100)
    druglikeness: Optional[float] = Field(None, ge=0, le=100)


class DrugGenerationRequest(CamelModel):
    target_id: Optional[int] = None
    parameters: GenerationParameters = Field(default_factory=GenerationParameters)

    class Config:
        json_schema_extra = {
            "example": {
                "targetId": 1,
                "parameters": {"novelty": 70, "druglikeness": 80}
            }
        }


class GeneratedDrug(CamelModel):
    name: str
    smiles: str
    score: float
    drug_id: Optional[int] = None


class DrugGenerationResponse(CamelModel):
    generated_drugs: List[GeneratedDrug]


# ============= Interaction prediction =============

class InteractionPredictionRequest(CamelModel):
    drug_id: Optional[int] = None
    target_id: Optional[int] = None


class BindingSite(CamelModel):
    position: str  # e.g. "THR-256"
    affinity: str  # High / Medium / Low


class InteractionPredictionResponse(CamelModel):
    score: int
    confidence: int
    binding_sites: List[BindingSite]
    interaction_id: Optional[int] = None


# ============= ADMET prediction =============

class AdmetPredictionRequest(CamelModel):
    smiles: Optional[str] = None
    drug_id: Optional[int] = None

    class Config:
        json_schema_extra = {
            "example": {
                "smiles": "CC(=O)OC1=CC=CC=C1C(=O)O"
            }
        }


class AdmetPredictionResponse(CamelModel):
    absorption: int
    distribution: int
    metabolism: int
    excretion: int
    toxicity: int
    overall_score: int
    prediction_id: Optional[int] = None


# ============= Virtual screening =============

class ScreeningCompound(CamelModel):
    name: Optional[str] = None
    smiles: str


class VirtualScreeningRequest(CamelModel):
    target_id: Optional[int] = None
    compounds: Optional[Any] = Field(None, description="Compounds to screen; the built-in library when omitted")
    mode: Optional[str] = Field(None, description="similarity, pharmacophore or docking")
    top_n: Optional[int] = None


class ScreeningResult(CamelModel):
    compound_id: int
    name: str
    score: float
    binding_energy: str


class VirtualScreeningResponse(CamelModel):
    results: List[ScreeningResult]


# ============= Clinical trial analysis =============

class ClinicalTrialRequest(CamelModel):
    trial_data: Optional[Any] = None
    drug_id: Optional[int] = Field(None, ge=0)
    comparator_id: Optional[int] = Field(None, ge=0)

    class Config:
        json_schema_extra = {
            "example": {
                "trialData": {"sampleSize": 240, "duration": 26, "eventRate": 0.3},
                "drugId": 1
            }
        }


class ClinicalTrialAnalysisResponse(CamelModel):
    hazard_ratio: str
    p_value: str
    confidence_interval: List[str]
    recommendation: str


# ============= Dashboard =============

class DashboardCounts(CamelModel):
    targets: int
    drugs: int
    leads: int
    interactions: int
    admet_predictions: int


class DashboardSummary(CamelModel):
    project: Optional[Project] = None
    counts: DashboardCounts
    recent_activities: List[Activity]

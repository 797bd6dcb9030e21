"""
Prediction endpoints: target validation, drug generation, interaction and
ADMET prediction, virtual screening and clinical trial analysis.

Results that describe stored entities are persisted and every run is recorded
on the active project's activity timeline.
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import ValidationError

from ..config import settings
from ..models import (
    ActivityType, ActivityInsert, DrugInsert, InteractionInsert, AdmetPredictionInsert, Target,
    TargetValidationRequest, TargetValidationResponse,
    DrugGenerationRequest, DrugGenerationResponse, GeneratedDrug,
    InteractionPredictionRequest, InteractionPredictionResponse,
    AdmetPredictionRequest, AdmetPredictionResponse,
    VirtualScreeningRequest, VirtualScreeningResponse, ScreeningCompound,
    ClinicalTrialRequest, ClinicalTrialAnalysisResponse,
)
from ..services import (
    TargetValidator, DrugGenerator, InteractionPredictor,
    ADMETPredictor, VirtualScreening, ClinicalTrialAnalyzer,
)
from ..services.admet_predictor import PREDICTION_METHOD as ADMET_METHOD
from ..services.interaction_predictor import PREDICTION_METHOD as INTERACTION_METHOD
from ..storage import storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["predictions"])

MAX_GENERATION_COUNT = 20
MAX_SCREENING_RESULTS = 100

# Initialize services
target_validator = TargetValidator()
drug_generator = DrugGenerator()
interaction_predictor = InteractionPredictor()
admet_predictor = ADMETPredictor()
virtual_screening = VirtualScreening()
clinical_trial_analyzer = ClinicalTrialAnalyzer()


def target_sequence(target: Target) -> str:
    """Identifier fed to the sequence-based models"""
    return target.uniprot_id or target.gene_name or target.name


async def record_activity(description: str, activity_type: ActivityType):
    """Append an entry to the active (first) project's timeline"""
    projects = await storage.get_projects()
    project_id: Optional[int] = projects[0].id if projects else None
    return await storage.create_activity(ActivityInsert(
        project_id=project_id,
        description=description,
        activity_type=activity_type.value,
    ))


@router.post("/nlp/validate-target", response_model=TargetValidationResponse)
async def validate_target(request: TargetValidationRequest):
    """
    Score a free-text target hypothesis

    Known target names in the store are ranked as suggestions.
    """
    if not request.query or not request.query.strip():
        raise HTTPException(status_code=400, detail="Query is required")

    try:
        candidates = [t.name for t in await storage.get_targets()]
        result = await target_validator.validate(
            request.query,
            gene_name=request.gene_name,
            disease=request.disease,
            candidates=candidates,
        )
        await record_activity(
            f"Target validation completed: {result['confidence']}% confidence",
            ActivityType.TARGET_VALIDATION,
        )
        return TargetValidationResponse.model_validate(result)
    except Exception as e:
        logger.error(f"Target validation error: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/generate/drug", response_model=DrugGenerationResponse)
async def generate_drug(request: DrugGenerationRequest):
    """
    Generate drug candidates for a target

    Every candidate is stored as a drug with status "generated".
    """
    if not request.target_id:
        raise HTTPException(status_code=400, detail="Target ID is required")

    params = request.parameters
    count = params.count if params.count is not None else settings.default_generation_count
    if not 1 <= count <= MAX_GENERATION_COUNT:
        raise HTTPException(
            status_code=400,
            detail=f"Count must be between 1 and {MAX_GENERATION_COUNT}",
        )

    try:
        constraints = params.constraints.model_dump(by_alias=True) if params.constraints else None
        candidates = await drug_generator.generate(
            request.target_id,
            similar_to=params.similar_to,
            constraints=constraints,
            count=count,
        )

        generated = []
        for candidate in candidates:
            properties = {"score": candidate["score"]}
            if params.novelty is not None:
                properties["novelty"] = params.novelty
            if params.druglikeness is not None:
                properties["druglikeness"] = params.druglikeness

            drug = await storage.create_drug(DrugInsert(
                name=candidate["name"],
                smiles=candidate["smiles"],
                target_id=request.target_id,
                status="generated",
                properties=properties,
            ))
            generated.append(GeneratedDrug(drug_id=drug.id, **candidate))

        await record_activity(
            f"Drug generation completed: {len(generated)} candidates for target {request.target_id}",
            ActivityType.DRUG_GENERATION,
        )
        logger.info(f"Stored {len(generated)} generated drugs for target {request.target_id}")
        return DrugGenerationResponse(generated_drugs=generated)
    except Exception as e:
        logger.error(f"Drug generation error: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/predict/interaction", response_model=InteractionPredictionResponse)
async def predict_interaction(request: InteractionPredictionRequest):
    """Predict binding between a stored drug and a stored target"""
    if not request.drug_id or not request.target_id:
        raise HTTPException(status_code=400, detail="Drug ID and Target ID are required")

    drug = await storage.get_drug(request.drug_id)
    if drug is None:
        raise HTTPException(status_code=404, detail="Drug not found")
    target = await storage.get_target(request.target_id)
    if target is None:
        raise HTTPException(status_code=404, detail="Target not found")

    try:
        prediction = await interaction_predictor.predict(drug.smiles, target_sequence(target))
        interaction = await storage.create_interaction(InteractionInsert(
            drug_id=drug.id,
            target_id=target.id,
            score=prediction["score"],
            confidence=prediction["confidence"],
            prediction_method=INTERACTION_METHOD,
        ))
        await record_activity(
            f"Interaction predicted: {drug.name} with {target.name} (score {prediction['score']})",
            ActivityType.INTERACTION_PREDICTION,
        )
        return InteractionPredictionResponse.model_validate(
            {**prediction, "interactionId": interaction.id}
        )
    except Exception as e:
        logger.error(f"Interaction prediction error: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/predict/admet", response_model=AdmetPredictionResponse)
async def predict_admet(request: AdmetPredictionRequest):
    """
    Predict the ADMET profile for a SMILES string

    When drugId is given the prediction is stored against that drug, and the
    drug's own SMILES is used if none was sent.
    """
    drug = None
    if request.drug_id:
        drug = await storage.get_drug(request.drug_id)
        if drug is None:
            raise HTTPException(status_code=404, detail="Drug not found")

    smiles = request.smiles or (drug.smiles if drug else None)
    if not smiles:
        raise HTTPException(status_code=400, detail="SMILES string is required")

    try:
        profile = await admet_predictor.predict(smiles)
        response = AdmetPredictionResponse.model_validate(profile)

        if drug is not None:
            prediction = await storage.create_admet_prediction(AdmetPredictionInsert(
                drug_id=drug.id,
                absorption=response.absorption,
                distribution=response.distribution,
                metabolism=response.metabolism,
                excretion=response.excretion,
                toxicity=response.toxicity,
                overall_score=response.overall_score,
                prediction_method=ADMET_METHOD,
            ))
            response.prediction_id = prediction.id
            await record_activity(
                f"ADMET analysis completed for {drug.name} (overall {response.overall_score})",
                ActivityType.ADMET_ANALYSIS,
            )
        return response
    except Exception as e:
        logger.error(f"ADMET prediction error: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/screen/virtual", response_model=VirtualScreeningResponse)
async def screen_virtual(request: VirtualScreeningRequest):
    """
    Rank compounds against a target

    Screens the built-in library unless compounds are supplied.
    """
    if not request.target_id:
        raise HTTPException(status_code=400, detail="Target ID is required")
    if request.compounds is not None and not isinstance(request.compounds, list):
        raise HTTPException(status_code=400, detail="Compounds must be an array")

    compounds = None
    if request.compounds is not None:
        try:
            compounds = [
                ScreeningCompound.model_validate(c).model_dump() for c in request.compounds
            ]
        except ValidationError:
            raise HTTPException(status_code=400, detail="Each compound needs a SMILES string")

    top_n = request.top_n if request.top_n is not None else settings.default_screening_top_n
    if not 1 <= top_n <= MAX_SCREENING_RESULTS:
        raise HTTPException(
            status_code=400,
            detail=f"topN must be between 1 and {MAX_SCREENING_RESULTS}",
        )
    mode = request.mode or settings.default_screening_mode

    target = await storage.get_target(request.target_id)
    if target is None:
        raise HTTPException(status_code=404, detail="Target not found")

    try:
        results = await virtual_screening.screen(
            target_sequence(target),
            mode=mode,
            top_n=top_n,
            compounds=compounds,
        )
        await record_activity(
            f"Virtual screening completed against {target.name}: {len(results)} hits ({mode})",
            ActivityType.VIRTUAL_SCREENING,
        )
        return VirtualScreeningResponse.model_validate({"results": results})
    except Exception as e:
        logger.error(f"Virtual screening error: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/analyze/clinical-trial", response_model=ClinicalTrialAnalysisResponse)
async def analyze_clinical_trial(request: ClinicalTrialRequest):
    """Hazard ratio, p-value and recommendation for summary trial data"""
    if request.trial_data is None:
        raise HTTPException(status_code=400, detail="Trial data is required")
    if not isinstance(request.trial_data, dict):
        raise HTTPException(status_code=400, detail="Trial data must be an object")

    try:
        drug_id = request.drug_id or 0
        analysis = await clinical_trial_analyzer.analyze(
            drug_id,
            request.trial_data,
            comparator_id=request.comparator_id,
        )
        await record_activity(
            f"Clinical trial analysis completed for drug {drug_id}: HR {analysis['hazardRatio']}",
            ActivityType.CLINICAL_TRIAL_ANALYSIS,
        )
        return ClinicalTrialAnalysisResponse.model_validate(analysis)
    except Exception as e:
        logger.error(f"Clinical trial analysis error: {e}")
        raise HTTPException(status_code=500, detail=str(e))

"""
In-memory storage for the Drug Discovery Dashboard

Every entity lives in its own dict keyed by an auto-incrementing id. Nothing
survives a restart; the store is re-seeded with demonstration data on start.
"""
from datetime import datetime
from typing import Dict, List, Optional

from loguru import logger

from .config import settings
from .models import (
    User, UserInsert,
    Target, TargetInsert, TargetUpdate,
    Drug, DrugInsert, DrugUpdate,
    Interaction, InteractionInsert,
    AdmetPrediction, AdmetPredictionInsert,
    Project, ProjectInsert, ProjectUpdate,
    Activity, ActivityInsert,
)


class MemStorage:
    """Map-backed CRUD store for all dashboard entities"""

    def __init__(self, seed: bool = True):
        self._seed_enabled = seed
        self._clear()
        if seed:
            self._seed_data()

    def _clear(self):
        self.users: Dict[int, User] = {}
        self.targets: Dict[int, Target] = {}
        self.drugs: Dict[int, Drug] = {}
        self.interactions: Dict[int, Interaction] = {}
        self.admet_predictions: Dict[int, AdmetPrediction] = {}
        self.projects: Dict[int, Project] = {}
        self.activities: Dict[int, Activity] = {}

        # Next id per entity; ids are never reused
        self._next_ids: Dict[str, int] = {
            "user": 1,
            "target": 1,
            "drug": 1,
            "interaction": 1,
            "admet_prediction": 1,
            "project": 1,
            "activity": 1,
        }

    def _next_id(self, entity: str) -> int:
        entity_id = self._next_ids[entity]
        self._next_ids[entity] = entity_id + 1
        return entity_id

    @staticmethod
    def _merge(entity, update):
        """Apply the supplied fields and re-validate; raises ValidationError"""
        fields = {**entity.model_dump(), **update.model_dump(exclude_unset=True)}
        return type(entity).model_validate(fields)

    def reset(self):
        """Drop all data and counters, then re-seed if seeding is enabled"""
        self._clear()
        if self._seed_enabled:
            self._seed_data()
        logger.info("Storage reset")

    # ============= Users =============

    async def get_user(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.username == username), None)

    async def create_user(self, data: UserInsert) -> User:
        user = User(id=self._next_id("user"), **data.model_dump())
        self.users[user.id] = user
        return user

    # ============= Targets =============

    async def get_targets(self) -> List[Target]:
        return list(self.targets.values())

    async def get_target(self, target_id: int) -> Optional[Target]:
        return self.targets.get(target_id)

    async def create_target(self, data: TargetInsert) -> Target:
        target = Target(id=self._next_id("target"), created_at=datetime.utcnow(), **data.model_dump())
        self.targets[target.id] = target
        return target

    async def update_target(self, target_id: int, update: TargetUpdate) -> Optional[Target]:
        target = self.targets.get(target_id)
        if target is None:
            return None
        updated = self._merge(target, update)
        self.targets[target_id] = updated
        return updated

    async def delete_target(self, target_id: int) -> bool:
        return self.targets.pop(target_id, None) is not None

    # ============= Drugs =============

    async def get_drugs(self) -> List[Drug]:
        return list(self.drugs.values())

    async def get_drugs_by_target(self, target_id: int) -> List[Drug]:
        return [d for d in self.drugs.values() if d.target_id == target_id]

    async def get_drug(self, drug_id: int) -> Optional[Drug]:
        return self.drugs.get(drug_id)

    async def create_drug(self, data: DrugInsert) -> Drug:
        drug = Drug(id=self._next_id("drug"), created_at=datetime.utcnow(), **data.model_dump())
        self.drugs[drug.id] = drug
        return drug

    async def update_drug(self, drug_id: int, update: DrugUpdate) -> Optional[Drug]:
        drug = self.drugs.get(drug_id)
        if drug is None:
            return None
        updated = self._merge(drug, update)
        self.drugs[drug_id] = updated
        return updated

    async def delete_drug(self, drug_id: int) -> bool:
        return self.drugs.pop(drug_id, None) is not None

    # ============= Interactions =============

    async def get_interactions(self) -> List[Interaction]:
        return list(self.interactions.values())

    async def get_interaction(self, interaction_id: int) -> Optional[Interaction]:
        return self.interactions.get(interaction_id)

    async def get_interactions_by_drug(self, drug_id: int) -> List[Interaction]:
        return [i for i in self.interactions.values() if i.drug_id == drug_id]

    async def get_interactions_by_target(self, target_id: int) -> List[Interaction]:
        return [i for i in self.interactions.values() if i.target_id == target_id]

    async def create_interaction(self, data: InteractionInsert) -> Interaction:
        interaction = Interaction(
            id=self._next_id("interaction"), created_at=datetime.utcnow(), **data.model_dump()
        )
        self.interactions[interaction.id] = interaction
        return interaction

    # ============= ADMET predictions =============

    async def get_admet_predictions(self) -> List[AdmetPrediction]:
        return list(self.admet_predictions.values())

    async def get_admet_prediction(self, prediction_id: int) -> Optional[AdmetPrediction]:
        return self.admet_predictions.get(prediction_id)

    async def get_admet_prediction_by_drug(self, drug_id: int) -> Optional[AdmetPrediction]:
        """First prediction recorded for the drug"""
        return next((p for p in self.admet_predictions.values() if p.drug_id == drug_id), None)

    async def create_admet_prediction(self, data: AdmetPredictionInsert) -> AdmetPrediction:
        prediction = AdmetPrediction(
            id=self._next_id("admet_prediction"), created_at=datetime.utcnow(), **data.model_dump()
        )
        self.admet_predictions[prediction.id] = prediction
        return prediction

    # ============= Projects =============

    async def get_projects(self) -> List[Project]:
        return list(self.projects.values())

    async def get_project(self, project_id: int) -> Optional[Project]:
        return self.projects.get(project_id)

    async def create_project(self, data: ProjectInsert) -> Project:
        project = Project(id=self._next_id("project"), created_at=datetime.utcnow(), **data.model_dump())
        self.projects[project.id] = project
        return project

    async def update_project(self, project_id: int, update: ProjectUpdate) -> Optional[Project]:
        project = self.projects.get(project_id)
        if project is None:
            return None
        updated = self._merge(project, update)
        self.projects[project_id] = updated
        return updated

    # ============= Activities =============

    @staticmethod
    def _newest_first(activities: List[Activity]) -> List[Activity]:
        return sorted(activities, key=lambda a: (a.timestamp, a.id), reverse=True)

    async def get_activities(self) -> List[Activity]:
        return self._newest_first(list(self.activities.values()))

    async def get_activities_by_project(self, project_id: int) -> List[Activity]:
        return self._newest_first([a for a in self.activities.values() if a.project_id == project_id])

    async def create_activity(self, data: ActivityInsert) -> Activity:
        activity = Activity(id=self._next_id("activity"), timestamp=datetime.utcnow(), **data.model_dump())
        self.activities[activity.id] = activity
        return activity

    # ============= Seed data =============

    def _seed_data(self):
        """Demonstration data for a fresh process"""
        now = datetime.utcnow()

        def add(collection: Dict, entity_key: str, model, **fields):
            entity_id = self._next_id(entity_key)
            collection[entity_id] = model(id=entity_id, **fields)

        add(self.users, "user", User,
            username="researcher", password="password123",
            name="Dr. Jane Doe", role="Research Scientist")

        add(self.projects, "project", Project, created_at=now,
            name="Anti-Inflammatory Target Discovery",
            description="Research project focused on finding novel anti-inflammatory targets",
            status="In Progress")

        add(self.targets, "target", Target, created_at=now,
            name="TNF-α Receptor (TNFR1)",
            description="Tumor Necrosis Factor Receptor Type 1",
            uniprot_id="P19438", gene_name="TNFRSF1A",
            confidence=94, druggability_score=85,
            molecular_weight="50 kDa", subcellular_location="Cell membrane",
            publication_count=245, pathway_count=12, existing_drug_count=6,
            evidence_summary=(
                "TNFR1 is strongly associated with inflammatory processes across 245 publications. "
                "Key experimental validations include: Knockout studies in mouse models (n=18), "
                "Human genetic association studies (n=42), Expression analysis in disease tissues (n=73)"
            ))
        add(self.targets, "target", Target, created_at=now,
            name="IL-6 Receptor",
            description="Interleukin-6 Receptor Subunit Alpha",
            uniprot_id="P08887", gene_name="IL6R",
            confidence=89, druggability_score=80,
            molecular_weight="48 kDa", subcellular_location="Cell membrane",
            publication_count=178, pathway_count=8, existing_drug_count=4,
            evidence_summary="IL-6 receptor is involved in inflammatory signaling cascades")
        add(self.targets, "target", Target, created_at=now,
            name="JAK2 Kinase",
            description="Janus Kinase 2",
            uniprot_id="O60674", gene_name="JAK2",
            confidence=76, druggability_score=75,
            molecular_weight="130 kDa", subcellular_location="Cytoplasm",
            publication_count=132, pathway_count=9, existing_drug_count=3,
            evidence_summary="JAK2 plays a crucial role in cytokine receptor signaling")

        add(self.drugs, "drug", Drug, created_at=now,
            name="TNF-23", smiles="CC1=CC=C(C=C1)NC(=O)NC2=CC=CC=C2F",
            target_id=1, status="lead",
            properties={"mw": 244.25, "logP": 3.2, "hDonors": 2, "hAcceptors": 2})
        add(self.drugs, "drug", Drug, created_at=now,
            name="IL6R-12", smiles="COC1=CC=C(C=C1)CN2C=NC3=CC=CC=C32",
            target_id=2, status="generated",
            properties={"mw": 264.32, "logP": 3.5, "hDonors": 0, "hAcceptors": 2})

        add(self.interactions, "interaction", Interaction, created_at=now,
            drug_id=1, target_id=1, score=85, confidence=92, prediction_method="SVM")
        add(self.interactions, "interaction", Interaction, created_at=now,
            drug_id=2, target_id=2, score=72, confidence=83, prediction_method="Random Forest")

        add(self.admet_predictions, "admet_prediction", AdmetPrediction, created_at=now,
            drug_id=1, absorption=75, distribution=68, metabolism=45, excretion=82,
            toxicity=32, overall_score=65, prediction_method="XGBoost")
        add(self.admet_predictions, "admet_prediction", AdmetPrediction, created_at=now,
            drug_id=2, absorption=88, distribution=72, metabolism=65, excretion=77,
            toxicity=18, overall_score=78, prediction_method="Neural Network")

        for description, activity_type in [
            ("New target identified: JAK2 Kinase", "target_identification"),
            ("Drug generation completed", "drug_generation"),
            ("ADMET analysis flagged compound TNF-23", "admet_analysis"),
            ("Virtual screening completed", "virtual_screening"),
        ]:
            add(self.activities, "activity", Activity, timestamp=now,
                project_id=1, description=description, activity_type=activity_type)

        logger.info(
            f"Seeded storage: {len(self.targets)} targets, {len(self.drugs)} drugs, "
            f"{len(self.activities)} activities"
        )


storage = MemStorage(seed=settings.seed_data)

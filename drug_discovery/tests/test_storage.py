"""
Tests for the in-memory store
"""
import pytest
from pydantic import ValidationError

from drug_discovery.models import (
    ActivityInsert,
    DrugInsert,
    DrugUpdate,
    ProjectInsert,
    ProjectUpdate,
    TargetInsert,
    TargetUpdate,
    UserInsert,
)
from drug_discovery.storage import MemStorage


class TestSeedData:

    @pytest.mark.asyncio
    async def test_seed_counts(self, store):
        assert len(await store.get_targets()) == 3
        assert len(await store.get_drugs()) == 2
        assert len(await store.get_interactions()) == 2
        assert len(await store.get_admet_predictions()) == 2
        assert len(await store.get_projects()) == 1
        assert len(await store.get_activities()) == 4

    @pytest.mark.asyncio
    async def test_seeded_user(self, store):
        user = await store.get_user_by_username("researcher")
        assert user is not None
        assert user.id == 1
        assert user.name == "Dr. Jane Doe"

    @pytest.mark.asyncio
    async def test_seeded_target(self, store):
        target = await store.get_target(1)
        assert target.name == "TNF-α Receptor (TNFR1)"
        assert target.uniprot_id == "P19438"

    @pytest.mark.asyncio
    async def test_unseeded_store_is_empty(self):
        store = MemStorage(seed=False)
        assert await store.get_targets() == []
        assert await store.get_projects() == []

    @pytest.mark.asyncio
    async def test_reset_restores_seed(self, store):
        await store.delete_target(1)
        await store.create_drug(DrugInsert(name="X-1", smiles="CCO"))
        store.reset()
        assert len(await store.get_targets()) == 3
        assert len(await store.get_drugs()) == 2
        created = await store.create_target(TargetInsert(name="BTK"))
        assert created.id == 4


class TestTargets:

    @pytest.mark.asyncio
    async def test_create_assigns_next_id(self, store):
        target = await store.create_target(TargetInsert(name="BTK", gene_name="BTK"))
        assert target.id == 4
        assert target.created_at is not None
        assert await store.get_target(4) == target

    @pytest.mark.asyncio
    async def test_ids_are_not_reused(self, store):
        assert await store.delete_target(3)
        target = await store.create_target(TargetInsert(name="BTK"))
        assert target.id == 4

    @pytest.mark.asyncio
    async def test_partial_update(self, store):
        updated = await store.update_target(1, TargetUpdate(confidence=99))
        assert updated.confidence == 99
        assert updated.name == "TNF-α Receptor (TNFR1)"
        assert updated.uniprot_id == "P19438"

    @pytest.mark.asyncio
    async def test_update_cannot_null_required_field(self, store):
        with pytest.raises(ValidationError):
            await store.update_target(1, TargetUpdate(name=None))
        assert (await store.get_target(1)).name == "TNF-α Receptor (TNFR1)"

    @pytest.mark.asyncio
    async def test_update_missing(self, store):
        assert await store.update_target(99, TargetUpdate(name="Nope")) is None

    @pytest.mark.asyncio
    async def test_delete(self, store):
        assert await store.delete_target(2)
        assert await store.get_target(2) is None
        assert not await store.delete_target(2)


class TestDrugsAndPredictions:

    @pytest.mark.asyncio
    async def test_drug_update_keeps_smiles_required(self, store):
        with pytest.raises(ValidationError):
            await store.update_drug(1, DrugUpdate(smiles=None))
        drug = await store.get_drug(1)
        assert drug.smiles == "CC1=CC=C(C=C1)NC(=O)NC2=CC=CC=C2F"

        updated = await store.update_drug(1, DrugUpdate(status="optimized"))
        assert updated.status == "optimized"
        assert updated.smiles == drug.smiles

    @pytest.mark.asyncio
    async def test_drugs_by_target(self, store):
        drugs = await store.get_drugs_by_target(1)
        assert [d.name for d in drugs] == ["TNF-23"]
        assert await store.get_drugs_by_target(3) == []

    @pytest.mark.asyncio
    async def test_interactions_by_drug_and_target(self, store):
        assert [i.id for i in await store.get_interactions_by_drug(2)] == [2]
        assert [i.id for i in await store.get_interactions_by_target(1)] == [1]

    @pytest.mark.asyncio
    async def test_admet_prediction_by_drug(self, store):
        prediction = await store.get_admet_prediction_by_drug(1)
        assert prediction.overall_score == 65
        assert prediction.prediction_method == "XGBoost"
        assert await store.get_admet_prediction_by_drug(99) is None


class TestProjectsAndActivities:

    @pytest.mark.asyncio
    async def test_project_default_status(self, store):
        project = await store.create_project(ProjectInsert(name="Oncology"))
        assert project.status == "active"
        assert project.id == 2

    @pytest.mark.asyncio
    async def test_project_update(self, store):
        project = await store.update_project(1, ProjectUpdate(status="Completed"))
        assert project.status == "Completed"
        assert project.name == "Anti-Inflammatory Target Discovery"

    @pytest.mark.asyncio
    async def test_activities_newest_first(self, store):
        # Seeded activities share a timestamp, so id breaks the tie
        assert [a.id for a in await store.get_activities()] == [4, 3, 2, 1]

        activity = await store.create_activity(ActivityInsert(
            project_id=1, description="Lead optimisation started", activity_type="drug_generation"
        ))
        activities = await store.get_activities_by_project(1)
        assert activities[0].id == activity.id
        assert len(activities) == 5

    @pytest.mark.asyncio
    async def test_activities_by_project(self, store):
        await store.create_activity(ActivityInsert(description="Unassigned", activity_type="virtual_screening"))
        assert len(await store.get_activities_by_project(1)) == 4
        assert len(await store.get_activities()) == 5


class TestUsers:

    @pytest.mark.asyncio
    async def test_create_user(self, store):
        user = await store.create_user(UserInsert(username="chemist", password="secret"))
        assert user.id == 2
        assert await store.get_user(2) == user
        assert await store.get_user_by_username("chemist") == user

    @pytest.mark.asyncio
    async def test_unknown_user(self, store):
        assert await store.get_user(99) is None
        assert await store.get_user_by_username("nobody") is None

"""
HTTP tests for the dashboard API

Each test starts from the seeded store (see the client fixture).
"""
from drug_discovery.services.clinical_trial_analyzer import RECOMMENDATIONS
from drug_discovery.services.virtual_screening import COMPOUND_LIBRARY

SEEDED_TARGETS = {"TNF-α Receptor (TNFR1)", "IL-6 Receptor", "JAK2 Kinase"}


class TestServiceEndpoints:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Drug Discovery Dashboard"
        assert data["endpoints"]["dashboard"] == "/api/dashboard"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_dashboard_summary(self, client):
        data = client.get("/api/dashboard").json()
        assert data["project"]["name"] == "Anti-Inflammatory Target Discovery"
        assert data["counts"] == {
            "targets": 3,
            "drugs": 2,
            "leads": 1,
            "interactions": 2,
            "admetPredictions": 2,
        }
        assert [a["id"] for a in data["recentActivities"]] == [4, 3, 2, 1]


class TestUserEndpoints:

    def test_create_user_hides_password(self, client):
        response = client.post("/api/users", json={"username": "chemist", "password": "secret", "name": "Sam"})
        assert response.status_code == 201
        data = response.json()
        assert data["id"] == 2
        assert data["username"] == "chemist"
        assert "password" not in data

    def test_duplicate_username(self, client):
        response = client.post("/api/users", json={"username": "researcher", "password": "x"})
        assert response.status_code == 409

    def test_get_user(self, client):
        data = client.get("/api/users/1").json()
        assert data["username"] == "researcher"
        assert data["role"] == "Research Scientist"
        assert "password" not in data
        assert client.get("/api/users/99").status_code == 404


class TestTargetEndpoints:

    def test_list_uses_camel_case(self, client):
        targets = client.get("/api/targets").json()
        assert {t["name"] for t in targets} == SEEDED_TARGETS
        assert targets[0]["uniprotId"] == "P19438"
        assert "createdAt" in targets[0]
        assert "druggabilityScore" in targets[0]

    def test_get_missing(self, client):
        response = client.get("/api/targets/99")
        assert response.status_code == 404
        assert response.json()["detail"] == "Target not found"

    def test_create(self, client):
        response = client.post("/api/targets", json={"name": "BTK", "geneName": "BTK", "confidence": 81})
        assert response.status_code == 201
        data = response.json()
        assert data["id"] == 4
        assert data["geneName"] == "BTK"
        assert client.get("/api/targets/4").json()["confidence"] == 81

    def test_create_requires_name(self, client):
        assert client.post("/api/targets", json={"geneName": "BTK"}).status_code == 422

    def test_partial_update(self, client):
        response = client.put("/api/targets/1", json={"confidence": 99})
        assert response.status_code == 200
        data = response.json()
        assert data["confidence"] == 99
        assert data["geneName"] == "TNFRSF1A"

    def test_update_missing(self, client):
        assert client.put("/api/targets/99", json={"confidence": 1}).status_code == 404

    def test_update_cannot_null_name(self, client):
        response = client.put("/api/targets/1", json={"name": None})
        assert response.status_code == 422
        assert client.get("/api/targets/1").json()["name"] == "TNF-α Receptor (TNFR1)"

    def test_delete(self, client):
        response = client.delete("/api/targets/3")
        assert response.status_code == 204
        assert client.get("/api/targets/3").status_code == 404
        assert client.delete("/api/targets/3").status_code == 404

    def test_target_drugs_and_interactions(self, client):
        drugs = client.get("/api/targets/1/drugs").json()
        assert [d["name"] for d in drugs] == ["TNF-23"]
        interactions = client.get("/api/targets/2/interactions").json()
        assert [i["predictionMethod"] for i in interactions] == ["Random Forest"]


class TestDrugEndpoints:

    def test_list_and_get(self, client):
        assert len(client.get("/api/drugs").json()) == 2
        drug = client.get("/api/drugs/1").json()
        assert drug["status"] == "lead"
        assert drug["targetId"] == 1
        assert drug["properties"]["logP"] == 3.2

    def test_create_update_delete(self, client):
        created = client.post("/api/drugs", json={"name": "JAK-7", "smiles": "CCN", "targetId": 3})
        assert created.status_code == 201
        drug_id = created.json()["id"]
        assert drug_id == 3

        updated = client.put(f"/api/drugs/{drug_id}", json={"status": "optimized"})
        assert updated.json()["status"] == "optimized"
        assert updated.json()["smiles"] == "CCN"

        assert client.delete(f"/api/drugs/{drug_id}").status_code == 204
        assert client.get(f"/api/drugs/{drug_id}").status_code == 404

    def test_create_requires_smiles(self, client):
        assert client.post("/api/drugs", json={"name": "JAK-7"}).status_code == 422

    def test_update_cannot_null_smiles(self, client):
        assert client.put("/api/drugs/1", json={"smiles": None}).status_code == 422
        assert client.put("/api/projects/1", json={"name": None}).status_code == 422

        response = client.post("/api/predict/admet", json={"drugId": 1})
        assert response.status_code == 200
        assert response.json()["predictionId"] == 3

    def test_drug_interactions(self, client):
        interactions = client.get("/api/drugs/1/interactions").json()
        assert [i["score"] for i in interactions] == [85]

    def test_drug_admet_prediction(self, client):
        prediction = client.get("/api/drugs/2/admet-prediction").json()
        assert prediction["overallScore"] == 78
        assert prediction["predictionMethod"] == "Neural Network"
        assert client.get("/api/drugs/99/admet-prediction").status_code == 404


class TestRecordEndpoints:

    def test_interactions(self, client):
        response = client.post("/api/interactions", json={"drugId": 2, "targetId": 1, "score": 40})
        assert response.status_code == 201
        assert response.json()["id"] == 3
        assert len(client.get("/api/interactions").json()) == 3

    def test_admet_predictions(self, client):
        response = client.post("/api/admet-predictions", json={"drugId": 2, "toxicity": 10})
        assert response.status_code == 201
        assert len(client.get("/api/admet-predictions").json()) == 3

    def test_projects(self, client):
        assert client.get("/api/projects/1").json()["status"] == "In Progress"
        created = client.post("/api/projects", json={"name": "Oncology"})
        assert created.status_code == 201
        assert created.json()["status"] == "active"

        updated = client.put("/api/projects/2", json={"description": "Kinase programme"})
        assert updated.json()["description"] == "Kinase programme"
        assert updated.json()["name"] == "Oncology"
        assert client.get("/api/projects/99").status_code == 404

    def test_activities(self, client):
        response = client.post(
            "/api/activities",
            json={"projectId": 1, "description": "Hit expansion", "activityType": "drug_generation"},
        )
        assert response.status_code == 201
        activities = client.get("/api/projects/1/activities").json()
        assert activities[0]["description"] == "Hit expansion"
        assert len(client.get("/api/activities").json()) == 5


class TestTargetValidation:

    def test_query_required(self, client):
        response = client.post("/api/nlp/validate-target", json={"query": "  "})
        assert response.status_code == 400
        assert response.json()["detail"] == "Query is required"

    def test_validate(self, client):
        response = client.post(
            "/api/nlp/validate-target",
            json={"query": "JAK2 inhibition in rheumatoid arthritis", "disease": "rheumatoid arthritis"},
        )
        assert response.status_code == 200
        data = response.json()
        assert 70 <= data["confidence"] <= 99
        assert data["relevantPublications"] >= 50
        assert {s["name"] for s in data["suggestedTargets"]} <= SEEDED_TARGETS
        assert len(data["suggestedTargets"]) == 3

        latest = client.get("/api/activities").json()[0]
        assert latest["activityType"] == "target_validation"


class TestDrugGeneration:

    def test_target_required(self, client):
        response = client.post("/api/generate/drug", json={"parameters": {}})
        assert response.status_code == 400
        assert response.json()["detail"] == "Target ID is required"

    def test_count_bounds(self, client):
        response = client.post("/api/generate/drug", json={"targetId": 1, "parameters": {"count": 21}})
        assert response.status_code == 400
        response = client.post("/api/generate/drug", json={"targetId": 1, "parameters": {"count": 0}})
        assert response.status_code == 400

    def test_generate_persists_drugs(self, client):
        response = client.post(
            "/api/generate/drug",
            json={"targetId": 2, "parameters": {"count": 3, "novelty": 70}},
        )
        assert response.status_code == 200
        generated = response.json()["generatedDrugs"]
        assert [g["score"] for g in generated] == [0.63, 0.62, 0.61]
        assert [g["drugId"] for g in generated] == [3, 4, 5]

        stored = client.get("/api/drugs/3").json()
        assert stored["status"] == "generated"
        assert stored["targetId"] == 2
        assert stored["properties"] == {"score": 0.63, "novelty": 70}

        counts = client.get("/api/dashboard").json()["counts"]
        assert counts["drugs"] == 5
        assert counts["leads"] == 1
        assert client.get("/api/activities").json()[0]["activityType"] == "drug_generation"

    def test_default_count(self, client):
        generated = client.post("/api/generate/drug", json={"targetId": 1}).json()["generatedDrugs"]
        assert len(generated) == 5


class TestInteractionPrediction:

    def test_ids_required(self, client):
        response = client.post("/api/predict/interaction", json={"drugId": 1})
        assert response.status_code == 400
        assert response.json()["detail"] == "Drug ID and Target ID are required"

    def test_missing_entities(self, client):
        assert client.post("/api/predict/interaction", json={"drugId": 99, "targetId": 1}).status_code == 404
        assert client.post("/api/predict/interaction", json={"drugId": 1, "targetId": 99}).status_code == 404

    def test_predict_persists_interaction(self, client):
        response = client.post("/api/predict/interaction", json={"drugId": 1, "targetId": 3})
        assert response.status_code == 200
        data = response.json()
        assert 0 <= data["score"] <= 100
        assert 0 <= data["confidence"] <= 100
        assert 2 <= len(data["bindingSites"]) <= 4
        assert data["interactionId"] == 3

        interactions = client.get("/api/targets/3/interactions").json()
        assert len(interactions) == 1
        assert interactions[0]["score"] == data["score"]
        assert interactions[0]["predictionMethod"] == "Ensemble (RF+SVM)"

    def test_deterministic(self, client):
        first = client.post("/api/predict/interaction", json={"drugId": 2, "targetId": 2}).json()
        second = client.post("/api/predict/interaction", json={"drugId": 2, "targetId": 2}).json()
        assert first["score"] == second["score"]
        assert first["bindingSites"] == second["bindingSites"]


class TestAdmetPrediction:

    def test_smiles_required(self, client):
        response = client.post("/api/predict/admet", json={})
        assert response.status_code == 400
        assert response.json()["detail"] == "SMILES string is required"

    def test_predict_without_drug(self, client):
        response = client.post("/api/predict/admet", json={"smiles": "CC(=O)OC1=CC=CC=C1C(=O)O"})
        assert response.status_code == 200
        data = response.json()
        for key in ["absorption", "distribution", "metabolism", "excretion", "toxicity", "overallScore"]:
            assert 0 <= data[key] <= 100
        assert data["predictionId"] is None
        assert len(client.get("/api/admet-predictions").json()) == 2

    def test_predict_for_stored_drug(self, client):
        drug = client.get("/api/drugs/2").json()
        by_smiles = client.post("/api/predict/admet", json={"smiles": drug["smiles"]}).json()
        by_drug = client.post("/api/predict/admet", json={"drugId": 2}).json()

        assert by_drug["predictionId"] == 3
        assert by_drug["overallScore"] == by_smiles["overallScore"]
        stored = client.get("/api/admet-predictions").json()[-1]
        assert stored["drugId"] == 2
        assert stored["predictionMethod"] == "Gradient Boosting"
        assert client.get("/api/activities").json()[0]["activityType"] == "admet_analysis"

    def test_missing_drug(self, client):
        assert client.post("/api/predict/admet", json={"drugId": 99}).status_code == 404


class TestVirtualScreening:

    def test_target_required(self, client):
        response = client.post("/api/screen/virtual", json={})
        assert response.status_code == 400
        assert response.json()["detail"] == "Target ID is required"

    def test_compounds_must_be_a_list(self, client):
        response = client.post("/api/screen/virtual", json={"targetId": 1, "compounds": "CCO"})
        assert response.status_code == 400
        response = client.post("/api/screen/virtual", json={"targetId": 1, "compounds": [{"name": "No SMILES"}]})
        assert response.status_code == 400

    def test_top_n_bounds(self, client):
        assert client.post("/api/screen/virtual", json={"targetId": 1, "topN": 0}).status_code == 400
        assert client.post("/api/screen/virtual", json={"targetId": 1, "topN": 101}).status_code == 400

    def test_missing_target(self, client):
        assert client.post("/api/screen/virtual", json={"targetId": 99}).status_code == 404

    def test_screen_library(self, client):
        response = client.post("/api/screen/virtual", json={"targetId": 1})
        assert response.status_code == 200
        results = response.json()["results"]
        assert len(results) == 10
        scores = [r["score"] for r in results]
        assert scores == sorted(scores, reverse=True)
        assert {r["name"] for r in results} <= {c["name"] for c in COMPOUND_LIBRARY}
        assert client.get("/api/activities").json()[0]["activityType"] == "virtual_screening"

    def test_screen_custom_compounds(self, client):
        response = client.post(
            "/api/screen/virtual",
            json={
                "targetId": 2,
                "mode": "similarity",
                "topN": 1,
                "compounds": [{"name": "Probe A", "smiles": "CCO"}, {"smiles": "CCN"}],
            },
        )
        results = response.json()["results"]
        assert len(results) == 1
        assert results[0]["name"] in ("Probe A", "Compound 2")


class TestClinicalTrialAnalysis:

    def test_trial_data_required(self, client):
        response = client.post("/api/analyze/clinical-trial", json={"drugId": 1})
        assert response.status_code == 400
        assert response.json()["detail"] == "Trial data is required"

    def test_trial_data_must_be_object(self, client):
        response = client.post("/api/analyze/clinical-trial", json={"trialData": [1, 2, 3]})
        assert response.status_code == 400

    def test_negative_ids_rejected(self, client):
        trial = {"trialData": {"sampleSize": 100}}
        assert client.post("/api/analyze/clinical-trial", json={**trial, "drugId": -1}).status_code == 422
        assert client.post("/api/analyze/clinical-trial", json={**trial, "comparatorId": -3}).status_code == 422

    def test_analyze(self, client):
        response = client.post(
            "/api/analyze/clinical-trial",
            json={"drugId": 1, "trialData": {"sampleSize": 240, "duration": 26, "eventRate": 0.3}},
        )
        assert response.status_code == 200
        data = response.json()
        assert float(data["hazardRatio"]) > 0
        assert 0.001 <= float(data["pValue"]) <= 0.2
        lower, upper = (float(v) for v in data["confidenceInterval"])
        assert lower <= upper
        assert data["recommendation"] in RECOMMENDATIONS.values()

    def test_drug_id_defaults_to_zero(self, client):
        trial = {"trialData": {"sampleSize": 100}}
        assert client.post("/api/analyze/clinical-trial", json=trial).json() == \
            client.post("/api/analyze/clinical-trial", json={**trial, "drugId": 0}).json()

"""
Tests for the Tiger HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from core.errors import ProviderError
from services.api import create_app

from conftest import BASIC_ANALYSIS, IMAGE_PROMPTS, REJECTED_VERDICT, fenced, text_provider, video_provider


@pytest.fixture
def make_client(build_pipeline):
    clients = []

    def _make(**overrides):
        pipeline = build_pipeline(**overrides)
        client = TestClient(create_app(pipeline))
        client.__enter__()
        clients.append(client)
        return client, pipeline

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


class TestHealth:

    def test_health(self, make_client):
        client, _ = make_client()
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["episodes_in_memory"] == 0

    def test_root_lists_endpoints(self, make_client):
        client, _ = make_client()
        endpoints = client.get("/").json()["endpoints"]
        assert "POST /api/tiger/generate-episode" in endpoints

    def test_status(self, make_client):
        client, _ = make_client()
        response = client.get("/api/tiger/status")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["services"]["trueCrime"] == "operational"
        assert data["episodesInMemory"] == 0
        assert "timestamp" in data


class TestGenerateEpisode:

    def test_success(self, make_client, sample_script):
        client, pipeline = make_client()

        response = client.post(
            "/api/tiger/generate-episode",
            json={"script": sample_script, "platform": "youtube", "userId": "user-7"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        data = body["data"]
        assert data["userId"] == "user-7"
        assert data["assets"]["images"]["totalImages"] == 5
        assert data["assets"]["video"]["videoUrl"] == "https://videos.example.com/episode.mp4"

        fetched = client.get(f"/api/tiger/episode/{data['episodeId']}")
        assert fetched.status_code == 200
        assert fetched.json()["data"]["episodeId"] == data["episodeId"]
        assert client.get("/health").json()["episodes_in_memory"] == 1

    def test_missing_script(self, make_client):
        client, pipeline = make_client()

        response = client.post("/api/tiger/generate-episode", json={"platform": "youtube"})

        assert response.status_code == 400
        assert response.json() == {"error": "Script is required"}
        pipeline.stubs["advanced"].complete.assert_not_called()

    def test_blank_script(self, make_client):
        client, _ = make_client()
        response = client.post("/api/tiger/generate-episode", json={"script": "   "})
        assert response.status_code == 400
        assert response.json()["error"] == "Script is required"

    def test_unknown_platform(self, make_client, sample_script):
        client, pipeline = make_client()

        response = client.post("/api/tiger/generate-episode", json={"script": sample_script, "platform": "myspace"})

        assert response.status_code == 400
        assert response.json()["reasonCode"] == "UNSUPPORTED_PLATFORM"
        pipeline.stubs["images"].generate_image.assert_not_called()

    def test_platform_is_trimmed_and_lowercased(self, make_client, sample_script):
        client, pipeline = make_client()

        response = client.post("/api/tiger/generate-episode", json={"script": sample_script, "platform": " TikTok "})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["platform"] == "tiktok"
        assert data["assets"]["video"]["platform"] == "tiktok"
        payload = pipeline.stubs["video"].submit_task.call_args.args[0]
        assert payload["ratio"] == "720:1280"

    def test_compliance_rejection(self, make_client, sample_script):
        video = video_provider()
        client, _ = make_client(compliance=text_provider(fenced(REJECTED_VERDICT)), video=video)

        response = client.post("/api/tiger/generate-episode", json={"script": sample_script})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Content failed compliance check"
        assert body["compliance"]["overallCompliance"] == "fail"
        assert body["suggestions"] == REJECTED_VERDICT["alternativeApproaches"]
        video.submit_task.assert_not_called()

    def test_stage_failure(self, make_client, sample_script):
        video = video_provider()
        video.submit_task.side_effect = ProviderError("unauthorized", reason_code="HTTP_401", provider="runway")
        client, _ = make_client(video=video)

        response = client.post("/api/tiger/generate-episode", json={"script": sample_script})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Episode generation failed"
        assert body["stage"] == "video"
        assert body["reasonCode"] == "HTTP_401"
        assert "compliance" in body["partial"]

    def test_unknown_episode(self, make_client):
        client, _ = make_client()
        response = client.get("/api/tiger/episode/tiger_0_missing")
        assert response.status_code == 404
        assert response.json()["detail"] == "Episode not found"


class TestSingleStageEndpoints:

    def test_generate_images(self, make_client, sample_script):
        client, _ = make_client()

        response = client.post("/api/tiger/generate-images", json={"script": sample_script})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["metadata"]["totalImages"] == 5
        assert data["metadata"]["format"] == "true_crime_polaroid_set"
        assert len(data["portraits"]) == 3

    def test_generate_images_analysis_failure(self, make_client, sample_script):
        client, _ = make_client(basic=text_provider("no structure here"))

        response = client.post("/api/tiger/generate-images", json={"script": sample_script})

        assert response.status_code == 500
        assert response.json()["error"] == "Image generation failed"
        assert response.json()["reasonCode"] == "MALFORMED_JSON"

    def test_analyze_script(self, make_client, sample_script):
        client, _ = make_client()

        response = client.post("/api/tiger/analyze-script", json={"script": sample_script})

        assert response.status_code == 200
        assert set(response.json()["data"]) == {"claude", "basic", "synthesis"}

    def test_generate_video(self, make_client, sample_script):
        client, pipeline = make_client()
        image_set = {
            "analysis": BASIC_ANALYSIS,
            "thumbnail": {"url": "https://img/thumb.png", "type": "youtube_thumbnail", "prompt": "t"},
            "portraits": [],
            "metadata": {"totalImages": 1},
        }

        response = client.post(
            "/api/tiger/generate-video",
            json={"script": sample_script, "imageSet": image_set, "platform": "tiktok"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["platform"] == "tiktok"
        assert data["specifications"]["aspectRatio"] == "9:16"
        assert pipeline.stubs["video"].submit_task.call_args.args[0]["promptImage"] == "https://img/thumb.png"

    def test_check_compliance(self, make_client, sample_script):
        client, pipeline = make_client()

        response = client.post(
            "/api/tiger/check-compliance",
            json={"script": sample_script, "imageDescriptions": ["victim portrait of Sarah Mitchell"]},
        )

        assert response.status_code == 200
        assert response.json()["data"]["overallCompliance"] == "pass"
        prompt = pipeline.stubs["compliance"].complete.call_args.args[0]
        assert "victim portrait of Sarah Mitchell" in prompt

    def test_multiplatform_rejected(self, make_client, sample_script):
        client, _ = make_client(compliance=text_provider(fenced(REJECTED_VERDICT)))

        response = client.post("/api/tiger/generate-multiplatform", json={"script": sample_script})

        assert response.status_code == 400
        assert response.json()["error"] == "Content failed compliance check"

    def test_multiplatform_unknown_platform(self, make_client, sample_script):
        client, _ = make_client()

        response = client.post(
            "/api/tiger/generate-multiplatform",
            json={"script": sample_script, "platforms": ["youtube", "vine"]},
        )

        assert response.status_code == 400
        assert response.json()["reasonCode"] == "UNSUPPORTED_PLATFORM"

    def test_plan_series(self, make_client, sample_script):
        plan = {"seriesOverview": {"theme": "Unsolved"}, "episodes": [{"episodeNumber": 1, "title": "Pilot"}]}
        client, _ = make_client(series=text_provider(fenced(plan)))

        response = client.post(
            "/api/tiger/plan-series", json={"script": sample_script, "seriesGoals": {"episodes": 3}}
        )

        assert response.status_code == 200
        assert response.json()["data"]["episodes"][0]["title"] == "Pilot"

    def test_optimize_script(self, make_client, sample_script):
        client, pipeline = make_client()

        response = client.post(
            "/api/tiger/optimize-script",
            json={"script": sample_script, "platform": "Shorts", "targetLength": 30},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["timing"]["segments"][0]["visualCue"] == "Rain on a parking garage entrance"
        assert "Target Length: 30 seconds" in pipeline.stubs["optimizer"].complete.call_args.args[0]

    def test_optimize_script_rejects_non_positive_length(self, make_client, sample_script):
        client, pipeline = make_client()

        response = client.post("/api/tiger/optimize-script", json={"script": sample_script, "targetLength": 0})

        assert response.status_code == 400
        pipeline.stubs["optimizer"].complete.assert_not_called()

    def test_optimize_image_prompts(self, make_client, sample_script):
        client, _ = make_client(optimizer=text_provider(fenced(IMAGE_PROMPTS)))

        response = client.post("/api/tiger/optimize-image-prompts", json={"script": sample_script})

        assert response.status_code == 200
        assert response.json()["data"]["characterPrompts"][0]["character"] == "Sarah Mitchell"

    def test_optimize_images(self, make_client):
        client, _ = make_client()
        image_set = {
            "analysis": BASIC_ANALYSIS,
            "thumbnail": {"url": "https://img/thumb.png", "type": "youtube_thumbnail", "prompt": "t"},
            "metadata": {"totalImages": 1},
        }

        response = client.post("/api/tiger/optimize-images", json={"imageSet": image_set, "platform": "instagram"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["platform"] == "instagram"
        assert data["specifications"] == {"width": 1080, "height": 1080, "aspectRatio": "1:1"}
        assert data["optimizationRequired"] is True

    def test_optimize_images_unknown_platform(self, make_client):
        client, _ = make_client()
        image_set = {"analysis": BASIC_ANALYSIS, "metadata": {"totalImages": 0}}

        response = client.post("/api/tiger/optimize-images", json={"imageSet": image_set, "platform": "vine"})

        assert response.status_code == 400
        assert response.json()["reasonCode"] == "UNSUPPORTED_PLATFORM"

    def test_invalid_body_shape(self, make_client, sample_script):
        client, _ = make_client()

        response = client.post("/api/tiger/generate-video", json={"script": sample_script})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"
        assert "imageSet" in response.json()["message"] or "image_set" in response.json()["message"]

"""
Integration tests for API endpoints.
Tests the upload -> validate flow and the registry endpoints.
"""
import pytest
from PIL import Image


@pytest.fixture
def asset_payload():
    """A clean 300x250 JPG as the client would send it."""
    return {
        "name": "promo.jpg",
        "dimensions": "300x250",
        "size_kb": 80,
        "file_format": "jpg",
        "color_space": "RGB",
        "color_space_valid": True,
        "folder_path": "Campaign"
    }


class TestHealthEndpoint:
    """Tests for health check endpoint."""

    def test_health_check(self, client):
        """Test health check returns healthy status."""
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data
        assert data["services"]["networks"] == 6
        assert "registry_version" in data["services"]

    def test_api_info(self, client):
        response = client.get("/api/info")
        assert response.status_code == 200
        assert "validate" in response.json()["endpoints"]


class TestSpecsEndpoints:
    """Tests for registry endpoints."""

    def test_list_specs(self, client):
        response = client.get("/specs")
        assert response.status_code == 200
        data = response.json()
        assert set(data["networks"]) == {
            "ADFORM", "SOS", "ONEGAR", "SKLIK", "HP_EXCLUSIVE", "GOOGLE_ADS"
        }
        assert data["networks"]["SOS"]["spincube"]["multi_file"]["required_count"] == 4

    def test_network_specs_case_insensitive(self, client):
        response = client.get("/specs/sklik")
        assert response.status_code == 200
        assert response.json()["network"] == "SKLIK"
        assert "leaderboard-middle" in response.json()["placements"]

    def test_unknown_network(self, client):
        response = client.get("/specs/facebook")
        assert response.status_code == 404

    def test_allowlist(self, client):
        response = client.get("/specs/formats/allowlist")
        assert response.status_code == 200
        allowlist = response.json()["allowlist"]
        assert allowlist["spincube"] == ["SOS"]
        assert allowlist["social-media"] == []


class TestValidateEndpoints:
    """Tests for validation endpoints."""

    def test_match(self, client, asset_payload):
        response = client.post("/validate/match", json={"asset": asset_payload, "network": "ADFORM"})
        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["placement_key"] == "sponzor-sluzby"
        assert data[0]["size_valid"] is True

    def test_placement(self, client, asset_payload):
        asset_payload["size_kb"] = 200
        response = client.post("/validate/placement", json={
            "asset": asset_payload,
            "network": "ADFORM",
            "placement_key": "sponzor-sluzby"
        })
        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is True
        assert data["issues"] == []
        assert len(data["warnings"]) == 1

    def test_unknown_placement(self, client, asset_payload):
        response = client.post("/validate/placement", json={
            "asset": asset_payload,
            "network": "ADFORM",
            "placement_key": "spincube"
        })
        assert response.status_code == 404

    def test_malformed_dimensions_rejected(self, client, asset_payload):
        asset_payload["dimensions"] = "300 by 250"
        response = client.post("/validate/match", json={"asset": asset_payload})
        assert response.status_code == 422

    def test_compatibility(self, client, asset_payload):
        response = client.post("/validate/compatibility", json={"assets": [asset_payload]})
        assert response.status_code == 200
        data = response.json()
        assert len(data["reports"]) == 1
        assert len(data["reports"][0]["compatible"]) == 7
        assert data["network_stats"]["ADFORM"]["LOW"]["eligible_assets"] == 1

    def test_groups(self, client, asset_payload):
        cubes = [
            dict(asset_payload, name=f"spincube_{i}.png", dimensions="480x480", file_format="png")
            for i in range(4)
        ]
        response = client.post("/validate/groups", json={"assets": cubes})
        assert response.status_code == 200
        groups = response.json()
        assert len(groups) == 1
        assert groups[0]["complete"] is True
        assert groups[0]["missing_count"] == 0


class TestUploadEndpoints:
    """Tests for upload endpoints."""

    def test_analyze_image(self, client, sample_png):
        response = client.post(
            "/upload/analyze",
            files={"file": ("promo_300x250.png", sample_png, "image/png")},
            data={"folder_path": "Campaign/SKLIK"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["dimensions"] == "300x250"
        assert data["file_format"] == "png"
        assert data["assigned_network"] == "SKLIK"

    def test_analyze_banner_archive(self, client, valid_banner_zip):
        response = client.post(
            "/upload/analyze",
            files={"file": ("HTML5_970x210_leaderboard.zip", valid_banner_zip, "application/zip")}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["file_format"] == "html5"
        assert data["dimensions"] == "970x210"
        assert data["html5_validation"]["valid"] is True

    def test_analyze_zip_without_markup(self, client, zip_builder):
        archive = zip_builder({"image.png": b"x"})
        response = client.post(
            "/upload/analyze",
            files={"file": ("assets.zip", archive, "application/zip")}
        )
        assert response.status_code == 400

    def test_analyze_invalid_file_type(self, client):
        """Test upload rejects invalid file types."""
        response = client.post(
            "/upload/analyze",
            files={"file": ("notes.txt", b"hello", "text/plain")}
        )
        assert response.status_code == 400

    def test_analyze_corrupt_image(self, client):
        response = client.post(
            "/upload/analyze",
            files={"file": ("broken.png", b"not a png", "image/png")}
        )
        assert response.status_code == 400

    def test_analyze_oversized_canvas(self, client, sample_png, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
        response = client.post(
            "/upload/analyze",
            files={"file": ("big.png", sample_png, "image/png")}
        )
        assert response.status_code == 400

    def test_html5_validation(self, client, zip_builder, banner_html):
        archive = zip_builder({"index.html": banner_html.replace("__CLICKTHRU__", "")})
        response = client.post(
            "/upload/html5",
            files={"file": ("HTML5_300x250_promo.zip", archive, "application/zip")}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is False
        assert len(data["issues"]) == 1

    def test_html5_rejects_images(self, client, sample_png):
        response = client.post(
            "/upload/html5",
            files={"file": ("promo.png", sample_png, "image/png")}
        )
        assert response.status_code == 400

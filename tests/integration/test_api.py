"""
Integration tests for the HTTP endpoints under /api/sand-samples/.
"""

import pytest
from django.contrib import admin
from django.core.files.uploadedfile import SimpleUploadedFile

from conftest import csv_row, make_sample
from samples.models import SandSample, UploadHistory

pytestmark = [pytest.mark.integration, pytest.mark.django_db]

BASE = "/api/sand-samples"


class TestUploadEndpoint:
    """Tests for POST /upload"""

    def test_upload_reports_counts(self, api_client, csv_upload):
        upload = csv_upload(csv_row(), csv_row(), csv_row(lat="7"), csv_row(lat="bad"))

        response = api_client.post(f"{BASE}/upload", {"file": upload}, format="multipart")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "CSV uploaded successfully"
        assert body["samplesProcessed"] == 2
        assert body["duplicatesSkipped"] == 1
        assert body["rejectedRows"] == 1
        assert body["rejections"] == [{"record": 4, "reason": "LAT: 'bad' is not a number"}]

    def test_oversized_grain_count_is_a_rejected_row(self, api_client, csv_upload):
        response = api_client.post(
            f"{BASE}/upload", {"file": csv_upload(csv_row(grains="1e20"))}, format="multipart"
        )

        assert response.status_code == 200
        assert response.json()["rejectedRows"] == 1
        assert response.json()["rejections"][0]["record"] == 1
        assert SandSample.objects.count() == 0

    def test_second_upload_of_same_file(self, api_client, csv_upload):
        rows = [csv_row(lat=str(i)) for i in range(3)]

        api_client.post(f"{BASE}/upload", {"file": csv_upload(*rows)}, format="multipart")
        response = api_client.post(f"{BASE}/upload", {"file": csv_upload(*rows)}, format="multipart")

        assert response.json()["samplesProcessed"] == 0
        assert response.json()["duplicatesSkipped"] == 3

    def test_no_file_is_400(self, api_client):
        response = api_client.post(f"{BASE}/upload", {}, format="multipart")

        assert response.status_code == 400
        assert response.json()["error"] == "No file uploaded"

    def test_missing_columns_is_400(self, api_client, csv_upload):
        upload = csv_upload("1,2", header="LAT,LON")

        response = api_client.post(f"{BASE}/upload", {"file": upload}, format="multipart")

        assert response.status_code == 400
        assert "Dmed" in response.json()["details"]["missing_columns"]

    def test_malformed_csv_is_500_with_details(self, api_client):
        upload = SimpleUploadedFile("broken.csv", b"LAT,LON\n\xff\xfe,1\n", content_type="text/csv")

        response = api_client.post(f"{BASE}/upload", {"file": upload}, format="multipart")

        assert response.status_code == 500
        assert response.json()["error"] == "Error processing CSV file"
        assert response.json()["details"]

    def test_storage_failure_is_500(self, api_client, csv_upload):
        upload = csv_upload(csv_row(lon="200"))

        response = api_client.post(f"{BASE}/upload", {"file": upload}, format="multipart")

        assert response.status_code == 500
        assert response.json()["error"] == "Error saving data to database"
        assert SandSample.objects.count() == 0

    @pytest.mark.parametrize("rows", [[csv_row()], [csv_row(), ",".join(["1"] * 20)]])
    def test_temporary_upload_file_is_removed(self, api_client, settings, tmp_path, csv_upload, rows):
        """Large uploads are spooled to disk; the spool file must not outlive the request"""
        settings.FILE_UPLOAD_MAX_MEMORY_SIZE = 0
        settings.FILE_UPLOAD_TEMP_DIR = str(tmp_path)
        upload = csv_upload(*rows, name="spooled.csv")

        api_client.post(f"{BASE}/upload", {"file": upload}, format="multipart")

        assert list(tmp_path.iterdir()) == []


class TestQueryEndpoints:
    """Tests for listing, counting and box filtering"""

    def test_list_uses_camel_case_fields(self, api_client):
        sample = make_sample(dmed=0.05)

        response = api_client.get(f"{BASE}/")

        assert response.status_code == 200
        [item] = response.json()
        assert item["_id"] == sample.id
        assert item["numberOfGrains"] == 250
        assert item["sedimentType"] == "Silt/Clay"
        assert "createdAt" in item
        assert "number_of_grains" not in item

    def test_count(self, api_client):
        make_sample(latitude=1.0)
        make_sample(latitude=2.0)

        assert api_client.get(f"{BASE}/count").json() == {"count": 2}

    def test_bounds_are_inclusive(self, api_client):
        make_sample(latitude=10.0, longitude=20.0)
        make_sample(latitude=12.0, longitude=22.0)
        make_sample(latitude=12.5, longitude=21.0)

        response = api_client.get(f"{BASE}/bounds", {"north": 12, "south": 10, "east": 22, "west": 20})

        assert response.status_code == 200
        assert sorted(item["latitude"] for item in response.json()) == [10.0, 12.0]

    def test_bounds_requires_all_edges(self, api_client):
        response = api_client.get(f"{BASE}/bounds", {"north": 12, "south": 10})

        assert response.status_code == 400
        assert set(response.json()) == {"east", "west"}

    def test_location_history(self, api_client):
        make_sample(latitude=5.0, longitude=5.0, d50=0.1, dmed=0.1, dmean=0.2)
        make_sample(latitude=5.0005, longitude=5.0, d50=0.7, dmed=0.7, dmean=0.5)
        make_sample(latitude=6.0, longitude=5.0)

        response = api_client.get(f"{BASE}/location-history", {"lat": 5.0, "lon": 5.0})

        body = response.json()
        assert body["totalSamples"] == 2
        assert body["radius"] == 0.001
        assert [s["d50"] for s in body["samples"]] == [0.1, 0.7]
        assert body["trends"]["d50Change"] == pytest.approx(0.6)
        assert body["trends"]["dmeanChange"] == pytest.approx(0.3)
        assert [e["type"] for e in body["trends"]["sedimentTypeEvolution"]] == [
            "Fine Sand",
            "Very Coarse Sand",
        ]
        assert body["timeSpan"]["earliest"] <= body["timeSpan"]["latest"]

    def test_location_history_single_sample_has_no_trends(self, api_client):
        make_sample(latitude=5.0, longitude=5.0)

        body = api_client.get(f"{BASE}/location-history", {"lat": 5, "lon": 5, "radius": 0.1}).json()

        assert body["totalSamples"] == 1
        assert body["trends"] is None

    def test_location_history_default_radius_without_setting(self, api_client, settings):
        settings.SAND_SAMPLES = {
            key: value for key, value in settings.SAND_SAMPLES.items() if key != "LOCATION_HISTORY_RADIUS"
        }

        response = api_client.get(f"{BASE}/location-history", {"lat": 5, "lon": 5})

        assert response.status_code == 200
        assert response.json()["radius"] == 0.001

    def test_location_history_empty(self, api_client):
        body = api_client.get(f"{BASE}/location-history", {"lat": 5, "lon": 5}).json()

        assert body["totalSamples"] == 0
        assert body["samples"] == []
        assert body["timeSpan"] is None


class TestStatsEndpoints:
    """Tests for the aggregation endpoints"""

    def test_grain_size_stats(self, api_client):
        make_sample(latitude=1.0, d50=0.2, dmean=0.3, number_of_grains=100)
        make_sample(latitude=2.0, d50=0.4, dmean=0.5, number_of_grains=300)

        stats = api_client.get(f"{BASE}/stats/grain-size").json()

        assert stats["totalSamples"] == 2
        assert stats["avgD50"] == pytest.approx(0.3)
        assert stats["minD50"] == 0.2
        assert stats["maxD50"] == 0.4
        assert stats["avgDmean"] == pytest.approx(0.4)
        assert stats["minDmean"] == 0.3
        assert stats["maxDmean"] == 0.5
        assert stats["avgNumberOfGrains"] == pytest.approx(200)

    def test_grain_size_stats_empty_store(self, api_client):
        stats = api_client.get(f"{BASE}/stats/grain-size").json()

        assert stats["totalSamples"] == 0
        assert stats["avgD50"] == 0.0

    def test_sediment_distribution_most_common_first(self, api_client):
        make_sample(latitude=1.0, dmed=0.01)
        make_sample(latitude=2.0, dmed=3.0)
        make_sample(latitude=3.0, dmed=4.0)

        body = api_client.get(f"{BASE}/stats/sediment-distribution").json()

        assert body == [{"_id": "Gravel", "count": 2}, {"_id": "Silt/Clay", "count": 1}]

    def test_d50_distribution_half_open_buckets(self, api_client):
        for lat, d50 in enumerate([0.05, 0.1, 0.25, 0.25, 1.0, 2.0, 9.0]):
            make_sample(latitude=float(lat), d50=d50)

        body = api_client.get(f"{BASE}/stats/d50-distribution").json()

        assert body == [
            {"_id": "< 0.1mm", "count": 1},
            {"_id": "0.1-0.25mm", "count": 1},
            {"_id": "0.25-0.5mm", "count": 2},
            {"_id": "0.5-1mm", "count": 0},
            {"_id": "1-2mm", "count": 1},
            {"_id": "> 2mm", "count": 2},
        ]

    def test_summary_report_pdf(self, api_client):
        make_sample()

        response = api_client.get(f"{BASE}/stats/report")

        assert response.status_code == 200
        assert response["Content-Type"] == "application/pdf"
        assert "attachment" in response["Content-Disposition"]
        assert response.content.startswith(b"%PDF")


class TestMiscEndpoints:
    def test_api_root(self, api_client):
        assert api_client.get("/api/").json() == {"message": "Sand Sample Data API is running"}

    def test_upload_history_newest_first(self, api_client, csv_upload):
        api_client.post(f"{BASE}/upload", {"file": csv_upload(csv_row(), name="first.csv")}, format="multipart")
        api_client.post(f"{BASE}/upload", {"file": csv_upload(csv_row(), name="second.csv")}, format="multipart")

        body = api_client.get(f"{BASE}/history").json()

        assert [entry["original_filename"] for entry in body] == ["second.csv", "first.csv"]
        assert body[0]["duplicate_count"] == 1


class TestAdmin:
    """Samples are browsable and deletable in the admin, never added or edited"""

    @pytest.mark.parametrize("model", [SandSample, UploadHistory])
    def test_admin_is_delete_only(self, rf, admin_user, model):
        request = rf.get("/admin/")
        request.user = admin_user
        model_admin = admin.site._registry[model]

        assert model_admin.has_view_permission(request)
        assert model_admin.has_delete_permission(request)
        assert not model_admin.has_add_permission(request)
        assert not model_admin.has_change_permission(request)

    def test_change_form_is_read_only(self, client, admin_user):
        sample = make_sample()
        client.force_login(admin_user)

        response = client.post(f"/admin/samples/sandsample/{sample.pk}/change/", {"d50": "9.9"})

        assert response.status_code == 403
        sample.refresh_from_db()
        assert sample.d50 == 0.3

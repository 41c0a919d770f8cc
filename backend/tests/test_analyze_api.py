"""Tests for POST /api/v1/analyze, POST /api/v1/overlay and health."""

import io
import os
import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient
from PIL import Image

from uxscan.main import app

MOCK_ENV = {"AI_ANALYSIS_PROVIDER": "mock", "AI_ALLOWED_PROVIDERS": "mock"}


def make_image_bytes(width, height, fmt="PNG"):
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (240, 236, 228)).save(buf, format=fmt)
    return buf.getvalue()


def _form(platform="web", screen_type="checkout", **extra):
    return {"platform": platform, "screen_type": screen_type, **extra}


@patch.dict(os.environ, MOCK_ENV, clear=False)
class AnalyzeEndpointTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)
        self.png = make_image_bytes(1440, 900)

    def tearDown(self):
        self.client.close()

    def _post(self, files=None, data=None):
        return self.client.post("/api/v1/analyze", files=files, data=data if data is not None else _form())

    def test_analyze_returns_result(self):
        resp = self._post(files={"file": ("home.png", self.png, "image/png")})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["image"], {"width": 1440, "height": 900})
        self.assertFalse(data["meta"]["low_quality_warning"])
        self.assertIn("processing_ms", data["meta"])
        self.assertEqual(resp.headers["X-Analysis-Source"], "synthesized")
        self.assertEqual(resp.headers["X-Analysis-Provider"], "mock")
        for issue in data["issues"]:
            b = issue["bbox"]
            self.assertLessEqual(b["x"] + b["w"], 1440)
            self.assertLessEqual(b["y"] + b["h"], 900)
            self.assertTrue(issue["id"].startswith("iss_"))

    def test_same_upload_same_result(self):
        files = {"file": ("home.png", self.png, "image/png")}
        first = self._post(files=files).json()
        second = self._post(files=files).json()
        self.assertEqual(first, second)

    def test_jpeg_and_webp_accepted(self):
        for fmt, ctype in (("JPEG", "image/jpeg"), ("WEBP", "image/webp")):
            content = make_image_bytes(800, 600, fmt)
            resp = self._post(files={"file": (f"s.{fmt.lower()}", content, ctype)})
            self.assertEqual(resp.status_code, 200, resp.text)
            self.assertEqual(resp.json()["image"], {"width": 800, "height": 600})

    def test_small_image_flagged_low_quality(self):
        resp = self._post(files={"file": ("tiny.png", make_image_bytes(320, 200), "image/png")})
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["meta"]["low_quality_warning"])

    def test_client_declared_dimensions_win(self):
        resp = self._post(
            files={"file": ("retina.png", self.png, "image/png")},
            data=_form(width="2880", height="1800"),
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["image"], {"width": 2880, "height": 1800})

    def test_missing_file_returns_400(self):
        resp = self._post()
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], "Missing file")

    def test_unsupported_type_returns_400(self):
        resp = self._post(files={"file": ("anim.gif", make_image_bytes(100, 100, "GIF"), "image/gif")})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], "Unsupported file type")

    def test_mislabelled_file_returns_400(self):
        resp = self._post(files={"file": ("fake.png", make_image_bytes(100, 100, "GIF"), "image/png")})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], "Unsupported file type")

    def test_undecodable_returns_400(self):
        resp = self._post(files={"file": ("broken.png", b"not an image at all", "image/png")})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], "Could not read image")

    @patch.dict(os.environ, {"MAX_UPLOAD_BYTES": "100"}, clear=False)
    def test_too_large_returns_400(self):
        resp = self._post(files={"file": ("home.png", self.png, "image/png")})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], "File too large")

    def test_missing_context_returns_422(self):
        resp = self._post(files={"file": ("home.png", self.png, "image/png")}, data={"platform": "web"})
        self.assertEqual(resp.status_code, 422)

    def test_unknown_platform_returns_422(self):
        resp = self._post(files={"file": ("home.png", self.png, "image/png")}, data=_form(platform="tv"))
        self.assertEqual(resp.status_code, 422)

    def test_non_positive_dimensions_return_422(self):
        resp = self._post(
            files={"file": ("home.png", self.png, "image/png")},
            data=_form(width="0", height="900"),
        )
        self.assertEqual(resp.status_code, 422)

    def test_width_without_height_returns_422(self):
        resp = self._post(files={"file": ("home.png", self.png, "image/png")}, data=_form(width="1440"))
        self.assertEqual(resp.status_code, 422)


class UnhandledErrorTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app, raise_server_exceptions=False)

    def tearDown(self):
        self.client.close()

    @patch.dict(os.environ, {**MOCK_ENV, "EXPOSE_ERROR_DETAILS": "false"}, clear=False)
    def test_internal_error_is_hidden(self):
        with patch("uxscan.api.v1.analyze.analyze_screenshot", side_effect=RuntimeError("secret")):
            resp = self.client.post(
                "/api/v1/analyze",
                files={"file": ("home.png", make_image_bytes(800, 600), "image/png")},
                data=_form(),
            )
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"detail": "Internal server error"})


class OverlayEndpointTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)
        self.result = {
            "image": {"width": 1440, "height": 900},
            "issues": [
                {
                    "id": "iss_1",
                    "bbox": {"x": 40, "y": 80, "w": 240, "h": 64},
                    "severity": "low",
                    "category": "copy",
                    "title": "Vague copy",
                    "rationale": "r",
                    "recommendation": "c",
                },
                {
                    "id": "iss_2",
                    "bbox": {"x": 100, "y": 100, "w": 50, "h": 50},
                    "severity": "high",
                    "category": "cta",
                    "title": "Weak CTA",
                    "rationale": "r",
                    "recommendation": "c",
                },
            ],
            "meta": {"low_quality_warning": False, "processing_ms": 1820},
        }

    def tearDown(self):
        self.client.close()

    def test_overlay_sorted_and_projected(self):
        resp = self.client.post(
            "/api/v1/overlay",
            json={"result": self.result, "display": {"width": 720, "height": 450}},
        )
        self.assertEqual(resp.status_code, 200)
        items = resp.json()["items"]
        self.assertEqual([i["issue_id"] for i in items], ["iss_2", "iss_1"])
        rect = items[0]["rect"]
        self.assertEqual((rect["left"], rect["top"], rect["width"], rect["height"]), (50, 50, 25, 25))
        self.assertTrue(rect["visible"])
        self.assertEqual(resp.json()["empty_state"], [])

    def test_overlay_without_display_is_inert(self):
        resp = self.client.post("/api/v1/overlay", json={"result": self.result})
        self.assertEqual(resp.status_code, 200)
        for item in resp.json()["items"]:
            self.assertFalse(item["rect"]["visible"])

    def test_high_only_with_no_high_issues_shows_checklist(self):
        self.result["issues"] = self.result["issues"][:1]
        resp = self.client.post(
            "/api/v1/overlay",
            json={"result": self.result, "display": {"width": 720, "height": 450}, "high_only": True},
        )
        data = resp.json()
        self.assertEqual(data["items"], [])
        self.assertEqual(len(data["empty_state"]), 3)


class HealthTests(unittest.TestCase):
    def test_health(self):
        with TestClient(app) as client:
            resp = client.get("/api/v1/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "ok"})


if __name__ == "__main__":
    unittest.main()

import base64
import io
import os
import unittest
from unittest.mock import patch

from image_editor.presentation.http.server import create_app

EDITED = b"\x89PNG\r\n\x1a\nedited"


class _FakeEditClient:
    model = "fake-image-model"

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def edit_image(self, image_b64: str, mime_type: str, prompt: str) -> dict:
        self.calls.append((image_b64, mime_type, prompt))
        if self.fail:
            raise RuntimeError("gemini_http_500:boom")
        return {
            "model": self.model,
            "mime_type": "image/png",
            "image_base64": base64.b64encode(EDITED).decode("ascii"),
        }


class SessionEndpointTests(unittest.TestCase):
    def setUp(self):
        env = patch.dict(os.environ, {"APP_DEBUG": "false", "IMAGE_EDIT_MOCK": "false"})
        env.start()
        self.addCleanup(env.stop)
        os.environ.pop("GEMINI_API_KEY", None)
        self.app = create_app()
        self.fake = _FakeEditClient()
        self.app.container.use_edit_client(self.fake)
        self.client = self.app.test_client()

    @staticmethod
    def _valid_png_bytes() -> bytes:
        return base64.b64decode(
            "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mP8/w8AAgMBgM8fVZkAAAAASUVORK5CYII="
        )

    def _upload(self, data=None, filename="ref.png", content_type="image/png"):
        payload = {"image": (io.BytesIO(self._valid_png_bytes() if data is None else data), filename, content_type)}
        return self.client.post("/session/image", data=payload, content_type="multipart/form-data")

    def test_health(self):
        resp = self.client.get("/health")
        payload = resp.get_json()
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(payload["ok"])
        self.assertEqual(payload["model"], "fake-image-model")
        self.assertEqual(payload["phase"], "empty")
        self.assertIn("image/png", payload["upload"]["accepted_types"])

    def test_trace_id_is_echoed(self):
        resp = self.client.get("/session", headers={"X-Request-Id": "abc123"})
        self.assertEqual(resp.headers["X-Request-Id"], "abc123")

    def test_full_edit_flow(self):
        resp = self._upload()
        state = resp.get_json()["state"]
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(state["phase"], "ready")
        self.assertFalse(state["can_generate"])
        self.assertTrue(state["image"]["data_url"].startswith("data:image/png;base64,"))

        resp = self.client.put("/session/prompt", json={"prompt": "add a hat"})
        self.assertTrue(resp.get_json()["state"]["can_generate"])

        resp = self.client.post("/session/generate")
        payload = resp.get_json()
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(payload["ok"])
        self.assertEqual(payload["state"]["phase"], "ready")
        self.assertFalse(payload["state"]["in_flight"])
        self.assertIsNone(payload["state"]["error"])
        self.assertEqual(payload["state"]["result"]["size_bytes"], len(EDITED))
        self.assertEqual(self.fake.calls[0][1:], ("image/png", "add a hat"))

        resp = self.client.get("/session/result")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data, EDITED)
        self.assertEqual(resp.mimetype, "image/png")
        self.assertIn("ref_edited.png", resp.headers["Content-Disposition"])

    def test_generate_failure_returns_502_with_state_error(self):
        self.fake.fail = True
        self._upload()
        self.client.put("/session/prompt", json={"prompt": "add a hat"})
        resp = self.client.post("/session/generate")
        payload = resp.get_json()
        self.assertEqual(resp.status_code, 502)
        self.assertFalse(payload["ok"])
        self.assertEqual(payload["error"], "image_edit_failed")
        self.assertTrue(payload["state"]["error"])
        self.assertIsNone(payload["state"]["result"])
        self.assertEqual(self.client.get("/session/result").status_code, 404)

    def test_generate_without_prompt_is_unavailable(self):
        self._upload()
        resp = self.client.post("/session/generate")
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.get_json()["error"], "generate_unavailable")
        self.assertEqual(self.fake.calls, [])

    def test_generate_without_image_is_unavailable(self):
        self.client.put("/session/prompt", json={"prompt": "add a hat"})
        resp = self.client.post("/session/generate")
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(self.fake.calls, [])

    def test_generate_missing_key_config(self):
        self.app.container.use_edit_client(None)
        resp = self.client.post("/session/generate")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.get_json()["error"], "missing_GEMINI_API_KEY")

    def test_upload_data_url(self):
        data_url = "data:image/png;base64," + base64.b64encode(self._valid_png_bytes()).decode("ascii")
        resp = self.client.post("/session/image", json={"image_data": data_url, "filename": "Ref.PNG"})
        state = resp.get_json()["state"]
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(state["phase"], "ready")
        self.assertEqual(state["filename"], "ref.png")
        self.assertEqual(state["image"]["data_url"], data_url)
        self.assertEqual(self.client.get("/session/image").data, self._valid_png_bytes())

    def test_upload_malformed_data_url(self):
        resp = self.client.post("/session/image", json={"image_data": "data:image/png;base64,***"})
        payload = resp.get_json()
        self.assertEqual(resp.status_code, 400)
        self.assertIn("invalid_data_url", payload["error"])
        self.assertEqual(payload["state"]["phase"], "empty")
        self.assertTrue(payload["state"]["error"])

    def test_upload_data_url_unsupported_type(self):
        resp = self.client.post("/session/image", json={"image_data": "data:application/pdf;base64,JVBERg=="})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["error"], "unsupported_media_type")

    def test_upload_missing_file(self):
        resp = self.client.post("/session/image", data={}, content_type="multipart/form-data")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["error"], "missing_image")

    def test_upload_unsupported_type(self):
        resp = self._upload(data=b"%PDF-1.7", filename="doc.pdf", content_type="application/pdf")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["error"], "unsupported_media_type")

    def test_upload_invalid_image_clears_session(self):
        self._upload()
        self.client.put("/session/prompt", json={"prompt": "add a hat"})
        resp = self._upload(data=b"not-an-image")
        payload = resp.get_json()
        self.assertEqual(resp.status_code, 400)
        self.assertIn("invalid_image", payload["error"])
        self.assertEqual(payload["state"]["phase"], "empty")
        self.assertEqual(payload["state"]["prompt"], "")
        self.assertTrue(payload["state"]["error"])

    def test_invalid_prompt_type(self):
        resp = self.client.put("/session/prompt", json={"prompt": 42})
        self.assertEqual(resp.status_code, 400)

    def test_reset(self):
        self._upload()
        self.client.put("/session/prompt", json={"prompt": "add a hat"})
        self.client.post("/session/generate")
        resp = self.client.post("/session/reset")
        state = resp.get_json()["state"]
        self.assertEqual(state["phase"], "empty")
        self.assertIsNone(state["image"])
        self.assertIsNone(state["result"])
        self.assertEqual(state["prompt"], "")
        self.assertEqual(self.client.get("/session/image").status_code, 404)


if __name__ == "__main__":
    unittest.main()

"""
Tests for CameraService request routing
"""

import asyncio
import base64
import json
import threading
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

import pytest

from core.capture_controller import CaptureController
from core.constants import ErrorMessages, ResponseMessages
from core.enums import MediaType, SourceType
from core.output_formatter import OutputFormatter
from services.camera_service import CameraRequest, CameraService


def handle(service, **kwargs):
    return asyncio.run(service.handle(CameraRequest(**kwargs)))


def body_of(response):
    return json.loads(response.body)


def uri_to_path(uri):
    return Path(url2pathname(urlparse(uri).path))


class TestStructuralErrors:
    """Test requests rejected before dispatch"""

    @pytest.mark.parametrize(
        "method,path",
        [(None, "/camera/image"), ("GET", None), ("GET", "")],
    )
    def test_missing_method_or_path(self, camera_service, method, path):
        response = handle(camera_service, method=method, path=path)

        assert response.status_code == 400
        assert response.body is None

    @pytest.mark.parametrize("method", ["PUT", "PATCH", "HEAD", "OPTIONS"])
    def test_unsupported_method(self, camera_service, method):
        response = handle(camera_service, method=method, path="/camera/image")

        assert response.status_code == 405
        assert response.headers == {"Allow": "POST, DELETE, GET"}
        assert response.body is None

    def test_post_with_query(self, camera_service):
        response = handle(
            camera_service, method="POST", path="/camera", query="a=1", body=b"{}"
        )

        assert response.status_code == 400

    @pytest.mark.parametrize(
        "body",
        [
            None,
            b"",
            b"not json",
            b"[1, 2]",
            b'"text"',
            b'{"sourceType": 7}',
            b'{"compression": 101}',
            b'{"unknownKey": 1}',
            b"\xff\xfe",
        ],
    )
    def test_post_bad_body(self, camera_service, body):
        response = handle(camera_service, method="POST", path="/camera", body=body)

        assert response.status_code == 400
        assert response.body is None

    def test_bad_body_does_not_change_state(self, camera_service, capture_controller):
        handle(camera_service, method="POST", path="/camera", body=b"{")

        assert capture_controller.is_idle


class TestCapture:
    """Test POST capture requests"""

    def test_post_saves_photo(self, camera_service, file_cache, test_jpeg):
        response = handle(camera_service, method="POST", path="/camera", body=b"{}")

        assert response.status_code == 200
        assert response.headers["Content-Type"] == "application/json"
        location = body_of(response)["image_location"]
        assert Path(location).read_bytes() == test_jpeg
        assert file_cache.count(MediaType.PHOTO) == 1

    def test_post_inline_photo(self, camera_service, file_cache, test_jpeg):
        body = json.dumps({"sourceType": 0, "mediaType": 0, "output": 1}).encode()

        response = handle(camera_service, method="POST", path="/camera", body=body)

        payload = body_of(response)
        assert list(payload) == ["image_src"]
        assert base64.b64decode(payload["image_src"]) == test_jpeg
        assert file_cache.count(MediaType.PHOTO) == 0

    def test_post_user_cancel(self, camera_service):
        body = b'{"sourceType":1,"mediaType":0,"output":0}'

        response = handle(camera_service, method="POST", path="/camera", body=body)

        assert response.status_code == 200
        assert response.body == b'{"error":"User cancelled"}'

    def test_post_busy(self, file_cache, make_picker):
        """Test a capture during another capture gets the busy error"""
        picker = make_picker(hold=True)
        controller = CaptureController(
            {SourceType.PHOTO_LIBRARY: picker}, OutputFormatter(file_cache)
        )
        service = CameraService(controller, file_cache)

        async def scenario():
            first = asyncio.ensure_future(
                service.handle(CameraRequest(method="POST", path="/camera", body=b"{}"))
            )
            await picker.started()
            second = await service.handle(
                CameraRequest(method="POST", path="/camera", body=b"{}")
            )
            listing = await service.handle(CameraRequest(method="GET", path="/camera/image"))
            picker.release()
            await first
            return second, listing

        second, listing = asyncio.run(scenario())

        assert body_of(second) == {"error": ErrorMessages.BUSY}
        assert body_of(listing) == {"error": ErrorMessages.BUSY}


class TestFileEntities:
    """Test GET and DELETE on cached files"""

    def test_get_empty(self, camera_service):
        response = handle(camera_service, method="GET", path="/camera/image")

        assert response.status_code == 200
        assert body_of(response) == {"image_location": "No files yet..."}

    def test_get_lists_file_uris(self, camera_service, file_cache):
        saved = [file_cache.save(b"p", MediaType.PHOTO) for _ in range(3)]

        response = handle(camera_service, method="GET", path="/camera/image")

        uris = body_of(response)["image_location"].split(",")
        assert len(uris) == 3
        assert all(uri.startswith("file://") for uri in uris)
        assert [uri_to_path(uri) for uri in uris] == [p.resolve() for p in sorted(saved)]

    def test_get_video(self, camera_service, file_cache):
        file_cache.save(b"v", MediaType.VIDEO)

        response = handle(camera_service, method="GET", path="/camera/video/")

        location = body_of(response)["video_location"]
        assert location.endswith(".mov")
        assert "," not in location

    def test_delete_then_get(self, camera_service, file_cache):
        for _ in range(3):
            file_cache.save(b"p", MediaType.PHOTO)

        deleted = handle(camera_service, method="DELETE", path="/camera/image")
        listed = handle(camera_service, method="GET", path="/camera/image")

        assert body_of(deleted) == {"message": ResponseMessages.FILES_DELETED}
        assert body_of(listed) == {"image_location": ResponseMessages.NO_FILES_YET}

    def test_delete_empty(self, camera_service):
        response = handle(camera_service, method="DELETE", path="/camera/video")

        assert response.status_code == 200
        assert body_of(response) == {"error": ErrorMessages.NO_FILE_CACHED}

    def test_unknown_entity(self, camera_service):
        listed = handle(camera_service, method="GET", path="/camera/audio")
        deleted = handle(camera_service, method="DELETE", path="/camera/audio")

        assert body_of(listed) == {"error": ErrorMessages.UNKNOWN_ENTITY}
        assert body_of(deleted) == {"error": ErrorMessages.UNKNOWN_ENTITY_DELETE}

    def test_method_is_case_insensitive(self, camera_service):
        response = handle(camera_service, method="get", path="/camera/image")

        assert response.status_code == 200

    def test_file_operations_run_off_loop_thread(self, camera_service, file_cache, monkeypatch):
        """Test listing does not run on the event loop thread"""
        threads = []
        list_files = file_cache.list_files

        def recording_list_files(kind):
            threads.append(threading.get_ident())
            return list_files(kind)

        monkeypatch.setattr(file_cache, "list_files", recording_list_files)

        async def scenario():
            await camera_service.handle(CameraRequest(method="GET", path="/camera/image"))
            return threading.get_ident()

        loop_thread = asyncio.run(scenario())

        assert threads and loop_thread not in threads

    def test_get_leaves_controller_idle(self, camera_service, capture_controller):
        handle(camera_service, method="GET", path="/camera/image")

        assert capture_controller.is_idle


def test_render_file_list_empty():
    assert CameraService.render_file_list([]) == "No files yet..."


def test_render_file_list_no_trailing_separator(tmp_path):
    files = [tmp_path / "a.jpeg", tmp_path / "b.jpeg"]

    rendered = CameraService.render_file_list(files)

    assert not rendered.endswith(",")
    assert rendered.count(",") == 1

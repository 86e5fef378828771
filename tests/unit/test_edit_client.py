import base64
from types import SimpleNamespace

import pytest
from google.genai import types

from botstudio.core.config import Settings
from botstudio.core.errors import ConfigurationError
from botstudio.imaging.data_uri import InvalidImagePayloadError
from botstudio.imaging.edit_client import EditResult, ImageEditClient, parse_edit_response

RAW_JPEG = b"\xff\xd8\xff\xe0fake-jpeg"
RAW_JPEG_B64 = base64.b64encode(RAW_JPEG).decode("ascii")


class _FakeModels:
    def __init__(self, response=None, exc=None):
        self._response = response
        self._exc = exc
        self.calls = []

    async def generate_content(self, *, model, contents):
        self.calls.append({"model": model, "contents": contents})
        if self._exc is not None:
            raise self._exc
        return self._response


class _FakeFactory:
    def __init__(self, models):
        self.models = models
        self.api_keys = []

    def __call__(self, api_key):
        self.api_keys.append(api_key)
        return SimpleNamespace(aio=SimpleNamespace(models=self.models))


def _response(*parts: types.Part) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=list(parts)))]
    )


def _client(factory: _FakeFactory, api_key: str = "test-key") -> ImageEditClient:
    settings = Settings(gemini_api_key=api_key, gemini_image_model="gemini-2.5-flash-image")
    return ImageEditClient(settings, client_factory=factory)


@pytest.mark.asyncio
async def test_missing_api_key_fails_before_any_request() -> None:
    factory = _FakeFactory(_FakeModels(response=_response()))

    with pytest.raises(ConfigurationError):
        await _client(factory, api_key="").edit_image(RAW_JPEG_B64, "add a hat")

    assert factory.api_keys == []


@pytest.mark.asyncio
async def test_data_uri_prefix_is_stripped_before_transmission() -> None:
    models = _FakeModels(response=_response(types.Part(text="done")))
    factory = _FakeFactory(models)

    await _client(factory).edit_image(f"data:image/jpeg;base64,{RAW_JPEG_B64}", "add a hat")

    assert factory.api_keys == ["test-key"]
    call = models.calls[0]
    assert call["model"] == "gemini-2.5-flash-image"
    image_part, text_part = call["contents"].parts
    assert image_part.inline_data.mime_type == "image/jpeg"
    assert image_part.inline_data.data == RAW_JPEG
    assert text_part.text == "add a hat"


@pytest.mark.asyncio
async def test_bare_base64_and_empty_instruction_are_accepted() -> None:
    models = _FakeModels(response=_response())
    factory = _FakeFactory(models)

    result = await _client(factory).edit_image(RAW_JPEG_B64, "")

    image_part, text_part = models.calls[0]["contents"].parts
    assert image_part.inline_data.data == RAW_JPEG
    assert text_part.text == ""
    assert result.is_empty


@pytest.mark.asyncio
async def test_returned_image_is_wrapped_as_png_data_uri() -> None:
    models = _FakeModels(
        response=_response(types.Part(inline_data=types.Blob(mime_type="image/webp", data=b"edited-bytes")))
    )

    result = await _client(_FakeFactory(models)).edit_image(f"data:image/png;base64,{RAW_JPEG_B64}", "crop")

    expected = base64.b64encode(b"edited-bytes").decode("ascii")
    assert result == EditResult(image_url=f"data:image/png;base64,{expected}", text="")


@pytest.mark.asyncio
async def test_backend_errors_propagate_unchanged() -> None:
    failure = RuntimeError("backend unavailable")
    factory = _FakeFactory(_FakeModels(exc=failure))

    with pytest.raises(RuntimeError) as exc_info:
        await _client(factory).edit_image(RAW_JPEG_B64, "add a hat")

    assert exc_info.value is failure


@pytest.mark.asyncio
async def test_malformed_base64_fails_before_any_request() -> None:
    factory = _FakeFactory(_FakeModels(response=_response()))

    with pytest.raises(InvalidImagePayloadError):
        await _client(factory).edit_image("data:image/jpeg;base64,not*base64", "add a hat")

    assert factory.api_keys == []


def test_parse_keeps_first_image_and_last_text() -> None:
    response = _response(
        types.Part(text="first note"),
        types.Part(inline_data=types.Blob(mime_type="image/png", data=b"one")),
        types.Part(inline_data=types.Blob(mime_type="image/png", data=b"two")),
        types.Part(text="last note"),
    )

    result = parse_edit_response(response)

    assert result.image_url == "data:image/png;base64," + base64.b64encode(b"one").decode("ascii")
    assert result.text == "last note"


def test_parse_text_only_response_has_no_image() -> None:
    result = parse_edit_response(_response(types.Part(text="I cannot edit faces.")))

    assert result.image_url is None
    assert result.text == "I cannot edit faces."
    assert not result.is_empty


def test_parse_response_without_candidates_is_empty() -> None:
    result = parse_edit_response(types.GenerateContentResponse(candidates=[]))

    assert result == EditResult(image_url=None, text="")
    assert result.is_empty

import asyncio
import pytest
from unittest import mock
from google.genai.errors import APIError
from codereview.config import Settings
from codereview.errors import ConfigurationError, EmptyCompletion, TransientUpstreamFailure
from codereview.upstream import GeminiUpstream, build_upstream, extract_text


class ExplodingResponse:
    @property
    def text(self):
        raise ValueError("response was blocked")


# --- extract_text ---

def test_extract_text_strips_whitespace():
    assert extract_text(mock.Mock(text="  review body \n")) == "review body"


@pytest.mark.parametrize("response", [
    None,
    mock.Mock(text=None),
    mock.Mock(text=""),
    mock.Mock(text="   "),
    mock.Mock(text=["not", "a", "string"]),
    object(),
    ExplodingResponse(),
])
def test_extract_text_rejects_missing_payload(response):
    with pytest.raises(EmptyCompletion):
        extract_text(response)


def test_empty_completion_is_transient():
    assert issubclass(EmptyCompletion, TransientUpstreamFailure)


# --- GeminiUpstream ---

@pytest.fixture
def mock_genai_client():
    client = mock.Mock()
    client.aio.models.generate_content = mock.AsyncMock(return_value=mock.Mock(text="hello gemini"))
    return client


def test_generate_calls_async_models_api(mock_genai_client):
    upstream = GeminiUpstream(mock_genai_client, model="gemini-test", system_instruction="be terse")

    response = asyncio.run(upstream.generate("print(1)"))

    assert upstream.extract_text(response) == "hello gemini"
    kwargs = mock_genai_client.aio.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-test"
    assert kwargs["contents"] == ["print(1)"]
    assert kwargs["config"].system_instruction == "be terse"


def test_generate_wraps_api_errors(mock_genai_client):
    mock_genai_client.aio.models.generate_content.side_effect = APIError(
        code=429,
        response_json={"error": {"code": 429, "message": "Quota exceeded", "status": "RESOURCE_EXHAUSTED"}},
    )
    upstream = GeminiUpstream(mock_genai_client)

    with pytest.raises(TransientUpstreamFailure) as exc_info:
        asyncio.run(upstream.generate("print(1)"))

    assert "429" in str(exc_info.value)
    assert "RESOURCE_EXHAUSTED" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, APIError)


def test_generate_lets_other_errors_propagate(mock_genai_client):
    mock_genai_client.aio.models.generate_content.side_effect = ConnectionError("socket closed")
    upstream = GeminiUpstream(mock_genai_client)

    with pytest.raises(ConnectionError):
        asyncio.run(upstream.generate("print(1)"))


# --- build_upstream ---

@pytest.mark.parametrize("key", ["", "   "])
def test_build_upstream_requires_api_key(key):
    with mock.patch("codereview.upstream.genai.Client") as mock_client:
        with pytest.raises(ConfigurationError) as exc_info:
            build_upstream(Settings(GEMINI_API_KEY=key))

    assert "GEMINI_API_KEY" in str(exc_info.value)
    mock_client.assert_not_called()


def test_build_upstream_uses_configured_key_and_model():
    with mock.patch("codereview.upstream.genai.Client") as mock_client:
        upstream = build_upstream(Settings(GEMINI_API_KEY="secret", MODEL_NAME="gemini-pro-test"))

    mock_client.assert_called_once_with(api_key="secret")
    assert upstream.model == "gemini-pro-test"


def test_build_upstream_client_init_failure():
    with mock.patch("codereview.upstream.genai.Client", side_effect=Exception("boom")):
        with pytest.raises(ConfigurationError) as exc_info:
            build_upstream(Settings(GEMINI_API_KEY="secret"))

    assert "boom" in str(exc_info.value)

import httpx
import openai
import pytest
from fastapi.testclient import TestClient

from main import _log_level, create_app
from services.openai.image_mixer import ImageMixer
from services.openai.prompt_assistant import PromptAssistant


def _client(fake):
    return TestClient(create_app(openai_client=fake))


def _mix_body(png_b64, prompt="Put the cat in the drawing"):
    return {
        "images": [
            {"dataUrl": f"data:image/png;base64,{png_b64}", "mimeType": "image/png"},
            {"dataUrl": "data:image/jpeg;base64,QUJD", "mimeType": "image/jpeg"},
        ],
        "prompt": prompt,
    }


def test_status_route(fake_openai):
    response = _client(fake_openai()).get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_health_reports_provider(fake_openai):
    response = _client(fake_openai()).get("/health")
    assert response.json() == {"ok": True, "provider_available": True}


def test_mix_returns_first_inline_image(fake_openai, responses, png_b64):
    fake = fake_openai(result=responses.build(responses.text("Here you go"), responses.image("R0VO")))
    response = _client(fake).post("/mix", json=_mix_body(png_b64))

    assert response.status_code == 200
    assert response.json() == {"image": "R0VO"}


def test_mix_sends_one_part_per_image_then_prompt(fake_openai, responses, png_b64):
    fake = fake_openai(result=responses.build(responses.image("R0VO")))
    _client(fake).post("/mix", json=_mix_body(png_b64, prompt="Blend them"))

    call = fake.responses.calls[0]
    assert call["tools"] == [{"type": "image_generation"}]
    content = call["input"][0]["content"]
    assert [part["type"] for part in content] == ["input_image", "input_image", "input_text"]
    assert content[0]["image_url"] == f"data:image/png;base64,{png_b64}"
    assert content[1]["image_url"] == "data:image/jpeg;base64,QUJD"
    assert content[2]["text"] == "Blend them"


def test_mix_without_image_part_is_empty_result(fake_openai, responses, png_b64):
    fake = fake_openai(result=responses.build(responses.text("I cannot draw that")))
    response = _client(fake).post("/mix", json=_mix_body(png_b64))

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate image.", "code": "empty_result"}


def test_mix_provider_error_surfaces_provider_message(fake_openai, png_b64):
    request = httpx.Request("POST", "https://api.openai.com/v1/responses")
    error = openai.APIError("Your request was rejected.", request, body={"message": "Content policy violation"})
    response = _client(fake_openai(error=error)).post("/mix", json=_mix_body(png_b64))

    assert response.status_code == 500
    assert response.json() == {"error": "Content policy violation", "code": "provider_error"}


def test_mix_unexpected_error_uses_generic_message(fake_openai, png_b64):
    response = _client(fake_openai(error=ConnectionResetError("boom"))).post("/mix", json=_mix_body(png_b64))

    assert response.status_code == 500
    assert response.json()["error"] == "An unknown error occurred."


@pytest.mark.parametrize("body", [
    {"images": [], "prompt": "Blend"},
    {"images": [{"dataUrl": "data:image/png;base64,QUJD", "mimeType": "image/png"}], "prompt": "   "},
    {"images": [{"dataUrl": "data:image/png;base64,", "mimeType": "image/png"}], "prompt": "Blend"},
])
def test_mix_incomplete_requests_fail_without_calling_provider(fake_openai, body):
    fake = fake_openai()
    response = _client(fake).post("/mix", json=body)

    assert response.status_code == 500
    assert response.json()["code"] == "invalid_request"
    assert fake.responses.calls == []


def test_optimize_wraps_prompt_in_template(fake_openai, responses):
    fake = fake_openai(result=responses.build(responses.text("A photorealistic cat lounging in warm light.")))
    response = _client(fake).post("/optimize", json={"prompt": "A cat"})

    assert response.status_code == 200
    assert response.json() == {"prompt": "A photorealistic cat lounging in warm light."}
    sent = fake.responses.calls[0]["input"][0]["content"][0]["text"]
    assert 'User prompt: "A cat"' in sent
    assert sent.endswith("Rewritten prompt:")
    assert "tools" not in fake.responses.calls[0]


def test_generate_returns_numbered_list(fake_openai, responses):
    numbered = "\n1. A fluffy cat\n2. A cat in space\n3. A cartoon cat"
    fake = fake_openai(result=responses.build(responses.text(numbered)))
    response = _client(fake).post("/generate", json={"prompt": "A cat"})

    assert response.status_code == 200
    assert response.json() == {"prompts": numbered}
    sent = fake.responses.calls[0]["input"][0]["content"][0]["text"]
    assert "generate 3 new prompts" in sent
    assert sent.endswith("New prompts:")


def test_generate_without_text_is_empty_result(fake_openai, responses):
    fake = fake_openai(result=responses.build())
    response = _client(fake).post("/generate", json={"prompt": "A cat"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate prompts.", "code": "empty_result"}


def test_cors_headers_present(fake_openai):
    response = _client(fake_openai()).get("/", headers={"Origin": "http://localhost:5173"})
    assert response.headers.get("access-control-allow-origin") == "*"


def test_startup_requires_api_key_without_injected_client(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(RuntimeError):
        with TestClient(create_app()):
            pass


def test_injected_client_survives_shutdown(fake_openai):
    fake = fake_openai()
    app = create_app(openai_client=fake)
    with TestClient(app) as client:
        assert client.get("/health").json()["provider_available"] is True
    assert app.state.openai_client is fake


def test_blank_prompt_on_prompt_helpers_is_invalid(fake_openai):
    fake = fake_openai()
    response = _client(fake).post("/optimize", json={"prompt": "  "})

    assert response.status_code == 500
    assert response.json() == {"error": "Please enter a prompt first.", "code": "invalid_request"}
    assert fake.responses.calls == []


def test_model_settings_are_read_when_services_are_built(monkeypatch, fake_openai):
    monkeypatch.setenv("OPENAI_IMAGE_MODEL", "image-model-from-env")
    monkeypatch.setenv("OPENAI_TEXT_MODEL", "text-model-from-env")

    assert ImageMixer(fake_openai()).model == "image-model-from-env"
    assert PromptAssistant(fake_openai()).model == "text-model-from-env"
    assert ImageMixer(fake_openai(), model="explicit").model == "explicit"


def test_model_settings_fall_back_to_defaults(monkeypatch, fake_openai):
    monkeypatch.delenv("OPENAI_IMAGE_MODEL", raising=False)
    monkeypatch.delenv("OPENAI_TEXT_MODEL", raising=False)

    assert ImageMixer(fake_openai()).model == "gpt-4.1"
    assert PromptAssistant(fake_openai()).model == "gpt-4.1-mini"


def test_mix_uses_configured_image_model(monkeypatch, fake_openai, responses, png_b64):
    monkeypatch.setenv("OPENAI_IMAGE_MODEL", "image-model-from-env")
    fake = fake_openai(result=responses.build(responses.image("R0VO")))
    _client(fake).post("/mix", json=_mix_body(png_b64))

    assert fake.responses.calls[0]["model"] == "image-model-from-env"


@pytest.mark.parametrize("raw, expected", [("info", "INFO"), (" debug ", "DEBUG"), ("", "INFO")])
def test_log_level_is_case_insensitive(monkeypatch, raw, expected):
    monkeypatch.setenv("LOG_LEVEL", raw)
    assert _log_level() == expected


def test_log_level_defaults_to_info(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    assert _log_level() == "INFO"

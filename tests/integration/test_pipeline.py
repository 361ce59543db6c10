"""End-to-end pipeline tests.

The orchestrator runs client-side through the real APIClient against the
app in-process, and server-side through ``POST /api/v1/pipeline/run``.
"""

import base64

import pytest

from voicescribe.core.exceptions import TranscriptionError
from voicescribe.core.models import (
    PipelineStage,
    PlainText,
    Recording,
    RunStatus,
    SummaryType,
    TranscriptionResult,
)
from voicescribe.services.orchestrator import PipelineOrchestrator

SENTENCE = "We shipped the release today."
JAPANESE = "今日、リリースを出荷しました。"
SHORT_SUMMARY = (
    "チームは本日リリースを出荷した。\n"
    "主要な作業は予定どおり完了した。\n"
    "大きな問題は報告されていない。\n"
    "次のステップは利用状況の確認である。"
)


@pytest.fixture
def scripted(mock_llm, mock_stt):
    """STT returns the sentence; the LLM answers translate then summarize."""
    mock_stt.transcribe.return_value = TranscriptionResult(
        text=SENTENCE, language="en", duration=10.0
    )

    async def chat(messages, **kwargs):
        if messages[-1]["content"].startswith("Translate the following text"):
            return PlainText(text=JAPANESE)
        return PlainText(text=f"承知しました。\n---\n{SHORT_SUMMARY}")

    mock_llm.chat.side_effect = chat
    return mock_llm


def _ten_second_recording() -> Recording:
    return Recording(data=b"\x00\x01" * 160000, mime_type="audio/wav", duration=10.0)


async def test_end_to_end_through_api_client(api_client, scripted, mock_stt):
    orchestrator = PipelineOrchestrator(
        api_client, target_language="ja", summary_type=SummaryType.short, stage_timeout=10
    )

    run = await orchestrator.run(_ten_second_recording())

    assert run.status == RunStatus.succeeded
    assert run.stage == PipelineStage.idle
    assert mock_stt.transcribe.call_args[0][0] == b"\x00\x01" * 160000

    translate_messages, summary_messages = (c.args[0] for c in scripted.chat.call_args_list)
    assert translate_messages[-1]["content"] == (
        f"Translate the following text to Japanese: {SENTENCE}. Return only the translation."
    )
    assert run.translation.translation == JAPANESE

    assert f"Transcript: {SENTENCE}" in summary_messages[-1]["content"]
    assert "4-5 lines" in summary_messages[-1]["content"]
    lines = run.summary.summary.splitlines()
    assert 4 <= len(lines) <= 5
    assert not any(line.lstrip().startswith(("-", "*", "•")) for line in lines)
    assert run.summary.type is SummaryType.short
    assert run.summary.language == "ja"


async def test_transcribe_failure_through_api_client(api_client, mock_llm, mock_stt):
    mock_stt.transcribe.side_effect = RuntimeError("Whisper API error: 500")
    updates = []

    async def listen(run):
        updates.append(run)

    orchestrator = PipelineOrchestrator(api_client, target_language="ja", on_update=listen)

    with pytest.raises(TranscriptionError):
        await orchestrator.run(_ten_second_recording())

    mock_llm.chat.assert_not_awaited()
    assert updates[-1].stage == PipelineStage.idle
    assert updates[-1].status == RunStatus.failed


async def test_pipeline_run_endpoint(async_client, scripted):
    resp = await async_client.post(
        "/api/v1/pipeline/run",
        json={
            "audioData": base64.b64encode(b"RIFF....").decode(),
            "mimeType": "audio/wav",
            "targetLanguage": "ja",
            "summaryType": "short",
        },
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "succeeded"
    assert body["stage"] == "idle"
    assert body["transcription"]["text"] == SENTENCE
    assert body["translation"] == {"translation": JAPANESE, "targetLanguage": "ja"}
    assert body["summary"]["summary"] == SHORT_SUMMARY
    assert body["summary"]["language"] == "ja"
    assert body["failedStage"] is None


async def test_pipeline_run_endpoint_reports_failure(async_client, mock_llm, mock_stt):
    mock_stt.transcribe.side_effect = ConnectionError("no network")

    resp = await async_client.post(
        "/api/v1/pipeline/run",
        json={"audioData": base64.b64encode(b"RIFF").decode(), "mimeType": "audio/wav"},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "failed"
    assert body["stage"] == "idle"
    assert body["failedStage"] == "transcribe"
    assert body["audio"]["key"].endswith(".wav")
    assert body["transcription"] is None
    assert body["translation"] is None
    mock_llm.chat.assert_not_awaited()


async def test_pipeline_run_endpoint_stores_history(async_client, scripted):
    await async_client.post(
        "/api/v1/pipeline/run",
        json={
            "audioData": base64.b64encode(b"RIFF....").decode(),
            "mimeType": "audio/wav",
            "targetLanguage": "ja",
            "summaryType": "short",
        },
    )

    items = (await async_client.get("/api/v1/transcriptions")).json()
    resp = await async_client.get(f"/api/v1/transcriptions/{items[0]['id']}")

    assert resp.status_code == 200
    detail = resp.json()
    assert detail["text"] == SENTENCE
    assert detail["translations"][0]["translatedText"] == JAPANESE
    assert detail["translations"][0]["targetLanguage"] == "ja"
    assert detail["summaries"][0]["summaryText"] == SHORT_SUMMARY
    assert detail["summaries"][0]["summaryType"] == "short"


async def test_transcription_detail_not_found(async_client):
    resp = await async_client.get("/api/v1/transcriptions/999")
    assert resp.status_code == 404
    assert resp.json()["code"] == "TRANSCRIPTION_NOT_FOUND"

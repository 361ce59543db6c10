"""Unit tests for the Recorder state machine, using a fake input device."""

import io
import wave
from unittest.mock import AsyncMock

import pytest

from voicescribe.core.exceptions import PermissionDeniedError, RecorderBusyError, TranscriptionError
from voicescribe.core.models import PipelineRun, RecorderState
from voicescribe.services.audio.recorder import AudioSource, Recorder


class FakeSource(AudioSource):
    """In-memory device: ``emit()`` plays the role of the driver callback."""

    def __init__(self, fail_open: Exception | None = None) -> None:
        self.fail_open = fail_open
        self.opened = 0
        self.closed = 0
        self._on_chunk = None

    def open(self, on_chunk) -> None:
        self.opened += 1
        if self.fail_open is not None:
            raise self.fail_open
        self._on_chunk = on_chunk

    def close(self) -> None:
        self.closed += 1
        self._on_chunk = None

    def emit(self, data: bytes) -> None:
        self._on_chunk(data)


@pytest.fixture
def source():
    return FakeSource()


@pytest.fixture
def on_recording():
    return AsyncMock(return_value=PipelineRun())


class TestRecorder:
    async def test_stop_while_idle_is_noop(self, source, on_recording):
        recorder = Recorder(source, on_recording)

        assert await recorder.stop() is None

        assert recorder.state is RecorderState.idle
        assert source.closed == 0
        on_recording.assert_not_awaited()

    async def test_chunks_joined_in_order(self, source, on_recording, sample_pcm_bytes):
        recorder = Recorder(source, on_recording)
        recorder.start()
        assert recorder.state is RecorderState.recording

        half = len(sample_pcm_bytes) // 2
        source.emit(sample_pcm_bytes[:half])
        source.emit(sample_pcm_bytes[half:])
        await recorder.stop()

        recording = on_recording.call_args[0][0]
        assert recording.mime_type == "audio/wav"
        assert recording.duration == pytest.approx(1.0)
        with wave.open(io.BytesIO(recording.data), "rb") as wf:
            assert wf.readframes(wf.getnframes()) == sample_pcm_bytes
        assert recorder.last_recording == recording

    async def test_device_released_and_state_back_to_idle(self, source, on_recording):
        recorder = Recorder(source, on_recording)
        recorder.start()

        result = await recorder.stop()

        assert result == on_recording.return_value
        assert source.closed == 1
        assert recorder.state is RecorderState.idle

    async def test_processing_state_while_pipeline_runs(self, source):
        seen = []
        recorder = None

        async def handler(recording):
            seen.append(recorder.state)
            return PipelineRun()

        recorder = Recorder(source, handler)
        recorder.start()
        await recorder.stop()

        assert seen == [RecorderState.processing]

    async def test_start_while_recording_is_busy(self, source, on_recording):
        recorder = Recorder(source, on_recording)
        recorder.start()
        with pytest.raises(RecorderBusyError):
            recorder.start()
        assert source.opened == 1

    async def test_start_while_processing_is_busy(self, source):
        recorder = None
        errors = []

        async def handler(recording):
            try:
                recorder.start()
            except RecorderBusyError as exc:
                errors.append(exc)
            return PipelineRun()

        recorder = Recorder(source, handler)
        recorder.start()
        await recorder.stop()

        assert len(errors) == 1
        assert errors[0].status_code == 409

    def test_permission_denied_leaves_idle(self, on_recording):
        source = FakeSource(fail_open=PermissionDeniedError())
        recorder = Recorder(source, on_recording)

        with pytest.raises(PermissionDeniedError):
            recorder.start()

        assert recorder.state is RecorderState.idle

    async def test_chunks_after_stop_are_ignored(self, source, on_recording):
        recorder = Recorder(source, on_recording)
        recorder.start()
        callback = source._on_chunk
        await recorder.stop()

        callback(b"\x01\x00")

        assert recorder._chunks == []

    async def test_pipeline_failure_propagates_and_resets(self, source, on_recording):
        on_recording.side_effect = TranscriptionError("Transcription failed")
        recorder = Recorder(source, on_recording)
        recorder.start()

        with pytest.raises(TranscriptionError):
            await recorder.stop()

        assert recorder.state is RecorderState.idle
        recorder.start()
        assert recorder.state is RecorderState.recording

    async def test_odd_trailing_byte_truncated(self, source, on_recording):
        recorder = Recorder(source, on_recording)
        recorder.start()
        source.emit(b"\x10\x00\x20")
        await recorder.stop()

        recording = on_recording.call_args[0][0]
        with wave.open(io.BytesIO(recording.data), "rb") as wf:
            assert wf.getnframes() == 1

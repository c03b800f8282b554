import json

import pytest

from avatar_capture import AvatarRecorder, RecorderConfig, run
from avatar_capture.errors import EmptyCapture, MalformedDocument, NoSessionLoaded, SessionIOError
from avatar_capture.playback import PlaybackState

from tests.helpers import make_session


@pytest.fixture()
def recorder(rig_source, sink, clock, tmp_path):
    config = RecorderConfig(capture_rate=10, capture_dir=str(tmp_path), file_name="take")
    return AvatarRecorder(rig_source, sink, config, clock=clock)


def capture_frames(recorder, clock, ticks, step=0.1):
    recorder.start_capture()
    for _ in range(ticks):
        clock.advance(step)
        recorder.tick()
    recorder.stop_capture()


def test_tick_routes_to_capture(recorder, clock):
    recorder.start_capture()
    assert recorder.is_capturing()
    clock.advance(0.05)
    assert recorder.tick() == 0
    clock.advance(0.05)
    assert recorder.tick() == 1
    assert recorder.status_line() == "RECORDING... (1 frames)"


def test_save_capture_writes_session_file(recorder, clock, tmp_path):
    capture_frames(recorder, clock, ticks=5)

    path = recorder.save_capture()

    assert path.parent == tmp_path
    assert path.name.startswith("take_") and path.suffix == ".json"
    assert recorder.last_saved_path == path
    assert recorder.capture.frame_count == 0
    document = json.loads(path.read_text())
    assert document["frameCount"] == 5
    assert document["totalDuration"] == pytest.approx(0.5)


def test_save_capture_without_frames(recorder):
    with pytest.raises(EmptyCapture):
        recorder.save_capture()


def test_failed_save_keeps_frames(recorder, clock, tmp_path):
    capture_frames(recorder, clock, ticks=3)
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("")

    with pytest.raises(SessionIOError):
        recorder.save_capture(directory=blocker)

    assert recorder.capture.frame_count == 3
    assert recorder.save_capture().exists()


def test_capture_then_play_back(recorder, clock, sink):
    capture_frames(recorder, clock, ticks=4)
    recorder.load(recorder.save_capture())

    recorder.play()
    assert recorder.is_playing()
    assert recorder.tick() == 0
    clock.advance(0.1)
    assert recorder.tick() == 1
    clock.advance(1.0)
    assert recorder.tick() == 3
    assert recorder.playback.state is PlaybackState.COMPLETED
    assert not recorder.is_playing()
    assert [t for channel, _, t in sink.records if channel == "face.mouthOpen"] == pytest.approx(
        [0.1, 0.2, 0.3, 0.4])


def test_start_capture_stops_playback(recorder, five_frame_session):
    recorder.load_session(five_frame_session)
    recorder.play()

    recorder.start_capture()

    assert recorder.is_capturing()
    assert recorder.playback.state is PlaybackState.READY
    assert recorder.playback.index == 0


def test_play_stops_capture(recorder, five_frame_session):
    recorder.load_session(five_frame_session)
    recorder.start_capture()

    recorder.play()

    assert not recorder.is_capturing()
    assert recorder.is_playing()


def test_failed_load_keeps_previous_session(recorder, five_frame_session, tmp_path):
    recorder.load_session(five_frame_session)

    with pytest.raises(SessionIOError):
        recorder.load(tmp_path / "missing.json")
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    with pytest.raises(MalformedDocument):
        recorder.load(broken)

    assert recorder.playback.session is five_frame_session
    assert recorder.playback.state is PlaybackState.READY


def test_play_without_session(recorder):
    with pytest.raises(NoSessionLoaded):
        recorder.play()
    assert recorder.status_line() == "Idle (0 frames captured)"


def test_toggle_commands(recorder, clock, five_frame_session):
    recorder.toggle_capture()
    assert recorder.is_capturing()
    recorder.toggle_capture()
    assert not recorder.is_capturing()

    recorder.load_session(five_frame_session)
    recorder.toggle_play()
    assert recorder.playback.state is PlaybackState.PLAYING
    recorder.toggle_play()
    assert recorder.playback.state is PlaybackState.PAUSED
    recorder.toggle_play()
    assert recorder.playback.state is PlaybackState.PLAYING
    recorder.stop()
    assert recorder.playback.state is PlaybackState.READY


def test_speed_and_seek_delegate(recorder, five_frame_session):
    recorder.load_session(five_frame_session)
    assert recorder.set_speed(10.0) == 3.0
    recorder.seek(3)
    assert recorder.playback.index == 3


def test_run_stops_when_playback_completes(rig_source, sink):
    recorder = AvatarRecorder(rig_source, sink)
    recorder.load_session(make_session([0.0]))
    recorder.play()

    ticks = run(recorder, frequency=1000.0)

    assert ticks == 1
    assert recorder.playback.state is PlaybackState.COMPLETED


def test_run_honours_should_continue(recorder):
    remaining = [3]
    seen = []

    def should_continue():
        remaining[0] -= 1
        return remaining[0] >= 0

    ticks = run(recorder, frequency=1000.0, should_continue=should_continue,
                on_tick=seen.append)

    assert ticks == 3
    assert seen == [recorder] * 3

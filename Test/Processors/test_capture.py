# 11.10.26

import sys
import logging

import pytest
from rich.logging import RichHandler

from FragmentMux.core.processors import merge, mux
from FragmentMux.core.processors import invoke_tool, run_plan, mux_tracks
from FragmentMux.core.processors import MediaType, MuxPlan, OutputTrack, ExternalToolError


def python_plan(tmp_path, code, temp_files=()):
    # mkvmerge protocol renders only global args, enough to run an inline script
    return MuxPlan(
        binary=sys.executable,
        output_path=str(tmp_path / "out.mkv"),
        protocol="mkvmerge",
        global_args=("-c", code),
        working_dir=str(tmp_path),
        temp_files=tuple(temp_files),
    )


def test_invoke_tool_reports_exit_code_and_stderr():
    code = "import sys; sys.stderr.write('bad input\\n'); sys.exit(3)"

    returncode, diagnostics = invoke_tool(sys.executable, ["-c", code])

    assert returncode == 3
    assert diagnostics == ["bad input"]


def test_invoke_tool_drains_large_stderr():
    code = "import sys\nfor i in range(20000): sys.stderr.write('line %d\\n' % i)"

    returncode, diagnostics = invoke_tool(sys.executable, ["-c", code])

    assert returncode == 0
    assert len(diagnostics) == 20000


def test_invoke_tool_missing_binary(tmp_path):
    with pytest.raises(ExternalToolError) as excinfo:
        invoke_tool(str(tmp_path / "no-such-tool"), [])

    assert excinfo.value.returncode is None


def test_run_plan_success_removes_temp_files(tmp_path):
    temp = tmp_path / "concat_list.txt"
    temp.write_text("file 'a.ts'\n", encoding="utf-8")

    result = run_plan(python_plan(tmp_path, "pass", [str(temp)]))

    assert result.success
    assert bool(result) is True
    assert not temp.exists()


def test_run_plan_failure_is_boolean(tmp_path):
    result = run_plan(python_plan(tmp_path, "import sys; sys.exit(1)"))

    assert not result
    assert result.returncode == 1


def test_run_plan_check_raises(tmp_path):
    code = "import sys; sys.stderr.write('Invalid data found\\n'); sys.exit(2)"

    with pytest.raises(ExternalToolError) as excinfo:
        run_plan(python_plan(tmp_path, code), check=True)

    assert excinfo.value.returncode == 2
    assert excinfo.value.diagnostics == ["Invalid data found"]


@pytest.mark.parametrize("fmt, use_mkvmerge, protocol", [
    ("MKV", True, "mkvmerge"),
    ("MP4", True, "ffmpeg"),
    ("MKV", False, "ffmpeg"),
])
def test_mux_tracks_picks_tool(tmp_path, monkeypatch, fmt, use_mkvmerge, protocol):
    video = tmp_path / "video.mp4"
    video.write_bytes(b"")
    plans = []

    class Result:
        success = True

    def fake_run_plan(plan, **kwargs):
        plans.append(plan)
        return Result()

    monkeypatch.setattr(mux, "run_plan", fake_run_plan)

    assert mux_tracks([OutputTrack(str(video), MediaType.VIDEO)], str(tmp_path / "movie"), fmt, use_mkvmerge=use_mkvmerge)
    assert plans[0].protocol == protocol


def test_run_plan_routes_logging_through_rich(tmp_path):
    run_plan(python_plan(tmp_path, "pass"))

    assert any(isinstance(h, RichHandler) for h in logging.getLogger("").handlers)


@pytest.fixture
def captured_plans(monkeypatch):
    plans = []

    class Result:
        success = True

    def fake_run_plan(plan, **kwargs):
        plans.append(plan)
        return Result()

    monkeypatch.setattr(mux, "run_plan", fake_run_plan)
    return plans


def test_mux_date_follows_write_date_config(tmp_path, captured_plans):
    video = tmp_path / "video.mp4"
    video.write_bytes(b"")
    tracks = [OutputTrack(str(video), MediaType.VIDEO)]

    assert mux_tracks(tracks, str(tmp_path / "movie"), "MP4", use_mkvmerge=False)
    assert mux.mux_inputs_by_ffmpeg(tracks, str(tmp_path / "movie"), "MP4", date_info=False)

    assert ("date" in captured_plans[0].metadata_for("")) is merge.WRITE_DATE
    assert "date" not in captured_plans[1].metadata_for("")

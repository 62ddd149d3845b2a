import io
import logging

import pytest

from smartypub.cli import run_cli, collect_files, build_parser
from smartypub.core.batch_processor import BatchProcessor
from smartypub.core.pipeline import ProcessingPipeline, InputFile
from smartypub.utils.config import ProcessingConfig, Action
from smartypub.utils.logger import setup_main_logger, MAX_LOG_FILES


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger("smartypub")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


def test_process_text_actions():
    assert ProcessingPipeline(ProcessingConfig()).process_text("a--b") == "a—b"
    assert ProcessingPipeline(ProcessingConfig(action=Action.NORMALIZE)).process_text("&mdash;") == "—"
    assert ProcessingPipeline(ProcessingConfig(action=Action.STUPEFY)).process_text("a—b") == "a--b"


def test_output_next_to_input(tmp_path):
    src = tmp_path / "page.html"
    src.write_text("<p>It's--here</p>", encoding="utf-8")

    target = ProcessingPipeline(ProcessingConfig()).process(src)

    assert target == tmp_path / "page.smart.html"
    assert target.read_text(encoding="utf-8") == "<p>It’s—here</p>"
    assert src.read_text(encoding="utf-8") == "<p>It's--here</p>"


def test_in_place(tmp_path):
    src = tmp_path / "page.html"
    src.write_text("Huh...?", encoding="utf-8")

    target = ProcessingPipeline(ProcessingConfig(in_place=True)).process(src)

    assert target == src
    assert src.read_text(encoding="utf-8") == "Huh…?"


def test_output_folder_and_filename(tmp_path):
    src = tmp_path / "page.html"
    src.write_text("x", encoding="utf-8")

    folder_cfg = ProcessingConfig(output_path=tmp_path / "out")
    assert ProcessingPipeline(folder_cfg).process(src) == tmp_path / "out" / "page.html"

    file_cfg = ProcessingConfig(output_path=tmp_path / "result.html")
    assert ProcessingPipeline(file_cfg).process(src, single_input=True) == tmp_path / "result.html"


def test_output_folder_mirrors_input_folder(tmp_path):
    pipeline = ProcessingPipeline(ProcessingConfig(output_path=tmp_path / "out"))
    src = tmp_path / "in" / "ch1" / "index.html"

    assert pipeline.output_path_for(src, root=tmp_path / "in") == tmp_path / "out" / "ch1" / "index.html"
    assert pipeline.output_path_for(src) == tmp_path / "out" / "index.html"


def test_line_endings_are_preserved(tmp_path):
    src = tmp_path / "page.html"
    src.write_bytes(b"a--b\r\n")

    target = ProcessingPipeline(ProcessingConfig()).process(src)

    assert target.read_bytes() == "a—b\r\n".encode("utf-8")


def test_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        ProcessingPipeline(ProcessingConfig()).process(tmp_path / "nope.html")


def test_batch_reports_each_file(tmp_path):
    good = tmp_path / "good.html"
    good.write_text("a--b", encoding="utf-8")
    bad = tmp_path / "bad.html"
    bad.write_bytes(b"\xff\xfe\xfa")

    seen = {}
    def callback(path, result, exc):
        seen[path.name] = (result, exc)

    results = BatchProcessor(ProcessingConfig(num_threads=2)).run([good, bad], callback)

    assert [r[0] for r in results] == [good, bad]
    assert seen["good.html"] == (tmp_path / "good.smart.html", None)
    assert seen["bad.html"][0] is None
    assert "UnicodeDecodeError" in str(seen["bad.html"][1])
    assert (tmp_path / "good.smart.html").read_text(encoding="utf-8") == "a—b"


def test_batch_with_no_files():
    assert BatchProcessor(ProcessingConfig()).run([]) == []


def test_collect_files(tmp_path):
    (tmp_path / "a.html").write_text("", encoding="utf-8")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "b.xhtml").write_text("", encoding="utf-8")
    (tmp_path / "c.png").write_bytes(b"")
    (tmp_path / "d.txt").write_text("", encoding="utf-8")

    files = collect_files([tmp_path, tmp_path / "missing.html"])

    assert sorted(f.path.name for f in files) == ["a.html", "b.xhtml"]
    assert all(f.root == tmp_path for f in files)


def test_collect_files_lists_overlapping_inputs_once(tmp_path):
    page = tmp_path / "a.html"
    page.write_text("", encoding="utf-8")

    files = collect_files([tmp_path, page, page])

    assert files == [InputFile(page, tmp_path)]


def test_collect_files_skips_earlier_outputs(tmp_path):
    (tmp_path / "page.html").write_text("", encoding="utf-8")
    (tmp_path / "page.smart.html").write_text("", encoding="utf-8")
    (tmp_path / "out").mkdir()
    (tmp_path / "out" / "other.html").write_text("", encoding="utf-8")

    pipeline = ProcessingPipeline(ProcessingConfig(output_path=tmp_path / "out"))
    files = collect_files([tmp_path], pipeline)

    assert [f.path.name for f in files] == ["page.html"]


def test_batch_returns_a_result_for_every_input(tmp_path):
    src = tmp_path / "a.html"
    src.write_text("a--b", encoding="utf-8")

    calls = []
    results = BatchProcessor(ProcessingConfig(num_threads=2)).run(
        [src, src], lambda path, result, exc: calls.append((result, exc))
    )

    assert len(calls) == 2
    assert len(results) == 2
    assert [r[0] for r in results] == [src, src]
    assert results[0][1] == tmp_path / "a.smart.html"
    assert "collides" in str(results[1][3])
    assert (tmp_path / "a.smart.html").read_text(encoding="utf-8") == "a—b"


def test_cli_second_run_does_not_reprocess_its_output(tmp_path):
    (tmp_path / "page.html").write_text("a--b", encoding="utf-8")
    args = [str(tmp_path), "--no-log-file", "--threads", "1"]

    assert run_cli(args) == 0
    assert run_cli(args) == 0

    assert sorted(p.name for p in tmp_path.iterdir()) == ["page.html", "page.smart.html"]
    assert (tmp_path / "page.smart.html").read_text(encoding="utf-8") == "a—b"


def test_cli_output_folder_keeps_subfolders(tmp_path):
    src = tmp_path / "src"
    for name, text in (("x", "x--1"), ("y", "y--2")):
        (src / name).mkdir(parents=True)
        (src / name / "index.html").write_text(text, encoding="utf-8")
    out = tmp_path / "out"

    status = run_cli([str(src), "-o", str(out), "--no-log-file", "--threads", "2"])

    assert status == 0
    assert (out / "x" / "index.html").read_text(encoding="utf-8") == "x—1"
    assert (out / "y" / "index.html").read_text(encoding="utf-8") == "y—2"


def test_cli_reports_colliding_outputs(tmp_path, capsys):
    first = tmp_path / "x" / "index.html"
    second = tmp_path / "y" / "index.html"
    for path, text in ((first, "x--1"), (second, "y--2")):
        path.parent.mkdir()
        path.write_text(text, encoding="utf-8")
    out = tmp_path / "out"

    status = run_cli([str(first), str(second), "-o", str(out), "--no-log-file", "--threads", "2"])

    assert status == 1
    assert (out / "index.html").read_text(encoding="utf-8") == "x—1"
    assert "collides" in capsys.readouterr().out


def test_in_place_has_no_short_option():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["page.html", "-i"])


def test_cli_stdin_to_stdout(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("\"Isn't this fun?\""))

    status = run_cli(["-", "--no-log-file"])

    assert status == 0
    assert capsys.readouterr().out == "“Isn’t this fun?”"


def test_cli_stupefy_in_place(tmp_path):
    src = tmp_path / "page.md"
    src.write_text("“Hi” — there…", encoding="utf-8")

    status = run_cli([str(src), "-a", "stupefy", "--in-place", "--no-log-file", "--threads", "1"])

    assert status == 0
    assert src.read_text(encoding="utf-8") == '"Hi" -- there...'


def test_cli_rejects_unknown_action(capsys):
    with pytest.raises(SystemExit):
        run_cli(["-", "-a", "shout", "--no-log-file"])


def test_main_logger_writes_and_rotates(tmp_path):
    for i in range(MAX_LOG_FILES + 5):
        (tmp_path / f"smartypub_old{i:02d}.log").write_text("", encoding="utf-8")

    logger = setup_main_logger(logging.ERROR, log_dir=tmp_path)

    assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)
    assert len(list(tmp_path.glob("smartypub_*.log"))) == MAX_LOG_FILES

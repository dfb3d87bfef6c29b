from pathlib import Path

from loguru import logger

from storage import SessionLogger


def test_session_markers_and_mirrored_records(tmp_path):
    # Arrange
    session = SessionLogger(log_dir=str(tmp_path))

    # Act
    session.log_kv("config", {"engine": "vosk"})
    logger.info("parsed bench press")
    session.log_end()
    logger.info("after the end")

    # Assert
    text = Path(session.log_path).read_text(encoding="utf-8")
    assert Path(session.log_path).name.startswith("workout_session_")
    assert "=== SESSION START ===" in text
    assert '"engine": "vosk"' in text
    assert "parsed bench press" in text
    assert "after the end" not in text
    assert "=== SESSION END ===" in text


def test_log_end_is_idempotent(tmp_path):
    session = SessionLogger(log_dir=str(tmp_path))

    session.log_end()
    session.log_end()

    text = Path(session.log_path).read_text(encoding="utf-8")
    assert text.count("=== SESSION END ===") == 1


def test_without_auto_start(tmp_path):
    session = SessionLogger(log_dir=str(tmp_path), auto_start=False)
    session.log("hello")
    session.log_end()

    text = Path(session.log_path).read_text(encoding="utf-8")
    assert "SESSION START" not in text
    assert "hello" in text


def test_records_below_level_not_mirrored(tmp_path):
    session = SessionLogger(log_dir=str(tmp_path), level="WARNING")
    logger.info("quiet detail")
    logger.warning("loud problem")
    session.log_end()

    text = Path(session.log_path).read_text(encoding="utf-8")
    assert "quiet detail" not in text
    assert "loud problem" in text

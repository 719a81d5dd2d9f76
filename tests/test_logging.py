import logging

from logger import LOGGER_NAME, log, setup_logger
from simulation.logging_utils import create_building_logger, create_system_logger


def test_setup_logger_writes_to_configured_file(tmp_path) -> None:
    log_file = tmp_path / "logs" / "run.log"
    logger = setup_logger("INFO", str(log_file), "%(levelname)s %(message)s")
    try:
        log("debug is filtered", level="DEBUG")
        log("day started", level="INFO")
        for handler in logger.handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "INFO day started" in content
        assert "debug is filtered" not in content
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)


def test_component_loggers_prefix_messages(caplog) -> None:
    system = create_system_logger("ServiceFunding")
    building = create_building_logger("building_3", "House")

    with caplog.at_level("INFO", logger=LOGGER_NAME):
        system.info("2 services paid")
        building.log_state_change("occupied", "abandoned", "3 unhappy days in a row")

    assert "[ServiceFunding] [INFO] 2 services paid" in caplog.text
    assert "[House:building_3] [INFO] State change: occupied -> abandoned" in caplog.text
    assert '"reason": "3 unhappy days in a row"' in caplog.text
    assert system.log_count == 1
    assert building.log_count == 1

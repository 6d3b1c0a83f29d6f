"""
Test suite for package logging setup
"""

import logging

from jquants_client.logging_config import PACKAGE_LOGGER, configure_logging


class TestConfigureLogging:
    """Test suite for configure_logging"""

    def teardown_method(self):
        logger = logging.getLogger(PACKAGE_LOGGER)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    def test_configure_logging_sets_level_and_stream_handler(self):
        # Act
        logger = configure_logging("DEBUG")

        # Assert
        assert logger.name == PACKAGE_LOGGER
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_configure_logging_twice_replaces_handlers(self):
        # Act
        configure_logging("INFO")
        logger = configure_logging("WARNING")

        # Assert
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

    def test_configure_logging_with_file_writes_records(self, tmp_path):
        # Arrange
        log_file = tmp_path / "logs" / "jquants.log"

        # Act
        logger = configure_logging("INFO", log_file)
        logging.getLogger("jquants_client.pagination").info("Pagination finished")
        for handler in logger.handlers:
            handler.flush()

        # Assert
        assert log_file.exists()
        assert "jquants_client.pagination - INFO - Pagination finished" in log_file.read_text()

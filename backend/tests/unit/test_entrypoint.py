"""
Unit tests for the console entry point.
"""
from unittest.mock import patch

from webaudit import main


def test_run_serves_app_with_uvicorn():
    with patch.object(main.uvicorn, "run") as mock_run:
        main.run()

    mock_run.assert_called_once_with(
        "webaudit.main:app",
        host=main.settings.HOST,
        port=main.settings.PORT,
        log_level="info",
    )

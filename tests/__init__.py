# =============================================================================
# tests/ - Test Suite
# =============================================================================
# - test_config.py: Environment validation and the startup gate
# - test_exceptions.py: ErrorKind / ApiError
# - test_mongo_client.py: MongoDB connection (mocked client)
# - test_logging_config.py: File and console logging
# - test_app.py: FastAPI app, handlers and the main() sequence
#
# Run tests with: pytest
# =============================================================================

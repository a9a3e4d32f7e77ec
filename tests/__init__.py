# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the FarmFresh Market API:
# - test_models.py: Pydantic model validation and row decoding
# - test_catalog_filter.py: The catalog filter engine
# - test_contact.py: Contact router, messengers and the contact flow
# - test_catalog_service.py / test_profile_service.py: Services with a patched data layer
# - test_api.py: Endpoints through FastAPI's TestClient
#
# Run tests with: pytest
# =============================================================================

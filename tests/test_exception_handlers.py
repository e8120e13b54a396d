import importlib
import warnings

import app.api.exception_handlers as exception_handlers
from app.errors import DomainValidationError, VALIDATION_ERROR


def test_module_import_emits_no_deprecation_warning():
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        importlib.reload(exception_handlers)

    deprecations = [w for w in caught if issubclass(w.category, DeprecationWarning)]
    assert deprecations == []


def test_domain_validation_maps_to_422():
    assert exception_handlers.DOMAIN_ERRORS[DomainValidationError] == (422, VALIDATION_ERROR)
    assert exception_handlers.HTTP_STATUS_CODES[422] == VALIDATION_ERROR


def test_domain_validation_error_envelope(client, user_headers: dict):
    # Joining a group one already masters is a business-rule rejection
    group = client.post(
        "/api/v1/groups",
        json={"name": "t", "description": "t", "schedule": "t", "location": "t", "chronic": "t"},
        headers=user_headers,
    ).json()
    response = client.post(f"/api/v1/groups/{group['id']}/requests", headers=user_headers)
    assert response.status_code == 422
    assert response.json() == {
        "detail": "user is already in the group",
        "code": "VALIDATION_ERROR",
        "status": 422,
    }

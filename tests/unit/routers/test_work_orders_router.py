"""
Unit tests for the work orders router and the exception handlers in main.py.

The REST repository is replaced with a Mock through app.dependency_overrides;
the lifecycle and role services run for real on top of it.

Tests validate:
- Acting user headers (401 missing, 422 unknown role)
- OPERARIO listing is scoped to assigned orders
- Detail payload (actions, can_mutate, can_edit, date warning)
- Transition and activity endpoints
- FarmOpsException → HTTP status mapping
"""
import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock

from farmops.core.dependency import get_work_order_repository
from farmops.exceptions import (
    BackendTimeoutError,
    BackendUnreachableError,
    RemoteRejectedError,
    WorkOrderNotFoundError
)
from farmops.main import app
from farmops.models.enums import WorkOrderStatus
from farmops.models.work_order import Activity
from farmops.repositories.work_order_repository import WorkOrderRepository

OPERARIO_HEADERS = {"X-User-Id": "u-operario-7", "X-User-Role": "OPERARIO"}
CAPATAZ_HEADERS = {"X-User-Id": "u-capataz-2", "X-User-Role": "CAPATAZ"}


@pytest.fixture
def mock_repo():
    """Mock WorkOrderRepository."""
    return Mock(spec=WorkOrderRepository)


@pytest.fixture
def client(mock_repo):
    """FastAPI test client with the repository overridden."""
    app.dependency_overrides[get_work_order_repository] = lambda: mock_repo
    yield TestClient(app)
    app.dependency_overrides.clear()


# ============================================================================
# USUARIO ACTUAL
# ============================================================================


def test_missing_user_headers_returns_401(client):
    response = client.get("/api/work-orders")
    assert response.status_code == 401


def test_unknown_role_returns_422(client):
    response = client.get("/api/work-orders", headers={"X-User-Id": "u-1", "X-User-Role": "GERENTE"})
    assert response.status_code == 422


def test_role_header_is_case_insensitive(client, mock_repo):
    mock_repo.list_work_orders.return_value = []
    response = client.get("/api/work-orders", headers={"X-User-Id": "u-1", "X-User-Role": "capataz"})
    assert response.status_code == 200


# ============================================================================
# LISTADO
# ============================================================================


def test_operario_only_lists_assigned_orders(client, mock_repo, make_work_order):
    mock_repo.list_work_orders.return_value = [make_work_order(WorkOrderStatus.PENDING)]

    response = client.get("/api/work-orders?status=PENDING", headers=OPERARIO_HEADERS)

    assert response.status_code == 200
    assert response.json()["total"] == 1
    mock_repo.list_work_orders.assert_called_once_with(
        status=[WorkOrderStatus.PENDING],
        assigned_to_id="u-operario-7"
    )


def test_capataz_lists_every_order(client, mock_repo):
    mock_repo.list_work_orders.return_value = []

    response = client.get("/api/work-orders", headers=CAPATAZ_HEADERS)

    assert response.status_code == 200
    assert response.json() == {"work_orders": [], "total": 0}
    mock_repo.list_work_orders.assert_called_once_with(status=None, assigned_to_id=None)


# ============================================================================
# DETALLE Y ACCIONES
# ============================================================================


def test_detail_for_assigned_operator(client, mock_repo, make_work_order):
    mock_repo.get_work_order.return_value = make_work_order(
        WorkOrderStatus.PENDING, due_date="2020-01-01T12:00:00Z"
    )

    response = client.get("/api/work-orders/wo-1", headers=OPERARIO_HEADERS)

    assert response.status_code == 200
    body = response.json()
    assert body["work_order"]["assignedToId"] == "u-operario-7"
    assert [a["next_status"] for a in body["actions"]] == ["IN_PROGRESS"]
    assert body["actions"][0]["label"] == "Start Work"
    assert body["can_mutate"] is True
    assert body["can_edit"] is True
    assert body["edit_disabled_reason"] is None
    assert body["date_warning"]["status"] == "overdue"
    assert body["date_badge_variant"] == "destructive"


def test_detail_for_completed_order(client, mock_repo, make_work_order):
    mock_repo.get_work_order.return_value = make_work_order(
        WorkOrderStatus.COMPLETED, due_date="2020-01-01T12:00:00Z"
    )

    body = client.get("/api/work-orders/wo-1", headers=CAPATAZ_HEADERS).json()

    assert body["actions"] == []
    assert body["can_mutate"] is False
    assert body["can_edit"] is False
    assert body["edit_disabled_reason"] == "Completed work orders cannot be edited"
    assert body["date_warning"] is None
    assert body["date_badge_variant"] == "default"


def test_actions_endpoint_for_capataz_under_review(client, mock_repo, make_work_order):
    mock_repo.get_work_order.return_value = make_work_order(WorkOrderStatus.UNDER_REVIEW)

    response = client.get("/api/work-orders/wo-1/actions", headers=CAPATAZ_HEADERS)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "UNDER_REVIEW"
    assert body["total"] == 3
    assert [(a["next_status"], a["label"], a["severity"]) for a in body["actions"]] == [
        ("IN_PROGRESS", "Reopen", "outline"),
        ("COMPLETED", "Approve & Close", "default"),
        ("CANCELLED", "Cancel Order", "destructive"),
    ]


def test_actions_endpoint_for_unassigned_operator(client, mock_repo, make_work_order):
    mock_repo.get_work_order.return_value = make_work_order(
        WorkOrderStatus.PENDING, assigned_to_id="u-operario-9"
    )

    body = client.get("/api/work-orders/wo-1/actions", headers=OPERARIO_HEADERS).json()

    assert body["actions"] == []
    assert body["total"] == 0


def test_unknown_work_order_returns_404(client, mock_repo):
    mock_repo.get_work_order.side_effect = WorkOrderNotFoundError("wo-404")

    response = client.get("/api/work-orders/wo-404", headers=CAPATAZ_HEADERS)

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "WORK_ORDER_NOT_FOUND"
    assert body["kind"] == "NOT_FOUND"


# ============================================================================
# TRANSICIONES
# ============================================================================


def test_transition_returns_server_representation(client, mock_repo, make_work_order):
    mock_repo.get_work_order.return_value = make_work_order(WorkOrderStatus.PENDING)
    mock_repo.update_status.return_value = make_work_order(WorkOrderStatus.IN_PROGRESS)

    response = client.post(
        "/api/work-orders/wo-1/transition",
        json={"next_status": "IN_PROGRESS"},
        headers=OPERARIO_HEADERS
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["previous_status"] == "PENDING"
    assert body["work_order"]["status"] == "IN_PROGRESS"
    mock_repo.update_status.assert_called_once_with("wo-1", WorkOrderStatus.IN_PROGRESS)


def test_forbidden_transition_returns_403_without_update(client, mock_repo, make_work_order):
    mock_repo.get_work_order.return_value = make_work_order(WorkOrderStatus.UNDER_REVIEW)

    response = client.post(
        "/api/work-orders/wo-1/transition",
        json={"next_status": "COMPLETED"},
        headers=OPERARIO_HEADERS
    )

    assert response.status_code == 403
    body = response.json()
    assert body["error"] == "TRANSITION_NOT_PERMITTED"
    assert body["kind"] == "FORBIDDEN"
    mock_repo.update_status.assert_not_called()


def test_invalid_next_status_returns_422(client, mock_repo):
    response = client.post(
        "/api/work-orders/wo-1/transition",
        json={"next_status": "ARCHIVED"},
        headers=CAPATAZ_HEADERS
    )

    assert response.status_code == 422
    mock_repo.update_status.assert_not_called()


@pytest.mark.parametrize("error,http_status,error_code", [
    (RemoteRejectedError("Status changed, reload", upstream_status=409), 409, "REMOTE_REJECTED"),
    (RemoteRejectedError("Validation failed", upstream_status=422), 422, "REMOTE_REJECTED"),
    (RemoteRejectedError("Internal error", upstream_status=500), 502, "REMOTE_REJECTED"),
    (RemoteRejectedError("No status"), 502, "REMOTE_REJECTED"),
    (BackendUnreachableError("could not update"), 503, "BACKEND_UNREACHABLE"),
    (BackendTimeoutError(10, "update the work order status"), 504, "BACKEND_TIMEOUT"),
])
def test_backend_failures_map_to_http_status(
    client, mock_repo, make_work_order, error, http_status, error_code
):
    mock_repo.get_work_order.return_value = make_work_order(WorkOrderStatus.IN_PROGRESS)
    mock_repo.update_status.side_effect = error

    response = client.post(
        "/api/work-orders/wo-1/transition",
        json={"next_status": "UNDER_REVIEW"},
        headers=CAPATAZ_HEADERS
    )

    assert response.status_code == http_status
    body = response.json()
    assert body["error"] == error_code
    assert body["message"] == error.message


# ============================================================================
# ACTIVIDADES
# ============================================================================

ACTIVITY_BODY = {
    "type": "RIEGO",
    "executionDate": "2026-10-18T08:00:00Z",
    "hoursWorked": 3.5
}


def test_add_activity_in_progress(client, mock_repo, make_work_order):
    mock_repo.get_work_order.return_value = make_work_order(WorkOrderStatus.IN_PROGRESS)
    mock_repo.create_activity.return_value = Activity(
        id="act-1",
        work_order_id="wo-1",
        type="RIEGO",
        execution_date="2026-10-18T08:00:00Z",
        hours_worked=3.5
    )

    response = client.post("/api/work-orders/wo-1/activities", json=ACTIVITY_BODY, headers=OPERARIO_HEADERS)

    assert response.status_code == 201
    body = response.json()
    assert body["activity"]["id"] == "act-1"
    assert body["activity"]["workOrderId"] == "wo-1"
    mock_repo.create_activity.assert_called_once()


def test_add_activity_outside_in_progress_returns_409(client, mock_repo, make_work_order):
    mock_repo.get_work_order.return_value = make_work_order(WorkOrderStatus.UNDER_REVIEW)

    response = client.post("/api/work-orders/wo-1/activities", json=ACTIVITY_BODY, headers=CAPATAZ_HEADERS)

    assert response.status_code == 409
    assert response.json()["error"] == "INVALID_WORK_ORDER_STATE"
    assert response.json()["kind"] == "INVALID_STATE"
    mock_repo.create_activity.assert_not_called()


def test_add_activity_by_unassigned_operator_returns_403(client, mock_repo, make_work_order):
    mock_repo.get_work_order.return_value = make_work_order(
        WorkOrderStatus.IN_PROGRESS, assigned_to_id="u-operario-9"
    )

    response = client.post("/api/work-orders/wo-1/activities", json=ACTIVITY_BODY, headers=OPERARIO_HEADERS)

    assert response.status_code == 403
    assert response.json()["error"] == "NOT_AUTHORIZED"
    mock_repo.create_activity.assert_not_called()


def test_add_activity_rejects_non_positive_hours(client, mock_repo):
    response = client.post(
        "/api/work-orders/wo-1/activities",
        json={**ACTIVITY_BODY, "hoursWorked": 0},
        headers=CAPATAZ_HEADERS
    )

    assert response.status_code == 422
    mock_repo.get_work_order.assert_not_called()


# ============================================================================
# HEALTH Y ERRORES NO MANEJADOS
# ============================================================================


def test_health_healthy(client, mock_repo):
    mock_repo.ping.return_value = True

    body = client.get("/api/health").json()

    assert body["status"] == "healthy"
    assert body["backend_connection"] == "ok"


def test_health_degraded_when_backend_down(client, mock_repo):
    mock_repo.ping.return_value = False

    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "degraded"


def test_unhandled_exception_returns_generic_500(mock_repo):
    app.dependency_overrides[get_work_order_repository] = lambda: mock_repo
    mock_repo.list_work_orders.side_effect = RuntimeError("boom")
    try:
        response = TestClient(app, raise_server_exceptions=False).get(
            "/api/work-orders", headers=CAPATAZ_HEADERS
        )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "INTERNAL_SERVER_ERROR"
    assert body["data"] is None


def test_operario_list_drops_orders_assigned_to_others(client, mock_repo, make_work_order):
    """Aunque el backend ignore assignedToId, el OPERARIO solo ve sus órdenes."""
    mock_repo.list_work_orders.return_value = [
        make_work_order(WorkOrderStatus.PENDING, id="wo-1"),
        make_work_order(WorkOrderStatus.IN_PROGRESS, id="wo-2", assigned_to_id="u-operario-9"),
        make_work_order(WorkOrderStatus.PENDING, id="wo-3", assigned_to_id=None),
    ]

    body = client.get("/api/work-orders", headers=OPERARIO_HEADERS).json()

    assert [wo["id"] for wo in body["work_orders"]] == ["wo-1"]
    assert body["total"] == 1


def test_capataz_list_is_not_filtered_locally(client, mock_repo, make_work_order):
    mock_repo.list_work_orders.return_value = [
        make_work_order(WorkOrderStatus.PENDING, id="wo-1"),
        make_work_order(WorkOrderStatus.PENDING, id="wo-2", assigned_to_id="u-operario-9"),
    ]

    body = client.get("/api/work-orders", headers=CAPATAZ_HEADERS).json()

    assert body["total"] == 2


def test_work_order_handlers_are_sync():
    """Los handlers usan un cliente httpx bloqueante: corren en el threadpool."""
    import inspect
    from farmops.routers import health, work_orders

    handlers = [
        work_orders.list_work_orders,
        work_orders.get_work_order_detail,
        work_orders.get_available_actions,
        work_orders.transition_work_order,
        work_orders.add_activity,
        health.health_check,
    ]
    assert not any(inspect.iscoroutinefunction(h) for h in handlers)

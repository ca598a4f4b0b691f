"""
Repositorio REST para órdenes de trabajo usando httpx.

Maneja toda la comunicación con la API de FarmOps: lectura de órdenes,
cambio de estado y registro de actividades. Traduce errores de transporte
y respuestas no-2xx a la jerarquía FarmOpsException.

Reintentos:
- Lecturas (GET) se reintentan con backoff exponencial (tenacity)
- Escrituras (PUT/POST) se envían una sola vez; un fallo se reintenta a mano
"""
import logging
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import (
    Retrying,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type
)

from farmops.config import config
from farmops.exceptions import (
    BackendTimeoutError,
    BackendUnreachableError,
    RemoteRejectedError,
    WorkOrderNotFoundError
)
from farmops.models.enums import WorkOrderStatus
from farmops.models.work_order import Activity, CreateActivityRequest, WorkOrder

ModelT = TypeVar("ModelT", bound=BaseModel)


def extract_error_message(response: httpx.Response, default: str) -> str:
    """
    Extrae el mensaje de error de una respuesta del backend.

    Orden de preferencia:
    1. errors[].message unidos con "; "
    2. message (string, o lista de strings unida con "; ")
    3. default

    Examples:
        >>> extract_error_message(httpx.Response(400, json={"message": "Bad status"}), "x")
        'Bad status'
    """
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or default

    if not isinstance(body, dict):
        return default

    errors = body.get("errors")
    if isinstance(errors, list):
        mensajes = [
            str(e["message"]) for e in errors
            if isinstance(e, dict) and e.get("message")
        ]
        if mensajes:
            return "; ".join(mensajes)

    message = body.get("message")
    if isinstance(message, list) and message:
        return "; ".join(str(m) for m in message)
    if isinstance(message, str) and message.strip():
        return message

    return default


def _unwrap(body: Any) -> Any:
    """La API envuelve los recursos en {"data": ...}; acepta también el recurso plano."""
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


class WorkOrderRepository:
    """
    Repositorio para operaciones sobre órdenes de trabajo en la API REST.

    Responsabilidades:
    - Autenticación con bearer token
    - Lectura de órdenes (individual y listado)
    - Actualización de estado (un solo request, sin reintentos)
    - Creación de actividades
    - Manejo de errores de transporte y de validación
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_backoff_seconds: Optional[float] = None,
        client: Optional[httpx.Client] = None
    ):
        """
        Inicializa el repositorio.

        Args:
            base_url: URL base de la API (default: config.FARM_API_URL)
            token: Bearer token (default: config.FARM_API_TOKEN)
            timeout_seconds: Timeout por request (default: config.REQUEST_TIMEOUT_SECONDS)
            max_retries: Intentos máximos para lecturas (default: config.FETCH_MAX_RETRIES)
            retry_backoff_seconds: Base del backoff exponencial de lecturas
            client: httpx.Client ya construido (tests inyectan un MockTransport)
        """
        self.logger = logging.getLogger(__name__)
        self.timeout_seconds = timeout_seconds or config.REQUEST_TIMEOUT_SECONDS
        self.max_retries = max_retries or config.FETCH_MAX_RETRIES
        self.retry_backoff_seconds = (
            config.FETCH_RETRY_BACKOFF_SECONDS
            if retry_backoff_seconds is None else retry_backoff_seconds
        )

        if client is None:
            headers = {"Content-Type": "application/json"}
            token = token if token is not None else config.FARM_API_TOKEN
            if token:
                headers["Authorization"] = f"Bearer {token}"
            client = httpx.Client(
                base_url=base_url or config.FARM_API_URL,
                headers=headers,
                timeout=self.timeout_seconds
            )
        self._client = client

    def close(self) -> None:
        self._client.close()

    # ==================== TRANSPORTE ====================

    def _request(self, method: str, path: str, operacion: str, **kwargs) -> httpx.Response:
        """
        Ejecuta un request y traduce errores de transporte.

        Raises:
            BackendTimeoutError: Si el backend no responde a tiempo
            BackendUnreachableError: Si no se puede conectar
        """
        try:
            return self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            self.logger.warning(f"Timeout on {method} {path} ({operacion}): {e}")
            raise BackendTimeoutError(self.timeout_seconds, operacion)
        except httpx.TransportError as e:
            self.logger.warning(f"Transport error on {method} {path} ({operacion}): {e}")
            raise BackendUnreachableError(f"could not {operacion}", details=str(e))

    def _check(
        self,
        response: httpx.Response,
        operacion: str,
        work_order_id: Optional[str] = None
    ) -> Any:
        """
        Valida el status de la respuesta y retorna el cuerpo desenvuelto.

        Raises:
            WorkOrderNotFoundError: Si el backend responde 404 para una orden
            RemoteRejectedError: Para cualquier otra respuesta no-2xx
        """
        if response.status_code == 404 and work_order_id is not None:
            raise WorkOrderNotFoundError(work_order_id)

        if response.is_error:
            message = extract_error_message(response, default=f"Failed to {operacion}")
            self.logger.info(
                f"Farm API rejected '{operacion}' with {response.status_code}: {message}"
            )
            raise RemoteRejectedError(message, upstream_status=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return _unwrap(response.json())
        except ValueError:
            raise RemoteRejectedError(
                f"Unexpected response from the farm API while trying to {operacion}",
                upstream_status=response.status_code,
                details=response.text[:200]
            )

    def _parse(self, model: type[ModelT], data: Any, operacion: str) -> ModelT:
        """
        Valida el cuerpo contra el modelo esperado.

        Raises:
            RemoteRejectedError: Si el backend respondió 2xx con un cuerpo que no es el recurso
        """
        try:
            return model.model_validate(data)
        except ValidationError as e:
            self.logger.error(f"Malformed farm API response for '{operacion}': {e}")
            raise RemoteRejectedError(
                f"Unexpected response from the farm API while trying to {operacion}",
                details=str(e)
            )

    def _read(self, path: str, operacion: str, work_order_id: Optional[str] = None, **kwargs) -> Any:
        """GET con reintentos ante fallos de transporte (no ante rechazos del backend)."""
        retrying = Retrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.retry_backoff_seconds, max=8),
            retry=retry_if_exception_type((BackendUnreachableError, BackendTimeoutError)),
            reraise=True
        )
        for attempt in retrying:
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    self.logger.warning(
                        f"Retrying GET {path} (attempt {attempt.retry_state.attempt_number}/{self.max_retries})"
                    )
                response = self._request("GET", path, operacion, **kwargs)
                return self._check(response, operacion, work_order_id)

    # ==================== LECTURA ====================

    def get_work_order(self, work_order_id: str) -> WorkOrder:
        """
        Obtiene una orden de trabajo por ID.

        Raises:
            WorkOrderNotFoundError: Si la orden no existe
            RemoteRejectedError: Si el backend rechaza la lectura
            BackendUnreachableError / BackendTimeoutError: Tras agotar reintentos
        """
        data = self._read(
            f"/work-orders/{work_order_id}",
            "load the work order",
            work_order_id=work_order_id
        )
        return self._parse(WorkOrder, data, "load the work order")

    def list_work_orders(
        self,
        status: Optional[list[WorkOrderStatus]] = None,
        assigned_to_id: Optional[str] = None
    ) -> list[WorkOrder]:
        """
        Lista órdenes de trabajo con filtros opcionales.

        Args:
            status: Estados a incluir (se envía un parámetro status por cada uno)
            assigned_to_id: Solo órdenes asignadas a este usuario
        """
        params: list[tuple[str, str]] = []
        for s in status or []:
            params.append(("status", WorkOrderStatus(s).value))
        if assigned_to_id:
            params.append(("assignedToId", assigned_to_id))

        data = self._read("/work-orders", "load work orders", params=params)
        return [self._parse(WorkOrder, item, "load work orders") for item in data or []]

    def ping(self) -> bool:
        """True si la API responde (cualquier status HTTP cuenta como vivo)."""
        try:
            self._request("GET", "/work-orders", "check the farm API", params={"limit": 1})
            return True
        except (BackendUnreachableError, BackendTimeoutError):
            return False

    # ==================== ESCRITURA ====================

    def update_status(self, work_order_id: str, status: WorkOrderStatus) -> WorkOrder:
        """
        Cambia el estado de una orden (PUT /work-orders/{id}).

        Un solo request, sin reintentos.

        Returns:
            WorkOrder: Representación actualizada según el servidor
            (si el PUT responde sin cuerpo, p.ej. 204, se relee la orden)

        Raises:
            WorkOrderNotFoundError, RemoteRejectedError,
            BackendUnreachableError, BackendTimeoutError
        """
        status = WorkOrderStatus(status)
        response = self._request(
            "PUT",
            f"/work-orders/{work_order_id}",
            "update the work order status",
            json={"status": status.value}
        )
        data = self._check(response, "update the work order status", work_order_id)
        self.logger.info(f"✅ Work order {work_order_id} status updated to {status.value}")

        if data is None:
            self.logger.debug(f"Empty PUT response for {work_order_id}, reloading work order")
            return self.get_work_order(work_order_id)
        return self._parse(WorkOrder, data, "update the work order status")

    def create_activity(self, work_order_id: str, request: CreateActivityRequest) -> Activity:
        """
        Registra una actividad en una orden (POST /work-orders/{id}/activities).

        Un solo request, sin reintentos.

        Raises:
            RemoteRejectedError: También si el backend acepta la actividad sin
                devolverla (no se puede confirmar qué se registró)
        """
        payload = request.model_dump(mode="json", by_alias=True, exclude_none=True)
        payload["workOrderId"] = work_order_id
        if not payload.get("inputsUsed"):
            payload.pop("inputsUsed", None)

        response = self._request(
            "POST",
            f"/work-orders/{work_order_id}/activities",
            "create the activity",
            json=payload
        )
        data = self._check(response, "create the activity", work_order_id)
        if data is None:
            raise RemoteRejectedError(
                "The farm API accepted the activity but did not return it. "
                "Reload the work order before trying again.",
                upstream_status=response.status_code
            )

        self.logger.info(f"✅ Activity created on work order {work_order_id}")
        return self._parse(Activity, data, "create the activity")

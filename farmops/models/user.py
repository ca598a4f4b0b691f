"""
Modelos Pydantic para el usuario que actúa sobre una orden.

La identidad viene del proveedor de sesión externo; aquí solo se modela
lo que el ciclo de vida necesita: id y rol.
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional

from farmops.models.enums import UserRole


class ActingUser(BaseModel):
    """
    Usuario que solicita una acción sobre una orden de trabajo.

    Se pasa explícitamente a cada operación del ciclo de vida en lugar de
    leerse de un contexto global.
    """
    id: str = Field(
        ...,
        description="ID del usuario en el backend",
        min_length=1,
        examples=["u-operario-7"]
    )
    role: UserRole = Field(
        ...,
        description="Rol del usuario",
        examples=[UserRole.OPERARIO, UserRole.CAPATAZ]
    )
    name: Optional[str] = Field(None, description="Nombre", examples=["Rosa"])
    last_name: Optional[str] = Field(None, description="Apellido", examples=["Quispe"])

    model_config = ConfigDict(
        frozen=True,  # Inmutable
        str_strip_whitespace=True,
    )

    @property
    def nombre_completo(self) -> str:
        """Nombre y apellido, o el id si el proveedor no envía nombre."""
        partes = [p for p in (self.name, self.last_name) if p]
        return " ".join(partes) if partes else self.id

    def tiene_rol(self, *roles: UserRole) -> bool:
        """
        Verifica si el usuario tiene alguno de los roles indicados.

        Examples:
            >>> ActingUser(id="1", role=UserRole.CAPATAZ).tiene_rol(UserRole.ADMIN, UserRole.CAPATAZ)
            True
        """
        return self.role in roles

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, condecimal, constr, model_validator, ConfigDict


class HabitacionBase(BaseModel):
    numero: constr(strip_whitespace=True, min_length=1, max_length=20) = Field(..., description="Número visible de la habitación")
    tipo: constr(strip_whitespace=True, min_length=1, max_length=50) = Field(..., description="Categoría (Casal, Suite, etc.)")
    precio_diaria: condecimal(ge=0, max_digits=10, decimal_places=2) = Field(0, description="Tarifa diaria")
    capacidad: int = Field(1, ge=1, description="Cantidad máxima de huéspedes")
    descripcion: Optional[str] = None
    activo: bool = True


class HabitacionCreate(HabitacionBase):
    pass


CAMPOS_NO_NULOS = ("numero", "tipo", "precio_diaria", "capacidad", "activo")


class HabitacionUpdate(BaseModel):
    numero: Optional[constr(strip_whitespace=True, min_length=1, max_length=20)] = None
    tipo: Optional[constr(strip_whitespace=True, min_length=1, max_length=50)] = None
    precio_diaria: Optional[condecimal(ge=0, max_digits=10, decimal_places=2)] = None
    capacidad: Optional[int] = Field(None, ge=1)
    descripcion: Optional[str] = None
    activo: Optional[bool] = None

    @model_validator(mode="before")
    def validar_datos(cls, data):
        if not isinstance(data, dict) or not data:
            raise ValueError("Se requiere al menos un campo para actualizar")

        # Sólo descripcion admite null; el resto son columnas NOT NULL
        nulos = sorted(campo for campo in CAMPOS_NO_NULOS if campo in data and data[campo] is None)
        if nulos:
            raise ValueError(f"Los campos {', '.join(nulos)} no pueden ser null")
        return data


class HabitacionRead(HabitacionBase):
    id: str
    creado_en: Optional[datetime] = None
    actualizado_en: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

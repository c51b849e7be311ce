"""
Endpoints de estadísticas de la pousada
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from database import conexion
from schemas.estadisticas import EstadisticasRead
from services.booking_service import EstadisticasService
from utils.logging_utils import log_event
from utils.timezone import get_hotel_today


router = APIRouter(prefix="/estadisticas", tags=["Estadísticas"])


@router.get("/resumen", response_model=EstadisticasRead)
def obtener_resumen(db: Session = Depends(conexion.get_db)):
    """
    Resumen para el dashboard: ocupación de hoy, solicitudes pendientes,
    ingresos y serie mensual de los últimos meses
    """
    try:
        resumen = EstadisticasService.calcular(db, get_hotel_today())
        log_event("estadisticas", "admin", "Resumen consultado", f"fecha={resumen['fecha']}")
        return resumen

    except SQLAlchemyError as e:
        log_event("estadisticas", "admin", "Error al obtener resumen", f"error={str(e)}", nivel=logging.ERROR)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al obtener estadísticas"
        )

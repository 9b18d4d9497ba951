"""
Utilidades para manejo de fechas y horas de la API de KPI-Drive.
"""
import re
from datetime import datetime, timezone


class DateTimeUtils:
    """Clase de utilidades para operaciones con fechas y horas."""
    
    # Formato aceptado para Event.time: YYYY-MM-DDTHH:MM:SS[.fraccion]Z
    # - la fraccion es opcional y tiene de 1 a 9 digitos
    # - la 'Z' final es literal (siempre UTC)
    EVENT_TIME_PATTERN = re.compile(
        r"([0-9]{4})-([0-9]{2})-([0-9]{2})T([0-9]{2}):([0-9]{2}):([0-9]{2})(?:\.([0-9]{1,9}))?Z"
    )
    
    @staticmethod
    def now_utc() -> datetime:
        """
        Obtiene la fecha y hora actual en UTC.
        
        Returns:
            datetime: Fecha y hora actual en UTC
        """
        return datetime.now(timezone.utc)
    
    @classmethod
    def parse_event_time(cls, raw: str) -> datetime:
        """
        Parsea el timestamp de un evento con el formato exacto de la API.
        
        Ejemplo: "2024-02-01T08:15:00.123456Z"
        
        Python solo guarda microsegundos: los digitos 7-9 de la fraccion
        se truncan.
        
        Args:
            raw: String recibido en el campo "time"
            
        Returns:
            datetime: Fecha y hora aware en UTC
            
        Raises:
            ValueError: Si el string no coincide exactamente con el formato
        """
        if not isinstance(raw, str):
            raise ValueError(f"Timestamp debe ser string, recibido {type(raw).__name__}")
        
        match = cls.EVENT_TIME_PATTERN.fullmatch(raw)
        if not match:
            raise ValueError(f"Timestamp con formato inválido: {raw!r}")
        
        year, month, day, hour, minute, second, fraction = match.groups()
        microsecond = int((fraction or "0")[:6].ljust(6, "0"))
        
        # datetime() valida rangos (mes 13, dia 32, etc.) con ValueError
        return datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second),
            microsecond,
            tzinfo=timezone.utc,
        )
    
    @staticmethod
    def to_fact_date(dt: datetime) -> str:
        """
        Formatea un datetime como fecha de calendario (sin hora) para fact_time.
        
        Args:
            dt: Objeto datetime
            
        Returns:
            str: Fecha en formato YYYY-MM-DD
        """
        return dt.date().isoformat()

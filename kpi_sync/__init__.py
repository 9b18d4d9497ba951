"""
Job de sincronizacion KPI-Drive: eventos -> hechos (facts).

Se ejecuta como job acotado (cron / task scheduler): autentica, consulta
eventos, los transforma en facts y los escribe uno por uno, deteniéndose
en el primer error.
"""

__version__ = "1.0.0"

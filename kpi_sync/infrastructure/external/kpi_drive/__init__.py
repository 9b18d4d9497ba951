"""
Cliente de la API de KPI-Drive.

- session_client: sesión autenticada por cookie (requests.Session)
- event_query: consulta filtrada/ordenada/limitada de eventos
- fact_writer: escritura de facts (form-urlencoded + bearer token)
"""

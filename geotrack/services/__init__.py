"""
HTTP-сервисы приложения.

- location_api: приём координат и выдача последних точек журнала
"""

"""
Location API: сервис приёма геолокации.

Обеспечивает:
- Валидацию входящих координат
- Запись в журнал последних 100 точек с сохранением в JSON-файл
- Выдачу последних N точек и последней точки
"""

"""
geotrack: приём и выдача геолокации устройств.

Клиент периодически отправляет координаты, сервис дописывает их в
ограниченный журнал (последние 100 точек) и отдаёт последние записи.
"""

__version__ = "1.0.0"

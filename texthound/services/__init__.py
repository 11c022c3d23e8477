"""Services implementing read, change detection, scheduling and publishing."""

from .change_detector import ChangeDetector
from .monitoring_service import FileMonitorService, MonitorLifecycle, MonitorStats
from .sensor_service import SensorManagementService, SensorValues, build_sensor_values
from .snapshot_reader import FileSnapshotReader
from .update_publisher import UpdatePublisher

__all__ = [
    "ChangeDetector",
    "FileMonitorService",
    "FileSnapshotReader",
    "MonitorLifecycle",
    "MonitorStats",
    "SensorManagementService",
    "SensorValues",
    "UpdatePublisher",
    "build_sensor_values",
]

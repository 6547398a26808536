"""Orchestration layer connecting page, data and views."""

from student_growth.orchestration.controller import FALLBACK_MESSAGE, Controller
from student_growth.orchestration.device_notice import DeviceNotice

__all__ = [
    "FALLBACK_MESSAGE",
    "Controller",
    "DeviceNotice",
]
